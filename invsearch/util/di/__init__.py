"""Dishka scopes shared by the providers."""
