"""Inventory search client: query cache and debounced query pipeline."""

__version__ = "0.1.0"
