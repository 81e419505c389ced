"""Trigger events fed into the search pipeline."""

from dataclasses import dataclass

from invsearch.domain.inventory.model import SortSpec


@dataclass(frozen=True)
class SearchTriggered:
    """User pressed search / hit enter in the criteria box."""


@dataclass(frozen=True)
class SortChanged:
    sort: SortSpec


@dataclass(frozen=True)
class PageChanged:
    page: int


TriggerEvent = SearchTriggered | SortChanged | PageChanged
