from invsearch.domain.inventory.model.item import (
    BranchAvailability,
    InventoryItem,
    PagedInventory,
    PeakAvailability,
)
from invsearch.domain.inventory.model.query import (
    DEFAULT_PAGE_SIZE,
    SearchBy,
    SearchQuery,
    SortableField,
    SortDirection,
    SortSpec,
)

__all__ = [
    "BranchAvailability",
    "DEFAULT_PAGE_SIZE",
    "InventoryItem",
    "PagedInventory",
    "PeakAvailability",
    "SearchBy",
    "SearchQuery",
    "SortDirection",
    "SortSpec",
    "SortableField",
]
