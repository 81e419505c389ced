"""View state published by the search pipeline."""

import math
from dataclasses import dataclass, field

from invsearch.domain.inventory.model import (
    DEFAULT_PAGE_SIZE,
    InventoryItem,
    PeakAvailability,
    SortSpec,
)

NO_RESULTS_MESSAGE = "No results found."
SEARCH_FAILED_MESSAGE = "Search failed. Please try again."
PEAK_FAILED_PREFIX = "Failed to load peak availability"


def total_pages(total: int, size: int) -> int:
    """Page count for the pager; never less than one."""
    return max(1, math.ceil((total or 0) / (size or 1)))


@dataclass
class DetailState:
    """Expanded rows and their inline peak-availability panels."""

    expanded: dict[str, bool] = field(default_factory=dict)
    peak_by_part: dict[str, PeakAvailability | None] = field(default_factory=dict)
    peak_loading: dict[str, bool] = field(default_factory=dict)
    error_message: str | None = None

    def is_expanded(self, part_number: str) -> bool:
        return self.expanded.get(part_number, False)


@dataclass
class SearchViewState:
    items: list[InventoryItem] = field(default_factory=list)
    total: int = 0
    loading: bool = False
    error_message: str | None = None
    info_message: str | None = None
    current_page: int = 0
    current_sort: SortSpec | None = None
    page_size: int = DEFAULT_PAGE_SIZE
    detail: DetailState = field(default_factory=DetailState)

    @property
    def total_pages(self) -> int:
        return total_pages(self.total, self.page_size)
