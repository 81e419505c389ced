"""Search view pipeline: triggers, debounce, supersession and view state."""

from invsearch.application.pipeline.events import (
    PageChanged,
    SearchTriggered,
    SortChanged,
    TriggerEvent,
)
from invsearch.application.pipeline.form import SearchForm
from invsearch.application.pipeline.pipeline import DEFAULT_DEBOUNCE_MS, SearchPipeline
from invsearch.application.pipeline.state import (
    NO_RESULTS_MESSAGE,
    SEARCH_FAILED_MESSAGE,
    DetailState,
    SearchViewState,
    total_pages,
)

__all__ = [
    "DEFAULT_DEBOUNCE_MS",
    "DetailState",
    "NO_RESULTS_MESSAGE",
    "PageChanged",
    "SEARCH_FAILED_MESSAGE",
    "SearchForm",
    "SearchPipeline",
    "SearchTriggered",
    "SearchViewState",
    "SortChanged",
    "TriggerEvent",
    "total_pages",
]
