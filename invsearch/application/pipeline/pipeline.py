"""SearchPipeline - turns UI triggers into an ordered stream of queries.

Three trigger kinds (search, sort change, page change) feed one event slot.
Each trigger applies its state effect immediately, then restarts the
debounce timer; when the timer fires, only the latest trigger is dispatched.
A dispatched trigger passes the form validity gate, becomes a new
generation and replaces whatever evaluation was still waiting. Results are
written to the view state only while their generation is current, so the
last accepted query wins even when responses arrive out of order.
"""

import asyncio
import logging
from collections.abc import Callable

from pydantic import ValidationError as PydanticValidationError

from invsearch.application.pipeline.events import (
    PageChanged,
    SearchTriggered,
    SortChanged,
    TriggerEvent,
)
from invsearch.application.pipeline.form import SearchForm
from invsearch.application.pipeline.state import (
    NO_RESULTS_MESSAGE,
    PEAK_FAILED_PREFIX,
    SEARCH_FAILED_MESSAGE,
    DetailState,
    SearchViewState,
)
from invsearch.application.search import InventorySearchService, PeakEnvelope, SearchEnvelope
from invsearch.domain.inventory.model import (
    DEFAULT_PAGE_SIZE,
    SearchQuery,
    SortableField,
    SortDirection,
    SortSpec,
)
from invsearch.domain.shared.error import InvSearchError
from invsearch.domain.shared.model.envelope import Failure, Success

logger = logging.getLogger(__name__)

DEFAULT_DEBOUNCE_MS = 50

StateListener = Callable[[SearchViewState], None]


class SearchPipeline:
    """Coordinates triggers, debouncing, supersession and view state for one search view.

    Example:
        async with SearchPipeline(service) as pipeline:
            pipeline.form.criteria = "abc"
            pipeline.search()
            await pipeline.wait_idle()
            print(pipeline.state.items)
    """

    def __init__(
        self,
        service: InventorySearchService,
        *,
        debounce_ms: float = DEFAULT_DEBOUNCE_MS,
        page_size: int = DEFAULT_PAGE_SIZE,
        form: SearchForm | None = None,
    ) -> None:
        if debounce_ms < 0:
            raise ValueError(f"debounce_ms must be >= 0, got {debounce_ms}")
        if page_size < 1:
            raise ValueError(f"page_size must be at least 1, got {page_size}")
        self._service = service
        self._debounce_seconds = debounce_ms / 1000
        self.form = form or SearchForm()
        self.state = SearchViewState(page_size=page_size)

        self._listeners: list[StateListener] = []
        self._pending: TriggerEvent | None = None
        self._debounce_task: asyncio.Task | None = None
        self._evaluation_task: asyncio.Task | None = None
        self._peak_tasks: set[asyncio.Task] = set()
        self._generation = 0
        self._detail_epoch = 0
        self._closed = False

    # -------------------------------------------------------------------------
    # Lifecycle
    # -------------------------------------------------------------------------

    async def __aenter__(self) -> "SearchPipeline":
        return self

    async def __aexit__(self, *exc_info: object) -> None:
        self.close()

    def start(self) -> None:
        """Fire the initial search (dropped by the gate while criteria is empty)."""
        self.search()

    def close(self) -> None:
        """Stop the pipeline; pending and in-flight evaluations are abandoned."""
        if self._closed:
            return
        self._closed = True
        for task in (self._debounce_task, self._evaluation_task, *self._peak_tasks):
            if task is not None and not task.done():
                task.cancel()
        self._peak_tasks.clear()
        self._listeners.clear()
        self._pending = None

    @property
    def closed(self) -> bool:
        return self._closed

    async def wait_idle(self) -> None:
        """Wait until no debounce is pending and no evaluation or peak fetch is running."""
        while True:
            pending = [
                task
                for task in (self._debounce_task, self._evaluation_task, *self._peak_tasks)
                if task is not None and not task.done()
            ]
            if not pending:
                return
            await asyncio.wait(pending)

    def subscribe(self, listener: StateListener) -> Callable[[], None]:
        """Call ``listener(state)`` after every state change. Returns an unsubscribe function."""
        self._listeners.append(listener)

        def unsubscribe() -> None:
            if listener in self._listeners:
                self._listeners.remove(listener)

        return unsubscribe

    # -------------------------------------------------------------------------
    # Triggers
    # -------------------------------------------------------------------------

    def search(self) -> None:
        self.submit(SearchTriggered())

    def sort_by(self, field: SortableField) -> None:
        """Sort by ``field``; choosing the active field again flips its direction."""
        current = self.state.current_sort
        if current is None:
            sort = SortSpec(field=field, direction=SortDirection.ASC)
        else:
            sort = current.toggled(field)
        self.submit(SortChanged(sort=sort))

    def go_to_page(self, page: int) -> None:
        self.submit(PageChanged(page=page))

    def submit(self, event: TriggerEvent) -> None:
        """Apply ``event``'s state effect and (re)start the debounce window."""
        if self._closed:
            raise RuntimeError("SearchPipeline is closed")

        self._apply_trigger(event)
        self._pending = event
        if self._debounce_task is not None and not self._debounce_task.done():
            self._debounce_task.cancel()
        self._debounce_task = asyncio.create_task(self._debounce(), name="search-debounce")

    def _apply_trigger(self, event: TriggerEvent) -> None:
        match event:
            case SearchTriggered():
                self.state.current_page = 0
                self._reset_detail()
            case SortChanged(sort=sort):
                self.state.current_sort = sort
                self.state.current_page = 0
                self._reset_detail()
            case PageChanged(page=page):
                if page < 0:
                    raise ValueError(f"page must be >= 0, got {page}")
                self.state.current_page = page
        self._notify()

    async def _debounce(self) -> None:
        await asyncio.sleep(self._debounce_seconds)
        event, self._pending = self._pending, None
        if event is not None:
            self._dispatch(event)

    # -------------------------------------------------------------------------
    # Evaluation
    # -------------------------------------------------------------------------

    def build_query(self) -> SearchQuery:
        """Query for the current form, page and sort."""
        return self.form.to_query(
            page=self.state.current_page,
            size=self.state.page_size,
            sort=self.state.current_sort,
        )

    def _dispatch(self, event: TriggerEvent) -> None:
        if not self.form.is_valid():
            logger.debug("Dropping %s: search form is invalid", type(event).__name__)
            return

        try:
            query = self.build_query()
        except PydanticValidationError as e:
            logger.warning("Dropping %s: query rejected: %s", type(event).__name__, e)
            return

        self._generation += 1
        generation = self._generation

        previous = self._evaluation_task
        if previous is not None and not previous.done():
            previous.cancel()

        self.state.loading = True
        self.state.error_message = None
        self.state.info_message = None
        self._notify()

        self._evaluation_task = asyncio.create_task(
            self._evaluate(generation, query), name=f"search-evaluation-{generation}"
        )

    async def _evaluate(self, generation: int, query: SearchQuery) -> None:
        outcome: SearchEnvelope
        try:
            outcome = await self._service.search(query)
        except InvSearchError as e:
            logger.warning("Search request failed: %s", e.message)
            outcome = Failure(message=e.message)
        except Exception:
            logger.exception("Unexpected error while searching")
            outcome = Failure(message="")

        if generation != self._generation:
            return

        self.state.loading = False
        match outcome:
            case Success(data=page):
                self.state.items = list(page.items)
                self.state.total = page.total
                self.state.error_message = None
                self.state.info_message = NO_RESULTS_MESSAGE if page.total == 0 else None
            case Failure(message=message):
                self.state.items = []
                self.state.total = 0
                self.state.error_message = message or SEARCH_FAILED_MESSAGE
                self.state.info_message = None
        self._notify()

    # -------------------------------------------------------------------------
    # Result detail panels
    # -------------------------------------------------------------------------

    def toggle_expand(self, part_number: str) -> None:
        detail = self.state.detail
        detail.expanded[part_number] = not detail.expanded.get(part_number, False)
        if not any(detail.expanded.values()):
            detail.expanded.clear()
        self._notify()

    def collapse_all(self) -> None:
        self.state.detail.expanded.clear()
        self._notify()

    def show_peak(self, part_number: str) -> asyncio.Task | None:
        """Expand the row and load its peak availability unless already loaded or loading.

        Returns the fetch task when one was started.
        """
        detail = self.state.detail
        detail.expanded[part_number] = True
        if detail.peak_by_part.get(part_number) or detail.peak_loading.get(part_number):
            self._notify()
            return None

        self._mark_peak_loading(part_number)
        task = asyncio.create_task(
            self._load_peak(part_number, self._detail_epoch), name=f"peak-{part_number}"
        )
        self._peak_tasks.add(task)
        task.add_done_callback(self._peak_tasks.discard)
        return task

    async def fetch_peak_availability(self, part_number: str) -> None:
        """Load (or reload) peak availability for ``part_number`` without expanding it."""
        self._mark_peak_loading(part_number)
        await self._load_peak(part_number, self._detail_epoch)

    def _mark_peak_loading(self, part_number: str) -> None:
        detail = self.state.detail
        detail.peak_loading[part_number] = True
        detail.error_message = None
        self._notify()

    async def _load_peak(self, part_number: str, epoch: int) -> None:
        detail = self.state.detail
        outcome: PeakEnvelope
        try:
            outcome = await self._service.peak_availability(part_number)
        except InvSearchError as e:
            outcome = Failure(message=e.message)
        except Exception:
            logger.exception("Unexpected error while loading peak availability")
            outcome = Failure(message="")

        if epoch != self._detail_epoch:
            return

        detail.peak_loading[part_number] = False
        match outcome:
            case Success(data=peak):
                detail.peak_by_part[part_number] = peak
            case Failure(message=message):
                detail.error_message = f"{PEAK_FAILED_PREFIX}: {message or 'Unknown error'}"
                detail.peak_by_part[part_number] = None
        self._notify()

    def _reset_detail(self) -> None:
        self._detail_epoch += 1
        self.state.detail = DetailState()

    def _notify(self) -> None:
        for listener in list(self._listeners):
            listener(self.state)
