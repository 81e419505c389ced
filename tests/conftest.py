"""Global test fixtures."""

import asyncio

import pytest

from invsearch.domain.inventory.model import (
    BranchAvailability,
    InventoryItem,
    PagedInventory,
    PeakAvailability,
    SearchQuery,
)
from invsearch.domain.shared.model.envelope import Failure, Success


class FakeClock:
    """Millisecond clock advanced by hand."""

    def __init__(self, now: float = 0.0) -> None:
        self.now = now

    def __call__(self) -> float:
        return self.now

    def advance(self, ms: float) -> None:
        self.now += ms


def make_item(part_number: str, branch: str = "NYC", qty: int = 5) -> InventoryItem:
    return InventoryItem(
        part_number=part_number,
        supplier_sku=f"SKU-{part_number}",
        description=f"Item {part_number}",
        branch=branch,
        available_qty=qty,
        uom="EA",
        lead_time_days=3,
    )


class FakeFetcher:
    """In-memory InventoryFetcher.

    By default every search succeeds with one item whose part number is the
    query criteria. ``hold(criteria)`` makes matching searches wait until the
    returned event is set; ``search_outcomes`` / ``peak_outcomes`` override
    the result (an envelope, or an exception to raise).
    """

    def __init__(self) -> None:
        self.search_calls: list[SearchQuery] = []
        self.peak_calls: list[str] = []
        self.search_outcomes: dict[str, Success[PagedInventory] | Failure | Exception] = {}
        self.peak_outcomes: dict[str, Success[PeakAvailability] | Failure | Exception] = {}
        self._gates: dict[str, asyncio.Event] = {}

    def hold(self, criteria: str) -> asyncio.Event:
        gate = asyncio.Event()
        self._gates[criteria] = gate
        return gate

    async def search(self, query: SearchQuery) -> Success[PagedInventory] | Failure:
        self.search_calls.append(query)
        gate = self._gates.get(query.criteria)
        if gate is not None:
            await gate.wait()
        outcome = self.search_outcomes.get(query.criteria)
        if isinstance(outcome, Exception):
            raise outcome
        if outcome is not None:
            return outcome
        return Success[PagedInventory](
            data=PagedInventory(total=1, items=[make_item(query.criteria)])
        )

    async def peak_availability(self, part_number: str) -> Success[PeakAvailability] | Failure:
        self.peak_calls.append(part_number)
        gate = self._gates.get(part_number)
        if gate is not None:
            await gate.wait()
        outcome = self.peak_outcomes.get(part_number)
        if isinstance(outcome, Exception):
            raise outcome
        if outcome is not None:
            return outcome
        return Success[PeakAvailability](
            data=PeakAvailability(
                part_number=part_number,
                total_available=7,
                branches=[
                    BranchAvailability(branch="NYC", qty=5),
                    BranchAvailability(branch="LA", qty=2),
                ],
            )
        )


@pytest.fixture
def clock() -> FakeClock:
    return FakeClock()


@pytest.fixture
def fetcher() -> FakeFetcher:
    return FakeFetcher()
