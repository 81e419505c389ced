"""Port for the remote inventory API."""

from abc import abstractmethod
from typing import Protocol

from invsearch.domain.inventory.model import PagedInventory, PeakAvailability, SearchQuery
from invsearch.domain.shared.model.envelope import Failure, Success
from invsearch.domain.shared.port import Port


class InventoryFetcher(Port, Protocol):
    """Issues one remote call per invocation.

    Domain failures come back as ``Failure`` envelopes. Transport problems
    (connection, timeout, unreadable response) raise ``ExternalServiceError``.
    """

    @abstractmethod
    async def search(self, query: SearchQuery) -> Success[PagedInventory] | Failure: ...

    @abstractmethod
    async def peak_availability(self, part_number: str) -> Success[PeakAvailability] | Failure: ...
