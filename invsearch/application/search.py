"""InventorySearchService - resolves queries through the cache and the remote API."""

import logging
from collections.abc import Awaitable, Callable
from typing import Any

from invsearch.domain.cache import QueryCache, SharedResult
from invsearch.domain.inventory.model import PagedInventory, PeakAvailability, SearchQuery
from invsearch.domain.inventory.port.fetcher import InventoryFetcher
from invsearch.domain.inventory.service import CacheKey, cache_key, peak_key
from invsearch.domain.shared.model.envelope import Failure, Success, is_success

logger = logging.getLogger(__name__)

SearchEnvelope = Success[PagedInventory] | Failure
PeakEnvelope = Success[PeakAvailability] | Failure


class InventorySearchService:
    """Owns the query caches and issues at most one fetch per distinct live query.

    A lookup first consults the cache, then the table of fetches still in
    flight, and only then calls the fetcher. Fresh fetches are handed to the
    cache, which keeps them only if they come back as ``Success``.

    The service is the single owner of its caches; ``close()`` discards them.
    """

    def __init__(
        self,
        fetcher: InventoryFetcher,
        search_cache: QueryCache[SearchEnvelope],
        peak_cache: QueryCache[PeakEnvelope],
    ) -> None:
        self._fetcher = fetcher
        self._search_cache = search_cache
        self._peak_cache = peak_cache
        self._in_flight: dict[tuple[str, CacheKey], SharedResult] = {}
        self._closed = False

    @property
    def search_cache(self) -> QueryCache[SearchEnvelope]:
        return self._search_cache

    @property
    def peak_cache(self) -> QueryCache[PeakEnvelope]:
        return self._peak_cache

    def search(self, query: SearchQuery) -> SharedResult[SearchEnvelope]:
        """Shared result for ``query``; await it for the envelope.

        Awaiting may raise ``ExternalServiceError`` on transport failure.
        """
        key = cache_key(query)
        return self._resolve(
            "search", key, self._search_cache, lambda: self._fetcher.search(query)
        )

    def peak_availability(self, part_number: str) -> SharedResult[PeakEnvelope]:
        """Shared result for the per-branch stock of ``part_number``."""
        key = peak_key(part_number)
        return self._resolve(
            "peak",
            key,
            self._peak_cache,
            lambda: self._fetcher.peak_availability(part_number),
        )

    def close(self) -> None:
        """Tear down: abort in-flight fetches and forget every cached result."""
        self._closed = True
        for shared in list(self._in_flight.values()):
            shared.cancel()
        self._in_flight.clear()
        self._search_cache.clear()
        self._peak_cache.clear()

    def _resolve(
        self,
        kind: str,
        key: CacheKey,
        cache: QueryCache,
        fetch: Callable[[], Awaitable[Any]],
    ) -> SharedResult:
        if self._closed:
            raise RuntimeError("InventorySearchService is closed")

        cached = cache.lookup(key)
        if cached is not None:
            return cached

        slot = (kind, key)
        pending = self._in_flight.get(slot)
        if pending is not None:
            logger.debug("Joining in-flight %s fetch: %s", kind, key)
            return pending

        logger.info("Fetching %s: %s", kind, key)
        shared = SharedResult.start(fetch())
        self._in_flight[slot] = shared
        # Registered before the in-flight release so the key is never uncovered.
        cache.store(key, shared, is_success)
        shared.add_done_callback(lambda done: self._release(slot, done))
        return shared

    def _release(self, slot: tuple[str, CacheKey], shared: SharedResult) -> None:
        if self._in_flight.get(slot) is shared:
            del self._in_flight[slot]
