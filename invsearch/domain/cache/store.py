"""TTL + capacity bounded memoization of query results."""

import logging
import time
from collections.abc import Callable
from dataclasses import dataclass
from typing import Generic, TypeVar

from invsearch.domain.cache.shared_result import SharedResult
from invsearch.domain.inventory.service.cache_key import CacheKey

logger = logging.getLogger(__name__)

T = TypeVar("T")

DEFAULT_TTL_MS = 60_000
DEFAULT_MAX_ENTRIES = 5

Clock = Callable[[], float]


def monotonic_ms() -> float:
    return time.monotonic() * 1000


@dataclass(frozen=True)
class CacheEntry(Generic[T]):
    key: CacheKey
    expires_at: float
    result: SharedResult[T]


class QueryCache(Generic[T]):
    """Keyed table of shared results with per-entry expiry and a size cap.

    Only outcomes that resolve successfully and pass the caller's
    ``should_cache`` predicate become entries. Removal happens through the
    lazy expiry sweep (run on every lookup and insert), capacity eviction of
    the entry expiring first, or ``clear()``.

    Not thread-safe: all calls must come from one event loop.
    """

    def __init__(
        self,
        ttl_ms: float = DEFAULT_TTL_MS,
        max_entries: int = DEFAULT_MAX_ENTRIES,
        clock: Clock = monotonic_ms,
        name: str = "cache",
    ) -> None:
        if ttl_ms <= 0:
            raise ValueError(f"ttl_ms must be positive, got {ttl_ms}")
        if max_entries < 1:
            raise ValueError(f"max_entries must be at least 1, got {max_entries}")
        self.ttl_ms = ttl_ms
        self.max_entries = max_entries
        self.name = name
        self._clock = clock
        self._entries: dict[CacheKey, CacheEntry[T]] = {}

    def __len__(self) -> int:
        return len(self._entries)

    def __contains__(self, key: object) -> bool:
        return key in self._entries

    def keys(self) -> list[CacheKey]:
        return list(self._entries)

    def lookup(self, key: CacheKey) -> SharedResult[T] | None:
        """Return the live shared result for ``key``, or None on a miss."""
        self._sweep(self._clock())
        entry = self._entries.get(key)
        if entry is None:
            logger.debug("%s miss: %s", self.name, key)
            return None
        logger.debug("%s hit: %s", self.name, key)
        return entry.result

    def store(
        self,
        key: CacheKey,
        result: SharedResult[T],
        should_cache: Callable[[T], bool],
    ) -> None:
        """Remember ``result`` under ``key`` once it resolves, if it qualifies.

        The decision waits for the outcome. Raised outcomes are never
        cached; values are cached only if ``should_cache(value)`` is true.
        """
        if result.done():
            self._settle(key, result, should_cache)
        else:
            result.add_done_callback(lambda done: self._settle(key, done, should_cache))

    def clear(self) -> None:
        """Drop every entry (owner teardown)."""
        self._entries.clear()

    def _settle(
        self,
        key: CacheKey,
        result: SharedResult[T],
        should_cache: Callable[[T], bool],
    ) -> None:
        error = result.exception()
        if error is not None:
            logger.debug("%s not storing %s: fetch raised %s", self.name, key, type(error).__name__)
            return
        try:
            eligible = should_cache(result.result())
        except Exception:
            logger.exception("%s cache predicate failed for %s", self.name, key)
            return
        if not eligible:
            logger.debug("%s not storing %s: outcome refused", self.name, key)
            return
        self._insert(key, result)

    def _insert(self, key: CacheKey, result: SharedResult[T]) -> None:
        now = self._clock()
        self._sweep(now)
        self._entries.pop(key, None)
        if len(self._entries) >= self.max_entries:
            oldest = min(self._entries.values(), key=lambda e: e.expires_at)
            del self._entries[oldest.key]
            logger.debug("%s evicted %s", self.name, oldest.key)
        self._entries[key] = CacheEntry(key=key, expires_at=now + self.ttl_ms, result=result)

    def _sweep(self, now: float) -> None:
        expired = [key for key, entry in self._entries.items() if entry.expires_at <= now]
        for key in expired:
            del self._entries[key]
        if expired:
            logger.debug("%s expired %d entries", self.name, len(expired))
