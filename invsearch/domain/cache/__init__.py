"""Result cache: shared in-flight results and the TTL/capacity bounded store."""

from invsearch.domain.cache.shared_result import SharedResult
from invsearch.domain.cache.store import (
    DEFAULT_MAX_ENTRIES,
    DEFAULT_TTL_MS,
    CacheEntry,
    Clock,
    QueryCache,
    monotonic_ms,
)

__all__ = [
    "CacheEntry",
    "Clock",
    "DEFAULT_MAX_ENTRIES",
    "DEFAULT_TTL_MS",
    "QueryCache",
    "SharedResult",
    "monotonic_ms",
]
