"""Unit tests for the TTL + capacity bounded QueryCache."""

import asyncio

import pytest

from invsearch.domain.cache import QueryCache, SharedResult
from invsearch.domain.inventory.model import PagedInventory
from invsearch.domain.inventory.service import CacheKey
from invsearch.domain.shared.error import ExternalServiceError
from invsearch.domain.shared.model.envelope import Failure, Success, is_success

TTL = 60_000


def _ok(total: int = 1) -> Success[PagedInventory]:
    return Success[PagedInventory](data=PagedInventory(total=total))


def _key(name: str) -> CacheKey:
    return CacheKey(name)


@pytest.fixture
def cache(clock) -> QueryCache:
    return QueryCache(ttl_ms=TTL, max_entries=5, clock=clock)


class TestLookup:
    @pytest.mark.asyncio
    async def test_miss_on_empty_cache(self, cache):
        assert cache.lookup(_key("k")) is None

    @pytest.mark.asyncio
    async def test_hit_returns_the_same_shared_result(self, cache):
        shared = SharedResult.resolved(_ok())
        cache.store(_key("k"), shared, is_success)

        assert cache.lookup(_key("k")) is shared


class TestTtlExpiry:
    @pytest.mark.asyncio
    async def test_live_until_just_before_ttl(self, cache, clock):
        clock.now = 1_000
        cache.store(_key("k"), SharedResult.resolved(_ok()), is_success)

        clock.now = 1_000
        assert cache.lookup(_key("k")) is not None
        clock.now = 1_000 + TTL - 1
        assert cache.lookup(_key("k")) is not None

    @pytest.mark.asyncio
    async def test_miss_at_and_after_ttl(self, cache, clock):
        clock.now = 1_000
        cache.store(_key("k"), SharedResult.resolved(_ok()), is_success)

        clock.now = 1_000 + TTL
        assert cache.lookup(_key("k")) is None
        assert len(cache) == 0

    @pytest.mark.asyncio
    async def test_expiry_counts_from_resolution(self, cache, clock):
        release = asyncio.Event()

        async def fetch():
            await release.wait()
            return _ok()

        shared = SharedResult.start(fetch())
        cache.store(_key("k"), shared, is_success)

        clock.now = 5_000
        release.set()
        await shared
        await asyncio.sleep(0)

        clock.now = 5_000 + TTL - 1
        assert cache.lookup(_key("k")) is shared

    @pytest.mark.asyncio
    async def test_insert_sweeps_expired_entries(self, cache, clock):
        cache.store(_key("old"), SharedResult.resolved(_ok()), is_success)
        clock.advance(TTL)
        cache.store(_key("new"), SharedResult.resolved(_ok()), is_success)

        assert cache.keys() == [_key("new")]


class TestCapacityEviction:
    @pytest.mark.asyncio
    async def test_sixth_insert_evicts_first_inserted(self, cache, clock):
        for i in range(6):
            clock.now = i * 100
            cache.store(_key(f"k{i}"), SharedResult.resolved(_ok()), is_success)

        assert len(cache) == 5
        assert _key("k0") not in cache
        assert set(cache.keys()) == {_key(f"k{i}") for i in range(1, 6)}

    @pytest.mark.asyncio
    async def test_end_to_end_eviction_then_expiry(self, cache, clock):
        clock.now = 0
        for i in range(1, 6):
            cache.store(_key(f"k{i}"), SharedResult.resolved(_ok()), is_success)

        clock.now = 1
        cache.store(_key("k6"), SharedResult.resolved(_ok()), is_success)
        assert set(cache.keys()) == {_key(f"k{i}") for i in range(2, 7)}

        clock.now = 60_001
        assert cache.lookup(_key("k6")) is None

    @pytest.mark.asyncio
    async def test_restoring_existing_key_replaces_without_evicting_others(self, cache, clock):
        for i in range(5):
            cache.store(_key(f"k{i}"), SharedResult.resolved(_ok()), is_success)

        fresh = SharedResult.resolved(_ok(total=9))
        clock.advance(10)
        cache.store(_key("k2"), fresh, is_success)

        assert len(cache) == 5
        assert cache.lookup(_key("k2")) is fresh

    @pytest.mark.asyncio
    async def test_max_entries_of_one(self, clock):
        cache = QueryCache(ttl_ms=TTL, max_entries=1, clock=clock)
        cache.store(_key("a"), SharedResult.resolved(_ok()), is_success)
        cache.store(_key("b"), SharedResult.resolved(_ok()), is_success)

        assert cache.keys() == [_key("b")]


class TestFailuresNeverCached:
    @pytest.mark.asyncio
    async def test_failure_envelope_is_not_stored(self, cache):
        cache.store(_key("k"), SharedResult.resolved(Failure(message="boom")), is_success)

        assert cache.lookup(_key("k")) is None
        assert len(cache) == 0

    @pytest.mark.asyncio
    async def test_transport_error_is_not_stored(self, cache):
        shared = SharedResult.failed(ExternalServiceError("down"))
        cache.store(_key("k"), shared, is_success)

        assert cache.lookup(_key("k")) is None

    @pytest.mark.asyncio
    async def test_pending_failure_is_not_stored_after_resolution(self, cache):
        async def fetch():
            await asyncio.sleep(0)
            return Failure(message="later")

        shared = SharedResult.start(fetch())
        cache.store(_key("k"), shared, is_success)
        await shared
        await asyncio.sleep(0)

        assert cache.lookup(_key("k")) is None

    @pytest.mark.asyncio
    async def test_pending_result_not_visible_before_resolution(self, cache):
        release = asyncio.Event()

        async def fetch():
            await release.wait()
            return _ok()

        shared = SharedResult.start(fetch())
        cache.store(_key("k"), shared, is_success)
        assert cache.lookup(_key("k")) is None

        release.set()
        await shared
        await asyncio.sleep(0)
        assert cache.lookup(_key("k")) is shared

    @pytest.mark.asyncio
    async def test_failure_does_not_evict_live_entries(self, cache):
        for i in range(5):
            cache.store(_key(f"k{i}"), SharedResult.resolved(_ok()), is_success)

        cache.store(_key("bad"), SharedResult.resolved(Failure(message="x")), is_success)

        assert len(cache) == 5
        assert _key("k0") in cache

    @pytest.mark.asyncio
    async def test_raising_predicate_does_not_propagate(self, cache):
        def broken(_):
            raise RuntimeError("predicate bug")

        cache.store(_key("k"), SharedResult.resolved(_ok()), broken)

        assert cache.lookup(_key("k")) is None


class TestTeardownAndConfig:
    @pytest.mark.asyncio
    async def test_clear_discards_everything(self, cache):
        cache.store(_key("a"), SharedResult.resolved(_ok()), is_success)
        cache.clear()

        assert len(cache) == 0
        assert cache.lookup(_key("a")) is None

    @pytest.mark.parametrize("kwargs", [{"ttl_ms": 0}, {"max_entries": 0}])
    def test_rejects_nonsense_bounds(self, kwargs):
        with pytest.raises(ValueError):
            QueryCache(**kwargs)
