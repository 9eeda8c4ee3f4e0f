"""Tests for the stale-tolerant cache."""

from unittest.mock import AsyncMock

import pytest

from tokenlens.core.exceptions import UpstreamTimeoutError
from tokenlens.services.cache import StaleTolerantCache, make_cache_key


class FakeClock:
    def __init__(self, start: float = 0.0) -> None:
        self.now = start

    def __call__(self) -> float:
        return self.now


@pytest.fixture
def clock() -> FakeClock:
    return FakeClock()


@pytest.fixture
def cache(clock: FakeClock) -> StaleTolerantCache:
    return StaleTolerantCache(clock=clock)


class TestGetOrCompute:
    """Tests for get_or_compute freshness and stale fallback."""

    @pytest.mark.asyncio
    async def test_miss_computes_and_stores(self, cache: StaleTolerantCache) -> None:
        """
        Given: An empty cache
        When: get_or_compute is called
        Then: compute runs and its value is stored
        """
        compute = AsyncMock(return_value=["a"])

        value = await cache.get_or_compute("holders:x", 60, compute)

        assert value == ["a"]
        compute.assert_awaited_once()
        entry = cache.peek("holders:x")
        assert entry is not None
        assert entry.value == ["a"]

    @pytest.mark.asyncio
    async def test_fresh_hit_skips_compute(
        self, cache: StaleTolerantCache, clock: FakeClock
    ) -> None:
        """
        Given: A value stored 59 seconds ago with a 60 second TTL
        When: get_or_compute is called again
        Then: The cached value is returned without calling compute
        """
        await cache.get_or_compute("k", 60, AsyncMock(return_value="first"))
        clock.now += 59
        compute = AsyncMock(return_value="second")

        value = await cache.get_or_compute("k", 60, compute)

        assert value == "first"
        compute.assert_not_awaited()

    @pytest.mark.asyncio
    async def test_expired_entry_is_recomputed(
        self, cache: StaleTolerantCache, clock: FakeClock
    ) -> None:
        """An entry exactly ttl seconds old is no longer fresh."""
        await cache.get_or_compute("k", 60, AsyncMock(return_value="first"))
        clock.now += 60

        value = await cache.get_or_compute("k", 60, AsyncMock(return_value="second"))

        assert value == "second"
        assert cache.peek("k").value == "second"

    @pytest.mark.asyncio
    async def test_failure_serves_stale_value(
        self, cache: StaleTolerantCache, clock: FakeClock
    ) -> None:
        """
        Given: An expired entry
        When: The refresh fails
        Then: The stale value is returned and the failure recorded on the entry
        """
        await cache.get_or_compute("k", 10, AsyncMock(return_value="old"))
        clock.now += 3600
        error = UpstreamTimeoutError(service="ave", message="timed out", status_code=504)

        value = await cache.get_or_compute("k", 10, AsyncMock(side_effect=error))

        assert value == "old"
        entry = cache.peek("k")
        assert entry.error is error
        assert entry.stored_at == 0.0
        assert cache.get_stats()["stale_hits"] == 1

    @pytest.mark.asyncio
    async def test_failure_without_entry_propagates(self, cache: StaleTolerantCache) -> None:
        """With nothing cached, the compute error reaches the caller."""
        compute = AsyncMock(side_effect=RuntimeError("upstream down"))

        with pytest.raises(RuntimeError, match="upstream down"):
            await cache.get_or_compute("k", 10, compute)

        assert cache.peek("k") is None

    @pytest.mark.asyncio
    async def test_success_after_stale_overwrites_entry(
        self, cache: StaleTolerantCache, clock: FakeClock
    ) -> None:
        await cache.get_or_compute("k", 10, AsyncMock(return_value="old"))
        clock.now += 20
        await cache.get_or_compute("k", 10, AsyncMock(side_effect=RuntimeError("down")))
        clock.now += 1

        value = await cache.get_or_compute("k", 10, AsyncMock(return_value="new"))

        assert value == "new"
        entry = cache.peek("k")
        assert entry.error is None
        assert entry.stored_at == 21.0


class TestCacheStats:
    """Tests for get_stats."""

    @pytest.mark.asyncio
    async def test_stats_count_hits_and_misses(self, cache: StaleTolerantCache) -> None:
        compute = AsyncMock(return_value=1)

        await cache.get_or_compute("a", 60, compute)
        await cache.get_or_compute("a", 60, compute)
        await cache.get_or_compute("a", 60, compute)
        await cache.get_or_compute("b", 60, compute)

        stats = cache.get_stats()
        assert stats["size"] == 2
        assert stats["hits"] == 2
        assert stats["misses"] == 2
        assert stats["stale_hits"] == 0
        assert stats["hit_rate"] == 0.5

    def test_empty_stats(self, cache: StaleTolerantCache) -> None:
        assert cache.get_stats() == {
            "size": 0,
            "hits": 0,
            "misses": 0,
            "stale_hits": 0,
            "hit_rate": 0.0,
        }


class TestMakeCacheKey:
    """Tests for cache key derivation."""

    def test_params_are_sorted_and_normalized(self) -> None:
        key = make_cache_key("holders", {"chain": "BSC", "address": "0xAbC"})
        assert key == "holders:address=0xabc&chain=bsc"

    def test_none_values_are_dropped(self) -> None:
        key = make_cache_key(
            "transactions", {"address": "0xabc", "chain": "bsc", "limit": 20, "to_time": None}
        )
        assert key == "transactions:address=0xabc&chain=bsc&limit=20"

    def test_equivalent_requests_share_a_key(self) -> None:
        first = make_cache_key("kline", {"address": "0xABC", "chain": "bsc", "interval": "1h"})
        second = make_cache_key("kline", {"interval": "1h", "chain": "BSC", "address": "0xabc"})
        assert first == second

    def test_categories_do_not_collide(self) -> None:
        params = {"address": "0xabc", "chain": "bsc"}
        assert make_cache_key("holders", params) != make_cache_key("risk", params)
