"""
Tests for the TTL response cache.
"""
import asyncio

import pytest
from unittest.mock import AsyncMock

from n8n_catalog.cache.ttl_cache import CacheEntry, TimeBoundCache


@pytest.fixture
def cache(clock):
    return TimeBoundCache(ttl=10, max_size=3, name="test", clock=clock)


class TestCacheEntry:
    """Test the CacheEntry dataclass."""

    def test_expired_at_expiry(self):
        entry = CacheEntry(data="value", expiry=100.0)
        assert entry.is_expired(99.9) is False
        assert entry.is_expired(100.0) is True


class TestTimeBoundCache:
    """Test get/set/expiry/eviction behaviour."""

    def test_invalid_configuration(self):
        with pytest.raises(ValueError):
            TimeBoundCache(ttl=0)
        with pytest.raises(ValueError):
            TimeBoundCache(max_size=0)

    def test_set_and_get(self, cache):
        cache.set("key1", "value1")
        assert cache.get("key1") == "value1"

    def test_missing_key(self, cache):
        assert cache.get("nonexistent") is None

    def test_overwrite(self, cache):
        cache.set("key1", "value1")
        cache.set("key1", "value2")
        assert cache.get("key1") == "value2"
        assert cache.stats()["size"] == 1

    def test_expires_after_ttl(self, cache, clock):
        cache.set("key1", "value1")
        clock.advance(9)
        assert cache.get("key1") == "value1"

        clock.advance(1)
        assert cache.get("key1") is None
        assert cache.has("key1") is False
        # expired entries are removed on read
        assert cache.stats()["size"] == 0

    def test_custom_ttl_per_entry(self, cache, clock):
        cache.set("short", "value1", ttl=5)
        cache.set("long", "value2", ttl=20)
        clock.advance(6)

        assert cache.get("short") is None
        assert cache.get("long") == "value2"

    def test_non_positive_ttl_uses_default(self, cache, clock):
        cache.set("key1", "value1", ttl=0)
        clock.advance(5)
        assert cache.get("key1") == "value1"

    def test_evicts_first_inserted(self, cache):
        for i in range(1, 5):
            cache.set(f"key{i}", f"value{i}")

        assert cache.get("key1") is None
        assert cache.get("key2") == "value2"
        assert cache.get("key3") == "value3"
        assert cache.get("key4") == "value4"

    def test_eviction_ignores_reads(self, cache):
        cache.set("key1", "value1")
        cache.set("key2", "value2")
        cache.set("key3", "value3")
        # reading key1 does not protect it
        assert cache.get("key1") == "value1"

        cache.set("key4", "value4")
        assert cache.get("key1") is None
        assert cache.get("key2") == "value2"

    def test_overwrite_at_capacity_evicts_oldest(self, cache):
        cache.set("key1", "value1")
        cache.set("key2", "value2")
        cache.set("key3", "value3")

        cache.set("key3", "updated")

        assert cache.get("key1") is None
        assert cache.get("key2") == "value2"
        assert cache.get("key3") == "updated"
        assert cache.stats()["size"] == 2

    def test_overwrite_of_oldest_at_capacity_moves_it_to_the_end(self, cache):
        cache.set("key1", "value1")
        cache.set("key2", "value2")
        cache.set("key3", "value3")

        cache.set("key1", "updated")

        assert cache.stats()["size"] == 3
        assert cache.get("key1") == "updated"

        # key1 was re-inserted last, so key2 is now the oldest
        cache.set("key4", "value4")
        assert cache.get("key2") is None
        assert cache.get("key1") == "updated"
        assert cache.get("key3") == "value3"

    def test_has(self, cache):
        cache.set("key1", "value1")
        assert cache.has("key1") is True
        assert "key1" in cache
        assert cache.has("nonexistent") is False

    def test_delete(self, cache):
        cache.set("key1", "value1")
        assert cache.delete("key1") is True
        assert cache.get("key1") is None
        assert cache.delete("key1") is False

    def test_clear(self, cache):
        cache.set("key1", "value1")
        cache.set("key2", "value2")
        cache.clear()

        assert cache.get("key1") is None
        assert cache.stats()["size"] == 0

    def test_stats(self, cache):
        cache.set("key1", "value1")
        cache.set("key2", "value2")

        assert cache.stats() == {"size": 2, "max_size": 3, "ttl": 10}

    def test_cleanup_removes_only_expired(self, cache, clock):
        cache.set("key1", "value1", ttl=5)
        cache.set("key2", "value2", ttl=5)
        cache.set("key3", "value3", ttl=50)
        clock.advance(5)

        assert cache.cleanup() == 2
        assert len(cache) == 1
        assert cache.get("key3") == "value3"
        assert cache.cleanup() == 0


class TestGetOrSet:
    """Test the read-through helper."""

    @pytest.mark.asyncio
    async def test_fetches_on_miss_and_caches(self, cache):
        fetcher = AsyncMock(return_value="fetched")

        assert await cache.get_or_set("key1", fetcher) == "fetched"
        assert await cache.get_or_set("key1", fetcher) == "fetched"
        fetcher.assert_awaited_once()

    @pytest.mark.asyncio
    async def test_returns_cached_without_fetching(self, cache):
        cache.set("key1", "cached")
        fetcher = AsyncMock(return_value="fetched")

        assert await cache.get_or_set("key1", fetcher) == "cached"
        fetcher.assert_not_called()

    @pytest.mark.asyncio
    async def test_refetches_after_expiry(self, cache, clock):
        fetcher = AsyncMock(side_effect=["first", "second"])

        assert await cache.get_or_set("key1", fetcher, ttl=1) == "first"
        clock.advance(1)
        assert await cache.get_or_set("key1", fetcher) == "second"
        assert fetcher.await_count == 2

    @pytest.mark.asyncio
    async def test_accepts_sync_fetcher(self, cache):
        assert await cache.get_or_set("key1", lambda: "value") == "value"
        assert cache.get("key1") == "value"

    @pytest.mark.asyncio
    async def test_fetcher_error_propagates(self, cache):
        fetcher = AsyncMock(side_effect=RuntimeError("boom"))

        with pytest.raises(RuntimeError, match="boom"):
            await cache.get_or_set("key1", fetcher)
        assert cache.has("key1") is False

    @pytest.mark.asyncio
    async def test_concurrent_misses_both_fetch(self, cache):
        calls = []
        release = asyncio.Event()

        async def fetcher():
            calls.append(len(calls))
            await release.wait()
            return f"value{len(calls)}"

        first = asyncio.create_task(cache.get_or_set("key1", fetcher))
        second = asyncio.create_task(cache.get_or_set("key1", fetcher))
        await asyncio.sleep(0)
        release.set()
        await asyncio.gather(first, second)

        assert len(calls) == 2
        assert cache.get("key1") == "value2"
