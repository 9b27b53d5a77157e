"""Tests for the latest-status cache."""

import uuid

import pytest

from sensorhub.services.errors import NotFoundError
from sensorhub.services.status_cache import StatusCache


class CountingLoader:
    """Async loader returning queued values and counting calls."""

    def __init__(self, *values):
        self.values = list(values)
        self.calls = 0

    async def __call__(self):
        self.calls += 1
        value = self.values.pop(0)
        if isinstance(value, Exception):
            raise value
        return value


class TestStatusCache:
    """Cache-aside behaviour with a fake clock."""

    @pytest.mark.asyncio
    async def test_miss_invokes_loader_and_stores(self, status_cache: StatusCache):
        device_id = uuid.uuid4()
        loader = CountingLoader("first")

        assert await status_cache.get(device_id, loader) == "first"
        assert loader.calls == 1
        assert len(status_cache) == 1

    @pytest.mark.asyncio
    async def test_hit_within_ttl_skips_loader(self, status_cache: StatusCache, clock):
        device_id = uuid.uuid4()
        loader = CountingLoader("first", "second")

        await status_cache.get(device_id, loader)
        clock.advance(59.9)

        assert await status_cache.get(device_id, loader) == "first"
        assert loader.calls == 1

    @pytest.mark.asyncio
    async def test_expired_entry_is_recomputed(self, status_cache: StatusCache, clock):
        device_id = uuid.uuid4()
        loader = CountingLoader("first", "second")

        await status_cache.get(device_id, loader)
        clock.advance(60)

        assert await status_cache.get(device_id, loader) == "second"
        assert loader.calls == 2

    @pytest.mark.asyncio
    async def test_ttl_counts_from_computation(self, status_cache: StatusCache, clock):
        """A slow loader does not eat into the entry's lifetime."""
        device_id = uuid.uuid4()

        async def slow_loader():
            clock.advance(30)
            return "value"

        await status_cache.get(device_id, slow_loader)
        clock.advance(59)

        assert await status_cache.get(device_id, CountingLoader("unused")) == "value"

    @pytest.mark.asyncio
    async def test_loader_error_is_not_cached(self, status_cache: StatusCache):
        device_id = uuid.uuid4()
        loader = CountingLoader(NotFoundError("none"), NotFoundError("none"), "found")

        with pytest.raises(NotFoundError):
            await status_cache.get(device_id, loader)
        with pytest.raises(NotFoundError):
            await status_cache.get(device_id, loader)

        assert len(status_cache) == 0
        assert await status_cache.get(device_id, loader) == "found"
        assert loader.calls == 3

    @pytest.mark.asyncio
    async def test_entries_are_per_device(self, status_cache: StatusCache):
        first, second = uuid.uuid4(), uuid.uuid4()

        await status_cache.get(first, CountingLoader("a"))
        await status_cache.get(second, CountingLoader("b"))

        assert await status_cache.get(first, CountingLoader("x")) == "a"
        assert await status_cache.get(second, CountingLoader("y")) == "b"

    @pytest.mark.asyncio
    async def test_purge_expired(self, status_cache: StatusCache, clock):
        stale, fresh = uuid.uuid4(), uuid.uuid4()

        await status_cache.get(stale, CountingLoader("old"))
        clock.advance(45)
        await status_cache.get(fresh, CountingLoader("new"))
        clock.advance(20)

        assert status_cache.purge_expired() == 1
        assert len(status_cache) == 1

    @pytest.mark.asyncio
    async def test_clear(self, status_cache: StatusCache):
        await status_cache.get(uuid.uuid4(), CountingLoader("a"))
        status_cache.clear()
        assert len(status_cache) == 0

    def test_rejects_non_positive_ttl(self):
        with pytest.raises(ValueError):
            StatusCache(ttl_seconds=0)
