"""Cache-aside store for each device's latest reading.

Entries live for a fixed TTL counted from when the value was computed.
Nothing invalidates an entry on write, so a reading ingested after the entry
was filled stays invisible to latest-status lookups until the entry expires.
Historical queries bypass the cache and see it immediately.
"""

import time
import uuid
from dataclasses import dataclass
from typing import Any, Awaitable, Callable

import structlog

from sensorhub.core.metrics import record_cache_lookup

logger = structlog.get_logger()

DEFAULT_TTL_SECONDS = 60.0


@dataclass
class CacheEntry:
    """A cached value and the clock reading after which it is stale."""

    value: Any
    expires_at: float


class StatusCache:
    """Per-device TTL cache with get-or-compute semantics.

    Concurrent misses for one device may each run the loader; the last one to
    finish wins. Loader exceptions propagate and leave the cache untouched, so
    negative results are never cached.
    """

    def __init__(
        self,
        ttl_seconds: float = DEFAULT_TTL_SECONDS,
        clock: Callable[[], float] = time.monotonic,
    ):
        if ttl_seconds <= 0:
            raise ValueError("ttl_seconds must be positive")
        self.ttl_seconds = ttl_seconds
        self._clock = clock
        self._entries: dict[uuid.UUID, CacheEntry] = {}

    async def get(self, device_id: uuid.UUID, loader: Callable[[], Awaitable[Any]]) -> Any:
        """Return the cached value for ``device_id``, computing it on a miss."""
        entry = self._entries.get(device_id)
        if entry is not None and self._clock() < entry.expires_at:
            record_cache_lookup("hit")
            return entry.value

        record_cache_lookup("miss")
        value = await loader()
        self._entries[device_id] = CacheEntry(
            value=value,
            expires_at=self._clock() + self.ttl_seconds,
        )
        logger.debug("Latest status cached", device_id=str(device_id), ttl=self.ttl_seconds)
        return value

    def purge_expired(self) -> int:
        """Drop expired entries and return how many were removed."""
        now = self._clock()
        expired = [key for key, entry in self._entries.items() if now >= entry.expires_at]
        for key in expired:
            del self._entries[key]
        return len(expired)

    def clear(self) -> None:
        """Drop every entry."""
        self._entries.clear()

    def __len__(self) -> int:
        return len(self._entries)
