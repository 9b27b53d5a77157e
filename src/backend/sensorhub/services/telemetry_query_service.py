"""Telemetry query service for reading stored sensor data.

Latest-status lookups go through the shared StatusCache and may lag the
store by up to the cache TTL. Historical range queries always hit the store.
"""

import uuid
from datetime import datetime
from typing import Sequence

import structlog

from sensorhub.models.reading import Reading
from sensorhub.services.errors import NotFoundError, ValidationError
from sensorhub.services.reading_store import ReadingStore, ensure_utc
from sensorhub.services.status_cache import StatusCache

logger = structlog.get_logger()


class TelemetryQueryService:
    """Serves latest-status and historical-range reads for a device."""

    def __init__(self, store: ReadingStore, cache: StatusCache):
        self.store = store
        self.cache = cache

    async def get_latest_status(self, device_id: uuid.UUID) -> Reading:
        """Return the most recent reading, possibly served from cache.

        Raises:
            NotFoundError: If the device has no readings. Not cached.
        """

        async def load_latest() -> Reading:
            reading = await self.store.find_latest(device_id)
            if reading is None:
                raise NotFoundError(f"No readings recorded for device {device_id}")
            return reading

        return await self.cache.get(device_id, load_latest)

    async def get_historical_status(
        self,
        device_id: uuid.UUID,
        start: datetime,
        end: datetime,
    ) -> Sequence[Reading]:
        """Return readings with start <= timestamp <= end in ascending time order.

        Raises:
            ValidationError: If start is after end. The store is not queried.
        """
        if ensure_utc(start, field="start_time") > ensure_utc(end, field="end_time"):
            raise ValidationError("start_time must be before or equal to end_time", field="start_time")

        readings = await self.store.find_in_range(device_id, start, end)
        logger.debug(
            "Historical status queried",
            device_id=str(device_id),
            count=len(readings),
        )
        return readings
