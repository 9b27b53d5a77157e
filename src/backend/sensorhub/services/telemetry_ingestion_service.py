"""Telemetry ingestion service for validating and persisting sensor readings.

Readings are written straight to the store. No deduplication is applied:
submitting the same payload twice stores two readings. The latest-status
cache is deliberately left alone, see ``status_cache``.
"""

import uuid
from datetime import datetime

import structlog

from sensorhub.core.metrics import record_reading_ingested
from sensorhub.models.reading import Reading
from sensorhub.services.errors import ValidationError
from sensorhub.services.reading_store import ReadingStore, ensure_utc

logger = structlog.get_logger()


class TelemetryIngestionService:
    """Builds readings from device payloads and appends them to the store."""

    def __init__(self, store: ReadingStore):
        self.store = store

    async def submit(
        self,
        device_id: uuid.UUID | str,
        temperature: float,
        humidity: float,
        status: str,
        timestamp: datetime | str,
    ) -> Reading:
        """Validate and persist one reading.

        Returns:
            The stored reading with its generated id.

        Raises:
            ValidationError: If a field is missing or malformed.
            ReferentialError: If the device is not registered.
        """
        reading = Reading(
            device_id=self._parse_device_id(device_id),
            temperature=temperature,
            humidity=humidity,
            status=status,
            timestamp=self._parse_timestamp(timestamp),
        )

        stored = await self.store.append(reading)
        record_reading_ingested()
        logger.debug(
            "Reading stored",
            reading_id=stored.id,
            device_id=str(stored.device_id),
            timestamp=ensure_utc(stored.timestamp).isoformat(),
        )
        return stored

    @staticmethod
    def _parse_device_id(device_id: uuid.UUID | str | None) -> uuid.UUID | None:
        if device_id is None or isinstance(device_id, uuid.UUID):
            return device_id
        try:
            return uuid.UUID(str(device_id))
        except ValueError:
            raise ValidationError(f"device_id is not a valid identifier: {device_id!r}", field="device_id")

    @staticmethod
    def _parse_timestamp(timestamp: datetime | str | None) -> datetime | None:
        """Accept datetimes or ISO-8601 strings (a trailing Z means UTC)."""
        if timestamp is None:
            return None
        if isinstance(timestamp, datetime):
            return ensure_utc(timestamp)
        if not isinstance(timestamp, str):
            raise ValidationError(
                f"timestamp expected date, got {type(timestamp).__name__}", field="timestamp"
            )
        value = timestamp.strip()
        if value.endswith(("Z", "z")):
            value = value[:-1] + "+00:00"
        try:
            return ensure_utc(datetime.fromisoformat(value))
        except ValueError:
            raise ValidationError(f"timestamp is not a valid date: {timestamp!r}", field="timestamp")
