"""Durable storage for sensor readings.

``ReadingStore`` is the capability the ingestion and query services depend
on; ``SQLReadingStore`` implements it over an SQLAlchemy async session.
"""

import math
import uuid
from datetime import datetime, timezone
from typing import Protocol, Sequence

import structlog
from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession

from sensorhub.models.device import Device
from sensorhub.models.reading import Reading, STATUS_MAX_LENGTH
from sensorhub.services.errors import ReferentialError, ValidationError

logger = structlog.get_logger()

REQUIRED_FIELDS = ("device_id", "temperature", "humidity", "status", "timestamp")


def ensure_utc(value: datetime, field: str = "timestamp") -> datetime:
    """Return ``value`` as an aware UTC datetime. Naive values are taken as UTC.

    Raises:
        ValidationError: If the UTC equivalent falls outside the datetime range.
    """
    if value.tzinfo is None:
        return value.replace(tzinfo=timezone.utc)
    try:
        return value.astimezone(timezone.utc)
    except OverflowError:
        raise ValidationError(f"{field} is out of range once converted to UTC", field=field)


class ReadingStore(Protocol):
    """Append-only reading collection indexed by device and timestamp."""

    async def append(self, reading: Reading) -> Reading:
        ...

    async def find_latest(self, device_id: uuid.UUID) -> Reading | None:
        ...

    async def find_in_range(
        self, device_id: uuid.UUID, start: datetime, end: datetime
    ) -> Sequence[Reading]:
        ...


def check_reading(reading: Reading) -> None:
    """Raise ValidationError unless every required field is present and well-typed."""
    for field in REQUIRED_FIELDS:
        if getattr(reading, field, None) is None:
            raise ValidationError(f"The {field} field is required", field=field)

    if not isinstance(reading.device_id, uuid.UUID):
        raise ValidationError("device_id must be a UUID", field="device_id")

    for field in ("temperature", "humidity"):
        value = getattr(reading, field)
        # bool is an int subclass; reject it explicitly
        if isinstance(value, bool) or not isinstance(value, (int, float)):
            raise ValidationError(
                f"{field} expected numeric, got {type(value).__name__}", field=field
            )
        try:
            finite = math.isfinite(value)
        except OverflowError:
            # ints beyond float range
            finite = False
        if not finite:
            raise ValidationError(f"{field} must be a finite number", field=field)

    if not isinstance(reading.status, str) or not reading.status.strip():
        raise ValidationError("status must be a non-empty string", field="status")
    if len(reading.status) > STATUS_MAX_LENGTH:
        raise ValidationError(
            f"status may not be greater than {STATUS_MAX_LENGTH} characters", field="status"
        )

    if not isinstance(reading.timestamp, datetime):
        raise ValidationError("timestamp must be a datetime", field="timestamp")


class SQLReadingStore:
    """ReadingStore backed by the relational ``readings`` table."""

    def __init__(self, db: AsyncSession):
        self.db = db

    async def append(self, reading: Reading) -> Reading:
        """Validate, check the device exists, and commit the reading.

        Raises:
            ValidationError: If a field is missing or malformed.
            ReferentialError: If ``device_id`` names no registered device.
        """
        check_reading(reading)
        reading.timestamp = ensure_utc(reading.timestamp)

        device_exists = await self.db.scalar(
            select(Device.id).where(Device.id == reading.device_id)
        )
        if device_exists is None:
            logger.info("Reading rejected for unknown device", device_id=str(reading.device_id))
            raise ReferentialError(reading.device_id)

        reading.temperature = float(reading.temperature)
        reading.humidity = float(reading.humidity)

        self.db.add(reading)
        await self.db.commit()
        await self.db.refresh(reading)
        return reading

    async def find_latest(self, device_id: uuid.UUID) -> Reading | None:
        """Reading with the greatest timestamp; highest id wins a tie."""
        result = await self.db.execute(
            select(Reading)
            .where(Reading.device_id == device_id)
            .order_by(Reading.timestamp.desc(), Reading.id.desc())
            .limit(1)
        )
        return result.scalar_one_or_none()

    async def find_in_range(
        self, device_id: uuid.UUID, start: datetime, end: datetime
    ) -> list[Reading]:
        """Readings with start <= timestamp <= end, oldest first."""
        result = await self.db.execute(
            select(Reading)
            .where(
                Reading.device_id == device_id,
                Reading.timestamp >= ensure_utc(start, field="start_time"),
                Reading.timestamp <= ensure_utc(end, field="end_time"),
            )
            .order_by(Reading.timestamp.asc(), Reading.id.asc())
        )
        return list(result.scalars().all())
