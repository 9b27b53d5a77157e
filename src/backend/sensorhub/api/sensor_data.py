"""Sensor data ingestion and query endpoints."""

import uuid
from datetime import datetime
from typing import Annotated

from fastapi import APIRouter, HTTPException, Query, status
from pydantic import BaseModel, Field, field_validator

from sensorhub.core.deps import CurrentUser, IngestionService, QueryService
from sensorhub.services.errors import NotFoundError, ReferentialError, ValidationError
from sensorhub.services.reading_store import ensure_utc
from sensorhub.models.reading import STATUS_MAX_LENGTH

router = APIRouter()


class SensorDataCreate(BaseModel):
    """Reading payload pushed by a device."""

    device_id: uuid.UUID
    # strict: JSON booleans are not readings
    temperature: Annotated[float, Field(strict=True)]
    humidity: Annotated[float, Field(strict=True)]
    status: str = Field(..., min_length=1, max_length=STATUS_MAX_LENGTH)
    timestamp: datetime


class ReadingResponse(BaseModel):
    """Stored reading."""

    id: int
    device_id: uuid.UUID
    temperature: float
    humidity: float
    status: str
    timestamp: datetime
    created_at: datetime | None = None

    model_config = {"from_attributes": True}

    @field_validator("timestamp", "created_at")
    @classmethod
    def as_utc(cls, v: datetime | None) -> datetime | None:
        """SQLite hands back naive datetimes; stored values are always UTC."""
        return ensure_utc(v) if v is not None else None


@router.post(
    "/sensor-data",
    response_model=ReadingResponse,
    status_code=status.HTTP_201_CREATED,
)
async def store_sensor_data(
    payload: SensorDataCreate,
    service: IngestionService,
    current_user: CurrentUser,
):
    """Store one reading for a registered device.

    Identical payloads are stored as separate readings.
    """
    try:
        reading = await service.submit(
            device_id=payload.device_id,
            temperature=payload.temperature,
            humidity=payload.humidity,
            status=payload.status,
            timestamp=payload.timestamp,
        )
    except ReferentialError as e:
        raise HTTPException(
            status_code=status.HTTP_404_NOT_FOUND,
            detail=str(e),
        )
    except ValidationError as e:
        raise HTTPException(
            status_code=status.HTTP_422_UNPROCESSABLE_ENTITY,
            detail=str(e),
        )
    return ReadingResponse.model_validate(reading)


@router.get("/devices/{device_id}/latest-status", response_model=ReadingResponse)
async def get_latest_status(
    device_id: uuid.UUID,
    service: QueryService,
    current_user: CurrentUser,
):
    """Get the reading with the greatest timestamp for a device.

    Served from a cache that lives for STATUS_CACHE_TTL_SECONDS (60 s by
    default) and is not invalidated by new readings, so the result can be up
    to that old. Use historical-status for an always-current view.
    """
    try:
        reading = await service.get_latest_status(device_id)
    except NotFoundError as e:
        raise HTTPException(
            status_code=status.HTTP_404_NOT_FOUND,
            detail=str(e),
        )
    return ReadingResponse.model_validate(reading)


@router.get("/devices/{device_id}/historical-status", response_model=list[ReadingResponse])
async def get_historical_status(
    device_id: uuid.UUID,
    service: QueryService,
    current_user: CurrentUser,
    start_time: datetime = Query(...),
    end_time: datetime = Query(...),
):
    """Get readings with start_time <= timestamp <= end_time, oldest first."""
    try:
        readings = await service.get_historical_status(device_id, start_time, end_time)
    except ValidationError as e:
        raise HTTPException(
            status_code=status.HTTP_422_UNPROCESSABLE_ENTITY,
            detail=str(e),
        )
    return [ReadingResponse.model_validate(r) for r in readings]
