"""Device registry API endpoints."""

import uuid
from datetime import datetime

from fastapi import APIRouter, HTTPException, status
from pydantic import BaseModel, Field

from sensorhub.core.deps import CurrentUser, DbSession
from sensorhub.services.device_service import DeviceService
from sensorhub.services.errors import NotFoundError

router = APIRouter()


class DeviceCreate(BaseModel):
    """Register device request."""

    name: str = Field(..., min_length=1, max_length=255)
    location: str = Field(..., min_length=1, max_length=255)


class DeviceUpdate(BaseModel):
    """Update device request. Both fields are replaced."""

    name: str = Field(..., min_length=1, max_length=255)
    location: str = Field(..., min_length=1, max_length=255)


class DeviceResponse(BaseModel):
    """Device response. The API key is never echoed after registration."""

    id: uuid.UUID
    name: str
    location: str
    created_at: datetime
    updated_at: datetime

    model_config = {"from_attributes": True}


class DeviceCreatedResponse(DeviceResponse):
    """Registration response including the device's API key."""

    api_key: str


@router.post("", response_model=DeviceCreatedResponse, status_code=status.HTTP_201_CREATED)
async def create_device(
    payload: DeviceCreate,
    db: DbSession,
    current_user: CurrentUser,
):
    """Register a new device."""
    service = DeviceService(db)
    device = await service.create_device(name=payload.name, location=payload.location)
    return DeviceCreatedResponse.model_validate(device)


@router.get("", response_model=list[DeviceResponse])
async def list_devices(db: DbSession, current_user: CurrentUser):
    """List registered devices."""
    service = DeviceService(db)
    devices = await service.list_devices()
    return [DeviceResponse.model_validate(d) for d in devices]


@router.get("/{device_id}", response_model=DeviceResponse)
async def get_device(device_id: uuid.UUID, db: DbSession, current_user: CurrentUser):
    """Get a device by ID."""
    service = DeviceService(db)
    device = await service.get_device(device_id)
    if device is None:
        raise HTTPException(
            status_code=status.HTTP_404_NOT_FOUND,
            detail="Device not found",
        )
    return DeviceResponse.model_validate(device)


@router.put("/{device_id}", response_model=DeviceResponse)
async def update_device(
    device_id: uuid.UUID,
    payload: DeviceUpdate,
    db: DbSession,
    current_user: CurrentUser,
):
    """Update a device's name and location."""
    service = DeviceService(db)
    try:
        device = await service.update_device(device_id, name=payload.name, location=payload.location)
    except NotFoundError as e:
        raise HTTPException(
            status_code=status.HTTP_404_NOT_FOUND,
            detail=str(e),
        )
    return DeviceResponse.model_validate(device)
