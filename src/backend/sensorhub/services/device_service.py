"""Device registry service."""

import uuid

import structlog
from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession

from sensorhub.core.security import generate_device_api_key
from sensorhub.models.device import Device
from sensorhub.services.errors import NotFoundError

logger = structlog.get_logger()


class DeviceService:
    """Registers devices and edits their descriptive fields."""

    def __init__(self, db: AsyncSession):
        self.db = db

    async def create_device(self, name: str, location: str) -> Device:
        """Register a new device with a freshly generated API key."""
        device = Device(
            id=uuid.uuid4(),
            name=name,
            location=location,
            api_key=generate_device_api_key(),
        )

        self.db.add(device)
        await self.db.commit()
        await self.db.refresh(device)
        logger.info("Device registered", device_id=str(device.id), name=name)
        return device

    async def get_device(self, device_id: uuid.UUID) -> Device | None:
        """Get device by ID."""
        result = await self.db.execute(select(Device).where(Device.id == device_id))
        return result.scalar_one_or_none()

    async def list_devices(self) -> list[Device]:
        """List all devices ordered by name."""
        result = await self.db.execute(select(Device).order_by(Device.name, Device.id))
        return list(result.scalars().all())

    async def update_device(self, device_id: uuid.UUID, name: str, location: str) -> Device:
        """Replace a device's name and location.

        Raises:
            NotFoundError: If no device has this id.
        """
        device = await self.get_device(device_id)
        if device is None:
            raise NotFoundError(f"Device {device_id} not found")

        device.name = name
        device.location = location
        await self.db.commit()
        await self.db.refresh(device)
        logger.info("Device updated", device_id=str(device_id))
        return device
