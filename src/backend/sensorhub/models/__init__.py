"""SensorHub database models."""

from sensorhub.models.base import Base, TimestampMixin
from sensorhub.models.user import User
from sensorhub.models.device import Device
from sensorhub.models.reading import Reading

__all__ = [
    "Base",
    "TimestampMixin",
    "User",
    "Device",
    "Reading",
]
