"""Registered telemetry device model."""

import uuid

from sqlalchemy import String
from sqlalchemy.dialects.postgresql import UUID
from sqlalchemy.orm import Mapped, mapped_column

from sensorhub.models.base import Base, TimestampMixin


class Device(Base, TimestampMixin):
    """A telemetry source. Only name and location change after registration."""

    __tablename__ = "devices"

    id: Mapped[uuid.UUID] = mapped_column(
        UUID(as_uuid=True),
        primary_key=True,
        default=uuid.uuid4,
    )
    name: Mapped[str] = mapped_column(String(255), nullable=False, index=True)
    location: Mapped[str] = mapped_column(String(255), nullable=False)
    api_key: Mapped[str] = mapped_column(String(64), unique=True, nullable=False)

    # NO relationship to Reading - avoid lazy-loading a device's full history

    def __repr__(self) -> str:
        return f"<Device(id={self.id}, name={self.name})>"
