"""Sensor reading model."""

import uuid
from datetime import datetime

from sqlalchemy import DateTime, Float, ForeignKey, Index, Integer, String, func
from sqlalchemy.dialects.postgresql import UUID
from sqlalchemy.orm import Mapped, mapped_column

from sensorhub.models.base import Base

STATUS_MAX_LENGTH = 255


class Reading(Base):
    """One timestamped sample from a device. Never updated or deleted.

    ``timestamp`` is supplied by the device and may arrive out of order;
    ``created_at`` records arrival on the server.
    """

    __tablename__ = "readings"
    __table_args__ = (
        Index("ix_readings_device_id_timestamp", "device_id", "timestamp"),
    )

    # Integer surrogate key doubles as the insertion-order tie-break
    id: Mapped[int] = mapped_column(Integer, primary_key=True, autoincrement=True)

    device_id: Mapped[uuid.UUID] = mapped_column(
        UUID(as_uuid=True),
        ForeignKey("devices.id", ondelete="RESTRICT"),
        nullable=False,
    )

    temperature: Mapped[float] = mapped_column(Float, nullable=False)
    humidity: Mapped[float] = mapped_column(Float, nullable=False)
    status: Mapped[str] = mapped_column(String(STATUS_MAX_LENGTH), nullable=False)
    timestamp: Mapped[datetime] = mapped_column(DateTime(timezone=True), nullable=False)

    created_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True),
        server_default=func.now(),
        nullable=False,
    )

    def __repr__(self) -> str:
        return f"<Reading(id={self.id}, device_id={self.device_id}, timestamp={self.timestamp})>"
