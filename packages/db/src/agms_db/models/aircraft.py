"""Aircraft and maintenance record models."""

from __future__ import annotations

from datetime import datetime  # noqa: TC003

from sqlalchemy import DateTime, ForeignKey, Index, String, Text
from sqlalchemy.orm import Mapped, mapped_column

from agms_core.schemas import (
    AircraftStatus,
    AircraftType,
    MaintenanceStatus,
    MaintenanceType,
)

from .base import Base, TimestampMixin, UUIDPrimaryKeyMixin


class Aircraft(UUIDPrimaryKeyMixin, TimestampMixin, Base):
    """Aircraft table - registered airframes."""

    __tablename__ = "aircraft"

    registration_number: Mapped[str] = mapped_column(
        String(10), unique=True, nullable=False
    )
    model: Mapped[str] = mapped_column(String(100), nullable=False)
    aircraft_type: Mapped[AircraftType] = mapped_column(nullable=False)
    status: Mapped[AircraftStatus] = mapped_column(
        nullable=False, default=AircraftStatus.AVAILABLE
    )
    current_location: Mapped[str | None] = mapped_column(String(100))
    next_maintenance_due: Mapped[datetime | None] = mapped_column(
        DateTime(timezone=True)
    )

    __table_args__ = (Index("ix_aircraft_registration_number", "registration_number"),)

    def __repr__(self) -> str:
        return f"<Aircraft {self.registration_number} ({self.status.value})>"


class MaintenanceRecord(UUIDPrimaryKeyMixin, TimestampMixin, Base):
    """Maintenance history per aircraft."""

    __tablename__ = "maintenance_records"

    aircraft_registration: Mapped[str] = mapped_column(
        String(10),
        ForeignKey("aircraft.registration_number", ondelete="CASCADE"),
        nullable=False,
    )
    scheduled_date: Mapped[datetime] = mapped_column(
        DateTime(timezone=True), nullable=False
    )
    maintenance_type: Mapped[MaintenanceType] = mapped_column(nullable=False)
    description: Mapped[str | None] = mapped_column(Text)
    status: Mapped[MaintenanceStatus] = mapped_column(
        nullable=False, default=MaintenanceStatus.SCHEDULED
    )
    completed_at: Mapped[datetime | None] = mapped_column(DateTime(timezone=True))
    notes: Mapped[str | None] = mapped_column(Text)

    __table_args__ = (
        Index("ix_maintenance_records_aircraft", "aircraft_registration"),
    )

    def __repr__(self) -> str:
        return f"<MaintenanceRecord {self.aircraft_registration} {self.maintenance_type.value}>"
