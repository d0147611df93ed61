"""Flight model."""

from __future__ import annotations

from datetime import datetime  # noqa: TC003

from sqlalchemy import DateTime, ForeignKey, Index, Integer, String, Text
from sqlalchemy.orm import Mapped, mapped_column

from agms_core.schemas import FlightStatus

from .base import Base, TimestampMixin, UUIDPrimaryKeyMixin


class Flight(UUIDPrimaryKeyMixin, TimestampMixin, Base):
    """Flights table - scheduled and operated flights."""

    __tablename__ = "flights"

    flight_number: Mapped[str] = mapped_column(String(10), unique=True, nullable=False)
    airline_code: Mapped[str] = mapped_column(String(3), nullable=False)
    origin: Mapped[str] = mapped_column(String(4), nullable=False)
    destination: Mapped[str] = mapped_column(String(4), nullable=False)
    scheduled_departure: Mapped[datetime] = mapped_column(
        DateTime(timezone=True), nullable=False
    )
    scheduled_arrival: Mapped[datetime] = mapped_column(
        DateTime(timezone=True), nullable=False
    )
    actual_departure: Mapped[datetime | None] = mapped_column(DateTime(timezone=True))
    actual_arrival: Mapped[datetime | None] = mapped_column(DateTime(timezone=True))
    aircraft_registration: Mapped[str | None] = mapped_column(
        String(10),
        ForeignKey("aircraft.registration_number", ondelete="SET NULL"),
    )
    status: Mapped[FlightStatus] = mapped_column(
        nullable=False, default=FlightStatus.SCHEDULED
    )
    departure_gate: Mapped[str | None] = mapped_column(String(8))
    arrival_gate: Mapped[str | None] = mapped_column(String(8))
    passenger_count: Mapped[int] = mapped_column(Integer, nullable=False, default=0)
    remarks: Mapped[str | None] = mapped_column(Text)

    __table_args__ = (
        Index("ix_flights_flight_number", "flight_number"),
        Index("ix_flights_status", "status"),
        Index("ix_flights_scheduled_departure", "scheduled_departure"),
    )

    def __repr__(self) -> str:
        return f"<Flight {self.flight_number} ({self.status.value})>"
