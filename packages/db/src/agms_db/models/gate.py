"""Gate and gate assignment models."""

from __future__ import annotations

from datetime import datetime  # noqa: TC003

from sqlalchemy import (
    Boolean,
    CheckConstraint,
    DateTime,
    ForeignKey,
    Index,
    Integer,
    String,
)
from sqlalchemy.orm import Mapped, mapped_column

from agms_core.schemas import AssignmentStatus, GateSize, GateStatus, GateType

from .base import Base, JSONVariant, TimestampMixin, UUIDPrimaryKeyMixin


class Gate(UUIDPrimaryKeyMixin, TimestampMixin, Base):
    """Gates table - physical gate resources."""

    __tablename__ = "gates"

    gate_id: Mapped[str] = mapped_column(String(8), unique=True, nullable=False)
    terminal: Mapped[str] = mapped_column(String(1), nullable=False)
    gate_number: Mapped[str] = mapped_column(String(2), nullable=False)
    gate_type: Mapped[GateType] = mapped_column(nullable=False, default=GateType.DOMESTIC)
    gate_size: Mapped[GateSize] = mapped_column(nullable=False, default=GateSize.MEDIUM)
    status: Mapped[GateStatus] = mapped_column(nullable=False, default=GateStatus.UNKNOWN)
    is_active: Mapped[bool] = mapped_column(Boolean, nullable=False, default=True)
    has_jet_bridge: Mapped[bool] = mapped_column(Boolean, nullable=False, default=True)
    features: Mapped[list[str]] = mapped_column(JSONVariant, nullable=False, default=list)
    capacity: Mapped[int] = mapped_column(Integer, nullable=False, default=0)

    __table_args__ = (
        Index("ix_gates_gate_id", "gate_id"),
        Index("ix_gates_terminal", "terminal"),
    )

    def __repr__(self) -> str:
        return f"<Gate {self.gate_id} ({self.status.value})>"


class Assignment(UUIDPrimaryKeyMixin, TimestampMixin, Base):
    """Gate assignments - a flight occupying a gate for a time window."""

    __tablename__ = "gate_assignments"

    gate_id: Mapped[str] = mapped_column(
        String(8), ForeignKey("gates.gate_id", ondelete="CASCADE"), nullable=False
    )
    flight_number: Mapped[str] = mapped_column(String(10), nullable=False)
    start_time: Mapped[datetime] = mapped_column(DateTime(timezone=True), nullable=False)
    end_time: Mapped[datetime] = mapped_column(DateTime(timezone=True), nullable=False)
    status: Mapped[AssignmentStatus] = mapped_column(
        nullable=False, default=AssignmentStatus.SCHEDULED
    )
    cancelled: Mapped[bool] = mapped_column(Boolean, nullable=False, default=False)
    assigned_by: Mapped[str | None] = mapped_column(String(32))

    __table_args__ = (
        CheckConstraint("start_time <= end_time", name="ck_gate_assignments_window"),
        Index("ix_gate_assignments_gate_id", "gate_id"),
        Index("ix_gate_assignments_gate_window", "gate_id", "start_time", "end_time"),
    )

    def __repr__(self) -> str:
        return f"<Assignment {self.flight_number}@{self.gate_id} ({self.status.value})>"
