"""initial schema

Revision ID: 3f1c2a7d9b10
Revises:
Create Date: 2026-10-18 09:12:41.204117

"""

from collections.abc import Sequence

import sqlalchemy as sa
from alembic import op
from sqlalchemy.dialects import postgresql

# revision identifiers, used by Alembic.
revision: str = "3f1c2a7d9b10"
down_revision: str | Sequence[str] | None = None
branch_labels: str | Sequence[str] | None = None
depends_on: str | Sequence[str] | None = None

USER_ROLES = ("PUBLIC", "AIRLINE_STAFF", "GATE_MANAGER", "OPERATIONS_MANAGER", "ADMIN")


def _timestamps() -> list[sa.Column]:
    return [
        sa.Column(
            "created_at",
            sa.DateTime(timezone=True),
            server_default=sa.func.now(),
            nullable=False,
        ),
        sa.Column(
            "updated_at",
            sa.DateTime(timezone=True),
            server_default=sa.func.now(),
            nullable=False,
        ),
    ]


def upgrade() -> None:
    """Create all tables for the initial schema."""

    # -- users --
    op.create_table(
        "users",
        sa.Column("id", postgresql.UUID(as_uuid=True), primary_key=True),
        sa.Column("username", sa.String(32), unique=True, nullable=False),
        sa.Column("email", sa.String(255), unique=True, nullable=False),
        sa.Column("first_name", sa.String(32), nullable=False),
        sa.Column("last_name", sa.String(32), nullable=False),
        sa.Column("phone_number", sa.String(16), nullable=False),
        sa.Column("password_hash", sa.String(255), nullable=False),
        sa.Column(
            "role",
            sa.Enum(*USER_ROLES, name="userrole"),
            nullable=False,
        ),
        sa.Column("is_active", sa.Boolean(), nullable=False),
        sa.Column("last_login", sa.DateTime(timezone=True), nullable=True),
        *_timestamps(),
    )
    op.create_index("ix_users_username", "users", ["username"])
    op.create_index("ix_users_email", "users", ["email"])

    # -- authorization_codes --
    op.create_table(
        "authorization_codes",
        sa.Column("id", postgresql.UUID(as_uuid=True), primary_key=True),
        sa.Column("code", sa.String(64), unique=True, nullable=False),
        sa.Column(
            "role",
            postgresql.ENUM(*USER_ROLES, name="userrole", create_type=False),
            nullable=False,
        ),
        sa.Column("is_active", sa.Boolean(), nullable=False),
        sa.Column("created_by", sa.String(32), nullable=True),
        *_timestamps(),
    )

    # -- gates --
    op.create_table(
        "gates",
        sa.Column("id", postgresql.UUID(as_uuid=True), primary_key=True),
        sa.Column("gate_id", sa.String(8), unique=True, nullable=False),
        sa.Column("terminal", sa.String(1), nullable=False),
        sa.Column("gate_number", sa.String(2), nullable=False),
        sa.Column(
            "gate_type",
            sa.Enum("DOMESTIC", "INTERNATIONAL", "BOTH", name="gatetype"),
            nullable=False,
        ),
        sa.Column(
            "gate_size",
            sa.Enum("SMALL", "MEDIUM", "LARGE", name="gatesize"),
            nullable=False,
        ),
        sa.Column(
            "status",
            sa.Enum(
                "AVAILABLE",
                "OCCUPIED",
                "MAINTENANCE",
                "CLOSED",
                "UNKNOWN",
                name="gatestatus",
            ),
            nullable=False,
        ),
        sa.Column("is_active", sa.Boolean(), nullable=False),
        sa.Column("has_jet_bridge", sa.Boolean(), nullable=False),
        sa.Column("features", postgresql.JSONB(), nullable=False),
        sa.Column("capacity", sa.Integer(), nullable=False),
        *_timestamps(),
    )
    op.create_index("ix_gates_gate_id", "gates", ["gate_id"])
    op.create_index("ix_gates_terminal", "gates", ["terminal"])

    # -- gate_assignments --
    op.create_table(
        "gate_assignments",
        sa.Column("id", postgresql.UUID(as_uuid=True), primary_key=True),
        sa.Column(
            "gate_id",
            sa.String(8),
            sa.ForeignKey("gates.gate_id", ondelete="CASCADE"),
            nullable=False,
        ),
        sa.Column("flight_number", sa.String(10), nullable=False),
        sa.Column("start_time", sa.DateTime(timezone=True), nullable=False),
        sa.Column("end_time", sa.DateTime(timezone=True), nullable=False),
        sa.Column(
            "status",
            sa.Enum(
                "SCHEDULED", "ACTIVE", "COMPLETED", "CANCELLED", name="assignmentstatus"
            ),
            nullable=False,
        ),
        sa.Column("cancelled", sa.Boolean(), nullable=False),
        sa.Column("assigned_by", sa.String(32), nullable=True),
        *_timestamps(),
        sa.CheckConstraint("start_time <= end_time", name="ck_gate_assignments_window"),
    )
    op.create_index("ix_gate_assignments_gate_id", "gate_assignments", ["gate_id"])
    op.create_index(
        "ix_gate_assignments_gate_window",
        "gate_assignments",
        ["gate_id", "start_time", "end_time"],
    )

    # Database-level guard against double-booking: closed ranges match the
    # inclusive overlap rule used by the application.
    op.execute("CREATE EXTENSION IF NOT EXISTS btree_gist")
    op.execute(
        """
        ALTER TABLE gate_assignments
        ADD CONSTRAINT no_gate_assignment_overlap
        EXCLUDE USING gist (
            gate_id WITH =,
            tstzrange(start_time, end_time, '[]') WITH &&
        )
        WHERE (NOT cancelled)
        """
    )

    # -- aircraft --
    op.create_table(
        "aircraft",
        sa.Column("id", postgresql.UUID(as_uuid=True), primary_key=True),
        sa.Column("registration_number", sa.String(10), unique=True, nullable=False),
        sa.Column("model", sa.String(100), nullable=False),
        sa.Column(
            "aircraft_type",
            sa.Enum("NARROW_BODY", "WIDE_BODY", "REGIONAL_JET", name="aircrafttype"),
            nullable=False,
        ),
        sa.Column(
            "status",
            sa.Enum("AVAILABLE", "ACTIVE", "MAINTENANCE", name="aircraftstatus"),
            nullable=False,
        ),
        sa.Column("current_location", sa.String(100), nullable=True),
        sa.Column("next_maintenance_due", sa.DateTime(timezone=True), nullable=True),
        *_timestamps(),
    )
    op.create_index(
        "ix_aircraft_registration_number", "aircraft", ["registration_number"]
    )

    # -- maintenance_records --
    op.create_table(
        "maintenance_records",
        sa.Column("id", postgresql.UUID(as_uuid=True), primary_key=True),
        sa.Column(
            "aircraft_registration",
            sa.String(10),
            sa.ForeignKey("aircraft.registration_number", ondelete="CASCADE"),
            nullable=False,
        ),
        sa.Column("scheduled_date", sa.DateTime(timezone=True), nullable=False),
        sa.Column(
            "maintenance_type",
            sa.Enum(
                "ROUTINE", "INSPECTION", "REPAIR", "OVERHAUL", name="maintenancetype"
            ),
            nullable=False,
        ),
        sa.Column("description", sa.Text(), nullable=True),
        sa.Column(
            "status",
            sa.Enum(
                "SCHEDULED",
                "IN_PROGRESS",
                "COMPLETED",
                "CANCELLED",
                name="maintenancestatus",
            ),
            nullable=False,
        ),
        sa.Column("completed_at", sa.DateTime(timezone=True), nullable=True),
        sa.Column("notes", sa.Text(), nullable=True),
        *_timestamps(),
    )
    op.create_index(
        "ix_maintenance_records_aircraft",
        "maintenance_records",
        ["aircraft_registration"],
    )

    # -- flights --
    op.create_table(
        "flights",
        sa.Column("id", postgresql.UUID(as_uuid=True), primary_key=True),
        sa.Column("flight_number", sa.String(10), unique=True, nullable=False),
        sa.Column("airline_code", sa.String(3), nullable=False),
        sa.Column("origin", sa.String(4), nullable=False),
        sa.Column("destination", sa.String(4), nullable=False),
        sa.Column("scheduled_departure", sa.DateTime(timezone=True), nullable=False),
        sa.Column("scheduled_arrival", sa.DateTime(timezone=True), nullable=False),
        sa.Column("actual_departure", sa.DateTime(timezone=True), nullable=True),
        sa.Column("actual_arrival", sa.DateTime(timezone=True), nullable=True),
        sa.Column(
            "aircraft_registration",
            sa.String(10),
            sa.ForeignKey("aircraft.registration_number", ondelete="SET NULL"),
            nullable=True,
        ),
        sa.Column(
            "status",
            sa.Enum(
                "SCHEDULED",
                "BOARDING",
                "DEPARTED",
                "EN_ROUTE",
                "APPROACHING",
                "LANDED",
                "ARRIVED",
                "DELAYED",
                "CANCELLED",
                "DIVERTED",
                name="flightstatus",
            ),
            nullable=False,
        ),
        sa.Column("departure_gate", sa.String(8), nullable=True),
        sa.Column("arrival_gate", sa.String(8), nullable=True),
        sa.Column("passenger_count", sa.Integer(), nullable=False),
        sa.Column("remarks", sa.Text(), nullable=True),
        *_timestamps(),
    )
    op.create_index("ix_flights_flight_number", "flights", ["flight_number"])
    op.create_index("ix_flights_status", "flights", ["status"])
    op.create_index(
        "ix_flights_scheduled_departure", "flights", ["scheduled_departure"]
    )


def downgrade() -> None:
    """Drop all tables."""
    op.drop_table("flights")
    op.drop_table("maintenance_records")
    op.drop_table("aircraft")
    op.execute(
        "ALTER TABLE gate_assignments DROP CONSTRAINT IF EXISTS no_gate_assignment_overlap"
    )
    op.drop_table("gate_assignments")
    op.drop_table("gates")
    op.drop_table("authorization_codes")
    op.drop_table("users")
    for enum_name in (
        "flightstatus",
        "maintenancestatus",
        "maintenancetype",
        "aircraftstatus",
        "aircrafttype",
        "assignmentstatus",
        "gatestatus",
        "gatesize",
        "gatetype",
        "userrole",
    ):
        sa.Enum(name=enum_name).drop(op.get_bind(), checkfirst=True)
