"""Periodic assignment and maintenance housekeeping."""

from __future__ import annotations

from collections.abc import AsyncGenerator
from datetime import UTC, datetime

import pytest
from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession, async_sessionmaker, create_async_engine
from sqlalchemy.pool import StaticPool

from agms_api.schemas.flights import ScheduleMaintenanceRequest
from agms_api.services.aircraft_service import AircraftService
from agms_core.conflict import as_utc
from agms_core.schemas import AircraftStatus, AircraftType, AssignmentStatus, MaintenanceType
from agms_db.models import Aircraft, Assignment, Base, MaintenanceRecord
from agms_scheduler.beat_schedule import build_beat_schedule
from agms_scheduler.tasks import advance_assignments, flag_maintenance


def at(hour: int, day: int = 14) -> datetime:
    return datetime(2026, 3, day, hour, tzinfo=UTC)


@pytest.fixture
async def session() -> AsyncGenerator[AsyncSession]:
    engine = create_async_engine(
        "sqlite+aiosqlite:///:memory:",
        connect_args={"check_same_thread": False},
        poolclass=StaticPool,
    )
    async with engine.begin() as conn:
        await conn.run_sync(Base.metadata.create_all)
    factory = async_sessionmaker(engine, class_=AsyncSession, expire_on_commit=False)
    async with factory() as session:
        yield session
    await engine.dispose()


async def test_advance_assignments(session: AsyncSession) -> None:
    session.add_all(
        [
            Assignment(gate_id="T1G1", flight_number="PAST", start_time=at(6), end_time=at(8)),
            Assignment(gate_id="T1G2", flight_number="NOW", start_time=at(9), end_time=at(11)),
            Assignment(gate_id="T1G3", flight_number="LATER", start_time=at(12), end_time=at(14)),
            Assignment(
                gate_id="T1G4",
                flight_number="GONE",
                start_time=at(9),
                end_time=at(11),
                status=AssignmentStatus.CANCELLED,
                cancelled=True,
            ),
        ]
    )
    await session.flush()

    assert await advance_assignments(session, at(10)) == 2

    result = await session.execute(select(Assignment.flight_number, Assignment.status))
    statuses = dict(result.all())
    assert statuses == {
        "PAST": AssignmentStatus.COMPLETED,
        "NOW": AssignmentStatus.ACTIVE,
        "LATER": AssignmentStatus.SCHEDULED,
        "GONE": AssignmentStatus.CANCELLED,
    }

    # Nothing left to move at the same instant.
    assert await advance_assignments(session, at(10)) == 0


async def test_flag_maintenance(session: AsyncSession) -> None:
    session.add_all(
        [
            Aircraft(
                registration_number="N12345",
                model="Boeing 737-800",
                aircraft_type=AircraftType.NARROW_BODY,
                next_maintenance_due=at(8),
            ),
            Aircraft(
                registration_number="N67890",
                model="Airbus A320",
                aircraft_type=AircraftType.NARROW_BODY,
                next_maintenance_due=at(12, day=20),
            ),
            Aircraft(
                registration_number="N11223",
                model="Boeing 777-300",
                aircraft_type=AircraftType.WIDE_BODY,
            ),
        ]
    )
    await session.flush()

    assert await flag_maintenance(session, at(10)) == 1

    result = await session.execute(
        select(Aircraft.registration_number).where(
            Aircraft.status == AircraftStatus.MAINTENANCE
        )
    )
    assert result.scalars().all() == ["N12345"]


def test_beat_schedule_runs_both_tasks() -> None:
    schedule = build_beat_schedule()
    assert {entry["task"] for entry in schedule.values()} == {
        "agms_scheduler.tasks.advance_assignment_statuses",
        "agms_scheduler.tasks.flag_due_maintenance",
    }


async def _aircraft_with_maintenance(
    session: AsyncSession, *dates: datetime
) -> list[MaintenanceRecord]:
    session.add(
        Aircraft(
            registration_number="N12345",
            model="Boeing 737-800",
            aircraft_type=AircraftType.NARROW_BODY,
        )
    )
    await session.flush()
    service = AircraftService(session)
    return [
        await service.schedule_maintenance(
            "N12345",
            ScheduleMaintenanceRequest(scheduled_date=d, maintenance_type=MaintenanceType.ROUTINE),
        )
        for d in dates
    ]


async def test_completed_maintenance_is_not_flagged_again(session: AsyncSession) -> None:
    (record,) = await _aircraft_with_maintenance(session, at(8))
    await AircraftService(session).complete_maintenance(record.id)

    assert await flag_maintenance(session, at(10)) == 0
    aircraft = await session.scalar(select(Aircraft))
    assert aircraft.status == AircraftStatus.AVAILABLE
    assert aircraft.next_maintenance_due is None


async def test_completion_moves_due_date_to_next_open_record(session: AsyncSession) -> None:
    later = datetime(2099, 1, 1, tzinfo=UTC)
    _, record = await _aircraft_with_maintenance(session, later, at(8))
    await AircraftService(session).complete_maintenance(record.id)

    assert await flag_maintenance(session, at(10)) == 0
    aircraft = await session.scalar(select(Aircraft))
    assert aircraft.status == AircraftStatus.AVAILABLE
    assert as_utc(aircraft.next_maintenance_due) == later
