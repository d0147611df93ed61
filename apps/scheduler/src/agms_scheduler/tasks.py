"""Periodic lifecycle work on assignments and aircraft."""

from __future__ import annotations

import asyncio
import logging
from datetime import UTC, datetime
from typing import TYPE_CHECKING

from sqlalchemy import select

from agms_core.conflict import as_utc
from agms_core.lifecycle import TERMINAL_STATUSES, scheduled_status
from agms_core.schemas import AircraftStatus
from agms_db.models import Aircraft, Assignment

from .celery_app import app

if TYPE_CHECKING:
    from sqlalchemy.ext.asyncio import AsyncSession

logger = logging.getLogger(__name__)


async def advance_assignments(session: AsyncSession, now: datetime) -> int:
    """Apply the clock-implied status to every live assignment.

    Returns the number of assignments whose status changed.
    """
    result = await session.execute(
        select(Assignment).where(
            Assignment.cancelled.is_(False),
            Assignment.status.not_in(TERMINAL_STATUSES),
        )
    )
    changed = 0
    for assignment in result.scalars():
        target = scheduled_status(assignment, now)
        if target != assignment.status:
            logger.debug(
                "Assignment %s on %s: %s -> %s",
                assignment.id,
                assignment.gate_id,
                assignment.status,
                target,
            )
            assignment.status = target
            changed += 1
    await session.flush()
    return changed


async def flag_maintenance(session: AsyncSession, now: datetime) -> int:
    """Put aircraft whose maintenance is due into MAINTENANCE.

    Returns the number of aircraft taken out of service.
    """
    result = await session.execute(
        select(Aircraft).where(
            Aircraft.next_maintenance_due.is_not(None),
            Aircraft.status != AircraftStatus.MAINTENANCE,
        )
    )
    flagged = 0
    for aircraft in result.scalars():
        if as_utc(aircraft.next_maintenance_due) <= as_utc(now):
            logger.info("Maintenance due for %s", aircraft.registration_number)
            aircraft.status = AircraftStatus.MAINTENANCE
            flagged += 1
    await session.flush()
    return flagged


@app.task(name="agms_scheduler.tasks.advance_assignment_statuses")
def advance_assignment_statuses() -> dict:
    async def _run() -> int:
        from agms_db.database import async_session_factory

        async with async_session_factory() as session:
            count = await advance_assignments(session, datetime.now(UTC))
            await session.commit()
            return count

    count = asyncio.run(_run())
    logger.info("Advanced %d assignment status(es)", count)
    return {"changed": count, "timestamp": datetime.now(UTC).isoformat()}


@app.task(name="agms_scheduler.tasks.flag_due_maintenance")
def flag_due_maintenance() -> dict:
    async def _run() -> int:
        from agms_db.database import async_session_factory

        async with async_session_factory() as session:
            count = await flag_maintenance(session, datetime.now(UTC))
            await session.commit()
            return count

    count = asyncio.run(_run())
    logger.info("Flagged %d aircraft for maintenance", count)
    return {"flagged": count, "timestamp": datetime.now(UTC).isoformat()}
