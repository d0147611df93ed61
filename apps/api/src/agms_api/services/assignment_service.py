"""Gate assignment service - conflict-checked booking of gates to flights.

Every write that places a window on a gate runs inside the request
transaction as: lock the gate row, load the gate's live assignments, scan
them for overlaps, then insert or update.  The row lock serialises
concurrent bookings of the same gate; on PostgreSQL the
``no_gate_assignment_overlap`` exclusion constraint backs it up.
"""

from __future__ import annotations

import logging
from datetime import UTC, datetime
from typing import TYPE_CHECKING

from fastapi import HTTPException, status
from sqlalchemy import select
from sqlalchemy.exc import IntegrityError

from agms_core.conflict import as_utc, find_conflicts
from agms_core.lifecycle import InvalidTransitionError, apply_transition, is_active
from agms_db.models import Assignment, Gate

from ..schemas.assignments import ConflictCheckResponse

if TYPE_CHECKING:
    from collections.abc import Sequence
    from uuid import UUID

    from sqlalchemy.ext.asyncio import AsyncSession

    from agms_core.schemas import AssignmentStatus

    from ..schemas.assignments import (
        AssignmentWindow,
        CreateAssignmentRequest,
        UpdateAssignmentRequest,
    )

logger = logging.getLogger(__name__)


def conflict_error(gate_id: str, conflicting: Sequence[Assignment]) -> HTTPException:
    """409 carrying the ids of the assignments already holding the window."""
    return HTTPException(
        status_code=status.HTTP_409_CONFLICT,
        detail={
            "message": f"Time conflict detected for gate {gate_id}",
            "conflicting_ids": [str(a.id) for a in conflicting],
        },
    )


class AssignmentService:
    """Handles gate assignment booking, lookup and lifecycle."""

    def __init__(self, db: AsyncSession) -> None:
        self._db = db

    async def _lock_gate(self, gate_id: str) -> Gate:
        result = await self._db.execute(
            select(Gate).where(Gate.gate_id == gate_id).with_for_update()
        )
        gate = result.scalar_one_or_none()
        if gate is None:
            raise HTTPException(
                status_code=status.HTTP_404_NOT_FOUND,
                detail=f"Gate {gate_id} not found",
            )
        return gate

    async def _live_assignments(self, gate_id: str) -> list[Assignment]:
        result = await self._db.execute(
            select(Assignment)
            .where(Assignment.gate_id == gate_id, Assignment.cancelled.is_(False))
            .order_by(Assignment.start_time)
        )
        return list(result.scalars().all())

    async def _flush_or_conflict(self, gate_id: str) -> None:
        try:
            await self._db.flush()
        except IntegrityError as exc:
            # Exclusion constraint caught an overlap the scan could not see.
            logger.warning("Overlap rejected by database for gate %s", gate_id)
            raise conflict_error(gate_id, []) from exc

    async def create_assignment(
        self, request: CreateAssignmentRequest, assigned_by: str | None = None
    ) -> Assignment:
        """Book *request*'s window on its gate or raise 404/409."""
        await self._lock_gate(request.gate_id)
        conflicting = find_conflicts(request, await self._live_assignments(request.gate_id))
        if conflicting:
            logger.info(
                "Rejected %s on gate %s: overlaps %d assignment(s)",
                request.flight_number,
                request.gate_id,
                len(conflicting),
            )
            raise conflict_error(request.gate_id, conflicting)

        assignment = Assignment(
            gate_id=request.gate_id,
            flight_number=request.flight_number,
            start_time=request.start_time,
            end_time=request.end_time,
            assigned_by=assigned_by,
        )
        self._db.add(assignment)
        await self._flush_or_conflict(request.gate_id)
        await self._db.refresh(assignment)
        logger.info(
            "Assigned %s to gate %s (%s - %s)",
            assignment.flight_number,
            assignment.gate_id,
            request.start_time.isoformat(),
            request.end_time.isoformat(),
        )
        return assignment

    async def check_conflicts(self, window: AssignmentWindow) -> ConflictCheckResponse:
        """Dry run of the booking check; never writes."""
        gate = await self._db.execute(select(Gate.id).where(Gate.gate_id == window.gate_id))
        if gate.scalar_one_or_none() is None:
            raise HTTPException(
                status_code=status.HTTP_404_NOT_FOUND,
                detail=f"Gate {window.gate_id} not found",
            )
        conflicting = find_conflicts(window, await self._live_assignments(window.gate_id))
        return ConflictCheckResponse(
            gate_id=window.gate_id,
            conflict=bool(conflicting),
            conflicting_ids=[a.id for a in conflicting],
        )

    async def get_assignment(self, assignment_id: UUID) -> Assignment:
        assignment = await self._db.get(Assignment, assignment_id)
        if assignment is None:
            raise HTTPException(
                status_code=status.HTTP_404_NOT_FOUND,
                detail="Assignment not found",
            )
        return assignment

    async def list_for_gate(self, gate_id: str) -> list[Assignment]:
        result = await self._db.execute(
            select(Assignment)
            .where(Assignment.gate_id == gate_id)
            .order_by(Assignment.start_time)
        )
        return list(result.scalars().all())

    async def current_and_next(
        self, gate_id: str, now: datetime | None = None
    ) -> tuple[Assignment | None, Assignment | None]:
        """Assignment occupying *gate_id* at *now* and the next one to start."""
        now = as_utc(now or datetime.now(UTC))
        live = await self._live_assignments(gate_id)
        current = next((a for a in live if is_active(a, now)), None)
        upcoming = next((a for a in live if as_utc(a.start_time) > now), None)
        return current, upcoming

    async def current_assignments(self, now: datetime | None = None) -> dict[str, Assignment]:
        now = as_utc(now or datetime.now(UTC))
        result = await self._db.execute(
            select(Assignment)
            .where(Assignment.cancelled.is_(False))
            .order_by(Assignment.gate_id, Assignment.start_time)
        )
        current: dict[str, Assignment] = {}
        for assignment in result.scalars():
            if assignment.gate_id not in current and is_active(assignment, now):
                current[assignment.gate_id] = assignment
        return current

    async def update_assignment(
        self, assignment_id: UUID, request: UpdateAssignmentRequest
    ) -> Assignment:
        """Move an assignment; the new window is checked against all others."""
        assignment = await self.get_assignment(assignment_id)
        await self._lock_gate(request.gate_id)

        if not assignment.cancelled:
            others = [
                a
                for a in await self._live_assignments(request.gate_id)
                if a.id != assignment.id
            ]
            conflicting = find_conflicts(request, others)
            if conflicting:
                logger.info(
                    "Rejected update of %s on gate %s: overlaps %d assignment(s)",
                    assignment_id,
                    request.gate_id,
                    len(conflicting),
                )
                raise conflict_error(request.gate_id, conflicting)

        assignment.gate_id = request.gate_id
        assignment.flight_number = request.flight_number
        assignment.start_time = request.start_time
        assignment.end_time = request.end_time
        await self._flush_or_conflict(request.gate_id)
        await self._db.refresh(assignment)
        logger.info("Assignment %s updated", assignment_id)
        return assignment

    async def update_status(
        self, assignment_id: UUID, new_status: AssignmentStatus
    ) -> Assignment:
        assignment = await self.get_assignment(assignment_id)
        try:
            apply_transition(assignment, new_status)
        except InvalidTransitionError as exc:
            raise HTTPException(
                status_code=status.HTTP_409_CONFLICT,
                detail=str(exc),
            ) from exc
        await self._db.flush()
        await self._db.refresh(assignment)
        logger.info("Assignment %s moved to %s", assignment_id, new_status)
        return assignment

    async def delete_assignment(self, assignment_id: UUID) -> None:
        assignment = await self.get_assignment(assignment_id)
        await self._db.delete(assignment)
        await self._db.flush()
        logger.info("Assignment %s deleted", assignment_id)

    async def schedule_report(self, now: datetime | None = None) -> str:
        """Plain-text schedule of every gate, one block per gate."""
        now = as_utc(now or datetime.now(UTC))
        gates = await self._db.execute(select(Gate.gate_id).order_by(Gate.gate_id))
        assignments = await self._db.execute(
            select(Assignment).order_by(Assignment.gate_id, Assignment.start_time)
        )
        by_gate: dict[str, list[Assignment]] = {gate_id: [] for gate_id in gates.scalars()}
        for assignment in assignments.scalars():
            by_gate.setdefault(assignment.gate_id, []).append(assignment)

        lines = [
            "Gate Schedule Report",
            f"Generated: {now:%Y-%m-%d %H:%M} UTC",
            "",
        ]
        for gate_id, booked in by_gate.items():
            lines.append(f"Gate: {gate_id}")
            for a in booked:
                lines.append(
                    f"  {a.flight_number}: "
                    f"{as_utc(a.start_time):%Y-%m-%d %H:%M} - "
                    f"{as_utc(a.end_time):%Y-%m-%d %H:%M} [{a.status}]"
                )
            lines.append("")
        return "\n".join(lines)
