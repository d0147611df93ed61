"""Gate assignment endpoints - booking, conflict checks and lifecycle."""

from __future__ import annotations

import uuid

from fastapi import APIRouter
from fastapi.responses import PlainTextResponse

from agms_api.dependencies import CurrentUser, DbDep, GateOperator
from agms_api.schemas.assignments import (
    AssignmentItem,
    AssignmentWindow,
    ConflictCheckResponse,
    CreateAssignmentRequest,
    CurrentAssignmentsResponse,
    UpdateAssignmentRequest,
)
from agms_api.schemas.common import (
    ConflictErrorResponse,
    ErrorResponse,
    MessageResponse,
)
from agms_api.services.assignment_service import AssignmentService
from agms_core.schemas import AssignmentStatus

router = APIRouter(prefix="/assignments", tags=["assignments"])


@router.post(
    "",
    response_model=AssignmentItem,
    status_code=201,
    responses={404: {"model": ErrorResponse}, 409: {"model": ConflictErrorResponse}},
)
async def create_assignment(
    request: CreateAssignmentRequest,
    operator: GateOperator,
    db: DbDep,
) -> AssignmentItem:
    """Book a gate for a flight; 409 if the window overlaps a live assignment."""
    assignment = await AssignmentService(db).create_assignment(
        request, assigned_by=operator.username
    )
    return AssignmentItem.model_validate(assignment)


@router.post(
    "/check",
    response_model=ConflictCheckResponse,
    responses={404: {"model": ErrorResponse}},
)
async def check_assignment(
    window: AssignmentWindow,
    user: CurrentUser,
    db: DbDep,
) -> ConflictCheckResponse:
    return await AssignmentService(db).check_conflicts(window)


@router.get("/current", response_model=CurrentAssignmentsResponse)
async def current_assignments(user: CurrentUser, db: DbDep) -> CurrentAssignmentsResponse:
    current = await AssignmentService(db).current_assignments()
    return CurrentAssignmentsResponse(
        assignments={
            gate_id: AssignmentItem.model_validate(a) for gate_id, a in current.items()
        }
    )


@router.get("/schedule", response_class=PlainTextResponse)
async def download_schedule(user: CurrentUser, db: DbDep) -> PlainTextResponse:
    report = await AssignmentService(db).schedule_report()
    return PlainTextResponse(
        report,
        headers={"Content-Disposition": "attachment; filename=gate-schedule.txt"},
    )


@router.get(
    "/{assignment_id}",
    response_model=AssignmentItem,
    responses={404: {"model": ErrorResponse}},
)
async def get_assignment(
    assignment_id: uuid.UUID, user: CurrentUser, db: DbDep
) -> AssignmentItem:
    return AssignmentItem.model_validate(
        await AssignmentService(db).get_assignment(assignment_id)
    )


@router.put(
    "/{assignment_id}",
    response_model=AssignmentItem,
    responses={404: {"model": ErrorResponse}, 409: {"model": ConflictErrorResponse}},
)
async def update_assignment(
    assignment_id: uuid.UUID,
    request: UpdateAssignmentRequest,
    operator: GateOperator,
    db: DbDep,
) -> AssignmentItem:
    assignment = await AssignmentService(db).update_assignment(assignment_id, request)
    return AssignmentItem.model_validate(assignment)


@router.put(
    "/{assignment_id}/status/{new_status}",
    response_model=AssignmentItem,
    responses={404: {"model": ErrorResponse}, 409: {"model": ErrorResponse}},
)
async def update_assignment_status(
    assignment_id: uuid.UUID,
    new_status: AssignmentStatus,
    operator: GateOperator,
    db: DbDep,
) -> AssignmentItem:
    assignment = await AssignmentService(db).update_status(assignment_id, new_status)
    return AssignmentItem.model_validate(assignment)


@router.delete(
    "/{assignment_id}",
    response_model=MessageResponse,
    responses={404: {"model": ErrorResponse}},
)
async def delete_assignment(
    assignment_id: uuid.UUID, operator: GateOperator, db: DbDep
) -> MessageResponse:
    await AssignmentService(db).delete_assignment(assignment_id)
    return MessageResponse(message="Assignment deleted")
