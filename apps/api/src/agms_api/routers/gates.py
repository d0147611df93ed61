"""Gate registry endpoints plus per-gate assignment views."""

from __future__ import annotations

import logging
from typing import Annotated

from fastapi import APIRouter, Path, Query

from agms_api.cache.cache_keys import gate_list_key, gate_statistics_key
from agms_api.cache.redis_client import cached_model
from agms_api.config import settings
from agms_api.dependencies import AdminUser, CurrentUser, DbDep, GateOperator
from agms_api.schemas.assignments import (
    AssignmentItem,
    CurrentNextResponse,
    GateAssignmentsResponse,
)
from agms_api.schemas.common import ErrorResponse, MessageResponse
from agms_api.schemas.gates import (
    CreateGateRequest,
    GateItem,
    GateListResponse,
    GateStatistics,
    GateStatusUpdate,
    UpdateGateRequest,
)
from agms_api.services.assignment_service import AssignmentService
from agms_api.services.gate_service import GateService
from agms_core.gates import GATE_ID_PATTERN, TERMINAL_PATTERN
from agms_core.schemas import AircraftType

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/gates", tags=["gates"])

GateIdPath = Annotated[str, Path(pattern=GATE_ID_PATTERN)]


@router.get("", response_model=GateListResponse)
async def list_gates(
    user: CurrentUser,
    db: DbDep,
    terminal: Annotated[str | None, Query(pattern=TERMINAL_PATTERN)] = None,
) -> GateListResponse:
    async def load() -> GateListResponse:
        gates = await GateService(db).list_gates(terminal)
        return GateListResponse(
            gates=[GateItem.model_validate(g) for g in gates],
            total=len(gates),
        )

    return await cached_model(
        gate_list_key(terminal), GateListResponse, settings.gate_cache_ttl, load
    )


@router.get("/statistics", response_model=GateStatistics)
async def gate_statistics(user: CurrentUser, db: DbDep) -> GateStatistics:
    return await cached_model(
        gate_statistics_key(),
        GateStatistics,
        settings.statistics_cache_ttl,
        GateService(db).statistics,
    )


@router.get("/compatible", response_model=GateListResponse)
async def compatible_gates(
    user: CurrentUser,
    db: DbDep,
    aircraft_type: Annotated[AircraftType, Query()],
) -> GateListResponse:
    """Available gates able to take *aircraft_type*."""
    gates = await GateService(db).compatible_gates(aircraft_type)
    return GateListResponse(
        gates=[GateItem.model_validate(g) for g in gates],
        total=len(gates),
    )


@router.get(
    "/{gate_id}",
    response_model=GateItem,
    responses={404: {"model": ErrorResponse}},
)
async def get_gate(gate_id: GateIdPath, user: CurrentUser, db: DbDep) -> GateItem:
    return GateItem.model_validate(await GateService(db).get_gate(gate_id))


@router.post(
    "",
    response_model=GateItem,
    status_code=201,
    responses={409: {"model": ErrorResponse}},
)
async def create_gate(
    request: CreateGateRequest,
    admin: AdminUser,
    db: DbDep,
) -> GateItem:
    return GateItem.model_validate(await GateService(db).create_gate(request))


@router.put(
    "/{gate_id}",
    response_model=GateItem,
    responses={404: {"model": ErrorResponse}},
)
async def update_gate(
    gate_id: GateIdPath,
    request: UpdateGateRequest,
    admin: AdminUser,
    db: DbDep,
) -> GateItem:
    return GateItem.model_validate(await GateService(db).update_gate(gate_id, request))


@router.put(
    "/{gate_id}/status",
    response_model=GateItem,
    responses={404: {"model": ErrorResponse}},
)
async def update_gate_status(
    gate_id: GateIdPath,
    request: GateStatusUpdate,
    operator: GateOperator,
    db: DbDep,
) -> GateItem:
    gate = await GateService(db).update_status(gate_id, request.status)
    return GateItem.model_validate(gate)


@router.delete(
    "/{gate_id}",
    response_model=MessageResponse,
    responses={404: {"model": ErrorResponse}},
)
async def delete_gate(gate_id: GateIdPath, admin: AdminUser, db: DbDep) -> MessageResponse:
    """Delete a gate and every assignment booked on it."""
    await GateService(db).delete_gate(gate_id)
    return MessageResponse(message=f"Gate {gate_id} deleted")


@router.get(
    "/{gate_id}/assignments",
    response_model=GateAssignmentsResponse,
    responses={404: {"model": ErrorResponse}},
)
async def gate_assignments(
    gate_id: GateIdPath, user: CurrentUser, db: DbDep
) -> GateAssignmentsResponse:
    await GateService(db).get_gate(gate_id)
    assignments = await AssignmentService(db).list_for_gate(gate_id)
    return GateAssignmentsResponse(
        gate_id=gate_id,
        assignments=[AssignmentItem.model_validate(a) for a in assignments],
        total=len(assignments),
    )


@router.get(
    "/{gate_id}/assignments/current-next",
    response_model=CurrentNextResponse,
    responses={404: {"model": ErrorResponse}},
)
async def gate_current_and_next(
    gate_id: GateIdPath, user: CurrentUser, db: DbDep
) -> CurrentNextResponse:
    """The assignment occupying the gate now and the next one to start."""
    await GateService(db).get_gate(gate_id)
    current, upcoming = await AssignmentService(db).current_and_next(gate_id)
    return CurrentNextResponse(
        gate_id=gate_id,
        current=AssignmentItem.model_validate(current) if current else None,
        next=AssignmentItem.model_validate(upcoming) if upcoming else None,
    )
