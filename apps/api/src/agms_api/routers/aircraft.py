"""Aircraft and maintenance endpoints."""

from __future__ import annotations

import uuid

from fastapi import APIRouter

from agms_api.dependencies import CurrentUser, DbDep, OperationsUser
from agms_api.schemas.common import ErrorResponse
from agms_api.schemas.flights import (
    AircraftItem,
    AircraftStatusUpdate,
    CompleteMaintenanceRequest,
    MaintenanceItem,
    MaintenanceStatusUpdate,
    RegisterAircraftRequest,
    ScheduleMaintenanceRequest,
)
from agms_api.services.aircraft_service import AircraftService

router = APIRouter(tags=["aircraft"])


@router.get("/aircraft", response_model=list[AircraftItem])
async def list_aircraft(user: CurrentUser, db: DbDep) -> list[AircraftItem]:
    return [AircraftItem.model_validate(a) for a in await AircraftService(db).list_aircraft()]


@router.get("/aircraft/available", response_model=list[AircraftItem])
async def available_aircraft(user: CurrentUser, db: DbDep) -> list[AircraftItem]:
    aircraft = await AircraftService(db).available_aircraft()
    return [AircraftItem.model_validate(a) for a in aircraft]


@router.get(
    "/aircraft/{registration}",
    response_model=AircraftItem,
    responses={404: {"model": ErrorResponse}},
)
async def get_aircraft(registration: str, user: CurrentUser, db: DbDep) -> AircraftItem:
    return AircraftItem.model_validate(await AircraftService(db).get_aircraft(registration))


@router.post(
    "/aircraft",
    response_model=AircraftItem,
    status_code=201,
    responses={409: {"model": ErrorResponse}},
)
async def register_aircraft(
    request: RegisterAircraftRequest, user: OperationsUser, db: DbDep
) -> AircraftItem:
    aircraft = await AircraftService(db).register_aircraft(request)
    return AircraftItem.model_validate(aircraft)


@router.put(
    "/aircraft/{registration}/status",
    response_model=AircraftItem,
    responses={404: {"model": ErrorResponse}},
)
async def update_aircraft_status(
    registration: str,
    request: AircraftStatusUpdate,
    user: OperationsUser,
    db: DbDep,
) -> AircraftItem:
    aircraft = await AircraftService(db).update_status(
        registration, request.status, request.location
    )
    return AircraftItem.model_validate(aircraft)


@router.post(
    "/aircraft/{registration}/maintenance",
    response_model=MaintenanceItem,
    status_code=201,
    responses={404: {"model": ErrorResponse}},
)
async def schedule_maintenance(
    registration: str,
    request: ScheduleMaintenanceRequest,
    user: OperationsUser,
    db: DbDep,
) -> MaintenanceItem:
    """Book maintenance; the aircraft is taken out of service."""
    record = await AircraftService(db).schedule_maintenance(registration, request)
    return MaintenanceItem.model_validate(record)


@router.get(
    "/aircraft/{registration}/maintenance",
    response_model=list[MaintenanceItem],
    responses={404: {"model": ErrorResponse}},
)
async def maintenance_history(
    registration: str, user: CurrentUser, db: DbDep
) -> list[MaintenanceItem]:
    records = await AircraftService(db).maintenance_records(registration)
    return [MaintenanceItem.model_validate(r) for r in records]


@router.put(
    "/maintenance/{record_id}/status",
    response_model=MaintenanceItem,
    responses={404: {"model": ErrorResponse}, 409: {"model": ErrorResponse}},
)
async def update_maintenance_status(
    record_id: uuid.UUID,
    request: MaintenanceStatusUpdate,
    user: OperationsUser,
    db: DbDep,
) -> MaintenanceItem:
    record = await AircraftService(db).update_maintenance_status(
        record_id, request.status, request.notes
    )
    return MaintenanceItem.model_validate(record)


@router.post(
    "/maintenance/{record_id}/complete",
    response_model=MaintenanceItem,
    responses={404: {"model": ErrorResponse}, 409: {"model": ErrorResponse}},
)
async def complete_maintenance(
    record_id: uuid.UUID,
    request: CompleteMaintenanceRequest,
    user: OperationsUser,
    db: DbDep,
) -> MaintenanceItem:
    """Close the record and return the aircraft to AVAILABLE."""
    record = await AircraftService(db).complete_maintenance(record_id, request.notes)
    return MaintenanceItem.model_validate(record)
