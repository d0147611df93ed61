"""Flight endpoints."""

from __future__ import annotations

from typing import Annotated

from fastapi import APIRouter, Query

from agms_api.dependencies import CurrentUser, DbDep, FlightStatusUser, OperationsUser
from agms_api.schemas.common import ErrorResponse, MessageResponse
from agms_api.schemas.flights import (
    FlightBatchRequest,
    FlightBatchStatusResponse,
    FlightBatchStatusUpdate,
    FlightDetailsResponse,
    FlightItem,
    FlightListResponse,
    FlightRequest,
    FlightStatusUpdate,
)
from agms_api.services.flight_service import FlightService
from agms_core.schemas import FlightStatus

router = APIRouter(prefix="/flights", tags=["flights"])


def _listing(flights: list) -> FlightListResponse:
    return FlightListResponse(
        flights=[FlightItem.model_validate(f) for f in flights],
        total=len(flights),
    )


@router.get("", response_model=FlightListResponse)
async def list_flights(
    user: CurrentUser,
    db: DbDep,
    status: Annotated[FlightStatus | None, Query()] = None,
    origin: Annotated[str | None, Query(min_length=3, max_length=4)] = None,
    destination: Annotated[str | None, Query(min_length=3, max_length=4)] = None,
    airline_code: Annotated[str | None, Query(min_length=2, max_length=3)] = None,
) -> FlightListResponse:
    flights = await FlightService(db).list_flights(status, origin, destination, airline_code)
    return _listing(flights)


@router.get("/active", response_model=FlightListResponse)
async def active_flights(user: CurrentUser, db: DbDep) -> FlightListResponse:
    """Flights boarding, departed, en route or approaching."""
    return _listing(await FlightService(db).active_flights())


@router.post(
    "/batch",
    response_model=FlightListResponse,
    status_code=201,
    responses={404: {"model": ErrorResponse}, 409: {"model": ErrorResponse}},
)
async def create_flights(
    request: FlightBatchRequest, user: OperationsUser, db: DbDep
) -> FlightListResponse:
    """Create every flight in the batch, or none of them."""
    return _listing(await FlightService(db).create_flights(request.flights))


@router.put("/batch/status", response_model=FlightBatchStatusResponse)
async def update_flight_statuses(
    request: FlightBatchStatusUpdate, user: FlightStatusUser, db: DbDep
) -> FlightBatchStatusResponse:
    updated, missing = await FlightService(db).update_statuses(
        request.flight_numbers, request.status, request.reason
    )
    return FlightBatchStatusResponse(
        updated=[FlightItem.model_validate(f) for f in updated],
        missing=missing,
    )


@router.get(
    "/{flight_number}",
    response_model=FlightDetailsResponse,
    responses={404: {"model": ErrorResponse}},
)
async def flight_details(
    flight_number: str, user: CurrentUser, db: DbDep
) -> FlightDetailsResponse:
    return await FlightService(db).flight_details(flight_number)


@router.post(
    "",
    response_model=FlightItem,
    status_code=201,
    responses={404: {"model": ErrorResponse}, 409: {"model": ErrorResponse}},
)
async def create_flight(
    request: FlightRequest, user: OperationsUser, db: DbDep
) -> FlightItem:
    return FlightItem.model_validate(await FlightService(db).create_flight(request))


@router.put(
    "/{flight_number}",
    response_model=FlightItem,
    responses={404: {"model": ErrorResponse}, 409: {"model": ErrorResponse}},
)
async def update_flight(
    flight_number: str,
    request: FlightRequest,
    user: OperationsUser,
    db: DbDep,
) -> FlightItem:
    flight = await FlightService(db).update_flight(flight_number, request)
    return FlightItem.model_validate(flight)


@router.put(
    "/{flight_number}/status",
    response_model=FlightItem,
    responses={404: {"model": ErrorResponse}},
)
async def update_flight_status(
    flight_number: str,
    request: FlightStatusUpdate,
    user: FlightStatusUser,
    db: DbDep,
) -> FlightItem:
    flight = await FlightService(db).update_status(
        flight_number, request.status, request.remarks
    )
    return FlightItem.model_validate(flight)


@router.delete(
    "/{flight_number}",
    response_model=MessageResponse,
    responses={404: {"model": ErrorResponse}},
)
async def delete_flight(
    flight_number: str, user: OperationsUser, db: DbDep
) -> MessageResponse:
    await FlightService(db).delete_flight(flight_number)
    return MessageResponse(message=f"Flight {flight_number} deleted")
