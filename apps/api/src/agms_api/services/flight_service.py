"""Flight operations service - flights and the operations dashboard."""

from __future__ import annotations

import logging
from datetime import UTC, datetime
from typing import TYPE_CHECKING

from fastapi import HTTPException, status
from sqlalchemy import func, select

from agms_core.lifecycle import ACTIVE_FLIGHT_STATUSES, flight_is_active, flight_is_delayed
from agms_core.schemas import AircraftStatus, FlightStatus
from agms_db.models import Aircraft, Flight, Gate

from ..schemas.flights import (
    AircraftItem,
    FlightDetailsResponse,
    FlightItem,
    OperationalStatistics,
    OperationsDashboardResponse,
)

if TYPE_CHECKING:
    from sqlalchemy.ext.asyncio import AsyncSession

    from ..schemas.flights import FlightRequest

logger = logging.getLogger(__name__)

_ARRIVED_STATUSES = frozenset({FlightStatus.LANDED, FlightStatus.ARRIVED})


def _apply_status(
    flight: Flight, new_status: FlightStatus, remarks: str | None, now: datetime
) -> None:
    flight.status = new_status
    if new_status == FlightStatus.DEPARTED and flight.actual_departure is None:
        flight.actual_departure = now
    if new_status in _ARRIVED_STATUSES and flight.actual_arrival is None:
        flight.actual_arrival = now
    if remarks is not None:
        flight.remarks = remarks


class FlightService:
    """Handles flight CRUD, status changes and operational statistics."""

    def __init__(self, db: AsyncSession) -> None:
        self._db = db

    async def list_flights(
        self,
        flight_status: FlightStatus | None = None,
        origin: str | None = None,
        destination: str | None = None,
        airline_code: str | None = None,
    ) -> list[Flight]:
        """Flights by departure time; every given filter must match exactly."""
        stmt = select(Flight).order_by(Flight.scheduled_departure, Flight.flight_number)
        if flight_status is not None:
            stmt = stmt.where(Flight.status == flight_status)
        if origin is not None:
            stmt = stmt.where(Flight.origin == origin)
        if destination is not None:
            stmt = stmt.where(Flight.destination == destination)
        if airline_code is not None:
            stmt = stmt.where(Flight.airline_code == airline_code)
        result = await self._db.execute(stmt)
        return list(result.scalars().all())

    async def active_flights(self) -> list[Flight]:
        result = await self._db.execute(
            select(Flight)
            .where(Flight.status.in_(ACTIVE_FLIGHT_STATUSES))
            .order_by(Flight.scheduled_departure)
        )
        return list(result.scalars().all())

    async def get_flight(self, flight_number: str) -> Flight:
        result = await self._db.execute(
            select(Flight).where(Flight.flight_number == flight_number)
        )
        flight = result.scalar_one_or_none()
        if flight is None:
            raise HTTPException(
                status_code=status.HTTP_404_NOT_FOUND,
                detail=f"Flight {flight_number} not found",
            )
        return flight

    async def flight_details(self, flight_number: str) -> FlightDetailsResponse:
        flight = await self.get_flight(flight_number)
        aircraft = None
        if flight.aircraft_registration is not None:
            aircraft = await self._db.scalar(
                select(Aircraft).where(
                    Aircraft.registration_number == flight.aircraft_registration
                )
            )
        return FlightDetailsResponse(
            flight=FlightItem.model_validate(flight),
            delayed=flight_is_delayed(flight),
            active=flight_is_active(flight.status),
            aircraft=AircraftItem.model_validate(aircraft) if aircraft else None,
        )

    async def _validate_references(self, request: FlightRequest) -> None:
        """404 when the flight points at an unknown aircraft or gate."""
        if request.aircraft_registration is not None:
            found = await self._db.scalar(
                select(Aircraft.id).where(
                    Aircraft.registration_number == request.aircraft_registration
                )
            )
            if found is None:
                raise HTTPException(
                    status_code=status.HTTP_404_NOT_FOUND,
                    detail=f"Aircraft {request.aircraft_registration} not found",
                )
        for gate_id in {request.departure_gate, request.arrival_gate} - {None}:
            found = await self._db.scalar(select(Gate.id).where(Gate.gate_id == gate_id))
            if found is None:
                raise HTTPException(
                    status_code=status.HTTP_404_NOT_FOUND,
                    detail=f"Gate {gate_id} not found",
                )

    async def create_flight(self, request: FlightRequest) -> Flight:
        existing = await self._db.scalar(
            select(Flight.id).where(Flight.flight_number == request.flight_number)
        )
        if existing is not None:
            logger.warning("Flight already exists: %s", request.flight_number)
            raise HTTPException(
                status_code=status.HTTP_409_CONFLICT,
                detail=f"Flight {request.flight_number} already exists",
            )
        await self._validate_references(request)

        flight = Flight(**request.model_dump())
        self._db.add(flight)
        await self._db.flush()
        await self._db.refresh(flight)
        logger.info("Flight %s created", flight.flight_number)
        return flight

    async def update_flight(self, flight_number: str, request: FlightRequest) -> Flight:
        flight = await self.get_flight(flight_number)
        if request.flight_number != flight_number:
            clash = await self._db.scalar(
                select(Flight.id).where(Flight.flight_number == request.flight_number)
            )
            if clash is not None:
                raise HTTPException(
                    status_code=status.HTTP_409_CONFLICT,
                    detail=f"Flight {request.flight_number} already exists",
                )
        await self._validate_references(request)

        for key, value in request.model_dump().items():
            setattr(flight, key, value)
        await self._db.flush()
        await self._db.refresh(flight)
        logger.info("Flight %s updated", flight_number)
        return flight

    async def update_status(
        self,
        flight_number: str,
        new_status: FlightStatus,
        remarks: str | None = None,
    ) -> Flight:
        """Set the status, stamping actual times on departure and arrival."""
        flight = await self.get_flight(flight_number)
        _apply_status(flight, new_status, remarks, datetime.now(UTC))
        await self._db.flush()
        await self._db.refresh(flight)
        logger.info("Flight %s status -> %s", flight_number, new_status)
        return flight

    async def create_flights(self, requests: list[FlightRequest]) -> list[Flight]:
        """Create several flights; any rejection aborts the whole batch."""
        numbers = [r.flight_number for r in requests]
        repeated = sorted({n for n in numbers if numbers.count(n) > 1})
        if repeated:
            raise HTTPException(
                status_code=status.HTTP_409_CONFLICT,
                detail=f"Flight(s) repeated in batch: {', '.join(repeated)}",
            )
        flights = [await self.create_flight(request) for request in requests]
        logger.info("Batch created %d flight(s)", len(flights))
        return flights

    async def update_statuses(
        self,
        flight_numbers: list[str],
        new_status: FlightStatus,
        reason: str | None = None,
    ) -> tuple[list[Flight], list[str]]:
        """Apply one status to many flights.

        Returns the updated flights and the requested numbers that do not exist.
        """
        result = await self._db.execute(
            select(Flight)
            .where(Flight.flight_number.in_(flight_numbers))
            .order_by(Flight.flight_number)
        )
        flights = list(result.scalars().all())
        now = datetime.now(UTC)
        for flight in flights:
            _apply_status(flight, new_status, reason, now)
        await self._db.flush()

        found = {f.flight_number for f in flights}
        missing = sorted(set(flight_numbers) - found)
        if missing:
            logger.warning("Batch status update skipped unknown flight(s): %s", missing)
        logger.info("Batch moved %d flight(s) to %s", len(flights), new_status)
        return flights, missing

    async def delete_flight(self, flight_number: str) -> None:
        flight = await self.get_flight(flight_number)
        await self._db.delete(flight)
        await self._db.flush()
        logger.info("Flight %s deleted", flight_number)

    async def operational_statistics(self) -> OperationalStatistics:
        flights = await self._db.execute(
            select(Flight.status, func.count()).group_by(Flight.status)
        )
        flight_counts = {FlightStatus(s): n for s, n in flights.all()}
        aircraft = await self._db.execute(
            select(Aircraft.status, func.count()).group_by(Aircraft.status)
        )
        aircraft_counts = {AircraftStatus(s): n for s, n in aircraft.all()}
        return OperationalStatistics(
            total_flights=sum(flight_counts.values()),
            active_flights=sum(
                n for s, n in flight_counts.items() if s in ACTIVE_FLIGHT_STATUSES
            ),
            delayed_flights=flight_counts.get(FlightStatus.DELAYED, 0),
            cancelled_flights=flight_counts.get(FlightStatus.CANCELLED, 0),
            total_aircraft=sum(aircraft_counts.values()),
            available_aircraft=aircraft_counts.get(AircraftStatus.AVAILABLE, 0),
            aircraft_in_maintenance=aircraft_counts.get(AircraftStatus.MAINTENANCE, 0),
        )

    async def operations_dashboard(self) -> OperationsDashboardResponse:
        aircraft = await self._db.execute(
            select(Aircraft).order_by(Aircraft.registration_number)
        )
        return OperationsDashboardResponse(
            statistics=await self.operational_statistics(),
            active_flights=[FlightItem.model_validate(f) for f in await self.active_flights()],
            aircraft=[AircraftItem.model_validate(a) for a in aircraft.scalars()],
        )
