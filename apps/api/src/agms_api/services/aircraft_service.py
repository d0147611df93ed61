"""Aircraft registry and maintenance scheduling."""

from __future__ import annotations

import logging
from datetime import UTC, datetime
from typing import TYPE_CHECKING

from fastapi import HTTPException, status
from sqlalchemy import select

from agms_core.conflict import as_utc
from agms_core.schemas import AircraftStatus, MaintenanceStatus
from agms_db.models import Aircraft, MaintenanceRecord

if TYPE_CHECKING:
    from uuid import UUID

    from sqlalchemy.ext.asyncio import AsyncSession

    from ..schemas.flights import RegisterAircraftRequest, ScheduleMaintenanceRequest

logger = logging.getLogger(__name__)


class AircraftService:
    """Handles aircraft registration, status and maintenance records."""

    def __init__(self, db: AsyncSession) -> None:
        self._db = db

    async def list_aircraft(self) -> list[Aircraft]:
        result = await self._db.execute(
            select(Aircraft).order_by(Aircraft.registration_number)
        )
        return list(result.scalars().all())

    async def available_aircraft(self) -> list[Aircraft]:
        result = await self._db.execute(
            select(Aircraft)
            .where(Aircraft.status == AircraftStatus.AVAILABLE)
            .order_by(Aircraft.registration_number)
        )
        return list(result.scalars().all())

    async def get_aircraft(self, registration: str) -> Aircraft:
        aircraft = await self._db.scalar(
            select(Aircraft).where(Aircraft.registration_number == registration)
        )
        if aircraft is None:
            raise HTTPException(
                status_code=status.HTTP_404_NOT_FOUND,
                detail=f"Aircraft {registration} not found",
            )
        return aircraft

    async def register_aircraft(self, request: RegisterAircraftRequest) -> Aircraft:
        logger.info("Registering new aircraft: %s", request.registration_number)
        existing = await self._db.scalar(
            select(Aircraft.id).where(
                Aircraft.registration_number == request.registration_number
            )
        )
        if existing is not None:
            logger.warning("Aircraft already registered: %s", request.registration_number)
            raise HTTPException(
                status_code=status.HTTP_409_CONFLICT,
                detail=f"Aircraft {request.registration_number} already registered",
            )
        aircraft = Aircraft(
            registration_number=request.registration_number,
            model=request.model,
            aircraft_type=request.aircraft_type,
            status=AircraftStatus.AVAILABLE,
            current_location=request.current_location,
        )
        self._db.add(aircraft)
        await self._db.flush()
        await self._db.refresh(aircraft)
        return aircraft

    async def update_status(
        self,
        registration: str,
        new_status: AircraftStatus,
        location: str | None = None,
    ) -> Aircraft:
        aircraft = await self.get_aircraft(registration)
        aircraft.status = new_status
        if location is not None:
            aircraft.current_location = location
        await self._db.flush()
        await self._db.refresh(aircraft)
        logger.info(
            "Aircraft %s status -> %s at %s", registration, new_status, location
        )
        return aircraft

    async def schedule_maintenance(
        self, registration: str, request: ScheduleMaintenanceRequest
    ) -> MaintenanceRecord:
        """Book maintenance and take the aircraft out of service."""
        aircraft = await self.get_aircraft(registration)
        record = MaintenanceRecord(
            aircraft_registration=registration,
            scheduled_date=request.scheduled_date,
            maintenance_type=request.maintenance_type,
            description=request.description,
            status=MaintenanceStatus.SCHEDULED,
        )
        self._db.add(record)
        aircraft.status = AircraftStatus.MAINTENANCE
        aircraft.next_maintenance_due = request.scheduled_date
        await self._db.flush()
        await self._db.refresh(record)
        logger.info(
            "Maintenance %s scheduled for %s on %s",
            request.maintenance_type,
            registration,
            request.scheduled_date.isoformat(),
        )
        return record

    async def maintenance_records(self, registration: str) -> list[MaintenanceRecord]:
        await self.get_aircraft(registration)
        result = await self._db.execute(
            select(MaintenanceRecord)
            .where(MaintenanceRecord.aircraft_registration == registration)
            .order_by(MaintenanceRecord.scheduled_date)
        )
        return list(result.scalars().all())

    async def _get_record(self, record_id: UUID) -> MaintenanceRecord:
        record = await self._db.get(MaintenanceRecord, record_id)
        if record is None:
            raise HTTPException(
                status_code=status.HTTP_404_NOT_FOUND,
                detail="Maintenance record not found",
            )
        return record

    async def update_maintenance_status(
        self,
        record_id: UUID,
        new_status: MaintenanceStatus,
        notes: str | None = None,
    ) -> MaintenanceRecord:
        if new_status == MaintenanceStatus.COMPLETED:
            return await self.complete_maintenance(record_id, notes)
        record = await self._get_record(record_id)
        record.status = new_status
        if notes is not None:
            record.notes = notes
        await self._db.flush()
        await self._db.refresh(record)
        logger.info("Maintenance %s status -> %s", record_id, new_status)
        return record

    async def _next_scheduled_date(
        self, registration: str, after: datetime
    ) -> datetime | None:
        """Earliest still-open maintenance date for *registration* past *after*."""
        result = await self._db.execute(
            select(MaintenanceRecord.scheduled_date)
            .where(
                MaintenanceRecord.aircraft_registration == registration,
                MaintenanceRecord.status == MaintenanceStatus.SCHEDULED,
            )
            .order_by(MaintenanceRecord.scheduled_date)
        )
        return next((d for d in result.scalars() if as_utc(d) > after), None)

    async def complete_maintenance(
        self, record_id: UUID, notes: str | None = None
    ) -> MaintenanceRecord:
        """Close a maintenance record and return the aircraft to service."""
        record = await self._get_record(record_id)
        if record.status == MaintenanceStatus.CANCELLED:
            raise HTTPException(
                status_code=status.HTTP_409_CONFLICT,
                detail="Cancelled maintenance cannot be completed",
            )
        completed_at = datetime.now(UTC)
        record.status = MaintenanceStatus.COMPLETED
        record.completed_at = completed_at
        if notes is not None:
            record.notes = notes

        aircraft = await self.get_aircraft(record.aircraft_registration)
        aircraft.status = AircraftStatus.AVAILABLE
        covered_until = max(as_utc(record.scheduled_date), completed_at)
        if (
            aircraft.next_maintenance_due is not None
            and as_utc(aircraft.next_maintenance_due) <= covered_until
        ):
            aircraft.next_maintenance_due = await self._next_scheduled_date(
                record.aircraft_registration, after=covered_until
            )
        await self._db.flush()
        await self._db.refresh(record)
        logger.info(
            "Maintenance %s completed, %s back in service",
            record_id,
            record.aircraft_registration,
        )
        return record
