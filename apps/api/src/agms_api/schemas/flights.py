"""Flight, aircraft and maintenance schemas."""

from __future__ import annotations

import uuid  # noqa: TC003
from datetime import datetime

from pydantic import BaseModel, ConfigDict, Field, model_validator

from agms_core.gates import GATE_ID_PATTERN
from agms_core.schemas import (
    AircraftStatus,
    AircraftType,
    FlightStatus,
    MaintenanceStatus,
    MaintenanceType,
)

from .assignments import UTCDateTime


class FlightItem(BaseModel):
    flight_number: str
    airline_code: str
    origin: str
    destination: str
    scheduled_departure: datetime
    scheduled_arrival: datetime
    actual_departure: datetime | None = None
    actual_arrival: datetime | None = None
    aircraft_registration: str | None = None
    status: FlightStatus
    departure_gate: str | None = None
    arrival_gate: str | None = None
    passenger_count: int
    remarks: str | None = None
    model_config = ConfigDict(from_attributes=True)


class FlightListResponse(BaseModel):
    flights: list[FlightItem]
    total: int


class FlightRequest(BaseModel):
    """Create or fully replace a flight."""

    flight_number: str = Field(min_length=2, max_length=10)
    airline_code: str = Field(min_length=2, max_length=3)
    origin: str = Field(min_length=3, max_length=4)
    destination: str = Field(min_length=3, max_length=4)
    scheduled_departure: UTCDateTime
    scheduled_arrival: UTCDateTime
    actual_departure: UTCDateTime | None = None
    actual_arrival: UTCDateTime | None = None
    aircraft_registration: str | None = Field(default=None, max_length=10)
    status: FlightStatus = FlightStatus.SCHEDULED
    departure_gate: str | None = Field(default=None, pattern=GATE_ID_PATTERN)
    arrival_gate: str | None = Field(default=None, pattern=GATE_ID_PATTERN)
    passenger_count: int = Field(default=0, ge=0)
    remarks: str | None = None

    @model_validator(mode="after")
    def _validate_schedule(self) -> FlightRequest:
        if self.scheduled_arrival <= self.scheduled_departure:
            msg = "scheduled_arrival must be after scheduled_departure"
            raise ValueError(msg)
        return self


class FlightStatusUpdate(BaseModel):
    status: FlightStatus
    remarks: str | None = None


class FlightBatchRequest(BaseModel):
    flights: list[FlightRequest] = Field(min_length=1)


class FlightBatchStatusUpdate(BaseModel):
    """One status, and an optional reason stored as remarks, for many flights."""

    flight_numbers: list[str] = Field(min_length=1)
    status: FlightStatus
    reason: str | None = None


class FlightBatchStatusResponse(BaseModel):
    updated: list[FlightItem]
    missing: list[str]


class AircraftItem(BaseModel):
    registration_number: str
    model: str
    aircraft_type: AircraftType
    status: AircraftStatus
    current_location: str | None = None
    next_maintenance_due: datetime | None = None
    model_config = ConfigDict(from_attributes=True)


class FlightDetailsResponse(BaseModel):
    """Flight plus its assigned aircraft, when known."""

    flight: FlightItem
    delayed: bool
    active: bool
    aircraft: AircraftItem | None = None


class RegisterAircraftRequest(BaseModel):
    registration_number: str = Field(min_length=2, max_length=10)
    model: str = Field(min_length=1, max_length=100)
    aircraft_type: AircraftType
    current_location: str | None = None


class AircraftStatusUpdate(BaseModel):
    status: AircraftStatus
    location: str | None = None


class MaintenanceItem(BaseModel):
    id: uuid.UUID
    aircraft_registration: str
    scheduled_date: datetime
    maintenance_type: MaintenanceType
    description: str | None = None
    status: MaintenanceStatus
    completed_at: datetime | None = None
    notes: str | None = None
    model_config = ConfigDict(from_attributes=True)


class ScheduleMaintenanceRequest(BaseModel):
    scheduled_date: UTCDateTime
    maintenance_type: MaintenanceType
    description: str | None = None


class MaintenanceStatusUpdate(BaseModel):
    status: MaintenanceStatus
    notes: str | None = None


class CompleteMaintenanceRequest(BaseModel):
    notes: str | None = None


class OperationalStatistics(BaseModel):
    total_flights: int
    active_flights: int
    delayed_flights: int
    cancelled_flights: int
    total_aircraft: int
    available_aircraft: int
    aircraft_in_maintenance: int


class OperationsDashboardResponse(BaseModel):
    statistics: OperationalStatistics
    active_flights: list[FlightItem]
    aircraft: list[AircraftItem]
