"""Pydantic-compatible enums shared by the API, DB and scheduler (DB-independent)."""

from enum import StrEnum


class UserRole(StrEnum):
    """Operator role, which decides the dashboard and permitted writes."""

    PUBLIC = "PUBLIC"
    AIRLINE_STAFF = "AIRLINE_STAFF"
    GATE_MANAGER = "GATE_MANAGER"
    OPERATIONS_MANAGER = "OPERATIONS_MANAGER"
    ADMIN = "ADMIN"

    @property
    def display_name(self) -> str:
        return _ROLE_DISPLAY_NAMES[self]


_ROLE_DISPLAY_NAMES = {
    UserRole.PUBLIC: "Public User",
    UserRole.AIRLINE_STAFF: "Airline Staff",
    UserRole.GATE_MANAGER: "Gate Manager",
    UserRole.OPERATIONS_MANAGER: "Operations Manager",
    UserRole.ADMIN: "Administrator",
}


class GateStatus(StrEnum):
    """Operational state of a gate."""

    AVAILABLE = "AVAILABLE"
    OCCUPIED = "OCCUPIED"
    MAINTENANCE = "MAINTENANCE"
    CLOSED = "CLOSED"
    UNKNOWN = "UNKNOWN"


class GateType(StrEnum):
    """Traffic a gate can serve."""

    DOMESTIC = "DOMESTIC"
    INTERNATIONAL = "INTERNATIONAL"
    BOTH = "BOTH"


class GateSize(StrEnum):
    """Largest aircraft class a gate can park."""

    SMALL = "SMALL"  # regional aircraft only
    MEDIUM = "MEDIUM"  # up to narrow-body
    LARGE = "LARGE"  # up to wide-body


class GateFeature(StrEnum):
    """Ground equipment installed at a gate."""

    JETBRIDGE = "JETBRIDGE"
    FUEL_PIT = "FUEL_PIT"
    POWER_SUPPLY = "POWER_SUPPLY"
    PRECONDITIONED_AIR = "PRECONDITIONED_AIR"
    WIDE_BODY_CAPABLE = "WIDE_BODY_CAPABLE"
    INTERNATIONAL_CAPABLE = "INTERNATIONAL_CAPABLE"


class AssignmentStatus(StrEnum):
    """Lifecycle of a gate assignment."""

    SCHEDULED = "SCHEDULED"
    ACTIVE = "ACTIVE"
    COMPLETED = "COMPLETED"
    CANCELLED = "CANCELLED"


class FlightStatus(StrEnum):
    """Operational status of a flight."""

    SCHEDULED = "SCHEDULED"
    BOARDING = "BOARDING"
    DEPARTED = "DEPARTED"
    EN_ROUTE = "EN_ROUTE"
    APPROACHING = "APPROACHING"
    LANDED = "LANDED"
    ARRIVED = "ARRIVED"
    DELAYED = "DELAYED"
    CANCELLED = "CANCELLED"
    DIVERTED = "DIVERTED"


class AircraftType(StrEnum):
    """Airframe class used for gate compatibility."""

    NARROW_BODY = "NARROW_BODY"
    WIDE_BODY = "WIDE_BODY"
    REGIONAL_JET = "REGIONAL_JET"


class AircraftStatus(StrEnum):
    """Availability of an aircraft."""

    AVAILABLE = "AVAILABLE"
    ACTIVE = "ACTIVE"
    MAINTENANCE = "MAINTENANCE"


class MaintenanceType(StrEnum):
    """Kind of maintenance work."""

    ROUTINE = "ROUTINE"
    INSPECTION = "INSPECTION"
    REPAIR = "REPAIR"
    OVERHAUL = "OVERHAUL"


class MaintenanceStatus(StrEnum):
    """Progress of a maintenance record."""

    SCHEDULED = "SCHEDULED"
    IN_PROGRESS = "IN_PROGRESS"
    COMPLETED = "COMPLETED"
    CANCELLED = "CANCELLED"
