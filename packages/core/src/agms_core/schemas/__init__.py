"""Core schemas for AGMS."""

from .enums import (
    AircraftStatus,
    AircraftType,
    AssignmentStatus,
    FlightStatus,
    GateFeature,
    GateSize,
    GateStatus,
    GateType,
    MaintenanceStatus,
    MaintenanceType,
    UserRole,
)

__all__ = [
    "AircraftStatus",
    "AircraftType",
    "AssignmentStatus",
    "FlightStatus",
    "GateFeature",
    "GateSize",
    "GateStatus",
    "GateType",
    "MaintenanceStatus",
    "MaintenanceType",
    "UserRole",
]
