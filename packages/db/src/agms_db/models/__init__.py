"""SQLAlchemy ORM models for AGMS."""

from .aircraft import Aircraft, MaintenanceRecord
from .base import Base, TimestampMixin, UUIDPrimaryKeyMixin
from .flight import Flight
from .gate import Assignment, Gate
from .user import AuthorizationCode, User

__all__ = [
    "Aircraft",
    "Assignment",
    "AuthorizationCode",
    "Base",
    "Flight",
    "Gate",
    "MaintenanceRecord",
    "TimestampMixin",
    "UUIDPrimaryKeyMixin",
    "User",
]
