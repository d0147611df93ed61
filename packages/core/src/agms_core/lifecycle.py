"""Assignment and flight lifecycle rules."""

from __future__ import annotations

from datetime import datetime
from typing import Protocol

from .conflict import Schedulable, as_utc
from .schemas.enums import AssignmentStatus, FlightStatus

ALLOWED_TRANSITIONS: dict[AssignmentStatus, frozenset[AssignmentStatus]] = {
    AssignmentStatus.SCHEDULED: frozenset(
        {AssignmentStatus.ACTIVE, AssignmentStatus.CANCELLED}
    ),
    AssignmentStatus.ACTIVE: frozenset(
        {AssignmentStatus.COMPLETED, AssignmentStatus.CANCELLED}
    ),
    AssignmentStatus.COMPLETED: frozenset(),
    AssignmentStatus.CANCELLED: frozenset(),
}

TERMINAL_STATUSES = frozenset(
    status for status, targets in ALLOWED_TRANSITIONS.items() if not targets
)

ACTIVE_FLIGHT_STATUSES = frozenset(
    {
        FlightStatus.BOARDING,
        FlightStatus.DEPARTED,
        FlightStatus.EN_ROUTE,
        FlightStatus.APPROACHING,
    }
)


class InvalidTransitionError(ValueError):
    """Raised when an assignment is moved to a status it cannot reach."""

    def __init__(self, current: AssignmentStatus, new: AssignmentStatus) -> None:
        super().__init__(f"Cannot move assignment from {current} to {new}")
        self.current = current
        self.new = new


class StatefulAssignment(Schedulable, Protocol):
    status: AssignmentStatus


class FlightTimes(Protocol):
    status: FlightStatus
    scheduled_departure: datetime | None
    scheduled_arrival: datetime | None
    actual_departure: datetime | None
    actual_arrival: datetime | None


def can_transition(current: AssignmentStatus, new: AssignmentStatus) -> bool:
    """Return True if *current* may move to *new* (a no-op move is allowed)."""
    return current == new or new in ALLOWED_TRANSITIONS[current]


def apply_transition(assignment: StatefulAssignment, new: AssignmentStatus) -> None:
    """Move *assignment* to *new*, keeping ``cancelled`` in step with the status."""
    current = AssignmentStatus(assignment.status)
    if not can_transition(current, new):
        raise InvalidTransitionError(current, new)
    assignment.status = new
    if new == AssignmentStatus.CANCELLED:
        assignment.cancelled = True


def is_active(assignment: Schedulable, now: datetime) -> bool:
    """True while *now* lies strictly inside a non-cancelled assignment window."""
    if assignment.cancelled or assignment.start_time is None or assignment.end_time is None:
        return False
    now = as_utc(now)
    return as_utc(assignment.start_time) < now < as_utc(assignment.end_time)


def scheduled_status(assignment: StatefulAssignment, now: datetime) -> AssignmentStatus:
    """Status the clock implies for *assignment* at *now*.

    SCHEDULED becomes ACTIVE once the window opens and ACTIVE becomes
    COMPLETED after it closes.  Terminal statuses never move.
    """
    current = AssignmentStatus(assignment.status)
    if current in TERMINAL_STATUSES or assignment.cancelled:
        return current
    if assignment.start_time is None or assignment.end_time is None:
        return current

    now = as_utc(now)
    if as_utc(assignment.end_time) < now:
        return AssignmentStatus.COMPLETED
    if as_utc(assignment.start_time) <= now:
        return AssignmentStatus.ACTIVE
    return current


def flight_is_active(status: FlightStatus) -> bool:
    return status in ACTIVE_FLIGHT_STATUSES


def flight_is_delayed(flight: FlightTimes) -> bool:
    """Delayed by status, or by actual times running later than scheduled."""
    if flight.status == FlightStatus.DELAYED:
        return True
    if flight.actual_departure is not None and flight.scheduled_departure is not None:
        return as_utc(flight.actual_departure) > as_utc(flight.scheduled_departure)
    if flight.actual_arrival is not None and flight.scheduled_arrival is not None:
        return as_utc(flight.actual_arrival) > as_utc(flight.scheduled_arrival)
    return False
