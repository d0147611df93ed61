"""Gate assignment conflict detection.

Two assignments on the same gate conflict when neither is cancelled and their
``[start_time, end_time]`` windows overlap.  Endpoints are inclusive, so an
assignment ending at 12:00 conflicts with one starting at 12:00.

The helpers work on anything exposing ``start_time``, ``end_time`` and
``cancelled`` attributes: ORM rows, request schemas and plain test objects.
"""

from __future__ import annotations

from datetime import UTC, datetime
from typing import TYPE_CHECKING, Protocol, TypeVar

if TYPE_CHECKING:
    from collections.abc import Iterable


class Schedulable(Protocol):
    """Anything occupying a gate for a time window."""

    start_time: datetime | None
    end_time: datetime | None
    cancelled: bool


def as_utc(value: datetime) -> datetime:
    """Return *value* as an aware UTC datetime; naive values are read as UTC."""
    if value.tzinfo is None:
        return value.replace(tzinfo=UTC)
    return value.astimezone(UTC)


def windows_overlap(
    start_a: datetime,
    end_a: datetime,
    start_b: datetime,
    end_b: datetime,
) -> bool:
    """Inclusive interval overlap test."""
    return not (as_utc(end_a) < as_utc(start_b) or as_utc(start_a) > as_utc(end_b))


def has_conflict(a: Schedulable, b: Schedulable) -> bool:
    """Return True if *a* and *b* would double-book the gate.

    Missing start or end times never conflict.
    """
    if a.cancelled or b.cancelled:
        return False
    if None in (a.start_time, a.end_time, b.start_time, b.end_time):
        return False
    return windows_overlap(a.start_time, a.end_time, b.start_time, b.end_time)  # type: ignore[arg-type]


T = TypeVar("T", bound=Schedulable)


def find_conflicts(candidate: Schedulable, existing: Iterable[T]) -> list[T]:
    """Return every entry of *existing* that conflicts with *candidate*.

    The candidate itself is skipped when it appears in *existing*, so an
    updated assignment is only checked against the others on its gate.
    """
    return [
        other
        for other in existing
        if other is not candidate and has_conflict(candidate, other)
    ]
