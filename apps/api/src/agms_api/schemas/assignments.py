"""Gate assignment schemas."""

from __future__ import annotations

import uuid  # noqa: TC003
from datetime import datetime
from typing import Annotated

from pydantic import AfterValidator, BaseModel, ConfigDict, Field, model_validator

from agms_core.conflict import as_utc
from agms_core.gates import GATE_ID_PATTERN
from agms_core.schemas import AssignmentStatus

UTCDateTime = Annotated[datetime, AfterValidator(as_utc)]


class AssignmentItem(BaseModel):
    """Single gate assignment."""

    id: uuid.UUID
    gate_id: str
    flight_number: str
    start_time: datetime
    end_time: datetime
    status: AssignmentStatus
    cancelled: bool
    assigned_by: str | None = None
    created_at: datetime
    updated_at: datetime
    model_config = ConfigDict(from_attributes=True)


class AssignmentWindow(BaseModel):
    """Gate + time window, validated before any conflict check runs."""

    gate_id: str = Field(pattern=GATE_ID_PATTERN)
    start_time: UTCDateTime
    end_time: UTCDateTime

    @property
    def cancelled(self) -> bool:
        return False

    @model_validator(mode="after")
    def _validate_window(self) -> AssignmentWindow:
        if self.start_time > self.end_time:
            msg = "start_time must not be after end_time"
            raise ValueError(msg)
        return self


class CreateAssignmentRequest(AssignmentWindow):
    flight_number: str = Field(min_length=2, max_length=10)


class UpdateAssignmentRequest(CreateAssignmentRequest):
    """Full replacement of an assignment's gate, flight and window."""


class ConflictCheckResponse(BaseModel):
    gate_id: str
    conflict: bool
    conflicting_ids: list[uuid.UUID]


class GateAssignmentsResponse(BaseModel):
    gate_id: str
    assignments: list[AssignmentItem]
    total: int


class CurrentNextResponse(BaseModel):
    gate_id: str
    current: AssignmentItem | None = None
    next: AssignmentItem | None = None


class CurrentAssignmentsResponse(BaseModel):
    """Assignment occupying each gate right now, keyed by gate id."""

    assignments: dict[str, AssignmentItem]
