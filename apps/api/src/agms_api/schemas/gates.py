"""Gate schemas."""

from __future__ import annotations

import uuid  # noqa: TC003

from pydantic import BaseModel, ConfigDict, Field, model_validator

from agms_core.gates import (
    GATE_ID_PATTERN,
    GATE_NUMBER_PATTERN,
    TERMINAL_PATTERN,
    format_gate_id,
    parse_gate_id,
)
from agms_core.schemas import GateFeature, GateSize, GateStatus, GateType


class GateItem(BaseModel):
    """Single gate entry."""

    id: uuid.UUID
    gate_id: str
    terminal: str
    gate_number: str
    gate_type: GateType
    gate_size: GateSize
    status: GateStatus
    is_active: bool
    has_jet_bridge: bool
    features: list[GateFeature]
    capacity: int
    model_config = ConfigDict(from_attributes=True)


class GateListResponse(BaseModel):
    gates: list[GateItem]
    total: int


class GateAttributes(BaseModel):
    gate_type: GateType = GateType.DOMESTIC
    gate_size: GateSize = GateSize.MEDIUM
    status: GateStatus = GateStatus.UNKNOWN
    is_active: bool = True
    has_jet_bridge: bool = True
    features: list[GateFeature] = Field(default_factory=list)
    capacity: int = Field(default=0, ge=0)


class CreateGateRequest(GateAttributes):
    """New gate; the id must agree with terminal and gate number."""

    gate_id: str = Field(pattern=GATE_ID_PATTERN)
    terminal: str = Field(pattern=TERMINAL_PATTERN)
    gate_number: str = Field(pattern=GATE_NUMBER_PATTERN)

    @model_validator(mode="after")
    def _validate_gate_id(self) -> CreateGateRequest:
        if parse_gate_id(self.gate_id) != (self.terminal, self.gate_number):
            expected = format_gate_id(self.terminal, self.gate_number)
            msg = f"gate_id {self.gate_id} does not match terminal/gate number ({expected})"
            raise ValueError(msg)
        return self


class UpdateGateRequest(BaseModel):
    """Partial update of gate attributes (the id is immutable)."""

    gate_type: GateType | None = None
    gate_size: GateSize | None = None
    status: GateStatus | None = None
    is_active: bool | None = None
    has_jet_bridge: bool | None = None
    features: list[GateFeature] | None = None
    capacity: int | None = Field(default=None, ge=0)


class GateStatusUpdate(BaseModel):
    status: GateStatus


class GateStatistics(BaseModel):
    """Gate counts overall and per status."""

    total_gates: int
    by_status: dict[GateStatus, int]
