"""Gate identifiers and gate/aircraft compatibility."""

from __future__ import annotations

import re
from typing import TYPE_CHECKING, Protocol

from .schemas.enums import AircraftType, GateFeature, GateSize, GateStatus

if TYPE_CHECKING:
    from collections.abc import Iterable

GATE_ID_PATTERN = r"^T[1-4]G\d{1,2}$"
TERMINAL_PATTERN = r"^[1-4]$"
GATE_NUMBER_PATTERN = r"^\d{1,2}$"

_GATE_ID_RE = re.compile(r"^T(?P<terminal>[1-4])G(?P<number>\d{1,2})$")

_SIZES_FOR_TYPE: dict[AircraftType, frozenset[GateSize]] = {
    AircraftType.WIDE_BODY: frozenset({GateSize.LARGE}),
    AircraftType.NARROW_BODY: frozenset({GateSize.LARGE, GateSize.MEDIUM}),
    AircraftType.REGIONAL_JET: frozenset(GateSize),
}

_FEATURES_FOR_TYPE: dict[AircraftType, frozenset[GateFeature]] = {
    AircraftType.WIDE_BODY: frozenset(
        {GateFeature.WIDE_BODY_CAPABLE, GateFeature.FUEL_PIT}
    ),
    AircraftType.NARROW_BODY: frozenset({GateFeature.FUEL_PIT}),
    AircraftType.REGIONAL_JET: frozenset(),
}


class GateLike(Protocol):
    is_active: bool
    status: GateStatus
    gate_size: GateSize
    has_jet_bridge: bool
    features: Iterable[str]


def format_gate_id(terminal: str | int, gate_number: str | int) -> str:
    """Build the canonical gate id, e.g. ``format_gate_id(1, 4) == "T1G4"``."""
    return f"T{terminal}G{gate_number}"


def parse_gate_id(gate_id: str) -> tuple[str, str]:
    """Split a gate id into ``(terminal, gate_number)``."""
    match = _GATE_ID_RE.match(gate_id)
    if match is None:
        msg = f"Gate ID must be in format T#G# (e.g., T1G1), got {gate_id!r}"
        raise ValueError(msg)
    return match["terminal"], match["number"]


def required_features(aircraft_type: AircraftType, has_jet_bridge: bool) -> set[GateFeature]:
    required = {GateFeature.POWER_SUPPLY, *_FEATURES_FOR_TYPE[aircraft_type]}
    if has_jet_bridge:
        required.add(GateFeature.JETBRIDGE)
    return required


def is_compatible_with(gate: GateLike, aircraft_type: AircraftType) -> bool:
    """True if an active, available *gate* can take *aircraft_type*."""
    if not gate.is_active or gate.status != GateStatus.AVAILABLE:
        return False
    if gate.gate_size not in _SIZES_FOR_TYPE[aircraft_type]:
        return False
    installed = {GateFeature(f) for f in gate.features or ()}
    return required_features(aircraft_type, gate.has_jet_bridge) <= installed
