"""Tests for gate ids and gate/aircraft compatibility."""

from __future__ import annotations

from dataclasses import dataclass, field

import pytest

from agms_core.gates import format_gate_id, is_compatible_with, parse_gate_id
from agms_core.schemas import AircraftType, GateFeature, GateSize, GateStatus

ALL_FEATURES = [f.value for f in GateFeature]


@dataclass
class GateStub:
    gate_size: GateSize = GateSize.LARGE
    status: GateStatus = GateStatus.AVAILABLE
    is_active: bool = True
    has_jet_bridge: bool = True
    features: list[str] = field(default_factory=lambda: list(ALL_FEATURES))


def test_format_and_parse_gate_id() -> None:
    assert format_gate_id(1, 4) == "T1G4"
    assert parse_gate_id("T3G12") == ("3", "12")


@pytest.mark.parametrize("bad", ["T5G1", "T1G", "G1T1", "T1G123", "t1g1", ""])
def test_parse_rejects_malformed_ids(bad: str) -> None:
    with pytest.raises(ValueError, match="T#G#"):
        parse_gate_id(bad)


def test_fully_equipped_large_gate_takes_everything() -> None:
    gate = GateStub()
    assert all(is_compatible_with(gate, t) for t in AircraftType)


@pytest.mark.parametrize(
    ("size", "expected"),
    [
        (GateSize.SMALL, {AircraftType.REGIONAL_JET}),
        (GateSize.MEDIUM, {AircraftType.REGIONAL_JET, AircraftType.NARROW_BODY}),
    ],
)
def test_size_limits_aircraft(size: GateSize, expected: set[AircraftType]) -> None:
    gate = GateStub(gate_size=size)
    assert {t for t in AircraftType if is_compatible_with(gate, t)} == expected


def test_unavailable_or_inactive_gate_is_incompatible() -> None:
    assert not is_compatible_with(GateStub(status=GateStatus.MAINTENANCE), AircraftType.REGIONAL_JET)
    assert not is_compatible_with(GateStub(is_active=False), AircraftType.REGIONAL_JET)


def test_wide_body_needs_wide_body_feature() -> None:
    features = [f for f in ALL_FEATURES if f != GateFeature.WIDE_BODY_CAPABLE]
    gate = GateStub(features=features)
    assert not is_compatible_with(gate, AircraftType.WIDE_BODY)
    assert is_compatible_with(gate, AircraftType.NARROW_BODY)


def test_jet_bridge_gate_needs_jetbridge_feature() -> None:
    features = [GateFeature.POWER_SUPPLY.value]
    assert not is_compatible_with(GateStub(features=features), AircraftType.REGIONAL_JET)
    gate = GateStub(has_jet_bridge=False, features=features)
    assert is_compatible_with(gate, AircraftType.REGIONAL_JET)
