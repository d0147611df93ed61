"""Gate registry endpoints, caching and role guards."""

from __future__ import annotations

from datetime import UTC, datetime

import httpx
import pytest
from sqlalchemy.ext.asyncio import AsyncSession, async_sessionmaker, create_async_engine

from agms_api.cache.cache_keys import gate_list_key, gate_statistics_key
from agms_api.services import gate_service
from agms_api.services.gate_service import GateService
from agms_core.schemas import GateFeature, GateSize, GateStatus, UserRole
from agms_db.models import Base, Gate

API = "/api/v1"


def new_gate(gate_id: str = "T2G7", **overrides: object) -> dict:
    body = {
        "gate_id": gate_id,
        "terminal": gate_id[1],
        "gate_number": gate_id[3:],
        "gate_size": "LARGE",
        "features": ["JETBRIDGE", "POWER_SUPPLY"],
    }
    body.update(overrides)
    return body


async def test_admin_creates_gate(client: httpx.AsyncClient, admin_headers) -> None:
    resp = await client.post(f"{API}/gates", json=new_gate(), headers=admin_headers)
    assert resp.status_code == 201
    data = resp.json()
    assert data["gate_id"] == "T2G7"
    assert data["status"] == "UNKNOWN"
    assert data["features"] == ["JETBRIDGE", "POWER_SUPPLY"]

    dup = await client.post(f"{API}/gates", json=new_gate(), headers=admin_headers)
    assert dup.status_code == 409


async def test_gate_id_must_match_terminal_and_number(
    client: httpx.AsyncClient, admin_headers
) -> None:
    resp = await client.post(
        f"{API}/gates", json=new_gate(terminal="3"), headers=admin_headers
    )
    assert resp.status_code == 422


async def test_malformed_gate_id_rejected(client: httpx.AsyncClient, admin_headers) -> None:
    resp = await client.post(
        f"{API}/gates",
        json=new_gate("T9G1", terminal="9", gate_number="1"),
        headers=admin_headers,
    )
    assert resp.status_code == 422


async def test_only_admin_creates_gates(client: httpx.AsyncClient, operator_headers) -> None:
    resp = await client.post(f"{API}/gates", json=new_gate(), headers=operator_headers)
    assert resp.status_code == 403


async def test_list_gates_by_terminal_is_cached(
    client: httpx.AsyncClient, make_gate, public_headers, fake_redis
) -> None:
    await make_gate("T1G1")
    await make_gate("T1G2")
    await make_gate("T2G1")

    resp = await client.get(f"{API}/gates", params={"terminal": "1"}, headers=public_headers)
    assert resp.status_code == 200
    assert [g["gate_id"] for g in resp.json()["gates"]] == ["T1G1", "T1G2"]
    assert gate_list_key("1") in fake_redis.store

    everything = await client.get(f"{API}/gates", headers=public_headers)
    assert everything.json()["total"] == 3


async def test_writes_invalidate_gate_cache(
    client: httpx.AsyncClient, make_gate, make_user, fake_redis
) -> None:
    await make_gate("T1G1")
    _, headers = await make_user(UserRole.OPERATIONS_MANAGER)
    await client.get(f"{API}/gates", headers=headers)
    await client.get(f"{API}/gates/statistics", headers=headers)
    assert gate_list_key(None) in fake_redis.store
    assert gate_statistics_key() in fake_redis.store

    resp = await client.put(
        f"{API}/gates/T1G1/status", json={"status": "MAINTENANCE"}, headers=headers
    )
    assert resp.status_code == 200
    assert resp.json()["status"] == "MAINTENANCE"
    assert fake_redis.store == {}

    stats = await client.get(f"{API}/gates/statistics", headers=headers)
    assert stats.json()["by_status"]["MAINTENANCE"] == 1
    assert stats.json()["total_gates"] == 1


async def test_update_gate(client: httpx.AsyncClient, make_gate, admin_headers) -> None:
    await make_gate("T3G4", gate_size=GateSize.SMALL)
    resp = await client.put(
        f"{API}/gates/T3G4",
        json={"gate_size": "MEDIUM", "capacity": 120, "features": ["FUEL_PIT"]},
        headers=admin_headers,
    )
    assert resp.status_code == 200
    data = resp.json()
    assert data["gate_size"] == "MEDIUM"
    assert data["capacity"] == 120
    assert data["features"] == ["FUEL_PIT"]


async def test_get_unknown_gate(client: httpx.AsyncClient, public_headers) -> None:
    resp = await client.get(f"{API}/gates/T4G9", headers=public_headers)
    assert resp.status_code == 404


async def test_delete_gate_removes_assignments(
    client: httpx.AsyncClient, make_gate, make_assignment, admin_headers
) -> None:
    await make_gate("T1G1")
    booked = await make_assignment(
        "T1G1",
        "AA123",
        datetime(2026, 3, 14, 10, tzinfo=UTC),
        datetime(2026, 3, 14, 12, tzinfo=UTC),
    )
    resp = await client.delete(f"{API}/gates/T1G1", headers=admin_headers)
    assert resp.status_code == 200
    assert resp.json()["success"] is True

    gone = await client.get(f"{API}/assignments/{booked.id}", headers=admin_headers)
    assert gone.status_code == 404


async def test_compatible_gates(client: httpx.AsyncClient, make_gate, public_headers) -> None:
    await make_gate("T1G1")
    await make_gate("T1G2", gate_size=GateSize.MEDIUM)
    await make_gate("T1G3", status=GateStatus.CLOSED)
    await make_gate(
        "T1G4", features=[GateFeature.JETBRIDGE.value, GateFeature.POWER_SUPPLY.value]
    )

    wide = await client.get(
        f"{API}/gates/compatible", params={"aircraft_type": "WIDE_BODY"}, headers=public_headers
    )
    assert [g["gate_id"] for g in wide.json()["gates"]] == ["T1G1"]

    regional = await client.get(
        f"{API}/gates/compatible",
        params={"aircraft_type": "REGIONAL_JET"},
        headers=public_headers,
    )
    assert [g["gate_id"] for g in regional.json()["gates"]] == ["T1G1", "T1G2", "T1G4"]


async def test_gates_require_authentication(client: httpx.AsyncClient) -> None:
    assert (await client.get(f"{API}/gates")).status_code == 401


async def test_gate_cache_dropped_only_after_commit(
    tmp_path, fake_redis, monkeypatch: pytest.MonkeyPatch
) -> None:
    # Separate connections, so uncommitted writes stay invisible to other sessions.
    engine = create_async_engine(f"sqlite+aiosqlite:///{tmp_path / 'gates.db'}")
    async with engine.begin() as conn:
        await conn.run_sync(Base.metadata.create_all)
    factory = async_sessionmaker(engine, class_=AsyncSession, expire_on_commit=False)
    async with factory() as session:
        session.add(Gate(gate_id="T1G1", terminal="1", gate_number="1"))
        await session.commit()

    seen_by_readers: list[GateStatus] = []
    invalidate = gate_service.cache_invalidate

    async def invalidate_after_read(prefix: str) -> int:
        async with factory() as reader:
            gate = await GateService(reader).get_gate("T1G1")
            seen_by_readers.append(gate.status)
        return await invalidate(prefix)

    monkeypatch.setattr(gate_service, "cache_invalidate", invalidate_after_read)

    async with factory() as writer:
        await GateService(writer).update_status("T1G1", GateStatus.MAINTENANCE)

    assert seen_by_readers == [GateStatus.MAINTENANCE]
    await engine.dispose()
