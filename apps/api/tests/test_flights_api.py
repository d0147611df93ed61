"""Flight endpoints and the operations dashboard."""

from __future__ import annotations

from datetime import UTC, datetime

import httpx
import pytest

from agms_core.schemas import UserRole

API = "/api/v1"


def flight(number: str = "AA123", **overrides: object) -> dict:
    body = {
        "flight_number": number,
        "airline_code": "AA",
        "origin": "PHX",
        "destination": "LAX",
        "scheduled_departure": datetime(2026, 3, 14, 10, tzinfo=UTC).isoformat(),
        "scheduled_arrival": datetime(2026, 3, 14, 12, tzinfo=UTC).isoformat(),
        "passenger_count": 150,
    }
    body.update(overrides)
    return body


@pytest.fixture
async def ops_headers(make_user) -> dict[str, str]:
    _, headers = await make_user(UserRole.OPERATIONS_MANAGER)
    return headers


@pytest.fixture
async def aircraft(client: httpx.AsyncClient, ops_headers) -> dict:
    resp = await client.post(
        f"{API}/aircraft",
        json={
            "registration_number": "N12345",
            "model": "Boeing 737-800",
            "aircraft_type": "NARROW_BODY",
        },
        headers=ops_headers,
    )
    assert resp.status_code == 201
    return resp.json()


async def test_create_flight_with_aircraft_and_gate(
    client: httpx.AsyncClient, aircraft, make_gate, ops_headers
) -> None:
    await make_gate("T1G1")
    resp = await client.post(
        f"{API}/flights",
        json=flight(aircraft_registration="N12345", departure_gate="T1G1"),
        headers=ops_headers,
    )
    assert resp.status_code == 201
    assert resp.json()["status"] == "SCHEDULED"

    details = await client.get(f"{API}/flights/AA123", headers=ops_headers)
    assert details.status_code == 200
    data = details.json()
    assert data["aircraft"]["model"] == "Boeing 737-800"
    assert data["delayed"] is False
    assert data["active"] is False


async def test_duplicate_flight_is_409(client: httpx.AsyncClient, ops_headers) -> None:
    assert (await client.post(f"{API}/flights", json=flight(), headers=ops_headers)).status_code == 201
    resp = await client.post(f"{API}/flights", json=flight(), headers=ops_headers)
    assert resp.status_code == 409


@pytest.mark.parametrize(
    "overrides",
    [{"aircraft_registration": "N00000"}, {"departure_gate": "T3G3"}],
    ids=["unknown-aircraft", "unknown-gate"],
)
async def test_unknown_references_are_404(
    client: httpx.AsyncClient, ops_headers, overrides: dict
) -> None:
    resp = await client.post(f"{API}/flights", json=flight(**overrides), headers=ops_headers)
    assert resp.status_code == 404


async def test_arrival_must_follow_departure(client: httpx.AsyncClient, ops_headers) -> None:
    body = flight(scheduled_arrival=datetime(2026, 3, 14, 9, tzinfo=UTC).isoformat())
    resp = await client.post(f"{API}/flights", json=body, headers=ops_headers)
    assert resp.status_code == 422


async def test_airline_staff_updates_status_only(
    client: httpx.AsyncClient, make_user, ops_headers
) -> None:
    await client.post(f"{API}/flights", json=flight(), headers=ops_headers)
    _, staff = await make_user(UserRole.AIRLINE_STAFF)

    blocked = await client.post(f"{API}/flights", json=flight("UA456"), headers=staff)
    assert blocked.status_code == 403

    resp = await client.put(
        f"{API}/flights/AA123/status",
        json={"status": "DEPARTED", "remarks": "Pushed back"},
        headers=staff,
    )
    assert resp.status_code == 200
    data = resp.json()
    assert data["status"] == "DEPARTED"
    assert data["actual_departure"] is not None
    assert data["remarks"] == "Pushed back"


async def test_active_flights_and_dashboard(
    client: httpx.AsyncClient, aircraft, ops_headers
) -> None:
    await client.post(f"{API}/flights", json=flight("AA1"), headers=ops_headers)
    await client.post(f"{API}/flights", json=flight("AA2", status="EN_ROUTE"), headers=ops_headers)
    await client.post(f"{API}/flights", json=flight("AA3", status="DELAYED"), headers=ops_headers)

    active = await client.get(f"{API}/flights/active", headers=ops_headers)
    assert [f["flight_number"] for f in active.json()["flights"]] == ["AA2"]

    dashboard = await client.get(f"{API}/operations/dashboard", headers=ops_headers)
    assert dashboard.status_code == 200
    stats = dashboard.json()["statistics"]
    assert stats["total_flights"] == 3
    assert stats["active_flights"] == 1
    assert stats["delayed_flights"] == 1
    assert stats["total_aircraft"] == 1
    assert stats["available_aircraft"] == 1


async def test_dashboard_needs_operations_role(
    client: httpx.AsyncClient, operator_headers
) -> None:
    resp = await client.get(f"{API}/operations/dashboard", headers=operator_headers)
    assert resp.status_code == 403


async def test_update_and_delete_flight(client: httpx.AsyncClient, ops_headers) -> None:
    await client.post(f"{API}/flights", json=flight(), headers=ops_headers)
    updated = await client.put(
        f"{API}/flights/AA123", json=flight(destination="SFO"), headers=ops_headers
    )
    assert updated.json()["destination"] == "SFO"

    assert (await client.delete(f"{API}/flights/AA123", headers=ops_headers)).status_code == 200
    assert (await client.get(f"{API}/flights/AA123", headers=ops_headers)).status_code == 404


async def test_health(client: httpx.AsyncClient) -> None:
    resp = await client.get(f"{API}/health")
    assert resp.json() == {"status": "ok"}


@pytest.mark.parametrize(
    ("query", "expected"),
    [
        ({"origin": "PHX"}, ["AA1", "UA2"]),
        ({"destination": "LAX"}, ["AA1"]),
        ({"airline_code": "AA"}, ["AA1", "AA3"]),
        ({"origin": "PHX", "airline_code": "UA"}, ["UA2"]),
        ({}, ["AA1", "AA3", "UA2"]),
    ],
    ids=["origin", "destination", "airline", "combined", "unfiltered"],
)
async def test_search_flights(
    client: httpx.AsyncClient, ops_headers, query: dict, expected: list[str]
) -> None:
    batch = [
        flight("AA1"),
        flight("UA2", airline_code="UA", destination="DEN"),
        flight("AA3", origin="SFO", destination="SEA"),
    ]
    await client.post(f"{API}/flights/batch", json={"flights": batch}, headers=ops_headers)

    resp = await client.get(f"{API}/flights", params=query, headers=ops_headers)
    assert resp.status_code == 200
    assert [f["flight_number"] for f in resp.json()["flights"]] == expected


class TestBatch:
    async def test_create_flights(self, client: httpx.AsyncClient, ops_headers) -> None:
        resp = await client.post(
            f"{API}/flights/batch",
            json={"flights": [flight("AA1"), flight("AA2")]},
            headers=ops_headers,
        )
        assert resp.status_code == 201
        assert resp.json()["total"] == 2

    @pytest.mark.parametrize(
        "batch",
        [
            [flight("AA1"), flight("AA1")],
            [flight("AA1"), flight("AA123")],
            [flight("AA1"), flight("AA2", departure_gate="T3G3")],
        ],
        ids=["repeated-in-batch", "already-exists", "unknown-gate"],
    )
    async def test_rejected_batch_creates_nothing(
        self, client: httpx.AsyncClient, ops_headers, batch: list[dict]
    ) -> None:
        await client.post(f"{API}/flights", json=flight(), headers=ops_headers)

        resp = await client.post(
            f"{API}/flights/batch", json={"flights": batch}, headers=ops_headers
        )
        assert resp.status_code in (404, 409)
        listing = await client.get(f"{API}/flights", headers=ops_headers)
        assert [f["flight_number"] for f in listing.json()["flights"]] == ["AA123"]

    async def test_update_statuses_with_reason(
        self, client: httpx.AsyncClient, make_user, ops_headers
    ) -> None:
        await client.post(
            f"{API}/flights/batch",
            json={"flights": [flight("AA1"), flight("AA2"), flight("AA3")]},
            headers=ops_headers,
        )
        _, staff = await make_user(UserRole.AIRLINE_STAFF)

        resp = await client.put(
            f"{API}/flights/batch/status",
            json={
                "flight_numbers": ["AA1", "AA2", "ZZ9"],
                "status": "DELAYED",
                "reason": "Weather delay",
            },
            headers=staff,
        )
        assert resp.status_code == 200
        data = resp.json()
        assert [f["flight_number"] for f in data["updated"]] == ["AA1", "AA2"]
        assert {f["remarks"] for f in data["updated"]} == {"Weather delay"}
        assert data["missing"] == ["ZZ9"]

        delayed = await client.get(
            f"{API}/flights", params={"status": "DELAYED"}, headers=ops_headers
        )
        assert delayed.json()["total"] == 2
