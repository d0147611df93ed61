"""Registration, login and profile endpoints."""

from __future__ import annotations

from datetime import UTC, datetime, timedelta

import httpx
import jwt
import pytest

from agms_api.config import settings
from agms_api.services.auth_service import AuthService
from agms_core.schemas import UserRole

API = "/api/v1"
PASSWORD = "Secret#123"


def registration(username: str = "jdoe", **overrides: object) -> dict:
    body = {
        "username": username,
        "email": f"{username}@example.com",
        "first_name": "Jane",
        "last_name": "Doe",
        "phone_number": "+15555550123",
        "password": PASSWORD,
    }
    body.update(overrides)
    return body


async def test_register_public_user(client: httpx.AsyncClient) -> None:
    resp = await client.post(f"{API}/auth/register", json=registration())
    assert resp.status_code == 201
    data = resp.json()
    assert data["role"] == "PUBLIC"
    assert data["redirect_url"] == "/dashboard"
    assert data["token_type"] == "bearer"

    me = await client.get(
        f"{API}/users/me", headers={"Authorization": f"Bearer {data['access_token']}"}
    )
    assert me.status_code == 200
    assert me.json()["username"] == "jdoe"


async def test_register_duplicate_username(client: httpx.AsyncClient) -> None:
    await client.post(f"{API}/auth/register", json=registration())
    resp = await client.post(
        f"{API}/auth/register", json=registration(email="other@example.com")
    )
    assert resp.status_code == 409


@pytest.mark.parametrize(
    "password",
    ["Sh#1a", "alllowercase#1", "ALLUPPER#1", "NoDigits#abc", "NoSpecial1abc"],
)
async def test_register_rejects_weak_passwords(
    client: httpx.AsyncClient, password: str
) -> None:
    resp = await client.post(f"{API}/auth/register", json=registration(password=password))
    assert resp.status_code == 422


async def test_privileged_role_requires_code(client: httpx.AsyncClient) -> None:
    resp = await client.post(
        f"{API}/auth/register", json=registration(role="ADMIN", auth_code="WRONG")
    )
    assert resp.status_code == 403


async def test_privileged_role_with_matching_code(
    client: httpx.AsyncClient, admin_headers: dict[str, str]
) -> None:
    created = await client.post(
        f"{API}/admin/auth-codes",
        json={"code": "OPS2025", "role": "OPERATIONS_MANAGER"},
        headers=admin_headers,
    )
    assert created.status_code == 201

    # A code issued for one role does not unlock another.
    wrong_role = await client.post(
        f"{API}/auth/register",
        json=registration("boss", role="ADMIN", auth_code="OPS2025"),
    )
    assert wrong_role.status_code == 403

    resp = await client.post(
        f"{API}/auth/register",
        json=registration("opsmgr", role="OPERATIONS_MANAGER", auth_code="OPS2025"),
    )
    assert resp.status_code == 201
    assert resp.json()["redirect_url"] == "/operations/dashboard"


async def test_gate_manager_needs_no_code(client: httpx.AsyncClient) -> None:
    resp = await client.post(
        f"{API}/auth/register", json=registration("gm", role="GATE_MANAGER")
    )
    assert resp.status_code == 201
    assert resp.json()["redirect_url"] == "/gates/dashboard"


async def test_login_and_refresh(client: httpx.AsyncClient, make_user) -> None:
    user, _ = await make_user(UserRole.AIRLINE_STAFF, username="staffer")
    resp = await client.post(
        f"{API}/auth/login", json={"username": "staffer", "password": PASSWORD}
    )
    assert resp.status_code == 200
    tokens = resp.json()
    assert tokens["role"] == "AIRLINE_STAFF"
    assert tokens["redirect_url"] == "/airline/dashboard"

    refreshed = await client.post(
        f"{API}/auth/refresh", json={"refresh_token": tokens["refresh_token"]}
    )
    assert refreshed.status_code == 200

    # Access tokens cannot be used as refresh tokens.
    misuse = await client.post(
        f"{API}/auth/refresh", json={"refresh_token": tokens["access_token"]}
    )
    assert misuse.status_code == 401


async def test_login_rejects_bad_password(client: httpx.AsyncClient, make_user) -> None:
    await make_user(username="alice")
    resp = await client.post(
        f"{API}/auth/login", json={"username": "alice", "password": "Wrong#123"}
    )
    assert resp.status_code == 401


async def test_login_rejects_inactive_user(client: httpx.AsyncClient, make_user) -> None:
    await make_user(username="ghost", is_active=False)
    resp = await client.post(
        f"{API}/auth/login", json={"username": "ghost", "password": PASSWORD}
    )
    assert resp.status_code == 401


async def test_username_available(client: httpx.AsyncClient, make_user) -> None:
    await make_user(username="taken")
    taken = await client.get(f"{API}/auth/username-available", params={"username": "taken"})
    free = await client.get(f"{API}/auth/username-available", params={"username": "free"})
    assert taken.json()["available"] is False
    assert free.json()["available"] is True


async def test_dashboard_follows_role(client: httpx.AsyncClient, make_user) -> None:
    _, headers = await make_user(UserRole.ADMIN)
    resp = await client.get(f"{API}/users/me/dashboard", headers=headers)
    assert resp.json() == {
        "role": "ADMIN",
        "role_name": "Administrator",
        "redirect_url": "/admin/dashboard",
    }


async def test_me_requires_token(client: httpx.AsyncClient) -> None:
    assert (await client.get(f"{API}/users/me")).status_code == 401
    bad = {"Authorization": "Bearer not-a-jwt"}
    assert (await client.get(f"{API}/users/me", headers=bad)).status_code == 401


def test_access_token_carries_role() -> None:
    token = AuthService.create_access_token("abc", "GATE_MANAGER")
    payload = AuthService.verify_token(token)
    assert payload["role"] == "GATE_MANAGER"
    assert payload["type"] == "access"


@pytest.mark.parametrize(
    "claims",
    [
        {"sub": "abc", "role": "GATE_MANAGER", "type": "access"},
        {"role": "GATE_MANAGER", "type": "access"},
    ],
    ids=["non-uuid-subject", "missing-subject"],
)
async def test_signed_token_without_user_id_is_401(
    client: httpx.AsyncClient, claims: dict
) -> None:
    claims = {**claims, "exp": datetime.now(UTC) + timedelta(minutes=5)}
    token = jwt.encode(claims, settings.jwt_secret, algorithm=settings.jwt_algorithm)
    resp = await client.get(f"{API}/users/me", headers={"Authorization": f"Bearer {token}"})
    assert resp.status_code == 401
