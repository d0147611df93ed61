"""Shared fixtures for the API tests.

Each test gets its own in-memory SQLite database and an in-process Redis
stand-in, and talks to the app over ``httpx.ASGITransport``.
"""

from __future__ import annotations

import fnmatch
import itertools
import os
from collections.abc import AsyncGenerator, Awaitable, Callable
from datetime import datetime  # noqa: TC003

# Settings are read at import time.
os.environ["API_RATE_LIMIT_PER_MINUTE"] = "0"
os.environ["API_JWT_SECRET"] = "test-secret-key-with-enough-length-for-hs256"

import httpx
import pytest
from sqlalchemy.ext.asyncio import AsyncSession, async_sessionmaker, create_async_engine
from sqlalchemy.pool import StaticPool

from agms_api.cache import redis_client
from agms_api.main import app
from agms_api.services.auth_service import AuthService, hash_password
from agms_core.schemas import GateFeature, GateSize, GateStatus, UserRole
from agms_db.database import get_db
from agms_db.models import Assignment, Base, Gate, User

PASSWORD = "Secret#123"

Headers = dict[str, str]
UserFactory = Callable[..., Awaitable[tuple[User, Headers]]]


class FakeRedis:
    """Just enough of ``redis.asyncio.Redis`` for the cache helpers."""

    def __init__(self) -> None:
        self.store: dict[str, str] = {}

    async def get(self, key: str) -> str | None:
        return self.store.get(key)

    async def set(self, key: str, value: str, ex: int | None = None) -> None:
        self.store[key] = value

    async def delete(self, *keys: str) -> int:
        return sum(self.store.pop(key, None) is not None for key in keys)

    async def scan_iter(self, match: str = "*") -> AsyncGenerator[str]:
        for key in list(self.store):
            if fnmatch.fnmatchcase(key, match):
                yield key


@pytest.fixture
def fake_redis(monkeypatch: pytest.MonkeyPatch) -> FakeRedis:
    fake = FakeRedis()
    monkeypatch.setattr(redis_client, "redis_pool", fake)
    return fake


@pytest.fixture
async def session_factory() -> AsyncGenerator[async_sessionmaker[AsyncSession]]:
    engine = create_async_engine(
        "sqlite+aiosqlite:///:memory:",
        connect_args={"check_same_thread": False},
        poolclass=StaticPool,
    )
    async with engine.begin() as conn:
        await conn.run_sync(Base.metadata.create_all)
    yield async_sessionmaker(engine, class_=AsyncSession, expire_on_commit=False)
    await engine.dispose()


@pytest.fixture
async def client(
    session_factory: async_sessionmaker[AsyncSession],
    fake_redis: FakeRedis,
) -> AsyncGenerator[httpx.AsyncClient]:
    async def _test_db() -> AsyncGenerator[AsyncSession]:
        async with session_factory() as session:
            try:
                yield session
                await session.commit()
            except Exception:
                await session.rollback()
                raise

    app.dependency_overrides[get_db] = _test_db
    transport = httpx.ASGITransport(app=app)
    async with httpx.AsyncClient(transport=transport, base_url="http://test") as ac:
        yield ac
    app.dependency_overrides.clear()


@pytest.fixture
def make_user(session_factory: async_sessionmaker[AsyncSession]) -> UserFactory:
    """Insert a user and return it with bearer headers for its access token."""
    counter = itertools.count(1)

    async def _make(
        role: UserRole = UserRole.PUBLIC,
        *,
        username: str | None = None,
        is_active: bool = True,
    ) -> tuple[User, Headers]:
        n = next(counter)
        user = User(
            username=username or f"{role.value.lower()}{n}",
            email=f"{role.value.lower()}{n}@example.com",
            first_name="Test",
            last_name="User",
            phone_number="+15555550100",
            password_hash=hash_password(PASSWORD),
            role=role,
            is_active=is_active,
        )
        async with session_factory() as session:
            session.add(user)
            await session.commit()
        token = AuthService.create_access_token(str(user.id), role.value)
        return user, {"Authorization": f"Bearer {token}"}

    return _make


@pytest.fixture
async def admin_headers(make_user: UserFactory) -> Headers:
    _, headers = await make_user(UserRole.ADMIN)
    return headers


@pytest.fixture
async def operator_headers(make_user: UserFactory) -> Headers:
    _, headers = await make_user(UserRole.GATE_MANAGER)
    return headers


@pytest.fixture
async def public_headers(make_user: UserFactory) -> Headers:
    _, headers = await make_user(UserRole.PUBLIC)
    return headers


@pytest.fixture
def make_gate(session_factory: async_sessionmaker[AsyncSession]) -> Callable[..., Awaitable[Gate]]:
    async def _make(gate_id: str = "T1G1", **overrides: object) -> Gate:
        terminal, number = gate_id[1], gate_id[3:]
        fields: dict[str, object] = {
            "gate_id": gate_id,
            "terminal": terminal,
            "gate_number": number,
            "gate_size": GateSize.LARGE,
            "status": GateStatus.AVAILABLE,
            "features": [f.value for f in GateFeature],
        }
        fields.update(overrides)
        gate = Gate(**fields)
        async with session_factory() as session:
            session.add(gate)
            await session.commit()
        return gate

    return _make


@pytest.fixture
def make_assignment(
    session_factory: async_sessionmaker[AsyncSession],
) -> Callable[..., Awaitable[Assignment]]:
    async def _make(
        gate_id: str, flight_number: str, start: datetime, end: datetime, **overrides: object
    ) -> Assignment:
        assignment = Assignment(
            gate_id=gate_id,
            flight_number=flight_number,
            start_time=start,
            end_time=end,
            **overrides,
        )
        async with session_factory() as session:
            session.add(assignment)
            await session.commit()
        return assignment

    return _make
