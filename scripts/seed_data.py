"""Seed a fresh database with gates, aircraft, authorization codes and a few assignments."""

from __future__ import annotations

import asyncio
import logging
import os
from datetime import UTC, datetime, timedelta

from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession, async_sessionmaker, create_async_engine

from agms_api.config import settings
from agms_api.services.authorization_code_service import AuthorizationCodeService
from agms_core.gates import format_gate_id
from agms_core.schemas import (
    AircraftType,
    GateFeature,
    GateSize,
    GateStatus,
    UserRole,
)
from agms_db.models import Aircraft, Assignment, Gate

logger = logging.getLogger("seed_data")

TERMINALS = range(1, 5)
GATES_PER_TERMINAL = 5

AIRCRAFT = [
    ("N12345", "Boeing 737-800", AircraftType.NARROW_BODY),
    ("N67890", "Airbus A320", AircraftType.NARROW_BODY),
    ("N11223", "Boeing 777-300", AircraftType.WIDE_BODY),
]

# (gate, flight, hours from now until start, duration in hours)
ASSIGNMENTS = [
    ("T1G1", "AA123", 1, 2),
    ("T2G1", "UA456", 3, 2),
]


async def load_gates(session: AsyncSession) -> int:
    existing = (await session.execute(select(Gate.gate_id))).scalars().all()
    if existing:
        logger.info("Gates already loaded (%d rows), skipping.", len(existing))
        return 0

    count = 0
    for terminal in TERMINALS:
        for number in range(1, GATES_PER_TERMINAL + 1):
            # First gate of each terminal takes wide-bodies.
            wide = number == 1
            features = [GateFeature.JETBRIDGE, GateFeature.POWER_SUPPLY, GateFeature.FUEL_PIT]
            if wide:
                features.append(GateFeature.WIDE_BODY_CAPABLE)
            session.add(
                Gate(
                    gate_id=format_gate_id(terminal, number),
                    terminal=str(terminal),
                    gate_number=str(number),
                    gate_size=GateSize.LARGE if wide else GateSize.MEDIUM,
                    status=GateStatus.AVAILABLE,
                    has_jet_bridge=True,
                    features=[f.value for f in features],
                    capacity=350 if wide else 180,
                )
            )
            count += 1
    await session.flush()
    logger.info("Loaded %d gates.", count)
    return count


async def load_aircraft(session: AsyncSession) -> int:
    existing = set((await session.execute(select(Aircraft.registration_number))).scalars())
    count = 0
    for registration, model, aircraft_type in AIRCRAFT:
        if registration in existing:
            continue
        session.add(
            Aircraft(registration_number=registration, model=model, aircraft_type=aircraft_type)
        )
        count += 1
    await session.flush()
    logger.info("Loaded %d aircraft.", count)
    return count


async def load_assignments(session: AsyncSession) -> int:
    existing = (await session.execute(select(Assignment.id).limit(1))).first()
    if existing is not None:
        logger.info("Assignments already present, skipping.")
        return 0

    now = datetime.now(UTC).replace(minute=0, second=0, microsecond=0)
    for gate_id, flight_number, offset, duration in ASSIGNMENTS:
        start = now + timedelta(hours=offset)
        session.add(
            Assignment(
                gate_id=gate_id,
                flight_number=flight_number,
                start_time=start,
                end_time=start + timedelta(hours=duration),
                assigned_by="system",
            )
        )
    await session.flush()
    logger.info("Loaded %d assignments.", len(ASSIGNMENTS))
    return len(ASSIGNMENTS)


async def main() -> None:
    logging.basicConfig(level=logging.INFO, format="%(message)s")
    database_url = os.getenv("DATABASE_URL", settings.database_url)
    engine = create_async_engine(database_url, echo=False)
    session_factory = async_sessionmaker(engine, expire_on_commit=False)

    logger.info("Seeding database...")
    async with session_factory() as session, session.begin():
        logger.info("[1/4] Gates...")
        await load_gates(session)
        logger.info("[2/4] Aircraft...")
        await load_aircraft(session)
        logger.info("[3/4] Authorization codes...")
        await AuthorizationCodeService(session).ensure_defaults(
            {
                UserRole.ADMIN: settings.admin_auth_code,
                UserRole.OPERATIONS_MANAGER: settings.operations_auth_code,
            }
        )
        logger.info("[4/4] Assignments...")
        await load_assignments(session)

    await engine.dispose()
    logger.info("Done!")


if __name__ == "__main__":
    asyncio.run(main())
