"""Gate service - gate registry, status and compatibility queries."""

from __future__ import annotations

import logging
from typing import TYPE_CHECKING

from fastapi import HTTPException, status
from sqlalchemy import delete, func, select

from agms_core.gates import is_compatible_with
from agms_core.schemas import GateStatus
from agms_db.models import Assignment, Gate

from ..cache.cache_keys import GATES_PREFIX
from ..cache.redis_client import cache_invalidate
from ..schemas.gates import GateStatistics

if TYPE_CHECKING:
    from sqlalchemy.ext.asyncio import AsyncSession

    from agms_core.schemas import AircraftType

    from ..schemas.gates import CreateGateRequest, UpdateGateRequest

logger = logging.getLogger(__name__)


class GateService:
    """Handles gate CRUD and gate-level queries."""

    def __init__(self, db: AsyncSession) -> None:
        self._db = db

    async def _publish(self) -> None:
        """Commit the gate write, then drop cached gate views.

        Cached views are only dropped once the write is visible to other sessions.
        """
        await self._db.commit()
        await cache_invalidate(GATES_PREFIX)

    async def list_gates(self, terminal: str | None = None) -> list[Gate]:
        stmt = select(Gate).order_by(Gate.terminal, Gate.gate_number)
        if terminal is not None:
            stmt = stmt.where(Gate.terminal == terminal)
        result = await self._db.execute(stmt)
        return list(result.scalars().all())

    async def get_gate(self, gate_id: str) -> Gate:
        result = await self._db.execute(select(Gate).where(Gate.gate_id == gate_id))
        gate = result.scalar_one_or_none()
        if gate is None:
            raise HTTPException(
                status_code=status.HTTP_404_NOT_FOUND,
                detail=f"Gate {gate_id} not found",
            )
        return gate

    async def create_gate(self, request: CreateGateRequest) -> Gate:
        existing = await self._db.execute(
            select(Gate.id).where(Gate.gate_id == request.gate_id)
        )
        if existing.scalar_one_or_none() is not None:
            raise HTTPException(
                status_code=status.HTTP_409_CONFLICT,
                detail=f"Gate {request.gate_id} already exists",
            )

        gate = Gate(
            gate_id=request.gate_id,
            terminal=request.terminal,
            gate_number=request.gate_number,
            gate_type=request.gate_type,
            gate_size=request.gate_size,
            status=request.status,
            is_active=request.is_active,
            has_jet_bridge=request.has_jet_bridge,
            features=[feature.value for feature in request.features],
            capacity=request.capacity,
        )
        self._db.add(gate)
        await self._publish()
        await self._db.refresh(gate)
        logger.info("Gate %s created", gate.gate_id)
        return gate

    async def update_gate(self, gate_id: str, request: UpdateGateRequest) -> Gate:
        gate = await self.get_gate(gate_id)
        update_data = request.model_dump(exclude_none=True)
        if "features" in update_data:
            update_data["features"] = [f.value for f in update_data["features"]]
        for key, value in update_data.items():
            setattr(gate, key, value)
        await self._publish()
        await self._db.refresh(gate)
        logger.info("Gate %s updated: %s", gate_id, sorted(update_data))
        return gate

    async def update_status(self, gate_id: str, new_status: GateStatus) -> Gate:
        gate = await self.get_gate(gate_id)
        previous = gate.status
        gate.status = new_status
        await self._publish()
        await self._db.refresh(gate)
        logger.info("Gate %s status %s -> %s", gate_id, previous, new_status)
        return gate

    async def delete_gate(self, gate_id: str) -> None:
        """Remove a gate together with all of its assignments."""
        gate = await self.get_gate(gate_id)
        removed = await self._db.execute(
            delete(Assignment).where(Assignment.gate_id == gate_id)
        )
        await self._db.delete(gate)
        await self._publish()
        logger.info(
            "Gate %s deleted with %d assignment(s)", gate_id, removed.rowcount or 0
        )

    async def statistics(self) -> GateStatistics:
        result = await self._db.execute(
            select(Gate.status, func.count()).group_by(Gate.status)
        )
        by_status = {gate_status: 0 for gate_status in GateStatus}
        for gate_status, count in result.all():
            by_status[GateStatus(gate_status)] = count
        return GateStatistics(total_gates=sum(by_status.values()), by_status=by_status)

    async def compatible_gates(self, aircraft_type: AircraftType) -> list[Gate]:
        result = await self._db.execute(
            select(Gate)
            .where(Gate.is_active.is_(True), Gate.status == GateStatus.AVAILABLE)
            .order_by(Gate.terminal, Gate.gate_number)
        )
        return [gate for gate in result.scalars() if is_compatible_with(gate, aircraft_type)]
