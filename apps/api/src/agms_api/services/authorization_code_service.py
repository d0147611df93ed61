"""Authorization codes gating self-registration into privileged roles."""

from __future__ import annotations

import logging
from typing import TYPE_CHECKING

from fastapi import HTTPException, status
from sqlalchemy import select

from agms_db.models import AuthorizationCode

if TYPE_CHECKING:
    from uuid import UUID

    from sqlalchemy.ext.asyncio import AsyncSession

    from agms_core.schemas import UserRole

logger = logging.getLogger(__name__)


class AuthorizationCodeService:
    """Validates and administers authorization codes."""

    def __init__(self, db: AsyncSession) -> None:
        self._db = db

    async def is_valid(self, code: str | None, role: UserRole) -> bool:
        """True if *code* is active and was issued for exactly *role*."""
        if code is None or not code.strip():
            logger.warning("Empty authorization code provided")
            return False
        result = await self._db.execute(
            select(AuthorizationCode).where(
                AuthorizationCode.code == code.strip(),
                AuthorizationCode.is_active.is_(True),
            )
        )
        record = result.scalar_one_or_none()
        return record is not None and record.role == role

    async def list_codes(self) -> list[AuthorizationCode]:
        result = await self._db.execute(
            select(AuthorizationCode).order_by(AuthorizationCode.created_at.desc())
        )
        return list(result.scalars().all())

    async def create_code(
        self, code: str, role: UserRole, created_by: str | None = None
    ) -> AuthorizationCode:
        existing = await self._db.execute(
            select(AuthorizationCode).where(AuthorizationCode.code == code)
        )
        if existing.scalar_one_or_none() is not None:
            raise HTTPException(
                status_code=status.HTTP_409_CONFLICT,
                detail="Authorization code already exists",
            )
        record = AuthorizationCode(
            code=code, role=role, is_active=True, created_by=created_by
        )
        self._db.add(record)
        await self._db.flush()
        await self._db.refresh(record)
        logger.info("Authorization code created for role %s by %s", role, created_by)
        return record

    async def deactivate(self, code_id: UUID) -> AuthorizationCode:
        record = await self._get_or_404(code_id)
        record.is_active = False
        await self._db.flush()
        await self._db.refresh(record)
        logger.info("Authorization code %s deactivated", code_id)
        return record

    async def delete(self, code_id: UUID) -> None:
        record = await self._get_or_404(code_id)
        await self._db.delete(record)
        await self._db.flush()
        logger.info("Authorization code %s deleted", code_id)

    async def ensure_defaults(self, defaults: dict[UserRole, str]) -> int:
        """Insert the bootstrap code for each role unless it already exists."""
        existing = await self._db.execute(
            select(AuthorizationCode.code).where(
                AuthorizationCode.code.in_(defaults.values())
            )
        )
        present = set(existing.scalars())
        created = 0
        for role, code in defaults.items():
            if code in present:
                continue
            self._db.add(
                AuthorizationCode(code=code, role=role, is_active=True, created_by="system")
            )
            created += 1
        await self._db.flush()
        logger.info("Seeded %d default authorization code(s)", created)
        return created

    async def _get_or_404(self, code_id: UUID) -> AuthorizationCode:
        record = await self._db.get(AuthorizationCode, code_id)
        if record is None:
            raise HTTPException(
                status_code=status.HTTP_404_NOT_FOUND,
                detail="Authorization code not found",
            )
        return record
