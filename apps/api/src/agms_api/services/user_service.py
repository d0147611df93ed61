"""User service - profile lookup and administration."""

from __future__ import annotations

import logging
from typing import TYPE_CHECKING

from fastapi import HTTPException, status
from sqlalchemy import select

from agms_db.models import User

if TYPE_CHECKING:
    from uuid import UUID

    from sqlalchemy.ext.asyncio import AsyncSession

    from agms_api.schemas.users import UpdateUserRequest

logger = logging.getLogger(__name__)


class UserService:
    """Handles user lookup and administrative changes."""

    def __init__(self, db: AsyncSession) -> None:
        self.db = db

    async def get_user_by_id(self, user_id: UUID) -> User | None:
        """Fetch a user by primary key."""
        result = await self.db.execute(select(User).where(User.id == user_id))
        return result.scalar_one_or_none()

    async def list_users(self) -> list[User]:
        result = await self.db.execute(select(User).order_by(User.username))
        return list(result.scalars().all())

    async def update_user(self, user_id: UUID, changes: UpdateUserRequest) -> User:
        """Apply a partial update; email must stay unique."""
        user = await self.get_user(user_id)
        update_data = changes.model_dump(exclude_none=True)

        new_email = update_data.get("email")
        if new_email is not None and new_email != user.email:
            clash = await self.db.execute(select(User.id).where(User.email == new_email))
            if clash.scalar_one_or_none() is not None:
                raise HTTPException(
                    status_code=status.HTTP_409_CONFLICT,
                    detail="Email already registered",
                )

        for key, value in update_data.items():
            setattr(user, key, value)

        await self.db.flush()
        await self.db.refresh(user)
        logger.info("User %s updated: %s", user.username, sorted(update_data))
        return user

    async def delete_user(self, user_id: UUID, acting_user: User) -> None:
        if user_id == acting_user.id:
            raise HTTPException(
                status_code=status.HTTP_409_CONFLICT,
                detail="Administrators cannot delete their own account",
            )
        user = await self.get_user(user_id)
        await self.db.delete(user)
        await self.db.flush()
        logger.info("User %s deleted by %s", user.username, acting_user.username)

    async def get_user(self, user_id: UUID) -> User:
        """Fetch a user by primary key or raise 404."""
        user = await self.get_user_by_id(user_id)
        if user is None:
            raise HTTPException(
                status_code=status.HTTP_404_NOT_FOUND,
                detail="User not found",
            )
        return user
