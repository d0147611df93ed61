"""User and authorization code models."""

from __future__ import annotations

from datetime import datetime  # noqa: TC003

from sqlalchemy import Boolean, DateTime, Index, String
from sqlalchemy.orm import Mapped, mapped_column

from agms_core.schemas import UserRole

from .base import Base, TimestampMixin, UUIDPrimaryKeyMixin


class User(UUIDPrimaryKeyMixin, TimestampMixin, Base):
    """Users table."""

    __tablename__ = "users"

    username: Mapped[str] = mapped_column(String(32), unique=True, nullable=False)
    email: Mapped[str] = mapped_column(String(255), unique=True, nullable=False)
    first_name: Mapped[str] = mapped_column(String(32), nullable=False)
    last_name: Mapped[str] = mapped_column(String(32), nullable=False)
    phone_number: Mapped[str] = mapped_column(String(16), nullable=False)
    password_hash: Mapped[str] = mapped_column(String(255), nullable=False)
    role: Mapped[UserRole] = mapped_column(nullable=False, default=UserRole.PUBLIC)
    is_active: Mapped[bool] = mapped_column(Boolean, nullable=False, default=True)
    last_login: Mapped[datetime | None] = mapped_column(DateTime(timezone=True))

    __table_args__ = (
        Index("ix_users_username", "username"),
        Index("ix_users_email", "email"),
    )

    def __repr__(self) -> str:
        return f"<User {self.username} ({self.role.value})>"


class AuthorizationCode(UUIDPrimaryKeyMixin, TimestampMixin, Base):
    """Codes that unlock privileged roles at self-registration."""

    __tablename__ = "authorization_codes"

    code: Mapped[str] = mapped_column(String(64), unique=True, nullable=False)
    role: Mapped[UserRole] = mapped_column(nullable=False)
    is_active: Mapped[bool] = mapped_column(Boolean, nullable=False, default=True)
    created_by: Mapped[str | None] = mapped_column(String(32))

    def __repr__(self) -> str:
        return f"<AuthorizationCode {self.role.value} active={self.is_active}>"
