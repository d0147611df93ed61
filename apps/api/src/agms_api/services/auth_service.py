"""Authentication service - registration, login, JWT management."""

from __future__ import annotations

import logging
from datetime import UTC, datetime, timedelta
from typing import TYPE_CHECKING
from uuid import UUID

import bcrypt
import jwt
from fastapi import HTTPException, status
from sqlalchemy import or_, select

from agms_api.config import settings
from agms_api.schemas.auth import TokenResponse
from agms_core.routing import dashboard_path, requires_authorization_code
from agms_db.models import User

from .authorization_code_service import AuthorizationCodeService

if TYPE_CHECKING:
    from sqlalchemy.ext.asyncio import AsyncSession

    from agms_api.schemas.auth import RegisterRequest

logger = logging.getLogger(__name__)


def hash_password(password: str) -> str:
    return bcrypt.hashpw(password.encode(), bcrypt.gensalt()).decode()


class AuthService:
    """Handles user authentication and JWT token management."""

    def __init__(self, db: AsyncSession) -> None:
        self.db = db

    async def register(self, request: RegisterRequest) -> User:
        """Register a new user.

        Raises 409 if the username or email is taken and 403 if a privileged
        role is requested without a matching authorization code.
        """
        logger.info("Processing registration for user: %s", request.username)
        existing = await self.db.execute(
            select(User).where(
                or_(User.username == request.username, User.email == request.email)
            )
        )
        if existing.scalars().first() is not None:
            logger.warning("Registration rejected, duplicate: %s", request.username)
            raise HTTPException(
                status_code=status.HTTP_409_CONFLICT,
                detail="Username or email already registered",
            )

        if requires_authorization_code(request.role):
            codes = AuthorizationCodeService(self.db)
            if not await codes.is_valid(request.auth_code, request.role):
                logger.warning("Invalid authorization code for role: %s", request.role)
                raise HTTPException(
                    status_code=status.HTTP_403_FORBIDDEN,
                    detail=f"A valid authorization code is required for role {request.role.value}",
                )

        user = User(
            username=request.username,
            email=request.email,
            first_name=request.first_name,
            last_name=request.last_name,
            phone_number=request.phone_number,
            password_hash=hash_password(request.password),
            role=request.role,
            is_active=True,
        )
        self.db.add(user)
        await self.db.flush()
        logger.info("Successfully registered user: %s", user.username)
        return user

    async def is_username_available(self, username: str) -> bool:
        result = await self.db.execute(select(User.id).where(User.username == username))
        return result.scalar_one_or_none() is None

    async def login(self, username: str, password: str) -> TokenResponse:
        """Authenticate user and return token pair."""
        logger.info("Attempting authentication for user: %s", username)
        result = await self.db.execute(select(User).where(User.username == username))
        user = result.scalar_one_or_none()
        if (
            user is None
            or not user.is_active
            or not bcrypt.checkpw(password.encode(), user.password_hash.encode())
        ):
            logger.warning("Authentication failed for user: %s", username)
            raise HTTPException(
                status_code=status.HTTP_401_UNAUTHORIZED,
                detail="Invalid username or password",
            )

        user.last_login = datetime.now(UTC)
        await self.db.flush()
        logger.info("Authentication successful for user: %s", username)
        return self.create_token_response(user)

    async def refresh_token(self, refresh_token: str) -> TokenResponse:
        """Issue new token pair from a valid refresh token."""
        payload = self.verify_token(refresh_token, expected_type="refresh")
        user = await self.db.get(User, UUID(str(payload["sub"])))
        if user is None or not user.is_active:
            raise HTTPException(
                status_code=status.HTTP_401_UNAUTHORIZED,
                detail="Account not found or disabled",
            )
        return self.create_token_response(user)

    def create_token_response(self, user: User) -> TokenResponse:
        """Build a TokenResponse with access + refresh tokens and landing page."""
        user_id = str(user.id)
        return TokenResponse(
            access_token=self.create_access_token(user_id, user.role.value),
            refresh_token=self.create_refresh_token(user_id),
            expires_in=settings.access_token_expire_minutes * 60,
            role=user.role,
            redirect_url=dashboard_path(user.role),
        )

    @staticmethod
    def create_access_token(user_id: str, role: str) -> str:
        """Create a short-lived access token."""
        expire = datetime.now(UTC) + timedelta(
            minutes=settings.access_token_expire_minutes,
        )
        return jwt.encode(
            {"sub": user_id, "role": role, "exp": expire, "type": "access"},
            settings.jwt_secret,
            algorithm=settings.jwt_algorithm,
        )

    @staticmethod
    def create_refresh_token(user_id: str) -> str:
        """Create a long-lived refresh token."""
        expire = datetime.now(UTC) + timedelta(
            days=settings.refresh_token_expire_days,
        )
        return jwt.encode(
            {"sub": user_id, "exp": expire, "type": "refresh"},
            settings.jwt_secret,
            algorithm=settings.jwt_algorithm,
        )

    @staticmethod
    def verify_token(token: str, expected_type: str = "access") -> dict:
        """Decode and validate a JWT token."""
        try:
            payload = jwt.decode(
                token,
                settings.jwt_secret,
                algorithms=[settings.jwt_algorithm],
            )
        except jwt.InvalidTokenError as exc:
            raise HTTPException(
                status_code=status.HTTP_401_UNAUTHORIZED,
                detail="Invalid or expired token",
            ) from exc

        if payload.get("type") != expected_type:
            raise HTTPException(
                status_code=status.HTTP_401_UNAUTHORIZED,
                detail="Invalid token type",
            )
        return payload
