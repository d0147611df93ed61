"""FastAPI dependency injection providers."""

from __future__ import annotations

from typing import TYPE_CHECKING, Annotated
from uuid import UUID

import jwt
from fastapi import Depends, HTTPException, status
from fastapi.security import HTTPAuthorizationCredentials, HTTPBearer
from sqlalchemy.ext.asyncio import AsyncSession

from agms_api.config import settings
from agms_core.schemas import UserRole
from agms_db.database import get_db as _db_dependency
from agms_db.models import User

if TYPE_CHECKING:
    from collections.abc import Callable, Coroutine
    from typing import Any

# Re-export the DB dependency unchanged.
get_db = _db_dependency

DbDep = Annotated[AsyncSession, Depends(get_db)]

_bearer_scheme = HTTPBearer(auto_error=False)


async def get_token_payload(
    credentials: Annotated[
        HTTPAuthorizationCredentials | None, Depends(_bearer_scheme)
    ],
) -> dict | None:
    """Decode a JWT access token, or return *None* if absent or invalid."""
    if credentials is None:
        return None
    try:
        payload = jwt.decode(
            credentials.credentials,
            settings.jwt_secret,
            algorithms=[settings.jwt_algorithm],
        )
    except jwt.PyJWTError:
        return None
    if payload.get("type") != "access":
        return None
    return payload


async def require_current_user(
    payload: Annotated[dict | None, Depends(get_token_payload)],
    db: DbDep,
) -> User:
    """Load the authenticated, active user or raise 401."""
    if payload is None:
        raise HTTPException(
            status_code=status.HTTP_401_UNAUTHORIZED,
            detail="Authentication required",
        )
    try:
        user_id = UUID(str(payload.get("sub")))
    except ValueError:
        raise HTTPException(
            status_code=status.HTTP_401_UNAUTHORIZED,
            detail="Invalid token subject",
        ) from None
    user = await db.get(User, user_id)
    if user is None or not user.is_active:
        raise HTTPException(
            status_code=status.HTTP_401_UNAUTHORIZED,
            detail="Account not found or disabled",
        )
    return user


CurrentUser = Annotated[User, Depends(require_current_user)]


def require_roles(
    *roles: UserRole,
) -> Callable[..., Coroutine[Any, Any, User]]:
    """Build a dependency admitting only users holding one of *roles*."""
    allowed = frozenset(roles)

    async def _guard(user: CurrentUser) -> User:
        if user.role not in allowed:
            raise HTTPException(
                status_code=status.HTTP_403_FORBIDDEN,
                detail=f"Role {user.role.value} may not perform this action",
            )
        return user

    return _guard


AdminUser = Annotated[User, Depends(require_roles(UserRole.ADMIN))]
GateOperator = Annotated[
    User,
    Depends(
        require_roles(
            UserRole.ADMIN, UserRole.OPERATIONS_MANAGER, UserRole.GATE_MANAGER
        )
    ),
]
OperationsUser = Annotated[
    User, Depends(require_roles(UserRole.ADMIN, UserRole.OPERATIONS_MANAGER))
]
FlightStatusUser = Annotated[
    User,
    Depends(
        require_roles(
            UserRole.ADMIN, UserRole.OPERATIONS_MANAGER, UserRole.AIRLINE_STAFF
        )
    ),
]
