"""Authentication endpoints - register, login, refresh."""

from __future__ import annotations

from typing import Annotated

from fastapi import APIRouter, Body, Query

from agms_api.dependencies import DbDep
from agms_api.schemas.auth import (
    LoginRequest,
    RegisterRequest,
    TokenResponse,
    UsernameAvailability,
)
from agms_api.schemas.common import ErrorResponse
from agms_api.services.auth_service import AuthService

router = APIRouter(prefix="/auth", tags=["auth"])


@router.post(
    "/register",
    response_model=TokenResponse,
    status_code=201,
    responses={403: {"model": ErrorResponse}, 409: {"model": ErrorResponse}},
)
async def register(
    request: RegisterRequest,
    db: DbDep,
) -> TokenResponse:
    """Register a new user and return tokens plus their landing page."""
    service = AuthService(db)
    user = await service.register(request)
    return service.create_token_response(user)


@router.post(
    "/login",
    response_model=TokenResponse,
    responses={401: {"model": ErrorResponse}},
)
async def login(
    request: LoginRequest,
    db: DbDep,
) -> TokenResponse:
    """Authenticate and return tokens."""
    service = AuthService(db)
    return await service.login(request.username, request.password)


@router.post("/refresh", response_model=TokenResponse)
async def refresh(
    refresh_token: Annotated[str, Body(embed=True)],
    db: DbDep,
) -> TokenResponse:
    """Exchange a refresh token for a new token pair."""
    service = AuthService(db)
    return await service.refresh_token(refresh_token)


@router.get("/username-available", response_model=UsernameAvailability)
async def username_available(
    db: DbDep,
    username: Annotated[str, Query(min_length=3, max_length=32)],
) -> UsernameAvailability:
    available = await AuthService(db).is_username_available(username)
    return UsernameAvailability(username=username, available=available)
