"""Administration endpoints - user accounts and authorization codes."""

from __future__ import annotations

import uuid

from fastapi import APIRouter

from agms_api.dependencies import AdminUser, DbDep
from agms_api.schemas.common import ErrorResponse, MessageResponse
from agms_api.schemas.users import (
    AuthorizationCodeResponse,
    CreateAuthorizationCodeRequest,
    UpdateUserRequest,
    UserResponse,
)
from agms_api.services.authorization_code_service import AuthorizationCodeService
from agms_api.services.user_service import UserService

router = APIRouter(prefix="/admin", tags=["admin"])


@router.get("/users", response_model=list[UserResponse])
async def list_users(admin: AdminUser, db: DbDep) -> list[UserResponse]:
    users = await UserService(db).list_users()
    return [UserResponse.model_validate(u) for u in users]


@router.get(
    "/users/{user_id}",
    response_model=UserResponse,
    responses={404: {"model": ErrorResponse}},
)
async def get_user(user_id: uuid.UUID, admin: AdminUser, db: DbDep) -> UserResponse:
    user = await UserService(db).get_user(user_id)
    return UserResponse.model_validate(user)


@router.put(
    "/users/{user_id}",
    response_model=UserResponse,
    responses={404: {"model": ErrorResponse}, 409: {"model": ErrorResponse}},
)
async def update_user(
    user_id: uuid.UUID,
    request: UpdateUserRequest,
    admin: AdminUser,
    db: DbDep,
) -> UserResponse:
    user = await UserService(db).update_user(user_id, request)
    return UserResponse.model_validate(user)


@router.delete(
    "/users/{user_id}",
    response_model=MessageResponse,
    responses={404: {"model": ErrorResponse}, 409: {"model": ErrorResponse}},
)
async def delete_user(user_id: uuid.UUID, admin: AdminUser, db: DbDep) -> MessageResponse:
    """Delete another user's account; administrators cannot remove themselves."""
    await UserService(db).delete_user(user_id, admin)
    return MessageResponse(message="User deleted")


@router.get("/auth-codes", response_model=list[AuthorizationCodeResponse])
async def list_auth_codes(admin: AdminUser, db: DbDep) -> list[AuthorizationCodeResponse]:
    codes = await AuthorizationCodeService(db).list_codes()
    return [AuthorizationCodeResponse.model_validate(c) for c in codes]


@router.post(
    "/auth-codes",
    response_model=AuthorizationCodeResponse,
    status_code=201,
    responses={409: {"model": ErrorResponse}},
)
async def create_auth_code(
    request: CreateAuthorizationCodeRequest,
    admin: AdminUser,
    db: DbDep,
) -> AuthorizationCodeResponse:
    code = await AuthorizationCodeService(db).create_code(
        request.code, request.role, created_by=admin.username
    )
    return AuthorizationCodeResponse.model_validate(code)


@router.post(
    "/auth-codes/{code_id}/deactivate",
    response_model=AuthorizationCodeResponse,
    responses={404: {"model": ErrorResponse}},
)
async def deactivate_auth_code(
    code_id: uuid.UUID, admin: AdminUser, db: DbDep
) -> AuthorizationCodeResponse:
    code = await AuthorizationCodeService(db).deactivate(code_id)
    return AuthorizationCodeResponse.model_validate(code)


@router.delete(
    "/auth-codes/{code_id}",
    response_model=MessageResponse,
    responses={404: {"model": ErrorResponse}},
)
async def delete_auth_code(code_id: uuid.UUID, admin: AdminUser, db: DbDep) -> MessageResponse:
    await AuthorizationCodeService(db).delete(code_id)
    return MessageResponse(message="Authorization code deleted")
