"""User-related request/response schemas."""

from __future__ import annotations

import uuid  # noqa: TC003
from datetime import datetime  # noqa: TC003

from pydantic import BaseModel, ConfigDict, EmailStr, Field

from agms_core.schemas import UserRole


class UserResponse(BaseModel):
    """Public user profile."""

    id: uuid.UUID
    username: str
    email: str
    first_name: str
    last_name: str
    phone_number: str
    role: UserRole
    is_active: bool
    last_login: datetime | None = None
    created_at: datetime
    model_config = ConfigDict(from_attributes=True)


class DashboardResponse(BaseModel):
    role: UserRole
    role_name: str
    redirect_url: str


class UpdateUserRequest(BaseModel):
    """Partial update of a user by an administrator."""

    email: EmailStr | None = None
    first_name: str | None = Field(default=None, min_length=2, max_length=32)
    last_name: str | None = Field(default=None, min_length=2, max_length=32)
    phone_number: str | None = Field(default=None, pattern=r"^\+?[1-9][0-9]{7,14}$")
    role: UserRole | None = None
    is_active: bool | None = None


class AuthorizationCodeResponse(BaseModel):
    id: uuid.UUID
    code: str
    role: UserRole
    is_active: bool
    created_by: str | None = None
    created_at: datetime
    model_config = ConfigDict(from_attributes=True)


class CreateAuthorizationCodeRequest(BaseModel):
    code: str = Field(min_length=4, max_length=64)
    role: UserRole
