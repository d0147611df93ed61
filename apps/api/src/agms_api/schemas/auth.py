"""Authentication request/response schemas."""

from __future__ import annotations

import re

from pydantic import BaseModel, EmailStr, Field, field_validator

from agms_core.schemas import UserRole

_PASSWORD_CLASSES = (
    (re.compile(r"[0-9]"), "one digit"),
    (re.compile(r"[a-z]"), "one lowercase letter"),
    (re.compile(r"[A-Z]"), "one uppercase letter"),
    (re.compile(r"[@#$%^&+=!]"), "one special character (@#$%^&+=!)"),
)


class RegisterRequest(BaseModel):
    """User registration request."""

    username: str = Field(min_length=3, max_length=32)
    email: EmailStr
    first_name: str = Field(min_length=2, max_length=32)
    last_name: str = Field(min_length=2, max_length=32)
    phone_number: str = Field(pattern=r"^\+?[1-9][0-9]{7,14}$")
    password: str = Field(min_length=8, max_length=128)
    role: UserRole = UserRole.PUBLIC
    auth_code: str | None = None

    @field_validator("password")
    @classmethod
    def _check_complexity(cls, value: str) -> str:
        missing = [label for pattern, label in _PASSWORD_CLASSES if not pattern.search(value)]
        if missing:
            msg = "Password must contain at least " + ", ".join(missing)
            raise ValueError(msg)
        return value


class LoginRequest(BaseModel):
    """User login request."""

    username: str = Field(min_length=1)
    password: str = Field(min_length=1)


class TokenResponse(BaseModel):
    """JWT token pair plus where the client should land."""

    access_token: str
    refresh_token: str
    token_type: str = "bearer"
    expires_in: int
    role: UserRole
    redirect_url: str


class UsernameAvailability(BaseModel):
    username: str
    available: bool
