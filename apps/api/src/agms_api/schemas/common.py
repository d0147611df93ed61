"""Shared response schemas."""

from __future__ import annotations

from pydantic import BaseModel


class ErrorResponse(BaseModel):
    """Standard error payload."""

    detail: str
    code: str | None = None


class MessageResponse(BaseModel):
    """Acknowledgement for writes that return no entity."""

    success: bool = True
    message: str


class ConflictDetail(BaseModel):
    message: str
    conflicting_ids: list[str]


class ConflictErrorResponse(BaseModel):
    """409 payload for double-booked gate windows."""

    detail: ConflictDetail
