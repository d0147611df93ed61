"""Role-based dashboard routing."""

from __future__ import annotations

from typing import assert_never

from .schemas.enums import UserRole

PRIVILEGED_ROLES = frozenset({UserRole.ADMIN, UserRole.OPERATIONS_MANAGER})


def dashboard_path(role: UserRole) -> str:
    """Landing page for a freshly authenticated user."""
    match role:
        case UserRole.ADMIN:
            return "/admin/dashboard"
        case UserRole.OPERATIONS_MANAGER:
            return "/operations/dashboard"
        case UserRole.GATE_MANAGER:
            return "/gates/dashboard"
        case UserRole.AIRLINE_STAFF:
            return "/airline/dashboard"
        case UserRole.PUBLIC:
            return "/dashboard"
        case _:
            assert_never(role)


def requires_authorization_code(role: UserRole) -> bool:
    """Self-registration into these roles needs a matching authorization code."""
    return role in PRIVILEGED_ROLES
