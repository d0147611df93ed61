"""Endpoints for the authenticated user's own profile."""

from __future__ import annotations

from fastapi import APIRouter

from agms_api.dependencies import CurrentUser
from agms_api.schemas.users import DashboardResponse, UserResponse
from agms_core.routing import dashboard_path

router = APIRouter(prefix="/users", tags=["users"])


@router.get("/me", response_model=UserResponse)
async def get_me(current_user: CurrentUser) -> UserResponse:
    """Return the authenticated user's profile."""
    return UserResponse.model_validate(current_user)


@router.get("/me/dashboard", response_model=DashboardResponse)
async def get_dashboard(current_user: CurrentUser) -> DashboardResponse:
    """Tell the client which dashboard the user's role lands on."""
    return DashboardResponse(
        role=current_user.role,
        role_name=current_user.role.display_name,
        redirect_url=dashboard_path(current_user.role),
    )
