from __future__ import annotations

import pytest

from agms_core.routing import dashboard_path, requires_authorization_code
from agms_core.schemas import UserRole


@pytest.mark.parametrize(
    ("role", "path"),
    [
        (UserRole.ADMIN, "/admin/dashboard"),
        (UserRole.OPERATIONS_MANAGER, "/operations/dashboard"),
        (UserRole.GATE_MANAGER, "/gates/dashboard"),
        (UserRole.AIRLINE_STAFF, "/airline/dashboard"),
        (UserRole.PUBLIC, "/dashboard"),
    ],
)
def test_dashboard_path(role: UserRole, path: str) -> None:
    assert dashboard_path(role) == path


def test_every_role_has_a_dashboard() -> None:
    assert all(dashboard_path(role).endswith("dashboard") for role in UserRole)


def test_privileged_roles_need_a_code() -> None:
    assert requires_authorization_code(UserRole.ADMIN)
    assert requires_authorization_code(UserRole.OPERATIONS_MANAGER)
    assert not requires_authorization_code(UserRole.GATE_MANAGER)
    assert not requires_authorization_code(UserRole.PUBLIC)


def test_role_display_names() -> None:
    assert UserRole.OPERATIONS_MANAGER.display_name == "Operations Manager"
