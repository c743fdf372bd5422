"""
Role-based permission utilities for admin profiles.

Defines the default permission set each admin role receives when a profile
is created, or when the role is derived from custom claims.
"""

from typing import Dict, FrozenSet


ROLE_SUPER_ADMIN = "super_admin"
ROLE_ADMIN = "admin"
ROLE_LIBRARIAN = "librarian"

PERMISSION_KEYS = (
    "can_manage_libraries",
    "can_manage_books",
    "can_manage_users",
    "can_view_analytics",
    "can_manage_system",
)

ROLE_PERMISSIONS = {
    ROLE_SUPER_ADMIN: {
        "can_manage_libraries": True,
        "can_manage_books": True,
        "can_manage_users": True,
        "can_view_analytics": True,
        "can_manage_system": True,
    },
    ROLE_ADMIN: {
        "can_manage_libraries": True,
        "can_manage_books": True,
        "can_manage_users": False,
        "can_view_analytics": True,
        "can_manage_system": False,
    },
    ROLE_LIBRARIAN: {
        "can_manage_libraries": True,
        "can_manage_books": True,
        "can_manage_users": False,
        "can_view_analytics": True,
        "can_manage_system": False,
    },
}

ALLOWED_ROLES = set(ROLE_PERMISSIONS.keys())

# Roles shown as "admin" in the dashboard auth context
DASHBOARD_ADMIN_ROLES: FrozenSet[str] = frozenset({ROLE_SUPER_ADMIN, ROLE_ADMIN})
# Roles that may write to any library regardless of assignment
UNRESTRICTED_LIBRARY_ROLES: FrozenSet[str] = frozenset({ROLE_SUPER_ADMIN, ROLE_ADMIN})


def get_role_permissions(role: str) -> Dict[str, bool]:
    """
    Get the default permissions for a given role.

    Raises:
        ValueError: If role is not recognized
    """
    if role not in ROLE_PERMISSIONS:
        raise ValueError(f"Unknown role: {role}. Allowed roles: {sorted(ROLE_PERMISSIONS.keys())}")

    return ROLE_PERMISSIONS[role].copy()


def validate_role(role: str) -> None:
    """
    Validate that a role is allowed.

    Raises:
        ValueError: If role is not allowed
    """
    if role not in ALLOWED_ROLES:
        raise ValueError(f"Invalid role '{role}'. Allowed roles: {sorted(ALLOWED_ROLES)}")


def normalize_permissions(role: str, overrides: Dict[str, bool] | None = None) -> Dict[str, bool]:
    """Return the role defaults with known keys from ``overrides`` applied."""
    permissions = get_role_permissions(role)
    for key, value in (overrides or {}).items():
        if key in PERMISSION_KEYS and value is not None:
            permissions[key] = bool(value)
    return permissions


def role_is_dashboard_admin(role: str | None) -> bool:
    return role in DASHBOARD_ADMIN_ROLES


def role_is_super_admin(role: str | None) -> bool:
    return role == ROLE_SUPER_ADMIN


def role_has_all_libraries(role: str | None) -> bool:
    """Return True if the role is not restricted to assigned libraries."""
    return role in UNRESTRICTED_LIBRARY_ROLES
