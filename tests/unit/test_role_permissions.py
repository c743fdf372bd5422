import pytest

from libadmin.utils.role_permissions import (
    ALLOWED_ROLES,
    PERMISSION_KEYS,
    get_role_permissions,
    normalize_permissions,
    role_has_all_libraries,
    role_is_dashboard_admin,
    role_is_super_admin,
    validate_role,
)


def test_super_admin_has_every_permission():
    perms = get_role_permissions("super_admin")
    assert set(perms) == set(PERMISSION_KEYS)
    assert all(perms.values())


@pytest.mark.parametrize("role", ["admin", "librarian"])
def test_non_super_roles_cannot_manage_users_or_system(role):
    perms = get_role_permissions(role)
    assert perms["can_manage_users"] is False
    assert perms["can_manage_system"] is False
    assert perms["can_manage_libraries"] is True
    assert perms["can_manage_books"] is True
    assert perms["can_view_analytics"] is True


def test_get_role_permissions_returns_copy():
    perms = get_role_permissions("admin")
    perms["can_manage_users"] = True
    assert get_role_permissions("admin")["can_manage_users"] is False


def test_unknown_role_rejected():
    with pytest.raises(ValueError):
        get_role_permissions("janitor")
    with pytest.raises(ValueError):
        validate_role("janitor")
    assert ALLOWED_ROLES == {"super_admin", "admin", "librarian"}


def test_normalize_permissions_ignores_unknown_keys():
    perms = normalize_permissions("librarian", {"can_view_analytics": False, "can_fly": True, "can_manage_books": None})
    assert perms["can_view_analytics"] is False
    assert perms["can_manage_books"] is True
    assert "can_fly" not in perms


def test_role_predicates():
    assert role_is_dashboard_admin("super_admin")
    assert role_is_dashboard_admin("admin")
    assert not role_is_dashboard_admin("librarian")
    assert not role_is_dashboard_admin(None)
    assert role_is_super_admin("super_admin")
    assert not role_is_super_admin("admin")
    assert role_has_all_libraries("admin")
    assert not role_has_all_libraries("librarian")
