"""
Permission checks for admin contexts.

Key helpers:
- has_permission(ctx, key)
- can_write_library(ctx, library_id)
- can_read_admin_user(ctx, uid)
The ensure_* variants raise 403.
"""
from typing import Optional, Dict, Any

from fastapi import HTTPException, status

from libadmin.utils.role_permissions import role_has_all_libraries


def has_permission(ctx: Optional[Dict[str, Any]], key: str) -> bool:
    if not ctx or not ctx.get("is_active", False):
        return False
    return bool((ctx.get("permissions") or {}).get(key))


def ensure_permission(ctx: Optional[Dict[str, Any]], key: str) -> None:
    if not has_permission(ctx, key):
        raise HTTPException(status_code=status.HTTP_403_FORBIDDEN, detail=f"Missing permission: {key}")


def can_write_library(ctx: Optional[Dict[str, Any]], library_id: str) -> bool:
    """Library writes need can_manage_libraries; librarians only reach assigned libraries."""
    if not has_permission(ctx, "can_manage_libraries"):
        return False
    if role_has_all_libraries(ctx.get("role")):
        return True
    return library_id in (ctx.get("assigned_libraries") or [])


def ensure_library_write(ctx: Optional[Dict[str, Any]], library_id: str) -> None:
    if not has_permission(ctx, "can_manage_libraries"):
        raise HTTPException(status_code=status.HTTP_403_FORBIDDEN, detail="Missing permission: can_manage_libraries")
    if not can_write_library(ctx, library_id):
        raise HTTPException(status_code=status.HTTP_403_FORBIDDEN, detail="Library is not assigned to this account")


def can_read_admin_user(ctx: Optional[Dict[str, Any]], uid: str) -> bool:
    if not ctx:
        return False
    return ctx.get("uid") == uid or has_permission(ctx, "can_manage_users")
