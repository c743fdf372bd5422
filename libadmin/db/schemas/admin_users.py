from datetime import datetime
from typing import Any, Optional, List
from pydantic import BaseModel, ConfigDict

from .auth import CurrentUser


class AdminPermissions(BaseModel):
    can_manage_libraries: bool = False
    can_manage_books: bool = False
    can_manage_users: bool = False
    can_view_analytics: bool = False
    can_manage_system: bool = False


class AdminPermissionsPatch(BaseModel):
    can_manage_libraries: Optional[bool] = None
    can_manage_books: Optional[bool] = None
    can_manage_users: Optional[bool] = None
    can_view_analytics: Optional[bool] = None
    can_manage_system: Optional[bool] = None


class AdminUserCreate(BaseModel):
    # Loosely typed; the create flow validates and reports invalid-argument itself
    email: Any = None
    password: Any = None
    role: Any = None
    display_name: Any = None
    assigned_libraries: Any = None


class AdminUserCreateResult(BaseModel):
    uid: str
    email: str
    role: str
    message: str


class AdminUserUpdate(BaseModel):
    display_name: Optional[str] = None
    role: Optional[str] = None
    permissions: Optional[AdminPermissionsPatch] = None
    assigned_libraries: Optional[List[str]] = None
    is_active: Optional[bool] = None


class AdminUser(BaseModel):
    id: str
    email: str
    display_name: str = ''
    role: str
    permissions: AdminPermissions
    assigned_libraries: List[str] = []
    is_active: bool
    last_login_at: Optional[datetime] = None
    created_by: Optional[str] = None
    created_at: Optional[datetime] = None
    updated_at: Optional[datetime] = None
    model_config = ConfigDict(from_attributes=True)


class AuthContext(BaseModel):
    """Dashboard view of the signed-in account and its admin profile."""
    current_user: CurrentUser
    admin_user: Optional[AdminUser] = None
    is_admin: bool = False
    is_super_admin: bool = False
    source: Optional[str] = None
