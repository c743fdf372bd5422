"""Business logic services package with public service helpers."""

from .auth_service import AuthError, AuthService
from .admin_user_service import AdminUserError, AdminUserService
from .analytics_service import AnalyticsService, summarize
from .storage_service import StorageService, get_storage_service

__all__ = [
    "AuthError",
    "AuthService",
    "AdminUserError",
    "AdminUserService",
    "AnalyticsService",
    "summarize",
    "StorageService",
    "get_storage_service",
]
