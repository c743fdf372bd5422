"""
Domain-split SQLAlchemy models with a single import surface.

Exposes `Base`, the timestamp helpers, and all ORM classes.
"""

from .base import Base, now_utc, new_id, as_utc, epoch_ms, apply_patch  # re-export

# Domain models
from .auth import AuthAccount, AuthSession
from .admin_users import AdminUser
from .libraries import Library, Floor, Shelf, ShelfBook
from .books import Book, BookLocation
from .activity import Scan, Correction, DailyAnalytics
from .system import SystemConfig, SYSTEM_CONFIG_ID
from .audit import AuditLog

__all__ = [
    # base
    "Base",
    "now_utc",
    "new_id",
    "as_utc",
    "epoch_ms",
    "apply_patch",
    # auth/admin
    "AuthAccount",
    "AuthSession",
    "AdminUser",
    # catalog
    "Library",
    "Floor",
    "Shelf",
    "ShelfBook",
    "Book",
    "BookLocation",
    # activity
    "Scan",
    "Correction",
    "DailyAnalytics",
    # system/audit
    "SystemConfig",
    "SYSTEM_CONFIG_ID",
    "AuditLog",
]
