"""
Audit logging helpers and enums.

Centralized helpers to persist normalized audit records with a consistent
schema. Routes call `safe_log` so a failed audit write never fails the request.
"""
from __future__ import annotations
import logging
from enum import Enum
from typing import Any, Optional, Dict
from sqlalchemy.orm import Session

from libadmin.db import schemas
from libadmin.db.repositories import audits as audit_repo

logger = logging.getLogger("libadmin.audit")


class AuditAction(str, Enum):
    # Session
    SIGN_IN = "sign_in"
    SIGN_OUT = "sign_out"
    # Library hierarchy
    LIBRARY_CREATE = "library_create"
    LIBRARY_UPDATE = "library_update"
    LIBRARY_DELETE = "library_delete"
    FLOOR_CREATE = "floor_create"
    FLOOR_UPDATE = "floor_update"
    SHELF_CREATE = "shelf_create"
    SHELF_UPDATE = "shelf_update"
    SHELF_BOOK_ADD = "shelf_book_add"
    SHELF_BOOK_REMOVE = "shelf_book_remove"
    # Catalog
    BOOK_CREATE = "book_create"
    BOOK_UPDATE = "book_update"
    BOOK_DELETE = "book_delete"
    BOOK_POSITION_UPDATE = "book_position_update"
    # Admin users
    ADMIN_USER_CREATE = "admin_user_create"
    ADMIN_USER_UPDATE = "admin_user_update"
    ADMIN_USER_DEACTIVATE = "admin_user_deactivate"
    # System
    SYSTEM_CONFIG_UPDATE = "system_config_update"
    ANALYTICS_ROLLUP = "analytics_rollup"
    FILE_UPLOAD = "file_upload"
    FILE_DELETE = "file_delete"


class AuditStatus(str, Enum):
    SUCCESS = "success"
    FAILURE = "failure"


def log(
    db: Session,
    *,
    action: AuditAction | str,
    status: AuditStatus | str = AuditStatus.SUCCESS,
    target_type: str,
    target_id: Optional[str] = None,
    actor_uid: Optional[str],
    reason: Optional[str] = None,
    metadata: Optional[Dict[str, Any]] = None,
):
    """Central audit logging helper.

    Ensures consistent schema and a single place for enrichment.
    """
    # Persist pure string values, not Enum reprs
    action_value = action.value if isinstance(action, AuditAction) else str(action)
    status_value = status.value if isinstance(status, AuditStatus) else str(status)
    audit_log = schemas.AuditLogCreate(
        action_type=action_value,
        status=status_value,
        target_type=target_type,
        target_id=str(target_id) if target_id is not None else None,
        reason=reason,
        metadata=metadata or {},
    )
    return audit_repo.create_audit_log(db, audit_log=audit_log, actor_uid=actor_uid)


def safe_log(db: Session, **kwargs) -> None:
    """Write an audit record; failures are logged and never reach the caller."""
    try:
        log(db, **kwargs)
    except Exception as e:
        db.rollback()
        logger.warning("Audit write failed for %s: %s", kwargs.get("action"), e)


__all__ = ["AuditAction", "AuditStatus", "log", "safe_log"]
