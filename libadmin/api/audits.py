"""
Audit log API endpoints.
"""
from typing import Optional, List

from fastapi import APIRouter, Depends
from sqlalchemy.orm import Session

from libadmin.db.database import get_db
from libadmin.db import schemas
from libadmin.db.repositories import audits as audit_repo
from libadmin.api.deps import get_current_admin_context
from libadmin.api.permissions import ensure_permission

router = APIRouter(prefix="/audits", tags=["audits"])


@router.get("/", response_model=List[schemas.AuditLog])
def list_audit_logs(
    actor_uid: Optional[str] = None,
    action_type: Optional[str] = None,
    target_type: Optional[str] = None,
    status: Optional[str] = None,
    skip: int = 0,
    limit: int = 100,
    db: Session = Depends(get_db),
    user_context = Depends(get_current_admin_context),
):
    _account, ctx = user_context
    ensure_permission(ctx, "can_manage_system")
    audit_logs = audit_repo.get_audit_logs(
        db,
        actor_uid=actor_uid,
        action_type=action_type,
        target_type=target_type,
        status=status,
        skip=skip,
        limit=limit,
    )
    # The ORM attribute is metadata_json; the schema exposes it as metadata
    return [
        schemas.AuditLog(
            id=log.id,
            actor_uid=log.actor_uid,
            action_type=log.action_type,
            status=log.status,
            target_type=log.target_type,
            target_id=log.target_id,
            reason=log.reason,
            metadata=log.get_metadata(),
            created_at=log.created_at,
        )
        for log in audit_logs
    ]
