"""
System configuration endpoints.

Reading is open to any signed-in account so the mobile client can check
maintenance mode; updates need `can_manage_system`.
"""
from fastapi import APIRouter, Depends, HTTPException
from sqlalchemy.orm import Session

from libadmin.audit import AuditAction, safe_log
from libadmin.db import schemas
from libadmin.db.database import get_db
from libadmin.db.repositories import system as system_repo
from libadmin.api.deps import get_current_account_context, get_current_admin_context
from libadmin.api.permissions import ensure_permission

router = APIRouter(prefix="/system", tags=["system"])


@router.get("/config", response_model=schemas.SystemConfig)
def get_system_config(
    db: Session = Depends(get_db),
    user_context = Depends(get_current_account_context),
):
    config = system_repo.get_system_config(db)
    if not config:
        raise HTTPException(status_code=404, detail="System configuration not found")
    return config


@router.patch("/config", response_model=schemas.SystemConfig)
def update_system_config(
    payload: schemas.SystemConfigUpdate,
    db: Session = Depends(get_db),
    user_context = Depends(get_current_admin_context),
):
    _account, ctx = user_context
    ensure_permission(ctx, "can_manage_system")
    updates = payload.model_dump(exclude_unset=True)
    config = system_repo.update_system_config(db, updates, ctx["uid"])
    safe_log(
        db,
        action=AuditAction.SYSTEM_CONFIG_UPDATE,
        target_type="system_config",
        target_id=config.id,
        actor_uid=ctx["uid"],
        metadata={"fields": sorted(updates.keys())},
    )
    return config
