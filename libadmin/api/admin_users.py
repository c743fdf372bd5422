"""
Admin user endpoints.

`POST /admin-users/` is the create-admin operation; the caller's custom
claims decide whether it may run.
"""
import logging
from typing import List, Optional

from fastapi import APIRouter, Depends, HTTPException, status
from sqlalchemy.orm import Session

from libadmin.audit import AuditAction, AuditStatus, safe_log
from libadmin.db import schemas
from libadmin.db.database import get_db
from libadmin.db.repositories import admin_users as admin_repo
from libadmin.api.deps import get_current_account_context, get_current_admin_context
from libadmin.api.permissions import can_read_admin_user, ensure_permission
from libadmin.services.admin_user_service import AdminUserError, AdminUserService

logger = logging.getLogger("libadmin.api")

router = APIRouter(prefix="/admin-users", tags=["admin-users"])

_ERROR_STATUS = {
    "unauthenticated": status.HTTP_401_UNAUTHORIZED,
    "permission-denied": status.HTTP_403_FORBIDDEN,
    "invalid-argument": status.HTTP_422_UNPROCESSABLE_ENTITY,
    "not-found": status.HTTP_404_NOT_FOUND,
    "internal": status.HTTP_500_INTERNAL_SERVER_ERROR,
}


def _http_error(e: AdminUserError) -> HTTPException:
    return HTTPException(
        status_code=_ERROR_STATUS.get(e.code, status.HTTP_500_INTERNAL_SERVER_ERROR),
        detail={"code": e.code, "message": e.message},
    )


@router.post("/", response_model=schemas.AdminUserCreateResult, status_code=status.HTTP_201_CREATED)
def create_admin_user(
    payload: schemas.AdminUserCreate,
    db: Session = Depends(get_db),
    user_context = Depends(get_current_account_context),
):
    _account, ctx = user_context
    try:
        result = AdminUserService(db).create_admin_user(ctx["uid"], ctx.get("claims"), payload)
    except AdminUserError as e:
        if e.code in ("permission-denied", "internal"):
            safe_log(
                db,
                action=AuditAction.ADMIN_USER_CREATE,
                status=AuditStatus.FAILURE,
                target_type="admin_user",
                actor_uid=ctx["uid"],
                reason=e.message,
            )
        raise _http_error(e)
    safe_log(
        db,
        action=AuditAction.ADMIN_USER_CREATE,
        target_type="admin_user",
        target_id=result["uid"],
        actor_uid=ctx["uid"],
        metadata={"email": result["email"], "role": result["role"]},
    )
    return result


@router.get("/", response_model=List[schemas.AdminUser])
def list_admin_users(
    role: Optional[str] = None,
    skip: int = 0,
    limit: int = 100,
    db: Session = Depends(get_db),
    user_context = Depends(get_current_admin_context),
):
    _account, ctx = user_context
    ensure_permission(ctx, "can_manage_users")
    return admin_repo.list_admin_users(db, skip=skip, limit=limit, role=role)


@router.get("/{uid}", response_model=schemas.AdminUser)
def get_admin_user(
    uid: str,
    db: Session = Depends(get_db),
    user_context = Depends(get_current_admin_context),
):
    _account, ctx = user_context
    if not can_read_admin_user(ctx, uid):
        raise HTTPException(status_code=403, detail="Forbidden")
    profile = admin_repo.get_admin_user(db, uid)
    if not profile:
        raise HTTPException(status_code=404, detail="Admin user not found")
    return profile


@router.patch("/{uid}", response_model=schemas.AdminUser)
def update_admin_user(
    uid: str,
    payload: schemas.AdminUserUpdate,
    db: Session = Depends(get_db),
    user_context = Depends(get_current_admin_context),
):
    _account, ctx = user_context
    ensure_permission(ctx, "can_manage_users")
    try:
        profile = AdminUserService(db).update_admin_user(ctx["uid"], uid, payload)
    except AdminUserError as e:
        raise _http_error(e)
    safe_log(
        db,
        action=AuditAction.ADMIN_USER_UPDATE,
        target_type="admin_user",
        target_id=uid,
        actor_uid=ctx["uid"],
        metadata={"fields": sorted(payload.model_dump(exclude_unset=True).keys())},
    )
    return profile


@router.delete("/{uid}", response_model=schemas.AdminUser)
def deactivate_admin_user(
    uid: str,
    db: Session = Depends(get_db),
    user_context = Depends(get_current_admin_context),
):
    _account, ctx = user_context
    ensure_permission(ctx, "can_manage_users")
    try:
        profile = AdminUserService(db).deactivate_admin_user(ctx["uid"], uid)
    except AdminUserError as e:
        raise _http_error(e)
    safe_log(db, action=AuditAction.ADMIN_USER_DEACTIVATE, target_type="admin_user", target_id=uid, actor_uid=ctx["uid"])
    return profile
