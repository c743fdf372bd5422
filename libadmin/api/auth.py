"""
Session endpoints: sign-in, sign-out and the dashboard auth context.
"""
import logging
from typing import Optional

from fastapi import APIRouter, Depends, Header, HTTPException
from sqlalchemy.orm import Session

from libadmin.audit import AuditAction, AuditStatus, safe_log
from libadmin.db import schemas
from libadmin.db.database import get_db
from libadmin.db.repositories import admin_users as admin_repo
from libadmin.api.deps import bearer_token, get_current_account_context
from libadmin.services.auth_service import AuthError, AuthService

logger = logging.getLogger("libadmin.auth")

router = APIRouter(prefix="/auth", tags=["auth"])


@router.post("/sign-in", response_model=schemas.SignInResponse)
def sign_in(payload: schemas.SignInRequest, db: Session = Depends(get_db)):
    try:
        result = AuthService(db).sign_in(payload.email, payload.password)
    except AuthError as e:
        logger.info("Sign-in rejected for %s: %s", payload.email, e.detail)
        safe_log(
            db,
            action=AuditAction.SIGN_IN,
            status=AuditStatus.FAILURE,
            target_type="auth_account",
            actor_uid=None,
            reason=e.detail,
            metadata={"email": payload.email.strip().lower()},
        )
        raise HTTPException(status_code=e.status_code, detail=e.detail)
    safe_log(
        db,
        action=AuditAction.SIGN_IN,
        target_type="auth_account",
        target_id=result["uid"],
        actor_uid=result["uid"],
    )
    return result


@router.post("/sign-out")
def sign_out(
    db: Session = Depends(get_db),
    authorization: Optional[str] = Header(default=None),
):
    token = bearer_token(authorization)
    uid = AuthService(db).sign_out(token) if token else None
    if uid:
        safe_log(db, action=AuditAction.SIGN_OUT, target_type="auth_account", target_id=uid, actor_uid=uid)
    return {"status": "signed_out"}


@router.get("/me", response_model=schemas.AuthContext)
def get_auth_context(
    db: Session = Depends(get_db),
    user_context = Depends(get_current_account_context),
):
    account, ctx = user_context
    admin_user = admin_repo.get_admin_user(db, ctx["uid"]) if ctx.get("source") == "profile" else None
    return {
        "current_user": {
            "uid": ctx["uid"],
            "email": ctx["email"],
            "display_name": ctx.get("display_name"),
            "email_verified": bool(getattr(account, "email_verified", True)),
            "claims": ctx.get("claims") or {},
        },
        "admin_user": schemas.AdminUser.model_validate(admin_user) if admin_user else None,
        "is_admin": ctx["is_admin"],
        "is_super_admin": ctx["is_super_admin"],
        "source": ctx.get("source"),
    }
