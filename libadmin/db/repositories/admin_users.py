"""
Admin profile repository functions.

Profiles are keyed by the auth account uid and written with merge
semantics: an existing row keeps its `created_at`.
"""
from __future__ import annotations

from typing import Optional, Dict, Any

from sqlalchemy.orm import Session

from libadmin.db import models


def get_admin_user(db: Session, uid: str) -> Optional[models.AdminUser]:
    return db.query(models.AdminUser).filter(models.AdminUser.id == uid).first()


def list_admin_users(db: Session, skip: int = 0, limit: int = 100, *, role: Optional[str] = None):
    q = db.query(models.AdminUser)
    if role:
        q = q.filter(models.AdminUser.role == role)
    return q.order_by(models.AdminUser.created_at.desc()).offset(skip).limit(limit).all()


def upsert_admin_user(db: Session, *, uid: str, data: Dict[str, Any]) -> models.AdminUser:
    now = models.now_utc()
    try:
        profile = get_admin_user(db, uid)
        if profile is None:
            profile = models.AdminUser(id=uid, created_at=now)
            db.add(profile)
        for key, value in data.items():
            if key in ("id", "created_at"):
                continue
            setattr(profile, key, value)
        profile.updated_at = now
        db.commit()
        db.refresh(profile)
        return profile
    except Exception as e:
        db.rollback()
        raise RuntimeError(f"Failed to write admin profile {uid}: {str(e)}")


def update_admin_user(db: Session, uid: str, changes: Dict[str, Any]) -> Optional[models.AdminUser]:
    profile = get_admin_user(db, uid)
    if profile:
        models.apply_patch(profile, changes)
        profile.updated_at = models.now_utc()
        try:
            db.commit()
        except Exception as e:
            db.rollback()
            raise RuntimeError(f"Failed to update admin user {uid}: {str(e)}")
        db.refresh(profile)
    return profile


def deactivate_admin_user(db: Session, uid: str) -> Optional[models.AdminUser]:
    return update_admin_user(db, uid, {"is_active": False})


def stamp_last_login(db: Session, uid: str) -> None:
    profile = get_admin_user(db, uid)
    if profile is None:
        return
    profile.last_login_at = models.now_utc()
    try:
        db.commit()
    except Exception:
        db.rollback()
