"""
Repositories for sign-in sessions.

Implements create/lookup/revoke and last-used updates.
"""
from __future__ import annotations

from datetime import datetime, timedelta, timezone
from typing import Optional, Tuple

from sqlalchemy.orm import Session

from libadmin.db import models
from libadmin.utils import token_crypto


def _now() -> datetime:
    return datetime.now(timezone.utc)


def create_session(db: Session, *, uid: str, ttl_hours: int) -> Tuple[models.AuthSession, str]:
    token_id, secret, full_token = token_crypto.generate_token()
    now = _now()
    session = models.AuthSession(
        uid=uid,
        token_id=token_id,
        token_hash=token_crypto.hash_secret(secret),
        created_at=now,
        expires_at=now + timedelta(hours=ttl_hours),
    )
    db.add(session)
    db.commit()
    db.refresh(session)
    return session, full_token


def get_by_token_id(db: Session, *, token_id: str) -> Optional[models.AuthSession]:
    return db.query(models.AuthSession).filter(models.AuthSession.token_id == token_id).first()


def revoke_session(db: Session, *, token_id: str) -> bool:
    session = get_by_token_id(db, token_id=token_id)
    if not session:
        return False
    if session.revoked_at is None:
        session.revoked_at = _now()
        db.commit()
    return True


def revoke_all_for_account(db: Session, *, uid: str) -> int:
    count = (
        db.query(models.AuthSession)
        .filter(models.AuthSession.uid == uid, models.AuthSession.revoked_at.is_(None))
        .update({models.AuthSession.revoked_at: _now()}, synchronize_session=False)
    )
    db.commit()
    return count


def mark_used_now(db: Session, *, session: models.AuthSession) -> None:
    session.last_used_at = _now()
    try:
        db.commit()
    except Exception:
        db.rollback()
