"""
Auth account repository functions.

Accounts hold credentials and custom claims; the admin profile is a separate
row managed by `admin_users`.
"""
from __future__ import annotations

from typing import Optional, Dict, Any
from sqlalchemy.exc import IntegrityError
from sqlalchemy.orm import Session

from libadmin.db import models
from libadmin.utils import token_crypto


class EmailAlreadyExists(Exception):
    def __init__(self, email: str):
        super().__init__(f"An account already exists for {email}")
        self.email = email


def normalize_email(email: str) -> str:
    return (email or "").strip().lower()


def get_account(db: Session, uid: str) -> Optional[models.AuthAccount]:
    return db.query(models.AuthAccount).filter(models.AuthAccount.uid == uid).first()


def get_account_by_email(db: Session, email: str) -> Optional[models.AuthAccount]:
    return db.query(models.AuthAccount).filter(models.AuthAccount.email == normalize_email(email)).first()


def create_account(
    db: Session,
    *,
    email: str,
    password: str,
    display_name: Optional[str] = None,
    email_verified: bool = False,
) -> models.AuthAccount:
    normalized = normalize_email(email)
    if get_account_by_email(db, normalized):
        raise EmailAlreadyExists(normalized)
    account = models.AuthAccount(
        email=normalized,
        password_hash=token_crypto.hash_secret(password),
        display_name=display_name,
        email_verified=email_verified,
        custom_claims={},
    )
    db.add(account)
    try:
        db.commit()
    except IntegrityError:
        db.rollback()
        raise EmailAlreadyExists(normalized)
    db.refresh(account)
    return account


def update_password(db: Session, uid: str, password: str) -> Optional[models.AuthAccount]:
    account = get_account(db, uid)
    if not account:
        return None
    account.password_hash = token_crypto.hash_secret(password)
    db.commit()
    db.refresh(account)
    return account


def set_custom_claims(db: Session, uid: str, claims: Dict[str, Any]) -> Optional[models.AuthAccount]:
    """Replace the account's custom claims."""
    account = get_account(db, uid)
    if not account:
        return None
    account.custom_claims = dict(claims or {})
    db.commit()
    db.refresh(account)
    return account


def set_disabled(db: Session, uid: str, disabled: bool) -> Optional[models.AuthAccount]:
    account = get_account(db, uid)
    if not account:
        return None
    account.disabled = disabled
    db.commit()
    db.refresh(account)
    return account
