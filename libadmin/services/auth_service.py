"""
Authentication service: sign-in, sign-out and session resolution.

Builds the admin context used by route dependencies. The admin profile row is
the primary source of role and permissions; custom claims on the account are
the fallback when the profile is missing or unreadable.
"""
import logging
from typing import Optional, Dict, Any

from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import Session

from libadmin.db import models
from libadmin.db.repositories import accounts as account_repo
from libadmin.db.repositories import admin_users as admin_repo
from libadmin.db.repositories import sessions as session_repo
from libadmin.utils import token_crypto
from libadmin.utils.role_permissions import (
    ALLOWED_ROLES,
    get_role_permissions,
    role_is_dashboard_admin,
    role_is_super_admin,
)
from libadmin.utils.runtime import session_ttl_hours

logger = logging.getLogger("libadmin.auth")


class AuthError(Exception):
    """Authentication or authorization failure carrying an HTTP status."""

    def __init__(self, status_code: int, detail: str):
        super().__init__(detail)
        self.status_code = status_code
        self.detail = detail


def claims_grant_admin(claims: Optional[Dict[str, Any]]) -> bool:
    claims = claims or {}
    return bool(claims.get("isAdmin")) and claims.get("role") in ALLOWED_ROLES


def _profile_context(account: models.AuthAccount, profile: models.AdminUser) -> Dict[str, Any]:
    return {
        "uid": account.uid,
        "email": account.email,
        "display_name": profile.display_name or account.display_name or "",
        "role": profile.role,
        "permissions": dict(profile.permissions or {}),
        "assigned_libraries": list(profile.assigned_libraries or []),
        "is_active": bool(profile.is_active),
        "is_admin": role_is_dashboard_admin(profile.role),
        "is_super_admin": role_is_super_admin(profile.role),
        "claims": dict(account.custom_claims or {}),
        "source": "profile",
    }


def _claims_context(account: models.AuthAccount) -> Dict[str, Any]:
    claims = dict(account.custom_claims or {})
    role = claims.get("role")
    return {
        "uid": account.uid,
        "email": account.email,
        "display_name": account.display_name or "",
        "role": role,
        "permissions": get_role_permissions(role),
        "assigned_libraries": [],
        "is_active": True,
        "is_admin": role_is_dashboard_admin(role),
        "is_super_admin": role_is_super_admin(role),
        "claims": claims,
        "source": "claims",
    }


def _account_only_context(account: models.AuthAccount) -> Dict[str, Any]:
    return {
        "uid": account.uid,
        "email": account.email,
        "display_name": account.display_name or "",
        "role": None,
        "permissions": {},
        "assigned_libraries": [],
        "is_active": not account.disabled,
        "is_admin": False,
        "is_super_admin": False,
        "claims": dict(account.custom_claims or {}),
        "source": None,
    }


def dev_context() -> Dict[str, Any]:
    """Synthetic super admin used when DEV_MODE is active and no token is sent."""
    return {
        "uid": "dev",
        "email": "dev@localhost",
        "display_name": "Development User",
        "role": "super_admin",
        "permissions": get_role_permissions("super_admin"),
        "assigned_libraries": [],
        "is_active": True,
        "is_admin": True,
        "is_super_admin": True,
        "claims": {"role": "super_admin", "isAdmin": True},
        "source": "dev",
    }


class AuthService:
    """Service class for sign-in sessions and admin context resolution."""

    def __init__(self, db: Session):
        self.db = db

    def load_profile(self, uid: str) -> Optional[models.AdminUser]:
        """Return the admin profile; a read failure is logged and yields None."""
        try:
            return admin_repo.get_admin_user(self.db, uid)
        except SQLAlchemyError as e:
            self.db.rollback()
            logger.warning("Admin profile read failed for %s, falling back to claims: %s", uid, e)
            return None

    def build_context(self, account: models.AuthAccount, *, require_admin: bool = True) -> Dict[str, Any]:
        profile = self.load_profile(account.uid)
        if profile is not None:
            if not profile.is_active:
                raise AuthError(403, "Account is not active")
            return _profile_context(account, profile)
        if claims_grant_admin(account.custom_claims):
            return _claims_context(account)
        if require_admin:
            raise AuthError(403, "No access to the admin dashboard")
        return _account_only_context(account)

    def sign_in(self, email: str, password: str) -> Dict[str, Any]:
        account = account_repo.get_account_by_email(self.db, email or "")
        if account is None or not token_crypto.verify_secret(password or "", account.password_hash):
            raise AuthError(401, "Invalid email or password")
        if account.disabled:
            raise AuthError(401, "Account is disabled")

        context = self.build_context(account, require_admin=True)

        session, token = session_repo.create_session(self.db, uid=account.uid, ttl_hours=session_ttl_hours())
        if context["source"] == "profile":
            admin_repo.stamp_last_login(self.db, account.uid)
        logger.info("Sign-in for %s (source=%s)", account.email, context["source"])
        return {
            "token": token,
            "expires_at": models.as_utc(session.expires_at),
            "uid": account.uid,
            "email": account.email,
            "role": context["role"],
        }

    def sign_out(self, token: str) -> Optional[str]:
        """Revoke the session behind `token`; returns its uid when one was found."""
        parsed = token_crypto.parse_token(token or "")
        if not parsed:
            return None
        session = session_repo.get_by_token_id(self.db, token_id=parsed.token_id)
        if not session or not token_crypto.verify_secret(parsed.secret, session.token_hash):
            return None
        session_repo.revoke_session(self.db, token_id=parsed.token_id)
        return session.uid

    def resolve_session(self, token: str) -> models.AuthAccount:
        parsed = token_crypto.parse_token(token or "")
        if not parsed:
            raise AuthError(401, "Invalid token format")
        session = session_repo.get_by_token_id(self.db, token_id=parsed.token_id)
        if not session or not token_crypto.verify_secret(parsed.secret, session.token_hash):
            raise AuthError(401, "Invalid token")
        if session.revoked_at is not None:
            raise AuthError(401, "Session revoked")
        if models.as_utc(session.expires_at) <= models.now_utc():
            raise AuthError(401, "Session expired")
        account = account_repo.get_account(self.db, session.uid)
        if account is None or account.disabled:
            raise AuthError(401, "Invalid token user")
        # Best-effort
        session_repo.mark_used_now(self.db, session=session)
        return account
