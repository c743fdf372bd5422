"""
Admin user service: provisioning and profile maintenance.

`create_admin_user` enforces the caller-claims rules used by the dashboard;
`provision_admin_user` is the trusted path shared with the operator CLI.
"""
import logging
from typing import Optional, Dict, Any, List

from sqlalchemy.orm import Session

from libadmin.db import models, schemas
from libadmin.db.repositories import accounts as account_repo
from libadmin.db.repositories import admin_users as admin_repo
from libadmin.db.repositories import sessions as session_repo
from libadmin.utils.role_permissions import (
    ALLOWED_ROLES,
    ROLE_ADMIN,
    ROLE_SUPER_ADMIN,
    get_role_permissions,
    normalize_permissions,
    validate_role,
)

logger = logging.getLogger("libadmin.admin_users")

MIN_PASSWORD_LENGTH = 6


class AdminUserError(Exception):
    """Domain error with a code: unauthenticated, permission-denied,
    invalid-argument, not-found or internal."""

    def __init__(self, code: str, message: str):
        super().__init__(message)
        self.code = code
        self.message = message


def caller_may_create_admins(claims: Optional[Dict[str, Any]]) -> bool:
    claims = claims or {}
    role = claims.get("role")
    return role == ROLE_SUPER_ADMIN or (role == ROLE_ADMIN and claims.get("isAdmin") is True)


def _clean_display_name(value: Any) -> str:
    return value.strip() if isinstance(value, str) else ""


def _clean_assigned_libraries(value: Any) -> List[str]:
    if not isinstance(value, list):
        return []
    return [item for item in value if isinstance(item, str)]


class AdminUserService:
    """Service class for admin account provisioning and profile updates."""

    def __init__(self, db: Session):
        self.db = db

    def create_admin_user(
        self,
        caller_uid: Optional[str],
        caller_claims: Optional[Dict[str, Any]],
        payload: schemas.AdminUserCreate,
    ) -> Dict[str, Any]:
        if not caller_uid:
            raise AdminUserError("unauthenticated", "Authentication required")
        if not caller_may_create_admins(caller_claims):
            raise AdminUserError("permission-denied", "Only administrators can create admin users")

        email = payload.email
        if not isinstance(email, str) or not email.strip():
            raise AdminUserError("invalid-argument", "A valid email is required")
        password = payload.password
        if not isinstance(password, str) or len(password) < MIN_PASSWORD_LENGTH:
            raise AdminUserError(
                "invalid-argument", f"Password must be at least {MIN_PASSWORD_LENGTH} characters"
            )
        role = payload.role
        if not isinstance(role, str) or role not in ALLOWED_ROLES:
            raise AdminUserError("invalid-argument", f"Role must be one of {sorted(ALLOWED_ROLES)}")

        return self.provision_admin_user(
            email=email.strip(),
            password=password,
            role=role,
            display_name=_clean_display_name(payload.display_name),
            assigned_libraries=_clean_assigned_libraries(payload.assigned_libraries),
            created_by=caller_uid,
        )

    def provision_admin_user(
        self,
        *,
        email: str,
        password: str,
        role: str,
        display_name: str = "",
        assigned_libraries: Optional[List[str]] = None,
        created_by: Optional[str] = None,
    ) -> Dict[str, Any]:
        """Create or reuse the auth account, set claims and merge the profile."""
        try:
            validate_role(role)
        except ValueError as e:
            raise AdminUserError("invalid-argument", str(e))

        try:
            try:
                account = account_repo.create_account(
                    self.db,
                    email=email,
                    password=password,
                    display_name=display_name or None,
                    email_verified=True,
                )
            except account_repo.EmailAlreadyExists:
                account = account_repo.get_account_by_email(self.db, email)
                account_repo.update_password(self.db, account.uid, password)
                logger.info("Account %s already exists; password updated", account.email)
            account_repo.set_custom_claims(self.db, account.uid, {"role": role, "isAdmin": True})
        except AdminUserError:
            raise
        except Exception as e:
            self.db.rollback()
            logger.error("Failed to provision auth account for %s: %s", email, e)
            raise AdminUserError("internal", f"Failed to create user: {e}")

        now = models.now_utc()
        try:
            admin_repo.upsert_admin_user(
                self.db,
                uid=account.uid,
                data={
                    "email": account.email,
                    "display_name": display_name,
                    "role": role,
                    "permissions": get_role_permissions(role),
                    "assigned_libraries": list(assigned_libraries or []),
                    "is_active": True,
                    "created_by": created_by,
                    "last_login_at": None,
                    "updated_at": now,
                },
            )
        except RuntimeError as e:
            # The auth account exists; the profile can be repaired by a later update
            logger.error("Admin profile write failed for %s: %s", account.uid, e)

        return {
            "uid": account.uid,
            "email": account.email,
            "role": role,
            "message": "User created successfully",
        }

    def update_admin_user(
        self,
        caller_uid: str,
        uid: str,
        patch: schemas.AdminUserUpdate,
    ) -> models.AdminUser:
        profile = admin_repo.get_admin_user(self.db, uid)
        if profile is None:
            raise AdminUserError("not-found", "Admin user not found")

        changes = patch.model_dump(exclude_unset=True)
        if changes.get("is_active") is False and uid == caller_uid:
            raise AdminUserError("invalid-argument", "You cannot deactivate your own account")

        role_changed = False
        new_role = changes.get("role")
        if new_role is not None:
            try:
                validate_role(new_role)
            except ValueError as e:
                raise AdminUserError("invalid-argument", str(e))
            role_changed = new_role != profile.role

        role = new_role or profile.role
        if "permissions" in changes and changes["permissions"] is not None:
            base = get_role_permissions(role) if role_changed else dict(profile.permissions or {})
            overrides = {k: v for k, v in changes["permissions"].items() if v is not None}
            base.update(overrides)
            changes["permissions"] = normalize_permissions(role, base)
        elif role_changed:
            changes["permissions"] = get_role_permissions(role)
        else:
            changes.pop("permissions", None)

        if changes.get("display_name") is not None:
            changes["display_name"] = changes["display_name"].strip()

        try:
            updated = admin_repo.update_admin_user(self.db, uid, changes)
        except ValueError as e:
            raise AdminUserError("invalid-argument", str(e))
        except RuntimeError as e:
            raise AdminUserError("internal", str(e))
        if role_changed:
            account = account_repo.get_account(self.db, uid)
            if account is not None:
                claims = dict(account.custom_claims or {})
                claims.update({"role": role, "isAdmin": True})
                account_repo.set_custom_claims(self.db, uid, claims)
        if changes.get("is_active") is False:
            session_repo.revoke_all_for_account(self.db, uid=uid)
        return updated

    def deactivate_admin_user(self, caller_uid: str, uid: str) -> models.AdminUser:
        if uid == caller_uid:
            raise AdminUserError("invalid-argument", "You cannot deactivate your own account")
        profile = admin_repo.deactivate_admin_user(self.db, uid)
        if profile is None:
            raise AdminUserError("not-found", "Admin user not found")
        revoked = session_repo.revoke_all_for_account(self.db, uid=uid)
        logger.info("Deactivated admin %s, revoked %d session(s)", uid, revoked)
        return profile
