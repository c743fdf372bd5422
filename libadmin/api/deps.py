"""
API dependency helpers.

Provides dependency-resolved account and admin context for routes.
"""
import logging
from typing import Optional, Tuple, Dict, Any

from fastapi import Depends, Header, HTTPException, status
from sqlalchemy.orm import Session

from libadmin.db.database import get_db
from libadmin.db.repositories import system as system_repo
from libadmin.services.auth_service import AuthError, AuthService, dev_context
from libadmin.utils.feature_flags import FeatureFlagKey, is_feature_enabled
from libadmin.utils.runtime import dev_mode_active

logger = logging.getLogger("libadmin.auth")

# Contract:
# Returns (AuthAccount model or None in dev mode, context dict)
# Raises 401 if the session cannot be resolved, 403 if admin access is denied.


def bearer_token(authorization: Optional[str]) -> Optional[str]:
    if authorization and authorization.lower().startswith("bearer "):
        token = authorization[7:].strip()
        return token or None
    return None


def _resolve_context(db: Session, authorization: Optional[str], *, require_admin: bool) -> Tuple[Any, Dict[str, Any]]:
    token = bearer_token(authorization)
    if token is None:
        try:
            is_dev_mode = dev_mode_active()
        except RuntimeError as exc:
            logger.error("DEV_MODE misconfiguration detected: %s", exc)
            raise HTTPException(status_code=status.HTTP_500_INTERNAL_SERVER_ERROR, detail="DEV_MODE misconfigured")
        if is_dev_mode:
            return None, dev_context()
        raise HTTPException(status_code=status.HTTP_401_UNAUTHORIZED, detail="Authentication required")

    service = AuthService(db)
    try:
        account = service.resolve_session(token)
        ctx = service.build_context(account, require_admin=require_admin)
    except AuthError as e:
        raise HTTPException(status_code=e.status_code, detail=e.detail)
    return account, ctx


def get_current_account_context(
    db: Session = Depends(get_db),
    authorization: Optional[str] = Header(default=None),
) -> Tuple[Any, Dict[str, Any]]:
    """Any signed-in account; admin fields are filled when available."""
    return _resolve_context(db, authorization, require_admin=False)


def get_current_admin_context(
    db: Session = Depends(get_db),
    authorization: Optional[str] = Header(default=None),
) -> Tuple[Any, Dict[str, Any]]:
    """A signed-in account with an active admin profile or admin claims."""
    return _resolve_context(db, authorization, require_admin=True)


def require_feature(flag: FeatureFlagKey):
    """Dependency factory: 404 when the feature flag is disabled."""
    def _dependency() -> None:
        if not is_feature_enabled(flag):
            raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail="Not found")
    return _dependency


def ensure_not_in_maintenance(db: Session = Depends(get_db)) -> None:
    config = system_repo.get_system_config(db)
    if config is not None and config.maintenance_mode:
        raise HTTPException(
            status_code=status.HTTP_503_SERVICE_UNAVAILABLE,
            detail=config.maintenance_message or "The service is under maintenance",
        )
