"""
Correction endpoints.
"""
from typing import List, Optional

from fastapi import APIRouter, Depends, HTTPException, Query, status
from sqlalchemy.orm import Session

from libadmin.db import schemas
from libadmin.db.database import get_db
from libadmin.db.repositories import corrections as correction_repo
from libadmin.db.repositories import libraries as library_repo
from libadmin.api.deps import (
    ensure_not_in_maintenance,
    get_current_account_context,
    get_current_admin_context,
    require_feature,
)
from libadmin.api.permissions import ensure_permission, has_permission

router = APIRouter(prefix="/corrections", tags=["corrections"], dependencies=[Depends(require_feature("corrections"))])


@router.post(
    "/",
    response_model=schemas.SavedId,
    status_code=status.HTTP_201_CREATED,
    dependencies=[Depends(ensure_not_in_maintenance)],
)
def submit_correction(
    payload: schemas.CorrectionCreate,
    db: Session = Depends(get_db),
    user_context = Depends(get_current_account_context),
):
    _account, ctx = user_context
    if not library_repo.get_library(db, payload.library_id):
        raise HTTPException(status_code=404, detail="Library not found")
    correction = correction_repo.save_correction(db, payload, user_id=ctx["uid"])
    return {"id": correction.id}


@router.patch(
    "/{correction_id}",
    response_model=schemas.Correction,
    dependencies=[Depends(ensure_not_in_maintenance)],
)
def update_correction(
    correction_id: str,
    payload: schemas.CorrectionUpdate,
    db: Session = Depends(get_db),
    user_context = Depends(get_current_account_context),
):
    _account, ctx = user_context
    existing = correction_repo.get_correction(db, correction_id)
    if not existing:
        raise HTTPException(status_code=404, detail="Correction not found")
    if existing.user_id and existing.user_id != ctx["uid"] and not has_permission(ctx, "can_view_analytics"):
        raise HTTPException(status_code=403, detail="Forbidden")
    return correction_repo.update_correction(db, correction_id, payload)


@router.get("/", response_model=List[schemas.Correction])
def list_recent_corrections(
    library_id: Optional[str] = None,
    limit: int = Query(default=50, ge=1, le=500),
    db: Session = Depends(get_db),
    user_context = Depends(get_current_admin_context),
):
    _account, ctx = user_context
    ensure_permission(ctx, "can_view_analytics")
    return correction_repo.get_recent_corrections(db, library_id, limit)


@router.get("/{correction_id}", response_model=schemas.Correction)
def get_correction(
    correction_id: str,
    db: Session = Depends(get_db),
    user_context = Depends(get_current_admin_context),
):
    _account, ctx = user_context
    ensure_permission(ctx, "can_view_analytics")
    correction = correction_repo.get_correction(db, correction_id)
    if not correction:
        raise HTTPException(status_code=404, detail="Correction not found")
    return correction
