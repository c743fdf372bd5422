"""
Scan endpoints.

The mobile client submits scans with any signed-in account; listing is for
admins who can view analytics.
"""
import logging
from typing import List, Optional

from fastapi import APIRouter, Depends, HTTPException, Query, status
from sqlalchemy.orm import Session

from libadmin.db import schemas
from libadmin.db.database import get_db
from libadmin.db.repositories import libraries as library_repo
from libadmin.db.repositories import scans as scan_repo
from libadmin.api.deps import (
    ensure_not_in_maintenance,
    get_current_account_context,
    get_current_admin_context,
    require_feature,
)
from libadmin.api.permissions import ensure_permission

logger = logging.getLogger("libadmin.api")

router = APIRouter(prefix="/scans", tags=["scans"], dependencies=[Depends(require_feature("ar_scanning"))])


@router.post(
    "/",
    response_model=schemas.SavedId,
    status_code=status.HTTP_201_CREATED,
    dependencies=[Depends(ensure_not_in_maintenance)],
)
def submit_scan(
    payload: schemas.ScanCreate,
    db: Session = Depends(get_db),
    user_context = Depends(get_current_account_context),
):
    _account, ctx = user_context
    if not library_repo.get_library(db, payload.library_id):
        raise HTTPException(status_code=404, detail="Library not found")
    scan = scan_repo.save_scan(db, payload, user_id=ctx["uid"])
    logger.info(
        "Scan %s saved for shelf %s: %d/%d correct",
        scan.id, scan.shelf_id, scan.correct_count, scan.total_scanned,
    )
    return {"id": scan.id}


@router.get("/", response_model=List[schemas.Scan])
def list_recent_scans(
    library_id: Optional[str] = None,
    limit: int = Query(default=50, ge=1, le=500),
    db: Session = Depends(get_db),
    user_context = Depends(get_current_admin_context),
):
    _account, ctx = user_context
    ensure_permission(ctx, "can_view_analytics")
    return scan_repo.get_recent_scans(db, library_id, limit)


@router.get("/{scan_id}", response_model=schemas.Scan)
def get_scan(
    scan_id: str,
    db: Session = Depends(get_db),
    user_context = Depends(get_current_admin_context),
):
    _account, ctx = user_context
    ensure_permission(ctx, "can_view_analytics")
    scan = scan_repo.get_scan(db, scan_id)
    if not scan:
        raise HTTPException(status_code=404, detail="Scan not found")
    return scan
