"""
Analytics endpoints: daily rows, dashboard summary, overview and rollups.
"""
from typing import List, Optional

from fastapi import APIRouter, Depends, HTTPException, Query
from sqlalchemy.orm import Session

from libadmin.audit import AuditAction, safe_log
from libadmin.db import schemas
from libadmin.db.database import get_db
from libadmin.db.repositories import analytics as analytics_repo
from libadmin.api.deps import get_current_admin_context, require_feature
from libadmin.api.permissions import ensure_permission
from libadmin.services.analytics_service import AnalyticsService, default_range, parse_day, summarize

router = APIRouter(prefix="/analytics", tags=["analytics"], dependencies=[Depends(require_feature("analytics"))])


def _analytics_context(user_context = Depends(get_current_admin_context)):
    _account, ctx = user_context
    ensure_permission(ctx, "can_view_analytics")
    return ctx


def _check_day(value: str) -> str:
    try:
        parse_day(value)
    except ValueError:
        raise HTTPException(status_code=422, detail=f"Invalid date '{value}', expected YYYY-MM-DD")
    return value


def _resolve_range(start_date: Optional[str], end_date: Optional[str]) -> tuple[str, str]:
    default_start, default_end = default_range()
    start = _check_day(start_date) if start_date else default_start
    end = _check_day(end_date) if end_date else default_end
    if start > end:
        raise HTTPException(status_code=422, detail="start_date must not be after end_date")
    return start, end


@router.get("/", response_model=List[schemas.DailyAnalytics])
def list_analytics(
    start_date: str = Query(...),
    end_date: str = Query(...),
    library_id: Optional[str] = None,
    db: Session = Depends(get_db),
    ctx = Depends(_analytics_context),
):
    start, end = _resolve_range(start_date, end_date)
    return analytics_repo.get_analytics(db, start, end, library_id)


@router.get("/summary", response_model=schemas.AnalyticsSummary)
def get_summary(
    start_date: Optional[str] = None,
    end_date: Optional[str] = None,
    library_id: Optional[str] = None,
    db: Session = Depends(get_db),
    ctx = Depends(_analytics_context),
):
    start, end = _resolve_range(start_date, end_date)
    rows = analytics_repo.get_analytics(db, start, end, library_id)
    return summarize(rows, start, end)


@router.get("/overview", response_model=schemas.DashboardOverview)
def get_overview(
    db: Session = Depends(get_db),
    ctx = Depends(_analytics_context),
):
    return AnalyticsService(db).dashboard_overview()


@router.post("/rollup", response_model=schemas.DailyAnalytics)
def rollup_day(
    payload: schemas.RollupRequest,
    db: Session = Depends(get_db),
    ctx = Depends(_analytics_context),
):
    day = _check_day(payload.date)
    row = AnalyticsService(db).rollup_day(day, payload.library_id)
    safe_log(
        db,
        action=AuditAction.ANALYTICS_ROLLUP,
        target_type="analytics",
        target_id=row.id,
        actor_uid=ctx["uid"],
        metadata={"date": day, "library_id": payload.library_id},
    )
    return row


@router.get("/{date}", response_model=schemas.DailyAnalytics)
def get_analytics_for_date(
    date: str,
    library_id: Optional[str] = None,
    db: Session = Depends(get_db),
    ctx = Depends(_analytics_context),
):
    row = analytics_repo.get_analytics_for_date(db, _check_day(date), library_id)
    if not row:
        raise HTTPException(status_code=404, detail="No analytics for this date")
    return row
