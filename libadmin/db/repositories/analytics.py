"""
Daily analytics repository functions.
"""
from __future__ import annotations

from typing import Optional, Dict, Any, List

from sqlalchemy.orm import Session

from libadmin.db import models


def _scope(q, library_id: Optional[str]):
    # Rows without a library are the system-wide rollup
    if library_id:
        return q.filter(models.DailyAnalytics.library_id == library_id)
    return q.filter(models.DailyAnalytics.library_id.is_(None))


def get_analytics(db: Session, start_date: str, end_date: str, library_id: Optional[str] = None):
    """Return rows for the inclusive range of YYYY-MM-DD dates."""
    q = db.query(models.DailyAnalytics).filter(
        models.DailyAnalytics.date >= start_date,
        models.DailyAnalytics.date <= end_date,
    )
    return _scope(q, library_id).order_by(models.DailyAnalytics.date).all()


def get_analytics_for_date(db: Session, date: str, library_id: Optional[str] = None) -> Optional[models.DailyAnalytics]:
    q = db.query(models.DailyAnalytics).filter(models.DailyAnalytics.date == date)
    return _scope(q, library_id).first()


def upsert_daily(
    db: Session,
    *,
    date: str,
    library_id: Optional[str],
    metrics: Dict[str, Any],
    top_misplaced_shelves: List[Dict[str, Any]],
    top_scanned_books: List[Dict[str, Any]],
) -> models.DailyAnalytics:
    row = get_analytics_for_date(db, date, library_id)
    if row is None:
        row = models.DailyAnalytics(date=date, library_id=library_id, created_at=models.now_utc())
        db.add(row)
    row.metrics = metrics
    row.top_misplaced_shelves = top_misplaced_shelves
    row.top_scanned_books = top_scanned_books
    try:
        db.commit()
    except Exception as e:
        db.rollback()
        raise RuntimeError(f"Failed to write analytics for {date}: {str(e)}")
    db.refresh(row)
    return row
