"""
Scan repository functions.

Scans are submitted by the mobile client. Saving a scan derives its counters
from `scanned_books` and stamps the shelf. The same transaction bumps each
scanned book's scan counter and flags misplaced books in the location index.
"""
from __future__ import annotations

from typing import Optional

from sqlalchemy.orm import Session

from libadmin.db import models, schemas
from libadmin.db.repositories import book_locations as location_repo
from libadmin.db.repositories import shelves as shelf_repo


def get_recent_scans(db: Session, library_id: Optional[str] = None, limit: int = 50):
    q = db.query(models.Scan)
    if library_id:
        q = q.filter(models.Scan.library_id == library_id)
    return q.order_by(models.Scan.created_at.desc()).limit(limit).all()


def get_scan(db: Session, scan_id: str) -> Optional[models.Scan]:
    return db.query(models.Scan).filter(models.Scan.id == scan_id).first()


def get_scans_between(db: Session, start, end, library_id: Optional[str] = None):
    q = db.query(models.Scan).filter(models.Scan.created_at >= start, models.Scan.created_at < end)
    if library_id:
        q = q.filter(models.Scan.library_id == library_id)
    return q.all()


def save_scan(db: Session, scan: schemas.ScanCreate, *, user_id: Optional[str]) -> models.Scan:
    now = models.now_utc()
    data = scan.model_dump(mode="json")
    items = data.get("scanned_books") or []
    if items:
        total = len(items)
        correct = sum(1 for item in items if item.get("is_correct"))
        data["total_scanned"] = total
        data["correct_count"] = correct
        data["error_count"] = total - correct
        data["accuracy"] = correct / total * 100
    db_scan = models.Scan(user_id=user_id, created_at=now, **data)
    db.add(db_scan)
    try:
        shelf_repo.stamp_shelf(db, scan.library_id, scan.shelf_id, last_scan_date=now, commit=False)
        scanned_isbns = {item["isbn"] for item in items}
        if scanned_isbns:
            db.query(models.Book).filter(models.Book.isbn.in_(scanned_isbns)).update(
                {
                    models.Book.scan_count: models.Book.scan_count + 1,
                    models.Book.last_scanned_at: now,
                    models.Book.updated_at: models.Book.updated_at,
                },
                synchronize_session=False,
            )
        for item in items:
            if item.get("is_correct"):
                continue
            if location_repo.get_location(db, item["isbn"], scan.library_id, scan.shelf_id) is None:
                continue
            location_repo.update_book_position(
                db,
                item["isbn"],
                scan.library_id,
                scan.shelf_id,
                {
                    "position": item["detected_position"],
                    "expected_position": item["expected_position"],
                    "is_correct_order": False,
                    "last_checked_at": now,
                },
                commit=False,
            )
        db.commit()
    except Exception as e:
        db.rollback()
        raise RuntimeError(f"Failed to save scan: {str(e)}")
    db.refresh(db_scan)
    return db_scan
