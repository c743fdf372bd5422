"""
Correction repository functions.

Progress fields are always derived from `movements`. Completing a correction
records its duration and stamps the shelf.
"""
from __future__ import annotations

from typing import Optional, List, Dict, Any

from sqlalchemy.orm import Session

from libadmin.db import models, schemas
from libadmin.db.repositories import shelves as shelf_repo


def _apply_progress(correction: models.Correction, movements: List[Dict[str, Any]]) -> None:
    total = len(movements)
    completed = sum(1 for move in movements if move.get("is_completed"))
    correction.movements = movements
    correction.total_moves = total
    correction.completed_moves = completed
    correction.progress_percentage = (completed / total * 100) if total else 0.0


def _apply_completion(db: Session, correction: models.Correction) -> None:
    if correction.completed_at is None:
        correction.completed_at = models.now_utc()
    started = models.as_utc(correction.started_at)
    completed = models.as_utc(correction.completed_at)
    correction.duration = max(0.0, (completed - started).total_seconds())
    shelf_repo.stamp_shelf(db, correction.library_id, correction.shelf_id, last_correction_date=completed, commit=False)


def get_recent_corrections(db: Session, library_id: Optional[str] = None, limit: int = 50):
    q = db.query(models.Correction)
    if library_id:
        q = q.filter(models.Correction.library_id == library_id)
    return q.order_by(models.Correction.created_at.desc()).limit(limit).all()


def get_correction(db: Session, correction_id: str) -> Optional[models.Correction]:
    return db.query(models.Correction).filter(models.Correction.id == correction_id).first()


def get_corrections_between(db: Session, start, end, library_id: Optional[str] = None):
    q = db.query(models.Correction).filter(models.Correction.created_at >= start, models.Correction.created_at < end)
    if library_id:
        q = q.filter(models.Correction.library_id == library_id)
    return q.all()


def save_correction(db: Session, correction: schemas.CorrectionCreate, *, user_id: Optional[str]) -> models.Correction:
    now = models.now_utc()
    data = correction.model_dump(mode="json", exclude={"movements", "started_at", "completed_at"})
    db_correction = models.Correction(
        user_id=user_id,
        started_at=correction.started_at or now,
        completed_at=correction.completed_at,
        created_at=now,
        updated_at=now,
        **data,
    )
    _apply_progress(db_correction, [m.model_dump(mode="json") for m in correction.movements])
    db.add(db_correction)
    try:
        if db_correction.status == "completed":
            _apply_completion(db, db_correction)
        db.commit()
    except Exception as e:
        db.rollback()
        raise RuntimeError(f"Failed to save correction: {str(e)}")
    db.refresh(db_correction)
    return db_correction


def update_correction(db: Session, correction_id: str, correction: schemas.CorrectionUpdate) -> Optional[models.Correction]:
    db_correction = get_correction(db, correction_id)
    if not db_correction:
        return None
    previous_status = db_correction.status
    update_data = correction.model_dump(exclude_unset=True)
    if "movements" in update_data:
        _apply_progress(db_correction, [m.model_dump(mode="json") for m in correction.movements or []])
    if update_data.get("completed_at") is not None:
        db_correction.completed_at = update_data["completed_at"]
    if update_data.get("status") is not None:
        db_correction.status = update_data["status"]
    db_correction.updated_at = models.now_utc()
    try:
        if db_correction.status == "completed" and previous_status != "completed":
            _apply_completion(db, db_correction)
        db.commit()
    except Exception as e:
        db.rollback()
        raise RuntimeError(f"Failed to update correction {correction_id}: {str(e)}")
    db.refresh(db_correction)
    return db_correction
