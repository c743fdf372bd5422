"""
Book location index repository functions.

One row per (isbn, library, shelf). `misplacement_count` counts transitions
into the misplaced state.
"""
from __future__ import annotations

from typing import Optional, Dict, Any, Tuple

from sqlalchemy.orm import Session

from libadmin.db import models


def get_locations_by_library(db: Session, library_id: str):
    return (
        db.query(models.BookLocation)
        .filter(models.BookLocation.library_id == library_id)
        .order_by(models.BookLocation.shelf_id, models.BookLocation.position)
        .all()
    )


def get_locations_by_isbn(db: Session, isbn: str):
    return db.query(models.BookLocation).filter(models.BookLocation.book_isbn == isbn).all()


def get_misplaced_books(db: Session, library_id: str):
    return (
        db.query(models.BookLocation)
        .filter(
            models.BookLocation.library_id == library_id,
            models.BookLocation.is_correct_order.is_(False),
        )
        .all()
    )


def get_location(db: Session, isbn: str, library_id: str, shelf_id: str) -> Optional[models.BookLocation]:
    return (
        db.query(models.BookLocation)
        .filter(
            models.BookLocation.book_isbn == isbn,
            models.BookLocation.library_id == library_id,
            models.BookLocation.shelf_id == shelf_id,
        )
        .first()
    )


def _apply_position_data(location: models.BookLocation, data: Dict[str, Any]) -> None:
    was_correct = location.is_correct_order is not False
    for key, value in data.items():
        setattr(location, key, value)
    if was_correct and data.get("is_correct_order") is False:
        location.misplacement_count = (location.misplacement_count or 0) + 1


def update_book_position(
    db: Session,
    isbn: str,
    library_id: str,
    shelf_id: str,
    data: Dict[str, Any],
    *,
    commit: bool = True,
) -> Tuple[models.BookLocation, bool]:
    """Merge `data` into the location row, creating it when absent.

    Returns (location, created).
    """
    now = models.now_utc()
    location = get_location(db, isbn, library_id, shelf_id)
    created = location is None
    if created:
        location = models.BookLocation(
            book_isbn=isbn,
            library_id=library_id,
            shelf_id=shelf_id,
            is_correct_order=True,
            misplacement_count=0,
            created_at=now,
        )
        db.add(location)
    _apply_position_data(location, data)
    location.updated_at = now
    if commit:
        try:
            db.commit()
        except Exception as e:
            db.rollback()
            raise RuntimeError(f"Failed to update book position {isbn}@{shelf_id}: {str(e)}")
        db.refresh(location)
    return location, created


def delete_location(db: Session, isbn: str, library_id: str, shelf_id: str, *, commit: bool = True) -> bool:
    location = get_location(db, isbn, library_id, shelf_id)
    if not location:
        return False
    db.delete(location)
    if commit:
        db.commit()
    return True
