"""
Shelf repository functions.

Covers shelves and the ordered books placed on them. Placing or removing a
book keeps `current_count`, `accuracy` and the book location index in step.
"""
from __future__ import annotations

from typing import Optional, Tuple
from datetime import datetime

from sqlalchemy.orm import Session

from libadmin.db import models, schemas
from libadmin.db.repositories import book_locations as location_repo


def compute_accuracy(capacity: int, current_count: int) -> float:
    """Fill ratio as a percentage clamped to 0..100; 0 for zero capacity."""
    if not capacity or capacity <= 0:
        return 0.0
    return min(100.0, max(0.0, (current_count or 0) / capacity * 100))


def next_shelf_id(db: Session, library_id: str) -> str:
    ms = models.epoch_ms()
    while get_shelf_by_id(db, library_id, f"shelf_{ms}") is not None:
        ms += 1
    return f"shelf_{ms}"


def get_shelves_by_floor(db: Session, library_id: str, floor_id: str):
    return (
        db.query(models.Shelf)
        .filter(
            models.Shelf.library_id == library_id,
            models.Shelf.floor_id == floor_id,
            models.Shelf.is_active.is_(True),
        )
        .order_by(models.Shelf.name)
        .all()
    )


def get_shelf(db: Session, library_id: str, floor_id: str, shelf_id: str) -> Optional[models.Shelf]:
    return (
        db.query(models.Shelf)
        .filter(
            models.Shelf.library_id == library_id,
            models.Shelf.floor_id == floor_id,
            models.Shelf.id == shelf_id,
        )
        .first()
    )


def get_shelf_by_id(db: Session, library_id: str, shelf_id: str) -> Optional[models.Shelf]:
    """Look a shelf up by id alone; ids are unique across a library's floors."""
    return (
        db.query(models.Shelf)
        .filter(models.Shelf.library_id == library_id, models.Shelf.id == shelf_id)
        .first()
    )


def save_shelf(
    db: Session,
    floor: models.Floor,
    shelf_id: str,
    shelf: schemas.ShelfCreate,
) -> Tuple[models.Shelf, bool]:
    now = models.now_utc()
    db_shelf = get_shelf(db, floor.library_id, floor.id, shelf_id)
    created = db_shelf is None
    if created:
        db_shelf = models.Shelf(
            id=shelf_id,
            library_id=floor.library_id,
            floor_id=floor.id,
            created_at=now,
            **shelf.model_dump(exclude={"id"}),
        )
        db.add(db_shelf)
        floor.shelf_count = (floor.shelf_count or 0) + 1
    else:
        for key, value in shelf.model_dump(exclude_unset=True, exclude={"id"}).items():
            setattr(db_shelf, key, value)
    db_shelf.accuracy = compute_accuracy(db_shelf.capacity, db_shelf.current_count)
    db_shelf.is_active = True
    db_shelf.updated_at = now
    try:
        db.commit()
    except Exception as e:
        db.rollback()
        raise RuntimeError(f"Failed to save shelf {shelf_id}: {str(e)}")
    db.refresh(db_shelf)
    return db_shelf, created


def update_shelf(
    db: Session,
    library_id: str,
    floor_id: str,
    shelf_id: str,
    shelf: schemas.ShelfUpdate,
) -> Optional[models.Shelf]:
    db_shelf = get_shelf(db, library_id, floor_id, shelf_id)
    if db_shelf:
        update_data = shelf.model_dump(exclude_unset=True)
        models.apply_patch(db_shelf, update_data)
        if "capacity" in update_data or "current_count" in update_data:
            db_shelf.accuracy = compute_accuracy(db_shelf.capacity, db_shelf.current_count)
        db_shelf.updated_at = models.now_utc()
        try:
            db.commit()
        except Exception as e:
            db.rollback()
            raise RuntimeError(f"Failed to update shelf {shelf_id}: {str(e)}")
        db.refresh(db_shelf)
    return db_shelf


def get_shelf_books(db: Session, library_id: str, shelf_id: str):
    return (
        db.query(models.ShelfBook)
        .filter(models.ShelfBook.library_id == library_id, models.ShelfBook.shelf_id == shelf_id)
        .order_by(models.ShelfBook.position)
        .all()
    )


def get_shelf_book(db: Session, library_id: str, shelf_id: str, isbn: str) -> Optional[models.ShelfBook]:
    return (
        db.query(models.ShelfBook)
        .filter(
            models.ShelfBook.library_id == library_id,
            models.ShelfBook.shelf_id == shelf_id,
            models.ShelfBook.book_isbn == isbn,
        )
        .first()
    )


def add_book_to_shelf(db: Session, shelf: models.Shelf, isbn: str, position: int) -> Tuple[models.ShelfBook, bool]:
    """Place a book at a 1-indexed position; returns (placement, created)."""
    now = models.now_utc()
    placement = get_shelf_book(db, shelf.library_id, shelf.id, isbn)
    created = placement is None
    if created:
        placement = models.ShelfBook(
            library_id=shelf.library_id,
            shelf_id=shelf.id,
            book_isbn=isbn,
            added_at=now,
            misplacement_count=0,
        )
        db.add(placement)
        shelf.current_count = (shelf.current_count or 0) + 1
        shelf.accuracy = compute_accuracy(shelf.capacity, shelf.current_count)
    placement.position = position
    placement.expected_position = position
    placement.is_correct_order = True
    placement.updated_at = now
    shelf.updated_at = now
    try:
        location_repo.update_book_position(
            db,
            isbn,
            shelf.library_id,
            shelf.id,
            {
                "floor_id": shelf.floor_id,
                "position": position,
                "expected_position": position,
                "is_correct_order": True,
            },
            commit=False,
        )
        db.commit()
    except Exception as e:
        db.rollback()
        raise RuntimeError(f"Failed to place book {isbn} on shelf {shelf.id}: {str(e)}")
    db.refresh(placement)
    return placement, created


def remove_book_from_shelf(db: Session, shelf: models.Shelf, isbn: str) -> bool:
    placement = get_shelf_book(db, shelf.library_id, shelf.id, isbn)
    if not placement:
        return False
    try:
        db.delete(placement)
        shelf.current_count = max(0, (shelf.current_count or 0) - 1)
        shelf.accuracy = compute_accuracy(shelf.capacity, shelf.current_count)
        shelf.updated_at = models.now_utc()
        location_repo.delete_location(db, isbn, shelf.library_id, shelf.id, commit=False)
        db.commit()
    except Exception as e:
        db.rollback()
        raise RuntimeError(f"Failed to remove book {isbn} from shelf {shelf.id}: {str(e)}")
    return True


def stamp_shelf(db: Session, library_id: str, shelf_id: str, *, last_scan_date: Optional[datetime] = None,
                last_correction_date: Optional[datetime] = None, commit: bool = True) -> Optional[models.Shelf]:
    db_shelf = get_shelf_by_id(db, library_id, shelf_id)
    if db_shelf is None:
        return None
    if last_scan_date is not None:
        db_shelf.last_scan_date = last_scan_date
    if last_correction_date is not None:
        db_shelf.last_correction_date = last_correction_date
    if commit:
        db.commit()
    return db_shelf
