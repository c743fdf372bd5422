"""
Library repository functions.

Libraries are saved under a caller-chosen id (create-or-merge) and removed by
soft delete. Listing returns active libraries ordered by city.
"""
from __future__ import annotations

from typing import Optional, Dict, Any, List, Tuple

from sqlalchemy import func
from sqlalchemy.orm import Session

from libadmin.db import models, schemas

# Filter values the dashboard sends for "no province filter"
_ALL_WILAYAS = {"", "All", "Tous"}


def next_library_id(db: Session) -> str:
    ms = models.epoch_ms()
    while get_library(db, f"lib_{ms}") is not None:
        ms += 1
    return f"lib_{ms}"


def get_libraries(db: Session, wilaya: Optional[str] = None):
    q = db.query(models.Library).filter(models.Library.is_active.is_(True))
    if wilaya is not None and wilaya not in _ALL_WILAYAS:
        q = q.filter(models.Library.wilaya == wilaya)
    return q.order_by(models.Library.city).all()


def get_library(db: Session, library_id: str) -> Optional[models.Library]:
    return db.query(models.Library).filter(models.Library.id == library_id).first()


def save_library(
    db: Session,
    library_id: str,
    library: schemas.LibraryCreate,
    *,
    created_by: Optional[str],
) -> Tuple[models.Library, bool]:
    """Create or merge a library; returns (library, created)."""
    now = models.now_utc()
    db_library = get_library(db, library_id)
    created = db_library is None
    if created:
        data = library.model_dump(exclude={"id"})
        db_library = models.Library(id=library_id, created_at=now, **data)
        db.add(db_library)
    else:
        for key, value in library.model_dump(exclude_unset=True, exclude={"id"}).items():
            setattr(db_library, key, value)
    db_library.wilaya = db_library.city
    db_library.is_active = True
    db_library.created_by = created_by
    db_library.updated_at = now
    try:
        db.commit()
    except Exception as e:
        db.rollback()
        raise RuntimeError(f"Failed to save library {library_id}: {str(e)}")
    db.refresh(db_library)
    return db_library, created


def update_library(db: Session, library_id: str, library: schemas.LibraryUpdate) -> Optional[models.Library]:
    return update_library_fields(db, library_id, library.model_dump(exclude_unset=True))


def update_library_fields(db: Session, library_id: str, changes: Dict[str, Any]) -> Optional[models.Library]:
    db_library = get_library(db, library_id)
    if db_library:
        models.apply_patch(db_library, changes)
        db_library.updated_at = models.now_utc()
        try:
            db.commit()
        except Exception as e:
            db.rollback()
            raise RuntimeError(f"Failed to update library {library_id}: {str(e)}")
        db.refresh(db_library)
    return db_library


def delete_library(db: Session, library_id: str) -> bool:
    """Soft delete: the row stays with is_active = False."""
    db_library = get_library(db, library_id)
    if not db_library:
        return False
    db_library.is_active = False
    db_library.updated_at = models.now_utc()
    db.commit()
    return True


def _aggregate_by_library(db: Session, aggregate, library_column, library_ids, *filters) -> Dict[str, Any]:
    rows = (
        db.query(library_column, aggregate)
        .filter(library_column.in_(library_ids), *filters)
        .group_by(library_column)
        .all()
    )
    return {library_id: value for library_id, value in rows}


def get_stats_for_libraries(db: Session, library_ids: List[str]) -> Dict[str, Dict[str, Any]]:
    """Stats for many libraries at once; one grouped query per figure."""
    if not library_ids:
        return {}
    books = _aggregate_by_library(
        db, func.count(models.BookLocation.id), models.BookLocation.library_id, library_ids
    )
    shelves = _aggregate_by_library(
        db, func.count(models.Shelf.id), models.Shelf.library_id, library_ids,
        models.Shelf.is_active.is_(True),
    )
    floors = _aggregate_by_library(
        db, func.count(models.Floor.id), models.Floor.library_id, library_ids,
        models.Floor.is_active.is_(True),
    )
    last_scans = _aggregate_by_library(
        db, func.max(models.Scan.created_at), models.Scan.library_id, library_ids
    )
    return {
        library_id: {
            "total_books": books.get(library_id) or 0,
            "total_shelves": shelves.get(library_id) or 0,
            "total_floors": floors.get(library_id) or 0,
            "last_scan_date": models.as_utc(last_scans.get(library_id)),
        }
        for library_id in library_ids
    }


def get_library_stats(db: Session, library_id: str) -> Dict[str, Any]:
    return get_stats_for_libraries(db, [library_id])[library_id]


def count_active_libraries(db: Session) -> int:
    return db.query(func.count(models.Library.id)).filter(models.Library.is_active.is_(True)).scalar() or 0
