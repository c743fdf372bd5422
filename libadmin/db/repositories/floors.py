"""
Floor repository functions.
"""
from __future__ import annotations

from typing import Optional, Tuple

from sqlalchemy.orm import Session

from libadmin.db import models, schemas


def next_floor_id(db: Session, library_id: str) -> str:
    ms = models.epoch_ms()
    while get_floor(db, library_id, f"floor_{ms}") is not None:
        ms += 1
    return f"floor_{ms}"


def get_floors_by_library(db: Session, library_id: str):
    return (
        db.query(models.Floor)
        .filter(models.Floor.library_id == library_id)
        .order_by(models.Floor.floor_number)
        .all()
    )


def get_floor(db: Session, library_id: str, floor_id: str) -> Optional[models.Floor]:
    return (
        db.query(models.Floor)
        .filter(models.Floor.library_id == library_id, models.Floor.id == floor_id)
        .first()
    )


def save_floor(
    db: Session,
    library_id: str,
    floor_id: str,
    floor: schemas.FloorCreate,
) -> Tuple[models.Floor, bool]:
    """Create or merge a floor; `map_url` mirrors `map_asset_path`."""
    now = models.now_utc()
    db_floor = get_floor(db, library_id, floor_id)
    created = db_floor is None
    if created:
        db_floor = models.Floor(
            id=floor_id,
            library_id=library_id,
            created_at=now,
            **floor.model_dump(exclude={"id"}),
        )
        db.add(db_floor)
    else:
        for key, value in floor.model_dump(exclude_unset=True, exclude={"id"}).items():
            setattr(db_floor, key, value)
    db_floor.map_url = db_floor.map_asset_path
    db_floor.is_active = True
    db_floor.updated_at = now
    try:
        db.commit()
    except Exception as e:
        db.rollback()
        raise RuntimeError(f"Failed to save floor {floor_id}: {str(e)}")
    db.refresh(db_floor)
    return db_floor, created


def update_floor(db: Session, library_id: str, floor_id: str, floor: schemas.FloorUpdate) -> Optional[models.Floor]:
    db_floor = get_floor(db, library_id, floor_id)
    if db_floor:
        models.apply_patch(db_floor, floor.model_dump(exclude_unset=True))
        db_floor.updated_at = models.now_utc()
        try:
            db.commit()
        except Exception as e:
            db.rollback()
            raise RuntimeError(f"Failed to update floor {floor_id}: {str(e)}")
        db.refresh(db_floor)
    return db_floor


def set_map_url(db: Session, library_id: str, floor_id: str, url: str) -> Optional[models.Floor]:
    db_floor = get_floor(db, library_id, floor_id)
    if db_floor:
        db_floor.map_url = url
        db_floor.updated_at = models.now_utc()
        db.commit()
        db.refresh(db_floor)
    return db_floor
