"""
Floors API endpoints, nested under their library.
"""
from typing import List

from fastapi import APIRouter, Depends, File, HTTPException, UploadFile, status
from sqlalchemy.orm import Session

from libadmin.audit import AuditAction, safe_log
from libadmin.db import schemas
from libadmin.db.database import get_db
from libadmin.db.repositories import floors as floor_repo
from libadmin.db.repositories import libraries as library_repo
from libadmin.api.deps import get_current_account_context, get_current_admin_context
from libadmin.api.permissions import ensure_library_write
from libadmin.api.uploads import image_error, read_upload
from libadmin.services.storage_service import StorageService, get_storage_service

router = APIRouter(prefix="/libraries/{library_id}/floors", tags=["floors"])


def _require_library(db: Session, library_id: str):
    library = library_repo.get_library(db, library_id)
    if not library:
        raise HTTPException(status_code=404, detail="Library not found")
    return library


def _save(db: Session, library_id: str, floor_id: str, payload: schemas.FloorCreate, ctx):
    ensure_library_write(ctx, library_id)
    _require_library(db, library_id)
    try:
        floor, created = floor_repo.save_floor(db, library_id, floor_id, payload)
    except RuntimeError as e:
        raise HTTPException(status_code=status.HTTP_500_INTERNAL_SERVER_ERROR, detail=str(e))
    safe_log(
        db,
        action=AuditAction.FLOOR_CREATE if created else AuditAction.FLOOR_UPDATE,
        target_type="floor",
        target_id=floor.id,
        actor_uid=ctx["uid"],
        metadata={"library_id": library_id, "name": floor.name},
    )
    return floor


@router.get("/", response_model=List[schemas.Floor])
def list_floors(
    library_id: str,
    db: Session = Depends(get_db),
    user_context = Depends(get_current_account_context),
):
    return floor_repo.get_floors_by_library(db, library_id)


@router.post("/", response_model=schemas.Floor, status_code=status.HTTP_201_CREATED)
def create_floor(
    library_id: str,
    payload: schemas.FloorCreate,
    db: Session = Depends(get_db),
    user_context = Depends(get_current_admin_context),
):
    _account, ctx = user_context
    floor_id = payload.id or floor_repo.next_floor_id(db, library_id)
    return _save(db, library_id, floor_id, payload, ctx)


@router.get("/{floor_id}", response_model=schemas.Floor)
def get_floor(
    library_id: str,
    floor_id: str,
    db: Session = Depends(get_db),
    user_context = Depends(get_current_account_context),
):
    floor = floor_repo.get_floor(db, library_id, floor_id)
    if not floor:
        raise HTTPException(status_code=404, detail="Floor not found")
    return floor


@router.put("/{floor_id}", response_model=schemas.Floor)
def save_floor(
    library_id: str,
    floor_id: str,
    payload: schemas.FloorCreate,
    db: Session = Depends(get_db),
    user_context = Depends(get_current_admin_context),
):
    _account, ctx = user_context
    return _save(db, library_id, floor_id, payload, ctx)


@router.patch("/{floor_id}", response_model=schemas.Floor)
def update_floor(
    library_id: str,
    floor_id: str,
    payload: schemas.FloorUpdate,
    db: Session = Depends(get_db),
    user_context = Depends(get_current_admin_context),
):
    _account, ctx = user_context
    ensure_library_write(ctx, library_id)
    try:
        floor = floor_repo.update_floor(db, library_id, floor_id, payload)
    except ValueError as e:
        raise HTTPException(status_code=status.HTTP_422_UNPROCESSABLE_ENTITY, detail=str(e))
    except RuntimeError as e:
        raise HTTPException(status_code=status.HTTP_500_INTERNAL_SERVER_ERROR, detail=str(e))
    if not floor:
        raise HTTPException(status_code=404, detail="Floor not found")
    safe_log(
        db,
        action=AuditAction.FLOOR_UPDATE,
        target_type="floor",
        target_id=floor_id,
        actor_uid=ctx["uid"],
        metadata={"library_id": library_id},
    )
    return floor


@router.post("/{floor_id}/map", response_model=schemas.Floor)
def upload_floor_map(
    library_id: str,
    floor_id: str,
    file: UploadFile = File(...),
    db: Session = Depends(get_db),
    storage: StorageService = Depends(get_storage_service),
    user_context = Depends(get_current_admin_context),
):
    _account, ctx = user_context
    ensure_library_write(ctx, library_id)
    if not floor_repo.get_floor(db, library_id, floor_id):
        raise HTTPException(status_code=404, detail="Floor not found")
    content = read_upload(file)
    try:
        url = storage.upload_floor_map(content, library_id, floor_id)
    except ValueError as e:
        raise image_error(e)
    floor = floor_repo.set_map_url(db, library_id, floor_id, url)
    safe_log(
        db,
        action=AuditAction.FILE_UPLOAD,
        target_type="floor",
        target_id=floor_id,
        actor_uid=ctx["uid"],
        metadata={"url": url, "kind": "floor_map", "library_id": library_id},
    )
    return floor
