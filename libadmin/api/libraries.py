"""
Libraries API endpoints.

Listing and reads are open to any signed-in account; writes need library
management rights on the target library.
"""
import logging
from typing import List, Optional

from fastapi import APIRouter, Depends, File, HTTPException, Response, UploadFile, status
from sqlalchemy.orm import Session

from libadmin.audit import AuditAction, safe_log
from libadmin.db import schemas
from libadmin.db.database import get_db
from libadmin.db.repositories import libraries as library_repo
from libadmin.api.deps import get_current_account_context, get_current_admin_context
from libadmin.api.permissions import ensure_library_write
from libadmin.api.uploads import image_error, read_upload
from libadmin.services.storage_service import StorageService, get_storage_service

logger = logging.getLogger("libadmin.api")

router = APIRouter(prefix="/libraries", tags=["libraries"])


def _with_stats(db: Session, library) -> schemas.Library:
    data = schemas.Library.model_validate(library)
    return data.model_copy(update={"stats": schemas.LibraryStats(**library_repo.get_library_stats(db, library.id))})


def _save(db: Session, library_id: str, payload: schemas.LibraryCreate, ctx) -> schemas.Library:
    ensure_library_write(ctx, library_id)
    try:
        library, created = library_repo.save_library(db, library_id, payload, created_by=ctx["uid"])
    except RuntimeError as e:
        raise HTTPException(status_code=status.HTTP_500_INTERNAL_SERVER_ERROR, detail=str(e))
    safe_log(
        db,
        action=AuditAction.LIBRARY_CREATE if created else AuditAction.LIBRARY_UPDATE,
        target_type="library",
        target_id=library.id,
        actor_uid=ctx["uid"],
        metadata={"name": library.name},
    )
    return _with_stats(db, library)


@router.get("/", response_model=List[schemas.Library])
def list_libraries(
    wilaya: Optional[str] = None,
    db: Session = Depends(get_db),
    user_context = Depends(get_current_account_context),
):
    libraries = library_repo.get_libraries(db, wilaya=wilaya)
    stats = library_repo.get_stats_for_libraries(db, [library.id for library in libraries])
    return [
        schemas.Library.model_validate(library).model_copy(
            update={"stats": schemas.LibraryStats(**stats[library.id])}
        )
        for library in libraries
    ]


@router.post("/", response_model=schemas.Library, status_code=status.HTTP_201_CREATED)
def create_library(
    payload: schemas.LibraryCreate,
    db: Session = Depends(get_db),
    user_context = Depends(get_current_admin_context),
):
    _account, ctx = user_context
    library_id = payload.id or library_repo.next_library_id(db)
    return _save(db, library_id, payload, ctx)


@router.get("/{library_id}", response_model=schemas.Library)
def get_library(
    library_id: str,
    db: Session = Depends(get_db),
    user_context = Depends(get_current_account_context),
):
    library = library_repo.get_library(db, library_id)
    if not library:
        raise HTTPException(status_code=404, detail="Library not found")
    return _with_stats(db, library)


@router.put("/{library_id}", response_model=schemas.Library)
def save_library(
    library_id: str,
    payload: schemas.LibraryCreate,
    db: Session = Depends(get_db),
    user_context = Depends(get_current_admin_context),
):
    _account, ctx = user_context
    return _save(db, library_id, payload, ctx)


@router.patch("/{library_id}", response_model=schemas.Library)
def update_library(
    library_id: str,
    payload: schemas.LibraryUpdate,
    db: Session = Depends(get_db),
    user_context = Depends(get_current_admin_context),
):
    _account, ctx = user_context
    ensure_library_write(ctx, library_id)
    try:
        library = library_repo.update_library(db, library_id, payload)
    except ValueError as e:
        raise HTTPException(status_code=status.HTTP_422_UNPROCESSABLE_ENTITY, detail=str(e))
    except RuntimeError as e:
        raise HTTPException(status_code=status.HTTP_500_INTERNAL_SERVER_ERROR, detail=str(e))
    if not library:
        raise HTTPException(status_code=404, detail="Library not found")
    safe_log(
        db,
        action=AuditAction.LIBRARY_UPDATE,
        target_type="library",
        target_id=library_id,
        actor_uid=ctx["uid"],
        metadata={"fields": sorted(payload.model_dump(exclude_unset=True).keys())},
    )
    return _with_stats(db, library)


@router.delete("/{library_id}", status_code=status.HTTP_204_NO_CONTENT)
def delete_library(
    library_id: str,
    db: Session = Depends(get_db),
    user_context = Depends(get_current_admin_context),
):
    _account, ctx = user_context
    ensure_library_write(ctx, library_id)
    if not library_repo.delete_library(db, library_id):
        raise HTTPException(status_code=404, detail="Library not found")
    safe_log(db, action=AuditAction.LIBRARY_DELETE, target_type="library", target_id=library_id, actor_uid=ctx["uid"])
    return Response(status_code=status.HTTP_204_NO_CONTENT)


@router.post("/{library_id}/logo", response_model=schemas.Library)
def upload_library_logo(
    library_id: str,
    file: UploadFile = File(...),
    db: Session = Depends(get_db),
    storage: StorageService = Depends(get_storage_service),
    user_context = Depends(get_current_admin_context),
):
    _account, ctx = user_context
    ensure_library_write(ctx, library_id)
    if not library_repo.get_library(db, library_id):
        raise HTTPException(status_code=404, detail="Library not found")
    content = read_upload(file)
    try:
        url = storage.upload_library_logo(content, library_id)
    except ValueError as e:
        raise image_error(e)
    library = library_repo.update_library_fields(db, library_id, {"logo_url": url})
    safe_log(
        db,
        action=AuditAction.FILE_UPLOAD,
        target_type="library",
        target_id=library_id,
        actor_uid=ctx["uid"],
        metadata={"url": url, "kind": "logo"},
    )
    return _with_stats(db, library)
