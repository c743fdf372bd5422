"""
Storage endpoints for direct file management.

Entity-specific uploads (logos, floor maps, covers) live on their routers.
"""
from typing import Optional

from fastapi import APIRouter, Depends, File, Form, HTTPException, Response, UploadFile, status
from sqlalchemy.orm import Session

from libadmin.audit import AuditAction, safe_log
from libadmin.db.database import get_db
from libadmin.api.deps import get_current_admin_context
from libadmin.api.permissions import ensure_permission
from libadmin.api.uploads import image_error, read_upload
from libadmin.services.storage_service import StorageService, get_storage_service

router = APIRouter(prefix="/storage", tags=["storage"])


@router.post("/images", status_code=status.HTTP_201_CREATED)
def upload_image(
    path: str = Form(...),
    max_width: int = Form(1920),
    max_height: int = Form(1080),
    quality: float = Form(0.8),
    file: UploadFile = File(...),
    db: Session = Depends(get_db),
    storage: StorageService = Depends(get_storage_service),
    user_context = Depends(get_current_admin_context),
):
    _account, ctx = user_context
    ensure_permission(ctx, "can_manage_libraries")
    if not 0 < quality <= 1:
        raise HTTPException(status_code=422, detail="quality must be in (0, 1]")
    content = read_upload(file)
    try:
        url = storage.upload_image(content, path, max_width, max_height, quality)
    except ValueError as e:
        raise image_error(e)
    safe_log(db, action=AuditAction.FILE_UPLOAD, target_type="file", target_id=path, actor_uid=ctx["uid"])
    return {"path": path, "url": url}


@router.get("/url")
def get_download_url(
    path: str,
    storage: StorageService = Depends(get_storage_service),
    user_context = Depends(get_current_admin_context),
):
    try:
        return {"path": path, "url": storage.get_download_url(path)}
    except ValueError as e:
        raise HTTPException(status_code=422, detail=str(e))
    except FileNotFoundError:
        raise HTTPException(status_code=404, detail="File not found")


@router.delete("/files", status_code=status.HTTP_204_NO_CONTENT)
def delete_file(
    path: str,
    db: Session = Depends(get_db),
    storage: StorageService = Depends(get_storage_service),
    user_context = Depends(get_current_admin_context),
    reason: Optional[str] = None,
):
    _account, ctx = user_context
    ensure_permission(ctx, "can_manage_libraries")
    try:
        storage.delete_file(path)
    except ValueError as e:
        raise HTTPException(status_code=422, detail=str(e))
    except FileNotFoundError:
        raise HTTPException(status_code=404, detail="File not found")
    safe_log(db, action=AuditAction.FILE_DELETE, target_type="file", target_id=path, actor_uid=ctx["uid"], reason=reason)
    return Response(status_code=status.HTTP_204_NO_CONTENT)
