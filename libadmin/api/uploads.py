"""Shared handling for image upload endpoints."""
from fastapi import HTTPException, UploadFile, status

from libadmin.services.storage_service import MAX_UPLOAD_BYTES


def read_upload(file: UploadFile) -> bytes:
    """Read an uploaded file, enforcing the size limit (413)."""
    content = file.file.read(MAX_UPLOAD_BYTES + 1)
    if len(content) > MAX_UPLOAD_BYTES:
        raise HTTPException(
            status_code=status.HTTP_413_REQUEST_ENTITY_TOO_LARGE,
            detail=f"File exceeds the {MAX_UPLOAD_BYTES // (1024 * 1024)} MB limit",
        )
    if not content:
        raise HTTPException(status_code=status.HTTP_422_UNPROCESSABLE_ENTITY, detail="Empty upload")
    return content


def image_error(exc: ValueError) -> HTTPException:
    return HTTPException(status_code=status.HTTP_422_UNPROCESSABLE_ENTITY, detail=str(exc))
