"""
Book location index endpoints for a library.
"""
from typing import List

from fastapi import APIRouter, Depends, HTTPException
from sqlalchemy.orm import Session

from libadmin.audit import AuditAction, safe_log
from libadmin.db import schemas
from libadmin.db.database import get_db
from libadmin.db.repositories import book_locations as location_repo
from libadmin.db.repositories import books as book_repo
from libadmin.db.repositories import libraries as library_repo
from libadmin.api.deps import get_current_admin_context
from libadmin.api.permissions import ensure_permission

router = APIRouter(prefix="/libraries/{library_id}/book-locations", tags=["book-locations"])


@router.get("/", response_model=List[schemas.BookLocation])
def list_locations(
    library_id: str,
    db: Session = Depends(get_db),
    user_context = Depends(get_current_admin_context),
):
    return location_repo.get_locations_by_library(db, library_id)


@router.get("/misplaced", response_model=List[schemas.BookLocation])
def list_misplaced_books(
    library_id: str,
    db: Session = Depends(get_db),
    user_context = Depends(get_current_admin_context),
):
    return location_repo.get_misplaced_books(db, library_id)


@router.put("/{shelf_id}/{isbn}", response_model=schemas.BookLocation)
def update_book_position(
    library_id: str,
    shelf_id: str,
    isbn: str,
    payload: schemas.BookLocationUpdate,
    db: Session = Depends(get_db),
    user_context = Depends(get_current_admin_context),
):
    _account, ctx = user_context
    ensure_permission(ctx, "can_manage_books")
    if not library_repo.get_library(db, library_id):
        raise HTTPException(status_code=404, detail="Library not found")
    if not book_repo.get_book(db, isbn):
        raise HTTPException(status_code=404, detail="Book not found")
    location, _created = location_repo.update_book_position(
        db, isbn, library_id, shelf_id, payload.model_dump(exclude_unset=True)
    )
    safe_log(
        db,
        action=AuditAction.BOOK_POSITION_UPDATE,
        target_type="book_location",
        target_id=location.id,
        actor_uid=ctx["uid"],
        metadata={"isbn": isbn, "library_id": library_id, "shelf_id": shelf_id},
    )
    return location
