"""
Shelves API endpoints, including the ordered books placed on a shelf.
"""
from typing import List

from fastapi import APIRouter, Depends, HTTPException, Response, status
from sqlalchemy.orm import Session

from libadmin.audit import AuditAction, safe_log
from libadmin.db import schemas
from libadmin.db.database import get_db
from libadmin.db.repositories import books as book_repo
from libadmin.db.repositories import floors as floor_repo
from libadmin.db.repositories import shelves as shelf_repo
from libadmin.api.deps import get_current_account_context, get_current_admin_context
from libadmin.api.permissions import ensure_library_write

router = APIRouter(prefix="/libraries/{library_id}/floors/{floor_id}/shelves", tags=["shelves"])


def _require_shelf(db: Session, library_id: str, floor_id: str, shelf_id: str):
    shelf = shelf_repo.get_shelf(db, library_id, floor_id, shelf_id)
    if not shelf:
        raise HTTPException(status_code=404, detail="Shelf not found")
    return shelf


def _save(db: Session, library_id: str, floor_id: str, shelf_id: str, payload: schemas.ShelfCreate, ctx):
    ensure_library_write(ctx, library_id)
    floor = floor_repo.get_floor(db, library_id, floor_id)
    if not floor:
        raise HTTPException(status_code=404, detail="Floor not found")
    existing = shelf_repo.get_shelf_by_id(db, library_id, shelf_id)
    if existing is not None and existing.floor_id != floor_id:
        raise HTTPException(
            status_code=status.HTTP_409_CONFLICT,
            detail=f"Shelf {shelf_id} already exists on floor {existing.floor_id}",
        )
    try:
        shelf, created = shelf_repo.save_shelf(db, floor, shelf_id, payload)
    except RuntimeError as e:
        raise HTTPException(status_code=status.HTTP_500_INTERNAL_SERVER_ERROR, detail=str(e))
    safe_log(
        db,
        action=AuditAction.SHELF_CREATE if created else AuditAction.SHELF_UPDATE,
        target_type="shelf",
        target_id=shelf.id,
        actor_uid=ctx["uid"],
        metadata={"library_id": library_id, "floor_id": floor_id, "name": shelf.name},
    )
    return shelf


@router.get("/", response_model=List[schemas.Shelf])
def list_shelves(
    library_id: str,
    floor_id: str,
    db: Session = Depends(get_db),
    user_context = Depends(get_current_account_context),
):
    return shelf_repo.get_shelves_by_floor(db, library_id, floor_id)


@router.post("/", response_model=schemas.Shelf, status_code=status.HTTP_201_CREATED)
def create_shelf(
    library_id: str,
    floor_id: str,
    payload: schemas.ShelfCreate,
    db: Session = Depends(get_db),
    user_context = Depends(get_current_admin_context),
):
    _account, ctx = user_context
    shelf_id = payload.id or shelf_repo.next_shelf_id(db, library_id)
    return _save(db, library_id, floor_id, shelf_id, payload, ctx)


@router.get("/{shelf_id}", response_model=schemas.ShelfWithBooks)
def get_shelf(
    library_id: str,
    floor_id: str,
    shelf_id: str,
    db: Session = Depends(get_db),
    user_context = Depends(get_current_account_context),
):
    shelf = _require_shelf(db, library_id, floor_id, shelf_id)
    data = schemas.Shelf.model_validate(shelf).model_dump()
    books = [schemas.ShelfBook.model_validate(b) for b in shelf_repo.get_shelf_books(db, library_id, shelf_id)]
    return schemas.ShelfWithBooks(**data, books=books)


@router.put("/{shelf_id}", response_model=schemas.Shelf)
def save_shelf(
    library_id: str,
    floor_id: str,
    shelf_id: str,
    payload: schemas.ShelfCreate,
    db: Session = Depends(get_db),
    user_context = Depends(get_current_admin_context),
):
    _account, ctx = user_context
    return _save(db, library_id, floor_id, shelf_id, payload, ctx)


@router.patch("/{shelf_id}", response_model=schemas.Shelf)
def update_shelf(
    library_id: str,
    floor_id: str,
    shelf_id: str,
    payload: schemas.ShelfUpdate,
    db: Session = Depends(get_db),
    user_context = Depends(get_current_admin_context),
):
    _account, ctx = user_context
    ensure_library_write(ctx, library_id)
    try:
        shelf = shelf_repo.update_shelf(db, library_id, floor_id, shelf_id, payload)
    except ValueError as e:
        raise HTTPException(status_code=status.HTTP_422_UNPROCESSABLE_ENTITY, detail=str(e))
    except RuntimeError as e:
        raise HTTPException(status_code=status.HTTP_500_INTERNAL_SERVER_ERROR, detail=str(e))
    if not shelf:
        raise HTTPException(status_code=404, detail="Shelf not found")
    safe_log(
        db,
        action=AuditAction.SHELF_UPDATE,
        target_type="shelf",
        target_id=shelf_id,
        actor_uid=ctx["uid"],
        metadata={"library_id": library_id, "floor_id": floor_id},
    )
    return shelf


@router.get("/{shelf_id}/books", response_model=List[schemas.ShelfBook])
def list_shelf_books(
    library_id: str,
    floor_id: str,
    shelf_id: str,
    db: Session = Depends(get_db),
    user_context = Depends(get_current_account_context),
):
    _require_shelf(db, library_id, floor_id, shelf_id)
    return shelf_repo.get_shelf_books(db, library_id, shelf_id)


@router.post("/{shelf_id}/books", response_model=schemas.ShelfBook, status_code=status.HTTP_201_CREATED)
def add_book_to_shelf(
    library_id: str,
    floor_id: str,
    shelf_id: str,
    payload: schemas.ShelfBookAdd,
    db: Session = Depends(get_db),
    user_context = Depends(get_current_admin_context),
):
    _account, ctx = user_context
    ensure_library_write(ctx, library_id)
    shelf = _require_shelf(db, library_id, floor_id, shelf_id)
    if payload.position < 1:
        raise HTTPException(status_code=422, detail="position must be >= 1")
    book = book_repo.get_book(db, payload.isbn)
    if not book or not book.is_active:
        raise HTTPException(status_code=404, detail="Book not found")
    placement, _created = shelf_repo.add_book_to_shelf(db, shelf, payload.isbn, payload.position)
    safe_log(
        db,
        action=AuditAction.SHELF_BOOK_ADD,
        target_type="shelf",
        target_id=shelf_id,
        actor_uid=ctx["uid"],
        metadata={"isbn": payload.isbn, "position": payload.position},
    )
    return placement


@router.delete("/{shelf_id}/books/{isbn}", status_code=status.HTTP_204_NO_CONTENT)
def remove_book_from_shelf(
    library_id: str,
    floor_id: str,
    shelf_id: str,
    isbn: str,
    db: Session = Depends(get_db),
    user_context = Depends(get_current_admin_context),
):
    _account, ctx = user_context
    ensure_library_write(ctx, library_id)
    shelf = _require_shelf(db, library_id, floor_id, shelf_id)
    if not shelf_repo.remove_book_from_shelf(db, shelf, isbn):
        raise HTTPException(status_code=404, detail="Book is not on this shelf")
    safe_log(
        db,
        action=AuditAction.SHELF_BOOK_REMOVE,
        target_type="shelf",
        target_id=shelf_id,
        actor_uid=ctx["uid"],
        metadata={"isbn": isbn},
    )
    return Response(status_code=status.HTTP_204_NO_CONTENT)
