"""
Books API endpoints.

Search is gated by the `book_search` feature flag; writes need
`can_manage_books`.
"""
from typing import List, Optional

from fastapi import APIRouter, Depends, File, HTTPException, Response, UploadFile, status
from sqlalchemy.orm import Session

from libadmin.audit import AuditAction, safe_log
from libadmin.db import schemas
from libadmin.db.database import get_db
from libadmin.db.repositories import book_locations as location_repo
from libadmin.db.repositories import books as book_repo
from libadmin.api.deps import get_current_account_context, get_current_admin_context, require_feature
from libadmin.api.permissions import ensure_permission
from libadmin.api.uploads import image_error, read_upload
from libadmin.services.storage_service import StorageService, get_storage_service

router = APIRouter(prefix="/books", tags=["books"])


def _with_stats(db: Session, book) -> schemas.Book:
    data = schemas.Book.model_validate(book)
    return data.model_copy(update={"stats": schemas.BookStats(**book_repo.get_book_stats(db, book.isbn))})


def _save(db: Session, isbn: str, payload: schemas.BookCreate, ctx):
    ensure_permission(ctx, "can_manage_books")
    try:
        book, created = book_repo.save_book(db, isbn, payload, added_by=ctx["uid"])
    except RuntimeError as e:
        raise HTTPException(status_code=status.HTTP_500_INTERNAL_SERVER_ERROR, detail=str(e))
    safe_log(
        db,
        action=AuditAction.BOOK_CREATE if created else AuditAction.BOOK_UPDATE,
        target_type="book",
        target_id=isbn,
        actor_uid=ctx["uid"],
        metadata={"title": book.title},
    )
    return book


@router.get("/", response_model=List[schemas.Book])
def list_books(
    category: Optional[str] = None,
    skip: int = 0,
    limit: int = 500,
    db: Session = Depends(get_db),
    user_context = Depends(get_current_account_context),
):
    return book_repo.get_books(db, category=category, skip=skip, limit=limit)


@router.get("/search", response_model=List[schemas.Book], dependencies=[Depends(require_feature("book_search"))])
def search_books(
    q: str = "",
    db: Session = Depends(get_db),
    user_context = Depends(get_current_account_context),
):
    return book_repo.search_books(db, q)


@router.post("/", response_model=schemas.Book, status_code=status.HTTP_201_CREATED)
def create_book(
    payload: schemas.BookCreate,
    db: Session = Depends(get_db),
    user_context = Depends(get_current_admin_context),
):
    _account, ctx = user_context
    isbn = (payload.isbn or "").strip()
    if not isbn:
        raise HTTPException(status_code=422, detail="isbn is required")
    return _save(db, isbn, payload, ctx)


@router.get("/{isbn}", response_model=schemas.Book)
def get_book(
    isbn: str,
    db: Session = Depends(get_db),
    user_context = Depends(get_current_account_context),
):
    book = book_repo.get_book(db, isbn)
    if not book:
        raise HTTPException(status_code=404, detail="Book not found")
    return _with_stats(db, book)


@router.put("/{isbn}", response_model=schemas.Book)
def save_book(
    isbn: str,
    payload: schemas.BookCreate,
    db: Session = Depends(get_db),
    user_context = Depends(get_current_admin_context),
):
    _account, ctx = user_context
    return _save(db, isbn, payload, ctx)


@router.patch("/{isbn}", response_model=schemas.Book)
def update_book(
    isbn: str,
    payload: schemas.BookUpdate,
    db: Session = Depends(get_db),
    user_context = Depends(get_current_admin_context),
):
    _account, ctx = user_context
    ensure_permission(ctx, "can_manage_books")
    try:
        book = book_repo.update_book(db, isbn, payload)
    except ValueError as e:
        raise HTTPException(status_code=status.HTTP_422_UNPROCESSABLE_ENTITY, detail=str(e))
    except RuntimeError as e:
        raise HTTPException(status_code=status.HTTP_500_INTERNAL_SERVER_ERROR, detail=str(e))
    if not book:
        raise HTTPException(status_code=404, detail="Book not found")
    safe_log(
        db,
        action=AuditAction.BOOK_UPDATE,
        target_type="book",
        target_id=isbn,
        actor_uid=ctx["uid"],
        metadata={"fields": sorted(payload.model_dump(exclude_unset=True).keys())},
    )
    return book


@router.delete("/{isbn}", status_code=status.HTTP_204_NO_CONTENT)
def delete_book(
    isbn: str,
    db: Session = Depends(get_db),
    user_context = Depends(get_current_admin_context),
):
    _account, ctx = user_context
    ensure_permission(ctx, "can_manage_books")
    if not book_repo.delete_book(db, isbn):
        raise HTTPException(status_code=404, detail="Book not found")
    safe_log(db, action=AuditAction.BOOK_DELETE, target_type="book", target_id=isbn, actor_uid=ctx["uid"])
    return Response(status_code=status.HTTP_204_NO_CONTENT)


@router.get("/{isbn}/locations", response_model=List[schemas.BookLocation])
def list_book_locations(
    isbn: str,
    db: Session = Depends(get_db),
    user_context = Depends(get_current_account_context),
):
    return location_repo.get_locations_by_isbn(db, isbn)


@router.post("/{isbn}/cover", response_model=schemas.Book)
def upload_book_cover(
    isbn: str,
    file: UploadFile = File(...),
    db: Session = Depends(get_db),
    storage: StorageService = Depends(get_storage_service),
    user_context = Depends(get_current_admin_context),
):
    _account, ctx = user_context
    ensure_permission(ctx, "can_manage_books")
    if not book_repo.get_book(db, isbn):
        raise HTTPException(status_code=404, detail="Book not found")
    content = read_upload(file)
    try:
        url = storage.upload_book_cover(content, isbn)
    except ValueError as e:
        raise image_error(e)
    book = book_repo.set_cover_url(db, isbn, url)
    safe_log(
        db,
        action=AuditAction.FILE_UPLOAD,
        target_type="book",
        target_id=isbn,
        actor_uid=ctx["uid"],
        metadata={"url": url, "kind": "cover"},
    )
    return book
