"""
Book repository functions.

Books are keyed by ISBN, saved with merge semantics and removed by soft
delete.
"""
from __future__ import annotations

from typing import Optional, Tuple, Dict, Any

from sqlalchemy import func
from sqlalchemy.orm import Session

from libadmin.db import models, schemas

SEARCH_CANDIDATE_LIMIT = 50


def get_books(db: Session, category: Optional[str] = None, skip: int = 0, limit: int = 500):
    q = db.query(models.Book).filter(models.Book.is_active.is_(True))
    if category:
        q = q.filter(models.Book.category == category)
    return q.order_by(models.Book.title).offset(skip).limit(limit).all()


def get_book(db: Session, isbn: str) -> Optional[models.Book]:
    return db.query(models.Book).filter(models.Book.isbn == isbn).first()


def search_books(db: Session, query: str):
    """Substring search over at most SEARCH_CANDIDATE_LIMIT active books.

    Title and author match case-insensitively; ISBN matches as typed.
    """
    candidates = (
        db.query(models.Book)
        .filter(models.Book.is_active.is_(True))
        .order_by(models.Book.title)
        .limit(SEARCH_CANDIDATE_LIMIT)
        .all()
    )
    needle = (query or "").lower()
    return [
        book for book in candidates
        if needle in (book.title or "").lower()
        or needle in (book.author or "").lower()
        or (query or "") in (book.isbn or "")
    ]


def save_book(db: Session, isbn: str, book: schemas.BookCreate, *, added_by: Optional[str]) -> Tuple[models.Book, bool]:
    now = models.now_utc()
    db_book = get_book(db, isbn)
    created = db_book is None
    if created:
        db_book = models.Book(isbn=isbn, created_at=now, **book.model_dump(exclude={"isbn"}))
        db.add(db_book)
    else:
        for key, value in book.model_dump(exclude_unset=True, exclude={"isbn"}).items():
            setattr(db_book, key, value)
    if not db_book.language:
        db_book.language = "fr"
    db_book.is_active = True
    db_book.added_by = added_by
    db_book.updated_at = now
    try:
        db.commit()
    except Exception as e:
        db.rollback()
        raise RuntimeError(f"Failed to save book {isbn}: {str(e)}")
    db.refresh(db_book)
    return db_book, created


def update_book(db: Session, isbn: str, book: schemas.BookUpdate) -> Optional[models.Book]:
    db_book = get_book(db, isbn)
    if db_book:
        models.apply_patch(db_book, book.model_dump(exclude_unset=True))
        db_book.updated_at = models.now_utc()
        try:
            db.commit()
        except Exception as e:
            db.rollback()
            raise RuntimeError(f"Failed to update book {isbn}: {str(e)}")
        db.refresh(db_book)
    return db_book


def set_cover_url(db: Session, isbn: str, url: str) -> Optional[models.Book]:
    db_book = get_book(db, isbn)
    if db_book:
        db_book.cover_url = url
        db_book.updated_at = models.now_utc()
        db.commit()
        db.refresh(db_book)
    return db_book


def delete_book(db: Session, isbn: str) -> bool:
    db_book = get_book(db, isbn)
    if not db_book:
        return False
    db_book.is_active = False
    db_book.updated_at = models.now_utc()
    db.commit()
    return True


def count_active_books(db: Session) -> int:
    return db.query(func.count(models.Book.isbn)).filter(models.Book.is_active.is_(True)).scalar() or 0


def get_book_stats(db: Session, isbn: str) -> Dict[str, Any]:
    locations = (
        db.query(func.count(models.BookLocation.id))
        .filter(models.BookLocation.book_isbn == isbn)
        .scalar()
    ) or 0
    copies = (
        db.query(func.count(models.ShelfBook.shelf_id))
        .filter(models.ShelfBook.book_isbn == isbn)
        .scalar()
    ) or 0
    book = get_book(db, isbn)
    return {
        "total_copies": copies,
        "total_locations": locations,
        "scan_count": (book.scan_count or 0) if book else 0,
        "last_scan_date": models.as_utc(book.last_scanned_at) if book else None,
    }
