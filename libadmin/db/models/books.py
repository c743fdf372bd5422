from sqlalchemy import Column, String, DateTime, Boolean, ForeignKey, Integer, Text, Index
from .base import Base, now_utc, new_id


class Book(Base):
    __tablename__ = 'books'
    isbn = Column(String(32), primary_key=True)
    title = Column(String(500), nullable=False)
    author = Column(String(255), nullable=False)
    category = Column(String(120), nullable=False, index=True)
    cover_url = Column(Text, nullable=True)
    description = Column(Text, nullable=True)
    publisher = Column(String(255), nullable=True)
    publish_date = Column(String(32), nullable=True)
    # 'fr'|'ar'|'en'
    language = Column(String(8), nullable=False, default='fr')
    page_count = Column(Integer, nullable=True)
    is_active = Column(Boolean, nullable=False, default=True)
    added_by = Column(String(64), nullable=True)
    # Bumped once per scan that includes the book
    scan_count = Column(Integer, nullable=False, default=0)
    last_scanned_at = Column(DateTime(timezone=True), nullable=True)
    created_at = Column(DateTime(timezone=True), default=now_utc)
    updated_at = Column(DateTime(timezone=True), default=now_utc, onupdate=now_utc)


class BookLocation(Base):
    __tablename__ = 'book_locations'
    id = Column(String(64), primary_key=True, default=new_id)
    book_isbn = Column(String(32), ForeignKey('books.isbn', ondelete='CASCADE'), nullable=False)
    library_id = Column(String(64), ForeignKey('libraries.id', ondelete='CASCADE'), nullable=False)
    floor_id = Column(String(64), nullable=True)
    shelf_id = Column(String(64), nullable=False)
    position = Column(Integer, nullable=False, default=0)
    expected_position = Column(Integer, nullable=False, default=0)
    is_correct_order = Column(Boolean, nullable=False, default=True)
    is_flagged = Column(Boolean, nullable=False, default=False)
    reason = Column(Text, nullable=True)
    last_checked_at = Column(DateTime(timezone=True), nullable=True)
    misplacement_count = Column(Integer, nullable=False, default=0)
    created_at = Column(DateTime(timezone=True), default=now_utc)
    updated_at = Column(DateTime(timezone=True), default=now_utc, onupdate=now_utc)

    __table_args__ = (
        Index('uq_book_locations_isbn_library_shelf', 'book_isbn', 'library_id', 'shelf_id', unique=True),
        Index('idx_book_locations_library_correct', 'library_id', 'is_correct_order'),
    )
