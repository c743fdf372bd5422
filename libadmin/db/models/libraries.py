from sqlalchemy import Column, String, DateTime, Boolean, ForeignKey, ForeignKeyConstraint, Integer, Float, Text, Index
from sqlalchemy.orm import relationship
from .base import Base, now_utc, new_id


class Library(Base):
    __tablename__ = 'libraries'
    id = Column(String(64), primary_key=True, default=new_id)
    name = Column(String(255), nullable=False)
    address = Column(String(500), nullable=False, default='')
    postal_code = Column(String(20), nullable=False, default='')
    city = Column(String(120), nullable=False)
    # Province used for filtering; mirrors city on save
    wilaya = Column(String(120), nullable=False, index=True)
    phone = Column(String(50), nullable=True)
    email = Column(String(320), nullable=True)
    floor_count = Column(Integer, nullable=False, default=0)
    latitude = Column(Float, nullable=False, default=0.0)
    longitude = Column(Float, nullable=False, default=0.0)
    logo_url = Column(Text, nullable=True)
    hours = Column(String(255), nullable=True)
    description = Column(Text, nullable=True)
    is_active = Column(Boolean, nullable=False, default=True)
    created_by = Column(String(64), nullable=True)
    created_at = Column(DateTime(timezone=True), default=now_utc)
    updated_at = Column(DateTime(timezone=True), default=now_utc, onupdate=now_utc)

    floors = relationship("Floor", back_populates="library", order_by="Floor.floor_number")


class Floor(Base):
    __tablename__ = 'floors'
    # Floor ids are unique within their library
    library_id = Column(String(64), ForeignKey('libraries.id', ondelete='CASCADE'), primary_key=True)
    id = Column(String(64), primary_key=True, default=new_id)
    name = Column(String(255), nullable=False)
    # 0 = ground floor, 1 = first floor, ...
    floor_number = Column(Integer, nullable=False, default=0)
    map_asset_path = Column(Text, nullable=True)
    map_url = Column(Text, nullable=True)
    description = Column(Text, nullable=True)
    shelf_count = Column(Integer, nullable=False, default=0)
    map_width = Column(Float, nullable=True)
    map_height = Column(Float, nullable=True)
    is_active = Column(Boolean, nullable=False, default=True)
    created_at = Column(DateTime(timezone=True), default=now_utc)
    updated_at = Column(DateTime(timezone=True), default=now_utc, onupdate=now_utc)

    library = relationship("Library", back_populates="floors")

    __table_args__ = (
        Index('idx_floors_library_number', 'library_id', 'floor_number'),
    )


class Shelf(Base):
    __tablename__ = 'shelves'
    # Shelf ids are unique within their library, across its floors
    library_id = Column(String(64), ForeignKey('libraries.id', ondelete='CASCADE'), primary_key=True)
    id = Column(String(64), primary_key=True, default=new_id)
    floor_id = Column(String(64), nullable=False)
    # e.g. "A-1-1"
    name = Column(String(120), nullable=False)
    # Position and size in meters
    x = Column(Float, nullable=False, default=0.0)
    y = Column(Float, nullable=False, default=0.0)
    z = Column(Float, nullable=False, default=0.0)
    width = Column(Float, nullable=False, default=0.0)
    height = Column(Float, nullable=False, default=0.0)
    depth = Column(Float, nullable=False, default=0.0)
    category = Column(String(120), nullable=True)
    capacity = Column(Integer, nullable=False, default=0)
    current_count = Column(Integer, nullable=False, default=0)
    description = Column(Text, nullable=True)
    is_active = Column(Boolean, nullable=False, default=True)
    last_correction_date = Column(DateTime(timezone=True), nullable=True)
    last_scan_date = Column(DateTime(timezone=True), nullable=True)
    # Percentage 0..100
    accuracy = Column(Float, nullable=False, default=0.0)
    created_at = Column(DateTime(timezone=True), default=now_utc)
    updated_at = Column(DateTime(timezone=True), default=now_utc, onupdate=now_utc)

    books = relationship("ShelfBook", back_populates="shelf", order_by="ShelfBook.position", cascade="all, delete-orphan")

    __table_args__ = (
        ForeignKeyConstraint(
            ['library_id', 'floor_id'], ['floors.library_id', 'floors.id'], ondelete='CASCADE'
        ),
        Index('idx_shelves_library_floor', 'library_id', 'floor_id'),
    )


class ShelfBook(Base):
    __tablename__ = 'shelf_books'
    library_id = Column(String(64), primary_key=True)
    shelf_id = Column(String(64), primary_key=True)
    book_isbn = Column(String(32), ForeignKey('books.isbn', ondelete='CASCADE'), primary_key=True)
    # 1-indexed
    position = Column(Integer, nullable=False)
    expected_position = Column(Integer, nullable=False)
    is_correct_order = Column(Boolean, nullable=False, default=True)
    is_flagged = Column(Boolean, nullable=False, default=False)
    reason = Column(Text, nullable=True)
    last_checked_at = Column(DateTime(timezone=True), nullable=True)
    misplacement_count = Column(Integer, nullable=False, default=0)
    added_at = Column(DateTime(timezone=True), default=now_utc)
    updated_at = Column(DateTime(timezone=True), default=now_utc, onupdate=now_utc)

    shelf = relationship("Shelf", back_populates="books")

    __table_args__ = (
        ForeignKeyConstraint(
            ['library_id', 'shelf_id'], ['shelves.library_id', 'shelves.id'], ondelete='CASCADE'
        ),
    )
