from datetime import datetime
from typing import Optional, Literal
from pydantic import BaseModel, ConfigDict

BookLanguage = Literal['fr', 'ar', 'en']


class BookStats(BaseModel):
    total_copies: int = 0
    total_locations: int = 0
    scan_count: int = 0
    last_scan_date: Optional[datetime] = None


class BookBase(BaseModel):
    title: str
    author: str
    category: str
    cover_url: Optional[str] = None
    description: Optional[str] = None
    publisher: Optional[str] = None
    publish_date: Optional[str] = None
    language: BookLanguage = 'fr'
    page_count: Optional[int] = None


class BookCreate(BookBase):
    isbn: Optional[str] = None


class BookUpdate(BaseModel):
    title: Optional[str] = None
    author: Optional[str] = None
    category: Optional[str] = None
    cover_url: Optional[str] = None
    description: Optional[str] = None
    publisher: Optional[str] = None
    publish_date: Optional[str] = None
    language: Optional[BookLanguage] = None
    page_count: Optional[int] = None
    is_active: Optional[bool] = None


class Book(BookBase):
    isbn: str
    is_active: bool
    added_by: Optional[str] = None
    created_at: Optional[datetime] = None
    updated_at: Optional[datetime] = None
    stats: Optional[BookStats] = None
    model_config = ConfigDict(from_attributes=True)


class BookLocationUpdate(BaseModel):
    floor_id: Optional[str] = None
    position: Optional[int] = None
    expected_position: Optional[int] = None
    is_correct_order: Optional[bool] = None
    is_flagged: Optional[bool] = None
    reason: Optional[str] = None
    last_checked_at: Optional[datetime] = None


class BookLocation(BaseModel):
    id: str
    book_isbn: str
    library_id: str
    floor_id: Optional[str] = None
    shelf_id: str
    position: int
    expected_position: int
    is_correct_order: bool
    is_flagged: bool
    reason: Optional[str] = None
    last_checked_at: Optional[datetime] = None
    misplacement_count: int = 0
    created_at: Optional[datetime] = None
    updated_at: Optional[datetime] = None
    model_config = ConfigDict(from_attributes=True)
