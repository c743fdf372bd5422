from datetime import datetime
from typing import Optional, List
from pydantic import BaseModel, ConfigDict, Field


class LibraryStats(BaseModel):
    total_books: int = 0
    total_shelves: int = 0
    total_floors: int = 0
    last_scan_date: Optional[datetime] = None


class LibraryBase(BaseModel):
    name: str
    address: str = ''
    postal_code: str = ''
    city: str
    phone: Optional[str] = None
    email: Optional[str] = None
    floor_count: int = 0
    latitude: float = 0.0
    longitude: float = 0.0
    logo_url: Optional[str] = None
    hours: Optional[str] = None
    description: Optional[str] = None


class LibraryCreate(LibraryBase):
    id: Optional[str] = None


class LibraryUpdate(BaseModel):
    name: Optional[str] = None
    address: Optional[str] = None
    postal_code: Optional[str] = None
    city: Optional[str] = None
    wilaya: Optional[str] = None
    phone: Optional[str] = None
    email: Optional[str] = None
    floor_count: Optional[int] = None
    latitude: Optional[float] = None
    longitude: Optional[float] = None
    logo_url: Optional[str] = None
    hours: Optional[str] = None
    description: Optional[str] = None
    is_active: Optional[bool] = None


class Library(LibraryBase):
    id: str
    wilaya: str
    is_active: bool
    created_by: Optional[str] = None
    created_at: Optional[datetime] = None
    updated_at: Optional[datetime] = None
    stats: Optional[LibraryStats] = None
    model_config = ConfigDict(from_attributes=True)


class FloorBase(BaseModel):
    name: str
    floor_number: int = 0
    map_asset_path: Optional[str] = None
    description: Optional[str] = None
    map_width: Optional[float] = None
    map_height: Optional[float] = None


class FloorCreate(FloorBase):
    id: Optional[str] = None


class FloorUpdate(BaseModel):
    name: Optional[str] = None
    floor_number: Optional[int] = None
    map_asset_path: Optional[str] = None
    map_url: Optional[str] = None
    description: Optional[str] = None
    map_width: Optional[float] = None
    map_height: Optional[float] = None
    is_active: Optional[bool] = None


class Floor(FloorBase):
    id: str
    library_id: str
    map_url: Optional[str] = None
    shelf_count: int = 0
    is_active: bool
    created_at: Optional[datetime] = None
    updated_at: Optional[datetime] = None
    model_config = ConfigDict(from_attributes=True)


class ShelfBase(BaseModel):
    name: str
    x: float = 0.0
    y: float = 0.0
    z: float = 0.0
    width: float = 0.0
    height: float = 0.0
    depth: float = 0.0
    category: Optional[str] = None
    capacity: int = Field(default=0, ge=0)
    current_count: int = Field(default=0, ge=0)
    description: Optional[str] = None


class ShelfCreate(ShelfBase):
    id: Optional[str] = None


class ShelfUpdate(BaseModel):
    name: Optional[str] = None
    x: Optional[float] = None
    y: Optional[float] = None
    z: Optional[float] = None
    width: Optional[float] = None
    height: Optional[float] = None
    depth: Optional[float] = None
    category: Optional[str] = None
    capacity: Optional[int] = Field(default=None, ge=0)
    current_count: Optional[int] = Field(default=None, ge=0)
    description: Optional[str] = None
    is_active: Optional[bool] = None


class Shelf(ShelfBase):
    id: str
    library_id: str
    floor_id: str
    is_active: bool
    last_correction_date: Optional[datetime] = None
    last_scan_date: Optional[datetime] = None
    accuracy: float = 0.0
    created_at: Optional[datetime] = None
    updated_at: Optional[datetime] = None
    model_config = ConfigDict(from_attributes=True)


class ShelfBookAdd(BaseModel):
    isbn: str
    position: int


class ShelfBook(BaseModel):
    shelf_id: str
    book_isbn: str
    position: int
    expected_position: int
    is_correct_order: bool
    is_flagged: bool = False
    reason: Optional[str] = None
    last_checked_at: Optional[datetime] = None
    misplacement_count: int = 0
    added_at: Optional[datetime] = None
    updated_at: Optional[datetime] = None
    model_config = ConfigDict(from_attributes=True)


class ShelfWithBooks(Shelf):
    books: List[ShelfBook] = []
