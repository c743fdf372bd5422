from datetime import datetime
from typing import Optional, List, Literal
from pydantic import BaseModel, ConfigDict, Field


class ScannedBook(BaseModel):
    isbn: str
    title: Optional[str] = None
    detected_position: int
    expected_position: int
    is_correct: bool


class DeviceInfo(BaseModel):
    platform: str
    model: Optional[str] = None
    os_version: Optional[str] = None


class ScanCreate(BaseModel):
    library_id: str
    floor_id: str
    shelf_id: str
    scanned_books: List[ScannedBook] = []
    total_scanned: int = 0
    correct_count: int = 0
    error_count: int = 0
    accuracy: float = 0.0
    scan_duration: Optional[float] = None
    device_info: Optional[DeviceInfo] = None


class Scan(ScanCreate):
    id: str
    user_id: Optional[str] = None
    created_at: datetime
    model_config = ConfigDict(from_attributes=True)


class SavedId(BaseModel):
    id: str


CorrectionStatus = Literal['in_progress', 'completed', 'cancelled']


class Movement(BaseModel):
    book_isbn: str
    book_title: Optional[str] = None
    from_position: int
    to_position: int
    direction: Literal['left', 'right']
    priority: int = Field(default=0, ge=0, le=5)
    is_completed: bool = False
    completed_at: Optional[datetime] = None


class CorrectionCreate(BaseModel):
    library_id: str
    shelf_id: str
    status: CorrectionStatus = 'in_progress'
    movements: List[Movement] = []
    started_at: Optional[datetime] = None
    completed_at: Optional[datetime] = None


class CorrectionUpdate(BaseModel):
    status: Optional[CorrectionStatus] = None
    movements: Optional[List[Movement]] = None
    completed_at: Optional[datetime] = None


class Correction(BaseModel):
    id: str
    library_id: str
    shelf_id: str
    user_id: Optional[str] = None
    status: CorrectionStatus
    total_moves: int
    completed_moves: int
    progress_percentage: float
    movements: List[Movement] = []
    started_at: datetime
    completed_at: Optional[datetime] = None
    duration: Optional[float] = None
    created_at: datetime
    updated_at: Optional[datetime] = None
    model_config = ConfigDict(from_attributes=True)
