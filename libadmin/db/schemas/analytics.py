from datetime import datetime
from typing import Optional, List
from pydantic import BaseModel, ConfigDict


class AnalyticsMetrics(BaseModel):
    total_scans: int = 0
    total_corrections: int = 0
    total_books_scanned: int = 0
    average_accuracy: float = 0.0
    total_misplaced_books: int = 0
    corrections_completed: int = 0
    active_users: int = 0


class TopMisplacedShelf(BaseModel):
    shelf_id: str
    shelf_name: str = ''
    error_count: int = 0


class TopScannedBook(BaseModel):
    isbn: str
    title: str = ''
    scan_count: int = 0


class DailyAnalytics(BaseModel):
    id: str
    date: str
    library_id: Optional[str] = None
    metrics: AnalyticsMetrics
    top_misplaced_shelves: List[TopMisplacedShelf] = []
    top_scanned_books: List[TopScannedBook] = []
    created_at: Optional[datetime] = None
    model_config = ConfigDict(from_attributes=True)


class TrendPoint(BaseModel):
    date: str
    scans: int = 0
    corrections: int = 0
    accuracy: float = 0.0


class AnalyticsSummary(BaseModel):
    start_date: str
    end_date: str
    total_scans: int = 0
    total_corrections: int = 0
    total_misplaced_books: int = 0
    total_books_scanned: int = 0
    average_accuracy: float = 0.0
    trend: List[TrendPoint] = []
    top_misplaced_shelves: List[TopMisplacedShelf] = []
    top_scanned_books: List[TopScannedBook] = []


class DashboardOverview(BaseModel):
    total_libraries: int = 0
    total_books: int = 0
    recent_scans: int = 0
    average_accuracy: float = 0.0


class RollupRequest(BaseModel):
    date: str
    library_id: Optional[str] = None
