from sqlalchemy import Column, String, DateTime, ForeignKey, Integer, Float, Index
from sqlalchemy.dialects.postgresql import JSONB
from .base import Base, now_utc, new_id


class Scan(Base):
    __tablename__ = 'scans'
    id = Column(String(64), primary_key=True, default=new_id)
    user_id = Column(String(64), nullable=True)
    library_id = Column(String(64), ForeignKey('libraries.id', ondelete='CASCADE'), nullable=False)
    floor_id = Column(String(64), nullable=False)
    shelf_id = Column(String(64), nullable=False)
    # [{isbn, title, detected_position, expected_position, is_correct}]
    scanned_books = Column(JSONB, nullable=False, default=list)
    total_scanned = Column(Integer, nullable=False, default=0)
    correct_count = Column(Integer, nullable=False, default=0)
    error_count = Column(Integer, nullable=False, default=0)
    accuracy = Column(Float, nullable=False, default=0.0)
    # Seconds
    scan_duration = Column(Float, nullable=True)
    device_info = Column(JSONB, nullable=True)
    created_at = Column(DateTime(timezone=True), default=now_utc, nullable=False)

    __table_args__ = (
        Index('idx_scans_library_created', 'library_id', 'created_at'),
    )


class Correction(Base):
    __tablename__ = 'corrections'
    id = Column(String(64), primary_key=True, default=new_id)
    library_id = Column(String(64), ForeignKey('libraries.id', ondelete='CASCADE'), nullable=False)
    shelf_id = Column(String(64), nullable=False)
    user_id = Column(String(64), nullable=True)
    # 'in_progress'|'completed'|'cancelled'
    status = Column(String(20), nullable=False, default='in_progress')
    total_moves = Column(Integer, nullable=False, default=0)
    completed_moves = Column(Integer, nullable=False, default=0)
    progress_percentage = Column(Float, nullable=False, default=0.0)
    # [{book_isbn, book_title, from_position, to_position, direction, priority, is_completed, completed_at}]
    movements = Column(JSONB, nullable=False, default=list)
    started_at = Column(DateTime(timezone=True), default=now_utc, nullable=False)
    completed_at = Column(DateTime(timezone=True), nullable=True)
    # Seconds
    duration = Column(Float, nullable=True)
    created_at = Column(DateTime(timezone=True), default=now_utc, nullable=False)
    updated_at = Column(DateTime(timezone=True), default=now_utc, onupdate=now_utc)

    __table_args__ = (
        Index('idx_corrections_library_created', 'library_id', 'created_at'),
    )


class DailyAnalytics(Base):
    __tablename__ = 'analytics'
    id = Column(String(64), primary_key=True, default=new_id)
    # "YYYY-MM-DD"
    date = Column(String(10), nullable=False)
    # NULL means system-wide
    library_id = Column(String(64), nullable=True)
    metrics = Column(JSONB, nullable=False, default=dict)
    top_misplaced_shelves = Column(JSONB, nullable=False, default=list)
    top_scanned_books = Column(JSONB, nullable=False, default=list)
    created_at = Column(DateTime(timezone=True), default=now_utc, nullable=False)

    __table_args__ = (
        Index('uq_analytics_date_library', 'date', 'library_id', unique=True),
    )
