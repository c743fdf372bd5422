from sqlalchemy import Column, String, DateTime, Boolean, Text
from sqlalchemy.dialects.postgresql import JSONB
from .base import Base, now_utc

SYSTEM_CONFIG_ID = 'config'


class SystemConfig(Base):
    """Singleton row keyed by SYSTEM_CONFIG_ID."""
    __tablename__ = 'system_config'
    id = Column(String(32), primary_key=True, default=SYSTEM_CONFIG_ID)
    app_version = Column(String(32), nullable=False, default='1.0.0')
    min_app_version = Column(String(32), nullable=False, default='1.0.0')
    maintenance_mode = Column(Boolean, nullable=False, default=False)
    maintenance_message = Column(Text, nullable=True)
    # {ar_scanning, book_search, corrections, analytics}
    features = Column(JSONB, nullable=False, default=dict)
    # {max_books_per_scan, scan_timeout, correction_timeout}
    settings = Column(JSONB, nullable=False, default=dict)
    updated_at = Column(DateTime(timezone=True), default=now_utc, onupdate=now_utc)
    updated_by = Column(String(64), nullable=True)
