from datetime import datetime
from typing import Optional
from pydantic import BaseModel, ConfigDict


class SystemFeatures(BaseModel):
    ar_scanning: bool = True
    book_search: bool = True
    corrections: bool = True
    analytics: bool = True


class SystemSettings(BaseModel):
    max_books_per_scan: int = 100
    # Seconds
    scan_timeout: int = 30
    correction_timeout: int = 300


class SystemConfigUpdate(BaseModel):
    app_version: Optional[str] = None
    min_app_version: Optional[str] = None
    maintenance_mode: Optional[bool] = None
    maintenance_message: Optional[str] = None
    features: Optional[dict] = None
    settings: Optional[dict] = None


class SystemConfig(BaseModel):
    app_version: str
    min_app_version: str
    maintenance_mode: bool
    maintenance_message: Optional[str] = None
    features: SystemFeatures
    settings: SystemSettings
    updated_at: Optional[datetime] = None
    updated_by: Optional[str] = None
    model_config = ConfigDict(from_attributes=True)
