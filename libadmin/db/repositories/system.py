"""
System configuration repository functions (singleton row).
"""
from __future__ import annotations

from typing import Optional, Dict, Any

from sqlalchemy.orm import Session

from libadmin.db import models

DEFAULT_FEATURES = {
    "ar_scanning": True,
    "book_search": True,
    "corrections": True,
    "analytics": True,
}

DEFAULT_SETTINGS = {
    "max_books_per_scan": 100,
    "scan_timeout": 30,
    "correction_timeout": 300,
}


def get_system_config(db: Session) -> Optional[models.SystemConfig]:
    return db.query(models.SystemConfig).filter(models.SystemConfig.id == models.SYSTEM_CONFIG_ID).first()


def update_system_config(db: Session, updates: Dict[str, Any], admin_id: Optional[str]) -> models.SystemConfig:
    """Merge `updates` into the singleton, creating it with defaults when absent."""
    config = get_system_config(db)
    if config is None:
        config = models.SystemConfig(
            id=models.SYSTEM_CONFIG_ID,
            app_version="1.0.0",
            min_app_version="1.0.0",
            maintenance_mode=False,
            features=dict(DEFAULT_FEATURES),
            settings=dict(DEFAULT_SETTINGS),
        )
        db.add(config)
    for key, value in updates.items():
        if key in ("features", "settings"):
            merged = dict(getattr(config, key) or {})
            merged.update(value or {})
            setattr(config, key, merged)
        else:
            setattr(config, key, value)
    config.updated_at = models.now_utc()
    config.updated_by = admin_id
    try:
        db.commit()
    except Exception as e:
        db.rollback()
        raise RuntimeError(f"Failed to update system config: {str(e)}")
    db.refresh(config)
    return config
