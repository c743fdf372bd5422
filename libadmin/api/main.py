"""
FastAPI app assembly: logging, middleware, static files and router wiring.
"""
import logging
import os
from pathlib import Path

from fastapi import Depends, FastAPI
from fastapi.middleware.cors import CORSMiddleware
from fastapi.staticfiles import StaticFiles
from sqlalchemy import text
from sqlalchemy.orm import Session

# Configure logging
LOG_LEVEL_NAME = os.getenv("LOG_LEVEL", "INFO").upper()
LOG_LEVEL = getattr(logging, LOG_LEVEL_NAME, logging.INFO)
logging.basicConfig(level=LOG_LEVEL)
logger = logging.getLogger("libadmin.api")
logger.setLevel(LOG_LEVEL)
logger.info("app_startup: log_level=%s", LOG_LEVEL_NAME)

from libadmin.db.database import get_db
from libadmin.api.auth import router as auth_router
from libadmin.api.libraries import router as libraries_router
from libadmin.api.floors import router as floors_router
from libadmin.api.shelves import router as shelves_router
from libadmin.api.books import router as books_router
from libadmin.api.book_locations import router as book_locations_router
from libadmin.api.scans import router as scans_router
from libadmin.api.corrections import router as corrections_router
from libadmin.api.analytics import router as analytics_router
from libadmin.api.admin_users import router as admin_users_router
from libadmin.api.system import router as system_router
from libadmin.api.storage import router as storage_router
from libadmin.api.audits import router as audits_router
from libadmin.services.storage_service import storage_root
from libadmin.utils.feature_flags import get_feature_flags
from libadmin.utils.runtime import cors_origins

SERVICE_NAME = "libadmin-service"

# Database schema is managed by Alembic migrations.

app = FastAPI(
    title="Library Admin Service",
    description="API for managing libraries, floors, shelves, books, admin users and scan analytics.",
    version="1.0.0",
)

# Avoid implicit trailing-slash redirects for predictable URLs
app.router.redirect_slashes = False

app.add_middleware(
    CORSMiddleware,
    allow_origins=cors_origins(),
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)

_storage_dir = Path(storage_root())
_storage_dir.mkdir(parents=True, exist_ok=True)
app.mount("/files", StaticFiles(directory=str(_storage_dir)), name="files")

app.include_router(auth_router)
app.include_router(libraries_router)
app.include_router(floors_router)
app.include_router(shelves_router)
app.include_router(books_router)
app.include_router(book_locations_router)
app.include_router(scans_router)
app.include_router(corrections_router)
app.include_router(analytics_router)
app.include_router(admin_users_router)
app.include_router(system_router)
app.include_router(storage_router)
app.include_router(audits_router)

logger.info("feature_flags: %s", dict(get_feature_flags()))


@app.get("/health")
def health_check(db: Session = Depends(get_db)):
    try:
        db.execute(text("SELECT 1"))
        database = "ok"
    except Exception as e:
        logger.warning("Health check database query failed: %s", e)
        database = "unavailable"
    return {"status": "ok", "service": SERVICE_NAME, "database": database}
