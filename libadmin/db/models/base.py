"""
Shared SQLAlchemy base and helpers.
"""
import uuid
from datetime import datetime, UTC
from sqlalchemy import inspect
from sqlalchemy.orm import declarative_base

# Registers the SQLite compiler for JSONB columns.
from .. import sqlite_compiler_shims  # noqa: F401


def now_utc():
    """Return an aware UTC datetime for default/updated timestamps."""
    return datetime.now(UTC)


def new_id() -> str:
    """Return a string primary key for rows without a caller-chosen id."""
    return uuid.uuid4().hex


Base = declarative_base()


def as_utc(value):
    """Attach UTC to naive datetimes read back from SQLite."""
    if value is None or value.tzinfo is not None:
        return value
    return value.replace(tzinfo=UTC)


def epoch_ms() -> int:
    """Milliseconds since the epoch; used for dashboard-style ids and file names."""
    return int(datetime.now(UTC).timestamp() * 1000)


def apply_patch(row, changes) -> None:
    """Copy a partial update onto `row`.

    An explicit None for a NOT NULL column raises ValueError before anything
    is assigned, so the session is left clean.
    """
    columns = inspect(type(row)).columns
    rejected = sorted(
        key for key, value in changes.items()
        if value is None and key in columns and not columns[key].nullable
    )
    if rejected:
        raise ValueError(f"Fields cannot be null: {', '.join(rejected)}")
    for key, value in changes.items():
        setattr(row, key, value)
