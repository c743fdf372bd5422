"""
App assembly entry point.

Re-exports the FastAPI `app` from `libadmin.api.main` for `uvicorn app:app`.
"""

from libadmin.api.main import app  # noqa: F401
