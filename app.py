"""
App assembly entry point.

Re-exports the FastAPI `app` from `portal.api.main` so the service can be
started with `uvicorn app:app`.
"""

from portal.api.main import app  # noqa: F401
