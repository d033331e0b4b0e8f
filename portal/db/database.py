"""
Database engine and session management.

Builds the SQLAlchemy engine from environment configuration with an
in-memory SQLite fallback for test runs and exposes the FastAPI session
dependency.
"""
import os
import sys

from sqlalchemy import create_engine
from sqlalchemy.orm import sessionmaker
from sqlalchemy.pool import StaticPool


def _get_database_url() -> str:
    if os.getenv("DATABASE_URL"):
        return os.getenv("DATABASE_URL")

    parts = {
        "POSTGRES_USER": os.getenv("POSTGRES_USER"),
        "POSTGRES_PASSWORD": os.getenv("POSTGRES_PASSWORD"),
        "POSTGRES_HOST": os.getenv("POSTGRES_HOST"),
        "POSTGRES_PORT": os.getenv("POSTGRES_PORT"),
        "POSTGRES_DB": os.getenv("POSTGRES_DB"),
    }
    missing = [name for name, value in parts.items() if not value]
    if missing:
        raise ValueError(f"Missing required database environment variables: {', '.join(missing)}")

    return (
        f"postgresql://{parts['POSTGRES_USER']}:{parts['POSTGRES_PASSWORD']}"
        f"@{parts['POSTGRES_HOST']}:{parts['POSTGRES_PORT']}/{parts['POSTGRES_DB']}"
    )


def _is_pytest_runtime() -> bool:
    """Best-effort detection that we're executing under pytest.

    ``PYTEST_CURRENT_TEST`` is only set while a test runs, so module import
    during collection is detected through ``sys.modules`` instead.
    """
    if os.getenv("PYTEST_RUNNING") == "1":
        return True
    if "PYTEST_CURRENT_TEST" in os.environ:
        return True
    return "pytest" in sys.modules


_SQLITE_MEMORY_KWARGS = {
    "connect_args": {"check_same_thread": False},
    "poolclass": StaticPool,
}

# Test override strategy:
# 1. PORTAL_TEST_DB wins when set.
# 2. Under pytest, force in-memory SQLite shared through a StaticPool.
# 3. Otherwise DATABASE_URL / POSTGRES_* configure a real database.
explicit_test_db = os.getenv("PORTAL_TEST_DB")
if explicit_test_db:
    DATABASE_URL = explicit_test_db
    _engine_kwargs = {"connect_args": {"check_same_thread": False}} if DATABASE_URL.startswith("sqlite") else {}
elif _is_pytest_runtime():
    DATABASE_URL = "sqlite+pysqlite:///:memory:"
    _engine_kwargs = dict(_SQLITE_MEMORY_KWARGS)
else:
    DATABASE_URL = _get_database_url()
    _engine_kwargs = {"pool_pre_ping": True}

engine = create_engine(DATABASE_URL, **_engine_kwargs)

SessionLocal = sessionmaker(autocommit=False, autoflush=False, bind=engine)

_SCHEMA_INIT_DONE = False


def ensure_sqlite_schema() -> None:
    """Create all tables once when running against SQLite (schema is Alembic-managed elsewhere)."""
    global _SCHEMA_INIT_DONE
    if _SCHEMA_INIT_DONE or not str(engine.url).startswith("sqlite"):
        return
    from portal.db import models  # local import to avoid circular import at module load

    models.Base.metadata.create_all(bind=engine)
    _SCHEMA_INIT_DONE = True


def get_db():
    """Dependency to get a database session."""
    ensure_sqlite_schema()
    db = SessionLocal()
    try:
        yield db
    finally:
        db.close()
