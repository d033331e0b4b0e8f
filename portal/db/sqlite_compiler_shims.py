"""SQLite compilation shim for PostgreSQL JSONB.

Lets ``Base.metadata.create_all()`` succeed when tests substitute an
in-memory SQLite database. JSONB operators and indexing are not emulated.

Imported for side-effects by ``portal.db.models.base``.
"""
from __future__ import annotations

from sqlalchemy.dialects.postgresql import JSONB
from sqlalchemy.ext.compiler import compiles


@compiles(JSONB, "sqlite")
def _compile_jsonb_sqlite(element, compiler, **kw):  # pragma: no cover - trivial
    return "JSON"
