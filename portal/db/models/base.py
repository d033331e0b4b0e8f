"""
Shared SQLAlchemy base and helpers.
"""
from datetime import datetime, UTC
from enum import Enum as PyEnum
from typing import Type

from sqlalchemy import Column, Enum
from sqlalchemy.orm import declarative_base

# SQLite compilation shims for PostgreSQL-only types used in test runs.
from .. import sqlite_compiler_shims  # noqa: F401


def now_utc():
    """Return an aware UTC datetime for default/updated timestamps."""
    return datetime.now(UTC)


def enum_column(enum_cls: Type[PyEnum], **kwargs) -> Column:
    """String-backed enum column; values load back as ``enum_cls`` members."""
    return Column(Enum(enum_cls, native_enum=False, length=64, validate_strings=True), **kwargs)


Base = declarative_base()
