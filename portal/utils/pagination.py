"""Offset pagination over SQLAlchemy queries."""
from __future__ import annotations

import math
from typing import Any, Callable, Generic, List, TypeVar

from pydantic import BaseModel

from portal.errors import ControllerArgumentException

T = TypeVar("T")


class PaginationMeta(BaseModel):
    totalElements: int
    totalPages: int
    page: int
    contentSize: int


class Pagination(BaseModel, Generic[T]):
    meta: PaginationMeta
    content: List[T]


def validate_page(page: int, size: int, max_size: int) -> None:
    if page < 0:
        raise ControllerArgumentException("Parameter page must be >= 0", "page")
    if size <= 0 or size > max_size:
        raise ControllerArgumentException(f"Parameter size must be between 1 and {max_size}", "size")


def paginate(query, page: int, size: int, max_size: int, convert: Callable[[Any], T]) -> Pagination[T]:
    """Run ``query`` for one page and wrap the converted rows."""
    validate_page(page, size, max_size)
    total = query.count()
    rows = query.offset(page * size).limit(size).all()
    content = [convert(row) for row in rows]
    return Pagination(
        meta=PaginationMeta(
            totalElements=total,
            totalPages=math.ceil(total / size) if total else 0,
            page=page,
            contentSize=len(content),
        ),
        content=content,
    )
