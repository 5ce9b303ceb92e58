"""
Pagination helpers for list endpoints.

Usage:
    params = build_pagination(page, limit, sort_by, order, allowed=USER_SORT_FIELDS)
    query = apply_pagination(db.query(User), User, params)
"""

import math
from dataclasses import dataclass
from typing import Generic, List, Optional, Sequence, TypeVar

from pydantic import BaseModel
from sqlalchemy.orm import Query

from .errors import ApiError

DEFAULT_PAGE_SIZE = 10
MAX_PAGE_SIZE = 100

T = TypeVar("T")


@dataclass(frozen=True)
class PaginationParams:
    page: int
    limit: int
    sort_by: str
    order: str

    @property
    def offset(self) -> int:
        return (self.page - 1) * self.limit


class PaginatedResult(BaseModel, Generic[T]):
    items: List[T]
    total: int
    page: int
    limit: int
    pages: int


def build_pagination(
    page: Optional[int],
    limit: Optional[int],
    sort_by: Optional[str],
    order: Optional[str],
    allowed: Sequence[str],
    default_sort: str = "id",
) -> PaginationParams:
    """
    Validate raw query values into PaginationParams.

    Raises:
        ApiError (400): page < 1, limit outside 1..MAX_PAGE_SIZE, a sort field
                        outside ``allowed`` or an order other than asc/desc.
    """
    page = page if page is not None else 1
    limit = limit if limit is not None else DEFAULT_PAGE_SIZE
    if page < 1:
        raise ApiError("page must be greater than 0", 400)
    if not 1 <= limit <= MAX_PAGE_SIZE:
        raise ApiError(f"limit must be between 1 and {MAX_PAGE_SIZE}", 400)

    sort_by = sort_by or default_sort
    if sort_by not in allowed:
        raise ApiError(f"Cannot sort by '{sort_by}'. Allowed: {', '.join(allowed)}", 400)

    order = (order or "asc").lower()
    if order not in ("asc", "desc"):
        raise ApiError("order must be 'asc' or 'desc'", 400)

    return PaginationParams(page=page, limit=limit, sort_by=sort_by, order=order)


def apply_pagination(query: Query, model, params: PaginationParams) -> Query:
    column = getattr(model, params.sort_by)
    ordering = column.desc() if params.order == "desc" else column.asc()
    # Tie-break on id so pages are stable
    return query.order_by(ordering, model.id.asc()).offset(params.offset).limit(params.limit)


def build_paginated_result(items: List[T], total: int, params: PaginationParams) -> dict:
    return {
        "items": items,
        "total": total,
        "page": params.page,
        "limit": params.limit,
        "pages": math.ceil(total / params.limit) if total else 0,
    }
