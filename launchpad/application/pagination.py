"""List-request parameters and the paginated response envelope."""
from __future__ import annotations

import math
from enum import Enum
from typing import Any, Dict, Generic, List, Optional, Sequence, TypeVar

from pydantic import BaseModel, ConfigDict, Field

T = TypeVar("T")

MAX_LIMIT = 100

# Largest value an INTEGER column holds on every supported database
MAX_INT = 2**31 - 1


class SortOrder(str, Enum):
    ASC = "asc"
    DESC = "desc"


class ListQuery(BaseModel):
    """Validated parameters of one list request."""

    model_config = ConfigDict(frozen=True)

    page: int = Field(1, ge=1, le=MAX_INT, description="Page number, starting at 1")
    limit: int = Field(10, ge=1, le=MAX_LIMIT, description="Rows per page")
    sort: str = Field(..., description="Allow-listed sort key")
    order: SortOrder = Field(SortOrder.DESC, description="Sort direction")
    filters: Dict[str, Any] = Field(default_factory=dict, description="Allow-listed filter values")
    search: Optional[str] = Field(None, description="Free-text search")

    @property
    def offset(self) -> int:
        return (self.page - 1) * self.limit


class PaginationMeta(BaseModel):
    model_config = ConfigDict(populate_by_name=True)

    page: int = Field(..., ge=1)
    limit: int = Field(..., ge=1)
    total: int = Field(..., ge=0, description="Rows matching the filters before pagination")
    total_pages: int = Field(..., ge=0, alias="totalPages")


class Page(BaseModel, Generic[T]):
    data: List[T] = Field(default_factory=list)
    pagination: PaginationMeta

    def to_dict(self) -> Dict[str, Any]:
        return self.model_dump(by_alias=True, mode="json")


def total_pages(total: int, limit: int) -> int:
    """Number of pages needed for ``total`` rows; 0 when there are none."""
    if limit < 1:
        raise ValueError("limit must be at least 1")
    if total < 0:
        raise ValueError("total cannot be negative")
    if total == 0:
        return 0
    return math.ceil(total / limit)


def paginate(rows: Sequence[T], total: int, page: int, limit: int) -> Page[T]:
    """Wrap one page of rows with its pagination metadata.

    A page past the last one is not an error: it has no rows but still
    reports the real total.
    """
    if page < 1:
        raise ValueError("page must be at least 1")
    if len(rows) > limit:
        raise ValueError(f"page holds {len(rows)} rows but limit is {limit}")
    if total < len(rows):
        raise ValueError(f"total {total} is smaller than the {len(rows)} rows returned")

    return Page(
        data=list(rows),
        pagination=PaginationMeta(
            page=page,
            limit=limit,
            total=total,
            total_pages=total_pages(total, limit),
        ),
    )
