"""Allow-lists describing how each resource may be listed.

A ``Listing`` is the only place column identifiers for sorting, filtering and
searching come from. Request values select entries by key; they never name a
column directly.
"""
from __future__ import annotations

from dataclasses import dataclass, field
from enum import Enum
from typing import Any, Mapping, Optional, Tuple

from launchpad.application.pagination import MAX_INT, SortOrder
from launchpad.db.models import Comment, Startup
from launchpad.domain.errors import InternalError


class FilterOp(str, Enum):
    EQ = "eq"
    GTE = "gte"
    LTE = "lte"


@dataclass(frozen=True)
class FilterSpec:
    """A filter key exposed to callers and the column it constrains."""
    key: str
    column: str
    op: FilterOp = FilterOp.EQ
    value_type: type = int
    label: Optional[str] = None
    min_value: Optional[int] = None
    max_value: Optional[int] = MAX_INT


@dataclass(frozen=True)
class Listing:
    """Sortable, filterable and searchable fields of one resource."""
    resource: str
    model: Any
    sortable: Mapping[str, str]
    default_sort: str
    default_order: SortOrder = SortOrder.DESC
    filters: Tuple[FilterSpec, ...] = ()
    searchable: Tuple[str, ...] = ()
    full_text: bool = False
    text_config: str = "english"
    max_search_length: int = field(default=200)

    def __post_init__(self) -> None:
        if self.default_sort not in self.sortable:
            raise ValueError(f"Default sort '{self.default_sort}' is not sortable")
        columns = list(self.sortable.values())
        columns += [spec.column for spec in self.filters]
        columns += list(self.searchable)
        for name in columns:
            if not hasattr(self.model, name):
                raise ValueError(f"{self.model.__name__} has no column '{name}'")

    @property
    def sort_keys(self) -> Tuple[str, ...]:
        return tuple(self.sortable)

    def sort_column(self, key: str):
        try:
            return getattr(self.model, self.sortable[key])
        except KeyError:
            raise InternalError(f"Sort key '{key}' is not allow-listed for {self.resource}") from None

    def filter_spec(self, key: str) -> FilterSpec:
        for spec in self.filters:
            if spec.key == key:
                return spec
        raise InternalError(f"Filter '{key}' is not allow-listed for {self.resource}")

    def search_columns(self):
        return [getattr(self.model, name) for name in self.searchable]


STARTUP_LISTING = Listing(
    resource="Startup",
    model=Startup,
    sortable={"created_at": "created_at", "name": "name", "upvotes": "upvotes"},
    default_sort="created_at",
    default_order=SortOrder.DESC,
    filters=(
        FilterSpec("category", "category_id", FilterOp.EQ, label="Category", min_value=1),
        FilterSpec("min_upvotes", "upvotes", FilterOp.GTE, label="Minimum upvotes", min_value=0),
    ),
    searchable=("name", "tagline", "description"),
)

COMMENT_LISTING = Listing(
    resource="Comment",
    model=Comment,
    sortable={"created_at": "created_at"},
    default_sort="created_at",
    default_order=SortOrder.ASC,
    filters=(
        FilterSpec("startup", "startup_id", FilterOp.EQ, label="Startup", min_value=1),
    ),
    searchable=("content",),
)
