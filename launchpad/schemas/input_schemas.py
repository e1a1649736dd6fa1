"""
Input validation schemas using Pydantic.

Shapes of request bodies and list query strings accepted by the LaunchPad
API. Bodies drop unknown fields and are strict about types; query models are
lax because every query value arrives as text.
"""
from typing import Annotated, Any, Literal, Mapping, Optional, Type

from pydantic import AfterValidator, BaseModel, ConfigDict, Field, StringConstraints, create_model

from launchpad.application.pagination import MAX_INT, MAX_LIMIT, ListQuery, SortOrder
from launchpad.application.validation import check_http_url, validate_or_raise
from launchpad.db.listings import Listing

StartupUrl = Annotated[str, StringConstraints(max_length=500), AfterValidator(check_http_url)]


class InputModel(BaseModel):
    model_config = ConfigDict(str_strip_whitespace=True, extra="ignore")


# Startup schemas
class StartupCreate(InputModel):
    name: str = Field(..., min_length=2, max_length=100, description="Name of the startup")
    tagline: str = Field(..., min_length=10, max_length=200, description="One-line pitch")
    description: str = Field(..., min_length=50, max_length=2000, description="Long description")
    url: StartupUrl = Field(..., title="URL", description="Website URL")
    category_id: int = Field(
        ..., strict=True, ge=1, le=MAX_INT, title="Category", description="ID of the category"
    )


class StartupUpdate(InputModel):
    name: Optional[str] = Field(None, min_length=2, max_length=100)
    tagline: Optional[str] = Field(None, min_length=10, max_length=200)
    description: Optional[str] = Field(None, min_length=50, max_length=2000)
    url: Optional[StartupUrl] = Field(None, title="URL")
    category_id: Optional[int] = Field(None, strict=True, ge=1, le=MAX_INT, title="Category")


# Comment schemas
class CommentCreate(InputModel):
    author: str = Field(..., min_length=1, max_length=100, description="Author display name")
    content: str = Field(..., min_length=1, max_length=2000, title="Comment", description="Comment text")


# Category schemas
class CategoryCreate(InputModel):
    name: str = Field(..., min_length=2, max_length=100, description="Name of the category")
    description: Optional[str] = Field(None, max_length=500, description="Category description")


def list_query_model(listing: Listing, default_limit: int = 10, max_limit: int = 100) -> Type[BaseModel]:
    """Query-string model generated from a listing's allow-list."""
    fields: dict = {
        "page": (int, Field(1, ge=1, le=MAX_INT, description="Page number, starting at 1")),
        "limit": (int, Field(default_limit, ge=1, le=max_limit, description="Rows per page")),
        "sort": (Literal[listing.sort_keys], Field(listing.default_sort, description="Sort key")),
        "order": (SortOrder, Field(listing.default_order, description="Sort direction")),
    }
    for spec in listing.filters:
        fields[spec.key] = (
            Optional[spec.value_type],
            Field(None, title=spec.label, ge=spec.min_value, le=spec.max_value),
        )
    fields["search"] = (Optional[str], Field(None, max_length=listing.max_search_length))

    return create_model(
        f"{listing.resource}ListQuery",
        __config__=ConfigDict(str_strip_whitespace=True, extra="ignore"),
        **fields,
    )


def parse_list_query(
    listing: Listing,
    params: Mapping[str, Any],
    default_limit: int = 10,
    max_limit: int = 100,
) -> ListQuery:
    """Validate raw query parameters into a ListQuery.

    Raises:
        ValidationFailedError: if any parameter is invalid, including a sort
            key outside the listing's allow-list or a number too large to store
    """
    max_limit = min(max_limit, MAX_LIMIT)
    model = list_query_model(listing, default_limit=min(default_limit, max_limit), max_limit=max_limit)
    value = validate_or_raise(model, params)
    filters = {spec.key: value[spec.key] for spec in listing.filters if spec.key in value}

    return ListQuery(
        page=value["page"],
        limit=value["limit"],
        sort=value["sort"],
        order=SortOrder(value["order"]),
        filters=filters,
        search=value.get("search"),
    )
