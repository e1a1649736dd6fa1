"""Query-string dependencies for list endpoints."""
from __future__ import annotations

from typing import Callable

from fastapi import Depends, Request

from launchpad.application.pagination import ListQuery
from launchpad.config import Settings, get_settings
from launchpad.db.listings import Listing
from launchpad.schemas.input_schemas import parse_list_query


def list_params(listing: Listing) -> Callable[..., ListQuery]:
    """Build a dependency that validates the query string against ``listing``.

    Usage:
        @router.get("/startups")
        def list_startups(query: ListQuery = Depends(list_params(STARTUP_LISTING))):
            ...

    Invalid parameters raise ValidationFailedError, which the installed
    error handlers render as a 400.
    """

    def dependency(request: Request, settings: Settings = Depends(get_settings)) -> ListQuery:
        return parse_list_query(
            listing,
            dict(request.query_params),
            default_limit=settings.DEFAULT_PAGE_SIZE,
            max_limit=settings.MAX_PAGE_SIZE,
        )

    return dependency
