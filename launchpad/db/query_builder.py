"""Builds the count and page queries of a list request.

Identifiers (sort and filter columns) come from the ``Listing`` allow-list;
values (filter values, search text, limit, offset) are always bound
parameters. The count query and the page query share the same predicate so
``total`` and ``data`` describe the same rows.
"""
from __future__ import annotations

from collections.abc import Callable
from dataclasses import dataclass
from typing import Any, Dict, List

from sqlalchemy import Select, func, or_, select
from sqlalchemy.orm import Session

from launchpad.application.pagination import ListQuery, Page, SortOrder, paginate
from launchpad.db.listings import FilterOp, Listing

_OPERATOR_HANDLERS: Dict[FilterOp, Callable[[Any, Any], Any]] = {
    FilterOp.EQ: lambda column, value: column == value,
    FilterOp.GTE: lambda column, value: column >= value,
    FilterOp.LTE: lambda column, value: column <= value,
}


@dataclass(frozen=True)
class ListQueryPlan:
    count: Select
    data: Select


def build_list_query(listing: Listing, list_query: ListQuery) -> ListQueryPlan:
    """Translate validated list parameters into a count query and a page query.

    Args:
        listing: Allow-list for the resource being listed
        list_query: Parameters that already passed validation

    Returns:
        ListQueryPlan with ``count`` (SELECT count(*)) and ``data`` statements
    """
    conditions = _filter_conditions(listing, list_query.filters)
    ordering = []

    if list_query.search:
        if listing.full_text:
            document = func.to_tsvector(
                listing.text_config, func.concat_ws(" ", *listing.search_columns())
            )
            tsquery = func.plainto_tsquery(listing.text_config, list_query.search)
            conditions.append(document.op("@@")(tsquery))
            # Relevance first, the requested sort breaks ties
            ordering.append(func.ts_rank(document, tsquery).desc())
        else:
            conditions.append(
                or_(*[
                    column.icontains(list_query.search, autoescape=True)
                    for column in listing.search_columns()
                ])
            )

    sort_column = listing.sort_column(list_query.sort)
    if list_query.order == SortOrder.ASC:
        ordering.append(sort_column.asc())
    else:
        ordering.append(sort_column.desc())

    # Stable pages when sort values repeat
    for pk_column in listing.model.__table__.primary_key.columns:
        if pk_column.name != sort_column.key:
            ordering.append(pk_column.asc())

    count = select(func.count()).select_from(listing.model)
    data = select(listing.model)
    if conditions:
        count = count.where(*conditions)
        data = data.where(*conditions)

    data = data.order_by(*ordering).limit(list_query.limit).offset(list_query.offset)
    return ListQueryPlan(count=count, data=data)


def _filter_conditions(listing: Listing, filters: Dict[str, Any]) -> List[Any]:
    conditions = []
    for key, value in filters.items():
        if value is None:
            continue
        spec = listing.filter_spec(key)
        column = getattr(listing.model, spec.column)
        conditions.append(_OPERATOR_HANDLERS[spec.op](column, value))
    return conditions


def run_list_query(session: Session, listing: Listing, list_query: ListQuery) -> Page:
    """Execute both queries of a plan and wrap the rows in a Page."""
    plan = build_list_query(listing, list_query)
    total = session.execute(plan.count).scalar_one()
    rows = session.execute(plan.data).scalars().all()
    return paginate(rows, total, list_query.page, list_query.limit)
