"""Pagination over filtered queries.

The total and the page window are computed from the same base statement
and the same bound parameters, so the metadata always describes the set
the window was cut from.
"""

import logging
from collections.abc import Callable
from typing import Any, TypeVar

from taskhub.db.connection import Database
from taskhub.db.queries import Query
from taskhub.domain import PageRequest, PageResult

logger = logging.getLogger(__name__)

T = TypeVar("T")


def count_query(query: Query) -> Query:
    """Wrap a base query so it returns the number of matching rows."""
    return Query(f"SELECT COUNT(*) AS total FROM ({query.sql}) AS filtered", query.params)


def window_query(query: Query, page_request: PageRequest) -> Query:
    """Bound a base query to the rows of one page."""
    return Query(
        f"{query.sql} LIMIT :_limit OFFSET :_offset",
        {**query.params, "_limit": page_request.limit, "_offset": page_request.offset},
    )


async def count(db: Database, query: Query) -> int:
    """Count the rows a base query matches."""
    counted = count_query(query)
    row = await db.fetchone(counted.sql, counted.params)
    return int(row["total"]) if row else 0


async def paginate(
    db: Database,
    query: Query,
    page_request: PageRequest,
    mapper: Callable[[Any], T],
) -> PageResult[T]:
    """Run a base query for one page and hydrate the rows.

    Pages past the end yield no items; ``total`` still reports the size of
    the whole filtered set.
    """
    total = await count(db, query)

    items: list[T] = []
    if page_request.offset < total:
        windowed = window_query(query, page_request)
        rows = await db.fetchall(windowed.sql, windowed.params)
        items = [mapper(row) for row in rows]

    logger.debug(
        f"Page {page_request.page} (per_page={page_request.per_page}): "
        f"{len(items)} of {total} rows"
    )
    return PageResult(
        items=items,
        total=total,
        page=page_request.page,
        per_page=page_request.per_page,
    )
