"""SQL query builders for filtered listing and search.

Every statement uses named placeholders. LIKE wildcards are wrapped around
the bound *values*; caller input never reaches the SQL text. Where a clause
is optional the choice is made between fixed named variants, so only the
presence of a clause depends on input, never its content.

All queries order by ascending id so pages are deterministic.
"""

from dataclasses import dataclass, field
from typing import Any

from taskhub.domain import NoteFilters, TaskFilters, UserFilters, is_filterable_status


@dataclass(frozen=True)
class Query:
    """A SQL statement and the parameters bound to it."""

    sql: str
    params: dict[str, Any] = field(default_factory=dict)


def contains(value: str | None) -> str:
    """Wrap a value for a substring LIKE match. None matches everything."""
    return f"%{value or ''}%"


# Notes

NOTES_ALL_SQL = "SELECT * FROM notes ORDER BY id"

NOTES_PAGE_SQL = """
    SELECT * FROM notes
    WHERE name LIKE :name
    AND COALESCE(description, '') LIKE :description
    ORDER BY id
"""

NOTES_SEARCH_SQL = """
    SELECT * FROM notes
    WHERE name LIKE :query OR description LIKE :query
    ORDER BY id
"""


def note_page_query(filters: NoteFilters) -> Query:
    """Paged note listing: every filter must match."""
    return Query(
        NOTES_PAGE_SQL,
        {"name": contains(filters.name), "description": contains(filters.description)},
    )


def note_search_query(text: str) -> Query:
    """Free-text note search: name OR description may match."""
    return Query(NOTES_SEARCH_SQL, {"query": contains(text)})


# Tasks

TASKS_ALL_SQL = "SELECT * FROM tasks ORDER BY id"

TASKS_BY_USER_SQL = "SELECT * FROM tasks WHERE user_id = :user_id ORDER BY id"

TASKS_PAGE_SQL = """
    SELECT * FROM tasks
    WHERE user_id = :user_id
    AND name LIKE :name
    AND COALESCE(description, '') LIKE :description
    AND status LIKE :status
    ORDER BY id
"""

TASKS_SEARCH_SQL = """
    SELECT * FROM tasks
    WHERE name LIKE :name AND user_id = :user_id
    ORDER BY id
"""

TASKS_SEARCH_BY_STATUS_SQL = """
    SELECT * FROM tasks
    WHERE name LIKE :name AND user_id = :user_id AND status = :status
    ORDER BY id
"""


def tasks_by_user_query(user_id: int) -> Query:
    return Query(TASKS_BY_USER_SQL, {"user_id": user_id})


def task_page_query(user_id: int, filters: TaskFilters) -> Query:
    """Paged task listing for one user: every filter must match."""
    return Query(
        TASKS_PAGE_SQL,
        {
            "user_id": user_id,
            "name": contains(filters.name),
            "description": contains(filters.description),
            "status": contains(filters.status),
        },
    )


def task_search_query(user_id: int, name: str, status: object = None) -> Query:
    """Task search by name for one user.

    A status of exactly 0 or 1 adds an exact-match clause. Any other value
    leaves the clause out entirely rather than matching nothing.
    """
    params: dict[str, Any] = {"name": contains(name), "user_id": user_id}
    if is_filterable_status(status):
        params["status"] = int(status)  # type: ignore[call-overload]
        return Query(TASKS_SEARCH_BY_STATUS_SQL, params)
    return Query(TASKS_SEARCH_SQL, params)


# Users

USERS_ALL_SQL = "SELECT * FROM users ORDER BY id"

USERS_PAGE_SQL = """
    SELECT * FROM users
    WHERE name LIKE :name
    AND email LIKE :email
    ORDER BY id
"""

USERS_SEARCH_SQL = """
    SELECT * FROM users
    WHERE name LIKE :name
    ORDER BY id
"""


def user_page_query(filters: UserFilters) -> Query:
    return Query(
        USERS_PAGE_SQL,
        {"name": contains(filters.name), "email": contains(filters.email)},
    )


def user_search_query(name: str) -> Query:
    return Query(USERS_SEARCH_SQL, {"name": contains(name)})
