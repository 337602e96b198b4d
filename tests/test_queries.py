"""Tests for the SQL query builders."""

import pytest

from taskhub.db import queries
from taskhub.domain import NoteFilters, TaskFilters, UserFilters


def test_contains_wraps_value():
    assert queries.contains("milk") == "%milk%"
    assert queries.contains("") == "%%"
    assert queries.contains(None) == "%%"


def test_note_page_query_binds_wrapped_values():
    query = queries.note_page_query(NoteFilters(name="buy", description="milk"))

    assert query.params == {"name": "%buy%", "description": "%milk%"}
    assert "name LIKE :name" in query.sql
    assert "AND COALESCE(description, '') LIKE :description" in query.sql
    assert "buy" not in query.sql
    assert query.sql.strip().endswith("ORDER BY id")


def test_note_search_query_uses_or():
    query = queries.note_search_query("milk")

    assert query.params == {"query": "%milk%"}
    assert "name LIKE :query OR description LIKE :query" in query.sql


def test_task_page_query_is_scoped_to_user():
    query = queries.task_page_query(4, TaskFilters(status=1))

    assert query.params["user_id"] == 4
    assert query.params["status"] == "%1%"
    assert query.params["name"] == "%%"
    assert "user_id = :user_id" in query.sql
    assert "status LIKE :status" in query.sql


@pytest.mark.parametrize("status", [0, 1])
def test_task_search_query_adds_status_clause(status):
    query = queries.task_search_query(9, "report", status)

    assert query.sql == queries.TASKS_SEARCH_BY_STATUS_SQL
    assert query.params == {"name": "%report%", "user_id": 9, "status": status}


@pytest.mark.parametrize("status", [None, 2, -1, "1", True])
def test_task_search_query_omits_status_clause(status):
    query = queries.task_search_query(9, "report", status)

    assert query.sql == queries.TASKS_SEARCH_SQL
    assert "status" not in query.sql
    assert "status" not in query.params


def test_user_queries():
    page = queries.user_page_query(UserFilters(email="example.com"))
    assert page.params == {"name": "%%", "email": "%example.com%"}

    search = queries.user_search_query("ann")
    assert search.params == {"name": "%ann%"}


def test_hostile_input_stays_in_params():
    text = "x'; DROP TABLE notes; --"
    query = queries.note_search_query(text)

    assert "DROP TABLE" not in query.sql
    assert query.params["query"] == f"%{text}%"
