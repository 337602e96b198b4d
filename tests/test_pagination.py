"""Tests for the pagination engine."""

import pytest

from taskhub.db.pagination import count, count_query, paginate, window_query
from taskhub.db.queries import Query, note_page_query
from taskhub.domain import Note, NoteFilters, PageRequest


async def _seed_notes(db, names):
    for name in names:
        await db.execute(
            "INSERT INTO notes (name, description) VALUES (:name, :description)",
            {"name": name, "description": None},
        )
    await db.commit()


def _to_note(row):
    return Note.model_validate(dict(row))


def test_count_query_keeps_params():
    base = Query("SELECT * FROM notes WHERE name LIKE :name ORDER BY id", {"name": "%a%"})
    counted = count_query(base)

    assert counted.sql.startswith("SELECT COUNT(*) AS total FROM (")
    assert base.sql in counted.sql
    assert counted.params == base.params


def test_window_query_adds_bounds():
    base = Query("SELECT * FROM notes ORDER BY id", {"name": "%a%"})
    windowed = window_query(base, PageRequest(page=3, per_page=4))

    assert windowed.sql.endswith("LIMIT :_limit OFFSET :_offset")
    assert windowed.params == {"name": "%a%", "_limit": 4, "_offset": 8}
    assert base.params == {"name": "%a%"}


async def test_count(db):
    await _seed_notes(db, ["a", "b", "c"])
    assert await count(db, Query("SELECT * FROM notes ORDER BY id")) == 3


async def test_paginate_windows(db):
    await _seed_notes(db, ["n1", "n2", "n3", "n4", "n5"])
    query = note_page_query(NoteFilters())

    first = await paginate(db, query, PageRequest(page=1, per_page=2), _to_note)
    last = await paginate(db, query, PageRequest(page=3, per_page=2), _to_note)

    assert [n.name for n in first.items] == ["n1", "n2"]
    assert [n.name for n in last.items] == ["n5"]
    assert first.total == last.total == 5
    assert first.total_pages == 3


async def test_paginate_past_end_is_empty(db):
    await _seed_notes(db, ["n1", "n2"])
    result = await paginate(
        db, note_page_query(NoteFilters()), PageRequest(page=5, per_page=2), _to_note
    )

    assert result.items == []
    assert result.total == 2
    assert result.page == 5


async def test_paginate_total_follows_filter(db):
    await _seed_notes(db, ["apple", "apricot", "banana"])
    result = await paginate(
        db, note_page_query(NoteFilters(name="ap")), PageRequest(page=1, per_page=1), _to_note
    )

    assert result.total == 2
    assert [n.name for n in result.items] == ["apple"]


@pytest.mark.parametrize("per_page", [1, 2, 3, 7])
async def test_paginate_never_exceeds_per_page(db, per_page):
    await _seed_notes(db, [f"n{i}" for i in range(6)])
    query = note_page_query(NoteFilters())

    for page in range(1, 8):
        result = await paginate(db, query, PageRequest(page=page, per_page=per_page), _to_note)
        assert len(result.items) <= per_page
        assert result.total == 6
