"""Note API routes."""

from typing import Annotated

from fastapi import APIRouter, Depends, Query, Response
from pydantic import BaseModel

from taskhub.api.deps import get_cache, get_note_repo
from taskhub.cache import TTLCache, read_through
from taskhub.db import NoteRepository
from taskhub.domain import Note, NoteFilters, PageRequest, PageResult, timestamp

router = APIRouter()

Repo = Annotated[NoteRepository, Depends(get_note_repo)]
Cache = Annotated[TTLCache | None, Depends(get_cache)]


class NoteCreate(BaseModel):
    """Request body for creating a note."""

    name: str
    description: str | None = None


class NoteUpdate(BaseModel):
    """Request body for updating a note."""

    name: str | None = None
    description: str | None = None


def _cache_key(note_id: int) -> str:
    return TTLCache.generate_key("note", note_id)


@router.get("")
async def list_notes(
    repo: Repo,
    page: int | None = Query(default=None, ge=1),
    per_page: int = Query(default=5, ge=1, le=100),
    name: str | None = None,
    description: str | None = None,
) -> list[Note] | PageResult[Note]:
    """List notes, paged when ``page`` is given."""
    if page is None:
        return await repo.list_all()
    filters = NoteFilters(name=name, description=description)
    return await repo.get_by_page(PageRequest(page=page, per_page=per_page), filters)


@router.get("/search/{query}")
async def search_notes(query: str, repo: Repo) -> list[Note]:
    """Search notes by name or description."""
    return await repo.search(query)


@router.get("/{note_id}")
async def get_note(note_id: int, repo: Repo, cache: Cache) -> Note:
    return await read_through(cache, _cache_key(note_id), lambda: repo.get(note_id))


@router.post("", status_code=201)
async def create_note(body: NoteCreate, repo: Repo, cache: Cache) -> Note:
    """Create a note."""
    created = await repo.create(
        Note(name=body.name, description=body.description, created_at=timestamp())
    )
    if cache is not None and created.id is not None:
        cache.set(_cache_key(created.id), created)
    return created


@router.put("/{note_id}")
async def update_note(note_id: int, body: NoteUpdate, repo: Repo, cache: Cache) -> Note:
    """Update a note."""
    current = await repo.get(note_id)
    changes = {
        field: value
        for field, value in body.model_dump(exclude_unset=True).items()
        if value is not None or field == "description"
    }
    updated = await repo.update(current.model_copy(update={**changes, "updated_at": timestamp()}))
    if cache is not None:
        cache.set(_cache_key(note_id), updated)
    return updated


@router.delete("/{note_id}", status_code=204)
async def delete_note(note_id: int, repo: Repo, cache: Cache) -> Response:
    """Delete a note."""
    await repo.get(note_id)
    await repo.delete(note_id)
    if cache is not None:
        cache.delete(_cache_key(note_id))
    return Response(status_code=204)
