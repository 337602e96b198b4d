"""Task API routes.

Every route acts on behalf of the user named by the ``X-User-Id`` header and
only ever sees that user's tasks.
"""

from typing import Annotated

from fastapi import APIRouter, Depends, Query, Response
from pydantic import BaseModel

from taskhub.api.deps import get_cache, get_current_user_id, get_task_repo
from taskhub.cache import TTLCache, read_through
from taskhub.db import TaskRepository
from taskhub.domain import PageRequest, PageResult, Task, TaskFilters, TaskStatus, timestamp

router = APIRouter()

UserId = Annotated[int, Depends(get_current_user_id)]
Repo = Annotated[TaskRepository, Depends(get_task_repo)]
Cache = Annotated[TTLCache | None, Depends(get_cache)]


class TaskCreate(BaseModel):
    """Request body for creating a task."""

    name: str
    description: str | None = None
    status: TaskStatus = TaskStatus.PENDING


class TaskUpdate(BaseModel):
    """Request body for updating a task."""

    name: str | None = None
    description: str | None = None
    status: TaskStatus | None = None


def _cache_key(task_id: int, user_id: int) -> str:
    return TTLCache.generate_key("user", user_id, "task", task_id)


def _parse_status(status: str | None) -> int | None:
    """Read a search status; anything that is not an integer means no filter."""
    if status is None:
        return None
    try:
        return int(status)
    except ValueError:
        return None


@router.get("")
async def list_tasks(
    user_id: UserId,
    repo: Repo,
    page: int | None = Query(default=None, ge=1),
    per_page: int = Query(default=5, ge=1, le=100),
    name: str | None = None,
    description: str | None = None,
    status: str | None = None,
) -> list[Task] | PageResult[Task]:
    """List the user's tasks, paged when ``page`` is given."""
    if page is None:
        return await repo.list_by_user(user_id)
    filters = TaskFilters(name=name, description=description, status=status)
    return await repo.get_by_page(user_id, PageRequest(page=page, per_page=per_page), filters)


@router.get("/search/{query}")
async def search_tasks(
    query: str,
    user_id: UserId,
    repo: Repo,
    status: str | None = None,
) -> list[Task]:
    """Search the user's tasks by name, optionally by status 0 or 1.

    A status that is not 0 or 1 does not filter.
    """
    return await repo.search(query, user_id, _parse_status(status))


@router.get("/{task_id}")
async def get_task(task_id: int, user_id: UserId, repo: Repo, cache: Cache) -> Task:
    """Get one of the user's tasks."""
    return await read_through(cache, _cache_key(task_id, user_id), lambda: repo.get(task_id, user_id))


@router.post("", status_code=201)
async def create_task(body: TaskCreate, user_id: UserId, repo: Repo, cache: Cache) -> Task:
    """Create a task owned by the acting user."""
    task = Task(
        name=body.name,
        description=body.description,
        status=body.status,
        user_id=user_id,
        created_at=timestamp(),
    )
    created = await repo.create(task)
    if cache is not None and created.id is not None:
        cache.set(_cache_key(created.id, user_id), created)
    return created


@router.put("/{task_id}")
async def update_task(
    task_id: int, body: TaskUpdate, user_id: UserId, repo: Repo, cache: Cache
) -> Task:
    """Update one of the user's tasks."""
    current = await repo.get(task_id, user_id)
    changes = {
        field: value
        for field, value in body.model_dump(exclude_unset=True).items()
        if value is not None or field == "description"
    }
    updated = await repo.update(current.model_copy(update={**changes, "updated_at": timestamp()}))
    if cache is not None:
        cache.set(_cache_key(task_id, user_id), updated)
    return updated


@router.delete("/{task_id}", status_code=204)
async def delete_task(task_id: int, user_id: UserId, repo: Repo, cache: Cache) -> Response:
    """Delete one of the user's tasks."""
    await repo.get(task_id, user_id)
    await repo.delete(task_id, user_id)
    if cache is not None:
        cache.delete(_cache_key(task_id, user_id))
    return Response(status_code=204)
