"""User API routes."""

import logging
from typing import Annotated

from fastapi import APIRouter, Depends, Query, Response
from pydantic import BaseModel

from taskhub.api.deps import get_cache, get_task_repo, get_user_repo
from taskhub.cache import TTLCache, read_through
from taskhub.db import TaskRepository, UserRepository
from taskhub.domain import PageRequest, PageResult, User, UserFilters, timestamp
from taskhub.errors import ValidationError

logger = logging.getLogger(__name__)

router = APIRouter()

Repo = Annotated[UserRepository, Depends(get_user_repo)]
Cache = Annotated[TTLCache | None, Depends(get_cache)]


class UserCreate(BaseModel):
    """Request body for creating a user."""

    name: str
    email: str


class UserUpdate(BaseModel):
    """Request body for updating a user."""

    name: str | None = None
    email: str | None = None


def _cache_key(user_id: int) -> str:
    return TTLCache.generate_key("user", user_id)


async def _ensure_email_available(repo: UserRepository, email: str, user_id: int | None = None) -> None:
    existing = await repo.find_by_email(email)
    if existing is not None and existing.id != user_id:
        raise ValidationError("Email already exists.")


@router.get("")
async def list_users(
    repo: Repo,
    page: int | None = Query(default=None, ge=1),
    per_page: int = Query(default=5, ge=1, le=100),
    name: str | None = None,
    email: str | None = None,
) -> list[User] | PageResult[User]:
    """List users, paged when ``page`` is given."""
    if page is None:
        return await repo.list_all()
    filters = UserFilters(name=name, email=email)
    return await repo.get_by_page(PageRequest(page=page, per_page=per_page), filters)


@router.get("/search/{query}")
async def search_users(query: str, repo: Repo) -> list[User]:
    """Search users by name."""
    return await repo.search(query)


@router.get("/{user_id}")
async def get_user(user_id: int, repo: Repo, cache: Cache) -> User:
    return await read_through(cache, _cache_key(user_id), lambda: repo.get(user_id))


@router.post("", status_code=201)
async def create_user(body: UserCreate, repo: Repo) -> User:
    """Register a user. Emails are unique."""
    await _ensure_email_available(repo, body.email)
    return await repo.create(User(name=body.name, email=body.email, created_at=timestamp()))


@router.put("/{user_id}")
async def update_user(user_id: int, body: UserUpdate, repo: Repo, cache: Cache) -> User:
    """Update a user's name or email."""
    current = await repo.get(user_id)
    changes = body.model_dump(exclude_unset=True, exclude_none=True)
    if "email" in changes:
        await _ensure_email_available(repo, changes["email"], user_id)
    updated = await repo.update(current.model_copy(update={**changes, "updated_at": timestamp()}))
    if cache is not None:
        cache.set(_cache_key(user_id), updated)
    return updated


@router.delete("/{user_id}", status_code=204)
async def delete_user(
    user_id: int,
    repo: Repo,
    tasks: Annotated[TaskRepository, Depends(get_task_repo)],
    cache: Cache,
) -> Response:
    """Delete a user together with the user's tasks."""
    await repo.get(user_id)
    removed = await tasks.delete_by_user(user_id)
    await repo.delete(user_id)
    logger.info(f"Deleted user {user_id} and {removed} tasks")
    if cache is not None:
        cache.delete(_cache_key(user_id))
        # task keys are namespaced under the owning user
        cache.delete_prefix(f"{_cache_key(user_id)}:")
    return Response(status_code=204)
