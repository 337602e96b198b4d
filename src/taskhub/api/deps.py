"""FastAPI dependencies."""

from typing import Annotated

from fastapi import Depends, Header, Request

from taskhub.cache import TTLCache
from taskhub.db import Database, NoteRepository, TaskRepository, UserRepository
from taskhub.errors import UnauthorizedError


async def get_db(request: Request) -> Database:
    """Get the database instance from app state."""
    return request.app.state.db


async def get_cache(request: Request) -> TTLCache | None:
    """Get the cache from app state, or None when caching is disabled."""
    return request.app.state.cache


async def get_current_user_id(
    x_user_id: Annotated[str | None, Header()] = None,
) -> int:
    """Get the acting user from the ``X-User-Id`` header."""
    if x_user_id is None:
        raise UnauthorizedError("Missing X-User-Id header.")
    try:
        user_id = int(x_user_id)
    except ValueError:
        raise UnauthorizedError("Invalid X-User-Id header.") from None
    if user_id < 1:
        raise UnauthorizedError("Invalid X-User-Id header.")
    return user_id


async def get_task_repo(db: Annotated[Database, Depends(get_db)]) -> TaskRepository:
    return TaskRepository(db)


async def get_note_repo(db: Annotated[Database, Depends(get_db)]) -> NoteRepository:
    return NoteRepository(db)


async def get_user_repo(db: Annotated[Database, Depends(get_db)]) -> UserRepository:
    return UserRepository(db)
