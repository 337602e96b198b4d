"""Help and status routes."""

import logging
import time
from typing import Annotated

from fastapi import APIRouter, Depends, Request

from taskhub.api.deps import get_cache, get_db
from taskhub.cache import TTLCache
from taskhub.config import VERSION
from taskhub.db import Database, NoteRepository, TaskRepository, UserRepository

router = APIRouter()


@router.get("/")
async def get_help(request: Request) -> dict:
    """List the available endpoints."""
    url = request.app.state.settings.app_domain
    return {
        "endpoints": {
            "tasks": f"{url}/api/v1/tasks",
            "users": f"{url}/api/v1/users",
            "notes": f"{url}/api/v1/notes",
            "docs": f"{url}/docs",
            "status": f"{url}/status",
            "this help": url,
        },
        "version": VERSION,
        "timestamp": int(time.time()),
    }


@router.get("/status")
async def get_status(
    db: Annotated[Database, Depends(get_db)],
    cache: Annotated[TTLCache | None, Depends(get_cache)],
) -> dict:
    """Report record counts and the state of the database and cache."""
    stats = {
        "users": await UserRepository(db).count(),
        "tasks": await TaskRepository(db).count(),
        "notes": await NoteRepository(db).count(),
    }
    cache_state = "Disabled"
    if cache is not None:
        cache_state = "OK" if cache.ping() else "Unavailable"
    return {
        "stats": stats,
        "database": "OK",
        "cache": cache_state,
        "logger": "Enabled" if logging.getLogger("taskhub").isEnabledFor(logging.INFO) else "Disabled",
        "version": VERSION,
        "timestamp": int(time.time()),
    }
