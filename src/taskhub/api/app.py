"""FastAPI application factory."""

import logging
from collections.abc import AsyncGenerator
from contextlib import asynccontextmanager

from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware

from taskhub.api.errors import register_exception_handlers
from taskhub.api.routes import default, notes, tasks, users
from taskhub.cache import TTLCache
from taskhub.config import VERSION, Settings, get_settings
from taskhub.db.connection import close_database, get_database

logger = logging.getLogger(__name__)


@asynccontextmanager
async def lifespan(app: FastAPI) -> AsyncGenerator[None, None]:
    """Application lifespan handler."""
    # Startup
    logger.info("Starting taskhub API...")
    db = await get_database(app.state.settings.database_path)
    app.state.db = db
    logger.info("Database connected")

    yield

    # Shutdown
    logger.info("Shutting down taskhub API...")
    await close_database()
    logger.info("Database disconnected")


def create_app(settings: Settings | None = None) -> FastAPI:
    """Create and configure the FastAPI application."""
    settings = settings or get_settings()

    app = FastAPI(
        title="taskhub",
        description="Tasks, notes and users REST API",
        version=VERSION,
        lifespan=lifespan,
    )
    app.state.settings = settings
    app.state.cache = (
        TTLCache(ttl_seconds=settings.cache_ttl_seconds, max_size=settings.cache_max_size)
        if settings.cache_enabled
        else None
    )

    app.add_middleware(
        CORSMiddleware,
        allow_origins=["*"],
        allow_methods=["*"],
        allow_headers=["*"],
    )

    register_exception_handlers(app)

    app.include_router(default.router, tags=["default"])
    app.include_router(tasks.router, prefix="/api/v1/tasks", tags=["tasks"])
    app.include_router(notes.router, prefix="/api/v1/notes", tags=["notes"])
    app.include_router(users.router, prefix="/api/v1/users", tags=["users"])

    @app.get("/health")
    async def health_check() -> dict:
        """Health check endpoint."""
        return {"status": "healthy", "version": VERSION}

    return app
