"""Pytest configuration and fixtures."""

import tempfile
from collections.abc import AsyncGenerator
from pathlib import Path

import pytest

from taskhub.db.connection import Database


@pytest.fixture
async def db() -> AsyncGenerator[Database, None]:
    """Create a temporary database for testing."""
    with tempfile.TemporaryDirectory() as tmpdir:
        db_path = Path(tmpdir) / "test.db"
        database = Database(db_path)
        await database.connect()
        yield database
        await database.disconnect()
