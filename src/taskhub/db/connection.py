"""Database connection and schema management."""

import logging
from pathlib import Path
from typing import Any

import aiosqlite

logger = logging.getLogger(__name__)

# Global database instance
_database: "Database | None" = None

SCHEMA = """
CREATE TABLE IF NOT EXISTS users (
    id INTEGER PRIMARY KEY AUTOINCREMENT,
    name TEXT NOT NULL,
    email TEXT NOT NULL UNIQUE,
    created_at TEXT,
    updated_at TEXT
);

CREATE TABLE IF NOT EXISTS tasks (
    id INTEGER PRIMARY KEY AUTOINCREMENT,
    name TEXT NOT NULL,
    description TEXT,
    status INTEGER NOT NULL DEFAULT 0,
    user_id INTEGER NOT NULL,
    created_at TEXT,
    updated_at TEXT
);

CREATE INDEX IF NOT EXISTS idx_tasks_user_id ON tasks (user_id);

CREATE TABLE IF NOT EXISTS notes (
    id INTEGER PRIMARY KEY AUTOINCREMENT,
    name TEXT NOT NULL,
    description TEXT,
    created_at TEXT,
    updated_at TEXT
);
"""

Params = tuple[Any, ...] | dict[str, Any] | None


class Database:
    """SQLite database wrapper with async support."""

    def __init__(self, db_path: str | Path):
        self.db_path = Path(db_path)
        self._connection: aiosqlite.Connection | None = None

    async def connect(self) -> None:
        """Open database connection and create the schema."""
        self.db_path.parent.mkdir(parents=True, exist_ok=True)
        self._connection = await aiosqlite.connect(self.db_path)
        self._connection.row_factory = aiosqlite.Row

        await self._connection.execute("PRAGMA journal_mode = WAL")
        await self._connection.execute("PRAGMA synchronous = NORMAL")
        await self._connection.execute("PRAGMA busy_timeout = 5000")

        await self._create_schema()
        logger.info(f"Connected to database: {self.db_path}")

    async def disconnect(self) -> None:
        """Close database connection."""
        if self._connection:
            await self._connection.close()
            self._connection = None
            logger.info("Database connection closed")

    @property
    def connection(self) -> aiosqlite.Connection:
        """Get the database connection."""
        if not self._connection:
            raise RuntimeError("Database not connected. Call connect() first.")
        return self._connection

    @property
    def is_connected(self) -> bool:
        return self._connection is not None

    async def execute(self, query: str, params: Params = None) -> aiosqlite.Cursor:
        """Execute a query and return cursor."""
        if params is None:
            return await self.connection.execute(query)
        return await self.connection.execute(query, params)

    async def fetchone(self, query: str, params: Params = None) -> aiosqlite.Row | None:
        """Execute query and fetch one row."""
        cursor = await self.execute(query, params)
        return await cursor.fetchone()

    async def fetchall(self, query: str, params: Params = None) -> list[aiosqlite.Row]:
        """Execute query and fetch all rows."""
        cursor = await self.execute(query, params)
        return list(await cursor.fetchall())

    async def commit(self) -> None:
        """Commit the current transaction."""
        await self.connection.commit()

    async def _create_schema(self) -> None:
        """Create tables and indexes that do not exist yet."""
        try:
            await self.connection.executescript(SCHEMA)
            await self.commit()
        except aiosqlite.Error as e:
            logger.error(f"Failed to create schema in {self.db_path}: {type(e).__name__}: {e}")
            raise


async def get_database(db_path: str | Path | None = None) -> Database:
    """Get or create the global database instance."""
    global _database

    if _database is None:
        if db_path is None:
            db_path = Path.home() / ".taskhub" / "taskhub.db"
        _database = Database(db_path)
        await _database.connect()

    return _database


async def close_database() -> None:
    """Close the global database instance."""
    global _database

    if _database:
        await _database.disconnect()
        _database = None
