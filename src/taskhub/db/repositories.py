"""Repository classes for database access.

Listing never fails on an empty result; searching does. Single-entity reads
raise the resource's not-found error. Writes re-read the stored row so the
caller always gets the canonical persisted state.

Tasks belong to a user: every task read, update and delete binds the owning
user id, so another user's rows can never be reached through this layer.
"""

from __future__ import annotations

import logging
from typing import Any

from taskhub.db import queries
from taskhub.db.connection import Database
from taskhub.db.pagination import count, paginate
from taskhub.domain import (
    Note,
    NoteFilters,
    PageRequest,
    PageResult,
    Task,
    TaskFilters,
    User,
    UserFilters,
)
from taskhub.errors import (
    EmptySearchResultError,
    NoteNotFoundError,
    TaskNotFoundError,
    UserNotFoundError,
)

logger = logging.getLogger(__name__)


class NoteRepository:
    """Repository for Note entities."""

    def __init__(self, db: Database):
        self.db = db

    async def get(self, note_id: int) -> Note:
        """Get a note by ID."""
        row = await self.db.fetchone("SELECT * FROM notes WHERE id = :id", {"id": note_id})
        if not row:
            raise NoteNotFoundError()
        return self._row_to_note(row)

    async def list_all(self) -> list[Note]:
        """List every note."""
        rows = await self.db.fetchall(queries.NOTES_ALL_SQL)
        return [self._row_to_note(row) for row in rows]

    async def get_by_page(
        self, page_request: PageRequest, filters: NoteFilters | None = None
    ) -> PageResult[Note]:
        """List one page of notes matching every filter."""
        query = queries.note_page_query(filters or NoteFilters())
        return await paginate(self.db, query, page_request, self._row_to_note)

    async def search(self, text: str) -> list[Note]:
        """Find notes whose name or description contains ``text``."""
        query = queries.note_search_query(text)
        rows = await self.db.fetchall(query.sql, query.params)
        if not rows:
            raise EmptySearchResultError("No notes were found with that name or description.")
        return [self._row_to_note(row) for row in rows]

    async def count(self) -> int:
        return await count(self.db, queries.Query(queries.NOTES_ALL_SQL))

    async def create(self, note: Note) -> Note:
        """Create a new note."""
        cursor = await self.db.execute(
            """
            INSERT INTO notes (name, description, created_at)
            VALUES (:name, :description, :created_at)
            """,
            {
                "name": note.name,
                "description": note.description,
                "created_at": note.created_at,
            },
        )
        await self.db.commit()
        note_id = int(cursor.lastrowid)
        logger.debug(f"Created note {note_id}")
        return await self.get(note_id)

    async def update(self, note: Note) -> Note:
        """Update an existing note."""
        if note.id is None:
            raise NoteNotFoundError()
        cursor = await self.db.execute(
            """
            UPDATE notes SET
                name = :name, description = :description, updated_at = :updated_at
            WHERE id = :id
            """,
            {
                "id": note.id,
                "name": note.name,
                "description": note.description,
                "updated_at": note.updated_at,
            },
        )
        await self.db.commit()
        if cursor.rowcount == 0:
            raise NoteNotFoundError()
        return await self.get(note.id)

    async def delete(self, note_id: int) -> None:
        """Delete a note. Deleting a missing note is a no-op."""
        cursor = await self.db.execute("DELETE FROM notes WHERE id = :id", {"id": note_id})
        await self.db.commit()
        logger.debug(f"Deleted note {note_id} ({cursor.rowcount} rows)")

    def _row_to_note(self, row: Any) -> Note:
        """Convert a database row to a Note."""
        return Note.model_validate(dict(row))


class TaskRepository:
    """Repository for Task entities, scoped by owning user."""

    def __init__(self, db: Database):
        self.db = db

    async def get(self, task_id: int, user_id: int) -> Task:
        """Get a task by ID if it belongs to ``user_id``."""
        row = await self.db.fetchone(
            "SELECT * FROM tasks WHERE id = :id AND user_id = :user_id",
            {"id": task_id, "user_id": user_id},
        )
        if not row:
            raise TaskNotFoundError()
        return self._row_to_task(row)

    async def list_all(self) -> list[Task]:
        """List every task of every user."""
        rows = await self.db.fetchall(queries.TASKS_ALL_SQL)
        return [self._row_to_task(row) for row in rows]

    async def list_by_user(self, user_id: int) -> list[Task]:
        """List the tasks of one user."""
        query = queries.tasks_by_user_query(user_id)
        rows = await self.db.fetchall(query.sql, query.params)
        return [self._row_to_task(row) for row in rows]

    async def get_by_page(
        self,
        user_id: int,
        page_request: PageRequest,
        filters: TaskFilters | None = None,
    ) -> PageResult[Task]:
        """List one page of a user's tasks matching every filter."""
        query = queries.task_page_query(user_id, filters or TaskFilters())
        return await paginate(self.db, query, page_request, self._row_to_task)

    async def search(self, name: str, user_id: int, status: object = None) -> list[Task]:
        """Find a user's tasks by name, optionally narrowed to status 0 or 1."""
        query = queries.task_search_query(user_id, name, status)
        rows = await self.db.fetchall(query.sql, query.params)
        if not rows:
            raise EmptySearchResultError("No tasks were found with that name.")
        return [self._row_to_task(row) for row in rows]

    async def count(self) -> int:
        return await count(self.db, queries.Query(queries.TASKS_ALL_SQL))

    async def create(self, task: Task) -> Task:
        """Create a new task."""
        cursor = await self.db.execute(
            """
            INSERT INTO tasks (name, description, status, user_id, created_at)
            VALUES (:name, :description, :status, :user_id, :created_at)
            """,
            {
                "name": task.name,
                "description": task.description,
                "status": int(task.status),
                "user_id": task.user_id,
                "created_at": task.created_at,
            },
        )
        await self.db.commit()
        task_id = int(cursor.lastrowid)
        logger.debug(f"Created task {task_id} for user {task.user_id}")
        return await self.get(task_id, task.user_id)

    async def update(self, task: Task) -> Task:
        """Update an existing task owned by ``task.user_id``."""
        if task.id is None:
            raise TaskNotFoundError()
        cursor = await self.db.execute(
            """
            UPDATE tasks SET
                name = :name, description = :description, status = :status,
                updated_at = :updated_at
            WHERE id = :id AND user_id = :user_id
            """,
            {
                "id": task.id,
                "user_id": task.user_id,
                "name": task.name,
                "description": task.description,
                "status": int(task.status),
                "updated_at": task.updated_at,
            },
        )
        await self.db.commit()
        if cursor.rowcount == 0:
            raise TaskNotFoundError()
        return await self.get(task.id, task.user_id)

    async def delete(self, task_id: int, user_id: int) -> None:
        """Delete a user's task. Deleting a missing task is a no-op."""
        cursor = await self.db.execute(
            "DELETE FROM tasks WHERE id = :id AND user_id = :user_id",
            {"id": task_id, "user_id": user_id},
        )
        await self.db.commit()
        logger.debug(f"Deleted task {task_id} of user {user_id} ({cursor.rowcount} rows)")

    async def delete_by_user(self, user_id: int) -> int:
        """Delete every task of a user. Returns the number of rows removed."""
        cursor = await self.db.execute(
            "DELETE FROM tasks WHERE user_id = :user_id", {"user_id": user_id}
        )
        await self.db.commit()
        return cursor.rowcount

    def _row_to_task(self, row: Any) -> Task:
        """Convert a database row to a Task."""
        return Task.model_validate(dict(row))


class UserRepository:
    """Repository for User entities."""

    def __init__(self, db: Database):
        self.db = db

    async def get(self, user_id: int) -> User:
        """Get a user by ID."""
        row = await self.db.fetchone("SELECT * FROM users WHERE id = :id", {"id": user_id})
        if not row:
            raise UserNotFoundError()
        return self._row_to_user(row)

    async def find_by_email(self, email: str) -> User | None:
        """Get a user by email, or None."""
        row = await self.db.fetchone(
            "SELECT * FROM users WHERE email = :email", {"email": email}
        )
        if not row:
            return None
        return self._row_to_user(row)

    async def list_all(self) -> list[User]:
        """List every user."""
        rows = await self.db.fetchall(queries.USERS_ALL_SQL)
        return [self._row_to_user(row) for row in rows]

    async def get_by_page(
        self, page_request: PageRequest, filters: UserFilters | None = None
    ) -> PageResult[User]:
        """List one page of users matching every filter."""
        query = queries.user_page_query(filters or UserFilters())
        return await paginate(self.db, query, page_request, self._row_to_user)

    async def search(self, name: str) -> list[User]:
        """Find users whose name contains ``name``."""
        query = queries.user_search_query(name)
        rows = await self.db.fetchall(query.sql, query.params)
        if not rows:
            raise EmptySearchResultError("No users were found with that name.")
        return [self._row_to_user(row) for row in rows]

    async def count(self) -> int:
        return await count(self.db, queries.Query(queries.USERS_ALL_SQL))

    async def create(self, user: User) -> User:
        """Create a new user."""
        cursor = await self.db.execute(
            """
            INSERT INTO users (name, email, created_at)
            VALUES (:name, :email, :created_at)
            """,
            {"name": user.name, "email": user.email, "created_at": user.created_at},
        )
        await self.db.commit()
        user_id = int(cursor.lastrowid)
        logger.debug(f"Created user {user_id}")
        return await self.get(user_id)

    async def update(self, user: User) -> User:
        """Update an existing user."""
        if user.id is None:
            raise UserNotFoundError()
        cursor = await self.db.execute(
            """
            UPDATE users SET
                name = :name, email = :email, updated_at = :updated_at
            WHERE id = :id
            """,
            {
                "id": user.id,
                "name": user.name,
                "email": user.email,
                "updated_at": user.updated_at,
            },
        )
        await self.db.commit()
        if cursor.rowcount == 0:
            raise UserNotFoundError()
        return await self.get(user.id)

    async def delete(self, user_id: int) -> None:
        """Delete a user. Deleting a missing user is a no-op."""
        await self.db.execute("DELETE FROM users WHERE id = :id", {"id": user_id})
        await self.db.commit()

    def _row_to_user(self, row: Any) -> User:
        """Convert a database row to a User."""
        return User.model_validate(dict(row))
