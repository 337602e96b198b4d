"""Database module for taskhub."""

from taskhub.db.connection import Database, close_database, get_database
from taskhub.db.repositories import NoteRepository, TaskRepository, UserRepository

__all__ = [
    "Database",
    "close_database",
    "get_database",
    "NoteRepository",
    "TaskRepository",
    "UserRepository",
]
