"""Domain models for taskhub."""

from taskhub.domain.enums import TaskStatus, is_filterable_status
from taskhub.domain.models import (
    Note,
    NoteFilters,
    PageRequest,
    PageResult,
    Task,
    TaskFilters,
    User,
    UserFilters,
    timestamp,
)

__all__ = [
    "TaskStatus",
    "is_filterable_status",
    "Note",
    "NoteFilters",
    "PageRequest",
    "PageResult",
    "Task",
    "TaskFilters",
    "User",
    "UserFilters",
    "timestamp",
]
