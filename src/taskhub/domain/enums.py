"""Enumerations for domain models."""

from enum import IntEnum


class TaskStatus(IntEnum):
    """Task completion states, stored as 0/1."""

    PENDING = 0
    DONE = 1


def is_filterable_status(status: object) -> bool:
    """Return True when a search status selects an exact-match clause.

    Only 0 and 1 narrow a task search; anything else (None, strings,
    out-of-range ints, bools) means "no status filter".
    """
    if isinstance(status, bool) or not isinstance(status, int):
        return False
    return status in (TaskStatus.PENDING, TaskStatus.DONE)
