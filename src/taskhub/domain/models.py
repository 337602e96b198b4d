"""Core domain models for taskhub.

Entities are plain pydantic records. They are treated as immutable: a
change is expressed with ``model_copy(update=...)`` and persisted through
the matching repository, which returns the canonical stored record.

Filters and page requests are frozen value objects consumed by the query
builder and the pagination engine.
"""

from datetime import UTC, datetime
from typing import Generic, TypeVar

from pydantic import BaseModel, ConfigDict, Field, computed_field, field_validator

from taskhub.domain.enums import TaskStatus

T = TypeVar("T")

TIMESTAMP_FORMAT = "%Y-%m-%d %H:%M:%S"


def timestamp() -> str:
    """Get the current UTC time in the stored string format."""
    return datetime.now(UTC).strftime(TIMESTAMP_FORMAT)


class Note(BaseModel):
    """A free-form note."""

    id: int | None = None
    name: str
    description: str | None = None
    created_at: str | None = None
    updated_at: str | None = None


class Task(BaseModel):
    """A to-do item owned by a single user."""

    id: int | None = None
    name: str
    description: str | None = None
    status: TaskStatus = TaskStatus.PENDING
    user_id: int
    created_at: str | None = None
    updated_at: str | None = None


class User(BaseModel):
    """A registered user. Tasks are scoped to their owner."""

    id: int | None = None
    name: str
    email: str
    created_at: str | None = None
    updated_at: str | None = None


class _Filters(BaseModel):
    """Base for filter bundles: frozen, every field defaults to match-all."""

    model_config = ConfigDict(frozen=True)

    @field_validator("*", mode="before")
    @classmethod
    def _none_matches_all(cls, value: object) -> object:
        # An empty string keeps LIKE '%%' total, None would match nothing
        if value is None:
            return ""
        return str(value)


class NoteFilters(_Filters):
    """Filters for paged note listing."""

    name: str = ""
    description: str = ""


class TaskFilters(_Filters):
    """Filters for paged task listing."""

    name: str = ""
    description: str = ""
    status: str = ""


class UserFilters(_Filters):
    """Filters for paged user listing."""

    name: str = ""
    email: str = ""


class PageRequest(BaseModel):
    """A 1-based page request."""

    model_config = ConfigDict(frozen=True)

    page: int = Field(default=1, ge=1)
    per_page: int = Field(default=5, ge=1)

    @property
    def offset(self) -> int:
        """Number of rows to skip (0 for page 1)."""
        return (self.page - 1) * self.per_page

    @property
    def limit(self) -> int:
        return self.per_page


class PageResult(BaseModel, Generic[T]):
    """One page of entities plus totals for the whole filtered set."""

    items: list[T]
    total: int
    page: int
    per_page: int

    @computed_field  # type: ignore[prop-decorator]
    @property
    def total_pages(self) -> int:
        """Number of pages needed for ``total`` items (0 when empty)."""
        if self.total == 0:
            return 0
        return (self.total + self.per_page - 1) // self.per_page
