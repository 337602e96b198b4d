"""Error classes raised by repositories and the API layer.

Every error carries a machine-readable code, a human-readable message and
the HTTP status the API layer responds with. Store-layer failures
(``aiosqlite.Error``) are not wrapped; they propagate as-is and surface as
a generic 500.
"""


class TaskHubError(Exception):
    """Base class for taskhub errors."""

    def __init__(self, code: str, message: str, status_code: int = 500) -> None:
        self.code = code
        self.message = message
        self.status_code = status_code
        super().__init__(message)


class ValidationError(TaskHubError):
    """Malformed input (400)."""

    def __init__(self, message: str) -> None:
        super().__init__(code="VALIDATION_ERROR", message=message, status_code=400)


class UnauthorizedError(TaskHubError):
    """No acting user supplied (401)."""

    def __init__(self, message: str = "Authentication required") -> None:
        super().__init__(code="UNAUTHORIZED", message=message, status_code=401)


class NotFoundError(TaskHubError):
    """Resource missing or not owned by the acting user (404)."""

    def __init__(self, message: str = "Resource not found.") -> None:
        super().__init__(code="NOT_FOUND", message=message, status_code=404)


class TaskNotFoundError(NotFoundError):
    def __init__(self, message: str = "Task not found.") -> None:
        super().__init__(message)


class NoteNotFoundError(NotFoundError):
    def __init__(self, message: str = "Note not found.") -> None:
        super().__init__(message)


class UserNotFoundError(NotFoundError):
    def __init__(self, message: str = "User not found.") -> None:
        super().__init__(message)


class EmptySearchResultError(NotFoundError):
    """A search matched nothing.

    Searching asserts that something exists; listing does not, so only
    ``search`` raises this.
    """

    def __init__(self, message: str = "No results were found.") -> None:
        super().__init__(message)
        self.code = "EMPTY_SEARCH_RESULT"
