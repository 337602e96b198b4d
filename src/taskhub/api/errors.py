"""Exception handlers mapping errors to JSON responses."""

import logging

from fastapi import FastAPI, Request
from fastapi.exceptions import RequestValidationError
from fastapi.responses import JSONResponse

from taskhub.errors import TaskHubError

logger = logging.getLogger(__name__)


def _error_body(code: str, message: str) -> dict:
    return {"error": {"code": code, "message": message}}


async def taskhub_error_handler(_request: Request, exc: TaskHubError) -> JSONResponse:
    """Render a taskhub error with its own status code."""
    return JSONResponse(status_code=exc.status_code, content=_error_body(exc.code, exc.message))


async def validation_error_handler(
    _request: Request, exc: RequestValidationError
) -> JSONResponse:
    """Render request validation failures as 400."""
    messages = [
        f"{'.'.join(str(part) for part in error['loc'])}: {error['msg']}"
        for error in exc.errors()
    ]
    return JSONResponse(
        status_code=400,
        content=_error_body("VALIDATION_ERROR", "; ".join(messages) or "Invalid request."),
    )


async def internal_error_handler(request: Request, exc: Exception) -> JSONResponse:
    """Render anything unexpected (including store failures) as a generic 500."""
    logger.error(f"Unhandled error on {request.method} {request.url.path}: {type(exc).__name__}: {exc}")
    return JSONResponse(
        status_code=500,
        content=_error_body("INTERNAL_ERROR", "An unexpected error occurred."),
    )


def register_exception_handlers(app: FastAPI) -> None:
    app.add_exception_handler(TaskHubError, taskhub_error_handler)  # type: ignore[arg-type]
    app.add_exception_handler(RequestValidationError, validation_error_handler)  # type: ignore[arg-type]
    app.add_exception_handler(Exception, internal_error_handler)
