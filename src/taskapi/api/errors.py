"""JSON error bodies and the app-level exception handlers that emit them."""

from __future__ import annotations

import logging

from fastapi import FastAPI, Request, status
from fastapi.exceptions import RequestValidationError
from fastapi.responses import JSONResponse
from starlette.exceptions import HTTPException as StarletteHTTPException

logger = logging.getLogger(__name__)

INVALID_PAYLOAD = "Invalid request payload"
PAYLOAD_TOO_LARGE = "Request payload too large"
TASK_NOT_FOUND = "Task not found"
FAILED_TO_FETCH_TASKS = "Failed to fetch tasks"
FAILED_TO_DECODE_TASKS = "Failed to decode tasks"
FAILED_TO_FETCH_TASK = "Failed to fetch task"
FAILED_TO_CREATE_TASK = "Failed to create task"
FAILED_TO_UPDATE_TASK = "Failed to update task"
FAILED_TO_DELETE_TASK = "Failed to delete task"
INTERNAL_ERROR = "Internal server error"


def error_response(status_code: int, message: str, headers: dict[str, str] | None = None) -> JSONResponse:
    """Create the ``{"error": message}`` body every failure carries."""
    return JSONResponse(status_code=status_code, content={"error": message}, headers=headers)


def register_exception_handlers(app: FastAPI) -> None:
    @app.exception_handler(StarletteHTTPException)
    async def http_exception_handler(request: Request, exc: StarletteHTTPException) -> JSONResponse:
        return error_response(exc.status_code, str(exc.detail), headers=exc.headers)

    @app.exception_handler(RequestValidationError)
    async def validation_exception_handler(
        request: Request,
        exc: RequestValidationError,
    ) -> JSONResponse:
        """Handle undecodable or invalid request bodies."""
        logger.warning(
            "Request validation failed",
            extra={"errors": str(exc.errors()), "path": request.url.path},
        )
        return error_response(status.HTTP_400_BAD_REQUEST, INVALID_PAYLOAD)

    @app.exception_handler(Exception)
    async def unhandled_exception_handler(request: Request, exc: Exception) -> JSONResponse:
        logger.exception("Unhandled error", extra={"path": request.url.path})
        return error_response(status.HTTP_500_INTERNAL_SERVER_ERROR, INTERNAL_ERROR)
