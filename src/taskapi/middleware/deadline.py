"""Mint the per-request deadline at the HTTP edge."""

from collections.abc import Callable

from starlette.middleware.base import BaseHTTPMiddleware
from starlette.requests import Request
from starlette.responses import Response
from starlette.types import ASGIApp

from taskapi.core.deadline import Deadline


class RequestDeadlineMiddleware(BaseHTTPMiddleware):
    def __init__(self, app: ASGIApp, timeout_seconds: float) -> None:
        super().__init__(app)
        self.timeout_seconds = timeout_seconds

    async def dispatch(self, request: Request, call_next: Callable) -> Response:
        request.state.deadline = Deadline.after(self.timeout_seconds)
        return await call_next(request)
