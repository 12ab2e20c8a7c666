"""FastAPI application entry point.

This is the main application module that configures the Task API
server: middleware, exception handlers, routers and the MongoDB
client lifecycle.
"""
import logging
from contextlib import asynccontextmanager
from typing import AsyncIterator

from fastapi import FastAPI

from taskapi import __version__
from taskapi.api.errors import register_exception_handlers
from taskapi.api.health import router as health_router
from taskapi.api.metrics import router as metrics_router
from taskapi.api.tasks import router as tasks_router
from taskapi.config import get_settings
from taskapi.core.logging import setup_logging
from taskapi.database import close_database, open_task_store
from taskapi.middleware.body_limit import BodySizeLimitMiddleware
from taskapi.middleware.deadline import RequestDeadlineMiddleware
from taskapi.observability.middleware import (
    AccessLogMiddleware,
    CorrelationIdMiddleware,
    PrometheusMetricsMiddleware,
)
from taskapi.observability.tracing import init_tracing, instrument_fastapi
from taskapi.stores.task_store import TaskStore

logger = logging.getLogger(__name__)


@asynccontextmanager
async def lifespan(app: FastAPI) -> AsyncIterator[None]:
    """Application lifespan manager for startup/shutdown events."""
    # Startup
    setup_logging()
    settings = get_settings()
    logger.info(
        "Task API starting",
        extra={
            "version": __version__,
            "environment": settings.environment,
        },
    )

    client = None
    if app.state.task_store is None:
        client, app.state.task_store = await open_task_store(settings)

    yield

    # Shutdown
    logger.info("Task API shutting down")
    if client is not None:
        await close_database(client)
        app.state.task_store = None
    logger.info("Task API shutdown complete")


def create_app(task_store: TaskStore | None = None) -> FastAPI:
    """
    Application factory for creating the FastAPI app.

    Args:
        task_store: Store to serve from. When omitted, the lifespan opens
            a MongoDB connection from settings and closes it at shutdown.

    Returns:
        Configured FastAPI application
    """
    settings = get_settings()
    init_tracing(service_name="taskapi")

    app = FastAPI(
        title="Task API",
        description="CRUD service for task records stored in MongoDB",
        version=__version__,
        docs_url="/docs" if not settings.is_production else None,
        redoc_url="/redoc" if not settings.is_production else None,
        openapi_url="/openapi.json" if not settings.is_production else None,
        lifespan=lifespan,
    )
    app.state.task_store = task_store

    # Added innermost first; the correlation id wraps everything else.
    app.add_middleware(BodySizeLimitMiddleware, max_body_bytes=settings.max_body_bytes)
    app.add_middleware(RequestDeadlineMiddleware, timeout_seconds=settings.request_timeout_seconds)
    app.add_middleware(PrometheusMetricsMiddleware)
    app.add_middleware(AccessLogMiddleware)
    app.add_middleware(CorrelationIdMiddleware)

    register_exception_handlers(app)

    app.include_router(health_router)
    app.include_router(metrics_router)
    app.include_router(tasks_router)

    instrument_fastapi(app)

    return app


# Create the application instance
app = create_app()
