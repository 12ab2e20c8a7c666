"""Health check endpoints for monitoring and load balancer checks."""
import logging
from typing import Literal

from fastapi import APIRouter, Depends, Response, status
from pydantic import BaseModel

from taskapi.api.deps import get_deadline, get_task_store
from taskapi.core.deadline import Deadline
from taskapi.stores.task_store import StoreError, TaskStore

logger = logging.getLogger(__name__)

router = APIRouter(tags=["health"])


class HealthStatus(BaseModel):
    """Health check response."""

    status: Literal["healthy", "unhealthy"]
    version: str
    database: Literal["connected", "disconnected", "unknown"]
    details: dict | None = None


@router.get("/health", response_model=HealthStatus)
async def health_check() -> HealthStatus:
    """
    Basic health check endpoint.

    Returns 200 whenever the process is serving requests.
    """
    from taskapi import __version__

    return HealthStatus(status="healthy", version=__version__, database="unknown")


@router.get("/health/ready", response_model=HealthStatus)
async def readiness_check(
    response: Response,
    store: TaskStore = Depends(get_task_store),
    deadline: Deadline = Depends(get_deadline),
) -> HealthStatus:
    """
    Readiness check with dependency verification.

    Pings MongoDB; answers 503 when the store is unreachable.
    """
    from taskapi import __version__

    try:
        await store.ping(deadline)
    except StoreError as e:
        logger.warning("Database health check failed", extra={"error": str(e)})
        response.status_code = status.HTTP_503_SERVICE_UNAVAILABLE
        return HealthStatus(
            status="unhealthy",
            version=__version__,
            database="disconnected",
            details={"database_error": str(e)},
        )

    return HealthStatus(status="healthy", version=__version__, database="connected")
