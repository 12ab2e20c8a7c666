"""FastAPI dependencies shared by the routers."""

from fastapi import HTTPException, Request, status
from pydantic import ValidationError

from taskapi.api.errors import INVALID_PAYLOAD
from taskapi.config import get_settings
from taskapi.core.deadline import Deadline
from taskapi.schemas.task import TaskPayload
from taskapi.stores.task_store import TaskStore


async def get_task_store(request: Request) -> TaskStore:
    """Return the store attached to the application at startup."""
    store = getattr(request.app.state, "task_store", None)
    if store is None:
        raise HTTPException(
            status_code=status.HTTP_503_SERVICE_UNAVAILABLE,
            detail="Task store unavailable",
        )
    return store


async def get_deadline(request: Request) -> Deadline:
    """Return the deadline minted for this request at the edge."""
    deadline = getattr(request.state, "deadline", None)
    if deadline is None:
        deadline = Deadline.after(get_settings().request_timeout_seconds)
        request.state.deadline = deadline
    return deadline


async def read_task_payload(request: Request) -> TaskPayload:
    """Decode the request body as a task whatever its Content-Type says."""
    body = await request.body()
    try:
        return TaskPayload.model_validate_json(body)
    except ValidationError:
        raise HTTPException(status_code=status.HTTP_400_BAD_REQUEST, detail=INVALID_PAYLOAD)
