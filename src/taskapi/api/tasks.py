"""Task CRUD API routes.

Each handler performs a single store call bounded by the request deadline
and maps store failures onto JSON error responses.
"""

import logging

from fastapi import APIRouter, Depends, HTTPException, Response, status

from taskapi.api.deps import get_deadline, get_task_store, read_task_payload
from taskapi.api.errors import (
    FAILED_TO_CREATE_TASK,
    FAILED_TO_DECODE_TASKS,
    FAILED_TO_DELETE_TASK,
    FAILED_TO_FETCH_TASK,
    FAILED_TO_FETCH_TASKS,
    FAILED_TO_UPDATE_TASK,
    TASK_NOT_FOUND,
)
from taskapi.core.deadline import Deadline
from taskapi.schemas.task import Task, TaskPayload, server_timestamp
from taskapi.stores.task_store import StoreError, TaskDecodeError, TaskNotFoundError, TaskStore

logger = logging.getLogger(__name__)
router = APIRouter(prefix="/tasks", tags=["tasks"])


def _store_failure(message: str, exc: StoreError, **extra: str) -> HTTPException:
    logger.error(
        message,
        exc_info=exc,
        extra={"operation": exc.operation, "error": str(exc), **extra},
    )
    return HTTPException(status_code=status.HTTP_500_INTERNAL_SERVER_ERROR, detail=message)


@router.get("", response_model=list[Task], summary="List all tasks")
async def list_tasks(
    store: TaskStore = Depends(get_task_store),
    deadline: Deadline = Depends(get_deadline),
) -> list[Task]:
    """Return every task in the collection; an empty collection yields ``[]``."""
    try:
        return await store.find_all(deadline)
    except TaskDecodeError as exc:
        raise _store_failure(FAILED_TO_DECODE_TASKS, exc)
    except StoreError as exc:
        raise _store_failure(FAILED_TO_FETCH_TASKS, exc)


@router.get("/{task_id}", response_model=Task, summary="Fetch one task")
async def get_task(
    task_id: str,
    store: TaskStore = Depends(get_task_store),
    deadline: Deadline = Depends(get_deadline),
) -> Task:
    try:
        return await store.find_by_id(task_id, deadline)
    except TaskNotFoundError:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail=TASK_NOT_FOUND)
    except StoreError as exc:
        raise _store_failure(FAILED_TO_FETCH_TASK, exc, task_id=task_id)


@router.post(
    "",
    response_model=Task,
    status_code=status.HTTP_201_CREATED,
    summary="Create a task",
)
async def create_task(
    payload: TaskPayload = Depends(read_task_payload),
    store: TaskStore = Depends(get_task_store),
    deadline: Deadline = Depends(get_deadline),
) -> Task:
    """Insert a task stamped with the server clock and echo the stored record."""
    created_at = server_timestamp()
    try:
        task_id = await store.insert(payload, created_at=created_at, deadline=deadline)
    except StoreError as exc:
        raise _store_failure(FAILED_TO_CREATE_TASK, exc)

    logger.info("Task created", extra={"task_id": task_id})
    return Task(
        id=task_id,
        name=payload.name,
        completed=payload.completed,
        created_at=created_at,
    )


@router.put("/{task_id}", response_model=Task, summary="Replace a task")
async def replace_task(
    task_id: str,
    payload: TaskPayload = Depends(read_task_payload),
    store: TaskStore = Depends(get_task_store),
    deadline: Deadline = Depends(get_deadline),
) -> Task:
    """Overwrite name and completion state; ``createdAt`` is preserved."""
    try:
        task = await store.replace_by_id(task_id, payload, deadline)
    except TaskNotFoundError:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail=TASK_NOT_FOUND)
    except StoreError as exc:
        raise _store_failure(FAILED_TO_UPDATE_TASK, exc, task_id=task_id)

    logger.info("Task updated", extra={"task_id": task_id})
    return task


@router.delete(
    "/{task_id}",
    status_code=status.HTTP_204_NO_CONTENT,
    response_class=Response,
    summary="Delete a task",
)
async def delete_task(
    task_id: str,
    store: TaskStore = Depends(get_task_store),
    deadline: Deadline = Depends(get_deadline),
) -> Response:
    """Delete a task. Deleting an absent id is not an error."""
    try:
        deleted = await store.delete_by_id(task_id, deadline)
    except StoreError as exc:
        raise _store_failure(FAILED_TO_DELETE_TASK, exc, task_id=task_id)

    if deleted:
        logger.info("Task deleted", extra={"task_id": task_id})
    return Response(status_code=status.HTTP_204_NO_CONTENT)
