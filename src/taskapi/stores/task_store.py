"""MongoDB-backed store for task documents.

One collection, one document per task. The document's native ``ObjectId``
is the primary key and is exposed to callers as its 24-character hex form.
"""

from __future__ import annotations

import logging
from collections.abc import AsyncIterator, Mapping
from contextlib import asynccontextmanager
from datetime import datetime
from typing import Any

import pymongo
from bson import ObjectId
from pydantic import ValidationError
from pymongo import ReturnDocument
from pymongo.asynchronous.collection import AsyncCollection
from pymongo.errors import PyMongoError

from taskapi.core.deadline import Deadline
from taskapi.observability.metrics import observe_store_operation
from taskapi.observability.tracing import start_span
from taskapi.schemas.task import Task, TaskPayload

logger = logging.getLogger(__name__)


class StoreError(Exception):
    """Raised when the document store fails or the deadline expires."""

    def __init__(self, message: str, operation: str):
        super().__init__(message)
        self.operation = operation


class TaskDecodeError(StoreError):
    """Raised when a stored document cannot be turned into a Task."""


class TaskNotFoundError(Exception):
    """Raised when no document matches the requested id."""

    def __init__(self, task_id: str):
        super().__init__(f"Task not found: {task_id}")
        self.task_id = task_id


def _object_id(task_id: str) -> ObjectId | None:
    if not ObjectId.is_valid(task_id):
        return None
    return ObjectId(task_id)


class TaskStore:
    """CRUD primitives over a single task collection.

    Every operation takes the request's ``Deadline``; the remaining budget
    bounds both the awaiting coroutine and the server-side operation.
    """

    def __init__(self, collection: AsyncCollection) -> None:
        self._collection = collection

    @classmethod
    def from_client(cls, client: Any, database: str, collection: str) -> TaskStore:
        return cls(client[database][collection])

    @asynccontextmanager
    async def _bounded(self, operation: str, deadline: Deadline) -> AsyncIterator[None]:
        remaining = deadline.remaining()
        if remaining <= 0:
            observe_store_operation(operation=operation, outcome="timeout")
            raise StoreError(f"{operation}: deadline exceeded before start", operation)

        with start_span(f"task_store.{operation}", attributes={"db.operation": operation}):
            try:
                with pymongo.timeout(remaining):
                    async with deadline.bound():
                        yield
            except TaskNotFoundError:
                observe_store_operation(operation=operation, outcome="not_found")
                raise
            except TaskDecodeError:
                observe_store_operation(operation=operation, outcome="decode_error")
                raise
            except TimeoutError as exc:
                observe_store_operation(operation=operation, outcome="timeout")
                raise StoreError(f"{operation}: deadline exceeded", operation) from exc
            except PyMongoError as exc:
                observe_store_operation(operation=operation, outcome="error")
                raise StoreError(f"{operation}: {exc}", operation) from exc
        observe_store_operation(operation=operation, outcome="ok")

    @staticmethod
    def _to_task(document: Mapping[str, Any], operation: str) -> Task:
        try:
            return Task(
                id=str(document["_id"]),
                name=document["name"],
                completed=document["completed"],
                created_at=document["createdAt"],
            )
        except (KeyError, ValidationError) as exc:
            logger.warning(
                "Stored task document is malformed",
                extra={"document_id": str(document.get("_id")), "error": str(exc)},
            )
            raise TaskDecodeError(f"{operation}: malformed document", operation) from exc

    async def find_all(self, deadline: Deadline) -> list[Task]:
        async with self._bounded("find_all", deadline):
            documents = await self._collection.find({}).to_list()
            return [self._to_task(doc, "find_all") for doc in documents]

    async def find_by_id(self, task_id: str, deadline: Deadline) -> Task:
        oid = _object_id(task_id)
        if oid is None:
            raise TaskNotFoundError(task_id)
        async with self._bounded("find_by_id", deadline):
            document = await self._collection.find_one({"_id": oid})
            if document is None:
                raise TaskNotFoundError(task_id)
            return self._to_task(document, "find_by_id")

    async def insert(self, task: TaskPayload, *, created_at: datetime, deadline: Deadline) -> str:
        """Insert a new task and return the store-assigned id."""
        document = {
            "name": task.name,
            "completed": task.completed,
            "createdAt": created_at,
        }
        async with self._bounded("insert", deadline):
            result = await self._collection.insert_one(document)
        return str(result.inserted_id)

    async def replace_by_id(self, task_id: str, task: TaskPayload, deadline: Deadline) -> Task:
        """Overwrite the client-owned fields of an existing task.

        ``createdAt`` is left untouched. Missing ids are not upserted.
        """
        oid = _object_id(task_id)
        if oid is None:
            raise TaskNotFoundError(task_id)
        async with self._bounded("replace_by_id", deadline):
            document = await self._collection.find_one_and_update(
                {"_id": oid},
                {"$set": {"name": task.name, "completed": task.completed}},
                return_document=ReturnDocument.AFTER,
            )
            if document is None:
                raise TaskNotFoundError(task_id)
            return self._to_task(document, "replace_by_id")

    async def delete_by_id(self, task_id: str, deadline: Deadline) -> bool:
        """Delete a task. Returns False when nothing matched."""
        oid = _object_id(task_id)
        if oid is None:
            return False
        async with self._bounded("delete_by_id", deadline):
            result = await self._collection.delete_one({"_id": oid})
        return result.deleted_count > 0

    async def ping(self, deadline: Deadline) -> None:
        async with self._bounded("ping", deadline):
            await self._collection.database.command("ping")
