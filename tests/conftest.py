"""Test configuration and fixtures."""

import asyncio
from collections.abc import Generator
from types import SimpleNamespace
from typing import Any

import pytest
from bson import ObjectId
from fastapi.testclient import TestClient
from taskapi.config import get_settings
from taskapi.main import create_app
from taskapi.stores.task_store import TaskStore


class FakeCursor:
    def __init__(self, collection: "FakeCollection") -> None:
        self._collection = collection

    async def to_list(self, length: int | None = None) -> list[dict[str, Any]]:
        await self._collection._before_call()
        docs = [dict(doc) for doc in self._collection.documents.values()]
        return docs if length is None else docs[:length]


class FakeDatabase:
    def __init__(self, collection: "FakeCollection") -> None:
        self._collection = collection

    async def command(self, name: str) -> dict[str, Any]:
        await self._collection._before_call()
        return {"ok": 1.0}


class FakeCollection:
    """In-memory stand-in for the async collection calls TaskStore makes."""

    def __init__(self) -> None:
        self.documents: dict[ObjectId, dict[str, Any]] = {}
        self.database = FakeDatabase(self)
        self.error: Exception | None = None
        self.delay_seconds = 0.0

    async def _before_call(self) -> None:
        if self.delay_seconds:
            await asyncio.sleep(self.delay_seconds)
        if self.error is not None:
            raise self.error

    def find(self, filter: dict[str, Any]) -> FakeCursor:
        return FakeCursor(self)

    async def find_one(self, filter: dict[str, Any]) -> dict[str, Any] | None:
        await self._before_call()
        doc = self.documents.get(filter["_id"])
        return dict(doc) if doc is not None else None

    async def insert_one(self, document: dict[str, Any]) -> SimpleNamespace:
        await self._before_call()
        oid = ObjectId()
        self.documents[oid] = {"_id": oid, **document}
        return SimpleNamespace(inserted_id=oid)

    async def find_one_and_update(
        self,
        filter: dict[str, Any],
        update: dict[str, Any],
        return_document: Any = None,
    ) -> dict[str, Any] | None:
        await self._before_call()
        doc = self.documents.get(filter["_id"])
        if doc is None:
            return None
        doc.update(update["$set"])
        return dict(doc)

    async def delete_one(self, filter: dict[str, Any]) -> SimpleNamespace:
        await self._before_call()
        removed = self.documents.pop(filter["_id"], None)
        return SimpleNamespace(deleted_count=1 if removed is not None else 0)


@pytest.fixture
def fake_collection() -> FakeCollection:
    return FakeCollection()


@pytest.fixture
def task_store(fake_collection: FakeCollection) -> TaskStore:
    return TaskStore(fake_collection)


@pytest.fixture
def client(
    monkeypatch: pytest.MonkeyPatch,
    task_store: TaskStore,
) -> Generator[TestClient, None, None]:
    """Create test client for API tests, served from the in-memory store."""
    monkeypatch.setenv("LOG_FORMAT", "text")
    get_settings.cache_clear()
    app = create_app(task_store=task_store)
    with TestClient(app) as c:
        yield c
    get_settings.cache_clear()
