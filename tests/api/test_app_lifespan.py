from __future__ import annotations

import pytest
from fastapi.testclient import TestClient
from pymongo.errors import ServerSelectionTimeoutError
from taskapi import main
from taskapi.config import get_settings
from taskapi.stores.task_store import TaskStore


def test_lifespan_opens_and_closes_store(monkeypatch: pytest.MonkeyPatch, task_store: TaskStore) -> None:
    calls: list[str] = []
    sentinel_client = object()

    async def _fake_open(settings):
        calls.append(f"open:{settings.mongodb_database}/{settings.mongodb_collection}")
        return sentinel_client, task_store

    async def _fake_close(client):
        assert client is sentinel_client
        calls.append("close")

    monkeypatch.setattr(main, "open_task_store", _fake_open)
    monkeypatch.setattr(main, "close_database", _fake_close)
    get_settings.cache_clear()
    app = main.create_app()

    with TestClient(app) as client:
        assert app.state.task_store is task_store
        assert client.get("/tasks").json() == []

    assert calls == ["open:mydb/tasks", "close"]
    assert app.state.task_store is None


def test_lifespan_fails_when_database_unreachable(monkeypatch: pytest.MonkeyPatch) -> None:
    async def _unreachable(settings):
        raise ServerSelectionTimeoutError("localhost:27017: connection refused")

    monkeypatch.setattr(main, "open_task_store", _unreachable)
    get_settings.cache_clear()
    app = main.create_app()

    with pytest.raises(ServerSelectionTimeoutError):
        with TestClient(app):
            pass
