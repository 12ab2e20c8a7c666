from __future__ import annotations

from fastapi.testclient import TestClient
from pymongo.errors import ServerSelectionTimeoutError
from taskapi import __version__


def test_health_reports_version(client: TestClient) -> None:
    response = client.get("/health")

    assert response.status_code == 200
    assert response.json()["status"] == "healthy"
    assert response.json()["version"] == __version__


def test_readiness_pings_store(client: TestClient) -> None:
    response = client.get("/health/ready")

    assert response.status_code == 200
    assert response.json()["database"] == "connected"


def test_readiness_reports_unreachable_store(client: TestClient, fake_collection) -> None:
    fake_collection.error = ServerSelectionTimeoutError("no servers")

    response = client.get("/health/ready")

    assert response.status_code == 503
    body = response.json()
    assert body["status"] == "unhealthy"
    assert body["database"] == "disconnected"


def test_metrics_endpoint_returns_prometheus_text(client: TestClient) -> None:
    created = client.post("/tasks", json={"name": "a"}).json()
    assert client.get(f"/tasks/{created['id']}").status_code == 200

    res = client.get("/metrics")
    assert res.status_code == 200
    assert "text/plain" in (res.headers.get("content-type") or "")
    body = res.text
    assert "taskapi_http_requests_total" in body
    assert 'route="/tasks/{task_id}"' in body
    assert 'operation="insert",outcome="ok"' in body
