from __future__ import annotations

from datetime import UTC, datetime, timedelta, timezone

import pytest
from pydantic import ValidationError
from taskapi.schemas.task import Task, TaskPayload, server_timestamp, truncate_to_millis


def test_payload_defaults_and_ignores_server_owned_fields() -> None:
    payload = TaskPayload.model_validate({"id": "x", "createdAt": "2020-01-01T00:00:00Z"})

    assert payload.name == ""
    assert payload.completed is False
    assert "id" not in payload.model_dump()


@pytest.mark.parametrize("data", [{"name": 1}, {"completed": "true"}, {"completed": 1}])
def test_payload_is_strict_about_types(data: dict) -> None:
    with pytest.raises(ValidationError):
        TaskPayload.model_validate(data)


def test_task_serializes_wire_names_with_millisecond_utc() -> None:
    task = Task(
        id="65a1b2c3d4e5f6a7b8c9d0e1",
        name="buy milk",
        completed=False,
        created_at=datetime(2024, 1, 1, 12, 0, 0, 123456, tzinfo=UTC),
    )

    assert task.model_dump(mode="json", by_alias=True) == {
        "id": "65a1b2c3d4e5f6a7b8c9d0e1",
        "name": "buy milk",
        "completed": False,
        "createdAt": "2024-01-01T12:00:00.123Z",
    }


def test_task_normalizes_naive_and_offset_timestamps() -> None:
    naive = Task(id="1", name="a", completed=False, created_at=datetime(2024, 1, 1, 12, 0))
    offset = Task(
        id="1",
        name="a",
        completed=False,
        created_at=datetime(2024, 1, 1, 14, 0, tzinfo=timezone(timedelta(hours=2))),
    )

    assert naive.created_at == offset.created_at
    assert naive.created_at.tzinfo == UTC


def test_server_timestamp_has_millisecond_precision() -> None:
    stamp = server_timestamp()

    assert stamp.tzinfo == UTC
    assert stamp.microsecond % 1000 == 0
    assert truncate_to_millis(stamp) == stamp
