"""Task wire models."""

from __future__ import annotations

from datetime import UTC, datetime

from pydantic import BaseModel, ConfigDict, Field, field_serializer, field_validator


def truncate_to_millis(value: datetime) -> datetime:
    """Drop sub-millisecond precision; BSON dates only keep milliseconds."""
    return value.replace(microsecond=(value.microsecond // 1000) * 1000)


def server_timestamp() -> datetime:
    return truncate_to_millis(datetime.now(UTC))


class TaskPayload(BaseModel):
    """Client-supplied body for create and replace.

    Unknown attributes, including ``id`` and ``createdAt``, are ignored:
    the id belongs to the store and the timestamp to the server.
    """

    model_config = ConfigDict(extra="ignore", strict=True)

    name: str = ""
    completed: bool = False


class Task(BaseModel):
    """A persisted task as returned to clients."""

    model_config = ConfigDict(populate_by_name=True)

    id: str
    name: str
    completed: bool
    created_at: datetime = Field(alias="createdAt")

    @field_validator("created_at")
    @classmethod
    def _ensure_utc(cls, value: datetime) -> datetime:
        if value.tzinfo is None:
            value = value.replace(tzinfo=UTC)
        return truncate_to_millis(value.astimezone(UTC))

    @field_serializer("created_at")
    def _serialize_created_at(self, value: datetime) -> str:
        return value.astimezone(UTC).isoformat(timespec="milliseconds").replace("+00:00", "Z")
