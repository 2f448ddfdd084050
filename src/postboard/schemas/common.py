"""
Shared response helpers: the success envelope and entity serialization.

Success envelope:
    {"success": true, "data": <payload>, "message": "..."}   # message only when given
"""

from datetime import datetime, timezone
from typing import Any, Iterable

from pydantic import BaseModel, ConfigDict, Field, field_serializer


class EntityRead(BaseModel):
    """
    Base for entity read models.

    Built from ORM objects (`from_attributes`); timestamps are emitted as
    camelCase ISO-8601 strings. Naive datetimes (SQLite drops the offset) are
    treated as UTC.
    """

    model_config = ConfigDict(from_attributes=True)

    id: int
    created_at: datetime = Field(serialization_alias="createdAt")
    updated_at: datetime = Field(serialization_alias="updatedAt")

    @field_serializer("created_at", "updated_at")
    def serialize_timestamp(self, value: datetime) -> str:
        if value.tzinfo is None:
            value = value.replace(tzinfo=timezone.utc)
        return value.isoformat()

    @classmethod
    def dump(cls, entity: Any) -> dict[str, Any]:
        return cls.model_validate(entity).model_dump(mode="json", by_alias=True)

    @classmethod
    def dump_many(cls, entities: Iterable[Any]) -> list[dict[str, Any]]:
        return [cls.dump(e) for e in entities]


def success_response(data: Any = None, message: str | None = None) -> dict[str, Any]:
    body: dict[str, Any] = {"success": True, "data": data}
    if message is not None:
        body["message"] = message
    return body


def reject_null(value: Any) -> Any:
    """
    Before-validator for optional update fields: they may be omitted, not sent as null.
    """
    if value is None:
        raise ValueError("must not be null")
    return value


def error_response(error: str, message: str, details: list[dict[str, Any]] | None = None) -> dict[str, Any]:
    """
    Error envelope:
        {"success": false, "error": "...", "message": "...", "details": [...]}   # details only when given
    """
    body: dict[str, Any] = {"success": False, "error": error, "message": message}
    if details is not None:
        body["details"] = details
    return body
