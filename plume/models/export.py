"""Export envelope models.

The envelope is the versioned JSON document written by ``plume export``
and read back by ``plume import``. Keys are camelCase on the wire.
"""

from datetime import datetime
from typing import Optional

from pydantic import AliasChoices, BaseModel, Field, field_serializer, field_validator

EXPORT_VERSION = "1.0"
SUPPORTED_VERSIONS = frozenset({EXPORT_VERSION})


def to_local_naive(value: datetime) -> datetime:
    """Convert an aware datetime to naive local time; naive values pass through."""
    if value.tzinfo is None:
        return value
    return value.astimezone().replace(tzinfo=None)


class _Record(BaseModel):
    """Shared timestamp handling for exported records."""

    model_config = {"populate_by_name": True}

    @field_validator("date", "created_at", "updated_at", "exported_at", mode="after", check_fields=False)
    @classmethod
    def _localize(cls, value: datetime) -> datetime:
        return to_local_naive(value)

    @field_serializer("date", "created_at", "updated_at", "exported_at", check_fields=False)
    def _with_offset(self, value: datetime) -> str:
        return value.astimezone().isoformat()


class ExportedEntry(_Record):
    """An entry as written to the export document."""

    id: str = Field(..., description="Entry ID in canonical string form")
    date: datetime = Field(...)
    gratitudes: list[str] = Field(...)
    memory: Optional[str] = Field(default=None)
    accomplishments: list[str] = Field(...)
    journal: Optional[str] = Field(default=None)
    word_count: Optional[int] = Field(default=None, alias="wordCount")
    created_at: datetime = Field(..., alias="createdAt")
    updated_at: datetime = Field(..., alias="updatedAt")


class ExportedTodo(_Record):
    """A todo as written to the export document."""

    id: str = Field(..., description="Todo ID in canonical string form")
    date: datetime = Field(...)
    title: str = Field(...)
    completed: bool = Field(...)
    created_at: datetime = Field(..., alias="createdAt")
    updated_at: datetime = Field(..., alias="updatedAt")


class ExportDocument(_Record):
    """The versioned export envelope holding both record collections."""

    version: str = Field(..., description="Envelope schema version")
    exported_at: datetime = Field(
        ...,
        alias="exportedAt",
        validation_alias=AliasChoices("exportedAt", "exportDate"),
    )
    entries: list[ExportedEntry] = Field(...)
    todos: list[ExportedTodo] = Field(...)
