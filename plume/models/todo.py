"""Todo data model."""

import uuid
from datetime import date as date_type
from datetime import datetime
from typing import Any

from pydantic import BaseModel, Field, field_validator

from plume.models.entry import coerce_datetime

# Assigning any of these bumps updated_at
CONTENT_FIELDS = frozenset({"date", "title", "completed"})


class Todo(BaseModel):
    """A task associated with a calendar day.

    Todos relate to entries only by sharing a day, never by ID.
    """

    id: uuid.UUID = Field(default_factory=uuid.uuid4, description="Unique todo ID")
    date: datetime = Field(default_factory=datetime.now, description="Day the task is due")
    title: str = Field(..., description="Task title")
    completed: bool = Field(default=False, description="Whether the task is done")
    created_at: datetime = Field(default_factory=datetime.now, description="Creation timestamp")
    updated_at: datetime = Field(default_factory=datetime.now, description="Last write timestamp")

    model_config = {"validate_assignment": True}

    @field_validator("date", "created_at", "updated_at", mode="before")
    @classmethod
    def _coerce_dates(cls, value: Any) -> Any:
        return coerce_datetime(value)

    def __setattr__(self, name: str, value: Any) -> None:
        super().__setattr__(name, value)
        if name in CONTENT_FIELDS:
            super().__setattr__("updated_at", datetime.now())

    @property
    def day(self) -> date_type:
        """Calendar day the task is due."""
        return self.date.date()
