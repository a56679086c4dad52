"""Entry data model."""

import uuid
from datetime import date as date_type
from datetime import datetime, time
from typing import Any, Optional

from pydantic import BaseModel, Field, field_validator

from plume.errors import BlankTextError

# Assigning any of these bumps updated_at
CONTENT_FIELDS = frozenset({"date", "gratitudes", "memory", "accomplishments", "journal"})


def count_words(text: Optional[str]) -> int:
    """Count whitespace-delimited tokens in text (0 for None)."""
    if not text:
        return 0
    return len(text.split())


def start_of_day(value: date_type) -> datetime:
    """Return midnight of the day containing value."""
    if isinstance(value, datetime):
        value = value.date()
    return datetime.combine(value, time.min)


def coerce_datetime(value: Any) -> Any:
    """Promote a bare date to midnight of that day."""
    if isinstance(value, date_type) and not isinstance(value, datetime):
        return datetime.combine(value, time.min)
    return value


def require_text(text: str, what: str = "text") -> str:
    """Return text stripped, or raise BlankTextError if nothing remains."""
    stripped = (text or "").strip()
    if not stripped:
        raise BlankTextError(f"{what} must not be empty")
    return stripped


class Entry(BaseModel):
    """The journal record for one calendar day.

    Content fields are plain attributes; every assignment to one of them
    bumps ``updated_at`` and assigning ``journal`` recomputes ``word_count``.
    Use the ``add_*``/``remove_*`` helpers for list items, since mutating
    the lists in place bypasses the bookkeeping.
    """

    id: uuid.UUID = Field(default_factory=uuid.uuid4, description="Unique entry ID")
    date: datetime = Field(default_factory=datetime.now, description="Day of the entry")
    gratitudes: list[str] = Field(default_factory=list, description="Things to be grateful for")
    memory: Optional[str] = Field(default=None, description="Memorable moment of the day")
    accomplishments: list[str] = Field(default_factory=list, description="Things achieved")
    journal: Optional[str] = Field(default=None, description="Free-form journal text")
    word_count: int = Field(default=0, ge=0, description="Whitespace tokens in journal")
    created_at: datetime = Field(default_factory=datetime.now, description="Creation timestamp")
    updated_at: datetime = Field(default_factory=datetime.now, description="Last write timestamp")

    model_config = {"validate_assignment": True}

    @field_validator("date", "created_at", "updated_at", mode="before")
    @classmethod
    def _coerce_dates(cls, value: Any) -> Any:
        return coerce_datetime(value)

    def model_post_init(self, __context: Any) -> None:
        super().__setattr__("word_count", count_words(self.journal))

    def __setattr__(self, name: str, value: Any) -> None:
        super().__setattr__(name, value)
        if name in ("journal", "word_count"):
            super().__setattr__("word_count", count_words(self.journal))
        if name in CONTENT_FIELDS:
            super().__setattr__("updated_at", datetime.now())

    @property
    def day(self) -> date_type:
        """Calendar day of the entry."""
        return self.date.date()

    def add_gratitude(self, text: str) -> None:
        self.gratitudes = [*self.gratitudes, require_text(text, "Gratitude")]

    def add_accomplishment(self, text: str) -> None:
        self.accomplishments = [*self.accomplishments, require_text(text, "Accomplishment")]

    def remove_gratitude(self, index: int) -> str:
        items = list(self.gratitudes)
        removed = items.pop(index)
        self.gratitudes = items
        return removed

    def remove_accomplishment(self, index: int) -> str:
        items = list(self.accomplishments)
        removed = items.pop(index)
        self.accomplishments = items
        return removed

    @property
    def is_empty(self) -> bool:
        """True when the entry holds no content at all."""
        return not (
            self.gratitudes
            or self.accomplishments
            or (self.memory or "").strip()
            or (self.journal or "").strip()
        )
