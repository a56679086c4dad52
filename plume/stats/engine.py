"""Statistics over journal entries.

Pure functions behind the today, explore and search views: streaks,
word totals, date-window and content filters, sorting, aggregate
counts, full-text search and a plain-text digest.
"""

import re
from datetime import date, datetime, timedelta
from enum import Enum
from typing import Literal, Optional

from pydantic import BaseModel, Field

from plume.models import Entry

PREVIEW_LENGTH = 100

_SENTENCE_SPLIT = re.compile(r"[.!?]")


class DateWindow(str, Enum):
    """How far back from now entries are included."""

    ALL = "all"
    WEEK = "week"
    MONTH = "month"
    QUARTER = "quarter"

    @property
    def days(self) -> Optional[int]:
        return {"week": 7, "month": 30, "quarter": 90}.get(self.value)


class ContentFilter(str, Enum):
    """Which kind of content an entry must have."""

    ALL = "all"
    GRATITUDE = "gratitude"
    MEMORY = "memory"
    ACCOMPLISHMENTS = "accomplishments"
    JOURNAL = "journal"


class SortOrder(str, Enum):
    """Ordering of filtered entries."""

    NEWEST = "newest"
    OLDEST = "oldest"
    WORDS = "words"


class ExploreStats(BaseModel):
    """Aggregate counts over a set of entries."""

    total_entries: int = Field(..., ge=0)
    total_gratitudes: int = Field(..., ge=0)
    memories_count: int = Field(..., ge=0, description="Entries with a memory")
    total_accomplishments: int = Field(..., ge=0)
    avg_words_per_journal: int = Field(..., ge=0, description="Integer mean over written journals")

    model_config = {"frozen": True}


class SearchResult(BaseModel):
    """A single search hit inside an entry."""

    id: str = Field(..., description="Stable result ID")
    kind: Literal["gratitude", "memory", "accomplishment", "journal"]
    entry_id: str = Field(...)
    date: datetime = Field(...)
    content: str = Field(..., description="Full text of the matching item")
    preview: str = Field(..., description="Text to show for the hit")

    model_config = {"frozen": True}


def _has_text(value: Optional[str]) -> bool:
    return bool(value)


# ==================== Streak / totals ====================


def calculate_streak(entries: list[Entry], today: Optional[date] = None) -> int:
    """Count consecutive days with an entry, ending today or yesterday.

    If today has no entry yet the count starts from yesterday, so an
    unwritten today does not break an existing streak.

    Args:
        entries: Entries to inspect.
        today: Reference day (defaults to the current date).

    Returns:
        Number of consecutive days, 0 if neither today nor yesterday
        has an entry.
    """
    today = today or date.today()
    days = {entry.day for entry in entries}

    current = today if today in days else today - timedelta(days=1)
    streak = 0
    while current in days:
        streak += 1
        current -= timedelta(days=1)
    return streak


def total_word_count(entries: list[Entry]) -> int:
    """Sum journal word counts across entries."""
    return sum(entry.word_count for entry in entries)


def word_counts_by_day(entries: list[Entry]) -> dict[date, int]:
    """Map each day to its journal word count (first entry per day wins)."""
    counts: dict[date, int] = {}
    for entry in entries:
        counts.setdefault(entry.day, entry.word_count)
    return counts


# ==================== Filtering ====================


def filter_by_window(
    entries: list[Entry], window: DateWindow, now: Optional[datetime] = None
) -> list[Entry]:
    """Keep entries dated within the window ending at ``now``."""
    if window.days is None:
        return list(entries)
    cutoff = (now or datetime.now()) - timedelta(days=window.days)
    return [entry for entry in entries if entry.date >= cutoff]


def filter_by_content(entries: list[Entry], content: ContentFilter) -> list[Entry]:
    """Keep entries that have the requested kind of content."""
    if content is ContentFilter.GRATITUDE:
        return [e for e in entries if e.gratitudes]
    if content is ContentFilter.MEMORY:
        return [e for e in entries if _has_text(e.memory)]
    if content is ContentFilter.ACCOMPLISHMENTS:
        return [e for e in entries if e.accomplishments]
    if content is ContentFilter.JOURNAL:
        return [e for e in entries if _has_text(e.journal)]
    return list(entries)


def sort_entries(entries: list[Entry], order: SortOrder) -> list[Entry]:
    """Sort entries; ties keep their input order."""
    if order is SortOrder.OLDEST:
        return sorted(entries, key=lambda e: e.date)
    if order is SortOrder.WORDS:
        return sorted(entries, key=lambda e: e.word_count, reverse=True)
    return sorted(entries, key=lambda e: e.date, reverse=True)


def filter_entries(
    entries: list[Entry],
    window: DateWindow = DateWindow.ALL,
    content: ContentFilter = ContentFilter.ALL,
    order: SortOrder = SortOrder.NEWEST,
    now: Optional[datetime] = None,
) -> list[Entry]:
    """Apply the date window, then the content filter, then sort."""
    selected = filter_by_window(entries, window, now=now)
    selected = filter_by_content(selected, content)
    return sort_entries(selected, order)


def explore_stats(entries: list[Entry]) -> ExploreStats:
    """Compute aggregate counts for a set of entries."""
    journals = [e for e in entries if _has_text(e.journal)]
    total_words = sum(e.word_count for e in journals)
    return ExploreStats(
        total_entries=len(entries),
        total_gratitudes=sum(len(e.gratitudes) for e in entries),
        memories_count=sum(1 for e in entries if _has_text(e.memory)),
        total_accomplishments=sum(len(e.accomplishments) for e in entries),
        avg_words_per_journal=total_words // len(journals) if journals else 0,
    )


# ==================== Search ====================


def _journal_preview(journal: str, term: str) -> str:
    sentences = _SENTENCE_SPLIT.split(journal)
    match = next((s for s in sentences if term in s.lower()), None)
    preview = (match.strip() if match is not None else journal)[:PREVIEW_LENGTH]
    if len(preview) < len(journal):
        preview += "..."
    return preview


def search_entries(entries: list[Entry], query: str) -> list[SearchResult]:
    """Find case-insensitive matches in every part of every entry.

    Results whose full content equals the query come first, then the
    rest newest first.
    """
    if not query.strip():
        return []

    term = query.lower()
    results: list[SearchResult] = []

    for entry in entries:
        entry_id = str(entry.id)

        for index, gratitude in enumerate(entry.gratitudes):
            if term in gratitude.lower():
                results.append(SearchResult(
                    id=f"{entry_id}-gratitude-{index}",
                    kind="gratitude",
                    entry_id=entry_id,
                    date=entry.date,
                    content=gratitude,
                    preview=gratitude,
                ))

        if entry.memory and term in entry.memory.lower():
            results.append(SearchResult(
                id=f"{entry_id}-memory",
                kind="memory",
                entry_id=entry_id,
                date=entry.date,
                content=entry.memory,
                preview=entry.memory,
            ))

        for index, accomplishment in enumerate(entry.accomplishments):
            if term in accomplishment.lower():
                results.append(SearchResult(
                    id=f"{entry_id}-accomplishment-{index}",
                    kind="accomplishment",
                    entry_id=entry_id,
                    date=entry.date,
                    content=accomplishment,
                    preview=accomplishment,
                ))

        if entry.journal and term in entry.journal.lower():
            results.append(SearchResult(
                id=f"{entry_id}-journal",
                kind="journal",
                entry_id=entry_id,
                date=entry.date,
                content=entry.journal,
                preview=_journal_preview(entry.journal, term),
            ))

    # Two stable passes: newest first, then exact matches to the front
    results.sort(key=lambda r: r.date, reverse=True)
    results.sort(key=lambda r: r.content.lower() != term)
    return results


# ==================== Text digest ====================


def format_long_date(value: date) -> str:
    """Format a date like ``Monday, January 1, 2024``."""
    return f"{value:%A, %B} {value.day}, {value.year}"


def format_entries_text(entries: list[Entry]) -> str:
    """Render entries as a plain-text digest for copying or sharing."""
    parts: list[str] = []
    for entry in entries:
        parts.append(f"=== {format_long_date(entry.date)} ===\n\n")
        if entry.journal:
            parts.append(f"Journal:\n{entry.journal}\n\n")
        if entry.gratitudes:
            bullets = "\n".join(f"• {item}" for item in entry.gratitudes)
            parts.append(f"Gratitude:\n{bullets}\n\n")
        if entry.memory:
            parts.append(f"Memory:\n{entry.memory}\n\n")
        if entry.accomplishments:
            bullets = "\n".join(f"• {item}" for item in entry.accomplishments)
            parts.append(f"Accomplishments:\n{bullets}\n\n")
        parts.append("---\n\n")
    return "".join(parts)
