"""Journal service: entry and todo operations over the store."""

import logging
import uuid
from datetime import date, datetime, timedelta
from typing import Optional

from plume.db.store import JournalStore
from plume.models import Entry, Todo
from plume.models.entry import coerce_datetime, require_text
from plume.stats.engine import calculate_streak, total_word_count

logger = logging.getLogger(__name__)


class JournalService:
    """Entry and todo operations for the presentation layer.

    Writes stay in memory until :meth:`save` is called.
    """

    def __init__(self, store: JournalStore):
        """Initialize the journal service.

        Args:
            store: JournalStore instance for persistence.
        """
        self._store = store

    @property
    def store(self) -> JournalStore:
        return self._store

    def save(self) -> None:
        """Persist pending changes (raises PersistenceError on failure)."""
        self._store.save()

    # ==================== Entries ====================

    def get_entry(self, day: date) -> Optional[Entry]:
        """Look up the entry for a day without creating one."""
        return self._store.find_entry_by_day(day)

    def create_entry(self, day: date) -> Entry:
        """Create and track a new, empty entry for a day.

        Does not check for an existing entry; use :meth:`ensure_entry`
        to keep one entry per day.
        """
        entry = Entry(date=coerce_datetime(day))
        self._store.insert_entry(entry)
        logger.debug("Created entry %s for %s", entry.id, entry.day)
        return entry

    def ensure_entry(self, day: date) -> Entry:
        """Return the entry for a day, creating an empty one if missing."""
        entry = self.get_entry(day)
        if entry is None:
            entry = self.create_entry(day)
        return entry

    def delete_entry(self, entry: Entry) -> None:
        self._store.delete(entry)

    def add_gratitude(self, day: date, text: str) -> Entry:
        entry = self.ensure_entry(day)
        entry.add_gratitude(text)
        return entry

    def add_accomplishment(self, day: date, text: str) -> Entry:
        entry = self.ensure_entry(day)
        entry.add_accomplishment(text)
        return entry

    def set_memory(self, day: date, text: Optional[str]) -> Entry:
        """Set or clear (blank text) the memory of a day."""
        entry = self.ensure_entry(day)
        entry.memory = text.strip() if text and text.strip() else None
        return entry

    def set_journal(self, day: date, text: Optional[str]) -> Entry:
        """Set or clear (blank text) the journal of a day."""
        entry = self.ensure_entry(day)
        entry.journal = text if text and text.strip() else None
        return entry

    # ==================== Todos ====================

    def add_todo(self, title: str, day: Optional[date] = None) -> Todo:
        """Create a todo.

        Args:
            title: Task title; surrounding whitespace is removed.
            day: Due day, defaults to now.

        Raises:
            BlankTextError: If the title is empty after trimming.
        """
        todo = Todo(
            title=require_text(title, "Todo title"),
            date=coerce_datetime(day) if day else datetime.now(),
        )
        self._store.insert_todo(todo)
        return todo

    def find_todo(self, id_prefix: str) -> Optional[Todo]:
        """Find a todo by full ID or unique ID prefix."""
        prefix = id_prefix.strip().lower()
        if not prefix:
            return None
        try:
            return self._store.get_todo(uuid.UUID(prefix))
        except ValueError:
            pass
        matches = [t for t in self._store.all_todos() if str(t.id).startswith(prefix)]
        return matches[0] if len(matches) == 1 else None

    def toggle_todo(self, todo: Todo) -> Todo:
        todo.completed = not todo.completed
        return todo

    def rename_todo(self, todo: Todo, title: str) -> Todo:
        todo.title = require_text(title, "Todo title")
        return todo

    def move_todo(self, todo: Todo, day: date) -> Todo:
        todo.date = coerce_datetime(day)
        return todo

    def move_to_today(self, todo: Todo) -> Todo:
        todo.date = datetime.now()
        return todo

    def move_to_tomorrow(self, todo: Todo) -> Todo:
        todo.date = datetime.now() + timedelta(days=1)
        return todo

    def delete_todo(self, todo: Todo) -> None:
        self._store.delete(todo)

    # ==================== Statistics ====================

    def streak(self, today: Optional[date] = None) -> int:
        """Current writing streak in days."""
        return calculate_streak(self._store.all_entries(), today=today)

    def total_word_count(self) -> int:
        return total_word_count(self._store.all_entries())
