"""SQLite data store for Plume."""

import json
import logging
import sqlite3
import uuid
from datetime import date, datetime, timedelta
from pathlib import Path
from typing import Optional, Union

from plume.errors import PersistenceError
from plume.models import Entry, Todo, start_of_day

logger = logging.getLogger(__name__)


class JournalStore:
    """SQLite-backed repository for entries and todos.

    Rows are loaded once into an identity map, so every lookup returns the
    same live object. Inserts, deletes and in-place edits stay in memory
    until :meth:`save` writes them in a single transaction. A failed save
    leaves the changes pending so it can be retried.

    The store is not thread-safe; give it a single owner.
    """

    REQUIRED_TABLES = [
        "entries",
        "todos",
    ]

    def __init__(self, db_path: Path):
        """Initialize the store.

        Args:
            db_path: Path to the SQLite database file.
        """
        self.db_path = db_path
        self._entries: dict[uuid.UUID, Entry] = {}
        self._todos: dict[uuid.UUID, Todo] = {}
        self._snapshots: dict[uuid.UUID, dict] = {}
        self._deleted_entries: set[uuid.UUID] = set()
        self._deleted_todos: set[uuid.UUID] = set()
        self._loaded = False
        self._ensure_db_dir()
        self._init_schema()

    def _ensure_db_dir(self) -> None:
        """Ensure the database directory exists."""
        self.db_path.parent.mkdir(parents=True, exist_ok=True)

    def _get_connection(self) -> sqlite3.Connection:
        """Get a database connection."""
        conn = sqlite3.connect(self.db_path)
        conn.row_factory = sqlite3.Row
        return conn

    def _init_schema(self) -> None:
        """Initialize database schema on first run."""
        try:
            conn = self._get_connection()
        except sqlite3.Error as e:
            raise PersistenceError(f"Cannot open database {self.db_path}: {e}") from e
        try:
            cursor = conn.cursor()

            # Entries table, list fields stored as JSON arrays
            cursor.execute("""
                CREATE TABLE IF NOT EXISTS entries (
                    id TEXT PRIMARY KEY,
                    date TEXT NOT NULL,
                    gratitudes TEXT NOT NULL DEFAULT '[]',
                    memory TEXT,
                    accomplishments TEXT NOT NULL DEFAULT '[]',
                    journal TEXT,
                    word_count INTEGER NOT NULL DEFAULT 0,
                    created_at TEXT NOT NULL,
                    updated_at TEXT NOT NULL
                )
            """)
            cursor.execute("CREATE INDEX IF NOT EXISTS idx_entries_date ON entries(date)")

            # Todos table
            cursor.execute("""
                CREATE TABLE IF NOT EXISTS todos (
                    id TEXT PRIMARY KEY,
                    date TEXT NOT NULL,
                    title TEXT NOT NULL,
                    completed INTEGER NOT NULL DEFAULT 0,
                    created_at TEXT NOT NULL,
                    updated_at TEXT NOT NULL
                )
            """)
            cursor.execute("CREATE INDEX IF NOT EXISTS idx_todos_date ON todos(date)")

            conn.commit()
        except sqlite3.Error as e:
            raise PersistenceError(f"Cannot initialize schema in {self.db_path}: {e}") from e
        finally:
            conn.close()

    def get_tables(self) -> list[str]:
        """Get list of all tables in the database."""
        conn = self._get_connection()
        try:
            cursor = conn.cursor()
            cursor.execute(
                "SELECT name FROM sqlite_master WHERE type='table' AND name NOT LIKE 'sqlite_%'"
            )
            return [row["name"] for row in cursor.fetchall()]
        finally:
            conn.close()

    # ==================== Loading ====================

    def _load(self) -> None:
        """Load every row into the identity map on first access."""
        if self._loaded:
            return
        try:
            conn = self._get_connection()
            try:
                cursor = conn.cursor()
                cursor.execute(
                    """
                    SELECT id, date, gratitudes, memory, accomplishments, journal,
                           created_at, updated_at
                    FROM entries
                    ORDER BY created_at
                    """
                )
                entry_rows = cursor.fetchall()
                cursor.execute(
                    """
                    SELECT id, date, title, completed, created_at, updated_at
                    FROM todos
                    ORDER BY created_at
                    """
                )
                todo_rows = cursor.fetchall()
            finally:
                conn.close()
        except sqlite3.Error as e:
            raise PersistenceError(f"Failed to load journal: {e}") from e

        for row in entry_rows:
            entry = Entry(
                id=uuid.UUID(row["id"]),
                date=datetime.fromisoformat(row["date"]),
                gratitudes=json.loads(row["gratitudes"]),
                memory=row["memory"],
                accomplishments=json.loads(row["accomplishments"]),
                journal=row["journal"],
                created_at=datetime.fromisoformat(row["created_at"]),
                updated_at=datetime.fromisoformat(row["updated_at"]),
            )
            self._entries[entry.id] = entry
            self._snapshots[entry.id] = entry.model_dump()

        for row in todo_rows:
            todo = Todo(
                id=uuid.UUID(row["id"]),
                date=datetime.fromisoformat(row["date"]),
                title=row["title"],
                completed=bool(row["completed"]),
                created_at=datetime.fromisoformat(row["created_at"]),
                updated_at=datetime.fromisoformat(row["updated_at"]),
            )
            self._todos[todo.id] = todo
            self._snapshots[todo.id] = todo.model_dump()

        self._loaded = True
        logger.debug("Loaded %d entries and %d todos", len(self._entries), len(self._todos))

    # ==================== Entries ====================

    def find_entry_by_day(self, day: date) -> Optional[Entry]:
        """Find the entry whose date falls on the given day.

        Args:
            day: Any date or datetime within the wanted day.

        Returns:
            The entry if found, None otherwise. When several entries share
            a day the earliest one wins.
        """
        self._load()
        start = start_of_day(day)
        end = start + timedelta(days=1)
        matches = [e for e in self._entries.values() if start <= e.date < end]
        if not matches:
            return None
        return min(matches, key=lambda e: (e.date, e.created_at))

    def get_entry(self, entry_id: uuid.UUID) -> Optional[Entry]:
        """Get an entry by ID."""
        self._load()
        return self._entries.get(entry_id)

    def all_entries(self) -> list[Entry]:
        """Get all entries in load/insertion order."""
        self._load()
        return list(self._entries.values())

    def insert_entry(self, entry: Entry) -> None:
        """Track a new entry; it is written on the next save."""
        self._load()
        self._entries[entry.id] = entry
        self._deleted_entries.discard(entry.id)

    # ==================== Todos ====================

    def get_todo(self, todo_id: uuid.UUID) -> Optional[Todo]:
        """Get a todo by ID."""
        self._load()
        return self._todos.get(todo_id)

    def all_todos(self) -> list[Todo]:
        """Get all todos in load/insertion order."""
        self._load()
        return list(self._todos.values())

    def todos_for_day(self, day: date) -> list[Todo]:
        """Get the todos due on the given day, oldest first."""
        self._load()
        target = start_of_day(day).date()
        todos = [t for t in self._todos.values() if t.day == target]
        return sorted(todos, key=lambda t: t.created_at)

    def insert_todo(self, todo: Todo) -> None:
        """Track a new todo; it is written on the next save."""
        self._load()
        self._todos[todo.id] = todo
        self._deleted_todos.discard(todo.id)

    # ==================== Deletion ====================

    def delete(self, item: Union[Entry, Todo]) -> None:
        """Remove an entry or todo; the row is deleted on the next save."""
        self._load()
        if isinstance(item, Entry):
            if self._entries.pop(item.id, None) is not None:
                self._deleted_entries.add(item.id)
        else:
            if self._todos.pop(item.id, None) is not None:
                self._deleted_todos.add(item.id)

    def delete_all(self) -> bool:
        """Delete every entry and todo immediately.

        Failure is not fatal: it is logged and the in-memory state is left
        untouched.

        Returns:
            True if the rows were deleted, False otherwise.
        """
        try:
            conn = self._get_connection()
            try:
                with conn:
                    conn.execute("DELETE FROM entries")
                    conn.execute("DELETE FROM todos")
            finally:
                conn.close()
        except sqlite3.Error as e:
            logger.error("Delete all failed: %s", e)
            return False

        self._entries.clear()
        self._todos.clear()
        self._snapshots.clear()
        self._deleted_entries.clear()
        self._deleted_todos.clear()
        self._loaded = True
        logger.info("Deleted all journal data in %s", self.db_path)
        return True

    # ==================== Persistence ====================

    def _dirty(self) -> tuple[list[Entry], list[Todo]]:
        """Return tracked objects that differ from their persisted state."""
        entries = [
            e for e in self._entries.values() if self._snapshots.get(e.id) != e.model_dump()
        ]
        todos = [
            t for t in self._todos.values() if self._snapshots.get(t.id) != t.model_dump()
        ]
        return entries, todos

    @property
    def has_changes(self) -> bool:
        """Whether there are unsaved inserts, deletes or edits."""
        if not self._loaded:
            return False
        entries, todos = self._dirty()
        return bool(entries or todos or self._deleted_entries or self._deleted_todos)

    def save(self) -> None:
        """Write pending changes to disk in one transaction.

        Raises:
            PersistenceError: If the database cannot be written. Pending
                changes are kept so the caller can retry.
        """
        if not self._loaded:
            return
        entries, todos = self._dirty()
        try:
            conn = self._get_connection()
            try:
                with conn:
                    conn.executemany(
                        "DELETE FROM entries WHERE id = ?",
                        [(str(i),) for i in self._deleted_entries],
                    )
                    conn.executemany(
                        "DELETE FROM todos WHERE id = ?",
                        [(str(i),) for i in self._deleted_todos],
                    )
                    conn.executemany(
                        """
                        INSERT OR REPLACE INTO entries
                        (id, date, gratitudes, memory, accomplishments, journal,
                         word_count, created_at, updated_at)
                        VALUES (?, ?, ?, ?, ?, ?, ?, ?, ?)
                        """,
                        [
                            (
                                str(e.id),
                                e.date.isoformat(),
                                json.dumps(e.gratitudes, ensure_ascii=False),
                                e.memory,
                                json.dumps(e.accomplishments, ensure_ascii=False),
                                e.journal,
                                e.word_count,
                                e.created_at.isoformat(),
                                e.updated_at.isoformat(),
                            )
                            for e in entries
                        ],
                    )
                    conn.executemany(
                        """
                        INSERT OR REPLACE INTO todos
                        (id, date, title, completed, created_at, updated_at)
                        VALUES (?, ?, ?, ?, ?, ?)
                        """,
                        [
                            (
                                str(t.id),
                                t.date.isoformat(),
                                t.title,
                                1 if t.completed else 0,
                                t.created_at.isoformat(),
                                t.updated_at.isoformat(),
                            )
                            for t in todos
                        ],
                    )
            finally:
                conn.close()
        except sqlite3.Error as e:
            logger.error("Save failed: %s", e)
            raise PersistenceError(f"Failed to save journal: {e}") from e

        for item in [*entries, *todos]:
            self._snapshots[item.id] = item.model_dump()
        for item_id in self._deleted_entries | self._deleted_todos:
            self._snapshots.pop(item_id, None)
        self._deleted_entries.clear()
        self._deleted_todos.clear()
        logger.info("Saved %d entries and %d todos", len(entries), len(todos))

    # ==================== Stats ====================

    def counts(self) -> dict:
        """Get record counts.

        Returns:
            Dictionary with the number of entries and todos.
        """
        self._load()
        return {"entries": len(self._entries), "todos": len(self._todos)}
