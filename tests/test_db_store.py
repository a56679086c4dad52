"""Tests for the SQLite journal store.

**Feature: plume-journal**
"""

import logging
import sqlite3
import tempfile
from datetime import date, datetime
from pathlib import Path

import pytest
from hypothesis import given, settings
from hypothesis import strategies as st

from plume.db.store import JournalStore
from plume.errors import PersistenceError
from plume.models import Entry, Todo

item_text = st.text(
    alphabet=st.characters(blacklist_categories=("Cs", "Cc")),
    min_size=1,
    max_size=40,
)


def _broken_connection():
    raise sqlite3.OperationalError("disk I/O error")


class TestSchema:
    def test_tables_created(self, temp_store: JournalStore):
        tables = temp_store.get_tables()
        for table in JournalStore.REQUIRED_TABLES:
            assert table in tables

    def test_creates_missing_directory(self):
        with tempfile.TemporaryDirectory() as tmpdir:
            db_path = Path(tmpdir) / "nested" / "dir" / "plume.db"
            JournalStore(db_path)
            assert db_path.exists()

    def test_reopen_is_idempotent(self, temp_db_path: Path):
        JournalStore(temp_db_path)
        store = JournalStore(temp_db_path)
        assert store.counts() == {"entries": 0, "todos": 0}


class TestEntryPersistence:
    """
    **Feature: plume-journal, Property 4: Saved Entries Reload Unchanged**

    *For any* entry content, saving and reopening the database yields
    an entry with identical fields.
    """

    @given(
        gratitudes=st.lists(item_text, max_size=5),
        accomplishments=st.lists(item_text, max_size=5),
        memory=st.one_of(st.none(), item_text),
        journal=st.one_of(st.none(), item_text),
    )
    @settings(max_examples=30, deadline=None)
    def test_entry_roundtrip(self, gratitudes, accomplishments, memory, journal):
        with tempfile.TemporaryDirectory() as tmpdir:
            db_path = Path(tmpdir) / "test.db"
            store = JournalStore(db_path)
            entry = Entry(
                date=datetime(2024, 3, 5, 9, 30),
                gratitudes=gratitudes,
                accomplishments=accomplishments,
                memory=memory,
                journal=journal,
            )
            store.insert_entry(entry)
            store.save()

            loaded = JournalStore(db_path).get_entry(entry.id)
            assert loaded is not None
            assert loaded.model_dump() == entry.model_dump()

    def test_unsaved_changes_not_on_disk(self, temp_db_path: Path):
        store = JournalStore(temp_db_path)
        store.insert_entry(Entry(journal="draft"))
        assert store.has_changes

        assert JournalStore(temp_db_path).all_entries() == []

    def test_in_place_edit_is_saved(self, temp_db_path: Path):
        store = JournalStore(temp_db_path)
        entry = Entry(date=datetime(2024, 1, 1))
        store.insert_entry(entry)
        store.save()
        assert not store.has_changes

        entry.add_gratitude("Coffee")
        assert store.has_changes
        store.save()
        assert not store.has_changes

        reloaded = JournalStore(temp_db_path).get_entry(entry.id)
        assert reloaded.gratitudes == ["Coffee"]

    def test_identity_map_returns_same_object(self, temp_store: JournalStore):
        entry = Entry()
        temp_store.insert_entry(entry)
        assert temp_store.get_entry(entry.id) is entry
        assert temp_store.find_entry_by_day(entry.date) is entry


class TestFindByDay:
    def test_matches_any_time_of_day(self, temp_store: JournalStore):
        entry = Entry(date=datetime(2024, 3, 5, 23, 30))
        temp_store.insert_entry(entry)

        assert temp_store.find_entry_by_day(date(2024, 3, 5)) is entry
        assert temp_store.find_entry_by_day(datetime(2024, 3, 5, 0, 1)) is entry
        assert temp_store.find_entry_by_day(date(2024, 3, 6)) is None
        assert temp_store.find_entry_by_day(date(2024, 3, 4)) is None

    def test_earliest_entry_wins(self, temp_store: JournalStore):
        later = Entry(date=datetime(2024, 3, 5, 18, 0))
        earlier = Entry(date=datetime(2024, 3, 5, 7, 0))
        temp_store.insert_entry(later)
        temp_store.insert_entry(earlier)

        assert temp_store.find_entry_by_day(date(2024, 3, 5)) is earlier


class TestTodos:
    def test_todo_roundtrip(self, temp_db_path: Path):
        store = JournalStore(temp_db_path)
        todo = Todo(title="Water plants", date=datetime(2024, 4, 2, 10, 0), completed=True)
        store.insert_todo(todo)
        store.save()

        loaded = JournalStore(temp_db_path).get_todo(todo.id)
        assert loaded.model_dump() == todo.model_dump()

    def test_todos_for_day(self, temp_store: JournalStore):
        first = Todo(title="a", date=datetime(2024, 4, 2, 9, 0), created_at=datetime(2024, 4, 1, 8, 0))
        second = Todo(title="b", date=datetime(2024, 4, 2, 7, 0), created_at=datetime(2024, 4, 1, 9, 0))
        other = Todo(title="c", date=datetime(2024, 4, 3, 9, 0))
        for todo in (second, other, first):
            temp_store.insert_todo(todo)

        assert temp_store.todos_for_day(date(2024, 4, 2)) == [first, second]


class TestDeletion:
    def test_delete_is_applied_on_save(self, temp_db_path: Path):
        store = JournalStore(temp_db_path)
        entry = Entry()
        todo = Todo(title="x")
        store.insert_entry(entry)
        store.insert_todo(todo)
        store.save()

        store.delete(entry)
        store.delete(todo)
        assert store.get_entry(entry.id) is None
        assert store.has_changes
        assert JournalStore(temp_db_path).counts() == {"entries": 1, "todos": 1}

        store.save()
        assert JournalStore(temp_db_path).counts() == {"entries": 0, "todos": 0}

    def test_delete_all(self, temp_db_path: Path):
        store = JournalStore(temp_db_path)
        store.insert_entry(Entry())
        store.insert_todo(Todo(title="x"))
        store.save()

        assert store.delete_all() is True
        assert store.all_entries() == []
        assert store.all_todos() == []
        assert not store.has_changes
        assert JournalStore(temp_db_path).counts() == {"entries": 0, "todos": 0}

    def test_delete_all_failure_is_logged(self, temp_store: JournalStore, monkeypatch, caplog):
        temp_store.insert_entry(Entry())
        temp_store.save()
        monkeypatch.setattr(temp_store, "_get_connection", _broken_connection)

        with caplog.at_level(logging.ERROR, logger="plume.db.store"):
            assert temp_store.delete_all() is False

        assert len(temp_store.all_entries()) == 1
        assert "Delete all failed" in caplog.text


class TestSaveFailure:
    """
    **Feature: plume-journal, Property 5: Failed Save Keeps Pending Changes**

    A save that cannot write raises PersistenceError and leaves every
    pending change in place for a retry.
    """

    def test_save_failure_keeps_changes(self, temp_db_path: Path, monkeypatch):
        store = JournalStore(temp_db_path)
        store.all_entries()
        entry = Entry(journal="keep me")
        store.insert_entry(entry)

        original = store._get_connection
        monkeypatch.setattr(store, "_get_connection", _broken_connection)
        with pytest.raises(PersistenceError):
            store.save()
        assert store.has_changes
        assert store.get_entry(entry.id) is entry

        monkeypatch.setattr(store, "_get_connection", original)
        store.save()
        assert not store.has_changes
        assert JournalStore(temp_db_path).get_entry(entry.id).journal == "keep me"

    def test_save_without_load_is_noop(self, temp_store: JournalStore, monkeypatch):
        monkeypatch.setattr(temp_store, "_get_connection", _broken_connection)
        temp_store.save()
        assert not temp_store.has_changes
