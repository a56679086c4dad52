"""Tests for export and import.

**Feature: plume-journal**
"""

import json
import sqlite3
import tempfile
import uuid
from datetime import date, datetime
from pathlib import Path

import pytest
from hypothesis import given, settings
from hypothesis import strategies as st

from plume.db.store import JournalStore
from plume.errors import JournalImportError, PersistenceError
from plume.models import Entry, Todo
from plume.services.data import DataService, export_filename, parse_document

item_text = st.text(
    alphabet=st.characters(blacklist_categories=("Cs", "Cc")),
    min_size=1,
    max_size=30,
)


@pytest.fixture
def data_service(temp_store: JournalStore) -> DataService:
    return DataService(temp_store)


def _seed(store: JournalStore) -> tuple[Entry, Todo]:
    entry = Entry(
        date=datetime(2024, 3, 5, 9, 30),
        gratitudes=["Coffee", "Café au lait"],
        memory="Snow in March",
        accomplishments=["Filed taxes"],
        journal="A long and quiet day.",
        created_at=datetime(2024, 3, 5, 9, 30, 0, 123456),
        updated_at=datetime(2024, 3, 5, 21, 0),
    )
    todo = Todo(
        title="Renew passport",
        date=datetime(2024, 3, 6, 10, 0),
        completed=True,
        created_at=datetime(2024, 3, 1, 8, 0),
        updated_at=datetime(2024, 3, 6, 11, 0),
    )
    store.insert_entry(entry)
    store.insert_todo(todo)
    store.save()
    return entry, todo


def _document(entries=(), todos=(), version="1.0") -> str:
    return json.dumps({
        "version": version,
        "exportedAt": "2024-06-01T10:00:00",
        "entries": list(entries),
        "todos": list(todos),
    })


def _entry_payload(**overrides) -> dict:
    payload = {
        "id": str(uuid.uuid4()),
        "date": "2024-05-01T08:00:00",
        "gratitudes": ["Birds"],
        "memory": None,
        "accomplishments": [],
        "journal": "Spring is here",
        "wordCount": 3,
        "createdAt": "2024-05-01T08:00:00",
        "updatedAt": "2024-05-01T09:00:00",
    }
    payload.update(overrides)
    return payload


class TestExport:
    def test_document_layout(self, data_service: DataService):
        entry, todo = _seed(data_service.store)
        raw = json.loads(data_service.export_json())

        assert raw["version"] == "1.0"
        assert "exportedAt" in raw
        [exported] = raw["entries"]
        assert exported["id"] == str(entry.id)
        assert exported["wordCount"] == 5
        assert exported["gratitudes"] == ["Coffee", "Café au lait"]
        assert {"createdAt", "updatedAt", "date"} <= set(exported)
        [exported_todo] = raw["todos"]
        assert exported_todo["title"] == "Renew passport"
        assert exported_todo["completed"] is True
        assert data_service.last_export_at is not None

    def test_pretty_printed_sorted_keys(self, data_service: DataService):
        _seed(data_service.store)
        text = data_service.export_json()

        assert "\n  " in text
        assert "Café" in text
        assert list(json.loads(text)) == sorted(json.loads(text))

    def test_timestamps_carry_offset(self, data_service: DataService):
        _seed(data_service.store)
        raw = json.loads(data_service.export_json())
        created = datetime.fromisoformat(raw["entries"][0]["createdAt"])
        assert created.tzinfo is not None

    def test_export_to_file(self, data_service: DataService):
        _seed(data_service.store)
        with tempfile.TemporaryDirectory() as tmpdir:
            path = data_service.export_to_file(Path(tmpdir) / "backups", today=date(2024, 5, 1))

            assert path.name == "plume-export-2024-05-01.json"
            assert json.loads(path.read_text(encoding="utf-8"))["version"] == "1.0"

    def test_export_filename(self):
        assert export_filename(date(2023, 12, 31)) == "plume-export-2023-12-31.json"


class TestRoundTrip:
    """
    **Feature: plume-journal, Property 16: Export Then Import Restores Data**

    *For any* journal, exporting, deleting everything and importing
    restores every entry and todo field for field.
    """

    def test_roundtrip_after_delete_all(self, data_service: DataService):
        entry, todo = _seed(data_service.store)
        before_entry = entry.model_dump()
        before_todo = todo.model_dump()
        payload = data_service.export_json()

        assert data_service.delete_all_data() is True
        summary = data_service.import_json(payload)

        assert summary.entries_created == 1
        assert summary.todos_created == 1
        reloaded = JournalStore(data_service.store.db_path)
        assert reloaded.get_entry(entry.id).model_dump() == before_entry
        assert reloaded.get_todo(todo.id).model_dump() == before_todo

    @given(
        gratitudes=st.lists(item_text, max_size=4),
        journal=st.one_of(st.none(), item_text),
        completed=st.booleans(),
    )
    @settings(max_examples=25, deadline=None)
    def test_roundtrip_into_new_store(self, gratitudes, journal, completed):
        with tempfile.TemporaryDirectory() as tmpdir:
            source = JournalStore(Path(tmpdir) / "source.db")
            entry = Entry(date=datetime(2024, 1, 2, 7, 0), gratitudes=gratitudes, journal=journal)
            todo = Todo(title="t", completed=completed)
            source.insert_entry(entry)
            source.insert_todo(todo)
            source.save()

            target = DataService(JournalStore(Path(tmpdir) / "target.db"))
            target.import_json(DataService(source).export_json())

            assert target.store.get_entry(entry.id).model_dump() == entry.model_dump()
            assert target.store.get_todo(todo.id).model_dump() == todo.model_dump()


class TestMerge:
    """
    **Feature: plume-journal, Property 17: Import Merges By ID**

    Known IDs have their content replaced while date and created_at
    stay; unknown IDs are inserted as they are.
    """

    def test_existing_entry_updated(self, data_service: DataService):
        entry, _ = _seed(data_service.store)
        payload = _document(entries=[_entry_payload(
            id=str(entry.id),
            date="2020-01-01T00:00:00",
            gratitudes=["Replaced"],
            memory="New memory",
            accomplishments=[],
            journal="Only three words",
            createdAt="2020-01-01T00:00:00",
            updatedAt="2024-07-01T12:00:00",
        )])

        summary = data_service.import_json(payload)

        assert summary.entries_updated == 1
        assert summary.entries_created == 0
        merged = data_service.store.get_entry(entry.id)
        assert merged is entry
        assert merged.gratitudes == ["Replaced"]
        assert merged.memory == "New memory"
        assert merged.accomplishments == []
        assert merged.word_count == 3
        assert merged.date == datetime(2024, 3, 5, 9, 30)
        assert merged.created_at == datetime(2024, 3, 5, 9, 30, 0, 123456)
        assert merged.updated_at == datetime(2024, 7, 1, 12, 0)
        assert not data_service.store.has_changes

    def test_existing_todo_updated(self, data_service: DataService):
        _, todo = _seed(data_service.store)
        payload = _document(todos=[{
            "id": str(todo.id),
            "date": "2030-01-01T00:00:00",
            "title": "Renew passport and visa",
            "completed": False,
            "createdAt": "2030-01-01T00:00:00",
            "updatedAt": "2024-07-01T12:00:00",
        }])

        summary = data_service.import_json(payload)

        assert summary.todos_updated == 1
        assert todo.title == "Renew passport and visa"
        assert not todo.completed
        assert todo.date == datetime(2024, 3, 6, 10, 0)

    def test_new_entry_keeps_id_and_timestamps(self, data_service: DataService):
        record = _entry_payload()
        data_service.import_json(_document(entries=[record]))

        imported = data_service.store.get_entry(uuid.UUID(record["id"]))
        assert imported.date == datetime(2024, 5, 1, 8, 0)
        assert imported.created_at == datetime(2024, 5, 1, 8, 0)
        assert imported.updated_at == datetime(2024, 5, 1, 9, 0)
        assert imported.word_count == 3

    def test_word_count_recomputed(self, data_service: DataService):
        record = _entry_payload(journal="one two", wordCount=99)
        data_service.import_json(_document(entries=[record]))
        assert data_service.store.get_entry(uuid.UUID(record["id"])).word_count == 2

    def test_invalid_id_gets_new_id(self, data_service: DataService, caplog):
        data_service.import_json(_document(entries=[_entry_payload(id="not-a-uuid")]))

        [imported] = data_service.store.all_entries()
        assert isinstance(imported.id, uuid.UUID)
        assert "invalid id" in caplog.text

    def test_same_day_entry_is_added_with_warning(self, data_service: DataService, caplog):
        _seed(data_service.store)
        data_service.import_json(_document(entries=[_entry_payload(date="2024-03-05T18:00:00")]))

        assert len(data_service.store.all_entries()) == 2
        assert "shares" in caplog.text

    def test_legacy_export_date_key(self, data_service: DataService):
        payload = json.dumps({
            "version": "1.0",
            "exportDate": "2024-06-01T10:00:00Z",
            "entries": [_entry_payload()],
            "todos": [],
        })
        summary = data_service.import_json(payload)
        assert summary.entries_created == 1

    def test_utc_timestamps_become_local(self, data_service: DataService):
        record = _entry_payload(
            date="2024-05-01T08:00:00Z",
            createdAt="2024-05-01T08:00:00+00:00",
        )
        data_service.import_json(_document(entries=[record]))

        imported = data_service.store.get_entry(uuid.UUID(record["id"]))
        assert imported.date.tzinfo is None
        assert imported.created_at.tzinfo is None

    def test_import_file_with_plume_extension(self, data_service: DataService):
        with tempfile.TemporaryDirectory() as tmpdir:
            path = Path(tmpdir) / "backup.plume"
            path.write_text(_document(entries=[_entry_payload()]), encoding="utf-8")

            summary = data_service.import_file(path)
            assert summary.entries_total == 1


class TestImportErrors:
    """
    **Feature: plume-journal, Property 18: Rejected Imports Change Nothing**
    """

    @pytest.mark.parametrize(
        "payload",
        [
            "{not json",
            "[]",
            _document(version="2.0"),
            json.dumps({"entries": [], "todos": []}),
            _document(entries=[{"id": "x", "date": "2024-01-01T00:00:00"}]),
            _document(entries=[_entry_payload(date="yesterday")]),
            json.dumps({"version": "1.0"}),
            json.dumps({"version": "1.0", "exportedAt": "2024-06-01T10:00:00", "entries": []}),
            json.dumps({"version": "1.0", "entries": [], "todos": []}),
            _document(entries=[{
                "id": str(uuid.uuid4()),
                "date": "2024-05-01T08:00:00",
                "createdAt": "2024-05-01T08:00:00",
                "updatedAt": "2024-05-01T09:00:00",
            }]),
            _document(todos=[{
                "id": str(uuid.uuid4()),
                "date": "2024-05-01T08:00:00",
                "title": "No completed flag",
                "createdAt": "2024-05-01T08:00:00",
                "updatedAt": "2024-05-01T09:00:00",
            }]),
        ],
    )
    def test_rejected(self, data_service: DataService, payload: str):
        _seed(data_service.store)

        with pytest.raises(JournalImportError):
            data_service.import_json(payload)

        assert data_service.store.counts() == {"entries": 1, "todos": 1}
        assert not data_service.store.has_changes

    def test_unsupported_version_message(self):
        with pytest.raises(JournalImportError, match="Unsupported export version"):
            parse_document(_document(version="0.9"))

    def test_missing_file(self, data_service: DataService):
        with pytest.raises(JournalImportError):
            data_service.import_file(Path("/nonexistent/plume-export.json"))

    def test_save_failure_keeps_merged_records(self, data_service: DataService, monkeypatch):
        data_service.store.all_entries()

        def broken():
            raise sqlite3.OperationalError("database is locked")

        monkeypatch.setattr(data_service.store, "_get_connection", broken)
        record = _entry_payload()

        with pytest.raises(PersistenceError):
            data_service.import_json(_document(entries=[record]))

        assert data_service.store.get_entry(uuid.UUID(record["id"])) is not None
        assert data_service.store.has_changes
