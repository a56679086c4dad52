"""Data service: export, import and bulk deletion of journal data.

Exports are a versioned JSON envelope holding every entry and todo.
Imports merge by ID: matching records have their content updated in
place, unknown records are inserted with their original IDs and
timestamps. Records are applied one by one and saved once at the end,
so a failing save can leave the import applied in memory only.
"""

import json
import logging
import uuid
from datetime import date, datetime
from pathlib import Path
from typing import Optional, Union

from pydantic import BaseModel, Field, ValidationError

from plume.db.store import JournalStore
from plume.errors import JournalImportError
from plume.models import Entry, ExportDocument, ExportedEntry, ExportedTodo, Todo
from plume.models.export import EXPORT_VERSION, SUPPORTED_VERSIONS

logger = logging.getLogger(__name__)

EXPORT_PREFIX = "plume-export"
EXPORT_SUFFIX = ".json"


class ImportSummary(BaseModel):
    """Counts of records touched by an import."""

    entries_created: int = Field(default=0, ge=0)
    entries_updated: int = Field(default=0, ge=0)
    todos_created: int = Field(default=0, ge=0)
    todos_updated: int = Field(default=0, ge=0)

    @property
    def entries_total(self) -> int:
        return self.entries_created + self.entries_updated

    @property
    def todos_total(self) -> int:
        return self.todos_created + self.todos_updated


def export_filename(today: Optional[date] = None) -> str:
    """Return the export file name for a day, e.g. ``plume-export-2024-05-01.json``."""
    today = today or date.today()
    return f"{EXPORT_PREFIX}-{today.isoformat()}{EXPORT_SUFFIX}"


def parse_record_id(raw: str) -> Optional[uuid.UUID]:
    """Parse an exported ID, returning None when it is not a valid UUID."""
    try:
        return uuid.UUID(raw)
    except (ValueError, AttributeError, TypeError):
        return None


def parse_document(payload: Union[str, bytes]) -> ExportDocument:
    """Parse and validate an export document.

    Args:
        payload: JSON text or UTF-8 bytes.

    Returns:
        The validated document.

    Raises:
        JournalImportError: If the payload is not valid JSON, misses
            required fields or has an unsupported version.
    """
    try:
        raw = json.loads(payload)
    except (json.JSONDecodeError, UnicodeDecodeError) as e:
        raise JournalImportError(f"Export file is not valid JSON: {e}") from e

    if not isinstance(raw, dict):
        raise JournalImportError("Export file must contain a JSON object")

    version = raw.get("version")
    if version not in SUPPORTED_VERSIONS:
        raise JournalImportError(
            f"Unsupported export version: {version!r}. "
            f"Supported: {', '.join(sorted(SUPPORTED_VERSIONS))}"
        )

    try:
        return ExportDocument.model_validate(raw)
    except ValidationError as e:
        raise JournalImportError(f"Export file is malformed: {e}") from e


class DataService:
    """Export and import of the whole journal."""

    def __init__(self, store: JournalStore):
        """Initialize the data service.

        Args:
            store: JournalStore instance to read from and merge into.
        """
        self._store = store
        self.last_export_at: Optional[datetime] = None

    @property
    def store(self) -> JournalStore:
        return self._store

    # ==================== Export ====================

    def build_document(self) -> ExportDocument:
        """Snapshot every entry and todo into an export document."""
        entries = sorted(self._store.all_entries(), key=lambda e: e.date)
        todos = sorted(self._store.all_todos(), key=lambda t: t.date)
        return ExportDocument(
            version=EXPORT_VERSION,
            exported_at=datetime.now(),
            entries=[
                ExportedEntry(
                    id=str(entry.id),
                    date=entry.date,
                    gratitudes=entry.gratitudes,
                    memory=entry.memory,
                    accomplishments=entry.accomplishments,
                    journal=entry.journal,
                    word_count=entry.word_count,
                    created_at=entry.created_at,
                    updated_at=entry.updated_at,
                )
                for entry in entries
            ],
            todos=[
                ExportedTodo(
                    id=str(todo.id),
                    date=todo.date,
                    title=todo.title,
                    completed=todo.completed,
                    created_at=todo.created_at,
                    updated_at=todo.updated_at,
                )
                for todo in todos
            ],
        )

    def export_json(self) -> str:
        """Serialize the journal as pretty-printed JSON."""
        document = self.build_document()
        payload = document.model_dump(mode="json", by_alias=True)
        self.last_export_at = document.exported_at
        return json.dumps(payload, indent=2, sort_keys=True, ensure_ascii=False)

    def export_to_file(self, directory: Path, today: Optional[date] = None) -> Path:
        """Write an export file into a directory.

        Args:
            directory: Target directory, created if missing.
            today: Day used in the file name (defaults to today).

        Returns:
            Path of the written file.
        """
        directory.mkdir(parents=True, exist_ok=True)
        path = directory / export_filename(today)
        path.write_text(self.export_json() + "\n", encoding="utf-8")
        logger.info("Exported journal to %s", path)
        return path

    # ==================== Import ====================

    def import_json(self, payload: Union[str, bytes]) -> ImportSummary:
        """Parse an export document and merge it into the store."""
        return self.import_document(parse_document(payload))

    def import_file(self, path: Path) -> ImportSummary:
        """Read an export file (``.json`` or ``.plume``) and merge it."""
        try:
            payload = path.read_bytes()
        except OSError as e:
            raise JournalImportError(f"Cannot read {path}: {e}") from e
        summary = self.import_json(payload)
        logger.info(
            "Imported %s: %d entries, %d todos", path, summary.entries_total, summary.todos_total
        )
        return summary

    def import_document(self, document: ExportDocument) -> ImportSummary:
        """Merge a parsed document into the store and save.

        Raises:
            PersistenceError: If the final save fails. Records already
                merged stay in memory and unsaved.
        """
        summary = ImportSummary()

        for item in document.entries:
            if self._apply_entry(item):
                summary.entries_updated += 1
            else:
                summary.entries_created += 1

        for item in document.todos:
            if self._apply_todo(item):
                summary.todos_updated += 1
            else:
                summary.todos_created += 1

        self._store.save()
        return summary

    def _apply_entry(self, item: ExportedEntry) -> bool:
        """Merge one exported entry; returns True if an existing entry was updated."""
        entry_id = parse_record_id(item.id)
        existing = self._store.get_entry(entry_id) if entry_id else None

        if existing is not None:
            existing.gratitudes = item.gratitudes
            existing.memory = item.memory
            existing.accomplishments = item.accomplishments
            existing.journal = item.journal
            existing.updated_at = item.updated_at
            return True

        if entry_id is None:
            logger.warning("Entry has invalid id %r, importing with a new id", item.id)
            entry_id = uuid.uuid4()

        same_day = self._store.find_entry_by_day(item.date)
        if same_day is not None:
            logger.warning(
                "Imported entry %s shares %s with existing entry %s",
                entry_id, item.date.date(), same_day.id,
            )

        self._store.insert_entry(Entry(
            id=entry_id,
            date=item.date,
            gratitudes=item.gratitudes,
            memory=item.memory,
            accomplishments=item.accomplishments,
            journal=item.journal,
            created_at=item.created_at,
            updated_at=item.updated_at,
        ))
        return False

    def _apply_todo(self, item: ExportedTodo) -> bool:
        """Merge one exported todo; returns True if an existing todo was updated."""
        todo_id = parse_record_id(item.id)
        existing = self._store.get_todo(todo_id) if todo_id else None

        if existing is not None:
            existing.title = item.title
            existing.completed = item.completed
            existing.updated_at = item.updated_at
            return True

        if todo_id is None:
            logger.warning("Todo has invalid id %r, importing with a new id", item.id)
            todo_id = uuid.uuid4()

        self._store.insert_todo(Todo(
            id=todo_id,
            date=item.date,
            title=item.title,
            completed=item.completed,
            created_at=item.created_at,
            updated_at=item.updated_at,
        ))
        return False

    # ==================== Deletion ====================

    def delete_all_data(self) -> bool:
        """Delete every entry and todo; failures are logged, not raised."""
        return self._store.delete_all()
