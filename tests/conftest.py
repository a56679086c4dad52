"""Shared fixtures for Plume tests."""

import tempfile
from pathlib import Path

import pytest

from plume.db.store import JournalStore


@pytest.fixture
def temp_db_path():
    """Path to a database file inside a temporary directory."""
    with tempfile.TemporaryDirectory() as tmpdir:
        yield Path(tmpdir) / "test.db"


@pytest.fixture
def temp_store(temp_db_path: Path) -> JournalStore:
    """Create a fresh store backed by a temporary database."""
    return JournalStore(temp_db_path)
