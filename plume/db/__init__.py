"""Persistence layer for Plume."""

from plume.db.store import JournalStore

__all__ = ["JournalStore"]
