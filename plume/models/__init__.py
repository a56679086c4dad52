"""Data models for Plume."""

from plume.models.entry import Entry, count_words, start_of_day
from plume.models.todo import Todo
from plume.models.section import ListSection, Section, TextSection, entry_sections
from plume.models.export import ExportDocument, ExportedEntry, ExportedTodo

__all__ = [
    "Entry",
    "Todo",
    "Section",
    "ListSection",
    "TextSection",
    "ExportDocument",
    "ExportedEntry",
    "ExportedTodo",
    "count_words",
    "entry_sections",
    "start_of_day",
]
