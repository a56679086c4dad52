"""Application services wired around a JournalStore."""

from plume.services.data import DataService, ImportSummary, export_filename, parse_document
from plume.services.journal import JournalService
from plume.services.quotes import Quote, QuoteService

__all__ = [
    "DataService",
    "ImportSummary",
    "JournalService",
    "Quote",
    "QuoteService",
    "export_filename",
    "parse_document",
]
