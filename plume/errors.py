"""Exception types raised by Plume."""


class PlumeError(Exception):
    """Base class for all Plume errors."""


class PersistenceError(PlumeError):
    """Raised when the journal database cannot be read or written."""


class JournalImportError(PlumeError):
    """Raised when an export document cannot be imported.

    Covers malformed JSON, missing fields and unsupported versions.
    """


class BlankTextError(PlumeError, ValueError):
    """Raised when a todo title or list item is empty after trimming."""
