"""
Error taxonomy for ingestion and export.

File-level errors (``ParseError``, ``FileReadError``) abort an upload batch.
Row-level errors (``RowError`` subclasses) only ever drop the offending row.
"""
from __future__ import annotations


class BillsightError(Exception):
    """Base class for all billsight errors."""


class ParseError(BillsightError):
    """A file could not be turned into raw rows."""

    def __init__(self, message: str, filename: str | None = None) -> None:
        self.filename = filename
        if filename:
            message = f"{filename}: {message}"
        super().__init__(message)


class HeaderNotFoundError(ParseError):
    """No row within the lookahead window looks like the dialect's header."""


class FileReadError(BillsightError):
    """The underlying bytes of an upload could not be read."""

    def __init__(self, filename: str, cause: BaseException | None = None) -> None:
        self.filename = filename
        detail = f": {cause}" if cause else ""
        super().__init__(f"Failed to read file {filename}{detail}")


class RowError(BillsightError):
    """A single row could not be normalized; the row is skipped."""


class TimestampParseError(RowError):
    pass


class AmountParseError(RowError):
    pass


class UploadInProgressError(BillsightError):
    """Another upload batch is still being read into the session."""


class ExportError(BillsightError):
    """Export failed after exhausting its retries (or had nothing to export)."""
