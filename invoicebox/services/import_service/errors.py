"""Exceptions raised by the client import pipeline."""


class SpreadsheetError(ValueError):
    """Raised when an uploaded file cannot be read as a spreadsheet."""

    pass


class EmptySheetError(SpreadsheetError):
    """Raised when a spreadsheet has no data rows below its header."""

    pass
