"""Spreadsheet readers for client imports.

Each reader returns the first sheet as raw rows (lists of cell values, with
blank cells as None) so that header detection can look past title rows.
"""

import csv
import io
import logging
import zipfile
from pathlib import Path
from typing import Any

import xlrd
from openpyxl import load_workbook
from openpyxl.utils.exceptions import InvalidFileException

from .errors import SpreadsheetError

logger = logging.getLogger(__name__)


def _clean_cell(value: Any) -> Any:
    if value is None:
        return None
    if isinstance(value, str) and value == "":
        return None
    return value


def read_csv_rows(file_content: bytes) -> list[list[Any]]:
    """Read CSV bytes into raw rows.

    Tries UTF-8 (with or without BOM) first and falls back to Latin-1.

    Args:
        file_content: Raw CSV file bytes.

    Returns:
        List of rows, each a list of cell strings (blank cells as None).

    Raises:
        SpreadsheetError: If the content cannot be decoded or parsed.
    """
    rows: list[list[Any]] | None = None
    for encoding in ("utf-8-sig", "latin-1"):
        try:
            text_stream = io.TextIOWrapper(io.BytesIO(file_content), encoding=encoding, newline="")
            rows = [[_clean_cell(v) for v in row] for row in csv.reader(text_stream)]
            break
        except (UnicodeDecodeError, csv.Error):
            rows = None
            continue

    if rows is None:
        raise SpreadsheetError("CSV file could not be decoded")
    return rows


def read_xlsx_rows(file_content: bytes) -> list[list[Any]]:
    """Read the first worksheet of an XLSX workbook into raw rows.

    Raises:
        SpreadsheetError: If the workbook is corrupt or has no worksheets.
    """
    try:
        wb = load_workbook(filename=io.BytesIO(file_content), read_only=True, data_only=True)
    except (InvalidFileException, zipfile.BadZipFile, KeyError, OSError) as e:
        raise SpreadsheetError(f"XLSX file could not be read: {e}") from e

    try:
        if not wb.worksheets:
            raise SpreadsheetError("XLSX file has no worksheets")
        ws = wb.worksheets[0]
        return [[_clean_cell(v) for v in row] for row in ws.iter_rows(values_only=True)]
    finally:
        wb.close()


def read_xls_rows(file_content: bytes) -> list[list[Any]]:
    """Read the first sheet of a legacy XLS workbook into raw rows.

    Raises:
        SpreadsheetError: If the workbook is corrupt or has no sheets.
    """
    try:
        book = xlrd.open_workbook(file_contents=file_content)
    except xlrd.XLRDError as e:
        raise SpreadsheetError(f"XLS file could not be read: {e}") from e

    if book.nsheets == 0:
        raise SpreadsheetError("XLS file has no worksheets")
    sheet = book.sheet_by_index(0)
    return [
        [_clean_cell(v) for v in sheet.row_values(i)]
        for i in range(sheet.nrows)
    ]


READERS = {
    "csv": read_csv_rows,
    "xlsx": read_xlsx_rows,
    "xls": read_xls_rows,
}


def file_extension(filename: str | None) -> str:
    """Extract a lowercase file extension without the dot."""
    if not filename:
        return ""
    return filename.rsplit(".", 1)[-1].lower() if "." in filename else ""


def read_sheet_rows(file_content: bytes, extension: str) -> list[list[Any]]:
    """Read spreadsheet bytes of the given type into raw rows.

    Raises:
        SpreadsheetError: On unsupported types or unreadable content.
    """
    reader = READERS.get(extension.lower().lstrip("."))
    if reader is None:
        raise SpreadsheetError(f"Unsupported file type '.{extension}'. Allowed: XLSX, XLS, CSV")
    return reader(file_content)


def read_sheet_file(path: Path) -> list[list[Any]]:
    """Read a spreadsheet file from disk, picking the reader by extension."""
    path = Path(path)
    logger.debug("Reading spreadsheet %s", path)
    return read_sheet_rows(path.read_bytes(), file_extension(path.name))
