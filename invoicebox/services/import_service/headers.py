"""Header row detection and conversion of raw sheet rows into records."""

from dataclasses import dataclass
from typing import Any, Sequence

from .constants import (
    DEFAULT_VOCABULARY,
    HEADER_SEARCH_LIMIT,
    MIN_HEADER_MATCHES,
    ImportVocabulary,
)


@dataclass(frozen=True)
class HeaderDetection:
    """Outcome of scanning the top of a sheet for its header row."""

    index: int
    matches: int


def count_header_keywords(
    row: Any,
    vocabulary: ImportVocabulary = DEFAULT_VOCABULARY,
) -> int:
    """Count the string cells of a row that contain a known header keyword."""
    if not isinstance(row, (list, tuple)):
        return 0

    matches = 0
    for cell in row:
        if cell and isinstance(cell, str):
            value = cell.lower().strip()
            if any(keyword in value for keyword in vocabulary.known_header_keywords):
                matches += 1
    return matches


def scan_header_rows(
    rows: Sequence[Any],
    search_limit: int = HEADER_SEARCH_LIMIT,
    vocabulary: ImportVocabulary = DEFAULT_VOCABULARY,
) -> HeaderDetection:
    """Find the most plausible header row among the first rows of a sheet.

    The first row reaching the highest keyword count wins. If that count is
    below ``MIN_HEADER_MATCHES`` the sheet is assumed to start with its
    headers and row 0 is returned.

    Args:
        rows: Raw sheet rows (lists of cell values).
        search_limit: How many leading rows to inspect.
        vocabulary: Keyword tables.

    Returns:
        HeaderDetection with the chosen index and the best match count.
    """
    best_index = 0
    max_matches = 0

    for i in range(min(len(rows), search_limit)):
        matches = count_header_keywords(rows[i], vocabulary)
        if matches > max_matches:
            max_matches = matches
            best_index = i

    index = best_index if max_matches >= MIN_HEADER_MATCHES else 0
    return HeaderDetection(index=index, matches=max_matches)


def detect_header_row(
    rows: Sequence[Any],
    search_limit: int = HEADER_SEARCH_LIMIT,
    vocabulary: ImportVocabulary = DEFAULT_VOCABULARY,
) -> int:
    """Return the index of the most probable header row."""
    return scan_header_rows(rows, search_limit, vocabulary).index


def _header_text(cell: Any) -> str:
    if cell is None:
        return ""
    if isinstance(cell, float) and cell.is_integer():
        return str(int(cell))
    return str(cell)


def build_headers(header_row: Sequence[Any]) -> list[str]:
    """Turn a raw header row into unique column keys.

    Blank cells become ``__EMPTY``, ``__EMPTY_1``, ... and repeated names get
    a ``_1``, ``_2`` suffix, so every column keeps its own key.
    """
    headers: list[str] = []
    seen: dict[str, int] = {}

    for cell in header_row:
        text = _header_text(cell)
        base = text if text.strip() else "__EMPTY"
        if base in seen:
            seen[base] += 1
            name = f"{base}_{seen[base]}"
        else:
            seen[base] = 0
            name = base
        headers.append(name)

    return headers


def rows_to_records(
    rows: Sequence[Sequence[Any]],
    header_index: int,
) -> tuple[list[str], list[dict[str, Any]]]:
    """Convert raw rows into header-keyed records starting at a header row.

    Rows above the header are dropped, blank rows are skipped, and missing
    cells default to an empty string.

    Args:
        rows: Raw sheet rows.
        header_index: Index of the header row.

    Returns:
        Tuple of (headers, records).
    """
    if header_index >= len(rows):
        return [], []

    width = max((len(r) for r in rows[header_index:]), default=0)
    header_row = list(rows[header_index]) + [None] * (width - len(rows[header_index]))
    headers = build_headers(header_row)

    records: list[dict[str, Any]] = []
    for raw in rows[header_index + 1:]:
        record: dict[str, Any] = {}
        for j, header in enumerate(headers):
            value = raw[j] if j < len(raw) else None
            record[header] = "" if value is None else value
        if any(v != "" for v in record.values()):
            records.append(record)

    return headers, records
