"""Column mapping for client imports.

Maps spreadsheet headers onto canonical client fields. Each field is
resolved on its own: an exact match of normalized header and synonym wins
over a substring match. When no header names the company column, the cell
contents are scored and finally the raw headers are searched for literal
company tokens.
"""

import logging
import re
from dataclasses import dataclass, field
from typing import Any, Sequence

from .constants import (
    COMPANY_COLUMN_THRESHOLD,
    COMPANY_SAMPLE_ROWS,
    DEFAULT_VOCABULARY,
    CanonicalField,
    ImportVocabulary,
)
from .observer import ImportObserver
from .scoring import company_score

logger = logging.getLogger(__name__)

_NON_ALNUM_RE = re.compile(r"[^a-z0-9]")

HeaderMap = dict[CanonicalField, str]

# Strategy labels reported to observers
STRATEGY_EXACT = "exact"
STRATEGY_SUBSTRING = "substring"
STRATEGY_CONTENT = "content"
STRATEGY_LITERAL = "literal"


def normalize_header(header: Any) -> str:
    """Lowercase, trim and strip everything but ``a-z0-9`` from a header."""
    if header is None or header == "":
        return ""
    return _NON_ALNUM_RE.sub("", str(header).lower().strip())


def find_match_candidates(
    headers: Sequence[str],
    target: CanonicalField,
    vocabulary: ImportVocabulary = DEFAULT_VOCABULARY,
) -> tuple[list[str], str | None]:
    """Collect every header that satisfies a field at the first matching stage.

    Args:
        headers: Column headers in sheet order.
        target: Canonical field to resolve.
        vocabulary: Keyword tables.

    Returns:
        Tuple of (matching headers in sheet order, strategy label). The list
        is empty and the strategy None when nothing matched.
    """
    synonyms = [normalize_header(s) for s in vocabulary.synonyms_for(target)]
    normalized = [(header, normalize_header(header)) for header in headers]

    exact = [h for h, norm in normalized if any(norm == s for s in synonyms)]
    if exact:
        return exact, STRATEGY_EXACT

    partial = [h for h, norm in normalized if any(s in norm for s in synonyms)]
    if partial:
        return partial, STRATEGY_SUBSTRING

    return [], None


def find_best_match(
    headers: Sequence[str],
    target: CanonicalField,
    vocabulary: ImportVocabulary = DEFAULT_VOCABULARY,
) -> str | None:
    """Return the first header matching a field's synonyms, or None."""
    candidates, _ = find_match_candidates(headers, target, vocabulary)
    return candidates[0] if candidates else None


def score_columns(
    headers: Sequence[str],
    records: Sequence[dict[str, Any]],
    sample_rows: int = COMPANY_SAMPLE_ROWS,
    vocabulary: ImportVocabulary = DEFAULT_VOCABULARY,
) -> dict[str, int]:
    """Sum company scores per column over the first data rows."""
    scores = {header: 0 for header in headers}
    for record in records[:sample_rows]:
        for header in headers:
            value = record.get(header)
            scores[header] += company_score(str(value) if value else "", vocabulary)
    return scores


def detect_company_column(
    headers: Sequence[str],
    records: Sequence[dict[str, Any]],
    vocabulary: ImportVocabulary = DEFAULT_VOCABULARY,
) -> tuple[str | None, int]:
    """Guess the company column from cell contents.

    The column with the strictly highest total wins (leftmost on ties) and is
    accepted only above ``COMPANY_COLUMN_THRESHOLD``.

    Returns:
        Tuple of (header or None, best total score).
    """
    best_header: str | None = None
    max_score = 0
    for header, score in score_columns(headers, records, vocabulary=vocabulary).items():
        if score > max_score:
            max_score = score
            best_header = header

    if best_header is not None and max_score > COMPANY_COLUMN_THRESHOLD:
        return best_header, max_score
    return None, max_score


def find_literal_company_header(
    headers: Sequence[str],
    vocabulary: ImportVocabulary = DEFAULT_VOCABULARY,
) -> str | None:
    """Last resort search for a header literally naming the company column.

    Exact tokens come first; otherwise a header containing a token is taken
    unless it also mentions phone, email or address ("Company Phone").
    """
    tokens = vocabulary.company_header_tokens
    for header in headers:
        if str(header).lower().strip() in tokens:
            return header

    for header in headers:
        lowered = str(header).lower().strip()
        if any(t in lowered for t in tokens) and not any(
            x in lowered for x in vocabulary.company_header_exclusions
        ):
            return header

    return None


@dataclass
class HeaderMapping:
    """Resolved field-to-column assignment for one import."""

    header_map: HeaderMap = field(default_factory=dict)
    strategies: dict[CanonicalField, str] = field(default_factory=dict)
    ambiguous: dict[CanonicalField, list[str]] = field(default_factory=dict)

    @property
    def mapped_fields(self) -> list[str]:
        """Canonical field names that received a column, in resolution order."""
        return [f.value for f in self.header_map]

    def as_dict(self) -> dict[str, str]:
        """Plain ``{field: header}`` dict suitable for JSON output."""
        return {f.value: header for f, header in self.header_map.items()}


def build_header_map(
    headers: Sequence[str],
    records: Sequence[dict[str, Any]] = (),
    vocabulary: ImportVocabulary = DEFAULT_VOCABULARY,
    observer: ImportObserver | None = None,
) -> HeaderMapping:
    """Map every canonical field to a column of the sheet.

    Args:
        headers: Column headers in sheet order.
        records: Data rows, used for the content-based company fallback.
        vocabulary: Keyword tables.
        observer: Receives one ``field_mapped`` call per assignment and a
            final ``mapping_finished``.

    Returns:
        HeaderMapping with the assignments, the strategy used for each and
        the fields for which several columns qualified.
    """
    observer = observer or ImportObserver()
    mapping = HeaderMapping()

    for target in vocabulary.column_synonyms:
        candidates, strategy = find_match_candidates(headers, target, vocabulary)
        if not candidates:
            continue
        mapping.header_map[target] = candidates[0]
        mapping.strategies[target] = strategy
        if len(candidates) > 1:
            mapping.ambiguous[target] = candidates
        observer.field_mapped(target.value, candidates[0], strategy)

    if CanonicalField.COMPANY_NAME not in mapping.header_map:
        header, score = detect_company_column(headers, records, vocabulary)
        if header is not None:
            mapping.header_map[CanonicalField.COMPANY_NAME] = header
            mapping.strategies[CanonicalField.COMPANY_NAME] = STRATEGY_CONTENT
            observer.field_mapped(CanonicalField.COMPANY_NAME.value, header, STRATEGY_CONTENT, score)

    if CanonicalField.COMPANY_NAME not in mapping.header_map:
        header = find_literal_company_header(headers, vocabulary)
        if header is not None:
            mapping.header_map[CanonicalField.COMPANY_NAME] = header
            mapping.strategies[CanonicalField.COMPANY_NAME] = STRATEGY_LITERAL
            observer.field_mapped(CanonicalField.COMPANY_NAME.value, header, STRATEGY_LITERAL)

    observer.mapping_finished(mapping)
    return mapping


def extract_row(record: dict[str, Any], header_map: HeaderMap) -> dict[CanonicalField, Any]:
    """Look up each mapped column in a data row."""
    extracted: dict[CanonicalField, Any] = {}
    for target, header in header_map.items():
        if header and header in record:
            extracted[target] = record[header]
    return extracted
