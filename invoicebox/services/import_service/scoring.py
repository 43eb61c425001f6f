"""Heuristic scoring of how much a text value looks like a company name."""

import re
from typing import Any

from .constants import (
    ALPHANUMERIC_WEIGHT,
    BUSINESS_KEYWORD_WEIGHT,
    DEFAULT_VOCABULARY,
    LEGAL_ENTITY_WEIGHT,
    SYMBOL_WEIGHT,
    ImportVocabulary,
)

_DIGIT_RE = re.compile(r"\d")
_LETTER_RE = re.compile(r"[a-z]")


def _has_legal_indicator(value: str, indicators: tuple[str, ...]) -> bool:
    """Check for a legal entity token next to a space, or as the whole value."""
    for indicator in indicators:
        if f" {indicator}" in value or f"{indicator} " in value or value == indicator:
            return True
    return False


def company_score(value: Any, vocabulary: ImportVocabulary = DEFAULT_VOCABULARY) -> int:
    """Score a cell value for company-likelihood.

    Additive: a legal suffix (first hit only), every business keyword
    contained in the value, a ``&``/``+`` symbol, and a digit mixed with
    letters. Person-like values are never penalised.

    Args:
        value: Cell value. Anything that is not a string scores 0.
        vocabulary: Keyword tables to score against.

    Returns:
        Non-negative integer score.
    """
    if not value or not isinstance(value, str):
        return 0

    lowered = value.lower().strip()
    score = 0

    if _has_legal_indicator(lowered, vocabulary.company_indicators):
        score += LEGAL_ENTITY_WEIGHT

    for keyword in vocabulary.business_keywords:
        if keyword in lowered:
            score += BUSINESS_KEYWORD_WEIGHT

    if "&" in lowered or "+" in lowered:
        score += SYMBOL_WEIGHT

    # "24/7 Service", "Cloud 9"; bare numbers are usually phones
    if _DIGIT_RE.search(lowered) and _LETTER_RE.search(lowered):
        score += ALPHANUMERIC_WEIGHT

    return score


def looks_like_company(value: Any, vocabulary: ImportVocabulary = DEFAULT_VOCABULARY) -> bool:
    """Return True when a value carries any company signal at all."""
    return company_score(value, vocabulary) > 0
