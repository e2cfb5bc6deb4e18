"""
Banned-term and phrase scanning helpers.

Pure string utilities shared by the validator and the repair engine.
"""

import re
from typing import Iterable, List, Optional

from .rules import BANNED_TERMS

MONTH_TOKEN_PATTERN = re.compile(
    r"\b(?:jan(?:uary)?|feb(?:ruary)?|mar(?:ch)?|apr(?:il)?|june?|july?|"
    r"aug(?:ust)?|sep(?:t(?:ember)?)?|oct(?:ober)?|nov(?:ember)?|dec(?:ember)?)\b",
    re.IGNORECASE,
)

# "May" is also a verb, so it only counts next to a day number
MAY_DATE_PATTERN = re.compile(r"\bmay\s+\d{1,2}\b|\b\d{1,2}\s+may\b", re.IGNORECASE)

# "15-18", "15–18", "1/15", "01/15"
NUMERIC_DATE_PATTERN = re.compile(r"\d{1,2}\s?[-–/]\s?\d{1,2}")

_BANNED_PATTERNS = {
    term: re.compile(rf"\b{re.escape(term)}\b", re.IGNORECASE)
    for term in BANNED_TERMS
}


def word_count(text: str) -> int:
    """Count whitespace-separated tokens, ignoring empty ones."""
    if not text:
        return 0
    return len(text.split())


def count_occurrences(haystack: str, needle: str) -> int:
    """
    Count exact, non-overlapping occurrences of needle (case-sensitive).

    Example:
        >>> count_occurrences("aaaa", "aa")
        2
    """
    if not haystack or not needle:
        return 0
    count = 0
    position = haystack.find(needle)
    while position != -1:
        count += 1
        position = haystack.find(needle, position + len(needle))
    return count


def find_banned_terms(text: str, terms: Optional[Iterable[str]] = None) -> List[str]:
    """
    Return the banned terms present in text as whole words (case-insensitive).

    Word-boundary matching avoids false positives such as "ai" in "available"
    or "must" in "mustard".
    """
    if not text:
        return []

    found = []
    for term in terms if terms is not None else BANNED_TERMS:
        pattern = _BANNED_PATTERNS.get(term) or re.compile(rf"\b{re.escape(term)}\b", re.IGNORECASE)
        if pattern.search(text):
            found.append(term)
    return found


def has_date_token(text: str) -> bool:
    """True if text contains a month name/abbreviation or a numeric day range."""
    if not text:
        return False
    return bool(
        MONTH_TOKEN_PATTERN.search(text)
        or MAY_DATE_PATTERN.search(text)
        or NUMERIC_DATE_PATTERN.search(text)
    )


def looks_like_single_sentence(text: str) -> bool:
    """No embedded line breaks and ends in '.' or '?'."""
    if not text:
        return False
    trimmed = text.strip()
    if "\n" in trimmed or "\r" in trimmed:
        return False
    return trimmed.endswith((".", "?"))
