"""
Repair Utilities

Text patch helpers used by the repair engine. Each helper inspects the
current text and returns it unchanged when its fix is not applicable, which
keeps every repair idempotent.
"""

import re
from typing import List, Optional, Tuple

from pipeline.steps.contract_validator import rules
from pipeline.steps.contract_validator.scanner import (
    count_occurrences,
    has_date_token,
    word_count,
)

# Appended at most once when the body is slightly short (18 words)
CLOSING_SENTENCE = (
    "Thank you again for taking the time to review this note, "
    "and I look forward to arriving soon."
)

# Repair-eligible bands around the body word range
BODY_LOW_REPAIR_MARGIN = 15
BODY_HIGH_REPAIR_MARGIN = 25

SUBJECT_DATE_PREFACE = "Upcoming stay {dates} —"

PARAGRAPH_BREAK = re.compile(r"\n\s*\n")
SENTENCE_BREAK = re.compile(r"(?<=[.!?])\s+")
SENTENCE_SEPARATOR = re.compile(r"(?<=[.!?])(\s+)")
SENTENCE_END = re.compile(r"[.!?][\"')\]]*$")

_SUBJECT_NOUNS = r"(rooms?|suites?|upgrades?|categories|category|options?)"

# Ordered: the first pattern that matches an upgrade-ask clause wins
PHRASE_INJECTION_PATTERNS: List[Tuple[re.Pattern, str]] = [
    (
        re.compile(rf"\b{_SUBJECT_NOUNS}\s+(are|is)\s+{re.escape(rules.REQUIRED_PHRASE_SYNONYM)}\b", re.IGNORECASE),
        rf"\1 \2 {rules.REQUIRED_PHRASE}",
    ),
    (
        re.compile(rf"\b{_SUBJECT_NOUNS}\s+(are|is)\s+(?:still\s+)?(?:available|open)\b", re.IGNORECASE),
        rf"\1 \2 {rules.REQUIRED_PHRASE}",
    ),
    (
        re.compile(rf"\b{_SUBJECT_NOUNS}\s+(?:become|remain)\s+available\b", re.IGNORECASE),
        rf"\1 are {rules.REQUIRED_PHRASE}",
    ),
    (
        re.compile(rf"\b{_SUBJECT_NOUNS}\s+(?:becomes|remains)\s+available\b", re.IGNORECASE),
        rf"\1 is {rules.REQUIRED_PHRASE}",
    ),
    (
        re.compile(r"\b(anything|something)\s+(?:opens up|becomes available|is available)\b", re.IGNORECASE),
        rf"\1 is {rules.REQUIRED_PHRASE}",
    ),
]


def insert_confirmation_placeholder(body: str) -> str:
    """
    Insert the confirmation placeholder as its own paragraph after the
    greeting (first non-empty line).
    """
    if rules.CONFIRMATION_PLACEHOLDER in body:
        return body

    lines = body.split("\n")
    greeting_index = next((i for i, line in enumerate(lines) if line.strip()), None)
    if greeting_index is None:
        return body

    head = lines[:greeting_index + 1]
    rest = lines[greeting_index + 1:]
    while rest and not rest[0].strip():
        rest.pop(0)

    patched = head + ["", rules.CONFIRMATION_PLACEHOLDER]
    if rest:
        patched += [""] + rest
    return "\n".join(patched)


def inject_required_phrase(body: str) -> str:
    """Rewrite the first upgrade-ask clause so it carries the required phrase."""
    if count_occurrences(body, rules.REQUIRED_PHRASE) > 0:
        return body

    for pattern, replacement in PHRASE_INJECTION_PATTERNS:
        if pattern.search(body):
            return pattern.sub(replacement, body, count=1)

    return body


def dedupe_required_phrase(body: str) -> str:
    """Keep the first required phrase, swap later ones for the synonym."""
    if count_occurrences(body, rules.REQUIRED_PHRASE) <= 1:
        return body

    first_end = body.find(rules.REQUIRED_PHRASE) + len(rules.REQUIRED_PHRASE)
    tail = body[first_end:].replace(rules.REQUIRED_PHRASE, rules.REQUIRED_PHRASE_SYNONYM)
    return body[:first_end] + tail


def pad_body(body: str) -> str:
    """
    Add the closing sentence when the body is short by at most
    BODY_LOW_REPAIR_MARGIN words. Placed before the sign-off paragraph.
    """
    words = word_count(body)
    if not (rules.BODY_MIN_WORDS - BODY_LOW_REPAIR_MARGIN <= words < rules.BODY_MIN_WORDS):
        return body
    if CLOSING_SENTENCE in body:
        return body

    text = body.rstrip()
    breaks = list(PARAGRAPH_BREAK.finditer(text))
    if not breaks:
        return f"{text}\n\n{CLOSING_SENTENCE}"

    sign_off_start = breaks[-1].start()
    return f"{text[:sign_off_start]}\n\n{CLOSING_SENTENCE}{text[sign_off_start:]}"


def trim_body(body: str) -> str:
    """
    Remove one non-terminal sentence when the body is long by at most
    BODY_HIGH_REPAIR_MARGIN words.

    The greeting, the placeholder line, the sentence with the required
    phrase and the closing paragraphs are never touched. Picks the shortest
    sentence whose removal lands the count inside the valid range.
    """
    words = word_count(body)
    if not (rules.BODY_MAX_WORDS < words <= rules.BODY_MAX_WORDS + BODY_HIGH_REPAIR_MARGIN):
        return body

    parts = PARAGRAPH_BREAK.split(body)
    separators = PARAGRAPH_BREAK.findall(body)
    protected = _protected_paragraphs(parts)

    best: Optional[Tuple[int, int, int]] = None  # (sentence words, paragraph, sentence)
    for p_index, paragraph in enumerate(parts):
        if p_index in protected:
            continue
        for s_index, sentence in enumerate(SENTENCE_BREAK.split(paragraph.strip())):
            if rules.REQUIRED_PHRASE in sentence or rules.CONFIRMATION_PLACEHOLDER in sentence:
                continue
            sentence_words = word_count(sentence)
            remaining = words - sentence_words
            if not (rules.BODY_MIN_WORDS <= remaining <= rules.BODY_MAX_WORDS):
                continue
            if best is None or sentence_words < best[0]:
                best = (sentence_words, p_index, s_index)

    if best is None:
        return body

    _, p_index, s_index = best
    parts[p_index] = _remove_sentence(parts[p_index].strip(), s_index)

    if not parts[p_index]:
        # Drop the emptied paragraph together with the break before it
        del parts[p_index]
        del separators[p_index - 1]

    rebuilt = parts[0]
    for separator, paragraph in zip(separators, parts[1:]):
        rebuilt += separator + paragraph
    return rebuilt


def _remove_sentence(paragraph: str, index: int) -> str:
    """Drop one sentence and a single adjacent separator, keeping the others as written."""
    # Alternates sentence, separator, sentence, ...
    pieces = SENTENCE_SEPARATOR.split(paragraph)
    position = index * 2
    if position > 0:
        del pieces[position - 1:position + 1]
    else:
        del pieces[0:2]
    return "".join(pieces)


def prepend_date_preface(subject: str, stay_dates: Optional[str]) -> str:
    """Prefix the subject with the stay-date preface when it has no date."""
    if has_date_token(subject) or not stay_dates:
        return subject

    patched = f"{SUBJECT_DATE_PREFACE.format(dates=stay_dates)} {subject.strip()}"
    if not has_date_token(patched):
        return subject
    return patched


def _protected_paragraphs(paragraphs: List[str]) -> set:
    """Indices of paragraphs that trimming must leave alone."""
    protected = {0, len(paragraphs) - 1}

    prose = [i for i, p in enumerate(paragraphs) if SENTENCE_END.search(p.strip())]
    if prose:
        protected.add(prose[-1])

    for index, paragraph in enumerate(paragraphs):
        if rules.CONFIRMATION_PLACEHOLDER in paragraph:
            protected.add(index)
        # Sign-off lines like "Warm regards," carry no terminal punctuation
        if not SENTENCE_END.search(paragraph.strip()):
            protected.add(index)

    return protected
