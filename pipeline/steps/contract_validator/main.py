"""
Contract Validator

Deterministic, pure check of a generated payload against the output
contract. Every rule is evaluated so a single correction or repair round
can address all violations at once.
"""

from typing import List

from pipeline.models.core import OutputContract, ValidationResult

from . import rules
from .rules import format_reason
from .scanner import (
    count_occurrences,
    find_banned_terms,
    has_date_token,
    looks_like_single_sentence,
    word_count,
)


def validate_output(output: OutputContract) -> ValidationResult:
    """
    Validate a payload against the output contract.

    Checks:
    - Subject: 6-12 words, date token, no "Reservation Inquiry" prefix
    - Body: 160-210 words, confirmation placeholder, required phrase exactly
      once, no banned terms
    - Timing tips: exactly 3, each 10-140 characters
    - Desk script: 8-30 words, single sentence, no banned terms

    Args:
        output: Payload to check

    Returns:
        ValidationResult with every violation, in rule order
    """
    reasons: List[str] = []
    reasons.extend(_check_subject(output.subject))
    reasons.extend(_check_body(output.body))
    reasons.extend(_check_timing_tips(output.timing_tips))
    reasons.extend(_check_desk_script(output.desk_script))

    return ValidationResult(ok=not reasons, reasons=reasons)


def _check_subject(subject: str) -> List[str]:
    reasons = []

    words = word_count(subject)
    if words < rules.SUBJECT_MIN_WORDS or words > rules.SUBJECT_MAX_WORDS:
        reasons.append(format_reason(
            rules.REASON_SUBJECT_WORD_COUNT,
            f"email_subject must be {rules.SUBJECT_MIN_WORDS}-{rules.SUBJECT_MAX_WORDS} words (got {words})"
        ))

    if not has_date_token(subject):
        reasons.append(format_reason(
            rules.REASON_SUBJECT_DATE_TOKEN,
            'email_subject must include a date token (e.g., "Jan 15–18")'
        ))

    if subject.strip().lower().startswith(rules.FORBIDDEN_SUBJECT_PREFIX):
        reasons.append(format_reason(
            rules.REASON_SUBJECT_PREFIX,
            'email_subject must not start with "Reservation Inquiry"'
        ))

    return reasons


def _check_body(body: str) -> List[str]:
    reasons = []

    words = word_count(body)
    if words < rules.BODY_MIN_WORDS:
        reasons.append(format_reason(
            rules.REASON_BODY_WORD_COUNT_LOW,
            f"email_body must be {rules.BODY_MIN_WORDS}-{rules.BODY_MAX_WORDS} words (got {words})"
        ))
    elif words > rules.BODY_MAX_WORDS:
        reasons.append(format_reason(
            rules.REASON_BODY_WORD_COUNT_HIGH,
            f"email_body must be {rules.BODY_MIN_WORDS}-{rules.BODY_MAX_WORDS} words (got {words})"
        ))

    if rules.CONFIRMATION_PLACEHOLDER not in body:
        reasons.append(format_reason(
            rules.REASON_BODY_PLACEHOLDER,
            f'email_body must include exactly "{rules.CONFIRMATION_PLACEHOLDER}"'
        ))

    phrase_count = count_occurrences(body, rules.REQUIRED_PHRASE)
    if phrase_count == 0:
        reasons.append(format_reason(
            rules.REASON_BODY_PHRASE_MISSING,
            f'email_body must include "{rules.REQUIRED_PHRASE}" exactly once (got 0)'
        ))
    elif phrase_count > 1:
        reasons.append(format_reason(
            rules.REASON_BODY_PHRASE_DUPLICATED,
            f'email_body must include "{rules.REQUIRED_PHRASE}" exactly once (got {phrase_count})'
        ))

    banned = find_banned_terms(body)
    if banned:
        reasons.append(format_reason(
            rules.REASON_BODY_BANNED,
            f"email_body contains banned words: {', '.join(banned)}"
        ))

    return reasons


def _check_timing_tips(tips: List[str]) -> List[str]:
    if len(tips) != rules.TIMING_TIPS_COUNT:
        return [format_reason(
            rules.REASON_TIPS_COUNT,
            f"timing_guidance must have exactly {rules.TIMING_TIPS_COUNT} items (got {len(tips)})"
        )]

    reasons = []
    for index, tip in enumerate(tips):
        if len(tip) < rules.TIP_MIN_CHARS or len(tip) > rules.TIP_MAX_CHARS:
            reasons.append(format_reason(
                rules.REASON_TIP_LENGTH,
                f"timing_guidance[{index}] must be {rules.TIP_MIN_CHARS}-{rules.TIP_MAX_CHARS} chars (got {len(tip)})"
            ))
    return reasons


def _check_desk_script(script: str) -> List[str]:
    reasons = []

    words = word_count(script)
    if words < rules.SCRIPT_MIN_WORDS or words > rules.SCRIPT_MAX_WORDS:
        reasons.append(format_reason(
            rules.REASON_SCRIPT_WORD_COUNT,
            f"fallback_script must be {rules.SCRIPT_MIN_WORDS}-{rules.SCRIPT_MAX_WORDS} words (got {words})"
        ))

    if not looks_like_single_sentence(script):
        reasons.append(format_reason(
            rules.REASON_SCRIPT_SENTENCE,
            "fallback_script must be a single sentence (no line breaks, ends with . or ?)"
        ))

    banned = find_banned_terms(script)
    if banned:
        reasons.append(format_reason(
            rules.REASON_SCRIPT_BANNED,
            f"fallback_script contains banned words: {', '.join(banned)}"
        ))

    return reasons
