"""
Contract Validator Rules

Fixed literals, bounds and reason keys shared by the validator, the repair
engine and the prompts. Every reason produced by validate_output() starts
with one of the REASON_* keys so downstream steps can match on it.
"""

from typing import List

# ===================================================================
# LITERALS
# ===================================================================

CONFIRMATION_PLACEHOLDER = "Reservation: [Confirmation Number]"
REQUIRED_PHRASE = "forecasted to remain available"
REQUIRED_PHRASE_SYNONYM = "expected to remain available"
FORBIDDEN_SUBJECT_PREFIX = "reservation inquiry"
SIGNATURE_PLACEHOLDER = "[Your Name]"

BANNED_TERMS: List[str] = [
    "hack",
    "trick",
    "free",
    "guarantee",
    "owed",
    "must",
    "demand",
    "ai",
    "gemini",
    "stayhustler",
]

# ===================================================================
# BOUNDS (inclusive)
# ===================================================================

SUBJECT_MIN_WORDS = 6
SUBJECT_MAX_WORDS = 12

BODY_MIN_WORDS = 160
BODY_MAX_WORDS = 210

TIMING_TIPS_COUNT = 3
TIP_MIN_CHARS = 10
TIP_MAX_CHARS = 140

SCRIPT_MIN_WORDS = 8
SCRIPT_MAX_WORDS = 30

# ===================================================================
# REASON KEYS
# ===================================================================

REASON_SUBJECT_WORD_COUNT = "subject word count"
REASON_SUBJECT_DATE_TOKEN = "missing date token"
REASON_SUBJECT_PREFIX = "forbidden subject prefix"

REASON_BODY_WORD_COUNT_LOW = "body word count low"
REASON_BODY_WORD_COUNT_HIGH = "body word count high"
REASON_BODY_PLACEHOLDER = "missing confirmation placeholder"
REASON_BODY_PHRASE_MISSING = "required phrase missing"
REASON_BODY_PHRASE_DUPLICATED = "required phrase duplicated"
REASON_BODY_BANNED = "banned term in body"

REASON_TIPS_COUNT = "timing tips count"
REASON_TIP_LENGTH = "timing tip length"

REASON_SCRIPT_WORD_COUNT = "desk script word count"
REASON_SCRIPT_SENTENCE = "desk script not a single sentence"
REASON_SCRIPT_BANNED = "banned term in desk script"


def format_reason(key: str, detail: str) -> str:
    """Join a reason key and its human-readable detail."""
    return f"{key}: {detail}"


def contract_summary() -> str:
    """
    Full, unabridged statement of the output contract.

    Used verbatim by both the generation and the correction prompts so a
    correction request can never relax a constraint.
    """
    banned = ", ".join(BANNED_TERMS)
    return f"""- email_subject: {SUBJECT_MIN_WORDS}-{SUBJECT_MAX_WORDS} words, must include the stay dates (e.g., "Jan 15–18"), must NOT start with "Reservation Inquiry"
- email_body: {BODY_MIN_WORDS}-{BODY_MAX_WORDS} words (count carefully), must include "{CONFIRMATION_PLACEHOLDER}" exactly as written, must include "{REQUIRED_PHRASE}" EXACTLY ONCE, must not use any of these words: {banned}
- timing_guidance: exactly {TIMING_TIPS_COUNT} items, each {TIP_MIN_CHARS}-{TIP_MAX_CHARS} characters
- fallback_script: one single sentence on one line, {SCRIPT_MIN_WORDS}-{SCRIPT_MAX_WORDS} words, ends with . or ?, must not use any of the words above"""
