"""
Repair Engine

Deterministic, model-free patcher for near-miss payloads.

Each repair is gated on a validator reason key and on the current state of
the text, so running the engine twice with the same reasons changes nothing
the second time. Banned terms and hard limits are never relaxed: outside a
repair-eligible band the engine declines and reports no applied repair.
The patched payload must be re-validated before it is trusted.
"""

from typing import List, Optional

import logfire

from pipeline.models.core import OutputContract, RepairOutcome
from pipeline.steps.contract_validator import rules

from .utils import (
    dedupe_required_phrase,
    inject_required_phrase,
    insert_confirmation_placeholder,
    pad_body,
    prepend_date_preface,
    trim_body,
)


def repair_output(
    output: OutputContract,
    reasons: List[str],
    stay_dates: Optional[str] = None
) -> RepairOutcome:
    """
    Apply the repairs whose guard reasons are present.

    Order matters: placeholder and phrase edits change the word count, so
    the word-count repairs run last on the recounted body.

    Args:
        output: Payload that failed validation (not mutated)
        reasons: Validation reasons for that payload
        stay_dates: Stay-date label such as "Jan 15–18" for the subject preface

    Returns:
        RepairOutcome with the patched payload and the repairs applied
    """
    body = output.body
    subject = output.subject
    applied: List[str] = []

    def gated(key: str) -> bool:
        return any(key in reason for reason in reasons)

    if gated(rules.REASON_BODY_PLACEHOLDER):
        patched = insert_confirmation_placeholder(body)
        if patched != body:
            body = patched
            applied.append("Added reservation line")

    if gated(rules.REASON_BODY_PHRASE_MISSING):
        patched = inject_required_phrase(body)
        if patched != body:
            body = patched
            applied.append("Inserted required phrase")

    if gated(rules.REASON_BODY_PHRASE_DUPLICATED):
        patched = dedupe_required_phrase(body)
        if patched != body:
            body = patched
            applied.append("Replaced duplicate required phrase")

    if gated(rules.REASON_BODY_WORD_COUNT_LOW):
        patched = pad_body(body)
        if patched != body:
            body = patched
            applied.append("Added closing sentence for word count")

    if gated(rules.REASON_BODY_WORD_COUNT_HIGH):
        patched = trim_body(body)
        if patched != body:
            body = patched
            applied.append("Removed one sentence for word count")

    if gated(rules.REASON_SUBJECT_DATE_TOKEN):
        patched = prepend_date_preface(subject, stay_dates)
        if patched != subject:
            subject = patched
            applied.append("Added date preface to subject")

    if applied:
        logfire.info("Repairs applied", repairs=applied)
    else:
        logfire.info("Repair declined", reasons_count=len(reasons))

    return RepairOutcome(
        patched=output.with_changes(subject=subject, body=body),
        applied_repairs=applied
    )
