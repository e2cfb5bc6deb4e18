"""
Test suite for the Contract Validator

Pure, deterministic checks; no model calls.

Run with:
    pytest pipeline/steps/contract_validator/tests/ -v
"""

import pytest

from pipeline.steps.contract_validator import validate_output
from pipeline.steps.contract_validator import rules
from pipeline.steps.contract_validator.scanner import (
    count_occurrences,
    find_banned_terms,
    has_date_token,
    looks_like_single_sentence,
    word_count,
)


def reason_keys(result):
    return [reason.split(":")[0] for reason in result.reasons]


# ===================================================================
# VALID PAYLOAD
# ===================================================================

@pytest.mark.unit
def test_valid_payload_passes(make_output):
    result = validate_output(make_output())

    assert result.ok is True
    assert result.reasons == []


# ===================================================================
# BODY WORD COUNT BOUNDARIES
# ===================================================================

@pytest.mark.unit
@pytest.mark.parametrize("words,expected_ok", [
    (159, False),
    (160, True),
    (210, True),
    (211, False),
])
def test_body_word_count_boundaries(make_output, make_body, words, expected_ok):
    body = make_body(words)
    assert word_count(body) == words

    result = validate_output(make_output(body=body))

    assert result.ok is expected_ok


@pytest.mark.unit
def test_body_low_and_high_reasons(make_output, make_body):
    low = validate_output(make_output(body=make_body(159)))
    high = validate_output(make_output(body=make_body(211)))

    assert reason_keys(low) == [rules.REASON_BODY_WORD_COUNT_LOW]
    assert "got 159" in low.reasons[0]
    assert reason_keys(high) == [rules.REASON_BODY_WORD_COUNT_HIGH]


# ===================================================================
# SUBJECT
# ===================================================================

@pytest.mark.unit
def test_scenario_a_short_subject_without_date(make_output):
    result = validate_output(make_output(subject="Stay update"))

    assert result.ok is False
    assert reason_keys(result) == [
        rules.REASON_SUBJECT_WORD_COUNT,
        rules.REASON_SUBJECT_DATE_TOKEN,
    ]


@pytest.mark.unit
def test_corrected_scenario_a_subject_passes(make_output):
    subject = "Upcoming stay Jan 15–18 — quick note ahead of arrival"

    assert word_count(subject) == 10
    assert validate_output(make_output(subject=subject)).ok


@pytest.mark.unit
def test_forbidden_subject_prefix_is_case_insensitive(make_output):
    result = validate_output(make_output(subject="RESERVATION INQUIRY for my Jan 15–18 stay please"))

    assert reason_keys(result) == [rules.REASON_SUBJECT_PREFIX]


@pytest.mark.unit
@pytest.mark.parametrize("subject", [
    "Quick note ahead of my stay 15-18",
    "Quick note ahead of my stay 1/15",
    "Arriving in January with a quick note",
])
def test_subject_date_token_variants(make_output, subject):
    assert validate_output(make_output(subject=subject)).ok


# ===================================================================
# BODY CONTENT
# ===================================================================

@pytest.mark.unit
def test_missing_placeholder(make_output, make_body):
    body = make_body(180, placeholder=False)

    result = validate_output(make_output(body=body))

    assert reason_keys(result) == [rules.REASON_BODY_PLACEHOLDER]


@pytest.mark.unit
def test_required_phrase_missing(make_output, make_body):
    ask = "If any higher-category rooms are available around my check-in time, I would be grateful to be considered."
    body = make_body(180, ask=ask)

    result = validate_output(make_output(body=body))

    assert reason_keys(result) == [rules.REASON_BODY_PHRASE_MISSING]


@pytest.mark.unit
def test_required_phrase_duplicated(make_output, make_body):
    body = make_body(180, extra_paragraph="Any suite forecasted to remain available would be lovely.")

    result = validate_output(make_output(body=body))

    assert reason_keys(result) == [rules.REASON_BODY_PHRASE_DUPLICATED]
    assert "got 2" in result.reasons[0]


@pytest.mark.unit
def test_required_phrase_is_case_sensitive(make_output, make_body):
    ask = "If any higher-category rooms are Forecasted To Remain Available at check-in, I would be grateful to be considered."
    body = make_body(180, ask=ask)

    assert rules.REASON_BODY_PHRASE_MISSING in reason_keys(validate_output(make_output(body=body)))


@pytest.mark.unit
def test_banned_term_in_body(make_output, make_body):
    body = make_body(180, extra_paragraph="I understand demand is high this week.")

    result = validate_output(make_output(body=body))

    assert reason_keys(result) == [rules.REASON_BODY_BANNED]
    assert "demand" in result.reasons[0]


# ===================================================================
# TIMING TIPS AND DESK SCRIPT
# ===================================================================

@pytest.mark.unit
def test_timing_tips_count(make_output):
    result = validate_output(make_output(timing_tips=["Send the email a day or two early."]))

    assert reason_keys(result) == [rules.REASON_TIPS_COUNT]


@pytest.mark.unit
def test_each_bad_tip_is_reported(make_output):
    tips = ["Too short", "Ask calmly at check-in before handing over ID.", "x" * 141]

    result = validate_output(make_output(timing_tips=tips))

    assert reason_keys(result) == [rules.REASON_TIP_LENGTH, rules.REASON_TIP_LENGTH]
    assert "timing_guidance[0]" in result.reasons[0]
    assert "timing_guidance[2]" in result.reasons[1]


@pytest.mark.unit
@pytest.mark.parametrize("script,expected_key", [
    ("Any upgrades tonight?", rules.REASON_SCRIPT_WORD_COUNT),
    ("If any upgraded rooms are open tonight\nI would be grateful to be considered.", rules.REASON_SCRIPT_SENTENCE),
    ("If any upgraded rooms are open tonight I would be grateful to be considered", rules.REASON_SCRIPT_SENTENCE),
    ("I know you must be busy, but any upgraded room tonight would be lovely.", rules.REASON_SCRIPT_BANNED),
])
def test_desk_script_rules(make_output, script, expected_key):
    result = validate_output(make_output(desk_script=script))

    assert reason_keys(result) == [expected_key]


@pytest.mark.unit
def test_all_violations_are_accumulated(make_output, make_body):
    output = make_output(
        subject="Stay update",
        body=make_body(126, placeholder=False, extra_paragraph="I understand demand is high this week."),
        timing_tips=[],
        desk_script="Upgrade me",
    )

    result = validate_output(output)

    assert reason_keys(result) == [
        rules.REASON_SUBJECT_WORD_COUNT,
        rules.REASON_SUBJECT_DATE_TOKEN,
        rules.REASON_BODY_WORD_COUNT_LOW,
        rules.REASON_BODY_PLACEHOLDER,
        rules.REASON_BODY_BANNED,
        rules.REASON_TIPS_COUNT,
        rules.REASON_SCRIPT_WORD_COUNT,
        rules.REASON_SCRIPT_SENTENCE,
    ]


@pytest.mark.unit
def test_validator_does_not_mutate_input(make_output):
    output = make_output(subject="Stay update")
    before = output.to_payload()

    validate_output(output)

    assert output.to_payload() == before


# ===================================================================
# SCANNER
# ===================================================================

@pytest.mark.unit
def test_word_count_ignores_extra_whitespace():
    assert word_count("  one\n\ntwo\tthree  ") == 3
    assert word_count("") == 0


@pytest.mark.unit
def test_count_occurrences_is_non_overlapping():
    assert count_occurrences("aaaa", "aa") == 2
    assert count_occurrences("forecasted to remain available, forecasted to remain available", rules.REQUIRED_PHRASE) == 2


@pytest.mark.unit
@pytest.mark.parametrize("text,expected", [
    ("Rooms are available soon", []),
    ("I love mustard on everything", []),
    ("Feel free to call", ["free"]),
    ("No AI was involved", ["ai"]),
    ("A neat hack, a neat TRICK", ["hack", "trick"]),
    ("Sent by StayHustler", ["stayhustler"]),
])
def test_banned_terms_match_whole_words(text, expected):
    assert find_banned_terms(text) == expected


@pytest.mark.unit
def test_date_token_detection():
    assert has_date_token("Arriving Sept 3")
    assert has_date_token("Stay 15–18")
    assert not has_date_token("Quick note ahead of arrival")
    assert not has_date_token("You may want to hear from me soon")
    assert has_date_token("Arriving May 5")
    assert has_date_token("Stay from 5 May")


@pytest.mark.unit
def test_single_sentence_detection():
    assert looks_like_single_sentence("Could I be considered?")
    assert not looks_like_single_sentence("Could I be considered")
    assert not looks_like_single_sentence("First line.\nSecond line.")
