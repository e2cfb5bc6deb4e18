"""
Request Composer Prompts

Prompts for the first generation pass and for the correction pass.
"""

from typing import List

from pipeline.models.core import GenerationInput
from pipeline.steps.contract_validator.rules import (
    BANNED_TERMS,
    CONFIRMATION_PLACEHOLDER,
    REQUIRED_PHRASE,
    SIGNATURE_PLACEHOLDER,
    contract_summary,
)

from .utils import format_stay_dates


SYSTEM_PROMPT = """You are an expert in hotel guest relations who writes polite, specific pre-arrival request emails for travelers.

<primary_goal>
Write an email the guest can send to the hotel ahead of arrival asking, graciously, to be considered for a better room. The front desk should read it as a note from a seasoned, easygoing traveler.
</primary_goal>

<tone>
- Warm, gracious, never entitled or pressuring
- Acknowledge that availability and operations come first
- Never fabricate details (occasions, loyalty, prior stays)
- Never claim to contact the hotel on behalf of the guest
</tone>

<output_rules>
- Respond with STRICT JSON only: no markdown, no code fences, no commentary
- Follow every length and phrase rule exactly; they are checked by a machine
</output_rules>"""


# Flexibility-priority adaptations of the main ask
FLEXIBILITY_GUIDANCE = {
    "any": 'Ask for "any higher-category room" (optionally "including suites if appropriate") and state general flexibility on room type.',
    "category": "Ask for a higher-category room. If a flexibility detail is present, mention it as a preference and stay open to similar categories.",
    "view": "Make the primary ask a better located room (higher floor, better view, quieter location). Do not focus on a category upgrade.",
    "timing": "Make the primary ask late checkout or early check-in. Do not push for a category upgrade.",
    "none": "Keep the request minimal and gracious.",
}

PEAK_ARRIVAL_DAYS = ("friday", "saturday")
COMPRESSED_MARKETS = ("new york", "paris", "london")
PREMIUM_ROOM_MARKERS = ("suite", "executive", "premium", "deluxe")
LONG_STAY_MARKERS = ("4", "5", "6", "7", "week")


def _mitigation_notes(generation_input: GenerationInput) -> List[str]:
    """
    Structural disadvantages that call for extra flexibility language.

    At most two are returned so the email does not over-explain.
    """
    notes = []
    channel = generation_input.channel.lower()
    if "ota" in channel or "travel agency" in channel or "online" in channel:
        notes.append(
            "OTA booking: add explicit flexibility language and an easy-guest signal "
            '("completely understand availability comes first").'
        )

    city = generation_input.city.lower()
    if generation_input.arrival_day.lower() in PEAK_ARRIVAL_DAYS or any(m in city for m in COMPRESSED_MARKETS):
        notes.append(
            "Peak arrival: add ONE sentence acknowledging it is a busy arrival period, "
            "placed after the main ask and before the soft close."
        )

    if any(marker in generation_input.length_of_stay.lower() for marker in LONG_STAY_MARKERS):
        notes.append('Long stay: offer partial flexibility ("even for part of the stay").')

    if any(marker in generation_input.room.lower() for marker in PREMIUM_ROOM_MARKERS):
        notes.append(
            "Premium room already booked: pivot the primary ask to placement, view or timing; "
            "keep any category mention secondary."
        )

    return notes[:2]


def create_generation_prompt(generation_input: GenerationInput) -> str:
    """
    Create the first-pass generation prompt.

    Args:
        generation_input: Sanitized booking and context

    Returns:
        Formatted user prompt
    """
    stay_dates = format_stay_dates(generation_input.checkin, generation_input.checkout) or "the stay dates"
    flexibility = generation_input.flexibility_primary.lower()
    flexibility_note = FLEXIBILITY_GUIDANCE.get(flexibility, FLEXIBILITY_GUIDANCE["any"])

    mitigations = _mitigation_notes(generation_input)
    mitigation_section = "\n".join(f"- {note}" for note in mitigations) or "- None apply."

    banned = ", ".join(BANNED_TERMS)

    prompt = f"""<task>
Write a pre-arrival room upgrade request email for a guest staying at {generation_input.hotel} in {generation_input.city}.
</task>

<booking>
- Hotel: {generation_input.hotel}
- City: {generation_input.city}
- Check-in: {generation_input.checkin}
- Check-out: {generation_input.checkout}
- Stay dates (short form): {stay_dates}
- Room booked: {generation_input.room or 'Not specified'}
- Booking channel: {generation_input.channel}
</booking>

<context>
- Length of stay: {generation_input.length_of_stay or 'Not specified'}
- Arrival day: {generation_input.arrival_day}
- Preferred check-in time: {generation_input.checkin_time_pref or 'Not specified'}
- Loyalty status: {generation_input.loyalty}
- Occasion: {generation_input.occasion}
- Flexibility priority: {generation_input.flexibility_primary}
- Flexibility detail: {generation_input.flexibility_detail or 'N/A'}
- Preferred room type: {generation_input.preferred_room_type or 'Not specified'}
- How the guest prefers to ask: {generation_input.ask_preference}
</context>

<subject_rules>
- Include the stay dates in short form ("{stay_dates}")
- Example: "Upcoming stay {stay_dates} — quick note ahead of arrival"
</subject_rules>

<body_rules>
1. Greeting on the first line, then "{CONFIRMATION_PLACEHOLDER}" on its own line, kept exactly as shown.
2. The ask: {flexibility_note} Use the phrase "{REQUIRED_PHRASE}" exactly once, inside the ask.
3. Reference at least two details from the booking or context (arrival day, length of stay, channel, loyalty, occasion).
4. One operational-courtesy signal (availability comes first).
5. Soft close: happy to keep the existing reservation if nothing is possible.
6. Sign with "{SIGNATURE_PLACEHOLDER}".
</body_rules>

<mitigation>
{mitigation_section}
</mitigation>

<contract>
{contract_summary()}
</contract>

<banned_words>
Never use: {banned}, "entitled", "deserve". Do not mention AI or the tool that wrote the email.
</banned_words>

<output_format>
Respond with ONLY a raw JSON object in this exact format (no code fences):
{{
  "email_subject": "string",
  "email_body": "string",
  "timing_guidance": ["string", "string", "string"],
  "fallback_script": "string"
}}
</output_format>"""

    return prompt


def create_correction_prompt(original_prompt: str, reasons: List[str]) -> str:
    """
    Create the correction-pass prompt.

    Restates every violation verbatim and the full contract, and asks for a
    complete replacement rather than a diff. This is the only place
    validation reasons are sent back to the model.

    Args:
        original_prompt: The first-pass prompt
        reasons: Ordered validation reasons from the first pass

    Returns:
        Formatted user prompt
    """
    violations = "\n".join(f"- {reason}" for reason in reasons)

    return f"""<violations>
Your previous response violated these constraints:
{violations}
</violations>

<instructions>
Generate a COMPLETE replacement response that fixes ALL of the issues above.
Return the full JSON object with all four fields, not a list of changes.
</instructions>

<contract>
Every rule below still applies in full:
{contract_summary()}
</contract>

<output_format>
Respond with ONLY a raw JSON object in this exact format (no code fences):
{{
  "email_subject": "string",
  "email_body": "string",
  "timing_guidance": ["string", "string", "string"],
  "fallback_script": "string"
}}
</output_format>

<original_request>
{original_prompt}
</original_request>"""
