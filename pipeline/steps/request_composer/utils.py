"""
Request Composer Utilities

Input sanitization, stay-date formatting and model-output parsing.
"""

import re
from datetime import datetime
from typing import Any, Dict, List, Mapping, Optional

from pydantic import ValidationError as PydanticValidationError

from pipeline.core.exceptions import InputValidationError, MalformedModelOutput
from pipeline.models.core import GenerationInput, OutputContract

from .models import ModelResponse

# Length caps applied to every incoming field
MAX_FIELD_LENGTH = 200
MAX_DATE_LENGTH = 10

DATE_FORMATS = ("%Y-%m-%d", "%Y/%m/%d")

CODE_FENCE_PATTERN = re.compile(r"^```(?:json)?\s*|\s*```$", re.IGNORECASE)


def truncate(value: Any, max_length: int = MAX_FIELD_LENGTH) -> str:
    """Coerce to a stripped string and cap its length. None becomes ''."""
    if value is None:
        return ""
    text = str(value).strip()
    return text[:max_length]


def _first_present(source: Mapping[str, Any], *keys: str) -> Any:
    """Return the first non-empty value among keys (handles field aliases)."""
    for key in keys:
        value = source.get(key)
        if value not in (None, ""):
            return value
    return None


def sanitize_input(
    booking: Optional[Mapping[str, Any]],
    context: Optional[Mapping[str, Any]]
) -> GenerationInput:
    """
    Validate required fields and build a length-capped GenerationInput.

    Required:
    - booking.hotel, booking.city, booking.checkin, booking.checkout
    - context.arrivalDay, context.askPreference

    Optional fields get neutral defaults so no None reaches the prompt.

    Args:
        booking: Raw booking mapping (may be None)
        context: Raw context mapping (may be None)

    Returns:
        GenerationInput ready for the pipeline

    Raises:
        InputValidationError: Listing every missing required field
    """
    errors: List[str] = []

    if booking is None:
        errors.append("Missing booking object")
        booking = {}
    else:
        for key in ("hotel", "city", "checkin", "checkout"):
            if not truncate(booking.get(key)):
                errors.append(f"Missing booking.{key}")

    if context is None:
        errors.append("Missing context object")
        context = {}
    else:
        if not truncate(_first_present(context, "arrivalDay", "arrival_day")):
            errors.append("Missing context.arrivalDay")
        if not truncate(_first_present(context, "askPreference", "ask_preference")):
            errors.append("Missing context.askPreference")

    if errors:
        raise InputValidationError(errors)

    return GenerationInput(
        hotel=truncate(booking.get("hotel")),
        city=truncate(booking.get("city")),
        checkin=truncate(booking.get("checkin"), MAX_DATE_LENGTH),
        checkout=truncate(booking.get("checkout"), MAX_DATE_LENGTH),
        room=truncate(booking.get("room")),
        channel=truncate(booking.get("channel")) or "Direct with hotel",
        arrival_day=truncate(_first_present(context, "arrivalDay", "arrival_day")),
        ask_preference=truncate(_first_present(context, "askPreference", "ask_preference")),
        length_of_stay=truncate(_first_present(context, "lengthOfStay", "length_of_stay")),
        checkin_time_pref=truncate(_first_present(context, "checkinTimePref", "checkinTime", "checkin_time_pref")),
        loyalty=truncate(_first_present(context, "loyalty", "loyaltyStatus")) or "None",
        occasion=truncate(context.get("occasion")) or "None",
        flexibility_primary=truncate(
            _first_present(context, "flexibilityPrimary", "flexibility_primary", "flexibility")
        ) or "any",
        flexibility_detail=truncate(_first_present(context, "flexibilityDetail", "flexibility_detail")),
        preferred_room_type=truncate(_first_present(context, "preferredRoom", "preferredRoomType")),
    )


def _parse_date(value: str) -> Optional[datetime]:
    for date_format in DATE_FORMATS:
        try:
            return datetime.strptime(value, date_format)
        except ValueError:
            continue
    return None


def format_stay_dates(checkin: str, checkout: str) -> Optional[str]:
    """
    Short stay-date label for subjects.

    Example:
        >>> format_stay_dates("2025-01-15", "2025-01-18")
        'Jan 15–18'
        >>> format_stay_dates("2025-01-30", "2025-02-02")
        'Jan 30–Feb 2'

    Returns:
        Label, or None when the check-in date cannot be parsed
    """
    start = _parse_date(checkin)
    if start is None:
        return None

    end = _parse_date(checkout)
    if end is None or end < start:
        return f"{start:%b} {start.day}"

    if (start.year, start.month) == (end.year, end.month):
        return f"{start:%b} {start.day}–{end.day}"
    return f"{start:%b} {start.day}–{end:%b} {end.day}"


def parse_model_output(raw_text: str) -> OutputContract:
    """
    Parse model text into an OutputContract.

    Strips markdown code fences, then validates the JSON object with the
    ModelResponse schema.

    Raises:
        MalformedModelOutput: If the text is not a JSON object with the
            four expected fields of the expected types
    """
    cleaned = CODE_FENCE_PATTERN.sub("", (raw_text or "").strip()).strip()
    if not cleaned:
        raise MalformedModelOutput("Model returned empty output")

    try:
        response = ModelResponse.model_validate_json(cleaned)
    except PydanticValidationError as e:
        raise MalformedModelOutput(f"Invalid JSON response from model: {e.error_count()} error(s)") from e

    return OutputContract(
        subject=response.email_subject,
        body=response.email_body,
        timing_tips=list(response.timing_guidance),
        desk_script=response.fallback_script,
    )


def describe_output(output: OutputContract) -> Dict[str, Any]:
    """Small summary of a payload for structured logs."""
    return {
        "subject": output.subject,
        "body_chars": len(output.body),
        "tips_count": len(output.timing_tips),
        "script_chars": len(output.desk_script),
    }
