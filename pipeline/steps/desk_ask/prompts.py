"""Prompts for the desk-ask copy agent."""

from .models import DESK_ASK_HEADINGS, DESK_ASK_TITLE, MAX_BULLET_LENGTH

SYSTEM_PROMPT = (
    "You write concise, high-converting UI microcopy for a travel product. "
    "Output must match the provided schema exactly. No extra keys. No markdown. No commentary."
)

_headings = ", ".join(f"'{heading}'" for heading in DESK_ASK_HEADINGS)

USER_PROMPT = f"""Generate content for a UI card titled '{DESK_ASK_TITLE}' that helps a hotel guest ask politely for an upgrade or flexibility.

Rules:
- title must be exactly "{DESK_ASK_TITLE}"
- section headings must be exactly: {_headings} (in that order)
- 2-3 bullets per section, each bullet <= {MAX_BULLET_LENGTH} characters
- script.intro 1 sentence max; script.line1 and script.line2 each 1 sentence max
- tone_reminders must contain exactly 3 items and include: smile, calm demeanor, and avoiding entitlement
- Keep it practical: recommend timing during check-in and how to mention you emailed earlier without pressure."""
