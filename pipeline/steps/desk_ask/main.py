"""
Desk-Ask Copy

Generates the "If you ask at the desk" card with a structured-output agent.
Any failure (provider error, timeout, schema violation) returns the static
card, so the endpoint always answers.
"""

import asyncio
from typing import Optional, Tuple

import logfire

from config.settings import settings
from utils.llm_agent import run_agent

from .models import DeskAskCopy
from .prompts import SYSTEM_PROMPT, USER_PROMPT

DESK_ASK_FALLBACK = DeskAskCopy.model_validate({
    "title": "If you ask at the desk",
    "sections": [
        {
            "heading": "When to ask",
            "bullets": [
                "Ask during check-in, before handing over your ID or credit card",
                "Mid-afternoon arrivals often have better availability",
                "Avoid asking when the lobby is busy or staff seem rushed",
            ],
        },
        {
            "heading": "How to reference the email",
            "bullets": [
                "Mention you sent an email ahead of time, but don't push",
                "Say something like: 'I reached out earlier about availability'",
                "If they haven't seen it, move on gracefully",
            ],
        },
        {
            "heading": "What to say",
            "bullets": [
                "Ask if any upgraded rooms happen to be available tonight",
                "Express flexibility: 'I'm happy with whatever works best'",
                "Thank them regardless of the outcome",
            ],
        },
    ],
    "script": {
        "intro": "Here's a natural way to ask at check-in:",
        "line1": (
            "Hi, I sent an email earlier about my stay. If any upgraded rooms are expected "
            "to be available this evening, I'd be grateful to be considered."
        ),
        "line2": "I completely understand if not, just thought I'd ask.",
    },
    "tone_reminders": [
        "Smile and make eye contact",
        "Keep a calm, unhurried demeanor",
        "Avoid sounding entitled or demanding",
    ],
})


async def generate_desk_ask_copy(
    request_id: str,
    timeout: Optional[float] = None
) -> Tuple[DeskAskCopy, str]:
    """
    Generate the desk-ask card.

    Args:
        request_id: Correlation id for logs
        timeout: Seconds allowed for the model call (defaults to settings)

    Returns:
        (copy, source) where source is "model" or "fallback"
    """
    timeout = settings.generation_timeout_seconds if timeout is None else timeout

    with logfire.span("pipeline.desk_ask", request_id=request_id):
        try:
            copy = await asyncio.wait_for(
                run_agent(
                    prompt=USER_PROMPT,
                    model=settings.generation_model,
                    output_type=DeskAskCopy,
                    system_prompt=SYSTEM_PROMPT,
                    temperature=settings.desk_ask_temperature,
                    max_tokens=settings.desk_ask_max_tokens,
                    retries=0,
                ),
                timeout=timeout
            )
        except Exception as e:
            logfire.warning(
                "Desk-ask generation failed, using fallback",
                request_id=request_id,
                error=str(e),
                error_type=type(e).__name__
            )
            return DESK_ASK_FALLBACK.model_copy(deep=True), "fallback"

        logfire.info("Desk-ask copy generated", request_id=request_id)
        return copy, "model"
