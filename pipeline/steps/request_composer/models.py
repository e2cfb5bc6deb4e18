"""
Request Composer Models

Pydantic schema for the raw JSON the model is asked to return.
"""

from typing import List

from pydantic import BaseModel, ConfigDict, Field


class ModelResponse(BaseModel):
    """
    Raw structured response expected from the model.

    Only types are checked here. Contract rules (word counts, phrases,
    banned terms) belong to the contract validator so violations can be
    corrected or repaired instead of rejected.
    """

    model_config = ConfigDict(
        extra="ignore",
        strict=True,
        json_schema_extra={
            "example": {
                "email_subject": "Upcoming stay Jan 15–18 — quick note ahead of arrival",
                "email_body": "Hello [Hotel Team],\n\nReservation: [Confirmation Number]\n\n...",
                "timing_guidance": [
                    "Send 24–36 hours before arrival when staffing is stable.",
                    "Be specific and flexible; availability drives decisions.",
                    "If no reply, ask calmly at check-in before ID is handed over."
                ],
                "fallback_script": "If any upgraded rooms are expected to remain available this evening, I would be grateful to be considered."
            }
        }
    )

    email_subject: str = Field(description="6-12 word subject line with stay dates")

    email_body: str = Field(description="Full email text, 160-210 words")

    timing_guidance: List[str] = Field(description="Timing tips (exactly 3 expected)")

    fallback_script: str = Field(description="One sentence to say at the front desk")
