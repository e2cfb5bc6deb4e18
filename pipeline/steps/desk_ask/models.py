"""
Desk-Ask Copy Models

Pydantic models for the "If you ask at the desk" UI card. Used as the
structured output type of the desk-ask agent, so every rule below is
enforced on the model's answer.
"""

from typing import List

from pydantic import BaseModel, Field, field_validator

DESK_ASK_TITLE = "If you ask at the desk"
DESK_ASK_HEADINGS = ["When to ask", "How to reference the email", "What to say"]
MAX_BULLET_LENGTH = 120


class DeskAskSection(BaseModel):
    """One headed group of 2-3 short bullets."""

    heading: str

    bullets: List[str] = Field(min_length=2, max_length=3)

    @field_validator("bullets")
    @classmethod
    def validate_bullet_length(cls, v: List[str]) -> List[str]:
        for bullet in v:
            if len(bullet) > MAX_BULLET_LENGTH:
                raise ValueError(f"Bullet longer than {MAX_BULLET_LENGTH} characters: '{bullet[:40]}...'")
        return v


class DeskAskScript(BaseModel):
    """Short spoken script: an intro and two lines."""

    intro: str
    line1: str
    line2: str


class DeskAskCopy(BaseModel):
    """
    Content of the desk-ask card.

    Title and section headings are fixed; the model only writes the bullets,
    script and tone reminders.
    """

    title: str = Field(description=f'Exactly "{DESK_ASK_TITLE}"')

    sections: List[DeskAskSection] = Field(
        description="Three sections, headings in fixed order",
        min_length=3,
        max_length=3
    )

    script: DeskAskScript

    tone_reminders: List[str] = Field(
        description="Exactly 3 reminders: smile, calm demeanor, avoid entitlement",
        min_length=3,
        max_length=3
    )

    @field_validator("title")
    @classmethod
    def validate_title(cls, v: str) -> str:
        if v != DESK_ASK_TITLE:
            raise ValueError(f'title must be exactly "{DESK_ASK_TITLE}"')
        return v

    @field_validator("sections")
    @classmethod
    def validate_headings(cls, v: List[DeskAskSection]) -> List[DeskAskSection]:
        headings = [section.heading for section in v]
        if headings != DESK_ASK_HEADINGS:
            raise ValueError(f"section headings must be {DESK_ASK_HEADINGS}, got {headings}")
        return v
