"""Root conftest.py for pytest configuration.

This file configures pytest for the entire project, ensuring:
- Proper Python path setup for imports
- Local-only Logfire configuration
- Shared fixtures for building payloads and faking the model
"""

import sys
from pathlib import Path
from typing import List, Optional

import logfire
import pytest


# ============================================================================
# Python Path Configuration
# ============================================================================

def pytest_configure(config):
    """Configure pytest with custom settings and ensure project root is in sys.path."""

    # Add project root to sys.path to ensure 'pipeline' package is importable
    project_root = Path(__file__).parent.resolve()
    if str(project_root) not in sys.path:
        sys.path.insert(0, str(project_root))

    # Register custom markers
    config.addinivalue_line(
        "markers",
        "slow: marks tests as slow (deselect with '-m \"not slow\"')"
    )
    config.addinivalue_line(
        "markers",
        "integration: marks tests as integration tests requiring external services"
    )
    config.addinivalue_line(
        "markers",
        "unit: marks tests as unit tests (fast, no external dependencies)"
    )

    # Tests never ship spans anywhere
    logfire.configure(
        service_name="stay-request-api-tests",
        environment="test",
        send_to_logfire=False,
        console=False,
    )


# ============================================================================
# Payload Builders
# ============================================================================

GREETING = "Hello Harbor View Team,"
PLACEHOLDER = "Reservation: [Confirmation Number]"
ASK_SENTENCE = (
    "If any higher-category rooms are forecasted to remain available around my "
    "check-in time, I would be grateful to be considered."
)
CLOSING = "Thank you for any consideration you can offer."
SIGN_OFF = "Warm regards,\n[Your Name]"

# Exactly 10 words
FILLER_SENTENCE = "We are excited to explore the city and relax nearby."
REMAINDER_WORDS = ["Looking", "forward", "to", "a", "calm", "and", "restful", "visit", "overall"]

VALID_SUBJECT = "Upcoming stay Jan 15–18 — quick note ahead of arrival"
VALID_TIPS = [
    "Send 24–36 hours before arrival when staffing is stable.",
    "Be specific and flexible; availability drives decisions.",
    "If no reply, ask calmly at check-in before ID is handed over.",
]
VALID_SCRIPT = (
    "If any upgraded rooms are expected to remain available this evening, "
    "I would be grateful to be considered."
)


def _count(text: str) -> int:
    return len(text.split())


def build_body(
    total_words: int = 180,
    ask: str = ASK_SENTENCE,
    extra_paragraph: str = "",
    placeholder: bool = True,
) -> str:
    """
    Build an email body with an exact whitespace word count.

    Layout: greeting, placeholder, ask, [extra], filler, closing, sign-off.
    Filler is made of 10-word sentences plus one shorter remainder sentence.
    """
    fixed = [GREETING, ask, CLOSING, SIGN_OFF]
    if placeholder:
        fixed.append(PLACEHOLDER)
    if extra_paragraph:
        fixed.append(extra_paragraph)

    filler_words = total_words - sum(_count(part) for part in fixed)
    if filler_words < 0:
        raise ValueError(f"total_words={total_words} is below the fixed text length")

    sentences = [FILLER_SENTENCE] * (filler_words // 10)
    remainder = filler_words % 10
    if remainder:
        sentences.append(" ".join(REMAINDER_WORDS[:remainder]) + ".")

    paragraphs = [GREETING]
    if placeholder:
        paragraphs.append(PLACEHOLDER)
    paragraphs.append(ask)
    if extra_paragraph:
        paragraphs.append(extra_paragraph)
    if sentences:
        paragraphs.append(" ".join(sentences))
    paragraphs.extend([CLOSING, SIGN_OFF])

    return "\n\n".join(paragraphs)


@pytest.fixture
def make_body():
    """Callable building a body of an exact word count (see build_body)."""
    return build_body


@pytest.fixture
def make_output():
    """
    Callable building an OutputContract that passes the contract unless
    a field is overridden.
    """
    from pipeline.models.core import OutputContract

    def _make_output(
        subject: str = VALID_SUBJECT,
        body: Optional[str] = None,
        timing_tips: Optional[List[str]] = None,
        desk_script: str = VALID_SCRIPT,
    ) -> OutputContract:
        return OutputContract(
            subject=subject,
            body=body if body is not None else build_body(),
            timing_tips=list(timing_tips if timing_tips is not None else VALID_TIPS),
            desk_script=desk_script,
        )

    return _make_output


@pytest.fixture
def generation_input():
    """A sanitized input for a three-night January stay."""
    from pipeline.models.core import GenerationInput

    return GenerationInput(
        hotel="Harbor View Hotel",
        city="Seattle",
        checkin="2025-01-15",
        checkout="2025-01-18",
        room="Standard King",
        channel="Direct with hotel",
        arrival_day="Wednesday",
        ask_preference="both",
        length_of_stay="3 nights",
        occasion="Anniversary",
    )


@pytest.fixture
def booking_payload():
    """Raw request body for POST /api/generate-request."""
    return {
        "booking": {
            "hotel": "Harbor View Hotel",
            "city": "Seattle",
            "checkin": "2025-01-15",
            "checkout": "2025-01-18",
            "room": "Standard King",
            "channel": "Direct with hotel",
        },
        "context": {
            "arrivalDay": "Wednesday",
            "askPreference": "both",
            "lengthOfStay": "3 nights",
            "loyalty": "None",
            "occasion": "Anniversary",
            "flexibilityPrimary": "any",
        },
    }


# ============================================================================
# Fake Model Collaborator
# ============================================================================

class ScriptedGenerator:
    """
    Async stand-in for RequestComposer.

    Each call consumes the next scripted response: an OutputContract is
    returned, an exception instance is raised. Prompts are recorded.
    """

    def __init__(self, *responses):
        self.responses = list(responses)
        self.prompts: List[str] = []

    @property
    def calls(self) -> int:
        return len(self.prompts)

    async def __call__(self, prompt: str):
        self.prompts.append(prompt)
        if not self.responses:
            raise AssertionError("ScriptedGenerator called more times than scripted")
        response = self.responses.pop(0)
        if isinstance(response, BaseException):
            raise response
        return response


@pytest.fixture
def scripted_generator():
    """Factory: scripted_generator(output_or_exception, ...)"""
    return ScriptedGenerator


# ============================================================================
# Shared Fixtures
# ============================================================================

@pytest.fixture(scope="session")
def project_root():
    """Return the absolute path to the project root directory."""
    return Path(__file__).parent.resolve()


@pytest.fixture
def mock_env_vars(monkeypatch):
    """Fixture to mock environment variables for testing.

    Usage:
        def test_something(mock_env_vars):
            mock_env_vars({"API_KEY": "test-key", "DEBUG": "true"})
    """
    def _set_env_vars(env_dict: dict):
        for key, value in env_dict.items():
            monkeypatch.setenv(key, value)

    return _set_env_vars
