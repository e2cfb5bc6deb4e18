"""Core data models for the request generation pipeline."""

from dataclasses import dataclass, field, replace
from enum import Enum
from typing import Any, Dict, List, Optional
from datetime import datetime


class Provenance(str, Enum):
    """Which pipeline stage produced the final payload."""
    FIRST = "first"
    SECOND = "second"
    REPAIRED = "repaired"
    FALLBACK = "fallback"
    ERROR = "error"


class GenerationStage(Enum):
    """States of the generation state machine."""
    PASS1 = "pass1"
    PASS2 = "pass2"
    REPAIR = "repair"
    FALLBACK = "fallback"
    DONE = "done"


@dataclass(frozen=True)
class GenerationInput:
    """
    Sanitized booking and traveler context. Built by sanitize_input().

    Every field is a bounded-length string. Optional fields carry neutral
    defaults instead of None.
    """

    # Booking
    hotel: str
    city: str
    checkin: str
    checkout: str
    room: str = ""
    channel: str = "Direct with hotel"

    # Context
    arrival_day: str = ""
    ask_preference: str = "both"
    length_of_stay: str = ""
    checkin_time_pref: str = ""
    loyalty: str = "None"
    occasion: str = "None"
    flexibility_primary: str = "any"
    flexibility_detail: str = ""
    preferred_room_type: str = ""


@dataclass(frozen=True)
class OutputContract:
    """
    The generated payload: subject, body, three timing tips, desk script.

    Immutable so that each stage hands a fresh copy to the next; use
    with_changes() to derive a patched contract.
    """

    subject: str
    body: str
    timing_tips: List[str]
    desk_script: str

    def with_changes(self, **changes: Any) -> "OutputContract":
        """Return a copy with the given fields replaced."""
        if "timing_tips" in changes:
            changes["timing_tips"] = list(changes["timing_tips"])
        return replace(self, **changes)

    def to_payload(self) -> Dict[str, Any]:
        """Wire format returned to API callers."""
        return {
            "email_subject": self.subject,
            "email_body": self.body,
            "timing_guidance": list(self.timing_tips),
            "fallback_script": self.desk_script,
        }

    @classmethod
    def from_payload(cls, payload: Dict[str, Any]) -> "OutputContract":
        """Build from the wire format (keys as in to_payload)."""
        return cls(
            subject=payload["email_subject"],
            body=payload["email_body"],
            timing_tips=list(payload["timing_guidance"]),
            desk_script=payload["fallback_script"],
        )


@dataclass
class ValidationResult:
    """Outcome of validating an OutputContract. Reasons keep rule order."""

    ok: bool
    reasons: List[str] = field(default_factory=list)


@dataclass
class RepairOutcome:
    """Result of a deterministic repair pass."""

    patched: OutputContract
    applied_repairs: List[str] = field(default_factory=list)

    @property
    def changed(self) -> bool:
        return bool(self.applied_repairs)


@dataclass
class GenerationRecord:
    """
    Per-request observability record. Logged to Logfire, never persisted.
    """

    request_id: str
    """Correlation id, echoed to callers as X-Request-Id"""

    provenance: Optional[Provenance] = None
    """Terminal provenance tag, set when the state machine reaches DONE"""

    model_calls: int = 0
    """Number of external model calls made (never more than 2)"""

    stage_reasons: Dict[str, List[str]] = field(default_factory=dict)
    """Validation reasons recorded per stage, e.g. {"pass1": [...]}"""

    applied_repairs: List[str] = field(default_factory=list)

    upstream_error: Optional[str] = None
    """Error message of the model call that sent the run to fallback"""

    started_at: datetime = field(default_factory=datetime.utcnow)

    stage_timings: Dict[str, float] = field(default_factory=dict)

    def total_duration(self) -> float:
        """Seconds since the record was created"""
        return (datetime.utcnow() - self.started_at).total_seconds()

    def add_timing(self, stage: str, duration: float) -> None:
        self.stage_timings[stage] = duration


@dataclass
class GenerationResult:
    """Tagged terminal value of the generation state machine."""

    output: OutputContract
    provenance: Provenance
    record: GenerationRecord

    @property
    def request_id(self) -> str:
        return self.record.request_id
