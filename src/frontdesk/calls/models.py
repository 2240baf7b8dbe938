"""
Call outcome, call record and dialing statistics models.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from datetime import datetime
from enum import Enum
from typing import Any


class CallOutcome(str, Enum):
    """Possible outcomes of a dialed call."""

    SUCCESS = "success"
    INTERESTED = "interested"
    NO_ANSWER = "no-answer"
    NOT_INTERESTED = "not-interested"
    VOICEMAIL = "voicemail"
    BUSY = "busy"
    CALLBACK_REQUESTED = "callback-requested"
    FAILED = "failed"

    @property
    def is_successful(self) -> bool:
        return self in SUCCESSFUL_OUTCOMES

    @property
    def is_answered(self) -> bool:
        return self not in UNANSWERED_OUTCOMES


SUCCESSFUL_OUTCOMES = frozenset({CallOutcome.SUCCESS, CallOutcome.INTERESTED})
UNANSWERED_OUTCOMES = frozenset(
    {
        CallOutcome.NO_ANSWER,
        CallOutcome.VOICEMAIL,
        CallOutcome.BUSY,
        CallOutcome.FAILED,
    }
)


@dataclass(frozen=True)
class CallRecord:
    """Immutable record of one dialed call."""

    prospect_id: str
    outcome: CallOutcome
    duration_seconds: float
    notes: str
    timestamp: datetime
    attempt_number: int

    def to_dict(self) -> dict[str, Any]:
        return {
            "prospect_id": self.prospect_id,
            "outcome": self.outcome.value,
            "duration_seconds": self.duration_seconds,
            "notes": self.notes,
            "timestamp": self.timestamp.isoformat(),
            "attempt_number": self.attempt_number,
        }


@dataclass
class DialingStats:
    """Per-session counters owned by the call queue."""

    total_calls: int = 0
    successful_calls: int = 0
    call_attempts: dict[str, int] = field(default_factory=dict)
    daily_target: int = 200
    inbound_handled: int = 0
    inbound_target: int = 10

    def snapshot(self) -> DialingStats:
        """Return a detached copy safe to hand to callers."""
        return DialingStats(
            total_calls=self.total_calls,
            successful_calls=self.successful_calls,
            call_attempts=dict(self.call_attempts),
            daily_target=self.daily_target,
            inbound_handled=self.inbound_handled,
            inbound_target=self.inbound_target,
        )


@dataclass(frozen=True)
class QueueInsights:
    """Point-in-time view derived from the dialing statistics."""

    success_rate: float
    daily_progress: float
    calls_remaining: int
    average_call_seconds: float
    best_performing_hours: tuple[int, ...]
    recommendations: tuple[str, ...]
