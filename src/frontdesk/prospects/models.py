"""
Prospect snapshots and the analysis attached to them by the scorer.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from enum import Enum

from pydantic import BaseModel, ConfigDict, Field


class ProspectStatus(str, Enum):
    """Known prospect pipeline statuses."""

    NEW = "New"
    PROSPECT = "Prospect"
    CALLBACK = "Callback"
    FOLLOW_UP = "Follow-up"
    COLD = "Cold"

    @classmethod
    def resolve(cls, value: str | None) -> ProspectStatus | None:
        """Match a raw status label, ignoring case and surrounding whitespace."""
        if value is None:
            return None
        needle = str(value).strip().casefold()
        for status in cls:
            if status.value.casefold() == needle:
                return status
        return None


class Priority(str, Enum):
    """Dialing priority derived from score and success probability."""

    HIGH = "high"
    MEDIUM = "medium"
    LOW = "low"


class Prospect(BaseModel):
    """Immutable snapshot of a contact handed over by a prospect source.

    Status and days-in-status are not validated here: unknown labels and
    missing counters are scored with fallback weights.
    """

    model_config = ConfigDict(frozen=True)

    id: int | str = Field(..., description="Stable prospect identifier")
    phone: str = Field(default="", description="Display phone number")
    status: str | None = Field(default=None, description="Pipeline status label")
    days_in_status: int | None = Field(
        default=None,
        description="Days since the status last changed",
    )
    preferred_time: str | None = Field(
        default=None,
        description="Contact-time preference (morning when unset)",
    )

    @property
    def key(self) -> str:
        """Identifier used for attempt bookkeeping."""
        return str(self.id)


@dataclass(frozen=True)
class CallTiming:
    """Recommended contact hour for a prospect."""

    recommended_hour: int
    confidence: float
    reasoning: str


@dataclass(frozen=True)
class CallStrategy:
    """Conversation template for a prospect's status."""

    approach: str
    talking_points: tuple[str, ...] = field(default_factory=tuple)
    target_duration_hint: str = ""


@dataclass(frozen=True)
class Analysis:
    """Deterministic scoring output for one prospect at one point in time."""

    score: int
    call_timing: CallTiming
    success_probability: float
    priority: Priority
    strategy: CallStrategy


@dataclass(frozen=True)
class ScoredProspect:
    """A prospect paired with its current analysis."""

    prospect: Prospect
    analysis: Analysis

    @property
    def id(self) -> int | str:
        return self.prospect.id

    @property
    def key(self) -> str:
        return self.prospect.key

    @property
    def phone(self) -> str:
        return self.prospect.phone

    @property
    def status(self) -> str | None:
        return self.prospect.status

    @property
    def score(self) -> int:
        return self.analysis.score
