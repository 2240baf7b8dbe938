"""
Deterministic prospect scoring.

Turns a prospect snapshot and an evaluation timestamp into a 0-100 score, a
recommended call hour, a success probability, a priority band and a call
strategy. Scoring is total: malformed input degrades to the lowest weights
instead of raising.
"""

from __future__ import annotations

import math
from collections.abc import Mapping
from datetime import datetime

from frontdesk.prospects.models import (
    Analysis,
    CallStrategy,
    CallTiming,
    Priority,
    Prospect,
    ProspectStatus,
)
from frontdesk.shared.exceptions import ScoringFault
from frontdesk.shared.logging import get_logger

logger = get_logger(__name__)

SCORING_WEIGHTS: dict[str, float] = {
    "days_in_status": 0.30,
    "prospect_type": 0.25,
    "time_of_day": 0.20,
    "historical_success": 0.15,
    "prospect_profile": 0.10,
}

STATUS_SCORES: dict[ProspectStatus, float] = {
    ProspectStatus.NEW: 1.0,
    ProspectStatus.PROSPECT: 0.9,
    ProspectStatus.CALLBACK: 0.8,
    ProspectStatus.FOLLOW_UP: 0.7,
    ProspectStatus.COLD: 0.5,
}
UNKNOWN_STATUS_SCORE = 0.3
FALLBACK_DAYS_SCORE = 0.1

# Historical connect-to-interest rates per status segment
HISTORICAL_SUCCESS_RATES: dict[ProspectStatus, float] = {
    ProspectStatus.NEW: 0.25,
    ProspectStatus.PROSPECT: 0.22,
    ProspectStatus.CALLBACK: 0.20,
    ProspectStatus.FOLLOW_UP: 0.18,
    ProspectStatus.COLD: 0.15,
}
HISTORICAL_RATE_FLOOR = 0.15
HISTORICAL_RATE_CEILING = 0.25

MORNING_PREFERENCE = "morning"

STRATEGY_TEMPLATES: dict[ProspectStatus, CallStrategy] = {
    ProspectStatus.NEW: CallStrategy(
        approach="Warm introduction, focus on immediate value",
        talking_points=("Welcome call", "Service overview", "Quick win"),
        target_duration_hint="5-7 minutes",
    ),
    ProspectStatus.PROSPECT: CallStrategy(
        approach="Consultative, needs discovery",
        talking_points=("Pain points", "Current situation", "Solutions"),
        target_duration_hint="10-15 minutes",
    ),
    ProspectStatus.CALLBACK: CallStrategy(
        approach="Follow through on previous conversation",
        talking_points=("Previous discussion recap", "Next steps", "Timeline"),
        target_duration_hint="5-10 minutes",
    ),
    ProspectStatus.FOLLOW_UP: CallStrategy(
        approach="Re-engage and confirm open items",
        talking_points=("Outstanding questions", "Documents needed", "Decision date"),
        target_duration_hint="5-10 minutes",
    ),
    ProspectStatus.COLD: CallStrategy(
        approach="Short re-introduction, qualify interest quickly",
        talking_points=("Who we are", "What changed", "Permission to follow up"),
        target_duration_hint="3-5 minutes",
    ),
}


def _round_half_up(value: float) -> int:
    # round() is banker's rounding; scores must round .5 upwards
    return int(math.floor(round(value, 6) + 0.5))


def _coerce_days(value: object) -> int:
    if value is None:
        raise ScoringFault("days_in_status is missing", field="days_in_status")
    if isinstance(value, bool) or not isinstance(value, int):
        raise ScoringFault(
            f"days_in_status is not an integer: {value!r}",
            field="days_in_status",
            value=value,
        )
    return value


def score_days_in_status(days: object) -> float:
    """Score how ripe a prospect is for a call from its days in status.

    Bands are evaluated in order and the first match wins.
    """
    try:
        value = _coerce_days(days)
    except ScoringFault as exc:
        logger.debug("Falling back to lowest days score", extra={"reason": str(exc)})
        return FALLBACK_DAYS_SCORE

    if 2 <= value <= 5:
        return 1.0
    if 1 <= value <= 7:
        return 0.8
    if 8 <= value <= 14:
        return 0.6
    if value > 14:
        return 0.3
    return FALLBACK_DAYS_SCORE


def score_prospect_type(status: str | None) -> float:
    resolved = ProspectStatus.resolve(status)
    if resolved is None:
        return UNKNOWN_STATUS_SCORE
    return STATUS_SCORES.get(resolved, UNKNOWN_STATUS_SCORE)


def score_time_of_day(hour: int) -> float:
    """Score a 24h clock hour by typical answer rates."""
    if 9 <= hour <= 11:
        return 1.0
    if 14 <= hour <= 16:
        return 0.9
    if 17 <= hour <= 18:
        return 0.7
    if 12 <= hour <= 13:
        return 0.6
    return 0.3


def next_optimal_hour(current_hour: int, preference: str) -> int:
    """Pick the next call hour for a contact-time preference."""
    if preference == MORNING_PREFERENCE:
        if current_hour < 9:
            return 9
        if current_hour < 11:
            return current_hour + 1
        # Next morning
        return 10
    return (current_hour + 1) % 24


class ProspectScorer:
    """Scores prospects with fixed weights and a historical-rate table."""

    def __init__(
        self,
        historical_rates: Mapping[ProspectStatus, float] | None = None,
        weights: Mapping[str, float] | None = None,
    ) -> None:
        self._historical_rates = dict(historical_rates or HISTORICAL_SUCCESS_RATES)
        self._weights = dict(weights or SCORING_WEIGHTS)
        total = sum(self._weights.values())
        if not math.isclose(total, 1.0, abs_tol=1e-9):
            raise ValueError(f"scoring weights must sum to 1.0, got {total}")

    def score(self, prospect: Prospect, now: datetime) -> Analysis:
        """Analyze one prospect at the given evaluation time."""
        score = self.calculate_score(prospect, now)
        probability = self.predict_success(prospect)
        return Analysis(
            score=score,
            call_timing=self.predict_call_timing(prospect, now),
            success_probability=probability,
            priority=self.determine_priority(score, probability),
            strategy=self.call_strategy(prospect),
        )

    def calculate_score(self, prospect: Prospect, now: datetime) -> int:
        weighted = (
            score_days_in_status(prospect.days_in_status) * self._weights["days_in_status"]
            + score_prospect_type(prospect.status) * self._weights["prospect_type"]
            + score_time_of_day(now.hour) * self._weights["time_of_day"]
            + self.historical_success_score(prospect) * self._weights["historical_success"]
            + self.profile_score(prospect) * self._weights["prospect_profile"]
        )
        return max(0, min(100, _round_half_up(weighted * 100)))

    def historical_success_rate(self, prospect: Prospect) -> float:
        """Look up the historical success rate for the prospect's segment."""
        status = ProspectStatus.resolve(prospect.status)
        if status is None:
            return HISTORICAL_RATE_FLOOR
        return self._historical_rates.get(status, HISTORICAL_RATE_FLOOR)

    def historical_success_score(self, prospect: Prospect) -> float:
        """Historical rate normalized over the table's range to [0, 1]."""
        rate = self.historical_success_rate(prospect)
        span = HISTORICAL_RATE_CEILING - HISTORICAL_RATE_FLOOR
        normalized = round((rate - HISTORICAL_RATE_FLOOR) / span, 6)
        return max(0.0, min(1.0, normalized))

    def profile_score(self, prospect: Prospect) -> float:
        # Reserved for profile enrichment; contributes nothing yet.
        return 0.0

    def predict_call_timing(self, prospect: Prospect, now: datetime) -> CallTiming:
        preference = (prospect.preferred_time or MORNING_PREFERENCE).strip().lower()
        recommended = next_optimal_hour(now.hour, preference)
        status_label = prospect.status or "unknown"
        return CallTiming(
            recommended_hour=recommended,
            confidence=round(0.7 + 0.3 * score_time_of_day(recommended), 2),
            reasoning=f"Based on {status_label} status and {preference} preference",
        )

    def predict_success(self, prospect: Prospect) -> float:
        probability = 0.5
        days = prospect.days_in_status
        if isinstance(days, int) and 2 <= days <= 5:
            probability += 0.2
        if ProspectStatus.resolve(prospect.status) is ProspectStatus.NEW:
            probability += 0.1
        return round(min(probability, 0.9), 2)

    @staticmethod
    def determine_priority(score: int, success_probability: float) -> Priority:
        combined = (score + success_probability * 100) / 2
        if combined > 80:
            return Priority.HIGH
        if combined > 60:
            return Priority.MEDIUM
        return Priority.LOW

    @staticmethod
    def call_strategy(prospect: Prospect) -> CallStrategy:
        status = ProspectStatus.resolve(prospect.status)
        if status is None:
            return STRATEGY_TEMPLATES[ProspectStatus.PROSPECT]
        return STRATEGY_TEMPLATES.get(status, STRATEGY_TEMPLATES[ProspectStatus.PROSPECT])
