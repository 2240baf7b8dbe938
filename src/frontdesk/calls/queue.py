"""
Ranked call queue with attempt limits and call-window gating.
"""

from __future__ import annotations

from collections import defaultdict
from collections.abc import Iterable
from dataclasses import dataclass
from datetime import datetime
from typing import Protocol

from frontdesk.calls.models import CallOutcome, CallRecord, DialingStats, QueueInsights
from frontdesk.prospects.models import Prospect, ScoredProspect
from frontdesk.prospects.scorer import ProspectScorer
from frontdesk.shared.logging import get_logger

logger = get_logger(__name__)


class CallRecordSink(Protocol):
    """Protocol for durable call record storage."""

    async def append_call_record(self, record: CallRecord) -> None:
        """Persist one call record."""


@dataclass(frozen=True)
class QueuePolicy:
    """Runtime knobs for queue selection and targets."""

    max_attempts: int = 3
    time_window_hours: int = 2
    daily_target: int = 200
    inbound_target: int = 10

    def __post_init__(self) -> None:
        if self.max_attempts <= 0:
            raise ValueError("max_attempts must be > 0")
        if not 0 <= self.time_window_hours <= 12:
            raise ValueError("time_window_hours must be within 0..12")
        if self.daily_target <= 0:
            raise ValueError("daily_target must be > 0")
        if self.inbound_target < 0:
            raise ValueError("inbound_target must be >= 0")


def circular_hour_distance(a: int, b: int) -> int:
    """Distance between two hours on a 24h clock."""
    diff = abs(a - b) % 24
    return min(diff, 24 - diff)


def _id_sort_key(prospect_id: int | str) -> tuple[int, int, str]:
    if isinstance(prospect_id, int) and not isinstance(prospect_id, bool):
        return (0, prospect_id, "")
    return (1, 0, str(prospect_id))


class CallQueue:
    """Holds the ranked prospects and the session's dialing statistics.

    Not safe for concurrent mutation: the automation controller serializes
    every call into it.
    """

    def __init__(
        self,
        scorer: ProspectScorer | None = None,
        record_sink: CallRecordSink | None = None,
        policy: QueuePolicy | None = None,
    ) -> None:
        self._scorer = scorer or ProspectScorer()
        self._record_sink = record_sink
        self._policy = policy or QueuePolicy()
        self._queue: list[ScoredProspect] = []
        self._records: list[CallRecord] = []
        self._stats = DialingStats(
            daily_target=self._policy.daily_target,
            inbound_target=self._policy.inbound_target,
        )

    @property
    def policy(self) -> QueuePolicy:
        return self._policy

    @property
    def queue(self) -> tuple[ScoredProspect, ...]:
        return tuple(self._queue)

    @property
    def stats(self) -> DialingStats:
        return self._stats.snapshot()

    @property
    def records(self) -> tuple[CallRecord, ...]:
        return tuple(self._records)

    @property
    def success_rate(self) -> float:
        if self._stats.total_calls == 0:
            return 0.0
        return self._stats.successful_calls / self._stats.total_calls

    def attempts_for(self, prospect_id: int | str) -> int:
        return self._stats.call_attempts.get(str(prospect_id), 0)

    def history(self, prospect_id: int | str) -> tuple[CallRecord, ...]:
        key = str(prospect_id)
        return tuple(r for r in self._records if r.prospect_id == key)

    def optimize(self, prospects: Iterable[Prospect], now: datetime) -> list[ScoredProspect]:
        """Score every prospect and replace the active queue, best first."""
        scored = [ScoredProspect(prospect=p, analysis=self._scorer.score(p, now)) for p in prospects]
        scored.sort(key=lambda sp: (-sp.analysis.score, _id_sort_key(sp.id)))
        self._queue = scored
        logger.info(
            "Call queue optimized",
            extra={
                "queue_size": len(scored),
                "top_prospect_id": str(scored[0].id) if scored else None,
            },
        )
        return list(scored)

    def is_within_window(self, prospect: ScoredProspect, now: datetime) -> bool:
        recommended = prospect.analysis.call_timing.recommended_hour
        return circular_hour_distance(now.hour, recommended) <= self._policy.time_window_hours

    def has_attempts_left(self, prospect: ScoredProspect) -> bool:
        return self.attempts_for(prospect.id) < self._policy.max_attempts

    def next_eligible(self, now: datetime) -> ScoredProspect | None:
        """Pick the best prospect to call now.

        Prefers prospects inside their call window; falls back to the best
        prospect with attempts left regardless of the window.
        """
        available = [p for p in self._queue if self.has_attempts_left(p)]
        if not available:
            return None
        for prospect in available:
            if self.is_within_window(prospect, now):
                return prospect
        fallback = available[0]
        logger.debug(
            "No prospect inside its call window; using best-scored fallback",
            extra={"prospect_id": fallback.key},
        )
        return fallback

    async def record_outcome(
        self,
        prospect_id: int | str,
        outcome: CallOutcome,
        duration_seconds: float,
        notes: str,
        now: datetime,
    ) -> CallRecord:
        """Record one finished call.

        Every invocation counts as a new attempt; call exactly once per call.
        """
        key = str(prospect_id)
        outcome = CallOutcome(outcome)

        self._stats.total_calls += 1
        if outcome.is_successful:
            self._stats.successful_calls += 1
        attempt_number = self._stats.call_attempts.get(key, 0) + 1
        self._stats.call_attempts[key] = attempt_number

        record = CallRecord(
            prospect_id=key,
            outcome=outcome,
            duration_seconds=float(duration_seconds or 0),
            notes=notes or "",
            timestamp=now,
            attempt_number=attempt_number,
        )
        self._records.append(record)

        logger.info(
            "Call outcome recorded",
            extra={
                "prospect_id": key,
                "outcome": outcome.value,
                "attempt_number": attempt_number,
                "total_calls": self._stats.total_calls,
            },
        )

        if self._record_sink is not None:
            try:
                await self._record_sink.append_call_record(record)
            except Exception:
                logger.exception("Failed to persist call record", extra={"prospect_id": key})

        return record

    def record_inbound_handled(self) -> int:
        self._stats.inbound_handled += 1
        return self._stats.inbound_handled

    def insights(self, now: datetime) -> QueueInsights:
        stats = self._stats
        success_rate = self.success_rate
        return QueueInsights(
            success_rate=round(success_rate, 4),
            daily_progress=round(stats.total_calls / stats.daily_target * 100, 1),
            calls_remaining=max(stats.daily_target - stats.total_calls, 0),
            average_call_seconds=self._average_call_seconds(),
            best_performing_hours=self._best_performing_hours(),
            recommendations=tuple(self._recommendations(now, success_rate)),
        )

    def reset_session(self) -> None:
        """Start a new dialing session: clears counters, attempts and history."""
        self._stats = DialingStats(
            daily_target=self._policy.daily_target,
            inbound_target=self._policy.inbound_target,
        )
        self._records = []
        logger.info("Dialing session reset")

    def _average_call_seconds(self) -> float:
        if not self._records:
            return 0.0
        total = sum(r.duration_seconds for r in self._records)
        return round(total / len(self._records), 1)

    def _best_performing_hours(self, limit: int = 3) -> tuple[int, ...]:
        dialed: dict[int, int] = defaultdict(int)
        successes: dict[int, int] = defaultdict(int)
        for record in self._records:
            hour = record.timestamp.hour
            dialed[hour] += 1
            if record.outcome.is_successful:
                successes[hour] += 1
        ranked = sorted(
            (hour for hour in dialed if successes[hour]),
            key=lambda hour: (-(successes[hour] / dialed[hour]), hour),
        )
        return tuple(ranked[:limit])

    def _recommendations(self, now: datetime, success_rate: float) -> list[str]:
        stats = self._stats
        recommendations: list[str] = []
        if stats.total_calls > 0 and success_rate < 0.15:
            recommendations.append("Consider adjusting call timing - success rate below optimal")
        if now.hour > 16 and stats.total_calls < stats.daily_target * 0.7:
            recommendations.append("Increase call velocity to meet daily target")
        recommendations.append(_time_based_recommendation(now.hour))
        return recommendations


def _time_based_recommendation(hour: int) -> str:
    if 9 <= hour <= 11:
        return "Morning peak - work the highest-scored prospects first"
    if 12 <= hour <= 13:
        return "Lunch hour - expect lower answer rates, keep calls short"
    if 14 <= hour <= 16:
        return "Afternoon peak - good window for callbacks"
    if 17 <= hour <= 18:
        return "End of day - focus on quick follow-ups"
    return "Off-peak hours - schedule callbacks for the morning window"
