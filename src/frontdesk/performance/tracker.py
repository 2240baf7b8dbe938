"""
Conversion funnel and pacing metrics for a dialing session.
"""

from __future__ import annotations

from collections import defaultdict, deque
from dataclasses import dataclass
from datetime import datetime, timedelta
from enum import Enum
from typing import Any

from frontdesk.shared.logging import get_logger

logger = get_logger(__name__)

FUNNEL_STAGES = ("dialed", "answered", "interested", "qualified", "closed")


class PerformanceLevel(str, Enum):
    EXCELLENT = "excellent"
    GOOD = "good"
    NEEDS_IMPROVEMENT = "needs-improvement"


@dataclass(frozen=True)
class CallData:
    """What the tracker needs to know about one finished call."""

    answered: bool = False
    interested: bool = False
    qualified: bool = False
    closed: bool = False
    duration_seconds: float = 0.0
    prospect_status: str | None = None


@dataclass(frozen=True)
class CurrentPerformance:
    success_rate: float
    level: PerformanceLevel


@dataclass(frozen=True)
class EndOfDayPrediction:
    predicted_calls: int
    will_meet_target: bool


@dataclass(frozen=True)
class PerformanceInsights:
    current_performance: CurrentPerformance
    target_progress: float
    suggestions: tuple[str, ...]
    predicted_end_of_day: EndOfDayPrediction


class PerformanceTracker:
    """Accumulates funnel counters and derives point-in-time insights."""

    def __init__(
        self,
        daily_target: int = 200,
        workday_start_hour: int = 9,
        workday_end_hour: int = 17,
    ) -> None:
        if daily_target <= 0:
            raise ValueError("daily_target must be > 0")
        if not 0 <= workday_start_hour <= workday_end_hour <= 23:
            raise ValueError("workday hours must satisfy 0 <= start <= end <= 23")
        self._daily_target = daily_target
        self._start_hour = workday_start_hour
        self._end_hour = workday_end_hour
        self._reset_state()

    def _reset_state(self) -> None:
        self._funnel: dict[str, int] = {stage: 0 for stage in FUNNEL_STAGES}
        self._calls_by_hour: dict[int, int] = defaultdict(int)
        self._status_performance: dict[str, dict[str, int]] = {}
        self._durations: list[float] = []
        self._recent_calls: deque[datetime] = deque()

    @property
    def daily_target(self) -> int:
        return self._daily_target

    @property
    def funnel(self) -> dict[str, int]:
        return dict(self._funnel)

    @property
    def calls_by_hour(self) -> dict[int, int]:
        return {hour: count for hour, count in self._calls_by_hour.items() if count}

    def record(self, call_data: CallData, now: datetime) -> None:
        """Track one finished call."""
        self._funnel["dialed"] += 1
        if call_data.answered:
            self._funnel["answered"] += 1
        if call_data.interested:
            self._funnel["interested"] += 1
        if call_data.qualified:
            self._funnel["qualified"] += 1
        if call_data.closed:
            self._funnel["closed"] += 1

        self._calls_by_hour[now.hour] += 1
        self._recent_calls.append(now)

        status = call_data.prospect_status or "unknown"
        bucket = self._status_performance.setdefault(status, {"dialed": 0, "interested": 0})
        bucket["dialed"] += 1
        if call_data.interested:
            bucket["interested"] += 1

        if call_data.duration_seconds:
            self._durations.append(float(call_data.duration_seconds))

    def calls_in_last_hour(self, now: datetime) -> int:
        cutoff = now - timedelta(hours=1)
        while self._recent_calls and self._recent_calls[0] <= cutoff:
            self._recent_calls.popleft()
        return sum(1 for ts in self._recent_calls if ts <= now)

    def success_rate(self) -> float:
        dialed = self._funnel["dialed"]
        if dialed == 0:
            return 0.0
        return self._funnel["interested"] / dialed

    def current_performance(self) -> CurrentPerformance:
        rate = self.success_rate()
        if rate > 0.15:
            level = PerformanceLevel.EXCELLENT
        elif rate > 0.10:
            level = PerformanceLevel.GOOD
        else:
            level = PerformanceLevel.NEEDS_IMPROVEMENT
        return CurrentPerformance(success_rate=round(rate, 4), level=level)

    def target_progress(self) -> float:
        return round(min(self._funnel["dialed"] / self._daily_target * 100, 100.0), 1)

    def suggestions(self, now: datetime) -> list[str]:
        suggestions: list[str] = []
        dialed = self._funnel["dialed"]
        if dialed > 0 and self.success_rate() < 0.10:
            suggestions.append("Try adjusting your call script")
        if now.hour < self._start_hour or now.hour > self._end_hour:
            suggestions.append("Consider calling during business hours")
        if dialed < self._daily_target * 0.25 and now.hour > 12:
            suggestions.append("Increase call pace to meet daily target")
        return suggestions

    def predict_end_of_day(self, now: datetime) -> EndOfDayPrediction:
        """Linear extrapolation of today's dialing pace to the end of the workday."""
        dialed = self._funnel["dialed"]
        hours_elapsed = max(now.hour - self._start_hour + 1, 1)
        hours_remaining = max(self._end_hour - now.hour, 0)
        average_per_hour = dialed / hours_elapsed
        predicted_total = dialed + average_per_hour * hours_remaining
        return EndOfDayPrediction(
            predicted_calls=int(round(predicted_total)),
            will_meet_target=predicted_total >= self._daily_target,
        )

    def insights(self, now: datetime) -> PerformanceInsights:
        return PerformanceInsights(
            current_performance=self.current_performance(),
            target_progress=self.target_progress(),
            suggestions=tuple(self.suggestions(now)),
            predicted_end_of_day=self.predict_end_of_day(now),
        )

    def session_report(self, now: datetime) -> dict[str, Any]:
        """Export the session's metrics as plain data."""
        insights = self.insights(now)
        average_duration = (
            round(sum(self._durations) / len(self._durations), 1) if self._durations else 0.0
        )
        return {
            "generated_at": now.isoformat(),
            "daily_target": self._daily_target,
            "funnel": self.funnel,
            "calls_by_hour": self.calls_by_hour,
            "status_performance": {k: dict(v) for k, v in self._status_performance.items()},
            "average_call_seconds": average_duration,
            "success_rate": insights.current_performance.success_rate,
            "performance_level": insights.current_performance.level.value,
            "target_progress": insights.target_progress,
            "suggestions": list(insights.suggestions),
            "predicted_end_of_day": {
                "predicted_calls": insights.predicted_end_of_day.predicted_calls,
                "will_meet_target": insights.predicted_end_of_day.will_meet_target,
            },
        }

    def reset(self) -> None:
        self._reset_state()
        logger.info("Performance metrics reset")
