"""
Pydantic schemas for the control API.
"""

from __future__ import annotations

from datetime import datetime
from typing import Any

from pydantic import BaseModel, Field

from frontdesk.automation.controller import AutomationStatus, CycleResult
from frontdesk.calls.models import CallOutcome, CallRecord, DialingStats, QueueInsights
from frontdesk.performance.tracker import PerformanceInsights
from frontdesk.prospects.models import Prospect, ScoredProspect


class ProspectLoadRequest(BaseModel):
    """Replace the candidate set the queue is built from."""

    prospects: list[Prospect] = Field(default_factory=list)


class ProspectLoadResponse(BaseModel):
    received: int
    accepted: int
    queue_size: int


class QueueEntryResponse(BaseModel):
    id: int | str
    phone: str
    status: str | None
    days_in_status: int | None
    score: int
    priority: str
    success_probability: float
    recommended_hour: int
    confidence: float
    reasoning: str
    approach: str
    talking_points: list[str]
    target_duration_hint: str
    attempts: int

    @classmethod
    def from_scored(cls, scored: ScoredProspect, attempts: int) -> QueueEntryResponse:
        analysis = scored.analysis
        return cls(
            id=scored.id,
            phone=scored.phone,
            status=scored.status,
            days_in_status=scored.prospect.days_in_status,
            score=analysis.score,
            priority=analysis.priority.value,
            success_probability=analysis.success_probability,
            recommended_hour=analysis.call_timing.recommended_hour,
            confidence=analysis.call_timing.confidence,
            reasoning=analysis.call_timing.reasoning,
            approach=analysis.strategy.approach,
            talking_points=list(analysis.strategy.talking_points),
            target_duration_hint=analysis.strategy.target_duration_hint,
            attempts=attempts,
        )


class QueueResponse(BaseModel):
    size: int
    next_eligible_id: int | str | None
    entries: list[QueueEntryResponse]


class QueueRefreshResponse(BaseModel):
    queue_size: int


class AutomationStatusResponse(BaseModel):
    state: str
    cycle_count: int
    skipped_ticks: int
    consecutive_sink_failures: int
    queue_size: int
    queue_exhausted: bool
    dispatch_timer_active: bool
    break_check_timer_active: bool
    break_resume_timer_active: bool
    break_reason: str | None = None
    break_ends_at: datetime | None = None
    last_fault: str | None = None

    @classmethod
    def from_status(cls, status: AutomationStatus) -> AutomationStatusResponse:
        return cls(
            state=status.state.value,
            cycle_count=status.cycle_count,
            skipped_ticks=status.skipped_ticks,
            consecutive_sink_failures=status.consecutive_sink_failures,
            queue_size=status.queue_size,
            queue_exhausted=status.queue_exhausted,
            dispatch_timer_active=status.dispatch_timer_active,
            break_check_timer_active=status.break_check_timer_active,
            break_resume_timer_active=status.break_resume_timer_active,
            break_reason=status.break_reason.value if status.break_reason else None,
            break_ends_at=status.break_ends_at,
            last_fault=status.last_fault,
        )


class CycleResultResponse(BaseModel):
    status: str
    cycle_id: int | None = None
    prospect_id: str | None = None
    call_id: str | None = None
    outcome: CallOutcome | None = None
    attempt_number: int | None = None
    timed_out: bool = False
    error: str | None = None

    @classmethod
    def from_result(cls, result: CycleResult) -> CycleResultResponse:
        return cls(
            status=result.status.value,
            cycle_id=result.cycle_id,
            prospect_id=result.prospect_id,
            call_id=result.call_id,
            outcome=result.outcome,
            attempt_number=result.record.attempt_number if result.record else None,
            timed_out=result.timed_out,
            error=result.error,
        )


class DialingStatsSchema(BaseModel):
    total_calls: int
    successful_calls: int
    daily_target: int
    inbound_handled: int
    inbound_target: int
    call_attempts: dict[str, int]

    @classmethod
    def from_stats(cls, stats: DialingStats) -> DialingStatsSchema:
        return cls(
            total_calls=stats.total_calls,
            successful_calls=stats.successful_calls,
            daily_target=stats.daily_target,
            inbound_handled=stats.inbound_handled,
            inbound_target=stats.inbound_target,
            call_attempts=dict(stats.call_attempts),
        )


class QueueInsightsSchema(BaseModel):
    success_rate: float
    daily_progress: float
    calls_remaining: int
    average_call_seconds: float
    best_performing_hours: list[int]
    recommendations: list[str]

    @classmethod
    def from_insights(cls, insights: QueueInsights) -> QueueInsightsSchema:
        return cls(
            success_rate=insights.success_rate,
            daily_progress=insights.daily_progress,
            calls_remaining=insights.calls_remaining,
            average_call_seconds=insights.average_call_seconds,
            best_performing_hours=list(insights.best_performing_hours),
            recommendations=list(insights.recommendations),
        )


class PerformanceInsightsSchema(BaseModel):
    success_rate: float
    performance_level: str
    target_progress: float
    suggestions: list[str]
    predicted_calls: int
    will_meet_target: bool

    @classmethod
    def from_insights(cls, insights: PerformanceInsights) -> PerformanceInsightsSchema:
        return cls(
            success_rate=insights.current_performance.success_rate,
            performance_level=insights.current_performance.level.value,
            target_progress=insights.target_progress,
            suggestions=list(insights.suggestions),
            predicted_calls=insights.predicted_end_of_day.predicted_calls,
            will_meet_target=insights.predicted_end_of_day.will_meet_target,
        )


class InsightsResponse(BaseModel):
    stats: DialingStatsSchema
    queue: QueueInsightsSchema
    performance: PerformanceInsightsSchema


class SessionReportResponse(BaseModel):
    report: dict[str, Any]


class NotificationResponse(BaseModel):
    message: str
    level: str
    created_at: datetime


class CallRecordResponse(BaseModel):
    prospect_id: str
    outcome: CallOutcome
    duration_seconds: float
    notes: str
    timestamp: datetime
    attempt_number: int

    @classmethod
    def from_record(cls, record: CallRecord) -> CallRecordResponse:
        return cls(
            prospect_id=record.prospect_id,
            outcome=record.outcome,
            duration_seconds=record.duration_seconds,
            notes=record.notes,
            timestamp=record.timestamp,
            attempt_number=record.attempt_number,
        )
