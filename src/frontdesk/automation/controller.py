"""
Automation controller: the run-state machine around the dispatch cycle.

States:
    idle -> running -> {paused_for_inbound, on_break} -> running
    any running-family state -> errored on a fatal sink fault
    errored -> idle on reset()

One dispatch cycle runs at a time. A tick that fires while a cycle is still
in flight is skipped and counted. stop() bumps the run generation so a cycle
that resolves after it discards its result instead of mutating state.
"""

from __future__ import annotations

import asyncio
import logging
from collections.abc import Awaitable, Callable
from dataclasses import dataclass
from datetime import datetime, timedelta
from enum import Enum
from typing import TYPE_CHECKING, Any

import anyio

from frontdesk.automation.timers import OneShotTimer, PeriodicTimer
from frontdesk.calls.models import CallOutcome, CallRecord
from frontdesk.calls.queue import CallQueue
from frontdesk.dialer.interface import (
    CallCompletion,
    CallSink,
    CallSinkError,
    InboundCallMonitor,
    NotificationLevel,
    NotifySink,
)
from frontdesk.performance.tracker import CallData, PerformanceTracker
from frontdesk.prospects.models import Priority, ScoredProspect
from frontdesk.prospects.sources import ProspectSource
from frontdesk.shared.exceptions import AutomationStateError, DispatchFault, FatalSinkFault
from frontdesk.shared.logging import cycle_id_var, get_logger, log_with_context

if TYPE_CHECKING:
    from frontdesk.config import Settings

logger = get_logger(__name__)

PostCallHook = Callable[[ScoredProspect, CallRecord], Awaitable[None]]


class RunState(str, Enum):
    IDLE = "idle"
    RUNNING = "running"
    PAUSED_FOR_INBOUND = "paused_for_inbound"
    ON_BREAK = "on_break"
    ERRORED = "errored"


RUNNING_FAMILY = frozenset({RunState.RUNNING, RunState.PAUSED_FOR_INBOUND, RunState.ON_BREAK})


class CycleStatus(str, Enum):
    DISPATCHED = "dispatched"
    STRATEGY_ADJUSTED = "strategy_adjusted"
    PAUSED_FOR_INBOUND = "paused_for_inbound"
    QUEUE_EXHAUSTED = "queue_exhausted"
    SKIPPED = "skipped"
    FAULTED = "faulted"
    DISCARDED = "discarded"
    NOT_RUNNING = "not_running"


class BreakReason(str, Enum):
    LUNCH = "lunch"
    FATIGUE = "fatigue"
    LOW_SUCCESS_RATE = "low_success_rate"


@dataclass(frozen=True)
class CycleResult:
    status: CycleStatus
    cycle_id: int | None = None
    prospect_id: str | None = None
    call_id: str | None = None
    outcome: CallOutcome | None = None
    record: CallRecord | None = None
    timed_out: bool = False
    error: str | None = None


@dataclass(frozen=True)
class AutomationConfig:
    """Timing and break-rule knobs for the controller."""

    dispatch_interval_seconds: float = 30.0
    break_check_interval_seconds: float = 3600.0
    break_duration_seconds: float = 900.0
    call_completion_timeout_seconds: float = 1200.0
    fatal_sink_failure_threshold: int = 3
    lunch_hour: int = 12
    lunch_call_threshold: int = 20
    fatigue_call_threshold: int = 50
    low_success_rate_threshold: float = 0.10

    def __post_init__(self) -> None:
        if self.dispatch_interval_seconds <= 0:
            raise ValueError("dispatch_interval_seconds must be > 0")
        if self.break_check_interval_seconds <= 0:
            raise ValueError("break_check_interval_seconds must be > 0")
        if self.break_duration_seconds < 0:
            raise ValueError("break_duration_seconds must be >= 0")
        if self.call_completion_timeout_seconds <= 0:
            raise ValueError("call_completion_timeout_seconds must be > 0")
        if self.fatal_sink_failure_threshold < 1:
            raise ValueError("fatal_sink_failure_threshold must be >= 1")
        if not 0 <= self.lunch_hour <= 23:
            raise ValueError("lunch_hour must be within 0..23")
        if not 0.0 <= self.low_success_rate_threshold <= 1.0:
            raise ValueError("low_success_rate_threshold must be within 0..1")

    @classmethod
    def from_settings(cls, settings: Settings) -> AutomationConfig:
        return cls(
            dispatch_interval_seconds=settings.dispatch_interval_seconds,
            break_check_interval_seconds=settings.break_check_interval_seconds,
            break_duration_seconds=settings.break_duration_seconds,
            call_completion_timeout_seconds=settings.call_completion_timeout_seconds,
            fatal_sink_failure_threshold=settings.fatal_sink_failure_threshold,
            lunch_hour=settings.lunch_hour,
            lunch_call_threshold=settings.lunch_call_threshold,
            fatigue_call_threshold=settings.fatigue_call_threshold,
            low_success_rate_threshold=settings.low_success_rate_threshold,
        )


@dataclass(frozen=True)
class CallPreparation:
    """What the agent should know before the call connects."""

    prospect_id: str
    summary: str
    approach: str
    talking_points: tuple[str, ...]
    target_duration_hint: str
    success_prediction: float
    priority: Priority
    previous_interactions: tuple[CallRecord, ...]

    def to_dict(self) -> dict[str, Any]:
        return {
            "prospect_id": self.prospect_id,
            "summary": self.summary,
            "approach": self.approach,
            "talking_points": list(self.talking_points),
            "target_duration_hint": self.target_duration_hint,
            "success_prediction": self.success_prediction,
            "priority": self.priority.value,
            "previous_interactions": [r.to_dict() for r in self.previous_interactions],
        }


@dataclass(frozen=True)
class AutomationStatus:
    state: RunState
    cycle_count: int
    skipped_ticks: int
    consecutive_sink_failures: int
    queue_size: int
    queue_exhausted: bool
    dispatch_timer_active: bool
    break_check_timer_active: bool
    break_resume_timer_active: bool
    break_reason: BreakReason | None
    break_ends_at: datetime | None
    last_fault: str | None


class AutomationController:
    """Owns the run state, the timers and the dispatch cycle."""

    def __init__(
        self,
        queue: CallQueue,
        tracker: PerformanceTracker,
        call_sink: CallSink,
        notifier: NotifySink,
        inbound_monitor: InboundCallMonitor | None = None,
        prospect_source: ProspectSource | None = None,
        config: AutomationConfig | None = None,
        clock: Callable[[], datetime] = datetime.now,
    ) -> None:
        self._queue = queue
        self._tracker = tracker
        self._call_sink = call_sink
        self._notifier = notifier
        self._inbound = inbound_monitor
        self._source = prospect_source
        self._config = config or AutomationConfig()
        self._clock = clock

        self._state = RunState.IDLE
        self._generation = 0
        self._abandon = asyncio.Event()
        self._cycle_lock = asyncio.Lock()
        self._cycle_count = 0
        self._skipped_ticks = 0
        self._consecutive_sink_failures = 0
        self._queue_exhausted = False
        self._last_fault: str | None = None
        self._last_preparation: CallPreparation | None = None
        self._break_reason: BreakReason | None = None
        self._break_ends_at: datetime | None = None
        self._post_call_hooks: list[PostCallHook] = []

        self._dispatch_timer = PeriodicTimer(
            self._config.dispatch_interval_seconds, self.run_cycle, name="dispatch"
        )
        self._break_check_timer = PeriodicTimer(
            self._config.break_check_interval_seconds, self.check_break, name="break-check"
        )
        self._break_resume_timer = OneShotTimer(
            self._config.break_duration_seconds, self._end_break, name="break-resume"
        )

    # -- introspection -------------------------------------------------

    @property
    def state(self) -> RunState:
        return self._state

    @property
    def config(self) -> AutomationConfig:
        return self._config

    @property
    def cycle_count(self) -> int:
        return self._cycle_count

    @property
    def skipped_ticks(self) -> int:
        return self._skipped_ticks

    @property
    def consecutive_sink_failures(self) -> int:
        return self._consecutive_sink_failures

    @property
    def last_fault(self) -> str | None:
        return self._last_fault

    @property
    def last_preparation(self) -> CallPreparation | None:
        return self._last_preparation

    @property
    def dispatch_timer(self) -> PeriodicTimer:
        return self._dispatch_timer

    @property
    def break_check_timer(self) -> PeriodicTimer:
        return self._break_check_timer

    @property
    def break_resume_timer(self) -> OneShotTimer:
        return self._break_resume_timer

    def status(self) -> AutomationStatus:
        return AutomationStatus(
            state=self._state,
            cycle_count=self._cycle_count,
            skipped_ticks=self._skipped_ticks,
            consecutive_sink_failures=self._consecutive_sink_failures,
            queue_size=len(self._queue.queue),
            queue_exhausted=self._queue_exhausted,
            dispatch_timer_active=self._dispatch_timer.active,
            break_check_timer_active=self._break_check_timer.active,
            break_resume_timer_active=self._break_resume_timer.active,
            break_reason=self._break_reason,
            break_ends_at=self._break_ends_at,
            last_fault=self._last_fault,
        )

    def add_post_call_hook(self, hook: PostCallHook) -> None:
        self._post_call_hooks.append(hook)

    # -- lifecycle -----------------------------------------------------

    def start(self) -> None:
        """Enter the running state and arm the dispatch and break-check timers."""
        if self._state in RUNNING_FAMILY:
            logger.warning("Automation already running", extra={"state": self._state.value})
            return
        if self._state == RunState.ERRORED:
            raise AutomationStateError(
                "Automation is errored; reset() is required before start()",
                state=self._state.value,
            )

        self._generation += 1
        self._abandon = asyncio.Event()
        self._state = RunState.RUNNING
        self._queue_exhausted = False
        self._dispatch_timer.arm()
        self._break_check_timer.arm()
        if self._inbound is not None:
            self._inbound.start()
        logger.info(
            "Automation started",
            extra={
                "dispatch_interval_seconds": self._config.dispatch_interval_seconds,
                "generation": self._generation,
            },
        )

    def stop(self) -> None:
        """Disarm every timer and return to idle. Safe to call mid-cycle."""
        if self._state not in RUNNING_FAMILY:
            logger.debug("Stop ignored", extra={"state": self._state.value})
            return
        self._halt_timers()
        self._state = RunState.IDLE
        self._clear_break()
        logger.info("Automation stopped", extra={"generation": self._generation})

    def reset(self) -> None:
        """Clear a fatal fault and return to idle."""
        if self._state in RUNNING_FAMILY:
            raise AutomationStateError(
                "Automation is running; stop() before reset()",
                state=self._state.value,
            )
        self._state = RunState.IDLE
        self._consecutive_sink_failures = 0
        self._last_fault = None
        self._queue_exhausted = False
        logger.info("Automation reset")

    async def shutdown(self) -> None:
        """Stop and wait for timer callbacks to settle."""
        self.stop()
        await self._dispatch_timer.shutdown()
        await self._break_check_timer.shutdown()
        await self._break_resume_timer.shutdown()

    def _halt_timers(self) -> None:
        self._generation += 1
        self._abandon.set()
        self._dispatch_timer.disarm()
        self._break_check_timer.disarm()
        self._break_resume_timer.disarm()
        if self._inbound is not None:
            self._inbound.stop()

    # -- dispatch cycle ------------------------------------------------

    async def run_cycle(self) -> CycleResult:
        """Run one dispatch cycle: select, call, await, record."""
        if self._state != RunState.RUNNING:
            return CycleResult(status=CycleStatus.NOT_RUNNING)
        if self._cycle_lock.locked():
            self._skipped_ticks += 1
            logger.debug(
                "Dispatch tick skipped; previous cycle still in flight",
                extra={"skipped_ticks": self._skipped_ticks},
            )
            return CycleResult(status=CycleStatus.SKIPPED)

        async with self._cycle_lock:
            self._cycle_count += 1
            cycle_id = self._cycle_count
            generation = self._generation
            token = cycle_id_var.set(str(cycle_id))
            try:
                return await self._execute_cycle(cycle_id, generation)
            except Exception as exc:
                return await self._handle_cycle_fault(cycle_id, generation, exc)
            finally:
                cycle_id_var.reset(token)

    async def _execute_cycle(self, cycle_id: int, generation: int) -> CycleResult:
        now = self._clock()

        if self._inbound is not None and self._inbound.has_active_inbound():
            await self._pause_for_inbound(self._inbound)
            return CycleResult(status=CycleStatus.PAUSED_FOR_INBOUND, cycle_id=cycle_id)

        prospect = self._queue.next_eligible(now)
        if prospect is None:
            adjusted = await self._adjust_strategy()
            if generation != self._generation:
                return CycleResult(status=CycleStatus.DISCARDED, cycle_id=cycle_id)
            if adjusted:
                # The refreshed queue is dialed on the next tick.
                return CycleResult(status=CycleStatus.STRATEGY_ADJUSTED, cycle_id=cycle_id)
            await self._flag_queue_exhausted()
            return CycleResult(status=CycleStatus.QUEUE_EXHAUSTED, cycle_id=cycle_id)

        self._queue_exhausted = False
        return await self._call_sequence(cycle_id, generation, prospect)

    async def _call_sequence(
        self, cycle_id: int, generation: int, prospect: ScoredProspect
    ) -> CycleResult:
        key = prospect.key

        await self._notifier.highlight(prospect)
        if generation != self._generation or self._state != RunState.RUNNING:
            logger.info(
                "Run state changed before dispatch; call not placed",
                extra={"prospect_id": key, "state": self._state.value},
            )
            return CycleResult(status=CycleStatus.DISCARDED, cycle_id=cycle_id, prospect_id=key)

        preparation = self.prepare_call(prospect)
        self._last_preparation = preparation
        logger.info(
            "Call preparation ready",
            extra={
                "prospect_id": key,
                "priority": preparation.priority.value,
                "success_prediction": preparation.success_prediction,
                "previous_attempts": len(preparation.previous_interactions),
            },
        )

        try:
            call_id = await self._call_sink.initiate(prospect)
        except Exception as exc:
            raise DispatchFault(
                f"Call initiation failed for prospect {key}: {exc}",
                prospect_id=key,
                sink_unreachable=True,
            ) from exc
        if generation != self._generation:
            await self._release_call(call_id)
            return CycleResult(
                status=CycleStatus.DISCARDED, cycle_id=cycle_id, prospect_id=key, call_id=call_id
            )
        self._consecutive_sink_failures = 0

        logger.info("Call monitoring started", extra={"prospect_id": key, "call_id": call_id})
        completion, timed_out = await self._await_completion(prospect, call_id)

        if completion is None or generation != self._generation:
            logger.info(
                "Discarding result of abandoned cycle",
                extra={"prospect_id": key, "call_id": call_id},
            )
            return CycleResult(
                status=CycleStatus.DISCARDED, cycle_id=cycle_id, prospect_id=key, call_id=call_id
            )

        if timed_out:
            await self._safe_notify(
                f"No completion signal for prospect {key}; recorded as no-answer",
                NotificationLevel.WARNING,
            )

        now = self._clock()
        record = await self._queue.record_outcome(
            key,
            completion.outcome,
            completion.duration_seconds,
            completion.notes,
            now,
        )
        self._tracker.record(
            CallData(
                answered=completion.was_answered,
                interested=completion.outcome.is_successful,
                qualified=completion.qualified,
                closed=completion.closed,
                duration_seconds=completion.duration_seconds,
                prospect_status=prospect.status,
            ),
            now,
        )

        await self._post_call(prospect, record, now)
        log_with_context(
            logger,
            logging.INFO,
            "Dispatch cycle completed",
            prospect_id=key,
            call_id=call_id,
            outcome=record.outcome.value,
            attempt_number=record.attempt_number,
            timed_out=timed_out,
        )

        return CycleResult(
            status=CycleStatus.DISPATCHED,
            cycle_id=cycle_id,
            prospect_id=key,
            call_id=call_id,
            outcome=record.outcome,
            record=record,
            timed_out=timed_out,
        )

    async def _await_completion(
        self, prospect: ScoredProspect, call_id: str
    ) -> tuple[CallCompletion | None, bool]:
        """Wait for the call to finish, the timeout, or stop(), whichever is first.

        Returns (None, False) when the wait was abandoned by stop(). In that
        case and on timeout the call is released from the sink, so a late
        completion for it is rejected.
        """
        waiter = asyncio.ensure_future(self._call_sink.await_completion(call_id))
        stopper = asyncio.ensure_future(self._abandon.wait())
        try:
            done, _ = await asyncio.wait(
                {waiter, stopper},
                timeout=self._config.call_completion_timeout_seconds,
                return_when=asyncio.FIRST_COMPLETED,
            )
        finally:
            for task in (waiter, stopper):
                if not task.done():
                    task.cancel()

        if waiter in done:
            try:
                return waiter.result(), False
            except CallSinkError as exc:
                raise DispatchFault(
                    f"Completion signal failed for prospect {prospect.key}: {exc}",
                    prospect_id=prospect.key,
                ) from exc
        await self._release_call(call_id)
        if stopper in done:
            return None, False

        logger.warning(
            "Call completion timed out",
            extra={
                "prospect_id": prospect.key,
                "call_id": call_id,
                "timeout_seconds": self._config.call_completion_timeout_seconds,
            },
        )
        return (
            CallCompletion(
                outcome=CallOutcome.NO_ANSWER,
                notes="No completion signal before timeout",
                answered=False,
            ),
            True,
        )

    def prepare_call(self, prospect: ScoredProspect) -> CallPreparation:
        analysis = prospect.analysis
        history = self._queue.history(prospect.key)
        days = prospect.prospect.days_in_status
        summary = (
            f"{prospect.status or 'Unknown'} prospect"
            f"{f', {days} days in status' if days is not None else ''}"
            f", score {analysis.score} ({analysis.priority.value} priority)"
        )
        if history:
            summary += f"; {len(history)} prior attempt(s), last outcome {history[-1].outcome.value}"
        return CallPreparation(
            prospect_id=prospect.key,
            summary=summary,
            approach=analysis.strategy.approach,
            talking_points=analysis.strategy.talking_points,
            target_duration_hint=analysis.strategy.target_duration_hint,
            success_prediction=analysis.success_probability,
            priority=analysis.priority,
            previous_interactions=history,
        )

    async def _post_call(self, prospect: ScoredProspect, record: CallRecord, now: datetime) -> None:
        # Re-rank with the new attempt counts and the current hour.
        self._queue.optimize([sp.prospect for sp in self._queue.queue], now)

        if record.outcome.is_successful:
            await self._safe_notify(
                f"Prospect {record.prospect_id} marked {record.outcome.value}",
                NotificationLevel.SUCCESS,
            )

        for hook in list(self._post_call_hooks):
            try:
                await hook(prospect, record)
            except Exception:
                logger.exception("Post-call hook failed", extra={"prospect_id": record.prospect_id})

    async def _adjust_strategy(self) -> bool:
        """Refresh the queue from the prospect source.

        Returns:
            True when the refreshed queue has an eligible prospect.
        """
        if self._source is None:
            return False
        logger.info("No eligible prospect; refreshing queue from source")
        size = await self.refresh_queue()
        adjusted = self._queue.next_eligible(self._clock()) is not None
        logger.info(
            "Queue strategy adjusted",
            extra={"queue_size": size, "eligible": adjusted},
        )
        return adjusted

    async def _flag_queue_exhausted(self) -> None:
        if self._queue_exhausted:
            return
        self._queue_exhausted = True
        logger.info("Call queue exhausted", extra={"queue_size": len(self._queue.queue)})
        await self._safe_notify("No eligible prospects left in the call queue", NotificationLevel.INFO)

    async def refresh_queue(self) -> int:
        """Re-rank the queue, pulling fresh candidates from the source when one is wired.

        Returns:
            Number of prospects in the refreshed queue.
        """
        if self._source is not None:
            prospects = await anyio.to_thread.run_sync(self._source.list_candidates)
        else:
            prospects = [sp.prospect for sp in self._queue.queue]
        ranked = self._queue.optimize(prospects, self._clock())
        if ranked:
            self._queue_exhausted = False
        return len(ranked)

    # -- fault handling ------------------------------------------------

    async def _handle_cycle_fault(
        self, cycle_id: int, generation: int, exc: Exception
    ) -> CycleResult:
        prospect_id = getattr(exc, "prospect_id", None)
        if generation != self._generation:
            logger.warning(
                "Fault in abandoned cycle ignored",
                extra={"prospect_id": prospect_id, "error": str(exc)},
            )
            return CycleResult(
                status=CycleStatus.DISCARDED, cycle_id=cycle_id, prospect_id=prospect_id
            )

        self._last_fault = str(exc)

        if isinstance(exc, DispatchFault) and exc.sink_unreachable:
            self._consecutive_sink_failures += 1
            if self._consecutive_sink_failures >= self._config.fatal_sink_failure_threshold:
                fatal = FatalSinkFault(
                    f"Call sink unreachable for {self._consecutive_sink_failures} consecutive cycles",
                    consecutive_failures=self._consecutive_sink_failures,
                )
                logger.error(
                    "Fatal call sink fault",
                    exc_info=exc,
                    extra={"consecutive_failures": self._consecutive_sink_failures},
                )
                await self._enter_errored(fatal)
                return CycleResult(
                    status=CycleStatus.FAULTED,
                    cycle_id=cycle_id,
                    prospect_id=prospect_id,
                    error=str(fatal),
                )

        logger.error(
            "Dispatch cycle failed",
            exc_info=exc,
            extra={
                "prospect_id": prospect_id,
                "consecutive_sink_failures": self._consecutive_sink_failures,
            },
        )
        await self._safe_notify(f"Automation error: {exc}", NotificationLevel.ERROR)
        return CycleResult(
            status=CycleStatus.FAULTED,
            cycle_id=cycle_id,
            prospect_id=prospect_id,
            error=str(exc),
        )

    async def _enter_errored(self, fault: FatalSinkFault) -> None:
        self._halt_timers()
        self._state = RunState.ERRORED
        self._clear_break()
        self._last_fault = str(fault)
        await self._safe_notify(
            f"Automation halted: {fault}. Reset required.", NotificationLevel.ERROR
        )

    async def _safe_notify(self, message: str, level: NotificationLevel) -> None:
        try:
            await self._notifier.notify(message, level)
        except Exception:
            logger.exception("Notification failed", extra={"notification": message})

    async def _release_call(self, call_id: str) -> None:
        try:
            await self._call_sink.cancel(call_id)
        except Exception:
            logger.exception("Releasing abandoned call failed", extra={"call_id": call_id})

    # -- inbound interrupts --------------------------------------------

    async def _pause_for_inbound(self, inbound: InboundCallMonitor) -> None:
        self._state = RunState.PAUSED_FOR_INBOUND
        self._dispatch_timer.disarm()
        generation = self._generation
        inbound.on_inbound_complete(lambda: self._resume_after_inbound(generation))
        logger.info("Automation paused for inbound call")
        await self._safe_notify("Pausing automation for inbound call", NotificationLevel.INFO)

    def _resume_after_inbound(self, generation: int) -> None:
        if generation != self._generation or self._state != RunState.PAUSED_FOR_INBOUND:
            logger.debug("Stale inbound resume ignored", extra={"state": self._state.value})
            return
        self._state = RunState.RUNNING
        self._dispatch_timer.arm()
        handled = self._queue.record_inbound_handled()
        logger.info("Inbound call completed; automation resumed", extra={"inbound_handled": handled})

    # -- breaks --------------------------------------------------------

    def break_reason(self, now: datetime) -> BreakReason | None:
        calls_last_hour = self._tracker.calls_in_last_hour(now)
        if now.hour == self._config.lunch_hour and calls_last_hour > self._config.lunch_call_threshold:
            return BreakReason.LUNCH
        if calls_last_hour > self._config.fatigue_call_threshold:
            return BreakReason.FATIGUE
        stats = self._queue.stats
        if stats.total_calls > 0 and self._queue.success_rate < self._config.low_success_rate_threshold:
            return BreakReason.LOW_SUCCESS_RATE
        return None

    async def check_break(self) -> BreakReason | None:
        """Evaluate the break rules; enter a break when one applies."""
        if self._state != RunState.RUNNING:
            return None
        now = self._clock()
        reason = self.break_reason(now)
        if reason is None:
            return None
        await self._begin_break(reason, now)
        return reason

    async def _begin_break(self, reason: BreakReason, now: datetime) -> None:
        self._state = RunState.ON_BREAK
        self._dispatch_timer.disarm()
        self._break_reason = reason
        self._break_ends_at = now + timedelta(seconds=self._config.break_duration_seconds)
        self._break_resume_timer.arm(self._config.break_duration_seconds)
        logger.info(
            "Automation break started",
            extra={"reason": reason.value, "duration_seconds": self._config.break_duration_seconds},
        )
        await self._safe_notify(
            f"Taking a break ({reason.value}) for "
            f"{int(self._config.break_duration_seconds // 60)} minutes",
            NotificationLevel.INFO,
        )

    async def _end_break(self) -> None:
        if self._state != RunState.ON_BREAK:
            return
        self._state = RunState.RUNNING
        self._clear_break()
        self._dispatch_timer.arm()
        logger.info("Automation break ended")
        await self._safe_notify("Break over, automation resumed", NotificationLevel.INFO)

    def _clear_break(self) -> None:
        self._break_reason = None
        self._break_ends_at = None
