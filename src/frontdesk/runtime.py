"""
Object graph for one running service.

The FastAPI app owns exactly one Runtime; nothing in the core is a module
level singleton.
"""

from __future__ import annotations

from collections.abc import Callable
from dataclasses import dataclass
from datetime import datetime

from frontdesk.automation.controller import AutomationConfig, AutomationController
from frontdesk.calls.queue import CallQueue, QueuePolicy
from frontdesk.calls.repository import CallRecordRepository
from frontdesk.config import Settings
from frontdesk.dialer.completions import CompletionRegistry
from frontdesk.dialer.config import DialerConfig
from frontdesk.dialer.factory import create_call_sink
from frontdesk.dialer.inbound import SignalInboundMonitor
from frontdesk.dialer.interface import CallSink
from frontdesk.dialer.notifier import LoggingNotifier
from frontdesk.performance.tracker import PerformanceTracker
from frontdesk.prospects.scorer import ProspectScorer
from frontdesk.prospects.sources import (
    CandidateRules,
    FilteredProspectSource,
    InMemoryProspectSource,
    ProspectSource,
)
from frontdesk.shared.database import DatabaseManager
from frontdesk.shared.logging import get_logger

logger = get_logger(__name__)


@dataclass
class Runtime:
    settings: Settings
    dialer_config: DialerConfig
    db: DatabaseManager
    repository: CallRecordRepository
    scorer: ProspectScorer
    queue: CallQueue
    tracker: PerformanceTracker
    prospects: InMemoryProspectSource
    source: ProspectSource
    completions: CompletionRegistry
    call_sink: CallSink
    notifier: LoggingNotifier
    inbound: SignalInboundMonitor
    controller: AutomationController
    clock: Callable[[], datetime]

    async def aclose(self) -> None:
        await self.controller.shutdown()
        await self.call_sink.close()
        await self.db.close()
        logger.info("Runtime closed")


def build_runtime(
    settings: Settings,
    dialer_config: DialerConfig | None = None,
    db_manager: DatabaseManager | None = None,
    call_sink: CallSink | None = None,
    clock: Callable[[], datetime] = datetime.now,
) -> Runtime:
    """Wire the scorer, queue, tracker, collaborators and controller together."""
    dialer_config = dialer_config or DialerConfig()
    db = db_manager or DatabaseManager(settings.database_url)
    repository = CallRecordRepository(db)

    scorer = ProspectScorer()
    queue = CallQueue(
        scorer=scorer,
        record_sink=repository,
        policy=QueuePolicy(
            max_attempts=settings.max_attempts,
            time_window_hours=settings.time_window_hours,
            daily_target=settings.daily_target,
            inbound_target=settings.inbound_target,
        ),
    )
    tracker = PerformanceTracker(
        daily_target=settings.daily_target,
        workday_start_hour=settings.workday_start_hour,
        workday_end_hour=settings.workday_end_hour,
    )

    prospects = InMemoryProspectSource()
    source: ProspectSource = prospects
    if settings.candidate_filter_enabled:
        source = FilteredProspectSource(
            prospects,
            CandidateRules(
                min_days_in_status=settings.candidate_min_days,
                statuses=tuple(settings.candidate_statuses_list),
            ),
        )

    completions = CompletionRegistry()
    sink = call_sink or create_call_sink(dialer_config, completions)
    notifier = LoggingNotifier()
    inbound = SignalInboundMonitor()

    controller = AutomationController(
        queue=queue,
        tracker=tracker,
        call_sink=sink,
        notifier=notifier,
        inbound_monitor=inbound,
        prospect_source=source,
        config=AutomationConfig.from_settings(settings),
        clock=clock,
    )

    logger.info(
        "Runtime built",
        extra={
            "database_url": db.database_url,
            "dialer": dialer_config.provider_type.value,
            "candidate_filter_enabled": settings.candidate_filter_enabled,
        },
    )

    return Runtime(
        settings=settings,
        dialer_config=dialer_config,
        db=db,
        repository=repository,
        scorer=scorer,
        queue=queue,
        tracker=tracker,
        prospects=prospects,
        source=source,
        completions=completions,
        call_sink=sink,
        notifier=notifier,
        inbound=inbound,
        controller=controller,
        clock=clock,
    )
