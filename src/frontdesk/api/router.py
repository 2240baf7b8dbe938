"""
Control API: automation lifecycle, prospect loading, queue and insights.
"""

from typing import Annotated

from fastapi import APIRouter, Depends, Query, status

from frontdesk.api.dependencies import get_runtime
from frontdesk.api.schemas import (
    AutomationStatusResponse,
    CallRecordResponse,
    CycleResultResponse,
    DialingStatsSchema,
    InsightsResponse,
    NotificationResponse,
    PerformanceInsightsSchema,
    ProspectLoadRequest,
    ProspectLoadResponse,
    QueueEntryResponse,
    QueueInsightsSchema,
    QueueRefreshResponse,
    QueueResponse,
    SessionReportResponse,
)
from frontdesk.runtime import Runtime
from frontdesk.shared.exceptions import NotFoundError
from frontdesk.shared.logging import get_logger

logger = get_logger(__name__)

router = APIRouter(prefix="/api", tags=["automation"])

RuntimeDep = Annotated[Runtime, Depends(get_runtime)]


@router.post("/automation/start", response_model=AutomationStatusResponse)
async def start_automation(runtime: RuntimeDep) -> AutomationStatusResponse:
    """Start the dispatch loop.

    Raises:
        AutomationStateError: 409 when the controller is errored.
    """
    runtime.controller.start()
    return AutomationStatusResponse.from_status(runtime.controller.status())


@router.post("/automation/stop", response_model=AutomationStatusResponse)
async def stop_automation(runtime: RuntimeDep) -> AutomationStatusResponse:
    runtime.controller.stop()
    return AutomationStatusResponse.from_status(runtime.controller.status())


@router.post("/automation/reset", response_model=AutomationStatusResponse)
async def reset_automation(runtime: RuntimeDep) -> AutomationStatusResponse:
    """Clear a fatal fault. Refused with 409 while the loop is running."""
    runtime.controller.reset()
    return AutomationStatusResponse.from_status(runtime.controller.status())


@router.post("/automation/cycle", response_model=CycleResultResponse)
async def run_cycle_now(runtime: RuntimeDep) -> CycleResultResponse:
    """Run one dispatch cycle immediately, outside the timer cadence."""
    result = await runtime.controller.run_cycle()
    logger.info("Manual dispatch cycle", extra={"status": result.status.value})
    return CycleResultResponse.from_result(result)


@router.get("/automation/status", response_model=AutomationStatusResponse)
async def automation_status(runtime: RuntimeDep) -> AutomationStatusResponse:
    return AutomationStatusResponse.from_status(runtime.controller.status())


@router.put("/prospects", response_model=ProspectLoadResponse)
async def load_prospects(
    payload: ProspectLoadRequest,
    runtime: RuntimeDep,
) -> ProspectLoadResponse:
    """Replace the candidate set and rebuild the ranked queue from it."""
    received = runtime.prospects.replace(payload.prospects)
    queue_size = await runtime.controller.refresh_queue()
    logger.info(
        "Prospects loaded",
        extra={"received": received, "queue_size": queue_size},
    )
    return ProspectLoadResponse(received=received, accepted=queue_size, queue_size=queue_size)


@router.get("/queue", response_model=QueueResponse)
async def get_queue(
    runtime: RuntimeDep,
    limit: Annotated[int, Query(ge=1, le=1000)] = 100,
) -> QueueResponse:
    queue = runtime.queue
    entries = queue.queue
    next_prospect = queue.next_eligible(runtime.clock())
    return QueueResponse(
        size=len(entries),
        next_eligible_id=next_prospect.id if next_prospect else None,
        entries=[
            QueueEntryResponse.from_scored(entry, queue.attempts_for(entry.id))
            for entry in entries[:limit]
        ],
    )


@router.post("/queue/refresh", response_model=QueueRefreshResponse)
async def refresh_queue(runtime: RuntimeDep) -> QueueRefreshResponse:
    queue_size = await runtime.controller.refresh_queue()
    return QueueRefreshResponse(queue_size=queue_size)


@router.get("/prospects/{prospect_id}/calls", response_model=list[CallRecordResponse])
async def prospect_call_history(
    prospect_id: str,
    runtime: RuntimeDep,
    limit: Annotated[int, Query(ge=1, le=100)] = 10,
) -> list[CallRecordResponse]:
    """Persisted call records for a prospect, newest first.

    Raises:
        NotFoundError: 404 when the prospect is unknown and was never called.
    """
    records = await runtime.repository.list_for_prospect(prospect_id, limit=limit)
    known = any(p.key == prospect_id for p in runtime.prospects.list_candidates())
    if not records and not known:
        raise NotFoundError(f"Prospect {prospect_id} not found")
    return [CallRecordResponse.from_record(r) for r in records]


@router.get("/insights", response_model=InsightsResponse)
async def get_insights(runtime: RuntimeDep) -> InsightsResponse:
    now = runtime.clock()
    return InsightsResponse(
        stats=DialingStatsSchema.from_stats(runtime.queue.stats),
        queue=QueueInsightsSchema.from_insights(runtime.queue.insights(now)),
        performance=PerformanceInsightsSchema.from_insights(runtime.tracker.insights(now)),
    )


@router.get("/performance/report", response_model=SessionReportResponse)
async def session_report(runtime: RuntimeDep) -> SessionReportResponse:
    return SessionReportResponse(report=runtime.tracker.session_report(runtime.clock()))


@router.post("/session/reset", status_code=status.HTTP_204_NO_CONTENT)
async def reset_session(runtime: RuntimeDep) -> None:
    """Start a new dialing day: clears queue counters and performance metrics."""
    runtime.queue.reset_session()
    runtime.tracker.reset()


@router.get("/notifications", response_model=list[NotificationResponse])
async def list_notifications(
    runtime: RuntimeDep,
    limit: Annotated[int, Query(ge=1, le=100)] = 20,
) -> list[NotificationResponse]:
    notifications = runtime.notifier.notifications[-limit:]
    return [
        NotificationResponse(message=n.message, level=n.level.value, created_at=n.created_at)
        for n in reversed(notifications)
    ]
