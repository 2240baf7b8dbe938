"""
FastAPI router for dialer bridge webhooks.

The bridge reports finished outbound calls and inbound call activity here.
Handlers only resolve futures and flip monitor state; they never block.
"""

import hmac
from typing import Annotated

from fastapi import APIRouter, Depends, Header, HTTPException, status

from frontdesk.api.dependencies import get_runtime
from frontdesk.dialer.webhooks.schemas import CallCompletedEvent, InboundCallEvent, WebhookAck
from frontdesk.runtime import Runtime
from frontdesk.shared.logging import get_logger

logger = get_logger(__name__)

router = APIRouter(prefix="/webhooks/dialer", tags=["webhooks"])


async def verify_webhook_token(
    runtime: Annotated[Runtime, Depends(get_runtime)],
    x_dialer_token: Annotated[str | None, Header()] = None,
) -> None:
    expected = runtime.dialer_config.webhook_token
    if not expected:
        return
    if x_dialer_token is None or not hmac.compare_digest(x_dialer_token, expected):
        logger.warning("Dialer webhook rejected: bad token")
        raise HTTPException(status_code=status.HTTP_401_UNAUTHORIZED, detail="Invalid webhook token")


@router.post(
    "/calls/{call_id}/completed",
    response_model=WebhookAck,
    dependencies=[Depends(verify_webhook_token)],
)
async def call_completed(
    call_id: str,
    event: CallCompletedEvent,
    runtime: Annotated[Runtime, Depends(get_runtime)],
) -> WebhookAck:
    accepted = runtime.completions.resolve(call_id, event.to_completion())
    logger.info(
        "Call completion webhook",
        extra={"call_id": call_id, "outcome": event.outcome.value, "accepted": accepted},
    )
    return WebhookAck(
        accepted=accepted,
        detail=None if accepted else "No call pending with this id",
    )


@router.post(
    "/inbound/started",
    response_model=WebhookAck,
    dependencies=[Depends(verify_webhook_token)],
)
async def inbound_started(
    event: InboundCallEvent,
    runtime: Annotated[Runtime, Depends(get_runtime)],
) -> WebhookAck:
    runtime.inbound.begin_inbound(event.call_id)
    return WebhookAck(accepted=True)


@router.post(
    "/inbound/completed",
    response_model=WebhookAck,
    dependencies=[Depends(verify_webhook_token)],
)
async def inbound_completed(
    event: InboundCallEvent,
    runtime: Annotated[Runtime, Depends(get_runtime)],
) -> WebhookAck:
    known = event.call_id in runtime.inbound.active_calls
    runtime.inbound.complete_inbound(event.call_id)
    return WebhookAck(
        accepted=known,
        detail=None if known else "Unknown inbound call",
    )
