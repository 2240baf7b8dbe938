"""
Webhook payloads posted by the dialer bridge.
"""

from pydantic import BaseModel, Field

from frontdesk.calls.models import CallOutcome
from frontdesk.dialer.interface import CallCompletion


class CallCompletedEvent(BaseModel):
    outcome: CallOutcome
    duration_seconds: float = Field(default=0.0, ge=0)
    notes: str = Field(default="", max_length=5000)
    answered: bool | None = None
    qualified: bool = False
    closed: bool = False

    def to_completion(self) -> CallCompletion:
        return CallCompletion(
            outcome=self.outcome,
            duration_seconds=self.duration_seconds,
            notes=self.notes,
            answered=self.answered,
            qualified=self.qualified,
            closed=self.closed,
        )


class InboundCallEvent(BaseModel):
    call_id: str = Field(default="inbound", min_length=1, max_length=128)


class WebhookAck(BaseModel):
    accepted: bool
    detail: str | None = None
