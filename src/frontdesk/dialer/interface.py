"""
Dialer collaborator interfaces.

The automation controller only talks to the outside world through these:
- CallSink places a call and reports when it has finished
- NotifySink highlights the prospect being worked and surfaces messages
- InboundCallMonitor tells the controller when an inbound call takes priority
"""

from __future__ import annotations

from abc import ABC, abstractmethod
from collections.abc import Callable
from dataclasses import dataclass
from enum import Enum
from typing import Any

from frontdesk.calls.models import CallOutcome
from frontdesk.prospects.models import ScoredProspect


class NotificationLevel(str, Enum):
    """Severity of a user-facing notification."""

    INFO = "info"
    SUCCESS = "success"
    WARNING = "warning"
    ERROR = "error"


@dataclass(frozen=True)
class CallCompletion:
    """Completion signal for one dialed call."""

    outcome: CallOutcome
    duration_seconds: float = 0.0
    notes: str = ""
    answered: bool | None = None
    qualified: bool = False
    closed: bool = False

    @property
    def was_answered(self) -> bool:
        if self.answered is not None:
            return self.answered
        return self.outcome.is_answered


class CallSinkError(Exception):
    """Base exception for dialer errors."""

    def __init__(
        self,
        message: str,
        error_code: str | None = None,
        response: dict[str, Any] | None = None,
    ) -> None:
        super().__init__(message)
        self.error_code = error_code
        self.response = response or {}


class CallInitiationError(CallSinkError):
    """The dialer could not place the call."""


class CompletionSignalError(CallSinkError):
    """The completion signal for a placed call could not be obtained."""


class CallSink(ABC):
    """Abstract interface for placing outbound calls."""

    @abstractmethod
    async def initiate(self, prospect: ScoredProspect) -> str:
        """Place a call to the prospect.

        Returns:
            Identifier of the placed call, unique per call.

        Raises:
            CallInitiationError: The call could not be placed.
        """
        ...

    @abstractmethod
    async def await_completion(self, call_id: str) -> CallCompletion:
        """Wait until the call identified by call_id has finished."""
        ...

    async def cancel(self, call_id: str) -> None:
        """Stop tracking a placed call whose result is no longer wanted."""
        return None

    async def close(self) -> None:
        """Release any resources held by the sink."""
        return None


class NotifySink(ABC):
    """Abstract interface for the user-facing surface."""

    @abstractmethod
    async def highlight(self, prospect: ScoredProspect) -> None:
        ...

    @abstractmethod
    async def notify(self, message: str, level: NotificationLevel = NotificationLevel.INFO) -> None:
        ...


class InboundCallMonitor(ABC):
    """Abstract source of inbound-call activity."""

    @abstractmethod
    def has_active_inbound(self) -> bool:
        ...

    @abstractmethod
    def on_inbound_complete(self, callback: Callable[[], None]) -> None:
        """Register a one-shot callback fired when the active inbound call ends."""
        ...

    def start(self) -> None:
        return None

    def stop(self) -> None:
        return None
