"""
Mock dialer for testing and local runs.

Records every placed call and answers completions from a configurable script.
"""

from __future__ import annotations

import asyncio
from collections import deque
from collections.abc import Iterable
from itertools import count

from frontdesk.calls.models import CallOutcome
from frontdesk.dialer.interface import (
    CallCompletion,
    CallInitiationError,
    CallSink,
)
from frontdesk.prospects.models import ScoredProspect
from frontdesk.shared.logging import get_logger

logger = get_logger(__name__)


class MockCallSink(CallSink):
    """In-process call sink with scripted outcomes."""

    def __init__(self, default_completion: CallCompletion | None = None) -> None:
        self._default = default_completion or CallCompletion(
            outcome=CallOutcome.NO_ANSWER, duration_seconds=0.0
        )
        self._ids = count(1)
        self._calls: list[str] = []
        self._completed: list[str] = []
        self._cancelled: list[str] = []
        self._placed: dict[str, str] = {}
        self._scripted: deque[CallCompletion] = deque()
        self._should_fail = False
        self._fail_error = "Mock failure"
        self._fail_code = "MOCK_ERROR"
        self._release = asyncio.Event()
        self._release.set()

    def reset(self) -> None:
        self._calls.clear()
        self._completed.clear()
        self._cancelled.clear()
        self._placed.clear()
        self._scripted.clear()
        self._should_fail = False
        self._fail_error = "Mock failure"
        self._fail_code = "MOCK_ERROR"
        self._release.set()

    def configure_failure(
        self,
        should_fail: bool = True,
        error_message: str = "Mock failure",
        error_code: str = "MOCK_ERROR",
    ) -> None:
        self._should_fail = should_fail
        self._fail_error = error_message
        self._fail_code = error_code

    def configure_outcomes(self, completions: Iterable[CallCompletion | CallOutcome]) -> None:
        """Queue completions to hand out in order; the default applies afterwards."""
        for item in completions:
            if isinstance(item, CallCompletion):
                self._scripted.append(item)
            else:
                self._scripted.append(CallCompletion(outcome=CallOutcome(item)))

    def hold_completions(self) -> None:
        """Make await_completion block until release() is called."""
        self._release.clear()

    def release(self) -> None:
        self._release.set()

    @property
    def calls(self) -> list[str]:
        return self._calls.copy()

    @property
    def completed(self) -> list[str]:
        return self._completed.copy()

    @property
    def cancelled(self) -> list[str]:
        """Call ids the controller gave up on."""
        return self._cancelled.copy()

    async def initiate(self, prospect: ScoredProspect) -> str:
        logger.info("Mock: Initiating call", extra={"prospect_id": prospect.key})
        if self._should_fail:
            raise CallInitiationError(self._fail_error, error_code=self._fail_code)
        call_id = f"mock-{next(self._ids)}"
        self._calls.append(prospect.key)
        self._placed[call_id] = prospect.key
        return call_id

    async def await_completion(self, call_id: str) -> CallCompletion:
        await self._release.wait()
        completion = self._scripted.popleft() if self._scripted else self._default
        self._completed.append(self._placed.pop(call_id, call_id))
        return completion

    async def cancel(self, call_id: str) -> None:
        self._placed.pop(call_id, None)
        self._cancelled.append(call_id)
