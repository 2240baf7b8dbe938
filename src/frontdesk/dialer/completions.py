"""
Registry of pending call completions.

The HTTP dialer places a call and returns immediately; the result arrives
later on a webhook. Each placed call gets a future keyed by its call id that
the webhook handler resolves.
"""

from __future__ import annotations

import asyncio

from frontdesk.dialer.interface import CallCompletion, CompletionSignalError
from frontdesk.shared.logging import get_logger

logger = get_logger(__name__)


class CompletionRegistry:
    """Futures for calls that have been placed but not yet reported."""

    def __init__(self) -> None:
        self._pending: dict[str, asyncio.Future[CallCompletion]] = {}

    @property
    def pending(self) -> tuple[str, ...]:
        return tuple(self._pending)

    def expect(self, call_id: str) -> None:
        """Open a slot for a call that is about to be placed."""
        existing = self._pending.get(call_id)
        if existing is not None and not existing.done():
            existing.cancel()
        self._pending[call_id] = asyncio.get_running_loop().create_future()

    def resolve(self, call_id: str, completion: CallCompletion) -> bool:
        """Deliver a completion. Returns False when no call was waiting for it."""
        future = self._pending.get(call_id)
        if future is None:
            logger.warning("Completion received for unknown call", extra={"call_id": call_id})
            return False
        if future.done():
            logger.warning("Duplicate completion ignored", extra={"call_id": call_id})
            return False
        future.set_result(completion)
        return True

    async def wait(self, call_id: str) -> CallCompletion:
        future = self._pending.get(call_id)
        if future is None:
            raise CompletionSignalError(
                f"No call pending with id {call_id}",
                error_code="NOT_PENDING",
            )
        try:
            return await future
        finally:
            if self._pending.get(call_id) is future:
                del self._pending[call_id]

    def discard(self, call_id: str) -> None:
        future = self._pending.pop(call_id, None)
        if future is not None and not future.done():
            future.cancel()

    def clear(self) -> None:
        for key in list(self._pending):
            self.discard(key)
