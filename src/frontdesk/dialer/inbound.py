"""
Inbound-call monitor driven by dialer webhooks.
"""

from __future__ import annotations

from collections.abc import Callable

from frontdesk.dialer.interface import InboundCallMonitor
from frontdesk.shared.logging import get_logger

logger = get_logger(__name__)


class SignalInboundMonitor(InboundCallMonitor):
    """Tracks active inbound calls reported by begin_inbound/complete_inbound.

    Callbacks registered with on_inbound_complete fire once, when the last
    active inbound call ends, and are then dropped.
    """

    def __init__(self) -> None:
        self._active: set[str] = set()
        self._callbacks: list[Callable[[], None]] = []

    @property
    def active_calls(self) -> tuple[str, ...]:
        return tuple(sorted(self._active))

    def stop(self) -> None:
        """Drop callbacks registered by a controller that is shutting down."""
        self._callbacks.clear()

    def has_active_inbound(self) -> bool:
        return bool(self._active)

    def on_inbound_complete(self, callback: Callable[[], None]) -> None:
        self._callbacks.append(callback)

    def begin_inbound(self, call_id: str = "inbound") -> None:
        self._active.add(call_id)
        logger.info("Inbound call started", extra={"call_id": call_id})

    def complete_inbound(self, call_id: str = "inbound") -> int:
        """Mark an inbound call finished. Returns the number of callbacks fired."""
        if call_id not in self._active:
            logger.warning("Inbound completion for unknown call", extra={"call_id": call_id})
            return 0
        self._active.discard(call_id)
        logger.info("Inbound call completed", extra={"call_id": call_id})
        if self._active:
            return 0

        callbacks, self._callbacks = self._callbacks, []
        for callback in callbacks:
            try:
                callback()
            except Exception:
                logger.exception("Inbound completion callback failed")
        return len(callbacks)
