"""
Asyncio timers owned by the automation controller.

PeriodicTimer fires its callback every `interval` seconds, each firing in
its own task so a slow callback does not delay the next tick. OneShotTimer
fires once after `delay` seconds. Both can be disarmed from inside their own
callback.
"""

from __future__ import annotations

import asyncio
from collections.abc import Awaitable, Callable
from typing import Any

from frontdesk.shared.logging import get_logger

logger = get_logger(__name__)

TimerCallback = Callable[[], Awaitable[Any]]


class PeriodicTimer:
    def __init__(self, interval: float, callback: TimerCallback, name: str = "periodic") -> None:
        if interval <= 0:
            raise ValueError("interval must be > 0")
        self._interval = float(interval)
        self._callback = callback
        self._name = name
        self._task: asyncio.Task[None] | None = None
        self._inflight: set[asyncio.Task[Any]] = set()
        self._generation = 0
        self._fire_count = 0

    @property
    def name(self) -> str:
        return self._name

    @property
    def interval(self) -> float:
        return self._interval

    @property
    def active(self) -> bool:
        return self._task is not None and not self._task.done()

    @property
    def fire_count(self) -> int:
        return self._fire_count

    def arm(self) -> None:
        """Start ticking. Re-arming an active timer restarts its interval."""
        self.disarm()
        self._generation += 1
        self._task = asyncio.get_running_loop().create_task(
            self._run(self._generation), name=f"timer:{self._name}"
        )
        logger.debug("Timer armed", extra={"timer": self._name, "interval": self._interval})

    def disarm(self) -> None:
        """Stop ticking. Callbacks already running are left to finish."""
        self._generation += 1
        task, self._task = self._task, None
        if task is not None and not task.done() and task is not asyncio.current_task():
            task.cancel()

    async def _run(self, generation: int) -> None:
        while generation == self._generation:
            await asyncio.sleep(self._interval)
            if generation != self._generation:
                return
            self._fire_count += 1
            task = asyncio.get_running_loop().create_task(self._invoke())
            self._inflight.add(task)
            task.add_done_callback(self._inflight.discard)

    async def _invoke(self) -> None:
        try:
            await self._callback()
        except Exception:
            logger.exception("Timer callback failed", extra={"timer": self._name})

    async def shutdown(self) -> None:
        """Disarm and wait for in-flight callbacks to settle."""
        self.disarm()
        if self._inflight:
            await asyncio.gather(*list(self._inflight), return_exceptions=True)


class OneShotTimer:
    def __init__(self, delay: float, callback: TimerCallback, name: str = "oneshot") -> None:
        if delay < 0:
            raise ValueError("delay must be >= 0")
        self._delay = float(delay)
        self._callback = callback
        self._name = name
        self._task: asyncio.Task[None] | None = None
        self._generation = 0
        self._fire_count = 0

    @property
    def name(self) -> str:
        return self._name

    @property
    def delay(self) -> float:
        return self._delay

    @property
    def active(self) -> bool:
        return self._task is not None and not self._task.done()

    @property
    def fire_count(self) -> int:
        return self._fire_count

    def arm(self, delay: float | None = None) -> None:
        self.disarm()
        if delay is not None:
            if delay < 0:
                raise ValueError("delay must be >= 0")
            self._delay = float(delay)
        self._generation += 1
        self._task = asyncio.get_running_loop().create_task(
            self._run(self._generation), name=f"timer:{self._name}"
        )
        logger.debug("Timer armed", extra={"timer": self._name, "delay": self._delay})

    def disarm(self) -> None:
        self._generation += 1
        task, self._task = self._task, None
        if task is not None and not task.done() and task is not asyncio.current_task():
            task.cancel()

    async def _run(self, generation: int) -> None:
        await asyncio.sleep(self._delay)
        if generation != self._generation:
            return
        self._fire_count += 1
        try:
            await self._callback()
        except Exception:
            logger.exception("Timer callback failed", extra={"timer": self._name})
        finally:
            if generation == self._generation:
                self._task = None

    async def shutdown(self) -> None:
        task = self._task
        self.disarm()
        if task is not None and task is not asyncio.current_task():
            await asyncio.gather(task, return_exceptions=True)
