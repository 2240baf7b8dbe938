"""
Tests for the asyncio timers used by the automation loop.
"""

import asyncio

import pytest

from frontdesk.automation.timers import OneShotTimer, PeriodicTimer


class TestPeriodicTimer:
    @pytest.mark.asyncio
    async def test_fires_repeatedly_until_disarmed(self) -> None:
        fired: list[int] = []

        async def tick() -> None:
            fired.append(1)

        timer = PeriodicTimer(0.01, tick, name="test")
        timer.arm()
        await asyncio.sleep(0.075)
        timer.disarm()
        count = len(fired)
        await asyncio.sleep(0.05)

        assert count >= 3
        assert len(fired) == count
        assert not timer.active
        assert timer.fire_count == count

    @pytest.mark.asyncio
    async def test_slow_callback_does_not_block_next_tick(self) -> None:
        started = 0
        release = asyncio.Event()

        async def slow() -> None:
            nonlocal started
            started += 1
            await release.wait()

        timer = PeriodicTimer(0.01, slow)
        timer.arm()
        await asyncio.sleep(0.05)
        release.set()
        await timer.shutdown()

        assert started >= 2

    @pytest.mark.asyncio
    async def test_callback_errors_do_not_stop_the_timer(self) -> None:
        calls = 0

        async def broken() -> None:
            nonlocal calls
            calls += 1
            raise RuntimeError("boom")

        timer = PeriodicTimer(0.01, broken)
        timer.arm()
        await asyncio.sleep(0.05)
        await timer.shutdown()

        assert calls >= 2

    @pytest.mark.asyncio
    async def test_disarm_from_inside_callback(self) -> None:
        fired = 0
        timer: PeriodicTimer

        async def once() -> None:
            nonlocal fired
            fired += 1
            timer.disarm()

        timer = PeriodicTimer(0.01, once)
        timer.arm()
        await asyncio.sleep(0.06)

        assert fired == 1
        assert not timer.active

    def test_rejects_non_positive_interval(self) -> None:
        async def noop() -> None:
            return None

        with pytest.raises(ValueError):
            PeriodicTimer(0, noop)


class TestOneShotTimer:
    @pytest.mark.asyncio
    async def test_fires_once_after_delay(self) -> None:
        fired = asyncio.Event()

        async def done() -> None:
            fired.set()

        timer = OneShotTimer(0.01, done)
        timer.arm()
        assert timer.active
        await asyncio.wait_for(fired.wait(), timeout=1)
        await asyncio.sleep(0)

        assert timer.fire_count == 1
        assert not timer.active

    @pytest.mark.asyncio
    async def test_disarm_prevents_firing(self) -> None:
        fired = 0

        async def done() -> None:
            nonlocal fired
            fired += 1

        timer = OneShotTimer(0.02, done)
        timer.arm()
        timer.disarm()
        await asyncio.sleep(0.05)

        assert fired == 0
        assert timer.fire_count == 0

    @pytest.mark.asyncio
    async def test_rearm_with_new_delay(self) -> None:
        fired = asyncio.Event()

        async def done() -> None:
            fired.set()

        timer = OneShotTimer(60, done)
        timer.arm(0.01)

        await asyncio.wait_for(fired.wait(), timeout=1)
        assert timer.delay == 0.01
