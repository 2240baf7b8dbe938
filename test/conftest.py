"""
Pytest configuration and shared fixtures.
"""

from __future__ import annotations

from collections.abc import AsyncGenerator
from datetime import datetime, timedelta
from pathlib import Path

import pytest
import pytest_asyncio

from frontdesk.calls.queue import CallQueue, QueuePolicy
from frontdesk.config import Settings
from frontdesk.dialer.config import DialerConfig, ProviderType
from frontdesk.dialer.mock_adapter import MockCallSink
from frontdesk.performance.tracker import PerformanceTracker
from frontdesk.prospects.models import Prospect
from frontdesk.prospects.scorer import ProspectScorer
from frontdesk.runtime import Runtime, build_runtime
from frontdesk.shared.database import DatabaseManager


class FakeClock:
    """Manually advanced clock for deterministic scheduling tests."""

    def __init__(self, start: datetime) -> None:
        self.now = start

    def __call__(self) -> datetime:
        return self.now

    def advance(self, **kwargs: float) -> datetime:
        self.now = self.now + timedelta(**kwargs)
        return self.now


def make_prospect(
    prospect_id: int | str,
    status: str | None = "Prospect",
    days_in_status: int | None = 3,
    phone: str = "",
    preferred_time: str | None = None,
) -> Prospect:
    return Prospect(
        id=prospect_id,
        phone=phone or f"555-010{prospect_id}",
        status=status,
        days_in_status=days_in_status,
        preferred_time=preferred_time,
    )


@pytest.fixture
def prospect_factory():
    return make_prospect


@pytest.fixture
def morning() -> datetime:
    # Monday 10:00, inside the morning calling peak
    return datetime(2025, 1, 6, 10, 0, 0)


@pytest.fixture
def clock(morning: datetime) -> FakeClock:
    return FakeClock(morning)


@pytest.fixture
def scorer() -> ProspectScorer:
    return ProspectScorer()


@pytest.fixture
def call_queue(scorer: ProspectScorer) -> CallQueue:
    return CallQueue(scorer=scorer, policy=QueuePolicy())


@pytest.fixture
def tracker() -> PerformanceTracker:
    return PerformanceTracker()


@pytest.fixture
def test_settings(tmp_path: Path) -> Settings:
    return Settings(
        database_url=f"sqlite+aiosqlite:///{tmp_path / 'frontdesk-test.db'}",
        automation_autostart=False,
        dispatch_interval_seconds=3600,
        call_completion_timeout_seconds=5,
        cors_origins="http://testserver",
    )


@pytest_asyncio.fixture
async def db_manager(test_settings: Settings) -> AsyncGenerator[DatabaseManager, None]:
    manager = DatabaseManager(test_settings.database_url, echo=False)
    await manager.create_all()
    yield manager
    await manager.close()


@pytest_asyncio.fixture
async def runtime(
    test_settings: Settings,
    db_manager: DatabaseManager,
    clock: FakeClock,
) -> AsyncGenerator[Runtime, None]:
    rt = build_runtime(
        test_settings,
        dialer_config=DialerConfig(provider_type=ProviderType.MOCK, webhook_token=""),
        db_manager=db_manager,
        call_sink=MockCallSink(),
        clock=clock,
    )
    yield rt
    await rt.controller.shutdown()
    await rt.call_sink.close()
