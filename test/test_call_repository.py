"""
Tests for call record persistence.
"""

from datetime import datetime, timedelta

import pytest

from frontdesk.calls.models import CallOutcome, CallRecord
from frontdesk.calls.queue import CallQueue
from frontdesk.calls.repository import CallRecordRepository
from frontdesk.shared.database import DatabaseManager


def _record(prospect_id: str, attempt: int, at: datetime, outcome: CallOutcome = CallOutcome.NO_ANSWER) -> CallRecord:
    return CallRecord(
        prospect_id=prospect_id,
        outcome=outcome,
        duration_seconds=12.5,
        notes=f"attempt {attempt}",
        timestamp=at,
        attempt_number=attempt,
    )


class TestCallRecordRepository:
    @pytest.mark.asyncio
    async def test_append_and_list_newest_first(self, db_manager: DatabaseManager) -> None:
        repository = CallRecordRepository(db_manager)
        start = datetime(2025, 1, 6, 10, 0)

        await repository.append_call_record(_record("42", 1, start))
        await repository.append_call_record(_record("42", 2, start + timedelta(minutes=30), CallOutcome.INTERESTED))
        await repository.append_call_record(_record("7", 1, start))

        records = await repository.list_for_prospect("42")

        assert [r.attempt_number for r in records] == [2, 1]
        assert records[0].outcome == CallOutcome.INTERESTED
        assert records[0].notes == "attempt 2"
        assert records[0].duration_seconds == 12.5
        assert await repository.count() == 3

    @pytest.mark.asyncio
    async def test_list_respects_limit(self, db_manager: DatabaseManager) -> None:
        repository = CallRecordRepository(db_manager)
        start = datetime(2025, 1, 6, 10, 0)
        for attempt in range(1, 4):
            await repository.append_call_record(_record("1", attempt, start + timedelta(minutes=attempt)))

        records = await repository.list_for_prospect("1", limit=2)

        assert [r.attempt_number for r in records] == [3, 2]

    @pytest.mark.asyncio
    async def test_unknown_prospect_has_no_records(self, db_manager: DatabaseManager) -> None:
        repository = CallRecordRepository(db_manager)

        assert await repository.list_for_prospect("missing") == []
        assert await repository.count() == 0

    @pytest.mark.asyncio
    async def test_queue_persists_through_repository(
        self, db_manager: DatabaseManager, scorer, morning: datetime
    ) -> None:
        repository = CallRecordRepository(db_manager)
        queue = CallQueue(scorer=scorer, record_sink=repository)

        await queue.record_outcome(5, CallOutcome.SUCCESS, 90, "booked demo", morning)

        stored = await repository.list_for_prospect("5")
        assert len(stored) == 1
        assert stored[0].outcome == CallOutcome.SUCCESS
        assert stored[0].attempt_number == 1
