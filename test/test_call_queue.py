"""
Unit tests for the ranked call queue.
"""

from datetime import datetime

import pytest

from frontdesk.calls.models import CallOutcome, CallRecord
from frontdesk.calls.queue import CallQueue, QueuePolicy, circular_hour_distance


class RecordingSink:
    def __init__(self) -> None:
        self.records: list[CallRecord] = []

    async def append_call_record(self, record: CallRecord) -> None:
        self.records.append(record)


class FailingSink:
    async def append_call_record(self, record: CallRecord) -> None:
        raise RuntimeError("database unavailable")


class TestOptimize:
    def test_orders_new_before_cold(self, call_queue: CallQueue, prospect_factory, morning: datetime) -> None:
        ranked = call_queue.optimize(
            [
                prospect_factory(2, status="Cold", days_in_status=20),
                prospect_factory(1, status="New", days_in_status=3),
            ],
            morning,
        )

        assert [p.id for p in ranked] == [1, 2]
        assert ranked[0].score > ranked[1].score

    def test_ties_break_by_ascending_id(self, call_queue: CallQueue, prospect_factory, morning: datetime) -> None:
        ranked = call_queue.optimize(
            [
                prospect_factory("b", status="New"),
                prospect_factory(10, status="New"),
                prospect_factory(2, status="New"),
                prospect_factory("a", status="New"),
            ],
            morning,
        )

        assert [p.id for p in ranked] == [2, 10, "a", "b"]

    def test_empty_input_clears_queue(self, call_queue: CallQueue, prospect_factory, morning: datetime) -> None:
        call_queue.optimize([prospect_factory(1)], morning)
        assert call_queue.optimize([], morning) == []
        assert call_queue.queue == ()
        assert call_queue.next_eligible(morning) is None


class TestNextEligible:
    def test_prefers_prospect_inside_window(self, scorer, prospect_factory) -> None:
        queue = CallQueue(scorer=scorer, policy=QueuePolicy(time_window_hours=1))
        now = datetime(2025, 1, 6, 15, 0)
        queue.optimize(
            [
                # morning preference at 15:00 recommends 10 tomorrow: outside window
                prospect_factory(1, status="New", days_in_status=3),
                prospect_factory(2, status="Cold", days_in_status=20, preferred_time="afternoon"),
            ],
            now,
        )

        chosen = queue.next_eligible(now)

        assert chosen is not None
        assert chosen.id == 2

    def test_falls_back_to_best_score_outside_window(self, scorer, prospect_factory) -> None:
        queue = CallQueue(scorer=scorer, policy=QueuePolicy(time_window_hours=0))
        night = datetime(2025, 1, 6, 22, 0)
        queue.optimize(
            [
                prospect_factory(1, status="New", days_in_status=3),
                prospect_factory(2, status="Cold", days_in_status=20),
            ],
            night,
        )

        chosen = queue.next_eligible(night)

        assert chosen is not None
        assert chosen.id == 1

    @pytest.mark.asyncio
    async def test_three_attempts_exclude_prospect(
        self, call_queue: CallQueue, prospect_factory, morning: datetime
    ) -> None:
        call_queue.optimize(
            [
                prospect_factory(1, status="New", days_in_status=3),
                prospect_factory(2, status="Cold", days_in_status=20),
            ],
            morning,
        )

        for _ in range(3):
            chosen = call_queue.next_eligible(morning)
            assert chosen is not None and chosen.id == 1
            await call_queue.record_outcome(1, CallOutcome.NO_ANSWER, 0, "", morning)

        assert call_queue.attempts_for(1) == 3
        for _ in range(5):
            chosen = call_queue.next_eligible(morning)
            assert chosen is not None
            assert chosen.id == 2

    @pytest.mark.asyncio
    async def test_none_when_every_prospect_is_exhausted(
        self, call_queue: CallQueue, prospect_factory, morning: datetime
    ) -> None:
        call_queue.optimize([prospect_factory(1)], morning)
        for _ in range(3):
            await call_queue.record_outcome(1, CallOutcome.BUSY, 0, "", morning)

        assert call_queue.next_eligible(morning) is None

    def test_circular_hour_distance_wraps(self) -> None:
        assert circular_hour_distance(23, 1) == 2
        assert circular_hour_distance(1, 23) == 2
        assert circular_hour_distance(10, 10) == 0
        assert circular_hour_distance(0, 12) == 12


class TestRecordOutcome:
    @pytest.mark.asyncio
    async def test_updates_stats_and_history(self, scorer, morning: datetime) -> None:
        sink = RecordingSink()
        queue = CallQueue(scorer=scorer, record_sink=sink)

        first = await queue.record_outcome(7, CallOutcome.INTERESTED, 120, "wants a quote", morning)
        second = await queue.record_outcome("7", CallOutcome.VOICEMAIL, 30, "", morning)

        stats = queue.stats
        assert stats.total_calls == 2
        assert stats.successful_calls == 1
        assert stats.call_attempts == {"7": 2}
        assert first.attempt_number == 1
        assert second.attempt_number == 2
        assert queue.history(7) == (first, second)
        assert sink.records == [first, second]

    @pytest.mark.asyncio
    async def test_sink_failure_is_not_raised(self, scorer, morning: datetime) -> None:
        queue = CallQueue(scorer=scorer, record_sink=FailingSink())

        record = await queue.record_outcome(1, CallOutcome.SUCCESS, 60, "", morning)

        assert record.outcome == CallOutcome.SUCCESS
        assert queue.stats.total_calls == 1

    def test_stats_snapshot_is_detached(self, call_queue: CallQueue) -> None:
        snapshot = call_queue.stats
        snapshot.call_attempts["1"] = 99

        assert call_queue.attempts_for(1) == 0


class TestInsights:
    def test_no_calls_means_zero_success_rate(self, call_queue: CallQueue, morning: datetime) -> None:
        insights = call_queue.insights(morning)

        assert insights.success_rate == 0.0
        assert insights.daily_progress == 0.0
        assert insights.calls_remaining == 200
        assert insights.average_call_seconds == 0.0
        assert insights.best_performing_hours == ()
        assert not any("success rate" in r for r in insights.recommendations)

    @pytest.mark.asyncio
    async def test_low_success_and_late_day_recommendations(self, call_queue: CallQueue) -> None:
        late = datetime(2025, 1, 6, 17, 30)
        for i in range(10):
            outcome = CallOutcome.INTERESTED if i == 0 else CallOutcome.NOT_INTERESTED
            await call_queue.record_outcome(i, outcome, 60, "", late)

        insights = call_queue.insights(late)

        assert insights.success_rate == 0.1
        assert insights.daily_progress == 5.0
        assert insights.calls_remaining == 190
        assert insights.average_call_seconds == 60.0
        assert insights.best_performing_hours == (17,)
        assert any("success rate below optimal" in r for r in insights.recommendations)
        assert any("velocity" in r for r in insights.recommendations)

    @pytest.mark.asyncio
    async def test_calls_remaining_floors_at_zero(self, scorer, morning: datetime) -> None:
        queue = CallQueue(scorer=scorer, policy=QueuePolicy(daily_target=2))
        for i in range(3):
            await queue.record_outcome(i, CallOutcome.SUCCESS, 10, "", morning)

        assert queue.insights(morning).calls_remaining == 0

    @pytest.mark.asyncio
    async def test_reset_session_clears_counters(self, call_queue: CallQueue, morning: datetime) -> None:
        await call_queue.record_outcome(1, CallOutcome.SUCCESS, 10, "", morning)
        call_queue.record_inbound_handled()

        call_queue.reset_session()

        stats = call_queue.stats
        assert stats.total_calls == 0
        assert stats.call_attempts == {}
        assert stats.inbound_handled == 0
        assert call_queue.records == ()


class TestQueuePolicy:
    def test_rejects_invalid_values(self) -> None:
        with pytest.raises(ValueError):
            QueuePolicy(max_attempts=0)
        with pytest.raises(ValueError):
            QueuePolicy(time_window_hours=13)
        with pytest.raises(ValueError):
            QueuePolicy(daily_target=0)
