"""
Tests for prospect sources and candidate filtering.
"""

import pytest

from frontdesk.prospects.sources import (
    CandidateRules,
    FilteredProspectSource,
    InMemoryProspectSource,
)


class TestInMemoryProspectSource:
    def test_replace_swaps_snapshot(self, prospect_factory) -> None:
        source = InMemoryProspectSource([prospect_factory(1)])
        snapshot = source.list_candidates()

        assert source.replace([prospect_factory(2), prospect_factory(3)]) == 2

        assert [p.id for p in snapshot] == [1]
        assert [p.id for p in source.list_candidates()] == [2, 3]

    def test_empty_by_default(self) -> None:
        assert InMemoryProspectSource().list_candidates() == ()


class TestCandidateRules:
    def test_accepts_listed_statuses_with_enough_days(self, prospect_factory) -> None:
        rules = CandidateRules()

        assert rules.accepts(prospect_factory(1, status="New", days_in_status=2))
        assert rules.accepts(prospect_factory(2, status=" follow-up ", days_in_status=9))
        assert not rules.accepts(prospect_factory(3, status="Cold", days_in_status=9))
        assert not rules.accepts(prospect_factory(4, status="New", days_in_status=1))
        assert not rules.accepts(prospect_factory(5, status="New", days_in_status=None))
        assert not rules.accepts(prospect_factory(6, status=None, days_in_status=5))

    def test_rejects_negative_minimum(self) -> None:
        with pytest.raises(ValueError):
            CandidateRules(min_days_in_status=-1)


def test_filtered_source_applies_rules(prospect_factory) -> None:
    inner = InMemoryProspectSource(
        [
            prospect_factory(1, status="Prospect", days_in_status=3),
            prospect_factory(2, status="Cold", days_in_status=30),
            prospect_factory(3, status="Callback", days_in_status=0),
        ]
    )
    source = FilteredProspectSource(inner, CandidateRules(min_days_in_status=0, statuses=("Prospect", "Callback")))

    assert [p.id for p in source.list_candidates()] == [1, 3]
