"""
Unit tests for the deterministic prospect scorer.
"""

from datetime import datetime

import pytest

from frontdesk.prospects.models import Priority, Prospect, ProspectStatus
from frontdesk.prospects.scorer import (
    STRATEGY_TEMPLATES,
    ProspectScorer,
    next_optimal_hour,
    score_days_in_status,
    score_prospect_type,
    score_time_of_day,
)


class TestSubScores:
    @pytest.mark.parametrize(
        ("days", "expected"),
        [
            (2, 1.0),
            (5, 1.0),
            (1, 0.8),
            (6, 0.8),
            (7, 0.8),
            (8, 0.6),
            (14, 0.6),
            (15, 0.3),
            (400, 0.3),
            (0, 0.1),
            (-3, 0.1),
            (None, 0.1),
        ],
    )
    def test_days_in_status_bands(self, days: int | None, expected: float) -> None:
        assert score_days_in_status(days) == expected

    def test_days_in_status_rejects_non_integers(self) -> None:
        assert score_days_in_status("3") == 0.1
        assert score_days_in_status(3.5) == 0.1
        assert score_days_in_status(True) == 0.1

    def test_status_matching_ignores_case_and_whitespace(self) -> None:
        assert score_prospect_type("New") == 1.0
        assert score_prospect_type("  new ") == 1.0
        assert score_prospect_type("FOLLOW-UP") == 0.7
        assert score_prospect_type("Cold") == 0.5

    def test_unknown_status_scores_low(self) -> None:
        assert score_prospect_type("Lead") == 0.3
        assert score_prospect_type(None) == 0.3

    @pytest.mark.parametrize(
        ("hour", "expected"),
        [(9, 1.0), (11, 1.0), (14, 0.9), (16, 0.9), (17, 0.7), (18, 0.7), (12, 0.6), (13, 0.6), (8, 0.3), (19, 0.3), (0, 0.3)],
    )
    def test_time_of_day(self, hour: int, expected: float) -> None:
        assert score_time_of_day(hour) == expected


class TestNextOptimalHour:
    def test_morning_before_nine(self) -> None:
        assert next_optimal_hour(6, "morning") == 9

    def test_morning_inside_window(self) -> None:
        assert next_optimal_hour(9, "morning") == 10
        assert next_optimal_hour(10, "morning") == 11

    def test_morning_after_window_rolls_to_next_day(self) -> None:
        assert next_optimal_hour(11, "morning") == 10
        assert next_optimal_hour(20, "morning") == 10

    def test_other_preferences_use_next_hour(self) -> None:
        assert next_optimal_hour(14, "afternoon") == 15
        assert next_optimal_hour(23, "evening") == 0


class TestProspectScorer:
    def test_fresh_new_prospect_in_morning_is_high_priority(
        self, scorer: ProspectScorer, morning: datetime
    ) -> None:
        for days in range(2, 6):
            for hour in (9, 10, 11):
                analysis = scorer.score(
                    Prospect(id=1, status="New", days_in_status=days),
                    morning.replace(hour=hour),
                )
                assert analysis.score >= 90
                assert analysis.priority == Priority.HIGH

    def test_exact_score_for_new_prospect(self, scorer: ProspectScorer, morning: datetime) -> None:
        analysis = scorer.score(Prospect(id=1, status="New", days_in_status=3), morning)

        assert analysis.score == 90
        assert analysis.success_probability == 0.8
        assert analysis.call_timing.recommended_hour == 11
        assert analysis.call_timing.confidence == 1.0
        assert analysis.call_timing.reasoning == "Based on New status and morning preference"

    def test_cold_prospect_scores_lower(self, scorer: ProspectScorer, morning: datetime) -> None:
        analysis = scorer.score(Prospect(id=2, status="Cold", days_in_status=20), morning)

        assert analysis.score == 42
        assert analysis.success_probability == 0.5
        assert analysis.priority == Priority.LOW

    def test_prospect_status_is_medium_priority(self, scorer: ProspectScorer, morning: datetime) -> None:
        analysis = scorer.score(Prospect(id=3, status="Prospect", days_in_status=3), morning)

        assert analysis.score == 83
        assert analysis.priority == Priority.MEDIUM

    def test_malformed_input_degrades_instead_of_raising(self, scorer: ProspectScorer) -> None:
        evening = datetime(2025, 1, 6, 20, 0)
        analysis = scorer.score(Prospect(id="x-1", status="Lead", days_in_status=None), evening)

        assert analysis.score == 17
        assert analysis.success_probability == 0.5
        assert analysis.priority == Priority.LOW
        assert analysis.strategy == STRATEGY_TEMPLATES[ProspectStatus.PROSPECT]

    def test_scoring_is_deterministic(self, scorer: ProspectScorer, morning: datetime) -> None:
        prospect = Prospect(id=7, status="Callback", days_in_status=9, preferred_time="afternoon")
        assert scorer.score(prospect, morning) == scorer.score(prospect, morning)
        assert ProspectScorer().score(prospect, morning) == scorer.score(prospect, morning)

    def test_success_probability_is_capped(self, scorer: ProspectScorer) -> None:
        assert scorer.predict_success(Prospect(id=1, status="new", days_in_status=4)) == 0.8
        assert scorer.predict_success(Prospect(id=1, status="Cold", days_in_status=4)) == 0.7
        assert scorer.predict_success(Prospect(id=1, status="New", days_in_status=30)) == 0.6

    def test_non_morning_preference_timing(self, scorer: ProspectScorer) -> None:
        late = datetime(2025, 1, 6, 23, 15)
        timing = scorer.predict_call_timing(
            Prospect(id=1, status="Prospect", days_in_status=3, preferred_time="Evening"), late
        )
        assert timing.recommended_hour == 0
        assert timing.confidence == 0.79
        assert "evening preference" in timing.reasoning

    @pytest.mark.parametrize(
        ("score", "probability", "expected"),
        [(90, 0.8, Priority.HIGH), (80, 0.8, Priority.MEDIUM), (60, 0.6, Priority.LOW)],
    )
    def test_priority_bands(self, score: int, probability: float, expected: Priority) -> None:
        assert ProspectScorer.determine_priority(score, probability) == expected

    def test_strategy_template_per_status(self, scorer: ProspectScorer) -> None:
        strategy = scorer.call_strategy(Prospect(id=1, status="Cold"))
        assert strategy.approach.startswith("Short re-introduction")
        assert strategy.talking_points

    def test_custom_historical_rates(self, morning: datetime) -> None:
        flat = {status: 0.15 for status in ProspectStatus}
        custom = ProspectScorer(historical_rates=flat)
        prospect = Prospect(id=1, status="New", days_in_status=3)

        assert custom.score(prospect, morning).score == 75

    def test_weights_must_sum_to_one(self) -> None:
        with pytest.raises(ValueError):
            ProspectScorer(weights={"days_in_status": 0.5, "prospect_type": 0.1})
