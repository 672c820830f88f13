"""Tests for IntervalMeasurement, SessionPlan and SessionSummary models."""

from __future__ import annotations

import pytest
from pydantic import ValidationError

from observer_q.models.session import IntervalMeasurement, SessionPlan, SessionSummary
from observer_q.taxonomy.q_state import QState


class TestIntervalMeasurement:
    def test_valid_construction(self, measurement_factory):
        m = measurement_factory(4, q_score=0.7)
        assert m.interval_number == 4
        assert m.measurement_id is None
        assert m.measured_at is not None

    def test_zero_interval_raises(self, measurement_factory):
        with pytest.raises(ValidationError, match="interval_number"):
            measurement_factory(0, q_score=0.7)

    def test_empty_recommendation_raises(self):
        with pytest.raises(ValidationError, match="recommendation"):
            IntervalMeasurement(
                session_id="s",
                interval_number=1,
                q_score=0.5,
                fear_density=0.1,
                mood_input=5,
                stress_input=5,
                collapse_bias=0.5,
                mean_dice=3.4,
                recommendation="   ",
            )

    def test_recommendation_is_stripped(self):
        m = IntervalMeasurement(
            session_id="s",
            interval_number=1,
            q_score=0.5,
            fear_density=0.1,
            mood_input=5,
            stress_input=5,
            collapse_bias=0.5,
            mean_dice=3.4,
            recommendation="  NEUTRAL: ok  ",
        )
        assert m.recommendation == "NEUTRAL: ok"


class TestSessionPlan:
    def test_default_is_ten_intervals(self):
        assert SessionPlan().total_intervals == 10

    def test_partial_interval_rounds_down(self):
        assert SessionPlan(duration_minutes=1, interval_seconds=25).total_intervals == 2

    def test_is_final_interval(self):
        plan = SessionPlan()
        assert not plan.is_final_interval(9)
        assert plan.is_final_interval(10)
        assert plan.is_final_interval(11)

    def test_interval_longer_than_session_raises(self):
        with pytest.raises(ValidationError, match="interval_seconds"):
            SessionPlan(duration_minutes=1, interval_seconds=120)

    def test_zero_duration_raises(self):
        with pytest.raises(ValidationError, match="duration_minutes"):
            SessionPlan(duration_minutes=0)


class TestSessionSummary:
    @pytest.mark.parametrize("value", [float("nan"), float("-inf")])
    def test_non_finite_values_rejected(self, value):
        with pytest.raises(ValidationError):
            SessionSummary(
                session_id="s",
                n_intervals=1,
                baseline_q=value,
                final_q=0.6,
                q_improvement=0.1,
                avg_q=0.6,
                avg_collapse_bias=0.5,
                avg_mean_dice=3.3,
                final_state=QState.NEUTRAL,
            )
