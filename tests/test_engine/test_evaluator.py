"""
Tests for observer_q/engine/evaluator.py.

What we test
------------
evaluate_interval():
  - Chains score -> bias -> classify with the user's settings.
  - The bias is computed from the interval's own q_score.
  - Seeded evaluations are reproducible.
  - Errors from the bias engine propagate.

QEngine:
  - Methods delegate to the module functions with the bound settings.
  - The dataclass is frozen.
"""

from __future__ import annotations

import dataclasses

import pytest

from observer_q.engine.bias import compute_collapse_bias
from observer_q.engine.evaluator import QEngine, evaluate_interval
from observer_q.engine.exceptions import InvalidArgumentError
from observer_q.engine.score import compute_score
from observer_q.models.engine import ManualInput
from observer_q.models.settings import CalibrationSettings
from observer_q.taxonomy.q_state import QState


class TestEvaluateInterval:
    def test_chains_components(self, sample_input, sample_settings):
        ev = evaluate_interval(sample_input, 0.6, sample_settings, interval_number=3, seed=11)
        score = compute_score(sample_input, 0.6)
        assert ev.score == score
        assert ev.interval_number == 3
        assert ev.baseline_q == 0.6
        assert ev.bias.q_factor == score.q_score
        assert ev.bias == compute_collapse_bias(score.q_score, 2.8, seed=11)

    def test_best_case_is_ocean(self, sample_settings):
        ev = evaluate_interval(ManualInput(mood=10, stress=0), 0.0, sample_settings, seed=1)
        assert ev.score.q_score == 1.0
        assert ev.state is QState.OCEAN
        assert ev.recommendation.startswith("OCEAN:")

    def test_worst_case_is_tank(self, sample_settings):
        ev = evaluate_interval(ManualInput(mood=0, stress=10), 0.5, sample_settings, seed=1)
        assert ev.state is QState.TANK
        assert ev.recommendation.startswith("TANK:")

    def test_custom_thresholds_change_band(self, sample_input):
        # q for (7, 3) at baseline 0.6 is 0.49 * (1 - 0.3 * 0.4) = 0.4312
        loose = CalibrationSettings(tank_threshold=0.2, ocean_threshold=0.4)
        ev = evaluate_interval(sample_input, 0.6, loose, seed=1)
        assert ev.score.q_score == pytest.approx(0.4312)
        assert ev.state is QState.OCEAN

    def test_reproducible_with_seed(self, sample_input, sample_settings):
        a = evaluate_interval(sample_input, 0.6, sample_settings, seed=5)
        b = evaluate_interval(sample_input, 0.6, sample_settings, seed=5)
        assert a == b

    def test_invalid_trials_propagate(self, sample_input, sample_settings):
        with pytest.raises(InvalidArgumentError):
            evaluate_interval(sample_input, 0.6, sample_settings, n_trials=0)


class TestQEngine:
    def test_defaults(self):
        engine = QEngine()
        assert engine.settings.k_symbiosis == 2.8
        assert engine.n_trials == 1000

    def test_delegates(self, sample_input, sample_settings):
        engine = QEngine(settings=sample_settings, n_trials=300)
        assert engine.score(sample_input, 0.6) == compute_score(sample_input, 0.6)
        assert engine.collapse_bias(0.7, seed=2) == compute_collapse_bias(
            0.7, 2.8, n_trials=300, seed=2
        )
        assert engine.collapse_bias(0.7, n_trials=50, seed=2).n_trials == 50
        assert engine.classify(0.8) is QState.OCEAN
        assert engine.recommend(0.1).startswith("TANK:")

    def test_evaluate_matches_function(self, sample_input, sample_settings):
        engine = QEngine(settings=sample_settings, n_trials=400)
        assert engine.evaluate(sample_input, 0.6, interval_number=2, seed=8) == evaluate_interval(
            sample_input, 0.6, sample_settings, interval_number=2, n_trials=400, seed=8
        )

    def test_frozen(self, sample_settings):
        engine = QEngine(settings=sample_settings)
        with pytest.raises(dataclasses.FrozenInstanceError):
            engine.n_trials = 10
