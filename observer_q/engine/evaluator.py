"""
Interval evaluator: chains score → bias → classify for one submitted interval.

``evaluate_interval()`` is what the session layer calls every time the user
submits a mood / stress report.  ``QEngine`` binds a user's
``CalibrationSettings`` once and exposes the same operations as methods; it
is a frozen value object, safe to share across threads as long as each call
supplies its own generator.

Usage::

    engine = QEngine(settings=CalibrationSettings(k_symbiosis=2.8))
    evaluation = engine.evaluate(ManualInput(mood=7, stress=3), baseline_q=0.6,
                                 interval_number=1, seed=42)
"""

from __future__ import annotations

import logging
import random
from dataclasses import dataclass, field
from typing import Optional

from observer_q.engine.bias import DEFAULT_N_TRIALS, compute_collapse_bias
from observer_q.engine.classifier import classify, recommend
from observer_q.engine.score import compute_score
from observer_q.models.engine import BiasResult, IntervalEvaluation, ManualInput, ScoreResult
from observer_q.models.settings import CalibrationSettings
from observer_q.taxonomy.q_state import QState

logger = logging.getLogger(__name__)


def evaluate_interval(
    manual_input:    ManualInput,
    baseline_q:      float,
    settings:        CalibrationSettings,
    interval_number: int = 1,
    n_trials:        int = DEFAULT_N_TRIALS,
    rng:             Optional[random.Random] = None,
    seed:            Optional[int] = None,
) -> IntervalEvaluation:
    """Compute score, bias, band and guidance for one interval.

    Args:
        manual_input:    Mood / stress report for this interval.
        baseline_q:      The user's baseline quality.
        settings:        Symbiosis constant and band thresholds.
        interval_number: 1-based position within the session.
        n_trials:        Monte-Carlo die rolls for the bias statistics.
        rng:             Generator for sampling; takes precedence over ``seed``.
        seed:            Seed for a fresh generator when ``rng`` is not given.

    Returns:
        IntervalEvaluation bundling all engine outputs.

    Raises:
        InvalidArgumentError:     If ``n_trials`` is not positive.
        InvalidDistributionError: If the face weights cannot be normalised.
    """
    score = compute_score(manual_input, baseline_q)
    bias  = compute_collapse_bias(
        score.q_score, settings.k_symbiosis, n_trials=n_trials, rng=rng, seed=seed,
    )
    state = classify(score.q_score, settings.tank_threshold, settings.ocean_threshold)
    text  = recommend(score.q_score, settings.tank_threshold, settings.ocean_threshold)

    logger.debug(
        "interval %d: mood=%.1f stress=%.1f -> q=%.4f fear=%.4f bias=%.4f state=%s",
        interval_number, manual_input.mood, manual_input.stress,
        score.q_score, score.fear_density, bias.theoretical_bias, state.value,
    )

    return IntervalEvaluation(
        interval_number=interval_number,
        manual_input=manual_input,
        baseline_q=baseline_q,
        score=score,
        bias=bias,
        state=state,
        recommendation=text,
    )


@dataclass(frozen=True)
class QEngine:
    """Engine bound to one user's calibration settings.

    Attributes:
        settings: Symbiosis constant and band thresholds.
        n_trials: Default Monte-Carlo trial count for bias evaluation.
    """

    settings: CalibrationSettings = field(default_factory=CalibrationSettings)
    n_trials: int = DEFAULT_N_TRIALS

    def score(self, manual_input: ManualInput, baseline_q: float) -> ScoreResult:
        return compute_score(manual_input, baseline_q)

    def collapse_bias(
        self,
        q_current: float,
        n_trials:  Optional[int] = None,
        rng:       Optional[random.Random] = None,
        seed:      Optional[int] = None,
    ) -> BiasResult:
        return compute_collapse_bias(
            q_current,
            self.settings.k_symbiosis,
            n_trials=self.n_trials if n_trials is None else n_trials,
            rng=rng,
            seed=seed,
        )

    def classify(self, q_score: float) -> QState:
        return classify(q_score, self.settings.tank_threshold, self.settings.ocean_threshold)

    def recommend(self, q_score: float) -> str:
        return recommend(q_score, self.settings.tank_threshold, self.settings.ocean_threshold)

    def evaluate(
        self,
        manual_input:    ManualInput,
        baseline_q:      float,
        interval_number: int = 1,
        rng:             Optional[random.Random] = None,
        seed:            Optional[int] = None,
    ) -> IntervalEvaluation:
        return evaluate_interval(
            manual_input,
            baseline_q,
            self.settings,
            interval_number=interval_number,
            n_trials=self.n_trials,
            rng=rng,
            seed=seed,
        )
