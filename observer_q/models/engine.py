"""
Engine input and output value models.

``ManualInput`` is what the user reports each interval (mood, stress on a
0–10 scale).  ``ScoreResult`` and ``BiasResult`` are the two engine outputs;
``IntervalEvaluation`` bundles everything computed for one interval.

All models are frozen.  The engine never mutates a result after returning
it, and callers persist them as-is.
"""

from __future__ import annotations

import math

from pydantic import BaseModel, ConfigDict, field_validator

from observer_q.taxonomy.q_state import BiasInterpretation, QState

N_FACES = 6


class ManualInput(BaseModel):
    """Raw mood / stress self-report.

    Values outside 0–10 are accepted here; the score engine saturates them.
    Only non-finite numbers are rejected.

    Attributes:
        mood: Self-reported mood, nominally 0 (low) to 10 (high).
        stress: Self-reported stress, nominally 0 (calm) to 10 (max).
    """

    model_config = ConfigDict(frozen=True, allow_inf_nan=False)

    mood: float
    stress: float


class ScoreResult(BaseModel):
    """Output of ``compute_score``.

    Attributes:
        q_score: Observer quality, always within [0, 1].
        fear_density: Unbounded divergence signal; surfaced unclamped.
        sync_eeg: Mood-derived synchrony proxy in [0, 1].
        sync_hrv: Stress-derived synchrony proxy in [0, 1].
    """

    model_config = ConfigDict(frozen=True)

    q_score: float
    fear_density: float
    sync_eeg: float
    sync_hrv: float


class BiasResult(BaseModel):
    """Output of ``compute_collapse_bias``.

    ``mean_dice`` and ``favorable_rate`` are Monte-Carlo estimates; they vary
    between calls unless the generator is seeded.

    Attributes:
        theoretical_bias: Clamped collapse bias in [0, 2]; 1.0 is neutral.
        mean_dice: Mean of the sampled faces, in [1, 6].
        favorable_rate: Fraction of sampled faces >= 4.
        probabilities: Normalised face probabilities, faces 1..6 in order.
        q_factor: The Q score the bias was computed from.
        interpretation: Tilt direction label.
        n_trials: Number of Monte-Carlo draws behind the estimates.
    """

    model_config = ConfigDict(frozen=True)

    theoretical_bias: float
    mean_dice: float
    favorable_rate: float
    probabilities: tuple[float, ...]
    q_factor: float
    interpretation: BiasInterpretation
    n_trials: int

    @field_validator("probabilities")
    @classmethod
    def validate_probabilities(cls, v: tuple[float, ...]) -> tuple[float, ...]:
        if len(v) != N_FACES:
            raise ValueError(f"probabilities must have {N_FACES} entries, got {len(v)}.")
        if not math.isclose(sum(v), 1.0, abs_tol=1e-9):
            raise ValueError(f"probabilities must sum to 1.0, got {sum(v)!r}.")
        return v

    @property
    def expected_face(self) -> float:
        """Theoretical mean face value, ``sum(face * p)``."""
        return sum(face * p for face, p in enumerate(self.probabilities, start=1))


class IntervalEvaluation(BaseModel):
    """Everything the engine computes for one submitted interval.

    Attributes:
        interval_number: 1-based position of the interval within its session.
        manual_input: The mood / stress report that was scored.
        baseline_q: Baseline quality the score was scaled against.
        score: Score engine output.
        bias: Bias engine output for ``score.q_score``.
        state: Band of ``score.q_score`` against the user's thresholds.
        recommendation: Guidance text for ``state``.
    """

    model_config = ConfigDict(frozen=True, allow_inf_nan=False)

    interval_number: int = 1
    manual_input: ManualInput
    baseline_q: float
    score: ScoreResult
    bias: BiasResult
    state: QState
    recommendation: str

    @field_validator("interval_number")
    @classmethod
    def validate_interval_number(cls, v: int) -> int:
        if v < 1:
            raise ValueError(f"interval_number must be >= 1, got {v}.")
        return v
