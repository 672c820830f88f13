"""
Score engine: manual mood / stress input → Q score.

Formula
-------
    sync_eeg     = clamp(mood / 10, 0, 1)
    sync_hrv     = 1 - clamp(stress / 10, 0, 1)
    fear_base    = 1 - (sync_eeg + sync_hrv) / 2
    fear_density = fear_base * (1 - baseline_q)
    q_score      = clamp(sync_eeg * sync_hrv * (1 - fear_density), 0, 1)

The two sync channels are named after the EEG / HRV signals they stand in
for; here they are derived purely from the self-report.

Domain handling
---------------
Out-of-range mood and stress saturate instead of being rejected, so the
function is total over finite input.  ``baseline_q`` is expected in [0, 1] but
only finiteness is checked: a baseline outside that range makes
``fear_density`` negative or larger than 1, and it is returned as-is.
``q_score`` is always in [0, 1].
"""

from __future__ import annotations

import math

from observer_q.engine.exceptions import InvalidArgumentError
from observer_q.models.engine import ManualInput, ScoreResult


def compute_score(manual_input: ManualInput, baseline_q: float) -> ScoreResult:
    """Compute the Q score for one mood / stress report.

    Args:
        manual_input: Mood and stress self-report (nominally 0–10 each).
        baseline_q:   The user's baseline quality, nominally 0–1.

    Returns:
        ScoreResult with ``q_score`` in [0, 1].

    Raises:
        InvalidArgumentError: If ``baseline_q`` is NaN or infinite.
    """
    if not math.isfinite(baseline_q):
        raise InvalidArgumentError(f"baseline_q must be finite, got {baseline_q}.")

    sync_eeg = clamp(manual_input.mood / 10.0, 0.0, 1.0)
    sync_hrv = 1.0 - clamp(manual_input.stress / 10.0, 0.0, 1.0)

    fear_base    = 1.0 - (sync_eeg + sync_hrv) / 2.0
    fear_density = fear_base * (1.0 - baseline_q)

    q_score = clamp(sync_eeg * sync_hrv * (1.0 - fear_density), 0.0, 1.0)

    return ScoreResult(
        q_score=q_score,
        fear_density=fear_density,
        sync_eeg=sync_eeg,
        sync_hrv=sync_hrv,
    )


def clamp(value: float, lo: float, hi: float) -> float:
    return max(lo, min(hi, value))
