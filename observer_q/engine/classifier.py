"""
Recommendation classifier: Q score → tank / neutral / ocean + guidance text.

Bands (strict ``<`` comparisons; a boundary value belongs to the higher band)::

    q <  tank_threshold                   -> TANK
    tank_threshold <= q < ocean_threshold -> NEUTRAL
    q >= ocean_threshold                  -> OCEAN

Threshold ordering is not checked here; ``CalibrationSettings`` validates
it when settings are loaded.
"""

from __future__ import annotations

from observer_q.taxonomy.q_state import QState

RECOMMENDATIONS: dict[QState, str] = {
    QState.TANK:    "TANK: High fear density. Practice: Deep breathing, release disagreement.",
    QState.NEUTRAL: "NEUTRAL: Building poise. Focus: Gratitude, unity consciousness meditation.",
    QState.OCEAN:   "OCEAN: High Q achieved! Maintain: Loving awareness, symbiotic mindset.",
}

STATE_LABELS: dict[QState, str] = {
    QState.TANK:    "TANK: High Fear Density",
    QState.NEUTRAL: "NEUTRAL: Building Poise",
    QState.OCEAN:   "OCEAN: High Q Achieved",
}


def classify(q_score: float, tank_threshold: float, ocean_threshold: float) -> QState:
    """Band a Q score against the tank / ocean thresholds."""
    if q_score < tank_threshold:
        return QState.TANK
    if q_score < ocean_threshold:
        return QState.NEUTRAL
    return QState.OCEAN


def recommend(q_score: float, tank_threshold: float, ocean_threshold: float) -> str:
    """Return the guidance string for the band ``q_score`` falls in."""
    return RECOMMENDATIONS[classify(q_score, tank_threshold, ocean_threshold)]


def state_label(state: QState) -> str:
    """Short banner text for a state, e.g. ``"OCEAN: High Q Achieved"``."""
    return STATE_LABELS[state]
