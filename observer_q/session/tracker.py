"""
Session bookkeeping: measurement records, session roll-ups and trend series.

These helpers operate on lists the caller already holds (typically fetched
from storage).  Nothing here reads or writes storage itself.

Usage flow
----------
1. build_measurement(session_id, evaluation)
   -> IntervalMeasurement  (ready for the storage layer to insert)

2. summarize_session(session_id, baseline_q, measurements, settings)
   -> SessionSummary  (final Q, improvement over baseline, averages)

3. history_stats(final_qs, baseline_q)
   -> HistoryStats  (average / best final Q across sessions)

4. q_trend(measurements) / bias_trend(measurements)
   -> per-interval tuples for charting, ordered by interval number
"""

from __future__ import annotations

import logging
import math
from datetime import datetime, timezone
from typing import Optional, Sequence

from observer_q.engine.classifier import classify
from observer_q.engine.exceptions import InvalidArgumentError
from observer_q.models.engine import IntervalEvaluation
from observer_q.models.session import HistoryStats, IntervalMeasurement, SessionSummary
from observer_q.models.settings import CalibrationSettings

logger = logging.getLogger(__name__)


def build_measurement(
    session_id:  str,
    evaluation:  IntervalEvaluation,
    measured_at: Optional[datetime] = None,
) -> IntervalMeasurement:
    """Flatten an ``IntervalEvaluation`` into a measurement record.

    Args:
        session_id:  Identifier of the owning session.
        evaluation:  Engine output for the interval.
        measured_at: Timestamp to record; defaults to now (UTC).
    """
    return IntervalMeasurement(
        session_id=session_id,
        interval_number=evaluation.interval_number,
        q_score=evaluation.score.q_score,
        fear_density=evaluation.score.fear_density,
        mood_input=evaluation.manual_input.mood,
        stress_input=evaluation.manual_input.stress,
        collapse_bias=evaluation.bias.theoretical_bias,
        mean_dice=evaluation.bias.mean_dice,
        recommendation=evaluation.recommendation,
        measured_at=measured_at or datetime.now(timezone.utc),
    )


def summarize_session(
    session_id:   str,
    baseline_q:   float,
    measurements: Sequence[IntervalMeasurement],
    settings:     CalibrationSettings,
) -> SessionSummary:
    """Roll up a session's measurements.

    ``final_q`` is the Q score of the highest-numbered interval; all averages
    cover every interval, including the last one.

    Raises:
        InvalidArgumentError: If ``measurements`` is empty or
            ``baseline_q`` is not finite.
    """
    if not math.isfinite(baseline_q):
        raise InvalidArgumentError(f"baseline_q must be finite, got {baseline_q}.")
    if not measurements:
        raise InvalidArgumentError(f"Session '{session_id}' has no measurements to summarise.")

    ordered = _ordered(measurements)
    n       = len(ordered)
    final_q = ordered[-1].q_score

    summary = SessionSummary(
        session_id=session_id,
        n_intervals=n,
        baseline_q=baseline_q,
        final_q=final_q,
        q_improvement=final_q - baseline_q,
        avg_q=sum(m.q_score for m in ordered) / n,
        avg_collapse_bias=sum(m.collapse_bias for m in ordered) / n,
        avg_mean_dice=sum(m.mean_dice for m in ordered) / n,
        final_state=classify(final_q, settings.tank_threshold, settings.ocean_threshold),
    )
    logger.info(
        "Session %s summarised: %d intervals, final_q=%.4f (%+.4f vs baseline)",
        session_id, n, final_q, summary.q_improvement,
    )
    return summary


def history_stats(
    final_qs:   Sequence[Optional[float]],
    baseline_q: float,
) -> HistoryStats:
    """Average and best final Q across sessions.

    Args:
        final_qs:   One entry per session; ``None`` marks an incomplete session.
        baseline_q: Fallback when no session has completed.
    """
    completed = [q for q in final_qs if q is not None]
    if not completed:
        return HistoryStats(
            n_sessions=len(final_qs),
            n_completed=0,
            average_final_q=baseline_q,
            best_final_q=baseline_q,
        )
    return HistoryStats(
        n_sessions=len(final_qs),
        n_completed=len(completed),
        average_final_q=sum(completed) / len(completed),
        best_final_q=max(completed),
    )


def q_trend(measurements: Sequence[IntervalMeasurement]) -> list[tuple[int, float, float]]:
    """``(interval_number, q_score, fear_density)`` per interval."""
    return [(m.interval_number, m.q_score, m.fear_density) for m in _ordered(measurements)]


def bias_trend(measurements: Sequence[IntervalMeasurement]) -> list[tuple[int, float, float]]:
    """``(interval_number, collapse_bias, mean_dice)`` per interval."""
    return [(m.interval_number, m.collapse_bias, m.mean_dice) for m in _ordered(measurements)]


def _ordered(measurements: Sequence[IntervalMeasurement]) -> list[IntervalMeasurement]:
    return sorted(measurements, key=lambda m: m.interval_number)
