"""
Session-level value models.

``IntervalMeasurement`` mirrors the measurement record the storage layer
persists for every interval.  The engine only builds and reads these records;
it never stores them.

``SessionPlan`` describes the timing of a calibration session (how many
intervals it has), ``SessionSummary`` is the roll-up written when a session
completes, and ``HistoryStats`` is the across-session overview.
"""

from __future__ import annotations

from datetime import datetime
from typing import Optional

from pydantic import BaseModel, ConfigDict, field_validator, model_validator

from observer_q.taxonomy.q_state import QState


class IntervalMeasurement(BaseModel):
    """One persisted interval of a calibration session.

    Attributes:
        measurement_id: Storage-assigned identifier; ``None`` before insertion.
        session_id: Identifier of the owning session.
        interval_number: 1-based interval index within the session.
        q_score: Q score computed for the interval.
        fear_density: Fear density computed for the interval.
        mood_input: Raw mood the user entered.
        stress_input: Raw stress the user entered.
        collapse_bias: Theoretical collapse bias for ``q_score``.
        mean_dice: Monte-Carlo mean face value.
        recommendation: Guidance text shown to the user.
        measured_at: UTC timestamp of the interval, or ``None`` if unknown.
    """

    model_config = ConfigDict(frozen=True)

    measurement_id: Optional[str] = None
    session_id: str
    interval_number: int
    q_score: float
    fear_density: float
    mood_input: float
    stress_input: float
    collapse_bias: float
    mean_dice: float
    recommendation: str
    measured_at: Optional[datetime] = None

    @field_validator("interval_number")
    @classmethod
    def validate_interval_number(cls, v: int) -> int:
        if v < 1:
            raise ValueError(f"interval_number must be >= 1, got {v}.")
        return v

    @field_validator("recommendation")
    @classmethod
    def validate_recommendation_not_empty(cls, v: str) -> str:
        if not v or not v.strip():
            raise ValueError("recommendation must not be empty.")
        return v.strip()


class SessionPlan(BaseModel):
    """Timing of a calibration session.

    The defaults give a 5-minute session prompted every 30 seconds, i.e.
    10 intervals.
    """

    model_config = ConfigDict(frozen=True)

    duration_minutes: int = 5
    interval_seconds: int = 30

    @model_validator(mode="after")
    def validate_timing(self) -> "SessionPlan":
        if self.duration_minutes < 1:
            raise ValueError(f"duration_minutes must be >= 1, got {self.duration_minutes}.")
        if self.interval_seconds < 1:
            raise ValueError(f"interval_seconds must be >= 1, got {self.interval_seconds}.")
        if self.interval_seconds > self.duration_minutes * 60:
            raise ValueError("interval_seconds must not exceed the session duration.")
        return self

    @property
    def total_intervals(self) -> int:
        return (self.duration_minutes * 60) // self.interval_seconds

    def is_final_interval(self, interval_number: int) -> bool:
        """True once ``interval_number`` reaches the planned interval count."""
        return interval_number >= self.total_intervals


class SessionSummary(BaseModel):
    """Roll-up of a completed session.

    Attributes:
        session_id: Identifier of the summarised session.
        n_intervals: Number of measurements summarised.
        baseline_q: Baseline Q the session started from.
        final_q: Q score of the last interval.
        q_improvement: ``final_q - baseline_q`` (negative if Q fell).
        avg_q: Mean Q score across all intervals.
        avg_collapse_bias: Mean collapse bias across all intervals.
        avg_mean_dice: Mean of the per-interval Monte-Carlo means.
        final_state: Band of ``final_q``.
    """

    model_config = ConfigDict(frozen=True, allow_inf_nan=False)

    session_id: str
    n_intervals: int
    baseline_q: float
    final_q: float
    q_improvement: float
    avg_q: float
    avg_collapse_bias: float
    avg_mean_dice: float
    final_state: QState


class HistoryStats(BaseModel):
    """Across-session overview for the dashboard header.

    ``average_final_q`` and ``best_final_q`` fall back to the user's
    baseline Q when no session has completed yet.
    """

    model_config = ConfigDict(frozen=True)

    n_sessions: int
    n_completed: int
    average_final_q: float
    best_final_q: float
