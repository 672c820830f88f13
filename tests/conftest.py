"""
Shared pytest fixtures for the Observer-Q test suite.

Provides:
  - ``restore_root_logger`` (autouse): root logger handlers and level are
    put back after every test.
  - ``rng``: A seeded ``random.Random`` so Monte-Carlo assertions are
    reproducible.  Created anew for each test that requests it.
  - Sample domain object factories for use in multiple test modules.
"""

from __future__ import annotations

import logging
import random
from datetime import datetime, timezone
from typing import Generator

import pytest

from observer_q.models.engine import ManualInput
from observer_q.models.session import IntervalMeasurement
from observer_q.models.settings import CalibrationSettings

SEED = 20240915


# ── Logging isolation ─────────────────────────────────────────────────────────

@pytest.fixture(autouse=True)
def restore_root_logger() -> Generator[None, None, None]:
    """Undo any ``configure_logging`` call a test (or CLI command) makes."""
    root = logging.getLogger()
    handlers, level = list(root.handlers), root.level
    yield
    for h in root.handlers:
        if h not in handlers:
            h.close()
    root.handlers[:] = handlers
    root.setLevel(level)


# ── Randomness fixture ────────────────────────────────────────────────────────

@pytest.fixture
def rng() -> random.Random:
    """A freshly seeded generator."""
    return random.Random(SEED)


# ── Sample domain object factories ────────────────────────────────────────────

@pytest.fixture
def sample_settings() -> CalibrationSettings:
    """Default calibration settings (k=2.8, tank=0.5, ocean=0.8)."""
    return CalibrationSettings(
        k_symbiosis=2.8,
        k_death=0.0,
        ocean_threshold=0.8,
        tank_threshold=0.5,
    )


@pytest.fixture
def sample_input() -> ManualInput:
    """A mid-range mood / stress report."""
    return ManualInput(mood=7.0, stress=3.0)


def make_measurement(
    interval_number: int,
    q_score: float,
    session_id: str = "session-0001",
    fear_density: float = 0.1,
    collapse_bias: float = 0.6,
    mean_dice: float = 3.3,
) -> IntervalMeasurement:
    return IntervalMeasurement(
        session_id=session_id,
        interval_number=interval_number,
        q_score=q_score,
        fear_density=fear_density,
        mood_input=6.0,
        stress_input=4.0,
        collapse_bias=collapse_bias,
        mean_dice=mean_dice,
        recommendation="NEUTRAL: Building poise. Focus: Gratitude, unity consciousness meditation.",
        measured_at=datetime(2024, 9, 15, 12, 0, interval_number, tzinfo=timezone.utc),
    )


@pytest.fixture
def measurement_factory():
    """The ``make_measurement`` builder, for tests that need custom rows."""
    return make_measurement


@pytest.fixture
def sample_measurements() -> list[IntervalMeasurement]:
    """Three intervals of one session, deliberately out of order."""
    return [
        make_measurement(2, q_score=0.50, collapse_bias=0.40, mean_dice=3.2),
        make_measurement(1, q_score=0.30, collapse_bias=0.20, mean_dice=3.0),
        make_measurement(3, q_score=0.85, collapse_bias=0.90, mean_dice=3.4),
    ]
