"""
Q-state taxonomy.

Two small vocabularies describe engine output:
  - ``QState``             — three-way band of a Q score against the user's
                             tank / ocean thresholds.
  - ``BiasInterpretation`` — which way the collapse bias tilts the die.

Usage example::

    from observer_q.taxonomy.q_state import QState

    if state is QState.OCEAN:
        ...

This module has NO imports from any other ``observer_q`` package.
"""

from enum import StrEnum


class QState(StrEnum):
    """Qualitative band of a Q score."""

    TANK = "tank"
    """Below the tank threshold; fear density dominates."""

    NEUTRAL = "neutral"
    """Between the tank and ocean thresholds; building poise."""

    OCEAN = "ocean"
    """At or above the ocean threshold."""


class BiasInterpretation(StrEnum):
    """Direction of the collapse-bias tilt on the simulated die."""

    OCEAN_TILT = "Ocean Tilt (+)"
    """Collapse bias strictly above 1.0."""

    TANK_DRAG = "Tank Drag (-)"
    """Collapse bias at or below 1.0 (1.0 itself is neutral but reported here)."""
