"""
Bias engine: Q score → tilted 6-face die + Monte-Carlo statistics.

Pipeline
--------
1. Raw bias      psi = q * (1 + k_symbiosis * ln(q + 1e-6))
                 The 1e-6 offset keeps ln() finite at q = 0.
2. Clamp         b = clamp(psi, 0, 2); 1.0 is a fair die.
3. Face weights  b > 1  : every face 1 - b, faces 4–6 add (b - 1) / 3
                 b <= 1 : every face 2 - b, faces 1–3 add (1 - b) / 3
4. Normalise     divide by the weight sum (see policy below).
5. Sample        inverse-CDF over faces 1..6, first face with cumulative >= u.
6. Statistics    mean face value and fraction of faces >= 4.

Weight quirk (b > 1)
--------------------
The b > 1 branch starts every face at ``1 - b``, which is negative, and the
high-face bonus only partly offsets it.  The weight sum is ``5 * (1 - b)``,
also negative, so normalisation still yields a proper distribution:
faces 1–3 get 0.2 and faces 4–6 get 2/15.  This arithmetic is kept exactly;
note that it leans toward the LOW faces even though the label says
"Ocean Tilt".

Normalisation policy
--------------------
``normalize_weights`` raises ``InvalidDistributionError`` when the sum is
zero or non-finite, or when any resulting probability falls outside [0, 1].
A negative sum whose weights all share its sign passes (the b > 1 case).

Randomness
----------
Sampling never touches the module-level ``random`` state.  Pass an explicit
``random.Random`` (or a ``seed``) for reproducible results; each call
otherwise gets its own unseeded generator.
"""

from __future__ import annotations

import logging
import math
import random
from typing import Optional, Sequence

from observer_q.engine.exceptions import InvalidArgumentError, InvalidDistributionError
from observer_q.engine.score import clamp
from observer_q.models.engine import N_FACES, BiasResult
from observer_q.taxonomy.q_state import BiasInterpretation

logger = logging.getLogger(__name__)

LOG_EPSILON      = 1e-6
MAX_BIAS         = 2.0
NEUTRAL_BIAS     = 1.0
DEFAULT_N_TRIALS = 1000
FAVORABLE_FACE   = 4     # faces >= this count as favorable


def raw_collapse_bias(q_current: float, k_symbiosis: float) -> float:
    """Unclamped bias ``q * (1 + k * ln(q + eps))``.

    Raises:
        InvalidArgumentError: If ``q_current`` is non-finite or so negative
            that the logarithm is undefined, or ``k_symbiosis`` is non-finite.
    """
    if not math.isfinite(k_symbiosis):
        raise InvalidArgumentError(f"k_symbiosis must be finite, got {k_symbiosis}.")
    if not math.isfinite(q_current) or q_current + LOG_EPSILON <= 0.0:
        raise InvalidArgumentError(f"q_current must be finite and > -{LOG_EPSILON}, got {q_current}.")
    return q_current * (1.0 + k_symbiosis * math.log(q_current + LOG_EPSILON))


def collapse_bias(q_current: float, k_symbiosis: float) -> float:
    """Collapse bias clamped to [0, 2]."""
    return clamp(raw_collapse_bias(q_current, k_symbiosis), 0.0, MAX_BIAS)


def face_weights(bias: float) -> list[float]:
    """Un-normalised weights for faces 1..6 at the given collapse bias."""
    if bias > NEUTRAL_BIAS:
        weights = [1.0 - bias] * N_FACES
        for i in range(3, N_FACES):
            weights[i] += (bias - NEUTRAL_BIAS) / 3.0
    else:
        weights = [1.0 + (1.0 - bias)] * N_FACES
        for i in range(0, 3):
            weights[i] += (1.0 - bias) / 3.0
    return weights


def normalize_weights(weights: Sequence[float]) -> list[float]:
    """Divide every weight by the total.

    Raises:
        InvalidDistributionError: If the total is zero or non-finite, or any
            resulting probability is outside [0, 1].
    """
    total = sum(weights)
    if total == 0.0 or not math.isfinite(total):
        raise InvalidDistributionError(list(weights), total, "weight sum is zero or non-finite")

    probabilities = [w / total for w in weights]
    if any(not (0.0 <= p <= 1.0) for p in probabilities):
        raise InvalidDistributionError(
            list(weights), total, "normalised probabilities fall outside [0, 1]"
        )
    return probabilities


def roll_die(probabilities: Sequence[float], rng: random.Random) -> int:
    """Draw a single face (1..6) by inverse-CDF lookup."""
    u = rng.random()
    cumulative = 0.0
    for face, p in enumerate(probabilities, start=1):
        cumulative += p
        if u <= cumulative:
            return face
    # Rounding can leave the final cumulative value a hair below u.
    return len(probabilities)


def sample_faces(
    probabilities: Sequence[float],
    n_trials: int,
    rng: random.Random,
) -> list[int]:
    """Draw ``n_trials`` independent faces.

    Raises:
        InvalidArgumentError: If ``n_trials`` is not positive.
    """
    if n_trials <= 0:
        raise InvalidArgumentError(f"n_trials must be positive, got {n_trials}.")
    return [roll_die(probabilities, rng) for _ in range(n_trials)]


def expected_face(probabilities: Sequence[float]) -> float:
    """Theoretical mean face value, ``sum(face * p)``."""
    return sum(face * p for face, p in enumerate(probabilities, start=1))


def compute_collapse_bias(
    q_current:   float,
    k_symbiosis: float,
    n_trials:    int = DEFAULT_N_TRIALS,
    rng:         Optional[random.Random] = None,
    seed:        Optional[int] = None,
) -> BiasResult:
    """Compute the collapse bias for a Q score and evaluate it by sampling.

    Args:
        q_current:   Current Q score, nominally in [0, 1].
        k_symbiosis: The user's symbiosis constant.
        n_trials:    Number of Monte-Carlo die rolls.
        rng:         Generator to draw from.  Takes precedence over ``seed``.
        seed:        Seed for a fresh generator when ``rng`` is not given.

    Returns:
        BiasResult with the clamped bias, normalised probabilities and the
        sampled statistics.

    Raises:
        InvalidArgumentError:     If ``n_trials`` is not positive.
        InvalidDistributionError: If the face weights cannot be normalised.
    """
    if n_trials <= 0:
        raise InvalidArgumentError(f"n_trials must be positive, got {n_trials}.")
    if rng is None:
        rng = random.Random(seed)

    bias          = collapse_bias(q_current, k_symbiosis)
    probabilities = normalize_weights(face_weights(bias))
    outcomes      = sample_faces(probabilities, n_trials, rng)

    mean_dice      = sum(outcomes) / len(outcomes)
    favorable_rate = sum(1 for o in outcomes if o >= FAVORABLE_FACE) / len(outcomes)

    interpretation = (
        BiasInterpretation.OCEAN_TILT if bias > NEUTRAL_BIAS
        else BiasInterpretation.TANK_DRAG
    )

    logger.debug(
        "collapse bias q=%.4f k=%.3f -> bias=%.4f mean_dice=%.3f favorable=%.3f (%d trials)",
        q_current, k_symbiosis, bias, mean_dice, favorable_rate, n_trials,
    )

    return BiasResult(
        theoretical_bias=bias,
        mean_dice=mean_dice,
        favorable_rate=favorable_rate,
        probabilities=tuple(probabilities),
        q_factor=q_current,
        interpretation=interpretation,
        n_trials=n_trials,
    )
