"""
Engine error conditions.

The engine is total for in-domain inputs; these are the only two ways a
call can fail, and both are raised synchronously to the caller.
"""

from __future__ import annotations


class InvalidArgumentError(ValueError):
    """Raised when an argument makes the requested computation undefined.

    Example: a non-positive trial count for Monte-Carlo sampling, or an
    empty measurement list for a session summary.
    """


class InvalidDistributionError(ArithmeticError):
    """Raised when face weights cannot be normalised into a distribution.

    Attributes:
        weights: The un-normalised face weights.
        total:   Their sum.
    """

    def __init__(self, weights: list[float], total: float, reason: str) -> None:
        self.weights = list(weights)
        self.total   = total
        super().__init__(
            f"Cannot normalise face weights {self.weights} (sum={total!r}): {reason}."
        )
