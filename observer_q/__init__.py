"""Observer-Q: Q-score and collapse-bias computation engine."""

__version__ = "0.1.0"
