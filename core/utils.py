"""Utility functions for latin-quest."""


def clamp(n: float, low: float, high: float) -> float:
    """Limit n to the closed range [low, high]."""
    return max(low, min(high, n))
