"""Division and rounding helpers shared by every derivation.

No derived value may be NaN or infinite, so every ratio in the engine goes
through ``safe_divide``.
"""

import math


def safe_divide(numerator: float, denominator: float, default: float = 0.0) -> float:
    """Divide, returning ``default`` when the denominator is zero or the result is not finite."""
    if denominator == 0:
        return default
    result = numerator / denominator
    if not math.isfinite(result):
        return default
    return result


def round_half_up(value: float) -> int:
    """Round to the nearest integer with halves rounded up (62.5 -> 63)."""
    return int(math.floor(value + 0.5))
