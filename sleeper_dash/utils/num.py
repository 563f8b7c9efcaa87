import math


def to_float(value: float | None, default: float = 0.0) -> float:
    """Convert Optional[float] to float safely."""
    try:
        return float(value) if value is not None else default
    except (TypeError, ValueError):
        return default


def is_finite(value: float | None) -> bool:
    """True for real numbers only: None, NaN and +/-inf are rejected."""
    if value is None or isinstance(value, bool):
        return False
    try:
        return math.isfinite(value)
    except TypeError:
        return False


def round_half_up(value: float, places: int = 0) -> float:
    """
    Round to `places` decimals with halves going up (2.5 -> 3, -2.5 -> -2).
    Python's round() is banker's rounding, which would turn 0.25 into 0.2.
    """
    factor = 10**places
    return math.floor(value * factor + 0.5) / factor
