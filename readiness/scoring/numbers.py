"""Rounding and clamping helpers shared by the scorers."""

import math

TRUTHY_STRINGS = frozenset({"true", "yes", "y", "1", "on"})


def round_half_up(value: float, digits: int = 0) -> float:
    """Round halves away from zero for positive values (2.5 -> 3, not 2)."""
    factor = 10**digits
    return math.floor(value * factor + 0.5) / factor


def clamp_pct(value: float) -> int:
    """Round to an integer percentage within [0, 100]."""
    return max(0, min(100, int(round_half_up(value))))


def round1(value: float) -> float:
    return round_half_up(value, 1)


def as_number(value: object) -> float | None:
    """Coerce a number or numeric string to float; None for anything else."""
    if value is None or isinstance(value, bool):
        return None
    if isinstance(value, (int, float)):
        number = float(value)
    elif isinstance(value, str):
        if not value.strip():
            return None
        try:
            number = float(value)
        except ValueError:
            return None
    else:
        return None
    if math.isnan(number) or math.isinf(number):
        return None
    return number


def is_truthy(value: object) -> bool:
    """Interpret a questionnaire answer as satisfied or not."""
    if isinstance(value, bool):
        return value
    if isinstance(value, (int, float)):
        return value != 0
    if isinstance(value, str):
        return value.strip().lower() in TRUTHY_STRINGS
    return False
