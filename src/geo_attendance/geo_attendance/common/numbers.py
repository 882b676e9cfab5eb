from __future__ import annotations

import math


def round_half_up(value: float, ndigits: int = 0) -> float:
    """Round .5 away from zero for positives (``round()`` uses banker's rounding)."""
    factor = 10 ** ndigits
    return math.floor(value * factor + 0.5) / factor


def round_int(value: float) -> int:
    return int(round_half_up(value))
