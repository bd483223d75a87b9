from __future__ import annotations

import math


def round_half_up(value: float) -> int:
    """Round .5 away from zero for non-negative scores (2/3 -> 67, 87.5 -> 88)."""
    return int(math.floor(value + 0.5))


def clamp_score(value: float | int | None, low: float = 0.0, high: float = 100.0) -> float:
    if value is None:
        return low
    if isinstance(value, float) and math.isnan(value):
        return low
    return max(low, min(high, float(value)))


def clamp_int_score(value: float | int | None) -> int:
    return round_half_up(clamp_score(value))


def round2(value: float) -> float:
    return round_half_up(value * 100) / 100
