"""Scoring helpers shared by the phase evaluators and the report."""

import math


def round_half_up(x: float) -> int:
    """Round .5 away from zero for non-negative scores (17.5 -> 18), unlike round()."""
    return int(math.floor(x + 0.5))


def clamp(x: float, lo: float, hi: float) -> float:
    return max(lo, min(hi, x))


def clamp_int(x: int, lo: int, hi: int) -> int:
    return int(max(lo, min(hi, x)))
