"""Small numeric helpers shared by the scoring modules."""

from __future__ import annotations

import math
from collections.abc import Iterable
from datetime import date, datetime


def clamp(value: float, lo: float = 0.0, hi: float = 1.0) -> float:
    """Clamp a value to [lo, hi]."""
    return max(lo, min(hi, value))


def round_half_away(value: float) -> int:
    """Round to the nearest integer, ties away from zero (2.5 -> 3, -2.5 -> -3).

    Python's ``round`` uses banker's rounding, which would turn e.g. a
    half-week window into zero expected occurrences.
    """
    return int(math.copysign(math.floor(abs(value) + 0.5), value))


def mean(values: Iterable[float]) -> float | None:
    """Arithmetic mean, or None for an empty input."""
    items = list(values)
    if not items:
        return None
    return sum(items) / len(items)


def same_day(a: datetime | date, b: datetime | date) -> bool:
    """True when both values fall on the same calendar day."""
    return (a.year, a.month, a.day) == (b.year, b.month, b.day)


def is_number(value: object) -> bool:
    """True for int/float check-in values (bool is excluded)."""
    return isinstance(value, (int, float)) and not isinstance(value, bool)
