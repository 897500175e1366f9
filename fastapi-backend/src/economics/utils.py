# src/economics/utils.py
from __future__ import annotations

from decimal import ROUND_HALF_UP, Decimal
from typing import Union

Number = Union[int, float]


def round_half_up(value: float, places: int = 0) -> Number:
    """Round like a dashboard would: .5 always goes up, never to even."""
    exponent = Decimal(1).scaleb(-places)
    rounded = Decimal(repr(float(value))).quantize(exponent, rounding=ROUND_HALF_UP)
    return int(rounded) if places == 0 else float(rounded)


def percentage(part: int, whole: int) -> Number:
    """Percentage with one decimal, or literal 0 when there is nothing to divide by."""
    if whole <= 0:
        return 0
    return round_half_up(100 * part / whole, 1)
