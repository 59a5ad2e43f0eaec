from __future__ import annotations

from options_pricing.legs import Leg


def direction(leg: Leg) -> str:
    return "Long" if leg.is_long else "Short"


def count_token(quantity: float) -> str:
    """'' for one contract, otherwise the magnitude followed by a space ('2 ', '1.5 ')."""
    size = abs(quantity)
    if size == 1:
        return ""
    return f"{size:g} "


def same_strike(a: float, b: float, tolerance: float) -> bool:
    return abs(a - b) <= tolerance


def unit_pair(legs: list[Leg]) -> str | None:
    """'Long' for quantities (+1, +1), 'Short' for (-1, -1), else None."""
    quantities = [leg.quantity for leg in legs]
    if quantities == [1, 1]:
        return "Long"
    if quantities == [-1, -1]:
        return "Short"
    return None
