from __future__ import annotations

from config.settings import AnalysisConfig
from options_pricing.legs import LegSet
from strategies.base import StrategyPattern
from strategies.options.base_options import same_strike
from strategies.registry import register

_LONG_RATIO = [1, -2, 1]
_SHORT_RATIO = [-1, 2, -1]


@register
class ButterflyPattern(StrategyPattern):
    """Three same-type legs, equally spaced strikes, sized 1/-2/1 (long) or -1/2/-1 (short)."""
    name = "butterfly"
    leg_count = 3

    def matches(self, legs: LegSet, config: AnalysisConfig) -> bool:
        if len({leg.option_type for leg in legs}) != 1:
            return False

        k1, k2, k3 = legs.strikes
        tol = config.strike_tolerance
        lower_wing = k2 - k1
        upper_wing = k3 - k2
        if lower_wing <= tol or upper_wing <= tol:
            return False
        if not same_strike(lower_wing, upper_wing, tol):
            return False

        quantities = [leg.quantity for leg in legs]
        return quantities in (_LONG_RATIO, _SHORT_RATIO)

    def label(self, legs: LegSet) -> str:
        side = "Long" if legs[0].is_long else "Short"
        return f"{side} {legs[0].option_type.value} Butterfly"
