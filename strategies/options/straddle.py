from __future__ import annotations

from config.settings import AnalysisConfig
from options_pricing.legs import LegSet
from strategies.base import StrategyPattern
from strategies.options.base_options import same_strike, unit_pair
from strategies.registry import register


@register
class StraddlePattern(StrategyPattern):
    """Call + put at the same strike, one contract each, both long or both short."""
    name = "straddle"
    leg_count = 2

    def matches(self, legs: LegSet, config: AnalysisConfig) -> bool:
        low, high = legs
        if low.option_type is high.option_type:
            return False
        if not same_strike(low.strike, high.strike, config.strike_tolerance):
            return False
        # Ratio straddles stay unclassified
        return unit_pair([low, high]) is not None

    def label(self, legs: LegSet) -> str:
        return f"{unit_pair(list(legs))} Straddle"
