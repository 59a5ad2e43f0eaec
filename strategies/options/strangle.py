from __future__ import annotations

from config.settings import AnalysisConfig
from options_pricing.legs import LegSet, OptionType
from strategies.base import StrategyPattern
from strategies.options.base_options import same_strike, unit_pair
from strategies.registry import register


@register
class StranglePattern(StrategyPattern):
    """Lower-strike put + higher-strike call, one contract each, both long or both short."""
    name = "strangle"
    leg_count = 2

    def matches(self, legs: LegSet, config: AnalysisConfig) -> bool:
        low, high = legs
        if same_strike(low.strike, high.strike, config.strike_tolerance):
            return False
        if low.option_type is not OptionType.PUT or high.option_type is not OptionType.CALL:
            return False
        return unit_pair([low, high]) is not None

    def label(self, legs: LegSet) -> str:
        return f"{unit_pair(list(legs))} Strangle"
