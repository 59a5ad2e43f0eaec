from __future__ import annotations

from config.settings import AnalysisConfig
from options_pricing.legs import LegSet
from strategies.base import StrategyPattern
from strategies.options.base_options import count_token, direction
from strategies.registry import register


@register
class SingleOptionPattern(StrategyPattern):
    """A lone long or short call or put, e.g. 'Long Call', 'Short 2 Put'."""
    name = "single_option"
    leg_count = 1

    def matches(self, legs: LegSet, config: AnalysisConfig) -> bool:
        return True

    def label(self, legs: LegSet) -> str:
        leg = legs[0]
        return f"{direction(leg)} {count_token(leg.quantity)}{leg.option_type.value}"
