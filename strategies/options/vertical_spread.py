from __future__ import annotations

from config.settings import AnalysisConfig
from options_pricing.legs import LegSet
from strategies.base import StrategyPattern
from strategies.options.base_options import count_token, same_strike
from strategies.registry import register


@register
class VerticalSpreadPattern(StrategyPattern):
    """
    Two same-type legs at different strikes, opposite signs, equal size.
    Long lower strike is the debit spread, short lower strike the credit spread.
    """
    name = "vertical_spread"
    leg_count = 2

    def matches(self, legs: LegSet, config: AnalysisConfig) -> bool:
        low, high = legs
        if low.option_type is not high.option_type:
            return False
        if same_strike(low.strike, high.strike, config.strike_tolerance):
            return False
        return low.quantity == -high.quantity

    def label(self, legs: LegSet) -> str:
        low = legs[0]
        kind = low.option_type.value
        size = count_token(low.quantity)
        if low.is_long:
            return f"Long {size}{kind} Vertical Spread (Debit Spread)"
        return f"Short {size}{kind} Vertical Spread (Credit Spread)"
