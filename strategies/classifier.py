from __future__ import annotations

# Import all patterns to trigger registration; import order is catalog order
import strategies.options.single  # noqa: F401
import strategies.options.straddle  # noqa: F401
import strategies.options.strangle  # noqa: F401
import strategies.options.vertical_spread  # noqa: F401
import strategies.options.butterfly  # noqa: F401

from config.settings import AnalysisConfig, settings
from options_pricing.legs import LegSet
from strategies.base import CUSTOM_PATTERN, MIXED_PATTERN, StrategyLabel
from strategies.registry import patterns_for
from utils.logger import get_logger

logger = get_logger(__name__)

MAX_CLASSIFIED_LEGS = 3
MIXED_LABEL = "Unclassifiable: mixed underlying/expiry"
CUSTOM_LABEL = "Custom Strategy"


def identify_strategy(legs: LegSet, config: AnalysisConfig | None = None) -> StrategyLabel:
    """Name the strategy a LegSet forms. Always returns a label, never raises."""
    config = config or settings.analysis

    if not legs.is_homogeneous:
        return StrategyLabel(MIXED_LABEL, MIXED_PATTERN)

    if len(legs) > MAX_CLASSIFIED_LEGS:
        return StrategyLabel(f"{CUSTOM_LABEL} ({len(legs)} legs)", CUSTOM_PATTERN)

    for pattern in patterns_for(len(legs)):
        if pattern.matches(legs, config):
            label = StrategyLabel(pattern.label(legs), pattern.name)
            logger.debug(
                "Strategy matched",
                extra={"extra_data": {"pattern": pattern.name, "label": label.name}},
            )
            return label

    return StrategyLabel(CUSTOM_LABEL, CUSTOM_PATTERN)
