from __future__ import annotations

import uuid
import warnings
from dataclasses import dataclass, field
from datetime import date
from typing import Any, Mapping, Sequence

from config.settings import AnalysisConfig, settings
from options_pricing.legs import AmbiguousInputWarning, LegSet, ValidationError, validate_legs
from options_pricing.payoff import (
    PayoffCurve,
    compute_payoff_curve,
    find_breakevens,
    net_premium,
    payoff_at_price,
    payoff_extremes,
)
from strategies.base import StrategyLabel
from strategies.classifier import identify_strategy
from utils.logger import get_logger, log_timed, set_analysis_id

logger = get_logger(__name__)


@dataclass
class PositionAnalysis:
    legs: LegSet
    label: StrategyLabel
    curve: PayoffCurve
    breakevens: tuple[float, ...]
    underlying: str
    expiry: date
    net_premium: float
    max_profit: float
    max_profit_price: float
    max_loss: float
    max_loss_price: float
    current_price: float | None = None
    payoff_at_current: float | None = None
    warnings: list[str] = field(default_factory=list)

    @property
    def strategy_name(self) -> str:
        return self.label.name


def _mixed_context_message(legs: LegSet) -> str:
    parts = []
    if len(legs.underlyings) > 1:
        parts.append(f"underlyings {legs.underlyings}")
    if len(legs.expiries) > 1:
        parts.append(f"expiries {[d.isoformat() for d in legs.expiries]}")
    return "Legs span multiple " + " and ".join(parts)


@log_timed
def _validate(records, quantities) -> LegSet:
    try:
        return validate_legs(records, quantities)
    except ValidationError as exc:
        logger.warning(
            "Leg validation failed",
            extra={"extra_data": {"issues": len(exc.errors)}},
        )
        raise


def analyze_position(
    records: Sequence[Mapping[str, Any]],
    quantities: Sequence[Any] | None,
    current_price: float | None = None,
    config: AnalysisConfig | None = None,
) -> PositionAnalysis:
    """
    Validate the legs, name the strategy and build the expiry payoff picture.

    Raises ValidationError before anything is computed if the input is bad.
    Mixed underlyings/expiries only produce an AmbiguousInputWarning; the
    payoff is still computed using the first leg's underlying and expiry.
    """
    config = config or settings.analysis
    set_analysis_id(uuid.uuid4().hex[:8])

    legs = _validate(records, quantities)
    notes: list[str] = []

    if not legs.is_homogeneous:
        message = _mixed_context_message(legs)
        notes.append(message)
        logger.warning(message)
        warnings.warn(message, AmbiguousInputWarning, stacklevel=2)

    label = identify_strategy(legs, config)
    curve = compute_payoff_curve(legs, current_price, config)
    breakevens = find_breakevens(curve, config)
    extremes = payoff_extremes(curve)

    known_price = current_price if current_price is not None and current_price > 0 else None
    analysis = PositionAnalysis(
        legs=legs,
        label=label,
        curve=curve,
        breakevens=breakevens,
        underlying=legs.underlying,
        expiry=legs.expiry,
        net_premium=net_premium(legs),
        max_profit=extremes.max_profit,
        max_profit_price=extremes.max_profit_price,
        max_loss=extremes.max_loss,
        max_loss_price=extremes.max_loss_price,
        current_price=known_price,
        payoff_at_current=payoff_at_price(legs, known_price) if known_price is not None else None,
        warnings=notes,
    )
    logger.info(
        "Position analyzed",
        extra={"extra_data": {
            "strategy": label.name,
            "legs": len(legs),
            "breakevens": len(breakevens),
        }},
    )
    return analysis
