from __future__ import annotations

from dataclasses import dataclass

import numpy as np
import pandas as pd

from config.settings import AnalysisConfig, settings
from options_pricing.legs import LegSet, OptionType


@dataclass(frozen=True, eq=False)
class PayoffCurve:
    """Expiry P&L sampled at evenly spaced underlying prices. Arrays are read-only."""

    prices: np.ndarray
    payoffs: np.ndarray

    def __post_init__(self):
        for arr in (self.prices, self.payoffs):
            arr.setflags(write=False)

    @property
    def plot_min(self) -> float:
        return float(self.prices[0])

    @property
    def plot_max(self) -> float:
        return float(self.prices[-1])

    def to_frame(self) -> pd.DataFrame:
        return pd.DataFrame({"price": self.prices, "payoff": self.payoffs})


@dataclass(frozen=True)
class PayoffExtremes:
    max_profit: float
    max_profit_price: float
    max_loss: float
    max_loss_price: float


def leg_payoff(prices, strike: float, premium: float, quantity: float, option_type: OptionType):
    """Expiry P&L of one leg. Accepts a scalar price or an array of prices."""
    if option_type is OptionType.CALL:
        intrinsic = np.maximum(np.asarray(prices, dtype=float) - strike, 0.0)
    else:
        intrinsic = np.maximum(strike - np.asarray(prices, dtype=float), 0.0)
    return (intrinsic - premium) * quantity


def aggregate_payoff(legs: LegSet, prices) -> np.ndarray:
    prices = np.asarray(prices, dtype=float)
    total = np.zeros_like(prices, dtype=float)
    for leg in legs:
        total = total + leg_payoff(prices, leg.strike, leg.premium, leg.quantity, leg.option_type)
    return total


def payoff_at_price(legs: LegSet, price: float) -> float:
    return float(aggregate_payoff(legs, price))


def net_premium(legs: LegSet) -> float:
    """Positive for a net credit, negative for a net debit."""
    return float(-sum(leg.premium * leg.quantity for leg in legs))


def select_price_range(
    legs: LegSet,
    current_price: float | None = None,
    config: AnalysisConfig | None = None,
) -> tuple[float, float]:
    """
    Pick [plot_min, plot_max] around the current price (or the mean strike when
    the price is unknown) wide enough that every strike shows with 10% margin.
    """
    config = config or settings.analysis
    strikes = legs.strikes
    if current_price is not None and current_price > 0:
        center = float(current_price)
    else:
        center = float(np.mean(strikes))

    half_width = max(
        center * config.plot_range_fraction,
        1.1 * abs(center - min(strikes)),
        1.1 * abs(max(strikes) - center),
    )
    return max(0.0, center - half_width), center + half_width


def compute_payoff_curve(
    legs: LegSet,
    current_price: float | None = None,
    config: AnalysisConfig | None = None,
) -> PayoffCurve:
    config = config or settings.analysis
    plot_min, plot_max = select_price_range(legs, current_price, config)
    prices = np.linspace(plot_min, plot_max, config.sample_count)
    return PayoffCurve(prices=prices, payoffs=aggregate_payoff(legs, prices))


def find_breakevens(curve: PayoffCurve, config: AnalysisConfig | None = None) -> tuple[float, ...]:
    """
    Prices where the sampled payoff touches or crosses zero.

    Near-zero samples count directly; other roots come from linear
    interpolation across sign changes. Results are rounded, de-duplicated
    and collapsed so no two are closer than the minimum separation.
    """
    config = config or settings.analysis
    eps = config.breakeven_epsilon
    x = curve.prices
    y = curve.payoffs

    on_zero = np.abs(y) < eps
    points: list[float] = [float(p) for p in x[on_zero]]

    signs = np.sign(y)
    for i in range(len(x) - 1):
        if on_zero[i] or on_zero[i + 1] or signs[i] == signs[i + 1]:
            continue
        x1, x2 = float(x[i]), float(x[i + 1])
        y1, y2 = float(y[i]), float(y[i + 1])
        if abs(y2 - y1) < eps:
            continue
        root = x1 + (x2 - x1) * (-y1 / (y2 - y1))
        if min(x1, x2) <= root <= max(x1, x2):
            points.append(root)

    rounded = sorted({round(p, config.breakeven_decimals) for p in points})

    # Gaps are measured in whole units of the last kept decimal; float
    # differences like 0.03 - 0.02 fall just short of 0.01.
    scale = 10 ** config.breakeven_decimals
    min_gap = config.breakeven_min_separation * scale
    collapsed: list[float] = []
    previous = None
    for p in rounded:
        units = round(p * scale)
        if previous is None or units - previous >= min_gap - 1e-9:
            collapsed.append(p)
        previous = units
    return tuple(collapsed)


def payoff_extremes(curve: PayoffCurve) -> PayoffExtremes:
    hi = int(np.argmax(curve.payoffs))
    lo = int(np.argmin(curve.payoffs))
    return PayoffExtremes(
        max_profit=float(curve.payoffs[hi]),
        max_profit_price=float(curve.prices[hi]),
        max_loss=float(curve.payoffs[lo]),
        max_loss_price=float(curve.prices[lo]),
    )
