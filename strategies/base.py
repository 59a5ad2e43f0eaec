from __future__ import annotations

from abc import ABC, abstractmethod
from dataclasses import dataclass

from config.settings import AnalysisConfig
from options_pricing.legs import LegSet

CUSTOM_PATTERN = "custom"
MIXED_PATTERN = "mixed"


@dataclass(frozen=True)
class StrategyLabel:
    name: str
    pattern: str = CUSTOM_PATTERN

    @property
    def is_custom(self) -> bool:
        return self.pattern in (CUSTOM_PATTERN, MIXED_PATTERN)

    def __str__(self) -> str:
        return self.name


class StrategyPattern(ABC):
    """
    One entry of the strategy catalog: a predicate over a strike-sorted LegSet
    of exactly ``leg_count`` legs, and a label builder for when it matches.
    Patterns are pure: they never look at prices or mutate the legs.
    """

    name: str = "base"
    leg_count: int = 0

    @abstractmethod
    def matches(self, legs: LegSet, config: AnalysisConfig) -> bool:
        ...

    @abstractmethod
    def label(self, legs: LegSet) -> str:
        ...

    def describe(self) -> str:
        doc = (self.__doc__ or "").strip()
        return doc.splitlines()[0] if doc else ""
