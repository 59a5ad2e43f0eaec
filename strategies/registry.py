from __future__ import annotations

from strategies.base import StrategyPattern

# Evaluated top-to-bottom; registration order is catalog order.
_CATALOG: list[StrategyPattern] = []


def register(cls: type[StrategyPattern]) -> type[StrategyPattern]:
    if any(p.name == cls.name for p in _CATALOG):
        raise ValueError(f"Strategy pattern already registered: {cls.name}")
    _CATALOG.append(cls())
    return cls


def patterns_for(leg_count: int) -> list[StrategyPattern]:
    return [p for p in _CATALOG if p.leg_count == leg_count]


def list_patterns() -> list[StrategyPattern]:
    return list(_CATALOG)
