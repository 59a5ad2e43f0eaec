from datetime import date

import pytest

from analysis.position_analyzer import analyze_position
from config.settings import AnalysisConfig
from options_pricing.legs import AmbiguousInputWarning, ValidationError
from tests.leg_factory import leg_records


def test_butterfly_end_to_end():
    records, qtys = leg_records((110, "C", 1, 1), (100, "C", 5, -2), (90, "C", 12, 1))
    result = analyze_position(records, qtys, current_price=100)

    assert result.strategy_name == "Long Call Butterfly"
    assert result.breakevens == (93.0, 107.0)
    assert result.payoff_at_current == pytest.approx(7.0)
    assert result.current_price == 100
    assert result.net_premium == pytest.approx(-3)
    assert result.max_loss == pytest.approx(-3)
    assert result.underlying == "SPX"
    assert result.expiry == date(2024, 6, 21)
    assert result.warnings == []


def test_unknown_current_price():
    records, qtys = leg_records((90, "C", 8, -1), (100, "C", 3, 1))
    result = analyze_position(records, qtys)
    assert result.current_price is None
    assert result.payoff_at_current is None
    assert result.breakevens == (95.0,)


def test_config_is_passed_through():
    records, qtys = leg_records((100, "C", 5, 1), (100, "P", 4, 1))
    result = analyze_position(records, qtys, config=AnalysisConfig(sample_count=50))
    assert len(result.curve.prices) == 50


def test_validation_failure_stops_pipeline():
    records, qtys = leg_records((100, "C", 5, 1), (100, "P", 4, 1))
    records[1]["option_type"] = "straddle"
    with pytest.raises(ValidationError, match="leg 1: option_type"):
        analyze_position(records, qtys)


def test_mixed_underlying_still_computes_payoff():
    records, qtys = leg_records((100, "C", 5, 1), (100, "P", 4, 1))
    records[0]["underlying"] = "NDX"
    with pytest.warns(AmbiguousInputWarning, match=r"underlyings \['NDX', 'SPX'\]"):
        result = analyze_position(records, qtys, current_price=100)

    assert result.label.pattern == "mixed"
    assert result.underlying == "NDX"
    assert result.breakevens == (91.0, 109.0)
    assert len(result.warnings) == 1


def test_mixed_expiry_warning_names_dates():
    records, qtys = leg_records((90, "C", 8, -1), (100, "C", 3, 1))
    records[1]["expiry"] = "2024-07-19"
    with pytest.warns(AmbiguousInputWarning, match="2024-06-21.*2024-07-19"):
        result = analyze_position(records, qtys)
    assert result.expiry == date(2024, 6, 21)
    assert "expiries" in result.warnings[0]
