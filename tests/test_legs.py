from datetime import date, datetime

import pytest

from options_pricing.legs import LegIssue, OptionType, ValidationError, validate_legs
from tests.leg_factory import leg_records, leg_set


def test_legs_sorted_by_strike():
    legs = leg_set((110, "C", 1, 1), (90, "C", 12, 1), (100, "C", 5, -2))
    assert legs.strikes == [90, 100, 110]
    assert [leg.quantity for leg in legs] == [1, -2, 1]


def test_equal_strikes_keep_input_order():
    legs = leg_set((100, "P", 4, 1), (100, "C", 5, 1))
    assert [leg.option_type for leg in legs] == [OptionType.PUT, OptionType.CALL]

    legs = leg_set((100, "C", 5, 1), (100, "P", 4, 1))
    assert [leg.option_type for leg in legs] == [OptionType.CALL, OptionType.PUT]


def test_primary_leg_is_first_in_input_order():
    records, qtys = leg_records((110, "C", 1, 1), (90, "C", 12, 1))
    records[0]["underlying"] = "NDX"
    legs = validate_legs(records, qtys)
    assert legs[0].strike == 90
    assert legs.underlying == "NDX"
    assert legs.expiry == date(2024, 6, 21)


@pytest.mark.parametrize("code,expected", [
    ("C", OptionType.CALL),
    ("call", OptionType.CALL),
    (" CE ", OptionType.CALL),
    ("P", OptionType.PUT),
    ("Put", OptionType.PUT),
    ("pe", OptionType.PUT),
])
def test_option_type_codes(code, expected):
    assert OptionType.parse(code) is expected


@pytest.mark.parametrize("code", ["X", "", None, 1])
def test_unknown_option_type(code):
    with pytest.raises(ValueError):
        OptionType.parse(code)


def test_expiry_accepts_date_datetime_and_string():
    records, qtys = leg_records((100, "C", 5, 1), (100, "P", 4, 1), (100, "P", 4, 1))
    records[0]["expiry"] = date(2024, 6, 21)
    records[1]["expiry"] = datetime(2024, 6, 21, 16, 0)
    legs = validate_legs(records, qtys)
    assert legs.expiries == [date(2024, 6, 21)]


def test_numeric_strings_are_accepted():
    records, qtys = leg_records((100, "C", 5, 1))
    records[0]["strike"] = "100.5"
    records[0]["last_price"] = "2.25"
    legs = validate_legs(records, ["-3"])
    assert legs[0].strike == 100.5
    assert legs[0].premium == 2.25
    assert legs[0].quantity == -3


def test_premium_alias():
    records, qtys = leg_records((100, "C", 5, 1))
    records[0]["premium"] = records[0].pop("last_price")
    assert validate_legs(records, qtys)[0].premium == 5


def test_missing_ticker_gets_placeholder():
    records, qtys = leg_records((100, "C", 5, 1))
    del records[0]["ticker"]
    assert validate_legs(records, qtys)[0].ticker == "LEG0"


@pytest.mark.parametrize("qtys", [[1], [1, 1, 1]])
def test_quantity_length_mismatch(qtys):
    records, _ = leg_records((100, "C", 5, 1), (100, "P", 4, 1))
    with pytest.raises(ValidationError, match="does not match leg count 2"):
        validate_legs(records, qtys)


def test_missing_quantities():
    records, _ = leg_records((100, "C", 5, 1))
    with pytest.raises(ValidationError, match="quantities are missing"):
        validate_legs(records, None)


def test_no_legs():
    with pytest.raises(ValidationError, match="empty"):
        validate_legs([], [])


def test_non_numeric_strike_names_leg_and_field():
    records, qtys = leg_records((100, "C", 5, 1), (110, "C", 2, -1))
    records[1]["strike"] = "abc"
    with pytest.raises(ValidationError) as excinfo:
        validate_legs(records, qtys)
    assert excinfo.value.errors == [
        LegIssue(1, "strike", "is not a finite number: 'abc'"),
    ]
    assert "leg 1: strike" in str(excinfo.value)


def test_all_issues_reported_together():
    records, qtys = leg_records((100, "C", 5, 1), (110, "C", 2, -1))
    records[0]["strike"] = float("nan")
    records[0]["option_type"] = "X"
    records[1]["last_price"] = float("inf")
    qtys[1] = 0
    with pytest.raises(ValidationError) as excinfo:
        validate_legs(records, qtys)
    found = {(e.index, e.field) for e in excinfo.value.errors}
    assert found == {(0, "strike"), (0, "option_type"), (1, "last_price"), (1, "quantity")}


@pytest.mark.parametrize("strike", [0, -5])
def test_strike_must_be_positive(strike):
    records, qtys = leg_records((strike, "C", 5, 1))
    with pytest.raises(ValidationError, match="must be positive"):
        validate_legs(records, qtys)


@pytest.mark.parametrize("field,value,message", [
    ("underlying", None, "underlying is missing"),
    ("underlying", "  ", "underlying is missing"),
    ("expiry", None, "expiry is missing"),
    ("expiry", "21/06/2024", "expiry is not a date"),
])
def test_context_fields_required(field, value, message):
    records, qtys = leg_records((100, "C", 5, 1))
    records[0][field] = value
    with pytest.raises(ValidationError, match=message):
        validate_legs(records, qtys)


def test_non_mapping_record():
    with pytest.raises(ValidationError, match="leg 0: record is not a mapping"):
        validate_legs([(100, "C")], [1])


def test_mixed_underlying_is_not_a_validation_error():
    records, qtys = leg_records((100, "C", 5, 1), (100, "P", 4, 1))
    records[1]["underlying"] = "NDX"
    records[1]["expiry"] = "2024-07-19"
    legs = validate_legs(records, qtys)
    assert not legs.is_homogeneous
    assert legs.underlyings == ["NDX", "SPX"]
    assert legs.expiries == [date(2024, 6, 21), date(2024, 7, 19)]


def test_leg_set_is_immutable(straddle_legs):
    with pytest.raises(AttributeError):
        straddle_legs.legs = ()
    with pytest.raises(AttributeError):
        straddle_legs[0].strike = 1


def test_expiry_accepts_iso_timestamp_string():
    records, qtys = leg_records((100, "C", 5, 1))
    records[0]["expiry"] = "2024-06-21T16:00:00"
    assert validate_legs(records, qtys).expiry == date(2024, 6, 21)


@pytest.mark.parametrize("value", ["2024-06-21garbage", "2024-06-2", "2024-13-01"])
def test_expiry_rejects_malformed_strings(value):
    records, qtys = leg_records((100, "C", 5, 1))
    records[0]["expiry"] = value
    with pytest.raises(ValidationError, match="expiry is not a date"):
        validate_legs(records, qtys)
