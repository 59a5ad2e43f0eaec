from __future__ import annotations

import math
from dataclasses import dataclass
from datetime import date, datetime
from enum import Enum
from typing import Any, Iterator, Mapping, Sequence


class OptionType(Enum):
    CALL = "Call"
    PUT = "Put"

    @classmethod
    def parse(cls, code: Any) -> OptionType:
        """Accept Call/Put in the usual terminal spellings: C, CALL, CE / P, PUT, PE."""
        if isinstance(code, OptionType):
            return code
        if not isinstance(code, str):
            raise ValueError(f"unknown option type {code!r}")
        normalized = code.strip().upper()
        if normalized in ("C", "CALL", "CE"):
            return cls.CALL
        if normalized in ("P", "PUT", "PE"):
            return cls.PUT
        raise ValueError(f"unknown option type {code!r}")


@dataclass(frozen=True)
class LegIssue:
    index: int | None  # None for problems with the input as a whole
    field: str
    message: str

    def __str__(self) -> str:
        where = f"leg {self.index}" if self.index is not None else "input"
        return f"{where}: {self.field} {self.message}"


class ValidationError(ValueError):
    """Raised when leg input is incomplete or malformed. Nothing is computed."""

    def __init__(self, errors: list[LegIssue]):
        self.errors = errors
        super().__init__("Invalid leg input: " + "; ".join(str(e) for e in errors))


class AmbiguousInputWarning(UserWarning):
    """Legs span more than one underlying or expiry."""


@dataclass(frozen=True)
class Leg:
    ticker: str
    strike: float
    option_type: OptionType
    premium: float
    quantity: float  # >0 long, <0 short
    underlying: str
    expiry: date

    @property
    def is_long(self) -> bool:
        return self.quantity > 0

    @property
    def is_call(self) -> bool:
        return self.option_type is OptionType.CALL


@dataclass(frozen=True)
class LegSet:
    """Legs sorted ascending by strike. Ties keep their input order."""

    legs: tuple[Leg, ...]
    # First leg in input order; supplies the underlying/expiry context
    primary: Leg | None = None

    @classmethod
    def from_legs(cls, legs: Sequence[Leg]) -> LegSet:
        # sorted() is stable
        ordered = tuple(sorted(legs, key=lambda leg: leg.strike))
        return cls(ordered, primary=legs[0] if legs else None)

    def __len__(self) -> int:
        return len(self.legs)

    def __iter__(self) -> Iterator[Leg]:
        return iter(self.legs)

    def __getitem__(self, idx: int) -> Leg:
        return self.legs[idx]

    @property
    def strikes(self) -> list[float]:
        return [leg.strike for leg in self.legs]

    @property
    def underlyings(self) -> list[str]:
        return sorted({leg.underlying for leg in self.legs})

    @property
    def expiries(self) -> list[date]:
        return sorted({leg.expiry for leg in self.legs})

    @property
    def underlying(self) -> str | None:
        return self.primary.underlying if self.primary else None

    @property
    def expiry(self) -> date | None:
        return self.primary.expiry if self.primary else None

    @property
    def is_homogeneous(self) -> bool:
        return len(self.underlyings) <= 1 and len(self.expiries) <= 1


# ---------------------------------------------------------------------------
# Validation
# ---------------------------------------------------------------------------

def _is_missing(value: Any) -> bool:
    if value is None:
        return True
    if isinstance(value, float) and math.isnan(value):
        return True
    return isinstance(value, str) and not value.strip()


def _to_number(value: Any) -> float | None:
    if isinstance(value, bool) or _is_missing(value):
        return None
    try:
        number = float(value)
    except (TypeError, ValueError):
        return None
    return number if math.isfinite(number) else None


def _to_date(value: Any) -> date | None:
    if isinstance(value, datetime):
        return value.date()
    if isinstance(value, date):
        return value
    if isinstance(value, str):
        text = value.strip()
        try:
            return date.fromisoformat(text)
        except ValueError:
            pass
        try:
            return datetime.fromisoformat(text).date()
        except ValueError:
            return None
    return None


def _build_leg(index: int, record: Mapping[str, Any], quantity: Any, issues: list[LegIssue]) -> Leg | None:
    found = len(issues)

    strike = _to_number(record.get("strike"))
    if strike is None:
        issues.append(LegIssue(index, "strike", f"is not a finite number: {record.get('strike')!r}"))
    elif strike <= 0:
        issues.append(LegIssue(index, "strike", f"must be positive, got {strike}"))

    raw_premium = record.get("last_price", record.get("premium"))
    premium = _to_number(raw_premium)
    if premium is None:
        issues.append(LegIssue(index, "last_price", f"is not a finite number: {raw_premium!r}"))

    qty = _to_number(quantity)
    if qty is None:
        issues.append(LegIssue(index, "quantity", f"is not a finite number: {quantity!r}"))
    elif qty == 0:
        issues.append(LegIssue(index, "quantity", "must be non-zero"))

    option_type = None
    try:
        option_type = OptionType.parse(record.get("option_type"))
    except ValueError as exc:
        issues.append(LegIssue(index, "option_type", str(exc)))

    underlying = record.get("underlying")
    if _is_missing(underlying):
        issues.append(LegIssue(index, "underlying", "is missing"))

    expiry = None
    if _is_missing(record.get("expiry")):
        issues.append(LegIssue(index, "expiry", "is missing"))
    else:
        expiry = _to_date(record.get("expiry"))
        if expiry is None:
            issues.append(LegIssue(index, "expiry", f"is not a date: {record.get('expiry')!r}"))

    if len(issues) > found:
        return None

    ticker = record.get("ticker")
    return Leg(
        ticker=str(ticker) if not _is_missing(ticker) else f"LEG{index}",
        strike=strike,
        option_type=option_type,
        premium=premium,
        quantity=qty,
        underlying=str(underlying).strip(),
        expiry=expiry,
    )


def validate_legs(
    records: Sequence[Mapping[str, Any]] | None,
    quantities: Sequence[Any] | None,
) -> LegSet:
    """
    Turn raw leg records plus a parallel list of signed quantities into a LegSet.

    Every problem found is reported at once, keyed by leg index and field.
    Mixed underlyings or expiries are accepted here; the classifier labels them.
    """
    issues: list[LegIssue] = []
    if records is None:
        raise ValidationError([LegIssue(None, "legs", "are missing")])
    if quantities is None:
        raise ValidationError([LegIssue(None, "quantities", "are missing")])
    if len(records) == 0:
        raise ValidationError([LegIssue(None, "legs", "are empty")])
    if len(records) != len(quantities):
        raise ValidationError([
            LegIssue(
                None,
                "quantities",
                f"count {len(quantities)} does not match leg count {len(records)}",
            )
        ])

    legs: list[Leg] = []
    for i, (record, qty) in enumerate(zip(records, quantities)):
        if not isinstance(record, Mapping):
            issues.append(LegIssue(i, "record", f"is not a mapping: {type(record).__name__}"))
            continue
        leg = _build_leg(i, record, qty, issues)
        if leg is not None:
            legs.append(leg)

    if issues:
        raise ValidationError(issues)
    return LegSet.from_legs(legs)
