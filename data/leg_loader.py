from __future__ import annotations

import json
from dataclasses import dataclass
from pathlib import Path
from typing import Any

import pandas as pd

LEG_COLUMNS = ["ticker", "strike", "option_type", "last_price", "underlying", "expiry"]


@dataclass
class LegInput:
    """Raw leg records and their parallel signed quantities, as read from disk."""
    records: list[dict[str, Any]]
    quantities: list[Any] | None
    current_price: float | None = None
    source: str = ""


def _frame_to_input(df: pd.DataFrame, source: str, current_price: float | None = None) -> LegInput:
    df.columns = [str(c).strip().lower() for c in df.columns]
    if "premium" in df.columns and "last_price" not in df.columns:
        df = df.rename(columns={"premium": "last_price"})

    # NaN -> None so the validator reports the cell as missing
    df = df.astype(object).where(df.notna(), None)

    quantities = df["quantity"].tolist() if "quantity" in df.columns else None
    keep = [c for c in LEG_COLUMNS if c in df.columns]
    records = df[keep].to_dict(orient="records")
    return LegInput(
        records=records,
        quantities=quantities,
        current_price=current_price,
        source=source,
    )


def load_legs(path: Path | str) -> LegInput:
    """
    Load legs from CSV or JSON.

    CSV: one row per leg with columns ticker, strike, option_type,
    last_price (or premium), underlying, expiry, quantity.

    JSON: either a list of such rows, or an object
    {"legs": [...], "quantities": [...], "current_price": 101.5}.
    """
    path = Path(path)
    suffix = path.suffix.lower()

    if suffix == ".csv":
        # Read everything as text; the validator does the numeric parsing
        df = pd.read_csv(path, dtype=str)
        return _frame_to_input(df, str(path))

    if suffix == ".json":
        with open(path, encoding="utf-8") as f:
            payload = json.load(f)
        if isinstance(payload, list):
            return _frame_to_input(pd.DataFrame(payload), str(path))
        if isinstance(payload, dict):
            df = pd.DataFrame(payload.get("legs", []))
            current = payload.get("current_price")
            loaded = _frame_to_input(df, str(path), float(current) if current is not None else None)
            if "quantities" in payload:
                loaded.quantities = payload["quantities"]
            return loaded
        raise ValueError(f"Unsupported JSON layout in {path}: expected a list or an object")

    raise ValueError(f"Unsupported leg file type: {path.suffix or path.name}")
