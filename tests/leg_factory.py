from options_pricing.legs import validate_legs


def leg_records(*specs, underlying="SPX", expiry="2024-06-21"):
    """Build (records, quantities) from (strike, type, premium, qty) tuples."""
    records, quantities = [], []
    for strike, kind, premium, qty in specs:
        records.append({
            "ticker": f"{underlying}{kind}{strike}",
            "strike": strike,
            "option_type": kind,
            "last_price": premium,
            "underlying": underlying,
            "expiry": expiry,
        })
        quantities.append(qty)
    return records, quantities


def leg_set(*specs, **kwargs):
    return validate_legs(*leg_records(*specs, **kwargs))
