from __future__ import annotations

import yfinance as yf

from utils.logger import get_logger

logger = get_logger(__name__)


class YahooSpotFetcher:
    """Fetches the latest underlying price from Yahoo Finance."""

    def __init__(self, lookback: str = "5d"):
        self.lookback = lookback

    def fetch_last_price(self, symbol: str) -> float | None:
        """
        Last daily close for ``symbol``, or None when Yahoo returns nothing.

        For NSE symbols, append .NS (e.g., RELIANCE.NS, ^NSEI for Nifty 50).
        """
        ticker = yf.Ticker(symbol)
        df = ticker.history(period=self.lookback, interval="1d", auto_adjust=True)

        if df.empty:
            logger.warning("No price data returned", extra={"extra_data": {"symbol": symbol}})
            return None

        df.columns = [c.lower() for c in df.columns]
        if "close" not in df.columns:
            return None
        closes = df["close"].dropna()
        if closes.empty:
            return None
        return float(closes.iloc[-1])
