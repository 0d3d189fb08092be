"""Yahoo Finance client for delayed equity quotes."""

from __future__ import annotations

import asyncio
import logging
from dataclasses import dataclass
from datetime import datetime, timezone
from typing import Any

from .models import format_timestamp
from .symbols import normalize_symbol

logger = logging.getLogger(__name__)

DEFAULT_MARKET_SUFFIX = ".VN"
QUOTE_SOURCE = "yahoo-finance"


class QuoteFetchError(Exception):
    """The quote provider could not be reached or returned an error."""


@dataclass(frozen=True, slots=True)
class StockQuote:
    """One delayed quote as returned to the UI."""

    symbol: str
    currency: str | None
    price: float | None
    change: float | None
    change_percent: float | None
    market_time: datetime | None
    source: str = QUOTE_SOURCE

    def to_dict(self) -> dict:
        return {
            "symbol": self.symbol,
            "currency": self.currency,
            "price": self.price,
            "change": self.change,
            "changePercent": self.change_percent,
            "marketTime": format_timestamp(self.market_time),
            "source": self.source,
        }


def _first_present(info: dict[str, Any], *keys: str) -> Any:
    for key in keys:
        value = info.get(key)
        if value is not None:
            return value
    return None


class DelayedQuoteGateway:
    """Single-shot quote lookups against Yahoo Finance.

    Stateless: each call is one request, no caching and no retry. The symbol
    is normalized and suffixed with a market region (``FPT`` -> ``FPT.VN``).
    """

    def __init__(self, market_suffix: str = DEFAULT_MARKET_SUFFIX) -> None:
        self._suffix = market_suffix

    async def fetch(self, raw_symbol: str) -> StockQuote:
        symbol = normalize_symbol(raw_symbol)
        ticker = f"{symbol}{self._suffix}"
        try:
            # yfinance is synchronous; keep it off the event loop.
            info = await asyncio.to_thread(self._fetch_info, ticker)
        except Exception as e:
            logger.error("Quote fetch failed for %s: %s", ticker, e)
            raise QuoteFetchError(f"Failed to fetch quote for {ticker}") from e
        return self._to_quote(symbol, info or {})

    # --- Internal ---

    def _fetch_info(self, ticker: str) -> dict[str, Any]:
        """Synchronous call to Yahoo Finance. Runs in a thread."""
        import yfinance as yf

        return yf.Ticker(ticker).info

    @staticmethod
    def _to_quote(symbol: str, info: dict[str, Any]) -> StockQuote:
        market_time = info.get("regularMarketTime")
        return StockQuote(
            symbol=info.get("symbol") or symbol,
            currency=info.get("currency"),
            price=_first_present(info, "regularMarketPrice", "postMarketPrice", "preMarketPrice"),
            change=info.get("regularMarketChange"),
            change_percent=info.get("regularMarketChangePercent"),
            # Yahoo reports epoch seconds
            market_time=(
                datetime.fromtimestamp(market_time, tz=timezone.utc) if market_time else None
            ),
        )
