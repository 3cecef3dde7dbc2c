import asyncio

import yfinance as yf

from stockreport.exceptions import ProviderError
from stockreport.market.providers.base import QuoteProvider
from stockreport.market.schemas import Quote


def _fetch_ticker_info(symbol: str) -> dict:
    """Fetch ticker info synchronously (to be run in a thread)."""
    info = yf.Ticker(symbol).info
    has_no_data = not info or (
        info.get("regularMarketPrice") is None
        and info.get("currentPrice") is None
        and not info.get("shortName")
    )
    if has_no_data:
        raise ProviderError(symbol, f"No quote data for {symbol}")
    return info


def _first(info: dict, *keys: str):
    for key in keys:
        value = info.get(key)
        if value is not None:
            return value
    return None


def _round(value: float | None) -> float | None:
    return round(value, 4) if value is not None else None


def quote_from_info(symbol: str, info: dict) -> Quote:
    price = _first(info, "regularMarketPrice", "currentPrice")
    prev_close = _first(info, "regularMarketPreviousClose", "previousClose")

    change = info.get("regularMarketChange")
    if change is None and price is not None and prev_close:
        change = price - prev_close
    change_pct = info.get("regularMarketChangePercent")
    if change_pct is None and change is not None and prev_close:
        change_pct = (change / prev_close) * 100

    volume = _first(info, "regularMarketVolume", "volume")

    return Quote(
        symbol=symbol,
        name=info.get("longName") or info.get("shortName") or symbol,
        price=price,
        change=_round(change),
        change_percent=_round(change_pct),
        previous_close=prev_close,
        day_high=_first(info, "regularMarketDayHigh", "dayHigh"),
        day_low=_first(info, "regularMarketDayLow", "dayLow"),
        volume=int(volume) if volume is not None else None,
        market_cap=info.get("marketCap"),
        fifty_two_week_high=info.get("fiftyTwoWeekHigh"),
        fifty_two_week_low=info.get("fiftyTwoWeekLow"),
    )


class YahooFinanceProvider(QuoteProvider):
    def __init__(self, max_concurrency: int = 4) -> None:
        self.max_concurrency = max_concurrency

    async def get_quote(self, symbol: str) -> Quote:
        info = await asyncio.to_thread(_fetch_ticker_info, symbol)
        return quote_from_info(symbol, info)
