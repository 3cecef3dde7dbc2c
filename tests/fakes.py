"""
In-memory stand-ins for the quote/news providers and the email notifier.
"""
from datetime import UTC, date, datetime, timedelta

from stockreport.exceptions import DeliveryError, ProviderError
from stockreport.market.providers.base import QuoteProvider
from stockreport.market.schemas import Quote
from stockreport.news.providers.base import NewsProvider
from stockreport.news.schemas import NewsArticle

NOW = datetime(2026, 10, 16, 14, 30, tzinfo=UTC)


def make_quote(symbol: str, change: float = 1.0, change_percent: float | None = None) -> Quote:
    price = 100.0 + change
    return Quote(
        symbol=symbol,
        name=f"{symbol} Inc.",
        price=price,
        change=change,
        change_percent=change_percent if change_percent is not None else change,
        previous_close=100.0,
        day_high=price + 1,
        day_low=price - 1,
        volume=1_000_000,
        market_cap=2.5e12,
        fifty_two_week_high=150.0,
        fifty_two_week_low=80.0,
    )


def make_article(symbol: str, hours_ago: int, title: str | None = None) -> NewsArticle:
    return NewsArticle(
        symbol=symbol,
        title=title or f"{symbol} headline {hours_ago}h",
        description=f"Summary for {symbol}",
        url=f"https://news.example.com/{symbol.lower()}/{hours_ago}",
        source="Reuters",
        published_at=NOW - timedelta(hours=hours_ago),
    )


class FakeQuoteProvider(QuoteProvider):
    def __init__(self, quotes: dict[str, Quote] | None = None, broken: bool = False) -> None:
        self.quotes = quotes or {}
        self.broken = broken
        self.requested: list[list[str]] = []

    async def get_quote(self, symbol: str) -> Quote:
        if symbol not in self.quotes:
            raise ProviderError(symbol, f"No quote data for {symbol}")
        return self.quotes[symbol]

    async def fetch(self, symbols):
        self.requested.append(list(symbols))
        if self.broken:
            raise ConnectionError("quote service unreachable")
        return await super().fetch(symbols)


class FakeNewsProvider(NewsProvider):
    def __init__(self, articles: dict[str, list[NewsArticle]] | None = None) -> None:
        self.articles = articles or {}
        self.windows: list[tuple[date, date]] = []
        self.closed = False

    async def get_company_news(self, symbol: str, start: date, end: date) -> list[NewsArticle]:
        self.windows.append((start, end))
        if symbol not in self.articles:
            raise ProviderError(symbol, f"Error fetching news for {symbol}")
        return list(self.articles[symbol])

    async def aclose(self) -> None:
        self.closed = True


class FakeNotifier:
    def __init__(self) -> None:
        self.sent: list[tuple[str, str]] = []
        self.fail_with: str | None = None

    async def send(self, subject: str, html: str) -> None:
        if self.fail_with:
            raise DeliveryError(self.fail_with)
        self.sent.append((subject, html))
