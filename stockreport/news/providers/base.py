from abc import ABC, abstractmethod
from collections.abc import Iterable, Sequence
from datetime import UTC, date, datetime, timedelta

import structlog

from stockreport.batching import fetch_each
from stockreport.news.schemas import NewsArticle

logger = structlog.get_logger()

PER_SYMBOL_LIMIT = 5
TOTAL_LIMIT = 20


def rank_articles(
    articles: Iterable[NewsArticle],
    per_symbol_limit: int = PER_SYMBOL_LIMIT,
    total_limit: int = TOTAL_LIMIT,
) -> list[NewsArticle]:
    """Keep the newest articles per symbol, then the newest overall."""
    by_symbol: dict[str, list[NewsArticle]] = {}
    for article in articles:
        by_symbol.setdefault(article.symbol, []).append(article)

    kept: list[NewsArticle] = []
    for group in by_symbol.values():
        group.sort(key=lambda a: a.published_at, reverse=True)
        kept.extend(group[:per_symbol_limit])

    kept.sort(key=lambda a: a.published_at, reverse=True)
    return kept[:total_limit]


class NewsProvider(ABC):
    max_concurrency: int = 4

    @abstractmethod
    async def get_company_news(self, symbol: str, start: date, end: date) -> list[NewsArticle]:
        """Fetch articles about one symbol published between start and end (inclusive)."""
        ...

    async def fetch(
        self,
        symbols: Sequence[str],
        window_days: int = 7,
        now: datetime | None = None,
    ) -> list[NewsArticle]:
        end = (now or datetime.now(UTC)).date()
        start = end - timedelta(days=window_days)

        async def _fetch(symbol: str) -> list[NewsArticle]:
            return await self.get_company_news(symbol, start, end)

        results = await fetch_each(symbols, _fetch, self.max_concurrency)
        articles: list[NewsArticle] = []
        for result in results:
            if not result.ok:
                logger.warning("news_fetch_failed", symbol=result.symbol, error=str(result.error))
                continue
            articles.extend(result.value)
        return rank_articles(articles)

    async def aclose(self) -> None:
        return None
