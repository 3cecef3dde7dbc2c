from collections.abc import Sequence

import structlog

from stockreport.news.providers.base import NewsProvider
from stockreport.news.schemas import NewsArticle

logger = structlog.get_logger()


class NewsService:
    def __init__(self, provider: NewsProvider, window_days: int = 7) -> None:
        self._provider = provider
        self._window_days = window_days

    async def get_news(self, symbols: Sequence[str]) -> list[NewsArticle]:
        symbols = list(symbols)
        if not symbols:
            return []
        logger.info("news_get_articles", count=len(symbols), window_days=self._window_days)
        try:
            articles = await self._provider.fetch(symbols, window_days=self._window_days)
        except Exception as exc:
            logger.error("news_batch_failed", error=str(exc))
            return []
        logger.info("news_articles_fetched", count=len(articles))
        return articles

    async def aclose(self) -> None:
        await self._provider.aclose()
