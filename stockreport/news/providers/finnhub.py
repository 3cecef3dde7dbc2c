from datetime import UTC, date, datetime

import httpx
import structlog

from stockreport.exceptions import ProviderError
from stockreport.news.providers.base import NewsProvider
from stockreport.news.schemas import NewsArticle

logger = structlog.get_logger()

FINNHUB_NEWS_URL = "https://finnhub.io/api/v1/company-news"


def article_from_item(symbol: str, item: dict) -> NewsArticle | None:
    headline = item.get("headline")
    url = item.get("url")
    if not headline or not url:
        return None
    try:
        published_at = datetime.fromtimestamp(item.get("datetime") or 0, UTC)
    except (TypeError, ValueError, OverflowError, OSError):
        logger.warning("finnhub_article_bad_timestamp", symbol=symbol, value=item.get("datetime"))
        return None
    return NewsArticle(
        symbol=symbol,
        title=headline,
        description=item.get("summary") or None,
        url=url,
        source=item.get("source") or "Unknown",
        published_at=published_at,
        image=item.get("image") or None,
    )


class FinnhubNewsProvider(NewsProvider):
    def __init__(
        self,
        api_key: str,
        client: httpx.AsyncClient | None = None,
        max_concurrency: int = 4,
        timeout: float = 10.0,
    ) -> None:
        self._api_key = api_key
        self._client = client or httpx.AsyncClient(timeout=timeout)
        self.max_concurrency = max_concurrency

    async def get_company_news(self, symbol: str, start: date, end: date) -> list[NewsArticle]:
        params = {
            "symbol": symbol,
            "from": start.isoformat(),
            "to": end.isoformat(),
            "token": self._api_key,
        }
        try:
            response = await self._client.get(FINNHUB_NEWS_URL, params=params)
            response.raise_for_status()
            payload = response.json()
        except (httpx.HTTPError, ValueError) as exc:
            raise ProviderError(symbol, f"Error fetching news for {symbol}: {exc}") from exc

        if not isinstance(payload, list):
            reason = payload.get("error") if isinstance(payload, dict) else payload
            raise ProviderError(symbol, f"Unexpected news payload for {symbol}: {reason}")

        articles = (article_from_item(symbol, item) for item in payload if isinstance(item, dict))
        return [a for a in articles if a is not None]

    async def aclose(self) -> None:
        await self._client.aclose()
