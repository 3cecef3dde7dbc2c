from collections.abc import Sequence

import structlog

from stockreport.market.providers.base import QuoteProvider
from stockreport.market.schemas import Quote

logger = structlog.get_logger()


class MarketService:
    def __init__(self, provider: QuoteProvider) -> None:
        self._provider = provider

    async def get_quotes(self, symbols: Sequence[str]) -> list[Quote]:
        symbols = list(symbols)
        if not symbols:
            return []
        logger.info("market_get_quotes", count=len(symbols))
        try:
            quotes = await self._provider.fetch(symbols)
        except Exception as exc:
            # Wholesale transport failure: every symbol is reported as errored.
            logger.error("market_batch_failed", error=str(exc))
            return [Quote.failed(symbol, str(exc)) for symbol in symbols]

        failed = sum(1 for q in quotes if q.error)
        logger.info("market_quotes_fetched", count=len(quotes), failed=failed)
        return quotes
