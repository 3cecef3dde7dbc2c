from abc import ABC, abstractmethod
from collections.abc import Sequence

import structlog

from stockreport.batching import fetch_each
from stockreport.market.schemas import Quote

logger = structlog.get_logger()


class QuoteProvider(ABC):
    max_concurrency: int = 4

    @abstractmethod
    async def get_quote(self, symbol: str) -> Quote: ...

    async def fetch(self, symbols: Sequence[str]) -> list[Quote]:
        """Return one Quote per symbol in input order; failures become error-tagged quotes."""
        results = await fetch_each(symbols, self.get_quote, self.max_concurrency)
        quotes: list[Quote] = []
        for result in results:
            if result.ok:
                quotes.append(result.value)
                continue
            logger.warning("quote_fetch_failed", symbol=result.symbol, error=str(result.error))
            quotes.append(Quote.failed(result.symbol, str(result.error)))
        return quotes
