from datetime import UTC, datetime

from fastapi import APIRouter

from stockreport.dependencies import ContextDep, MarketServiceDep, WatchlistServiceDep
from stockreport.market.schemas import LiveQuotesResponse, QuotesResponse

router = APIRouter()


@router.get("/preview", response_model=QuotesResponse)
async def preview_quotes(
    context: ContextDep,
    watchlist: WatchlistServiceDep,
    market: MarketServiceDep,
) -> QuotesResponse:
    symbols = await watchlist.list()
    quotes = await market.get_quotes(symbols[: context.settings.preview_limit])
    return QuotesResponse(data=quotes)


@router.get("/live", response_model=LiveQuotesResponse)
async def live_quotes(
    watchlist: WatchlistServiceDep,
    market: MarketServiceDep,
) -> LiveQuotesResponse:
    quotes = await market.get_quotes(await watchlist.list())
    return LiveQuotesResponse(data=quotes, timestamp=datetime.now(UTC))
