from typing import Annotated

from fastapi import Depends, Request

from stockreport.context import AppContext
from stockreport.exceptions import ServiceUnavailableError
from stockreport.market.service import MarketService
from stockreport.news.service import NewsService
from stockreport.scheduler.service import ReportScheduler
from stockreport.watchlist.service import WatchlistService


def get_context(request: Request) -> AppContext:
    context = getattr(request.app.state, "context", None)
    if context is None:
        raise ServiceUnavailableError("Service is still starting up")
    return context


ContextDep = Annotated[AppContext, Depends(get_context)]


def get_watchlist_service(context: ContextDep) -> WatchlistService:
    return context.watchlist


def get_market_service(context: ContextDep) -> MarketService:
    return context.market


def get_news_service(context: ContextDep) -> NewsService:
    return context.news


def get_scheduler(context: ContextDep) -> ReportScheduler:
    if context.scheduler is None:
        raise ServiceUnavailableError("Report pipeline is not initialized yet")
    return context.scheduler


WatchlistServiceDep = Annotated[WatchlistService, Depends(get_watchlist_service)]
MarketServiceDep = Annotated[MarketService, Depends(get_market_service)]
NewsServiceDep = Annotated[NewsService, Depends(get_news_service)]
SchedulerDep = Annotated[ReportScheduler, Depends(get_scheduler)]
