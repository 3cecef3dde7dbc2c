"""
Shared fixtures: in-memory backend, fake providers and notifier, and an API client
wired to an AppContext built from those fakes.
"""
import httpx
import pytest
import pytest_asyncio

from stockreport.config import Settings
from stockreport.context import AppContext
from stockreport.main import create_app
from stockreport.market.service import MarketService
from stockreport.news.service import NewsService
from stockreport.report.service import ReportComposer
from stockreport.scheduler.pipeline import ReportPipeline
from stockreport.scheduler.service import ReportScheduler
from stockreport.scheduler.status import RunStatusTracker
from stockreport.watchlist.backends import InMemoryBackend
from stockreport.watchlist.service import WatchlistService
from tests.fakes import (
    FakeNewsProvider,
    FakeNotifier,
    FakeQuoteProvider,
    make_article,
    make_quote,
)


@pytest.fixture
def settings():
    return Settings(
        _env_file=None,
        email_user="reports@example.com",
        email_pass="app-password",
        email_to="investor@example.com",
        news_api_key="finnhub-key",
        stock_symbols="AAPL,MSFT",
        cron_schedule="0 8 * * *",
        redis_url="",
    )


@pytest.fixture
def backend():
    return InMemoryBackend(["AAPL", "MSFT"])


@pytest.fixture
def quote_provider():
    return FakeQuoteProvider({"AAPL": make_quote("AAPL", 2.0), "MSFT": make_quote("MSFT", -1.5)})


@pytest.fixture
def news_provider():
    return FakeNewsProvider(
        {
            "AAPL": [make_article("AAPL", 1), make_article("AAPL", 5)],
            "MSFT": [make_article("MSFT", 3)],
        }
    )


@pytest.fixture
def notifier():
    return FakeNotifier()


@pytest_asyncio.fixture
async def watchlist(backend):
    return await WatchlistService.create(backend, ["AAPL", "MSFT"])


@pytest_asyncio.fixture
async def tracker(backend, settings):
    return await RunStatusTracker.restore(backend, settings.cron_schedule)


@pytest.fixture
def market(quote_provider):
    return MarketService(quote_provider)


@pytest.fixture
def news(news_provider):
    return NewsService(news_provider)


@pytest.fixture
def pipeline(watchlist, market, news, notifier, tracker):
    return ReportPipeline(
        watchlist=watchlist,
        market=market,
        news=news,
        composer=ReportComposer(),
        notifier=notifier,
        tracker=tracker,
    )


@pytest.fixture
def context(settings, watchlist, market, news, pipeline, tracker):
    return AppContext(
        settings=settings,
        watchlist=watchlist,
        market=market,
        news=news,
        tracker=tracker,
        scheduler=ReportScheduler(pipeline, settings.cron_schedule),
    )


@pytest_asyncio.fixture
async def client(context):
    transport = httpx.ASGITransport(app=create_app(context))
    async with httpx.AsyncClient(transport=transport, base_url="http://test") as c:
        yield c
