from dataclasses import dataclass

import structlog

from stockreport.config import Settings
from stockreport.exceptions import ConfigurationError
from stockreport.mailer.service import EmailNotifier
from stockreport.market.providers.yahoo_finance import YahooFinanceProvider
from stockreport.market.service import MarketService
from stockreport.news.providers.finnhub import FinnhubNewsProvider
from stockreport.news.service import NewsService
from stockreport.report.service import ReportComposer
from stockreport.scheduler.cron import parse_cron
from stockreport.scheduler.pipeline import ReportPipeline
from stockreport.scheduler.service import ReportScheduler
from stockreport.scheduler.status import RunStatusTracker
from stockreport.watchlist.backends import open_backend
from stockreport.watchlist.service import WatchlistService

logger = structlog.get_logger()


@dataclass
class AppContext:
    """Everything a request handler or the scheduler needs, built once per process."""

    settings: Settings
    watchlist: WatchlistService
    market: MarketService
    news: NewsService
    tracker: RunStatusTracker
    scheduler: ReportScheduler | None = None

    async def aclose(self) -> None:
        if self.scheduler is not None:
            self.scheduler.shutdown()
            await self.scheduler.wait_idle()
        await self.news.aclose()
        await self.watchlist.backend.aclose()


def validate_settings(settings: Settings) -> None:
    missing = settings.missing_required()
    if missing:
        raise ConfigurationError(
            f"Missing required environment variables: {', '.join(missing)}"
        )
    parse_cron(settings.cron_schedule)


async def build_context(settings: Settings) -> AppContext:
    backend = await open_backend(settings)
    watchlist = await WatchlistService.create(backend, settings.default_symbols)
    tracker = await RunStatusTracker.restore(backend, settings.cron_schedule)

    market = MarketService(YahooFinanceProvider(max_concurrency=settings.quote_concurrency))
    news = NewsService(
        FinnhubNewsProvider(settings.news_api_key, max_concurrency=settings.quote_concurrency),
        window_days=settings.news_window_days,
    )
    pipeline = ReportPipeline(
        watchlist=watchlist,
        market=market,
        news=news,
        composer=ReportComposer(),
        notifier=EmailNotifier(settings),
        tracker=tracker,
    )
    scheduler = ReportScheduler(pipeline, settings.cron_schedule)

    logger.info("context_built", storage=backend.name, symbols=len(await watchlist.list()))
    return AppContext(
        settings=settings,
        watchlist=watchlist,
        market=market,
        news=news,
        tracker=tracker,
        scheduler=scheduler,
    )
