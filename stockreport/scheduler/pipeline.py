import asyncio

import structlog

from stockreport.mailer.service import EmailNotifier
from stockreport.market.service import MarketService
from stockreport.news.service import NewsService
from stockreport.report.service import ReportComposer
from stockreport.scheduler.status import RunStatus, RunStatusTracker
from stockreport.watchlist.service import WatchlistService

logger = structlog.get_logger()


class ReportPipeline:
    """Fetch quotes and news for the watchlist, render the report and mail it.

    ``run`` never raises; the outcome of every attempt lands in the RunStatus.
    Runs are serialized so overlapping triggers queue instead of interleaving.
    """

    def __init__(
        self,
        watchlist: WatchlistService,
        market: MarketService,
        news: NewsService,
        composer: ReportComposer,
        notifier: EmailNotifier,
        tracker: RunStatusTracker,
    ) -> None:
        self._watchlist = watchlist
        self._market = market
        self._news = news
        self._composer = composer
        self._notifier = notifier
        self._tracker = tracker
        self._lock = asyncio.Lock()

    @property
    def tracker(self) -> RunStatusTracker:
        return self._tracker

    @property
    def busy(self) -> bool:
        return self._lock.locked()

    async def run(self, trigger: str = "schedule") -> RunStatus:
        async with self._lock:
            return await self._run(trigger)

    async def _run(self, trigger: str) -> RunStatus:
        log = logger.bind(trigger=trigger)
        self._tracker.begin(trigger)
        log.info("report_run_started")

        try:
            symbols = await self._watchlist.list()
            quotes, articles = await asyncio.gather(
                self._market.get_quotes(symbols),
                self._news.get_news(symbols),
            )
            report = self._composer.compose(quotes, articles)
            await self._notifier.send(report.subject, report.html)
        except Exception as exc:
            reason = str(exc) or type(exc).__name__
            log.error("report_run_failed", error=reason, exc_info=True)
            await self._tracker.fail(reason)
        else:
            log.info("report_run_succeeded", subject=report.subject, symbols=len(symbols))
            await self._tracker.succeed()

        return self._tracker.status
