import asyncio
from datetime import UTC, datetime

import structlog
from apscheduler.schedulers.asyncio import AsyncIOScheduler

from stockreport.scheduler.cron import SCHEDULE_TIMEZONE, parse_cron
from stockreport.scheduler.pipeline import ReportPipeline

logger = structlog.get_logger()

JOB_ID = "daily_stock_report"


class ReportScheduler:
    def __init__(self, pipeline: ReportPipeline, cron_schedule: str) -> None:
        self._pipeline = pipeline
        self._cron_schedule = cron_schedule
        self._trigger = parse_cron(cron_schedule)
        self._scheduler: AsyncIOScheduler | None = None
        self._tasks: set[asyncio.Task] = set()

    @property
    def pipeline(self) -> ReportPipeline:
        return self._pipeline

    @property
    def running(self) -> bool:
        return self._scheduler is not None and self._scheduler.running

    def start(self) -> None:
        """Register the cron job on the running event loop."""
        if self.running:
            return
        self._scheduler = AsyncIOScheduler(timezone=SCHEDULE_TIMEZONE)
        self._scheduler.add_job(
            self._run_scheduled,
            self._trigger,
            id=JOB_ID,
            coalesce=True,
            max_instances=1,
            misfire_grace_time=300,
        )
        self._scheduler.start()
        logger.info(
            "scheduler_started",
            cron=self._cron_schedule,
            next_run=self.next_run(),
        )

    def shutdown(self) -> None:
        if self.running:
            self._scheduler.shutdown(wait=False)
            logger.info("scheduler_stopped")
        self._scheduler = None

    async def _run_scheduled(self) -> None:
        await self._pipeline.run("schedule")

    def trigger(self, source: str = "manual") -> asyncio.Task:
        """Start a run in the background and return immediately."""
        task = asyncio.create_task(self._pipeline.run(source))
        self._tasks.add(task)
        task.add_done_callback(self._tasks.discard)
        logger.info("report_run_triggered", source=source, queued=self._pipeline.busy)
        return task

    async def wait_idle(self) -> None:
        """Wait until every triggered run has finished."""
        while self._tasks:
            await asyncio.gather(*list(self._tasks))

    def next_run(self) -> datetime | None:
        if self.running:
            job = self._scheduler.get_job(JOB_ID)
            if job is not None:
                return job.next_run_time
        return self._trigger.get_next_fire_time(None, datetime.now(UTC))
