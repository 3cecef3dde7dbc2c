from datetime import UTC, datetime
from enum import StrEnum

import pydantic
import structlog

from stockreport.exceptions import BackendUnavailableError
from stockreport.scheduler.cron import SCHEDULE_TIMEZONE, describe_cron
from stockreport.schemas import CamelModel
from stockreport.watchlist.backends import WatchlistBackend

logger = structlog.get_logger()


class RunState(StrEnum):
    idle = "idle"
    running = "running"


class RunOutcome(StrEnum):
    succeeded = "succeeded"
    failed = "failed"


class RunStatus(CamelModel):
    state: RunState = RunState.idle
    last_outcome: RunOutcome | None = None
    last_trigger: str | None = None
    last_attempt: datetime | None = None
    last_success: datetime | None = None
    last_error: str | None = None
    total_attempts: int = 0
    total_success: int = 0
    total_failures: int = 0
    cron_schedule: str
    timezone: str = SCHEDULE_TIMEZONE
    schedule_description: str = ""


class RunStatusTracker:
    """Single writer for RunStatus; mirrors every finished run to the backend."""

    def __init__(self, status: RunStatus, backend: WatchlistBackend | None = None) -> None:
        self._status = status
        self._backend = backend

    @classmethod
    async def restore(
        cls, backend: WatchlistBackend | None, cron_schedule: str
    ) -> "RunStatusTracker":
        schedule = {
            "state": RunState.idle,
            "cron_schedule": cron_schedule,
            "timezone": SCHEDULE_TIMEZONE,
            "schedule_description": describe_cron(cron_schedule),
        }
        status = RunStatus(**schedule)

        stored = None
        if backend is not None:
            try:
                stored = await backend.load_status()
            except BackendUnavailableError as exc:
                logger.warning("run_status_load_failed", error=exc.message)

        if stored:
            try:
                previous = RunStatus.model_validate(stored)
            except pydantic.ValidationError:
                logger.warning("run_status_corrupt")
            else:
                status = previous.model_copy(update=schedule)
                logger.info(
                    "run_status_restored",
                    total_attempts=status.total_attempts,
                    last_success=status.last_success,
                )
        return cls(status, backend)

    @property
    def status(self) -> RunStatus:
        return self._status.model_copy()

    def begin(self, trigger: str) -> None:
        self._status.state = RunState.running
        self._status.last_trigger = trigger
        self._status.last_attempt = datetime.now(UTC)
        self._status.total_attempts += 1

    async def succeed(self) -> None:
        self._status.state = RunState.idle
        self._status.last_outcome = RunOutcome.succeeded
        self._status.last_success = datetime.now(UTC)
        self._status.last_error = None
        self._status.total_success += 1
        await self._save()

    async def fail(self, reason: str) -> None:
        self._status.state = RunState.idle
        self._status.last_outcome = RunOutcome.failed
        self._status.last_error = reason
        self._status.total_failures += 1
        await self._save()

    async def _save(self) -> None:
        if self._backend is None:
            return
        try:
            await self._backend.save_status(self._status.model_dump(mode="json", by_alias=True))
        except BackendUnavailableError as exc:
            logger.warning("run_status_save_failed", error=exc.message)
