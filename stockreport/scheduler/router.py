from datetime import UTC, datetime

from fastapi import APIRouter

from stockreport.dependencies import ContextDep, SchedulerDep
from stockreport.scheduler.cron import SCHEDULE_TIMEZONE
from stockreport.scheduler.schemas import HealthResponse, TriggerResponse

router = APIRouter()


@router.post("/email/send", status_code=202, response_model=TriggerResponse)
async def send_report(scheduler: SchedulerDep) -> TriggerResponse:
    scheduler.trigger("manual")
    return TriggerResponse(message="Report generation started. Check /api/health for the result.")


@router.get("/health", response_model=HealthResponse)
async def health(context: ContextDep) -> HealthResponse:
    local_now = datetime.now().astimezone()
    scheduler = context.scheduler
    return HealthResponse(
        status=context.tracker.status,
        server_time=local_now,
        server_time_utc=datetime.now(UTC),
        server_timezone=local_now.tzname() or "unknown",
        schedule_timezone=SCHEDULE_TIMEZONE,
        storage=context.watchlist.backend.name,
        scheduler_running=scheduler.running if scheduler else False,
        next_run=scheduler.next_run() if scheduler else None,
    )
