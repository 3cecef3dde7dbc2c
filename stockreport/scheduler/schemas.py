from datetime import datetime

from stockreport.scheduler.status import RunStatus
from stockreport.schemas import CamelModel


class HealthResponse(CamelModel):
    success: bool = True
    status: RunStatus
    server_time: datetime
    server_time_utc: datetime
    server_timezone: str
    schedule_timezone: str
    storage: str
    scheduler_running: bool
    next_run: datetime | None = None


class TriggerResponse(CamelModel):
    success: bool = True
    message: str
