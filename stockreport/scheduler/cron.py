from apscheduler.triggers.cron import CronTrigger

from stockreport.exceptions import ConfigurationError

SCHEDULE_TIMEZONE = "UTC"

_DAY_NAMES = ("Sunday", "Monday", "Tuesday", "Wednesday", "Thursday", "Friday", "Saturday")
_DAY_ALIASES = {name[:3].lower(): number for number, name in enumerate(_DAY_NAMES)}
# APScheduler counts weekdays from Monday, so cron day numbers are passed by name.
_TRIGGER_DAYS = ("sun", "mon", "tue", "wed", "thu", "fri", "sat")


def _day_number(token: str, allow_seven: bool = False) -> int:
    token = token.strip().lower()
    if token in _DAY_ALIASES:
        return _DAY_ALIASES[token]
    value = int(token)
    if not 0 <= value <= 7:
        raise ValueError(f"day of week out of range: {token}")
    if value == 7 and not allow_seven:
        return 0
    return value


def expand_weekdays(field: str) -> list[int]:
    """Expand a cron day-of-week field into sorted day numbers (0 = Sunday)."""
    days: set[int] = set()
    for part in field.split(","):
        step = 1
        if "/" in part:
            part, raw_step = part.split("/", 1)
            step = int(raw_step)
            if step < 1:
                raise ValueError(f"invalid step: {raw_step}")

        if part == "*":
            start, end = 0, 6
        elif "-" in part:
            low, high = part.split("-", 1)
            start, end = _day_number(low), _day_number(high, allow_seven=True)
            if start > end:
                raise ValueError(f"invalid day range: {part}")
        else:
            start = _day_number(part)
            end = 6 if step > 1 else start

        days.update(day % 7 for day in range(start, end + 1, step))
    return sorted(days)


def parse_cron(expression: str) -> CronTrigger:
    """Build a UTC trigger from a standard 5-field cron expression."""
    fields = expression.split()
    if len(fields) != 5:
        raise ConfigurationError(
            f"Invalid cron schedule '{expression}': expected 5 fields, got {len(fields)}"
        )
    minute, hour, day, month, day_of_week = fields
    try:
        if day_of_week != "*":
            day_of_week = ",".join(_TRIGGER_DAYS[d] for d in expand_weekdays(day_of_week))
        return CronTrigger(
            minute=minute,
            hour=hour,
            day=day,
            month=month,
            day_of_week=day_of_week,
            timezone=SCHEDULE_TIMEZONE,
        )
    except ValueError as exc:
        raise ConfigurationError(f"Invalid cron schedule '{expression}': {exc}") from exc


def describe_cron(expression: str) -> str:
    """Human readable form of the common daily/weekday schedules."""
    fallback = f"cron '{expression}' ({SCHEDULE_TIMEZONE})"
    fields = expression.split()
    if len(fields) != 5:
        return fallback

    minute, hour, day, month, day_of_week = fields
    if not (minute.isdigit() and hour.isdigit()) or day != "*" or month != "*":
        return fallback
    if int(minute) > 59 or int(hour) > 23:
        return fallback
    at = f"at {int(hour):02d}:{int(minute):02d} {SCHEDULE_TIMEZONE}"

    try:
        days = expand_weekdays(day_of_week)
    except ValueError:
        return fallback

    if len(days) == 7:
        return f"every day {at}"
    if len(days) == 1:
        return f"every {_DAY_NAMES[days[0]]} {at}"
    if days == list(range(days[0], days[-1] + 1)):
        return f"{_DAY_NAMES[days[0]]} to {_DAY_NAMES[days[-1]]} {at}"
    return f"on {', '.join(_DAY_NAMES[d] for d in days)} {at}"
