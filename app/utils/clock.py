# app/utils/clock.py

from datetime import date, datetime, time, timedelta, timezone, tzinfo
from zoneinfo import ZoneInfo

from app.core.config import APP_TIMEZONE


def local_tz() -> tzinfo:
    """Zone that defines a calendar day: APP_TIMEZONE, else the server's own."""
    if APP_TIMEZONE:
        return ZoneInfo(APP_TIMEZONE)
    return datetime.now().astimezone().tzinfo


def local_today(now: datetime | None = None) -> date:
    now = now or datetime.now(timezone.utc)
    return now.astimezone(local_tz()).date()


def day_bounds(day: date) -> tuple[datetime, datetime]:
    """[start of day, start of next day) as UTC datetimes."""
    tz = local_tz()
    start = datetime.combine(day, time.min, tzinfo=tz)
    end = datetime.combine(day + timedelta(days=1), time.min, tzinfo=tz)
    return start.astimezone(timezone.utc), end.astimezone(timezone.utc)


def to_local_date(ts: datetime) -> date:
    # SQLite hands back naive values; they were written as UTC
    if ts.tzinfo is None:
        ts = ts.replace(tzinfo=timezone.utc)
    return ts.astimezone(local_tz()).date()
