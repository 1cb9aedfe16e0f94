"""
Server clock helpers.

The server reads every user-supplied timestamp in a single fixed UTC offset
("server time"). Rows store UTC-naive datetimes; responses render them back in
server time.
"""
from datetime import datetime, timedelta, timezone

from fintrack.core.config import settings


SERVER_TZ = timezone(timedelta(hours=settings.SERVER_UTC_OFFSET_HOURS))


def server_now() -> datetime:
    """Current time as an aware datetime in server time."""
    return datetime.now(timezone.utc).astimezone(SERVER_TZ)


def to_server_time(dt: datetime) -> datetime:
    """Interpret ``dt`` in server time. Naive values are taken to already be server time."""
    if dt.tzinfo is None:
        return dt.replace(tzinfo=SERVER_TZ)
    return dt.astimezone(SERVER_TZ)


def to_storage(dt: datetime) -> datetime:
    """Normalize to a UTC-naive datetime for persistence."""
    return to_server_time(dt).astimezone(timezone.utc).replace(tzinfo=None)


def from_storage(dt):
    if dt is None:
        return None
    return dt.replace(tzinfo=timezone.utc).astimezone(SERVER_TZ)


def seconds_until(dt: datetime, now: datetime = None) -> float:
    now = now or server_now()
    return max((to_server_time(dt) - to_server_time(now)).total_seconds(), 0.0)


def month_bounds(month: int, year: int = None):
    """UTC-naive [start, end) bounds of a server-time calendar month."""
    year = year or server_now().year
    start = datetime(year, month, 1, tzinfo=SERVER_TZ)
    if month == 12:
        end = datetime(year + 1, 1, 1, tzinfo=SERVER_TZ)
    else:
        end = datetime(year, month + 1, 1, tzinfo=SERVER_TZ)
    return to_storage(start), to_storage(end)
