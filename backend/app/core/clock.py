"""Day/week boundaries for check-in periods.

Every instant is normalized to UTC before bucketing, so the same instant
always lands in the same day and week no matter which server handles it.
Weeks start on Sunday.
"""

from datetime import date, datetime, time, timedelta, timezone
from enum import Enum


class Frequency(str, Enum):
    DAILY = "daily"
    WEEKLY = "weekly"


def as_utc(instant: datetime) -> datetime:
    """Attach or convert to UTC. Naive values (as read back from SQLite) are UTC."""
    if instant.tzinfo is None:
        return instant.replace(tzinfo=timezone.utc)
    return instant.astimezone(timezone.utc)


def utc_now() -> datetime:
    return datetime.now(timezone.utc)


def start_of_day(instant: datetime) -> datetime:
    return datetime.combine(as_utc(instant).date(), time.min, tzinfo=timezone.utc)


def start_of_week(instant: datetime) -> datetime:
    day_start = start_of_day(instant)
    # weekday(): Monday=0 .. Sunday=6
    return day_start - timedelta(days=(day_start.weekday() + 1) % 7)


def day_key(instant: datetime) -> str:
    """Stable ``YYYY-MM-DD`` key for the UTC day containing ``instant``."""
    return as_utc(instant).date().isoformat()


def is_same_day(a: datetime, b: datetime) -> bool:
    return day_key(a) == day_key(b)


def is_same_week(a: datetime, b: datetime) -> bool:
    return start_of_week(a) == start_of_week(b)


def period_start(instant: datetime, frequency: Frequency) -> date:
    """First day of the streak period (day or week) containing ``instant``."""
    if frequency == Frequency.WEEKLY:
        return start_of_week(instant).date()
    return start_of_day(instant).date()


def period_bounds(instant: datetime, frequency: Frequency) -> tuple[datetime, datetime]:
    """Half-open ``[start, end)`` UTC range of the period containing ``instant``."""
    if frequency == Frequency.WEEKLY:
        start = start_of_week(instant)
        return start, start + timedelta(days=7)
    start = start_of_day(instant)
    return start, start + timedelta(days=1)


def in_same_period(now: datetime, other: datetime | None, frequency: Frequency) -> bool:
    """Whether ``other`` falls in the same day (daily) or week (weekly) as ``now``."""
    if other is None:
        return False
    if frequency == Frequency.WEEKLY:
        return is_same_week(now, other)
    return is_same_day(now, other)
