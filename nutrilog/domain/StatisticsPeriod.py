"""Statistics period: the trailing window (week, month, custom) statistics are computed over."""
import math
from datetime import datetime, timedelta
from typing import Optional, Tuple

from nutrilog.utilities.constants import PERIOD_DAYS
from nutrilog.utilities.errors import InvalidInputError

DAY = timedelta(days=1)


def local_time(moment: datetime) -> datetime:
    """Naive local wall-clock time; aware timestamps are converted to the local zone first."""
    if moment.tzinfo is not None:
        return moment.astimezone().replace(tzinfo=None)
    return moment


def period_length(period: str) -> int:
    if not isinstance(period, str) or period not in PERIOD_DAYS:
        allowed = ", ".join(PERIOD_DAYS)
        raise InvalidInputError(f"Unsupported period {period!r}; expected one of: {allowed}")
    return PERIOD_DAYS[period]


def count_days(start_date: datetime, end_date: datetime) -> int:
    """Whole days covered by [start_date, end_date), never less than one."""
    return max(1, math.ceil((end_date - start_date) / DAY))


def resolve_period(period: str, now: Optional[datetime] = None) -> Tuple[datetime, datetime, int]:
    """Return (start_date, end_date, total_days) for a period ending at `now`."""
    days = period_length(period)
    end_date = now if now is not None else datetime.now()
    start_date = end_date - timedelta(days=days)
    return start_date, end_date, count_days(start_date, end_date)


__all__ = ["DAY", "local_time", "period_length", "count_days", "resolve_period"]
