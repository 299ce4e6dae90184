import datetime
from typing import Optional

import pytz

from finpulse.config import timezone_name


def local_tz():
    return pytz.timezone(timezone_name())


def today() -> datetime.date:
    return datetime.datetime.now(local_tz()).date()


def now() -> datetime.datetime:
    return datetime.datetime.now(local_tz())


def age_from_dob(dob: Optional[datetime.date], on: datetime.date) -> Optional[int]:
    # Calendar-year difference, the same way ages are shown to users.
    if dob is None:
        return None
    return on.year - dob.year


def whole_years_between(start: datetime.date, end: datetime.date) -> int:
    if end <= start:
        return 0
    years = end.year - start.year
    if (end.month, end.day) < (start.month, start.day):
        years -= 1
    return max(0, years)


def age_at(current_age: float, snapshot_date: datetime.date, on: datetime.date) -> float:
    return max(0.0, current_age - whole_years_between(snapshot_date, on))


def localize(dt: datetime.datetime) -> datetime.datetime:
    """Naive datetimes are read as local time in the configured TZ."""
    if dt.tzinfo is None:
        return local_tz().localize(dt)
    return dt
