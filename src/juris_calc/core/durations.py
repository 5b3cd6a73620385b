"""Legal duration arithmetic.

Durations follow the forensic convention used by execution courts: a year is
365 days and a month is 30 days. This is not calendar arithmetic and must not
be replaced by it, since every statutory deadline is derived from these day
counts.
"""

from __future__ import annotations

import math
from datetime import date, datetime, time, timedelta
from fractions import Fraction
from zoneinfo import ZoneInfo

DEFAULT_TIMEZONE = "America/Cuiaba"

DAYS_PER_YEAR = 365
DAYS_PER_MONTH = 30


def to_days(years: int = 0, months: int = 0, days: int = 0) -> int:
    return years * DAYS_PER_YEAR + months * DAYS_PER_MONTH + days


def to_local_date(value: date | datetime | str, tz: str = DEFAULT_TIMEZONE) -> date:
    """Return the calendar date of ``value`` in ``tz``.

    Plain dates and ISO date strings are taken as already local. Naive
    datetimes are read as wall-clock time in ``tz``; aware ones are converted.
    """
    if isinstance(value, str):
        text = value.strip()
        if len(text) == 10:
            return date.fromisoformat(text)
        value = datetime.fromisoformat(text.replace("Z", "+00:00"))

    if isinstance(value, datetime):
        zone = ZoneInfo(tz)
        if value.tzinfo is None:
            return value.replace(tzinfo=zone).date()
        return value.astimezone(zone).date()

    return value


def add_days(value: date | datetime | str, days: int, tz: str = DEFAULT_TIMEZONE) -> date:
    start = datetime.combine(to_local_date(value, tz), time.min, tzinfo=ZoneInfo(tz))
    return (start + timedelta(days=days)).date()


def days_between(start: date, end: date) -> int:
    return (end - start).days


def round_days(value: Fraction | int) -> int:
    """Round a fractional day count half up to whole days."""
    return math.floor(Fraction(value) + Fraction(1, 2))


def today(tz: str = DEFAULT_TIMEZONE) -> date:
    return datetime.now(ZoneInfo(tz)).date()
