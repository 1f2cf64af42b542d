"""Local-date helpers shared by every component.

A calendar day is represented by the naive datetime of its local midnight and
is always built from local fields (year, month, day). Never derive a day from
a UTC ISO string: near midnight that shifts the date by one.
"""
from __future__ import annotations
import calendar
import re
from datetime import date, datetime, timedelta
from typing import Iterator, Tuple, Union

from dateutil.relativedelta import relativedelta

from trackboard.domain.common.errors import InvalidArgument

Instant = Union[datetime, date]

# Indexed by datetime.weekday() (Monday == 0)
WEEKDAY_LABELS = ("Mon", "Tue", "Wed", "Thu", "Fri", "Sat", "Sun")

_DAY_KEY_RE = re.compile(r"^(\d{4})-(\d{1,2})-(\d{1,2})$")


def to_local(instant: Instant) -> datetime:
    """Naive local datetime for any date, naive datetime or aware datetime."""
    if isinstance(instant, datetime):
        if instant.tzinfo is not None:
            return instant.astimezone().replace(tzinfo=None)
        return instant
    if isinstance(instant, date):
        return datetime(instant.year, instant.month, instant.day)
    raise InvalidArgument(f"Expected a date or datetime, got {type(instant).__name__}.")


def local_day_start(year: int, month: int, day: int) -> datetime:
    """Local midnight of the given calendar date."""
    try:
        return datetime(int(year), int(month), int(day))
    except (TypeError, ValueError) as e:
        raise InvalidArgument(f"Invalid calendar date {year}-{month}-{day}: {e}.") from e


def start_of_day(instant: Instant) -> datetime:
    return to_local(instant).replace(hour=0, minute=0, second=0, microsecond=0)


def day_key(instant: Instant) -> str:
    """'YYYY-MM-DD' from the instant's local calendar fields."""
    local = to_local(instant)
    return f"{local.year:04d}-{local.month:02d}-{local.day:02d}"


def parse_day_key(value: str) -> datetime:
    """Parse 'YYYY-MM-DD' as local midnight."""
    match = _DAY_KEY_RE.match(value.strip()) if isinstance(value, str) else None
    if not match:
        raise InvalidArgument(f"Invalid date '{value}'. Expected YYYY-MM-DD.")
    return local_day_start(*match.groups())


def add_days(instant: Instant, n: int) -> datetime:
    return start_of_day(instant) + timedelta(days=n)


def days_between(a: Instant, b: Instant) -> int:
    """Whole days from a to b (negative when b is earlier)."""
    return (start_of_day(b) - start_of_day(a)).days


def add_months(instant: Instant, n: int) -> datetime:
    """Shift by whole months, clamping the day to the target month's length."""
    return start_of_day(instant) + relativedelta(months=n)


def month_bounds(year: int, month: int) -> Tuple[datetime, datetime]:
    """(first day, last day) of a month, both at local midnight."""
    first = local_day_start(year, month, 1)
    last = local_day_start(year, month, calendar.monthrange(first.year, first.month)[1])
    return first, last


def iter_days(start: Instant, end: Instant) -> Iterator[datetime]:
    """Every day from start to end inclusive."""
    cursor = start_of_day(start)
    last = start_of_day(end)
    while cursor <= last:
        yield cursor
        cursor += timedelta(days=1)


def weekday_label(instant: Instant) -> str:
    return WEEKDAY_LABELS[to_local(instant).weekday()]
