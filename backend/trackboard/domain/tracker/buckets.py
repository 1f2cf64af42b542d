"""Calendar bucketing: every day in a range, overlaid with the records that fall on it."""
from __future__ import annotations
from dataclasses import dataclass, field
from datetime import datetime
from typing import Any, Dict, Iterable, List, Optional

from trackboard.domain.common.calendar import (
    Instant,
    add_days,
    day_key,
    iter_days,
    month_bounds,
    weekday_label,
)


@dataclass
class DayBucket:
    date: datetime
    day_key: str
    weekday: str
    records: List[Any] = field(default_factory=list)

    @property
    def record(self) -> Optional[Any]:
        """Last record of the day, for one-per-day collections."""
        return self.records[-1] if self.records else None


def bucket_by_day(records: Iterable, start: Instant, end: Instant) -> Dict[str, Optional[Any]]:
    """
    day_key -> record (or None) for every day from start to end inclusive.
    Records outside the range are ignored; a later record for the same day
    replaces an earlier one.
    """
    buckets: Dict[str, Optional[Any]] = {day_key(day): None for day in iter_days(start, end)}
    for record in records:
        key = day_key(record.date)
        if key in buckets:
            buckets[key] = record
    return buckets


def group_by_day(records: Iterable, start: Instant, end: Instant) -> Dict[str, List[Any]]:
    """Like bucket_by_day but keeps every record of a day, in input order."""
    groups: Dict[str, List[Any]] = {day_key(day): [] for day in iter_days(start, end)}
    for record in records:
        key = day_key(record.date)
        if key in groups:
            groups[key].append(record)
    return groups


def month_buckets(records: Iterable, year: int, month: int) -> Dict[str, Optional[Any]]:
    first, last = month_bounds(year, month)
    return bucket_by_day(records, first, last)


def trailing_window(records: Iterable, today: Instant, days: int) -> List[DayBucket]:
    """The last `days` days ending today, oldest first, each with its weekday label."""
    start = add_days(today, -(days - 1))
    groups = group_by_day(records, start, today)
    return [
        DayBucket(date=day, day_key=day_key(day), weekday=weekday_label(day), records=groups[day_key(day)])
        for day in iter_days(start, today)
    ]
