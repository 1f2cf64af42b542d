"""Local-date helpers."""
from datetime import date, datetime, timedelta, timezone

import pytest

from trackboard.domain.common.calendar import (
    add_days,
    add_months,
    day_key,
    days_between,
    iter_days,
    local_day_start,
    month_bounds,
    parse_day_key,
    start_of_day,
    to_local,
    weekday_label,
)
from trackboard.domain.common.errors import InvalidArgument


def test_day_key_uses_local_fields():
    assert day_key(datetime(2024, 3, 5, 23, 59)) == "2024-03-05"
    assert day_key(date(2024, 12, 1)) == "2024-12-01"


def test_day_key_of_aware_instant_is_its_local_day():
    instant = datetime(2024, 6, 1, 12, 0, tzinfo=timezone.utc)
    assert day_key(instant) == day_key(instant.astimezone())


def test_parse_day_key_round_trips_to_midnight():
    parsed = parse_day_key("2024-02-29")
    assert parsed == datetime(2024, 2, 29)
    assert day_key(parsed) == "2024-02-29"


@pytest.mark.parametrize("value", ["2024/01/01", "", "2023-02-29", "tomorrow", None])
def test_parse_day_key_rejects_garbage(value):
    with pytest.raises(InvalidArgument):
        parse_day_key(value)


def test_local_day_start_rejects_impossible_date():
    with pytest.raises(InvalidArgument):
        local_day_start(2024, 13, 1)


def test_to_local_rejects_non_dates():
    with pytest.raises(InvalidArgument):
        to_local("2024-01-01")


def test_start_of_day_strips_time():
    assert start_of_day(datetime(2024, 1, 2, 17, 30, 12)) == datetime(2024, 1, 2)


def test_add_days_crosses_month_and_year():
    assert add_days(datetime(2024, 12, 31, 10), 1) == datetime(2025, 1, 1)
    assert add_days(datetime(2024, 3, 1), -1) == datetime(2024, 2, 29)


def test_days_between_ignores_time_of_day():
    assert days_between(datetime(2024, 1, 1, 23), datetime(2024, 1, 2, 1)) == 1
    assert days_between(datetime(2024, 1, 10), datetime(2024, 1, 3)) == -7


def test_add_months_clamps_day():
    assert add_months(datetime(2024, 1, 31), 1) == datetime(2024, 2, 29)
    assert add_months(datetime(2024, 11, 30), 3) == datetime(2025, 2, 28)
    assert add_months(datetime(2024, 2, 15), -3) == datetime(2023, 11, 15)
    assert add_months(datetime(2024, 3, 31), -1) == datetime(2024, 2, 29)
    assert add_months(datetime(2023, 12, 31, 17, 45), 2) == datetime(2024, 2, 29)


def test_month_bounds():
    assert month_bounds(2024, 2) == (datetime(2024, 2, 1), datetime(2024, 2, 29))
    assert month_bounds(2023, 12) == (datetime(2023, 12, 1), datetime(2023, 12, 31))


def test_iter_days_is_inclusive():
    days = list(iter_days(datetime(2024, 1, 30), datetime(2024, 2, 2)))
    assert [day_key(d) for d in days] == ["2024-01-30", "2024-01-31", "2024-02-01", "2024-02-02"]
    assert all(b - a == timedelta(days=1) for a, b in zip(days, days[1:]))


def test_weekday_label():
    assert weekday_label(datetime(2024, 1, 1)) == "Mon"
    assert weekday_label(datetime(2024, 1, 7)) == "Sun"
