"""Gym and work streaks, plus day bucketing."""
from dataclasses import dataclass
from datetime import datetime

from trackboard.domain.common.calendar import add_days, day_key
from trackboard.domain.tracker.buckets import bucket_by_day, group_by_day, month_buckets, trailing_window
from trackboard.domain.tracker.streaks import gym_streak, work_streak

TODAY = datetime(2024, 6, 15)


@dataclass
class Rec:
    date: datetime
    completed: bool = True
    label: str = ""


def _days_ago(n, completed=True, label=""):
    return Rec(date=add_days(TODAY, -n), completed=completed, label=label)


# ------------------------------------------------------------------
# Gym streak
# ------------------------------------------------------------------
def test_gym_streak_empty():
    assert gym_streak([], TODAY) == 0


def test_gym_streak_three_consecutive_days_ending_today():
    assert gym_streak([_days_ago(0), _days_ago(1), _days_ago(2)], TODAY) == 3


def test_gym_streak_can_end_yesterday():
    assert gym_streak([_days_ago(1), _days_ago(2)], TODAY) == 2


def test_gym_streak_broken_when_latest_is_two_days_old():
    assert gym_streak([_days_ago(2), _days_ago(3)], TODAY) == 0


def test_gym_streak_stops_at_first_gap():
    assert gym_streak([_days_ago(0), _days_ago(2), _days_ago(3)], TODAY) == 1


def test_gym_streak_ignores_incomplete_and_future_logs():
    logs = [_days_ago(-1), _days_ago(0), _days_ago(1, completed=False), _days_ago(2)]
    assert gym_streak(logs, TODAY) == 1


def test_gym_streak_input_order_does_not_matter():
    logs = [_days_ago(2), _days_ago(0), _days_ago(1)]
    assert gym_streak(logs, TODAY) == 3


# ------------------------------------------------------------------
# Work streak
# ------------------------------------------------------------------
def test_work_streak_empty():
    assert work_streak([], TODAY) == 0


def test_work_streak_first_qualifying_day_is_not_counted():
    tasks = [_days_ago(n) for n in range(5)]
    assert work_streak(tasks, TODAY) == 4


def test_work_streak_single_day_is_zero():
    assert work_streak([_days_ago(0)], TODAY) == 0


def test_work_streak_empty_day_is_neutral():
    tasks = [_days_ago(0), _days_ago(2), _days_ago(3)]
    assert work_streak(tasks, TODAY) == 2


def test_work_streak_below_threshold_breaks():
    tasks = [
        _days_ago(0), _days_ago(1),
        _days_ago(2), _days_ago(2, completed=False),
        _days_ago(3), _days_ago(4),
    ]
    assert work_streak(tasks, TODAY) == 1


def test_work_streak_two_of_three_does_not_qualify():
    tasks = [_days_ago(0), _days_ago(1), _days_ago(1), _days_ago(1, completed=False)]
    assert work_streak(tasks, TODAY) == 0


def test_work_streak_three_of_four_qualifies():
    tasks = [_days_ago(0), _days_ago(1), _days_ago(1), _days_ago(1), _days_ago(1, completed=False)]
    assert work_streak(tasks, TODAY) == 1


def test_work_streak_stops_skipping_after_thirty_days():
    tasks = [_days_ago(0), _days_ago(31), _days_ago(32)]
    assert work_streak(tasks, TODAY) == 0


def test_work_streak_skips_up_to_thirty_days():
    tasks = [_days_ago(0), _days_ago(30)]
    assert work_streak(tasks, TODAY) == 1


def test_work_streak_ignores_future_tasks():
    tasks = [_days_ago(-1, completed=False), _days_ago(0), _days_ago(1)]
    assert work_streak(tasks, TODAY) == 1


def test_work_streak_hard_stop_at_365_days():
    tasks = [_days_ago(n) for n in range(500)]
    assert work_streak(tasks, TODAY) == 365


# ------------------------------------------------------------------
# Buckets
# ------------------------------------------------------------------
def test_bucket_by_day_has_every_day():
    start = add_days(TODAY, -29)
    buckets = bucket_by_day([_days_ago(0), _days_ago(5), _days_ago(29), _days_ago(40)], start, TODAY)
    assert len(buckets) == 30
    assert sum(1 for v in buckets.values() if v is None) == 27
    assert list(buckets)[0] == day_key(start)
    assert list(buckets)[-1] == day_key(TODAY)


def test_bucket_by_day_later_record_wins():
    buckets = bucket_by_day([_days_ago(0, label="first"), _days_ago(0, label="second")], TODAY, TODAY)
    assert buckets[day_key(TODAY)].label == "second"


def test_group_by_day_keeps_everything():
    groups = group_by_day([_days_ago(0, label="a"), _days_ago(0, label="b"), _days_ago(1)], add_days(TODAY, -1), TODAY)
    assert [r.label for r in groups[day_key(TODAY)]] == ["a", "b"]
    assert len(groups[day_key(add_days(TODAY, -1))]) == 1


def test_month_buckets_cover_whole_month():
    buckets = month_buckets([Rec(date=datetime(2024, 2, 29))], 2024, 2)
    assert len(buckets) == 29
    assert buckets["2024-02-29"] is not None
    assert buckets["2024-02-01"] is None


def test_trailing_window_is_oldest_first_with_labels():
    window = trailing_window([_days_ago(0)], TODAY, 7)
    assert len(window) == 7
    assert window[0].day_key == day_key(add_days(TODAY, -6))
    assert window[-1].date == TODAY
    assert window[-1].weekday == "Sat"
    assert window[-1].record is not None
    assert window[0].record is None
