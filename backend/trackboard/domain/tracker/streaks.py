"""Streak algorithms over time-stamped records already filtered to one user.

Every function takes `today` explicitly. Records only need `date` and
`completed` attributes; empty input is a valid answer (0), never an error.
"""
from __future__ import annotations
from typing import Dict, Iterable, List

from trackboard.domain.common.calendar import Instant, add_days, day_key, days_between, start_of_day

WORK_STREAK_THRESHOLD = 0.75
# Empty days may be skipped until the cursor is this far behind today
SKIP_LOOKBACK_DAYS = 30
# Absolute bound on how far back any walk goes
MAX_LOOKBACK_DAYS = 365


def gym_streak(logs: Iterable, today: Instant) -> int:
    """
    Consecutive days with a completed log, counted back from the latest one.

    The latest completed day must be today or yesterday, otherwise the streak
    is already broken. From there each earlier day must have a completed log;
    the first missing day ends the count.
    """
    today = start_of_day(today)
    yesterday = add_days(today, -1)

    days: List = sorted(
        (start_of_day(log.date) for log in logs if log.completed and start_of_day(log.date) <= today),
        reverse=True,
    )
    if not days:
        return 0

    most_recent = days[0]
    if most_recent < yesterday:
        return 0

    streak = 0
    expected = most_recent
    for day in days:
        if day == expected:
            streak += 1
            expected = add_days(expected, -1)
        elif day < expected:
            break
    return streak


def _daily_counts(tasks: Iterable, today) -> Dict[str, List[int]]:
    counts: Dict[str, List[int]] = {}
    for task in tasks:
        if start_of_day(task.date) > today:
            continue
        assigned_completed = counts.setdefault(day_key(task.date), [0, 0])
        assigned_completed[0] += 1
        if task.completed:
            assigned_completed[1] += 1
    return counts


def work_streak(tasks: Iterable, today: Instant) -> int:
    """
    Days with at least 75% of their tasks completed, walking back from today.

    - A day without tasks is skipped: it neither breaks nor extends the
      streak. Once skipping has moved the cursor more than 30 days behind
      today the walk ends.
    - The first qualifying day is day 0 and is not counted; every later
      qualifying day adds one.
    - A day below 75% ends the walk.
    - The walk never goes back more than 365 days.
    """
    today = start_of_day(today)
    counts = _daily_counts(tasks, today)
    if not counts:
        return 0

    streak = 0
    found_first_qualifying_day = False
    cursor = today

    while True:
        day = counts.get(day_key(cursor))

        if day is None:
            cursor = add_days(cursor, -1)
            if days_between(cursor, today) > SKIP_LOOKBACK_DAYS:
                break
            continue

        assigned, completed = day
        if completed / assigned >= WORK_STREAK_THRESHOLD:
            if found_first_qualifying_day:
                streak += 1
            found_first_qualifying_day = True
            cursor = add_days(cursor, -1)
        else:
            break

        if days_between(cursor, today) > MAX_LOOKBACK_DAYS:
            break

    return streak
