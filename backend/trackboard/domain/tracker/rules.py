"""Business rules for tasks and workout logs."""
from __future__ import annotations
from datetime import datetime

from trackboard.domain.common.calendar import add_months, day_key, start_of_day
from trackboard.domain.common.result import Result
from trackboard.domain.tracker.models import EXERCISE_CATEGORIES, EXERCISE_TYPES, PRIORITIES

# Tasks and logs may only be dated this many months either side of today
DATE_WINDOW_MONTHS = 3
TITLE_MAX_LENGTH = 200
DESCRIPTION_MAX_LENGTH = 1000
NAME_MAX_LENGTH = 100
NOTES_MAX_LENGTH = 500


def validate_tracker_date(date: datetime, today: datetime, label: str = "Task") -> Result[datetime]:
    day = start_of_day(date)
    earliest = add_months(today, -DATE_WINDOW_MONTHS)
    latest = add_months(today, DATE_WINDOW_MONTHS)
    if day < earliest or day > latest:
        return Result.fail(
            f"{label} date must be within {DATE_WINDOW_MONTHS} months in the past or future "
            f"({day_key(earliest)} .. {day_key(latest)})."
        )
    return Result.ok(day)


def validate_task_title(title) -> Result[str]:
    cleaned = title.strip() if isinstance(title, str) else ""
    if not cleaned:
        return Result.fail("Task 'title' is required and cannot be empty.")
    if len(cleaned) > TITLE_MAX_LENGTH:
        return Result.fail(f"Task 'title' cannot exceed {TITLE_MAX_LENGTH} characters.")
    return Result.ok(cleaned)


def validate_description(description) -> Result[str]:
    cleaned = (description or "").strip()
    if len(cleaned) > DESCRIPTION_MAX_LENGTH:
        return Result.fail(f"Task 'description' cannot exceed {DESCRIPTION_MAX_LENGTH} characters.")
    return Result.ok(cleaned)


def validate_priority(priority) -> Result[str]:
    if priority is None:
        return Result.ok("medium")
    if priority not in PRIORITIES:
        return Result.fail(f"'{priority}' is not a valid priority. Must be one of {list(PRIORITIES)}.")
    return Result.ok(priority)


def validate_template_name(name) -> Result[str]:
    cleaned = (name or "").strip()
    if not cleaned:
        return Result.fail("Workout 'name' is required and cannot be empty.")
    if len(cleaned) > NAME_MAX_LENGTH:
        return Result.fail(f"Workout 'name' cannot exceed {NAME_MAX_LENGTH} characters.")
    return Result.ok(cleaned)


def validate_exercise(data: dict) -> Result[dict]:
    if not (data.get("name") or "").strip():
        return Result.fail("Exercise 'name' is required and cannot be empty.")
    if data.get("type") not in EXERCISE_TYPES:
        return Result.fail(f"Exercise 'type' must be one of {list(EXERCISE_TYPES)}.")
    category = data.get("category")
    if category is not None and category not in EXERCISE_CATEGORIES:
        return Result.fail(f"Exercise 'category' must be one of {list(EXERCISE_CATEGORIES)}.")
    if len(data.get("notes") or "") > NOTES_MAX_LENGTH:
        return Result.fail(f"Exercise 'notes' cannot exceed {NOTES_MAX_LENGTH} characters.")
    return Result.ok(data)
