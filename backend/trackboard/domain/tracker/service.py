"""Domain service — pure task / workout operations and dashboard rollups."""
from __future__ import annotations
import uuid
from dataclasses import asdict
from datetime import datetime, timezone
from typing import Iterable, List, Optional, Tuple

from trackboard.domain.common.calendar import day_key, parse_day_key, start_of_day, to_local
from trackboard.domain.common.errors import NotFound
from trackboard.domain.common.result import Result
from trackboard.domain.tracker.buckets import trailing_window
from trackboard.domain.tracker.models import (
    ExerciseSet,
    PerformedExercise,
    Task,
    TemplateExercise,
    WorkoutLog,
    WorkoutTemplate,
)
from trackboard.domain.tracker.rules import (
    validate_description,
    validate_exercise,
    validate_priority,
    validate_task_title,
    validate_template_name,
    validate_tracker_date,
)

WEEKLY_WINDOW_DAYS = 7
MONTHLY_WINDOW_DAYS = 30
TASK_UPDATABLE_FIELDS = ("title", "description", "date", "completed", "priority", "order")
TEMPLATE_EXERCISE_FIELDS = (
    "name",
    "type",
    "category",
    "default_sets",
    "default_reps",
    "default_weight",
    "default_time",
)


def _now_iso() -> str:
    return datetime.now(timezone.utc).isoformat()


def _new_id() -> str:
    return str(uuid.uuid4())


def _as_day(value) -> datetime:
    if isinstance(value, str):
        return parse_day_key(value)
    return start_of_day(value)


def _performed_exercise(data: dict) -> PerformedExercise:
    return PerformedExercise(
        name=data["name"].strip(),
        type=data["type"],
        sets=[ExerciseSet(reps=s.get("reps"), weight=s.get("weight")) for s in data.get("sets") or []],
        time=data.get("time"),
        notes=(data.get("notes") or "").strip(),
    )


def _template_exercise(data: dict, order: int) -> TemplateExercise:
    return TemplateExercise(
        name=data["name"].strip(),
        type=data["type"],
        category=data.get("category") or "main",
        order=order,
        default_sets=data.get("default_sets"),
        default_reps=data.get("default_reps"),
        default_weight=data.get("default_weight"),
        default_time=data.get("default_time"),
        id=data.get("id") or _new_id(),
    )


def _find_exercise(template: WorkoutTemplate, exercise_id: str) -> TemplateExercise:
    for exercise in template.exercises:
        if exercise.id == exercise_id:
            return exercise
    raise NotFound("Exercise not found")


class TrackerDomainService:
    """Pure domain operations, no I/O. Validation failures come back as Result.fail."""

    # ------------------------------------------------------------------
    # Tasks
    # ------------------------------------------------------------------
    def create_task(self, user_id: str, data: dict, same_day_tasks: Iterable[Task], today: datetime) -> Result[Task]:
        """New task ranked after every task already on its day (order 0 for the first)."""
        title = validate_task_title(data.get("title"))
        if not title.is_success:
            return Result.fail(title.error)
        description = validate_description(data.get("description"))
        if not description.is_success:
            return Result.fail(description.error)
        priority = validate_priority(data.get("priority"))
        if not priority.is_success:
            return Result.fail(priority.error)
        date = validate_tracker_date(_as_day(data.get("date")), today)
        if not date.is_success:
            return Result.fail(date.error)

        orders = [task.order for task in same_day_tasks]
        now = _now_iso()
        return Result.ok(
            Task(
                id=_new_id(),
                user_id=user_id,
                title=title.value,
                description=description.value,
                date=date.value,
                completed=bool(data.get("completed", False)),
                priority=priority.value,
                order=max(orders) + 1 if orders else 0,
                created_at=now,
                updated_at=now,
            )
        )

    def update_task(self, task: Task, changes: dict, today: datetime) -> Result[Task]:
        """Apply a partial update; unknown keys are ignored."""
        for key in TASK_UPDATABLE_FIELDS:
            if key not in changes or changes[key] is None:
                continue
            value = changes[key]
            if key == "title":
                checked = validate_task_title(value)
            elif key == "description":
                checked = validate_description(value)
            elif key == "priority":
                checked = validate_priority(value)
            elif key == "date":
                checked = validate_tracker_date(_as_day(value), today)
            elif key == "completed":
                checked = Result.ok(bool(value))
            else:
                checked = Result.ok(int(value))
            if not checked.is_success:
                return Result.fail(checked.error)
            setattr(task, key, checked.value)

        task.updated_at = _now_iso()
        return Result.ok(task)

    def swap_order(self, first: Task, second: Task) -> Tuple[Task, Task]:
        first.order, second.order = second.order, first.order
        now = _now_iso()
        first.updated_at = now
        second.updated_at = now
        return first, second

    def today_counts(self, tasks: Iterable[Task], today: datetime) -> dict:
        key = day_key(today)
        todays = [task for task in tasks if day_key(task.date) == key]
        return {"assigned": len(todays), "completed": sum(1 for task in todays if task.completed)}

    def weekly_stats(self, tasks: Iterable[Task], today: datetime) -> List[dict]:
        """Assigned/completed counts for the last 7 days, oldest first."""
        return [
            {
                "date": bucket.day_key,
                "day": bucket.weekday,
                "assigned": len(bucket.records),
                "completed": sum(1 for task in bucket.records if task.completed),
            }
            for bucket in trailing_window(tasks, today, WEEKLY_WINDOW_DAYS)
        ]

    # ------------------------------------------------------------------
    # Workout templates
    # ------------------------------------------------------------------
    def _template_exercises(self, raw_exercises) -> Result[List[TemplateExercise]]:
        exercises: List[TemplateExercise] = []
        next_order: dict = {}
        for raw in raw_exercises or []:
            checked = validate_exercise(raw)
            if not checked.is_success:
                return Result.fail(checked.error)
            # order is dense within each category
            category = raw.get("category") or "main"
            exercises.append(_template_exercise(raw, next_order.get(category, 0)))
            next_order[category] = next_order.get(category, 0) + 1
        return Result.ok(exercises)

    def create_template(self, data: dict) -> Result[WorkoutTemplate]:
        name = validate_template_name(data.get("name"))
        if not name.is_success:
            return Result.fail(name.error)
        exercises = self._template_exercises(data.get("exercises"))
        if not exercises.is_success:
            return Result.fail(exercises.error)

        now = _now_iso()
        return Result.ok(
            WorkoutTemplate(id=_new_id(), name=name.value, exercises=exercises.value, created_at=now, updated_at=now)
        )

    def update_template(self, template: WorkoutTemplate, changes: dict) -> Result[WorkoutTemplate]:
        """Rename and/or replace the exercise list; None leaves a field as it is."""
        if changes.get("name") is not None:
            name = validate_template_name(changes["name"])
            if not name.is_success:
                return Result.fail(name.error)
            template.name = name.value
        if changes.get("exercises") is not None:
            exercises = self._template_exercises(changes["exercises"])
            if not exercises.is_success:
                return Result.fail(exercises.error)
            template.exercises = exercises.value
        template.updated_at = _now_iso()
        return Result.ok(template)

    def add_template_exercise(self, template: WorkoutTemplate, data: dict) -> Result[TemplateExercise]:
        """Append one exercise, ranked after the others of its category."""
        checked = validate_exercise(data)
        if not checked.is_success:
            return Result.fail(checked.error)
        category = data.get("category") or "main"
        orders = [e.order for e in template.exercises if (e.category or "main") == category]
        exercise = _template_exercise(data, max(orders) + 1 if orders else 0)
        template.exercises.append(exercise)
        template.updated_at = _now_iso()
        return Result.ok(exercise)

    def update_template_exercise(
        self,
        template: WorkoutTemplate,
        exercise_id: str,
        changes: dict,
    ) -> Result[TemplateExercise]:
        exercise = _find_exercise(template, exercise_id)
        merged = asdict(exercise)
        merged.update({k: v for k, v in changes.items() if k in TEMPLATE_EXERCISE_FIELDS and v is not None})
        checked = validate_exercise(merged)
        if not checked.is_success:
            return Result.fail(checked.error)

        for key in TEMPLATE_EXERCISE_FIELDS:
            setattr(exercise, key, merged[key])
        exercise.name = exercise.name.strip()
        template.updated_at = _now_iso()
        return Result.ok(exercise)

    def remove_template_exercise(self, template: WorkoutTemplate, exercise_id: str) -> TemplateExercise:
        exercise = _find_exercise(template, exercise_id)
        template.exercises.remove(exercise)
        template.updated_at = _now_iso()
        return exercise

    # ------------------------------------------------------------------
    # Workout logs
    # ------------------------------------------------------------------
    def _performed_exercises(self, raw_exercises) -> Result[List[PerformedExercise]]:
        exercises: List[PerformedExercise] = []
        for raw in raw_exercises or []:
            checked = validate_exercise(raw)
            if not checked.is_success:
                return Result.fail(checked.error)
            exercises.append(_performed_exercise(raw))
        return Result.ok(exercises)

    def upsert_workout_log(
        self,
        existing: Optional[WorkoutLog],
        user_id: str,
        data: dict,
        today: datetime,
    ) -> Result[WorkoutLog]:
        """
        One log per (user, day). An existing log gets the new template and
        exercises; its completed flag only changes when one is supplied.
        """
        date = validate_tracker_date(_as_day(data.get("date")), today, label="Gym log")
        if not date.is_success:
            return Result.fail(date.error)
        exercises = self._performed_exercises(data.get("exercises"))
        if not exercises.is_success:
            return Result.fail(exercises.error)

        completed = data.get("completed")
        now = _now_iso()
        if existing is not None:
            existing.workout_template_id = data.get("workout_template_id")
            existing.exercises = exercises.value
            if completed is not None:
                existing.completed = bool(completed)
            existing.updated_at = now
            return Result.ok(existing)

        return Result.ok(
            WorkoutLog(
                id=_new_id(),
                user_id=user_id,
                date=date.value,
                workout_template_id=data.get("workout_template_id"),
                exercises=exercises.value,
                completed=bool(completed),
                created_at=now,
                updated_at=now,
            )
        )

    def update_workout_log(self, log: WorkoutLog, changes: dict, today: datetime) -> Result[WorkoutLog]:
        """Partial update of an existing log; None leaves a field as it is."""
        if changes.get("date") is not None:
            date = validate_tracker_date(_as_day(changes["date"]), today, label="Gym log")
            if not date.is_success:
                return Result.fail(date.error)
            log.date = date.value
        if changes.get("exercises") is not None:
            exercises = self._performed_exercises(changes["exercises"])
            if not exercises.is_success:
                return Result.fail(exercises.error)
            log.exercises = exercises.value
        if changes.get("workout_template_id") is not None:
            log.workout_template_id = changes["workout_template_id"]
        if changes.get("completed") is not None:
            log.completed = bool(changes["completed"])
        log.updated_at = _now_iso()
        return Result.ok(log)

    def month_count(self, logs: Iterable[WorkoutLog], today: datetime) -> int:
        """Completed logs in today's calendar month."""
        today = to_local(today)
        return sum(
            1
            for log in logs
            if log.completed and log.date.year == today.year and log.date.month == today.month
        )

    def monthly_stats(self, logs: Iterable[WorkoutLog], today: datetime) -> List[dict]:
        """Per-day workout summary for the last 30 days, oldest first."""
        stats = []
        for bucket in trailing_window(logs, today, MONTHLY_WINDOW_DAYS):
            log = bucket.record
            stats.append({
                "date": bucket.day_key,
                "day": f"{bucket.weekday} {bucket.date.day}",
                "completed": bool(log and log.completed),
                "workout_name": log.workout_name if log else None,
                "assigned": log is not None,
            })
        return stats
