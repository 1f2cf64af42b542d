"""Application service for daily tasks, workout templates/logs and their dashboard stats."""
from __future__ import annotations
from datetime import datetime
from typing import Dict, List, Optional, Tuple

from loguru import logger

from trackboard.domain.common.calendar import add_days, day_key, month_bounds, parse_day_key, start_of_day
from trackboard.domain.common.errors import NotFound
from trackboard.domain.common.result import Result
from trackboard.domain.curriculum.rules import validate_user_id
from trackboard.domain.tracker.buckets import group_by_day, month_buckets
from trackboard.domain.tracker.models import Task, WorkoutLog, WorkoutTemplate
from trackboard.domain.tracker.service import MONTHLY_WINDOW_DAYS, TrackerDomainService
from trackboard.domain.tracker.streaks import MAX_LOOKBACK_DAYS, gym_streak, work_streak
from trackboard.persistence.interfaces.task_repository import TaskRepository
from trackboard.persistence.interfaces.workout_repository import WorkoutRepository


def _today(today: Optional[datetime]) -> datetime:
    return start_of_day(today or datetime.now())


class TrackerAppService:
    def __init__(self, tasks: TaskRepository, workouts: WorkoutRepository):
        self._tasks = tasks
        self._workouts = workouts
        self._domain = TrackerDomainService()

    # ------------------------------------------------------------------
    # TASKS
    # ------------------------------------------------------------------
    def create_task(self, user_id: str, data: dict, today: Optional[datetime] = None) -> Result[Task]:
        checked_user = validate_user_id(user_id)
        if not checked_user.is_success:
            return Result.fail(checked_user.error)
        user_id = checked_user.value

        day = data.get("date")
        day = parse_day_key(day) if isinstance(day, str) else day
        same_day = self._tasks.list_for_user(user_id, day, day) if day is not None else []

        result = self._domain.create_task(user_id, data, same_day, _today(today))
        if not result.is_success:
            return Result.fail(result.error)
        self._tasks.save(result.value)
        logger.info(f"Created task {result.value.id} for user {user_id} on {day_key(result.value.date)}")
        return Result.ok(result.value)

    def get_task(self, task_id: str) -> Task:
        task = self._tasks.get_by_id(task_id)
        if task is None:
            raise NotFound("Task not found")
        return task

    def update_task(self, task_id: str, changes: dict, today: Optional[datetime] = None) -> Result[Task]:
        task = self.get_task(task_id)
        result = self._domain.update_task(task, changes, _today(today))
        if not result.is_success:
            return Result.fail(result.error)
        self._tasks.save(result.value)
        logger.debug(f"Updated task {task_id}: {sorted(k for k, v in changes.items() if v is not None)}")
        return Result.ok(result.value)

    def delete_task(self, task_id: str) -> None:
        if not self._tasks.delete(task_id):
            raise NotFound("Task not found")
        logger.info(f"Deleted task {task_id}")

    def list_tasks(
        self,
        user_id: str,
        date: Optional[datetime] = None,
        start: Optional[datetime] = None,
        end: Optional[datetime] = None,
    ) -> List[Task]:
        """One day, an inclusive range, or everything; sorted by date then order."""
        if date is not None:
            return self._tasks.list_for_user(user_id, date, date)
        if start is not None and end is not None:
            return self._tasks.list_for_user(user_id, start, end)
        return self._tasks.list_for_user(user_id)

    def swap_task_order(self, first_id: str, second_id: str) -> Tuple[Task, Task]:
        first = self._tasks.get_by_id(first_id)
        second = self._tasks.get_by_id(second_id)
        if first is None or second is None:
            raise NotFound("Task not found")
        first, second = self._domain.swap_order(first, second)
        self._tasks.save(first)
        self._tasks.save(second)
        return first, second

    def tasks_for_month(self, user_id: str, year: int, month: int) -> Dict[str, List[Task]]:
        """day_key -> tasks, only for days of the month that have any."""
        first, last = month_bounds(year, month)
        groups = group_by_day(self._tasks.list_for_user(user_id, first, last), first, last)
        return {key: tasks for key, tasks in groups.items() if tasks}

    def today_counts(self, user_id: str, today: Optional[datetime] = None) -> dict:
        today = _today(today)
        return self._domain.today_counts(self._tasks.list_for_user(user_id, today, today), today)

    def completed_count(self, user_id: str) -> int:
        return self._tasks.count_completed(user_id)

    def weekly_stats(self, user_id: str, today: Optional[datetime] = None) -> List[dict]:
        today = _today(today)
        tasks = self._tasks.list_for_user(user_id, add_days(today, -6), today)
        return self._domain.weekly_stats(tasks, today)

    def work_streak(self, user_id: str, today: Optional[datetime] = None) -> int:
        today = _today(today)
        # Nothing older than the walk's hard bound can matter
        tasks = self._tasks.list_for_user(user_id, add_days(today, -(MAX_LOOKBACK_DAYS + 1)), today)
        return work_streak(tasks, today)

    # ------------------------------------------------------------------
    # WORKOUT TEMPLATES
    # ------------------------------------------------------------------
    def create_template(self, data: dict) -> Result[WorkoutTemplate]:
        result = self._domain.create_template(data)
        if not result.is_success:
            return Result.fail(result.error)
        self._workouts.save_template(result.value)
        logger.info(f"Created workout template '{result.value.name}' ({result.value.id})")
        return Result.ok(result.value)

    def list_templates(self) -> List[WorkoutTemplate]:
        return self._workouts.list_templates()

    def get_template(self, template_id: str) -> WorkoutTemplate:
        template = self._workouts.get_template(template_id)
        if template is None:
            raise NotFound("Workout template not found")
        return template

    def update_template(self, template_id: str, changes: dict) -> Result[WorkoutTemplate]:
        template = self.get_template(template_id)
        result = self._domain.update_template(template, changes)
        if not result.is_success:
            return Result.fail(result.error)
        self._workouts.save_template(result.value)
        logger.info(f"Updated workout template {template_id}")
        return Result.ok(result.value)

    def add_template_exercise(self, template_id: str, data: dict) -> Result[WorkoutTemplate]:
        template = self.get_template(template_id)
        result = self._domain.add_template_exercise(template, data)
        if not result.is_success:
            return Result.fail(result.error)
        self._workouts.save_template(template)
        logger.info(f"Added exercise '{result.value.name}' to template {template_id}")
        return Result.ok(template)

    def update_template_exercise(self, template_id: str, exercise_id: str, changes: dict) -> Result[WorkoutTemplate]:
        template = self.get_template(template_id)
        result = self._domain.update_template_exercise(template, exercise_id, changes)
        if not result.is_success:
            return Result.fail(result.error)
        self._workouts.save_template(template)
        logger.debug(f"Updated exercise {exercise_id} of template {template_id}")
        return Result.ok(template)

    def remove_template_exercise(self, template_id: str, exercise_id: str) -> WorkoutTemplate:
        template = self.get_template(template_id)
        removed = self._domain.remove_template_exercise(template, exercise_id)
        self._workouts.save_template(template)
        logger.info(f"Removed exercise '{removed.name}' from template {template_id}")
        return template

    def delete_template(self, template_id: str) -> None:
        if not self._workouts.delete_template(template_id):
            raise NotFound("Workout template not found")
        logger.info(f"Deleted workout template {template_id}")

    # ------------------------------------------------------------------
    # WORKOUT LOGS
    # ------------------------------------------------------------------
    def upsert_workout_log(self, user_id: str, data: dict, today: Optional[datetime] = None) -> Result[WorkoutLog]:
        checked_user = validate_user_id(user_id)
        if not checked_user.is_success:
            return Result.fail(checked_user.error)
        user_id = checked_user.value

        template_id = data.get("workout_template_id")
        if template_id and self._workouts.get_template(template_id) is None:
            raise NotFound("Workout template not found")

        day = data.get("date")
        day = parse_day_key(day) if isinstance(day, str) else day
        existing = self._workouts.get_log_for_day(user_id, day) if day is not None else None

        result = self._domain.upsert_workout_log(existing, user_id, data, _today(today))
        if not result.is_success:
            return Result.fail(result.error)
        self._workouts.save_log(result.value)
        logger.info(
            f"{'Updated' if existing else 'Created'} workout log for user {user_id} "
            f"on {day_key(result.value.date)} (completed={result.value.completed})"
        )
        # Re-read so workout_name reflects the template join
        return Result.ok(self._workouts.get_log(result.value.id))

    def get_workout_log(self, user_id: str, date: datetime) -> Optional[WorkoutLog]:
        """None is a valid answer: nothing logged that day."""
        return self._workouts.get_log_for_day(user_id, date)

    def list_workout_logs(
        self,
        user_id: str,
        start: Optional[datetime] = None,
        end: Optional[datetime] = None,
    ) -> List[WorkoutLog]:
        if start is not None and end is not None:
            return self._workouts.list_logs(user_id, start, end)
        return self._workouts.list_logs(user_id)

    def update_workout_log(self, log_id: str, changes: dict, today: Optional[datetime] = None) -> Result[WorkoutLog]:
        log = self._workouts.get_log(log_id)
        if log is None:
            raise NotFound("Gym log not found")

        template_id = changes.get("workout_template_id")
        if template_id and self._workouts.get_template(template_id) is None:
            raise NotFound("Workout template not found")

        day = changes.get("date")
        day = parse_day_key(day) if isinstance(day, str) else day
        if day is not None:
            clash = self._workouts.get_log_for_day(log.user_id, day)
            if clash is not None and clash.id != log.id:
                return Result.fail(f"A gym log already exists for {day_key(day)}")

        result = self._domain.update_workout_log(log, changes, _today(today))
        if not result.is_success:
            return Result.fail(result.error)
        self._workouts.save_log(result.value)
        logger.debug(f"Updated workout log {log_id}: {sorted(k for k, v in changes.items() if v is not None)}")
        return Result.ok(self._workouts.get_log(log_id))

    def delete_workout_log(self, log_id: str) -> None:
        if not self._workouts.delete_log(log_id):
            raise NotFound("Gym log not found")
        logger.info(f"Deleted workout log {log_id}")

    def workout_logs_for_month(self, user_id: str, year: int, month: int) -> Dict[str, Optional[WorkoutLog]]:
        """Every day of the month -> that day's log or None."""
        first, last = month_bounds(year, month)
        return month_buckets(self._workouts.list_logs(user_id, first, last), year, month)

    def month_count(self, user_id: str, today: Optional[datetime] = None) -> int:
        today = _today(today)
        first, last = month_bounds(today.year, today.month)
        return self._domain.month_count(self._workouts.list_logs(user_id, first, last), today)

    def gym_streak(self, user_id: str, today: Optional[datetime] = None) -> int:
        today = _today(today)
        return gym_streak(self._workouts.list_logs(user_id, end=today), today)

    def monthly_stats(self, user_id: str, today: Optional[datetime] = None) -> List[dict]:
        today = _today(today)
        logs = self._workouts.list_logs(user_id, add_days(today, -(MONTHLY_WINDOW_DAYS - 1)), today)
        return self._domain.monthly_stats(logs, today)
