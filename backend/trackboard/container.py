"""Dependency injection container — wires implementations to interfaces."""
from __future__ import annotations
from functools import lru_cache

from trackboard.core import config
from trackboard.persistence.repositories.sqlite.sqlite_curriculum_repository import SqliteCurriculumRepository
from trackboard.persistence.repositories.sqlite.sqlite_progress_repository import SqliteProgressRepository
from trackboard.persistence.repositories.sqlite.sqlite_task_repository import SqliteTaskRepository
from trackboard.persistence.repositories.sqlite.sqlite_workout_repository import SqliteWorkoutRepository
from trackboard.application.progress_app_service import ProgressAppService
from trackboard.application.tracker_app_service import TrackerAppService


@lru_cache(maxsize=1)
def get_curriculum_repo() -> SqliteCurriculumRepository:
    return SqliteCurriculumRepository()


@lru_cache(maxsize=1)
def get_progress_repo() -> SqliteProgressRepository:
    return SqliteProgressRepository()


@lru_cache(maxsize=1)
def get_task_repo() -> SqliteTaskRepository:
    return SqliteTaskRepository()


@lru_cache(maxsize=1)
def get_workout_repo() -> SqliteWorkoutRepository:
    return SqliteWorkoutRepository()


@lru_cache(maxsize=1)
def get_progress_app_service() -> ProgressAppService:
    return ProgressAppService(
        curricula=get_curriculum_repo(),
        progress=get_progress_repo(),
        code_language=config.DEFAULT_CODE_LANGUAGE,
    )


@lru_cache(maxsize=1)
def get_tracker_app_service() -> TrackerAppService:
    return TrackerAppService(tasks=get_task_repo(), workouts=get_workout_repo())


def reset() -> None:
    """Drop cached singletons (tests re-point the database between runs)."""
    for getter in (
        get_curriculum_repo,
        get_progress_repo,
        get_task_repo,
        get_workout_repo,
        get_progress_app_service,
        get_tracker_app_service,
    ):
        getter.cache_clear()
