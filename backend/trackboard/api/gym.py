"""Workout template + gym log endpoints and gym dashboard stats."""
from __future__ import annotations
from dataclasses import asdict
from typing import List, Optional

from fastapi import APIRouter, Depends, HTTPException, status
from pydantic import BaseModel

from trackboard.application.tracker_app_service import TrackerAppService
from trackboard.container import get_tracker_app_service
from trackboard.domain.common.calendar import day_key, parse_day_key
from trackboard.domain.tracker.models import WorkoutLog, WorkoutTemplate

router = APIRouter(prefix="/api/gym", tags=["gym"])


# ------------------------------------------------------------------
# Pydantic schemas
# ------------------------------------------------------------------
class TemplateExerciseBody(BaseModel):
    name: str = ""
    type: str = "count"
    category: Optional[str] = None
    default_sets: Optional[int] = None
    default_reps: Optional[int] = None
    default_weight: Optional[float] = None
    default_time: Optional[float] = None


class TemplateBody(BaseModel):
    name: str = ""
    exercises: List[TemplateExerciseBody] = []


class TemplateUpdateBody(BaseModel):
    name: Optional[str] = None
    exercises: Optional[List[TemplateExerciseBody]] = None


class TemplateExerciseUpdateBody(BaseModel):
    name: Optional[str] = None
    type: Optional[str] = None
    category: Optional[str] = None
    default_sets: Optional[int] = None
    default_reps: Optional[int] = None
    default_weight: Optional[float] = None
    default_time: Optional[float] = None


class SetBody(BaseModel):
    reps: Optional[int] = None
    weight: Optional[float] = None


class PerformedExerciseBody(BaseModel):
    name: str = ""
    type: str = "count"
    sets: List[SetBody] = []
    time: Optional[float] = None
    notes: Optional[str] = None


class WorkoutLogBody(BaseModel):
    user_id: str = ""
    date: Optional[str] = None
    workout_template_id: Optional[str] = None
    exercises: List[PerformedExerciseBody] = []
    completed: Optional[bool] = None


class WorkoutLogUpdateBody(BaseModel):
    date: Optional[str] = None
    workout_template_id: Optional[str] = None
    exercises: Optional[List[PerformedExerciseBody]] = None
    completed: Optional[bool] = None


# ------------------------------------------------------------------
# Serializers
# ------------------------------------------------------------------
def _serialize_template(t: WorkoutTemplate) -> dict:
    return {
        "id": t.id,
        "name": t.name,
        "exercises": [asdict(e) for e in t.exercises],
        "created_at": t.created_at,
        "updated_at": t.updated_at,
    }


def _serialize_log(log: Optional[WorkoutLog]) -> Optional[dict]:
    if log is None:
        return None
    return {
        "id": log.id,
        "user_id": log.user_id,
        "date": day_key(log.date),
        "workout_template_id": log.workout_template_id,
        "workout_name": log.workout_name,
        "exercises": [asdict(e) for e in log.exercises],
        "completed": log.completed,
        "created_at": log.created_at,
        "updated_at": log.updated_at,
    }


# ------------------------------------------------------------------
# Templates
# ------------------------------------------------------------------
@router.post("/templates", status_code=status.HTTP_201_CREATED)
def create_template(
    body: TemplateBody,
    svc: TrackerAppService = Depends(get_tracker_app_service),
):
    result = svc.create_template(body.model_dump())
    if not result.is_success:
        raise HTTPException(status_code=400, detail=result.error)
    return _serialize_template(result.value)


@router.get("/templates")
def list_templates(svc: TrackerAppService = Depends(get_tracker_app_service)):
    return [_serialize_template(t) for t in svc.list_templates()]


@router.get("/templates/{template_id}")
def get_template(
    template_id: str,
    svc: TrackerAppService = Depends(get_tracker_app_service),
):
    return _serialize_template(svc.get_template(template_id))


@router.put("/templates/{template_id}")
def update_template(
    template_id: str,
    body: TemplateUpdateBody,
    svc: TrackerAppService = Depends(get_tracker_app_service),
):
    result = svc.update_template(template_id, body.model_dump())
    if not result.is_success:
        raise HTTPException(status_code=400, detail=result.error)
    return _serialize_template(result.value)


@router.post("/templates/{template_id}/exercises", status_code=status.HTTP_201_CREATED)
def add_template_exercise(
    template_id: str,
    body: TemplateExerciseBody,
    svc: TrackerAppService = Depends(get_tracker_app_service),
):
    result = svc.add_template_exercise(template_id, body.model_dump())
    if not result.is_success:
        raise HTTPException(status_code=400, detail=result.error)
    return _serialize_template(result.value)


@router.put("/templates/{template_id}/exercises/{exercise_id}")
def update_template_exercise(
    template_id: str,
    exercise_id: str,
    body: TemplateExerciseUpdateBody,
    svc: TrackerAppService = Depends(get_tracker_app_service),
):
    result = svc.update_template_exercise(template_id, exercise_id, body.model_dump())
    if not result.is_success:
        raise HTTPException(status_code=400, detail=result.error)
    return _serialize_template(result.value)


@router.delete("/templates/{template_id}/exercises/{exercise_id}")
def remove_template_exercise(
    template_id: str,
    exercise_id: str,
    svc: TrackerAppService = Depends(get_tracker_app_service),
):
    return _serialize_template(svc.remove_template_exercise(template_id, exercise_id))


@router.delete("/templates/{template_id}", status_code=status.HTTP_204_NO_CONTENT)
def delete_template(
    template_id: str,
    svc: TrackerAppService = Depends(get_tracker_app_service),
):
    svc.delete_template(template_id)


# ------------------------------------------------------------------
# Logs
# ------------------------------------------------------------------
@router.post("/logs")
def upsert_log(
    body: WorkoutLogBody,
    svc: TrackerAppService = Depends(get_tracker_app_service),
):
    result = svc.upsert_workout_log(body.user_id, body.model_dump())
    if not result.is_success:
        raise HTTPException(status_code=400, detail=result.error)
    return _serialize_log(result.value)


@router.get("/logs/{user_id}")
def list_logs(
    user_id: str,
    start: Optional[str] = None,
    end: Optional[str] = None,
    svc: TrackerAppService = Depends(get_tracker_app_service),
):
    logs = svc.list_workout_logs(
        user_id,
        start=parse_day_key(start) if start else None,
        end=parse_day_key(end) if end else None,
    )
    return [_serialize_log(log) for log in logs]


@router.get("/logs/{user_id}/date/{date}")
def log_for_date(
    user_id: str,
    date: str,
    svc: TrackerAppService = Depends(get_tracker_app_service),
):
    return _serialize_log(svc.get_workout_log(user_id, parse_day_key(date)))


@router.get("/logs/{user_id}/month/{year}/{month}")
def logs_for_month(
    user_id: str,
    year: int,
    month: int,
    svc: TrackerAppService = Depends(get_tracker_app_service),
):
    return {key: _serialize_log(log) for key, log in svc.workout_logs_for_month(user_id, year, month).items()}


@router.put("/logs/{log_id}")
def update_log(
    log_id: str,
    body: WorkoutLogUpdateBody,
    svc: TrackerAppService = Depends(get_tracker_app_service),
):
    result = svc.update_workout_log(log_id, body.model_dump())
    if not result.is_success:
        raise HTTPException(status_code=400, detail=result.error)
    return _serialize_log(result.value)


@router.delete("/logs/{log_id}", status_code=status.HTTP_204_NO_CONTENT)
def delete_log(
    log_id: str,
    svc: TrackerAppService = Depends(get_tracker_app_service),
):
    svc.delete_workout_log(log_id)


# ------------------------------------------------------------------
# Stats
# ------------------------------------------------------------------
@router.get("/{user_id}/stats/month-count")
def month_count(user_id: str, svc: TrackerAppService = Depends(get_tracker_app_service)):
    return {"count": svc.month_count(user_id)}


@router.get("/{user_id}/stats/streak")
def streak(user_id: str, svc: TrackerAppService = Depends(get_tracker_app_service)):
    return {"streak": svc.gym_streak(user_id)}


@router.get("/{user_id}/stats/monthly")
def monthly_stats(user_id: str, svc: TrackerAppService = Depends(get_tracker_app_service)):
    return svc.monthly_stats(user_id)
