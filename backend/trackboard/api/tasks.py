"""Daily task endpoints + work dashboard stats."""
from __future__ import annotations
from typing import Optional

from fastapi import APIRouter, Depends, HTTPException, status
from pydantic import BaseModel

from trackboard.application.tracker_app_service import TrackerAppService
from trackboard.container import get_tracker_app_service
from trackboard.domain.common.calendar import day_key, parse_day_key
from trackboard.domain.tracker.models import Task

router = APIRouter(prefix="/api/tasks", tags=["tasks"])


# ------------------------------------------------------------------
# Pydantic schemas
# ------------------------------------------------------------------
class TaskCreateBody(BaseModel):
    user_id: str = ""
    title: str = ""
    date: Optional[str] = None
    description: Optional[str] = None
    priority: Optional[str] = None
    completed: bool = False


class TaskUpdateBody(BaseModel):
    title: Optional[str] = None
    date: Optional[str] = None
    description: Optional[str] = None
    priority: Optional[str] = None
    completed: Optional[bool] = None
    order: Optional[int] = None


class ReorderBody(BaseModel):
    first_id: str
    second_id: str


# ------------------------------------------------------------------
# Serializers
# ------------------------------------------------------------------
def _serialize_task(t: Task) -> dict:
    return {
        "id": t.id,
        "user_id": t.user_id,
        "title": t.title,
        "description": t.description,
        "date": day_key(t.date),
        "completed": t.completed,
        "priority": t.priority,
        "order": t.order,
        "created_at": t.created_at,
        "updated_at": t.updated_at,
    }


# ------------------------------------------------------------------
# CRUD
# ------------------------------------------------------------------
@router.post("/", status_code=status.HTTP_201_CREATED)
def create_task(
    body: TaskCreateBody,
    svc: TrackerAppService = Depends(get_tracker_app_service),
):
    result = svc.create_task(body.user_id, body.model_dump())
    if not result.is_success:
        raise HTTPException(status_code=400, detail=result.error)
    return _serialize_task(result.value)


@router.get("/")
def list_tasks(
    user_id: str,
    start: Optional[str] = None,
    end: Optional[str] = None,
    svc: TrackerAppService = Depends(get_tracker_app_service),
):
    tasks = svc.list_tasks(
        user_id,
        start=parse_day_key(start) if start else None,
        end=parse_day_key(end) if end else None,
    )
    return [_serialize_task(t) for t in tasks]


@router.post("/reorder")
def reorder_tasks(
    body: ReorderBody,
    svc: TrackerAppService = Depends(get_tracker_app_service),
):
    first, second = svc.swap_task_order(body.first_id, body.second_id)
    return [_serialize_task(first), _serialize_task(second)]


@router.get("/{task_id}")
def get_task(
    task_id: str,
    svc: TrackerAppService = Depends(get_tracker_app_service),
):
    return _serialize_task(svc.get_task(task_id))


@router.put("/{task_id}")
def update_task(
    task_id: str,
    body: TaskUpdateBody,
    svc: TrackerAppService = Depends(get_tracker_app_service),
):
    result = svc.update_task(task_id, body.model_dump())
    if not result.is_success:
        raise HTTPException(status_code=400, detail=result.error)
    return _serialize_task(result.value)


@router.delete("/{task_id}", status_code=status.HTTP_204_NO_CONTENT)
def delete_task(
    task_id: str,
    svc: TrackerAppService = Depends(get_tracker_app_service),
):
    svc.delete_task(task_id)


# ------------------------------------------------------------------
# Calendar views
# ------------------------------------------------------------------
@router.get("/{user_id}/date/{date}")
def tasks_for_date(
    user_id: str,
    date: str,
    svc: TrackerAppService = Depends(get_tracker_app_service),
):
    return [_serialize_task(t) for t in svc.list_tasks(user_id, date=parse_day_key(date))]


@router.get("/{user_id}/month/{year}/{month}")
def tasks_for_month(
    user_id: str,
    year: int,
    month: int,
    svc: TrackerAppService = Depends(get_tracker_app_service),
):
    grouped = svc.tasks_for_month(user_id, year, month)
    return {key: [_serialize_task(t) for t in tasks] for key, tasks in grouped.items()}


# ------------------------------------------------------------------
# Stats
# ------------------------------------------------------------------
@router.get("/{user_id}/stats/today")
def today_stats(user_id: str, svc: TrackerAppService = Depends(get_tracker_app_service)):
    return svc.today_counts(user_id)


@router.get("/{user_id}/stats/completed")
def completed_stats(user_id: str, svc: TrackerAppService = Depends(get_tracker_app_service)):
    return {"completed": svc.completed_count(user_id)}


@router.get("/{user_id}/stats/weekly")
def weekly_stats(user_id: str, svc: TrackerAppService = Depends(get_tracker_app_service)):
    return svc.weekly_stats(user_id)


@router.get("/{user_id}/stats/work-streak")
def work_streak(user_id: str, svc: TrackerAppService = Depends(get_tracker_app_service)):
    return {"streak": svc.work_streak(user_id)}
