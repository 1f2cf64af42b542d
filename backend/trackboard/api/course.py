"""Curriculum import + read-only browsing endpoints."""
from __future__ import annotations
from typing import List, Optional

from fastapi import APIRouter, Depends, HTTPException, status
from pydantic import BaseModel

from trackboard.application.progress_app_service import ProgressAppService
from trackboard.container import get_progress_app_service
from trackboard.domain.curriculum.models import Curriculum, Step

router = APIRouter(prefix="/api/course", tags=["course"])


# ------------------------------------------------------------------
# Pydantic schemas
# ------------------------------------------------------------------
class ProblemBody(BaseModel):
    problem_name: str = ""
    difficulty: str = ""
    leetcode_link: Optional[str] = None
    external_link: Optional[str] = None


class TopicBody(BaseModel):
    topic_name: str = ""
    problems: List[ProblemBody] = []


class StepBody(BaseModel):
    step_name: str = ""
    topics: List[TopicBody] = []


class CourseBody(BaseModel):
    course_name: str = ""
    description: str = ""
    steps: List[StepBody] = []


# ------------------------------------------------------------------
# Serializers
# ------------------------------------------------------------------
def _serialize_step(step: Step) -> dict:
    return {
        "step_index": step.step_index,
        "step_name": step.step_name,
        "topics": [
            {
                "topic_index": topic.topic_index,
                "topic_name": topic.topic_name,
                "problems": [
                    {
                        "problem_index": problem.problem_index,
                        "problem_name": problem.problem_name,
                        "difficulty": problem.difficulty,
                        "external_link": problem.external_link,
                    }
                    for problem in topic.problems
                ],
            }
            for topic in step.topics
        ],
    }


def _serialize_curriculum_summary(c: Curriculum) -> dict:
    return {
        "id": c.id,
        "name": c.name,
        "description": c.description,
        "total_steps": len(c.steps),
        "created_at": c.created_at,
    }


# ------------------------------------------------------------------
# Endpoints
# ------------------------------------------------------------------
@router.post("/", status_code=status.HTTP_201_CREATED)
def import_curriculum(
    body: CourseBody,
    svc: ProgressAppService = Depends(get_progress_app_service),
):
    result = svc.import_curriculum(body.model_dump())
    if not result.is_success:
        raise HTTPException(status_code=400, detail=result.error)
    return _serialize_curriculum_summary(result.value)


@router.get("/")
def get_overview(
    curriculum_id: Optional[str] = None,
    svc: ProgressAppService = Depends(get_progress_app_service),
):
    return svc.curriculum_overview(curriculum_id)


@router.get("/list")
def list_curricula(svc: ProgressAppService = Depends(get_progress_app_service)):
    return [_serialize_curriculum_summary(c) for c in svc.list_curricula()]


@router.get("/steps/{step_index}")
def get_step(
    step_index: int,
    curriculum_id: Optional[str] = None,
    svc: ProgressAppService = Depends(get_progress_app_service),
):
    curriculum, step = svc.curriculum_step(step_index, curriculum_id)
    return {"curriculum_id": curriculum.id, "step": _serialize_step(step)}
