"""Per-user progress endpoints: init, completion, code, revisions, CSV export."""
from __future__ import annotations
from dataclasses import asdict
from typing import Any, Optional

from fastapi import APIRouter, Depends, Response
from pydantic import BaseModel

from trackboard.application.progress_app_service import ProgressAppService
from trackboard.container import get_progress_app_service
from trackboard.domain.curriculum.metrics import ProgressMetrics
from trackboard.domain.curriculum.models import Progress, ProgressProblem, Revision

router = APIRouter(prefix="/api/progress", tags=["progress"])


# ------------------------------------------------------------------
# Pydantic schemas
# ------------------------------------------------------------------
# Indices stay untyped here: the navigator owns their validation.
class ProblemRef(BaseModel):
    user_id: str = ""
    step_index: Any = None
    topic_index: Any = None
    problem_index: Any = None
    curriculum_id: Optional[str] = None


class InitBody(BaseModel):
    user_id: str = ""
    curriculum_id: Optional[str] = None


class MarkBody(ProblemRef):
    completed: bool = True


class SaveCodeBody(ProblemRef):
    code: Optional[str] = None
    code_language: Optional[str] = None
    notes: Optional[str] = None


class RevisionBody(ProblemRef):
    status: Optional[str] = None
    note: Optional[str] = None
    revised_at: Optional[str] = None


# ------------------------------------------------------------------
# Serializers
# ------------------------------------------------------------------
def _iso(value) -> Optional[str]:
    return value.isoformat() if value else None


def _serialize_revision(r: Revision) -> dict:
    return {"revised_at": _iso(r.revised_at), "status": r.status, "note": r.note}


def _serialize_problem(p: ProgressProblem) -> dict:
    return {
        "problem_index": p.problem_index,
        "problem_name": p.problem_name,
        "difficulty": p.difficulty,
        "external_link": p.external_link,
        "completed": p.completed,
        "completed_at": _iso(p.completed_at),
        "code": p.code,
        "code_language": p.code_language,
        "notes": p.notes,
        "revisions": [_serialize_revision(r) for r in p.revisions],
    }


def _serialize_progress(progress: Progress) -> dict:
    return {
        "id": progress.id,
        "user_id": progress.user_id,
        "curriculum_id": progress.curriculum_id,
        "created_at": progress.created_at,
        "updated_at": progress.updated_at,
        "steps": [
            {
                "step_index": step.step_index,
                "step_name": step.step_name,
                "topics": [
                    {
                        "topic_index": topic.topic_index,
                        "topic_name": topic.topic_name,
                        "problems": [_serialize_problem(p) for p in topic.problems],
                    }
                    for topic in step.topics
                ],
            }
            for step in progress.steps
        ],
    }


def _serialize_metrics(metrics: ProgressMetrics) -> dict:
    # datetimes are left to FastAPI's encoder
    return asdict(metrics)


# ------------------------------------------------------------------
# Endpoints
# ------------------------------------------------------------------
@router.post("/init")
def init_progress(
    body: InitBody,
    response: Response,
    svc: ProgressAppService = Depends(get_progress_app_service),
):
    progress, metrics, created = svc.init_progress(body.user_id, body.curriculum_id)
    response.status_code = 201 if created else 200
    return {
        "created": created,
        "progress": _serialize_progress(progress),
        "metrics": _serialize_metrics(metrics),
    }


@router.get("/{user_id}")
def get_progress(
    user_id: str,
    curriculum_id: Optional[str] = None,
    svc: ProgressAppService = Depends(get_progress_app_service),
):
    progress, metrics = svc.get_progress(user_id, curriculum_id)
    return {"progress": _serialize_progress(progress), "metrics": _serialize_metrics(metrics)}


@router.post("/mark")
def mark_completion(
    body: MarkBody,
    svc: ProgressAppService = Depends(get_progress_app_service),
):
    location, metrics = svc.mark_completion(
        body.user_id, body.step_index, body.topic_index, body.problem_index,
        completed=body.completed, curriculum_id=body.curriculum_id,
    )
    return {"problem": _serialize_problem(location.problem), "metrics": _serialize_metrics(metrics)}


@router.post("/save-code")
def save_code(
    body: SaveCodeBody,
    svc: ProgressAppService = Depends(get_progress_app_service),
):
    location, updated_at = svc.save_code(
        body.user_id, body.step_index, body.topic_index, body.problem_index,
        code=body.code, code_language=body.code_language, notes=body.notes,
        curriculum_id=body.curriculum_id,
    )
    return {"problem": _serialize_problem(location.problem), "updated_at": updated_at}


@router.post("/revisions")
def add_revision(
    body: RevisionBody,
    svc: ProgressAppService = Depends(get_progress_app_service),
):
    location = svc.add_revision(
        body.user_id, body.step_index, body.topic_index, body.problem_index,
        status=body.status, note=body.note, revised_at=body.revised_at,
        curriculum_id=body.curriculum_id,
    )
    return {
        "revision": _serialize_revision(location.problem.revisions[0]),
        "total_revisions": len(location.problem.revisions),
    }


@router.get("/revisions/{user_id}")
def list_revisions(
    user_id: str,
    step_index: Optional[str] = None,
    topic_index: Optional[str] = None,
    problem_index: Optional[str] = None,
    limit: Optional[str] = None,
    curriculum_id: Optional[str] = None,
    svc: ProgressAppService = Depends(get_progress_app_service),
):
    location, revisions = svc.list_revisions(
        user_id, step_index, topic_index, problem_index, limit=limit, curriculum_id=curriculum_id,
    )
    return {
        "problem_name": location.problem.problem_name,
        "revisions": [_serialize_revision(r) for r in revisions],
    }


@router.get("/export/{user_id}")
def export_solved(
    user_id: str,
    curriculum_id: Optional[str] = None,
    svc: ProgressAppService = Depends(get_progress_app_service),
):
    content = svc.export_solved_csv(user_id, curriculum_id)
    return Response(
        content=content,
        media_type="text/csv; charset=utf-8",
        headers={"Content-Disposition": 'attachment; filename="solved-problems.csv"'},
    )
