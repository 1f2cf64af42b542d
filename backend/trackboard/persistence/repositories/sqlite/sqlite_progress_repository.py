"""SQLite implementation of ProgressRepository (one JSON document per user+curriculum)."""
from __future__ import annotations
import json
from datetime import datetime
from typing import Optional

from trackboard.domain.curriculum.models import (
    DEFAULT_CODE_LANGUAGE,
    Progress,
    ProgressProblem,
    ProgressStep,
    ProgressTopic,
    Revision,
)
from trackboard.persistence.db import get_connection
from trackboard.persistence.interfaces.progress_repository import ProgressRepository


def _iso(value: Optional[datetime]) -> Optional[str]:
    return value.isoformat() if value else None


def _parse(value: Optional[str]) -> Optional[datetime]:
    return datetime.fromisoformat(value) if value else None


def _problem_to_dict(problem: ProgressProblem) -> dict:
    return {
        "problem_index": problem.problem_index,
        "problem_name": problem.problem_name,
        "difficulty": problem.difficulty,
        "external_link": problem.external_link,
        "completed": problem.completed,
        "completed_at": _iso(problem.completed_at),
        "code": problem.code,
        "code_language": problem.code_language,
        "notes": problem.notes,
        "revisions": [
            {"revised_at": _iso(r.revised_at), "status": r.status, "note": r.note}
            for r in problem.revisions
        ],
    }


def _dict_to_problem(data: dict) -> ProgressProblem:
    return ProgressProblem(
        problem_index=data["problem_index"],
        problem_name=data["problem_name"],
        difficulty=data["difficulty"],
        external_link=data.get("external_link") or "",
        completed=bool(data.get("completed")),
        completed_at=_parse(data.get("completed_at")),
        code=data.get("code") or "",
        code_language=data.get("code_language") or DEFAULT_CODE_LANGUAGE,
        notes=data.get("notes") or "",
        revisions=[
            Revision(revised_at=_parse(r["revised_at"]), status=r["status"], note=r.get("note") or "")
            for r in data.get("revisions", [])
        ],
    )


def _progress_to_document(progress: Progress) -> str:
    return json.dumps([
        {
            "step_index": step.step_index,
            "step_name": step.step_name,
            "topics": [
                {
                    "topic_index": topic.topic_index,
                    "topic_name": topic.topic_name,
                    "problems": [_problem_to_dict(p) for p in topic.problems],
                }
                for topic in step.topics
            ],
        }
        for step in progress.steps
    ])


def _row_to_progress(row) -> Progress:
    steps = [
        ProgressStep(
            step_index=s["step_index"],
            step_name=s["step_name"],
            topics=[
                ProgressTopic(
                    topic_index=t["topic_index"],
                    topic_name=t["topic_name"],
                    problems=[_dict_to_problem(p) for p in t.get("problems", [])],
                )
                for t in s.get("topics", [])
            ],
        )
        for s in json.loads(row["document"] or "[]")
    ]
    return Progress(
        id=row["id"],
        user_id=row["user_id"],
        curriculum_id=row["curriculum_id"],
        steps=steps,
        created_at=row["created_at"],
        updated_at=row["updated_at"],
    )


class SqliteProgressRepository(ProgressRepository):

    def insert_if_absent(self, progress: Progress) -> bool:
        conn = get_connection()
        cur = conn.execute(
            """
            INSERT INTO progress (id, user_id, curriculum_id, document, created_at, updated_at)
            VALUES (:id, :user_id, :curriculum_id, :document, :created_at, :updated_at)
            ON CONFLICT(user_id, curriculum_id) DO NOTHING
            """,
            {
                "id": progress.id,
                "user_id": progress.user_id,
                "curriculum_id": progress.curriculum_id,
                "document": _progress_to_document(progress),
                "created_at": progress.created_at,
                "updated_at": progress.updated_at,
            },
        )
        conn.commit()
        conn.close()
        return cur.rowcount > 0

    def get(self, user_id: str, curriculum_id: str) -> Optional[Progress]:
        conn = get_connection()
        row = conn.execute(
            "SELECT * FROM progress WHERE user_id = ? AND curriculum_id = ?",
            (user_id, curriculum_id),
        ).fetchone()
        conn.close()
        return _row_to_progress(row) if row else None

    def save(self, progress: Progress) -> None:
        conn = get_connection()
        conn.execute(
            "UPDATE progress SET document = ?, updated_at = ? WHERE id = ?",
            (_progress_to_document(progress), progress.updated_at, progress.id),
        )
        conn.commit()
        conn.close()
