"""SQLite implementation of CurriculumRepository (one JSON document per curriculum)."""
from __future__ import annotations
import json
from typing import List, Optional

from trackboard.domain.curriculum.models import Curriculum, Problem, Step, Topic
from trackboard.persistence.db import get_connection
from trackboard.persistence.interfaces.curriculum_repository import CurriculumRepository


def _curriculum_to_document(curriculum: Curriculum) -> str:
    return json.dumps([
        {
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
        for step in curriculum.steps
    ])


def _row_to_curriculum(row) -> Curriculum:
    steps = [
        Step(
            step_index=s["step_index"],
            step_name=s["step_name"],
            topics=[
                Topic(
                    topic_index=t["topic_index"],
                    topic_name=t["topic_name"],
                    problems=[
                        Problem(
                            problem_index=p["problem_index"],
                            problem_name=p["problem_name"],
                            difficulty=p["difficulty"],
                            external_link=p.get("external_link") or "",
                        )
                        for p in t.get("problems", [])
                    ],
                )
                for t in s.get("topics", [])
            ],
        )
        for s in json.loads(row["document"] or "[]")
    ]
    return Curriculum(
        id=row["id"],
        name=row["name"],
        description=row["description"],
        steps=steps,
        created_at=row["created_at"],
    )


class SqliteCurriculumRepository(CurriculumRepository):

    def save(self, curriculum: Curriculum) -> Curriculum:
        conn = get_connection()
        try:
            conn.execute(
                """
                INSERT INTO curricula (id, name, description, document, created_at)
                VALUES (:id, :name, :description, :document, :created_at)
                ON CONFLICT(name) DO UPDATE SET
                    description = excluded.description,
                    document    = excluded.document
                """,
                {
                    "id": curriculum.id,
                    "name": curriculum.name,
                    "description": curriculum.description,
                    "document": _curriculum_to_document(curriculum),
                    "created_at": curriculum.created_at,
                },
            )
            conn.commit()
            row = conn.execute("SELECT * FROM curricula WHERE name = ?", (curriculum.name,)).fetchone()
        finally:
            conn.close()
        return _row_to_curriculum(row)

    def get_by_id(self, curriculum_id: str) -> Optional[Curriculum]:
        conn = get_connection()
        row = conn.execute("SELECT * FROM curricula WHERE id = ?", (curriculum_id,)).fetchone()
        conn.close()
        return _row_to_curriculum(row) if row else None

    def get_default(self) -> Optional[Curriculum]:
        conn = get_connection()
        row = conn.execute(
            "SELECT * FROM curricula ORDER BY created_at ASC, rowid ASC LIMIT 1"
        ).fetchone()
        conn.close()
        return _row_to_curriculum(row) if row else None

    def list_all(self) -> List[Curriculum]:
        conn = get_connection()
        rows = conn.execute("SELECT * FROM curricula ORDER BY created_at ASC, rowid ASC").fetchall()
        conn.close()
        return [_row_to_curriculum(r) for r in rows]
