"""SQLite implementation of WorkoutRepository."""
from __future__ import annotations
import json
from dataclasses import asdict
from datetime import datetime
from typing import List, Optional

from trackboard.domain.common.calendar import day_key, parse_day_key
from trackboard.domain.tracker.models import (
    ExerciseSet,
    PerformedExercise,
    TemplateExercise,
    WorkoutLog,
    WorkoutTemplate,
)
from trackboard.persistence.db import get_connection
from trackboard.persistence.interfaces.workout_repository import WorkoutRepository

_LOG_SELECT = """
    SELECT l.*, t.name AS workout_name
    FROM workout_logs l
    LEFT JOIN workout_templates t ON t.id = l.workout_template_id
"""


def _row_to_template(row) -> WorkoutTemplate:
    return WorkoutTemplate(
        id=row["id"],
        name=row["name"],
        exercises=[TemplateExercise(**e) for e in json.loads(row["exercises"] or "[]")],
        created_at=row["created_at"],
        updated_at=row["updated_at"],
    )


def _row_to_log(row) -> WorkoutLog:
    exercises = []
    for e in json.loads(row["exercises"] or "[]"):
        sets = [ExerciseSet(**s) for s in e.pop("sets", [])]
        exercises.append(PerformedExercise(sets=sets, **e))
    return WorkoutLog(
        id=row["id"],
        user_id=row["user_id"],
        date=parse_day_key(row["date"]),
        workout_template_id=row["workout_template_id"],
        exercises=exercises,
        completed=bool(row["completed"]),
        created_at=row["created_at"],
        updated_at=row["updated_at"],
        workout_name=row["workout_name"],
    )


class SqliteWorkoutRepository(WorkoutRepository):

    # ------------------------------------------------------------------
    # Templates
    # ------------------------------------------------------------------
    def save_template(self, template: WorkoutTemplate) -> None:
        conn = get_connection()
        conn.execute(
            """
            INSERT INTO workout_templates (id, name, exercises, created_at, updated_at)
            VALUES (:id, :name, :exercises, :created_at, :updated_at)
            ON CONFLICT(id) DO UPDATE SET
                name       = excluded.name,
                exercises  = excluded.exercises,
                updated_at = excluded.updated_at
            """,
            {
                "id": template.id,
                "name": template.name,
                "exercises": json.dumps([asdict(e) for e in template.exercises]),
                "created_at": template.created_at,
                "updated_at": template.updated_at,
            },
        )
        conn.commit()
        conn.close()

    def get_template(self, template_id: str) -> Optional[WorkoutTemplate]:
        conn = get_connection()
        row = conn.execute("SELECT * FROM workout_templates WHERE id = ?", (template_id,)).fetchone()
        conn.close()
        return _row_to_template(row) if row else None

    def list_templates(self) -> List[WorkoutTemplate]:
        conn = get_connection()
        rows = conn.execute("SELECT * FROM workout_templates ORDER BY created_at DESC").fetchall()
        conn.close()
        return [_row_to_template(r) for r in rows]

    def delete_template(self, template_id: str) -> bool:
        conn = get_connection()
        cur = conn.execute("DELETE FROM workout_templates WHERE id = ?", (template_id,))
        conn.commit()
        conn.close()
        return cur.rowcount > 0

    # ------------------------------------------------------------------
    # Logs
    # ------------------------------------------------------------------
    def save_log(self, log: WorkoutLog) -> None:
        conn = get_connection()
        conn.execute(
            """
            INSERT INTO workout_logs (
                id, user_id, date, workout_template_id, exercises, completed, created_at, updated_at
            ) VALUES (
                :id, :user_id, :date, :workout_template_id, :exercises, :completed, :created_at, :updated_at
            )
            ON CONFLICT(id) DO UPDATE SET
                date                = excluded.date,
                workout_template_id = excluded.workout_template_id,
                exercises           = excluded.exercises,
                completed           = excluded.completed,
                updated_at          = excluded.updated_at
            """,
            {
                "id": log.id,
                "user_id": log.user_id,
                "date": day_key(log.date),
                "workout_template_id": log.workout_template_id,
                "exercises": json.dumps([asdict(e) for e in log.exercises]),
                "completed": int(log.completed),
                "created_at": log.created_at,
                "updated_at": log.updated_at,
            },
        )
        conn.commit()
        conn.close()

    def get_log(self, log_id: str) -> Optional[WorkoutLog]:
        conn = get_connection()
        row = conn.execute(_LOG_SELECT + " WHERE l.id = ?", (log_id,)).fetchone()
        conn.close()
        return _row_to_log(row) if row else None

    def get_log_for_day(self, user_id: str, date: datetime) -> Optional[WorkoutLog]:
        conn = get_connection()
        row = conn.execute(
            _LOG_SELECT + " WHERE l.user_id = ? AND l.date = ?",
            (user_id, day_key(date)),
        ).fetchone()
        conn.close()
        return _row_to_log(row) if row else None

    def list_logs(
        self,
        user_id: str,
        start: Optional[datetime] = None,
        end: Optional[datetime] = None,
    ) -> List[WorkoutLog]:
        sql = _LOG_SELECT + " WHERE l.user_id = ?"
        params: list = [user_id]
        if start is not None:
            sql += " AND l.date >= ?"
            params.append(day_key(start))
        if end is not None:
            sql += " AND l.date <= ?"
            params.append(day_key(end))
        sql += " ORDER BY l.date DESC"

        conn = get_connection()
        rows = conn.execute(sql, params).fetchall()
        conn.close()
        return [_row_to_log(r) for r in rows]

    def delete_log(self, log_id: str) -> bool:
        conn = get_connection()
        cur = conn.execute("DELETE FROM workout_logs WHERE id = ?", (log_id,))
        conn.commit()
        conn.close()
        return cur.rowcount > 0
