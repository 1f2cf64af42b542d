"""SQLite implementation of TaskRepository."""
from __future__ import annotations
from datetime import datetime
from typing import List, Optional

from trackboard.domain.common.calendar import day_key, parse_day_key
from trackboard.domain.tracker.models import Task
from trackboard.persistence.db import get_connection
from trackboard.persistence.interfaces.task_repository import TaskRepository


def _row_to_task(row) -> Task:
    return Task(
        id=row["id"],
        user_id=row["user_id"],
        title=row["title"],
        description=row["description"],
        date=parse_day_key(row["date"]),
        completed=bool(row["completed"]),
        priority=row["priority"],
        order=row["sort_order"],
        created_at=row["created_at"],
        updated_at=row["updated_at"],
    )


class SqliteTaskRepository(TaskRepository):

    def save(self, task: Task) -> None:
        conn = get_connection()
        conn.execute(
            """
            INSERT INTO tasks (
                id, user_id, title, description, date,
                completed, priority, sort_order, created_at, updated_at
            ) VALUES (
                :id, :user_id, :title, :description, :date,
                :completed, :priority, :sort_order, :created_at, :updated_at
            )
            ON CONFLICT(id) DO UPDATE SET
                title       = excluded.title,
                description = excluded.description,
                date        = excluded.date,
                completed   = excluded.completed,
                priority    = excluded.priority,
                sort_order  = excluded.sort_order,
                updated_at  = excluded.updated_at
            """,
            {
                "id": task.id,
                "user_id": task.user_id,
                "title": task.title,
                "description": task.description,
                "date": day_key(task.date),
                "completed": int(task.completed),
                "priority": task.priority,
                "sort_order": task.order,
                "created_at": task.created_at,
                "updated_at": task.updated_at,
            },
        )
        conn.commit()
        conn.close()

    def get_by_id(self, task_id: str) -> Optional[Task]:
        conn = get_connection()
        row = conn.execute("SELECT * FROM tasks WHERE id = ?", (task_id,)).fetchone()
        conn.close()
        return _row_to_task(row) if row else None

    def delete(self, task_id: str) -> bool:
        conn = get_connection()
        cur = conn.execute("DELETE FROM tasks WHERE id = ?", (task_id,))
        conn.commit()
        conn.close()
        return cur.rowcount > 0

    def list_for_user(
        self,
        user_id: str,
        start: Optional[datetime] = None,
        end: Optional[datetime] = None,
    ) -> List[Task]:
        # Day keys are zero padded, so string comparison is date comparison
        sql = "SELECT * FROM tasks WHERE user_id = ?"
        params: list = [user_id]
        if start is not None:
            sql += " AND date >= ?"
            params.append(day_key(start))
        if end is not None:
            sql += " AND date <= ?"
            params.append(day_key(end))
        sql += " ORDER BY date ASC, sort_order ASC"

        conn = get_connection()
        rows = conn.execute(sql, params).fetchall()
        conn.close()
        return [_row_to_task(r) for r in rows]

    def count_completed(self, user_id: str) -> int:
        conn = get_connection()
        row = conn.execute(
            "SELECT COUNT(*) FROM tasks WHERE user_id = ? AND completed = 1", (user_id,)
        ).fetchone()
        conn.close()
        return row[0] if row else 0
