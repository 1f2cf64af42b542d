"""Abstract repository interface for daily tasks."""
from __future__ import annotations
from abc import ABC, abstractmethod
from datetime import datetime
from typing import List, Optional

from trackboard.domain.tracker.models import Task


class TaskRepository(ABC):

    @abstractmethod
    def save(self, task: Task) -> None:
        """Insert or update a task row."""
        ...

    @abstractmethod
    def get_by_id(self, task_id: str) -> Optional[Task]:
        ...

    @abstractmethod
    def delete(self, task_id: str) -> bool:
        """Returns True if a row was deleted."""
        ...

    @abstractmethod
    def list_for_user(
        self,
        user_id: str,
        start: Optional[datetime] = None,
        end: Optional[datetime] = None,
    ) -> List[Task]:
        """Tasks with start <= date <= end (both optional, inclusive), ordered by date then order."""
        ...

    @abstractmethod
    def count_completed(self, user_id: str) -> int:
        ...
