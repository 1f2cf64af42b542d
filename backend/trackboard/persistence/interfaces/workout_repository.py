"""Abstract repository interface for workout templates and logs."""
from __future__ import annotations
from abc import ABC, abstractmethod
from datetime import datetime
from typing import List, Optional

from trackboard.domain.tracker.models import WorkoutLog, WorkoutTemplate


class WorkoutRepository(ABC):

    # Templates
    @abstractmethod
    def save_template(self, template: WorkoutTemplate) -> None:
        ...

    @abstractmethod
    def get_template(self, template_id: str) -> Optional[WorkoutTemplate]:
        ...

    @abstractmethod
    def list_templates(self) -> List[WorkoutTemplate]:
        """Newest first."""
        ...

    @abstractmethod
    def delete_template(self, template_id: str) -> bool:
        """Logs referencing the template are kept for history."""
        ...

    # Logs
    @abstractmethod
    def save_log(self, log: WorkoutLog) -> None:
        """Insert or update; (user_id, date) is unique."""
        ...

    @abstractmethod
    def get_log(self, log_id: str) -> Optional[WorkoutLog]:
        ...

    @abstractmethod
    def get_log_for_day(self, user_id: str, date: datetime) -> Optional[WorkoutLog]:
        ...

    @abstractmethod
    def list_logs(
        self,
        user_id: str,
        start: Optional[datetime] = None,
        end: Optional[datetime] = None,
    ) -> List[WorkoutLog]:
        """Logs with start <= date <= end (both optional, inclusive), newest first, workout_name filled in."""
        ...

    @abstractmethod
    def delete_log(self, log_id: str) -> bool:
        ...
