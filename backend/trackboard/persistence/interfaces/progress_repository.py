"""Abstract repository interface for per-user Progress documents."""
from __future__ import annotations
from abc import ABC, abstractmethod
from typing import Optional

from trackboard.domain.curriculum.models import Progress


class ProgressRepository(ABC):

    @abstractmethod
    def insert_if_absent(self, progress: Progress) -> bool:
        """Insert unless a Progress for (user_id, curriculum_id) exists. Returns True if inserted."""
        ...

    @abstractmethod
    def get(self, user_id: str, curriculum_id: str) -> Optional[Progress]:
        ...

    @abstractmethod
    def save(self, progress: Progress) -> None:
        """Overwrite the whole document of an existing Progress."""
        ...
