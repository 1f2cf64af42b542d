"""Abstract repository interface for the read-only Curriculum."""
from __future__ import annotations
from abc import ABC, abstractmethod
from typing import List, Optional

from trackboard.domain.curriculum.models import Curriculum


class CurriculumRepository(ABC):

    @abstractmethod
    def save(self, curriculum: Curriculum) -> Curriculum:
        """Insert, or replace the document of the curriculum with the same name. Returns the stored row."""
        ...

    @abstractmethod
    def get_by_id(self, curriculum_id: str) -> Optional[Curriculum]:
        ...

    @abstractmethod
    def get_default(self) -> Optional[Curriculum]:
        """The first curriculum ever imported, or None."""
        ...

    @abstractmethod
    def list_all(self) -> List[Curriculum]:
        ...
