"""Application service: curriculum import and per-user progress (load, domain op, persist)."""
from __future__ import annotations
import csv
import io
from datetime import datetime
from typing import List, Optional, Tuple

from loguru import logger

from trackboard.domain.common.errors import NotFound
from trackboard.domain.common.result import Result
from trackboard.domain.curriculum.metrics import ProgressMetrics, compute_metrics
from trackboard.domain.curriculum.models import DEFAULT_CODE_LANGUAGE, Curriculum, Progress, Revision, Step
from trackboard.domain.curriculum.navigator import Location, locate
from trackboard.domain.curriculum.rules import clamp_revision_limit, validate_user_id
from trackboard.domain.curriculum.service import CSV_FIELDS, ProgressDomainService
from trackboard.persistence.interfaces.curriculum_repository import CurriculumRepository
from trackboard.persistence.interfaces.progress_repository import ProgressRepository


class ProgressAppService:
    def __init__(
        self,
        curricula: CurriculumRepository,
        progress: ProgressRepository,
        code_language: str = DEFAULT_CODE_LANGUAGE,
    ):
        self._curricula = curricula
        self._progress = progress
        self._code_language = code_language
        self._domain = ProgressDomainService()

    # ------------------------------------------------------------------
    # CURRICULUM
    # ------------------------------------------------------------------
    def import_curriculum(self, data: dict) -> Result[Curriculum]:
        result = self._domain.build_curriculum(data)
        if not result.is_success:
            return Result.fail(result.error)
        stored = self._curricula.save(result.value)
        logger.info(f"Imported curriculum '{stored.name}' ({len(stored.steps)} steps) as {stored.id}")
        return Result.ok(stored)

    def get_curriculum(self, curriculum_id: Optional[str] = None) -> Curriculum:
        """Explicit id, or the default (first imported) curriculum."""
        if curriculum_id:
            curriculum = self._curricula.get_by_id(curriculum_id)
            if curriculum is None:
                raise NotFound(f"Curriculum '{curriculum_id}' not found")
            return curriculum

        curriculum = self._curricula.get_default()
        if curriculum is None:
            raise NotFound("Curriculum not imported yet")
        return curriculum

    def list_curricula(self) -> List[Curriculum]:
        return self._curricula.list_all()

    def curriculum_overview(self, curriculum_id: Optional[str] = None) -> dict:
        curriculum = self.get_curriculum(curriculum_id)
        step_totals = [
            {
                "step_index": step.step_index,
                "step_name": step.step_name,
                "total_problems": sum(len(topic.problems) for topic in step.topics),
            }
            for step in curriculum.steps
        ]
        return {
            "curriculum_id": curriculum.id,
            "name": curriculum.name,
            "description": curriculum.description,
            "total_steps": len(curriculum.steps),
            "total_problems": sum(s["total_problems"] for s in step_totals),
            "steps": step_totals,
        }

    def curriculum_step(self, step_index: int, curriculum_id: Optional[str] = None) -> Tuple[Curriculum, Step]:
        curriculum = self.get_curriculum(curriculum_id)
        step = next((s for s in curriculum.steps if s.step_index == step_index), None)
        if step is None:
            raise NotFound(f"Step {step_index} not found")
        return curriculum, step

    # ------------------------------------------------------------------
    # PROGRESS
    # ------------------------------------------------------------------
    def init_progress(
        self,
        user_id: str,
        curriculum_id: Optional[str] = None,
    ) -> Tuple[Progress, ProgressMetrics, bool]:
        """Create the user's Progress on first call; later calls return the existing one."""
        user_id = validate_user_id(user_id).unwrap()
        curriculum = self.get_curriculum(curriculum_id)

        candidate = self._domain.new_progress(user_id, curriculum, code_language=self._code_language)
        created = self._progress.insert_if_absent(candidate)
        progress = self._progress.get(user_id, curriculum.id)
        if created:
            logger.info(f"Initialized progress {progress.id} for user {user_id} on curriculum {curriculum.id}")
        else:
            logger.debug(f"Progress already exists for user {user_id} on curriculum {curriculum.id}")
        return progress, compute_metrics(progress, curriculum), created

    def _load(self, user_id: str, curriculum_id: Optional[str]) -> Tuple[Progress, Curriculum]:
        user_id = validate_user_id(user_id).unwrap()
        curriculum = self.get_curriculum(curriculum_id)
        progress = self._progress.get(user_id, curriculum.id)
        if progress is None:
            raise NotFound("Progress not initialized")
        return progress, curriculum

    def get_progress(
        self,
        user_id: str,
        curriculum_id: Optional[str] = None,
        now: Optional[datetime] = None,
    ) -> Tuple[Progress, ProgressMetrics]:
        progress, curriculum = self._load(user_id, curriculum_id)
        return progress, compute_metrics(progress, curriculum, now=now)

    def mark_completion(
        self,
        user_id: str,
        step_index,
        topic_index,
        problem_index,
        completed: bool,
        curriculum_id: Optional[str] = None,
        now: Optional[datetime] = None,
    ) -> Tuple[Location, ProgressMetrics]:
        progress, curriculum = self._load(user_id, curriculum_id)
        location = self._domain.mark_completion(progress, step_index, topic_index, problem_index, completed, now=now)
        self._progress.save(progress)
        logger.info(
            f"User {progress.user_id} marked {location.step.step_index}/{location.topic.topic_index}/"
            f"{location.problem.problem_index} completed={location.problem.completed}"
        )
        return location, compute_metrics(progress, curriculum, now=now)

    def save_code(
        self,
        user_id: str,
        step_index,
        topic_index,
        problem_index,
        code: Optional[str] = None,
        code_language: Optional[str] = None,
        notes: Optional[str] = None,
        curriculum_id: Optional[str] = None,
    ) -> Tuple[Location, str]:
        progress, _ = self._load(user_id, curriculum_id)
        location = self._domain.save_code(
            progress, step_index, topic_index, problem_index,
            code=code, code_language=code_language, notes=notes,
        )
        self._progress.save(progress)
        logger.debug(f"Saved code for user {progress.user_id} on problem {location.problem.problem_index}")
        return location, progress.updated_at

    def add_revision(
        self,
        user_id: str,
        step_index,
        topic_index,
        problem_index,
        status: Optional[str] = None,
        note: Optional[str] = None,
        revised_at=None,
        curriculum_id: Optional[str] = None,
    ) -> Location:
        progress, _ = self._load(user_id, curriculum_id)
        location = self._domain.add_revision(
            progress, step_index, topic_index, problem_index,
            status=status, note=note, revised_at=revised_at,
        )
        self._progress.save(progress)
        logger.info(
            f"User {progress.user_id} logged a '{location.problem.revisions[0].status}' revision "
            f"of problem {location.problem.problem_index}"
        )
        return location

    def list_revisions(
        self,
        user_id: str,
        step_index,
        topic_index,
        problem_index,
        limit=None,
        curriculum_id: Optional[str] = None,
    ) -> Tuple[Location, List[Revision]]:
        progress, _ = self._load(user_id, curriculum_id)
        location = locate(progress, step_index, topic_index, problem_index)
        return location, list(location.problem.revisions)[: clamp_revision_limit(limit)]

    def export_solved_csv(self, user_id: str, curriculum_id: Optional[str] = None) -> str:
        """Completed problems as CSV, prefixed with a UTF-8 BOM for spreadsheet apps."""
        progress, _ = self._load(user_id, curriculum_id)
        buffer = io.StringIO()
        writer = csv.DictWriter(buffer, fieldnames=CSV_FIELDS)
        writer.writeheader()
        writer.writerows(self._domain.solved_rows(progress))
        return "\ufeff" + buffer.getvalue()
