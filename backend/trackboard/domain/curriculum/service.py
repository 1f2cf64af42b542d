"""Domain service — pure curriculum import and progress-editing operations."""
from __future__ import annotations
import uuid
from datetime import datetime, timezone
from typing import List, Optional

from trackboard.domain.common.calendar import to_local
from trackboard.domain.common.errors import InvalidArgument
from trackboard.domain.common.result import Result
from trackboard.domain.curriculum.cloner import clone
from trackboard.domain.curriculum.models import (
    DEFAULT_CODE_LANGUAGE,
    Curriculum,
    Problem,
    Progress,
    Revision,
    Step,
    Topic,
)
from trackboard.domain.curriculum.navigator import Location, locate
from trackboard.domain.curriculum.rules import normalize_revision_status, validate_curriculum_structure

CSV_FIELDS = ["Step", "Topic", "Problem", "Difficulty", "Link", "CompletedAt"]


def _now_iso() -> str:
    return datetime.now(timezone.utc).isoformat()


def _utc_stamp(value: datetime) -> str:
    """Local naive datetime as UTC with millisecond precision and a Z suffix."""
    return value.astimezone(timezone.utc).strftime("%Y-%m-%dT%H:%M:%S.%f")[:-3] + "Z"


def _new_id() -> str:
    return str(uuid.uuid4())


def parse_timestamp(value) -> datetime:
    """ISO-8601 string or datetime -> naive local datetime."""
    if isinstance(value, datetime):
        return to_local(value)
    if not isinstance(value, str) or not value.strip():
        raise InvalidArgument(f"Invalid timestamp value: {value!r}")
    text = value.strip()
    if text.endswith("Z"):
        text = text[:-1] + "+00:00"
    try:
        return to_local(datetime.fromisoformat(text))
    except ValueError:
        raise InvalidArgument(f"Invalid timestamp value: {value!r}") from None


class ProgressDomainService:
    """
    No I/O. The application layer loads the documents, calls these methods and
    persists whatever they mutated.
    """

    def build_curriculum(self, data: dict, curriculum_id: Optional[str] = None) -> Result[Curriculum]:
        """Turn a structure document into a Curriculum with dense positional indices."""
        validation = validate_curriculum_structure(data)
        if not validation.is_success:
            return Result.fail(validation.error)

        steps = [
            Step(
                step_index=s,
                step_name=step["step_name"].strip(),
                topics=[
                    Topic(
                        topic_index=t,
                        topic_name=topic["topic_name"].strip(),
                        problems=[
                            Problem(
                                problem_index=p,
                                problem_name=problem["problem_name"].strip(),
                                difficulty=problem["difficulty"].strip(),
                                external_link=problem.get("leetcode_link") or problem.get("external_link") or "",
                            )
                            for p, problem in enumerate(topic.get("problems") or [])
                        ],
                    )
                    for t, topic in enumerate(step.get("topics") or [])
                ],
            )
            for s, step in enumerate(data["steps"])
        ]

        return Result.ok(
            Curriculum(
                id=curriculum_id or _new_id(),
                name=data["course_name"].strip(),
                description=(data.get("description") or "").strip(),
                steps=steps,
                created_at=_now_iso(),
            )
        )

    def new_progress(
        self,
        user_id: str,
        curriculum: Curriculum,
        code_language: str = DEFAULT_CODE_LANGUAGE,
    ) -> Progress:
        now = _now_iso()
        return Progress(
            id=_new_id(),
            user_id=user_id,
            curriculum_id=curriculum.id,
            steps=clone(curriculum, code_language=code_language),
            created_at=now,
            updated_at=now,
        )

    def mark_completion(
        self,
        progress: Progress,
        step_index,
        topic_index,
        problem_index,
        completed: bool,
        now: Optional[datetime] = None,
    ) -> Location:
        location = locate(progress, step_index, topic_index, problem_index)
        location.problem.completed = bool(completed)
        location.problem.completed_at = to_local(now or datetime.now()) if location.problem.completed else None
        progress.updated_at = _now_iso()
        return location

    def save_code(
        self,
        progress: Progress,
        step_index,
        topic_index,
        problem_index,
        code: Optional[str] = None,
        code_language: Optional[str] = None,
        notes: Optional[str] = None,
    ) -> Location:
        """Only string fields that were actually provided change; a blank language is ignored."""
        location = locate(progress, step_index, topic_index, problem_index)
        problem = location.problem
        if isinstance(code, str):
            problem.code = code
        if isinstance(code_language, str) and code_language.strip():
            problem.code_language = code_language.strip()
        if isinstance(notes, str):
            problem.notes = notes
        progress.updated_at = _now_iso()
        return location

    def add_revision(
        self,
        progress: Progress,
        step_index,
        topic_index,
        problem_index,
        status: Optional[str] = None,
        note: Optional[str] = None,
        revised_at=None,
    ) -> Location:
        location = locate(progress, step_index, topic_index, problem_index)
        revision = Revision(
            revised_at=parse_timestamp(revised_at) if revised_at else to_local(datetime.now()),
            status=normalize_revision_status(status),
            note=note.strip() if isinstance(note, str) else "",
        )
        location.problem.add_revision(revision)
        progress.updated_at = _now_iso()
        return location

    def solved_rows(self, progress: Progress) -> List[dict]:
        """One row per completed problem, in tree order, keyed by CSV_FIELDS."""
        rows = []
        for step in progress.steps:
            for topic in step.topics:
                for problem in topic.problems:
                    if not problem.completed:
                        continue
                    rows.append({
                        "Step": step.step_name,
                        "Topic": topic.topic_name,
                        "Problem": problem.problem_name,
                        "Difficulty": problem.difficulty,
                        "Link": problem.external_link,
                        "CompletedAt": _utc_stamp(problem.completed_at) if problem.completed_at else "",
                    })
        return rows
