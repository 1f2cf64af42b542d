"""Completion / difficulty / revision rollups of a Progress tree against its Curriculum."""
from __future__ import annotations
import math
from dataclasses import dataclass, field
from datetime import datetime, timedelta
from typing import Dict, List, Optional

from trackboard.domain.common.calendar import to_local
from trackboard.domain.curriculum.models import Curriculum, Progress

RECENT_REVISION_WINDOW = timedelta(days=7)


@dataclass
class StepSummary:
    step_index: int
    step_name: str
    total: int
    completed: int
    completion_percentage: float


@dataclass
class DifficultySummary:
    difficulty: str
    total: int
    completed: int
    percentage: float


@dataclass
class LastCompleted:
    step_index: int
    step_name: str
    topic_index: int
    topic_name: str
    problem_index: int
    problem_name: str
    difficulty: str
    completed_at: datetime


@dataclass
class RevisionSummary:
    total: int = 0
    recent_7_days: int = 0
    needs_review: int = 0
    last: Optional[datetime] = None


@dataclass
class ProgressMetrics:
    total_problems: int
    completed_problems: int
    remaining_problems: int
    completion_percentage: float
    steps: List[StepSummary] = field(default_factory=list)
    difficulty: List[DifficultySummary] = field(default_factory=list)
    last_completed: Optional[LastCompleted] = None
    revisions: RevisionSummary = field(default_factory=RevisionSummary)


def percentage(part: int, total: int) -> float:
    """
    Percentage with one decimal: scale the ratio by 1000, round half up, divide
    by 10. 1/3 gives 33.3 and 2/3 gives 66.7.
    """
    if not total:
        return 0.0
    return math.floor(part / total * 1000 + 0.5) / 10


def _normalize_difficulty(value: Optional[str]) -> str:
    return (value or "").strip()


def _curriculum_totals(curriculum: Curriculum):
    total_problems = 0
    difficulty_totals: Dict[str, int] = {}
    step_totals: Dict[int, int] = {}

    for step in curriculum.steps:
        in_step = 0
        for topic in step.topics:
            for problem in topic.problems:
                difficulty = _normalize_difficulty(problem.difficulty)
                difficulty_totals[difficulty] = difficulty_totals.get(difficulty, 0) + 1
                in_step += 1
        step_totals[step.step_index] = step_totals.get(step.step_index, 0) + in_step
        total_problems += in_step

    return total_problems, difficulty_totals, step_totals


def compute_metrics(
    progress: Optional[Progress],
    curriculum: Optional[Curriculum],
    now: Optional[datetime] = None,
) -> Optional[ProgressMetrics]:
    """
    Read-only rollup. Returns None when either tree is missing: a missing
    Progress means "not initialized", which is not the same as zero progress.
    """
    if progress is None or curriculum is None:
        return None

    now = to_local(now or datetime.now())
    recent_cutoff = now - RECENT_REVISION_WINDOW

    total_problems, difficulty_totals, step_totals = _curriculum_totals(curriculum)

    difficulty_completed: Dict[str, int] = {}
    step_summaries: List[StepSummary] = []
    completed_problems = 0
    last_completed: Optional[LastCompleted] = None
    revisions = RevisionSummary()

    for step in progress.steps:
        completed_in_step = 0

        for topic in step.topics:
            for problem in topic.problems:
                for revision in problem.revisions:
                    revised_at = to_local(revision.revised_at)
                    revisions.total += 1
                    if revised_at >= recent_cutoff:
                        revisions.recent_7_days += 1
                    if revision.status == "needs_review":
                        revisions.needs_review += 1
                    if revisions.last is None or revised_at > revisions.last:
                        revisions.last = revised_at

                if not problem.completed:
                    continue

                completed_in_step += 1
                completed_problems += 1
                difficulty = _normalize_difficulty(problem.difficulty)
                difficulty_completed[difficulty] = difficulty_completed.get(difficulty, 0) + 1

                if problem.completed_at is None:
                    continue
                completed_at = to_local(problem.completed_at)
                # >= so that ties go to the later-encountered problem
                if last_completed is None or completed_at >= last_completed.completed_at:
                    last_completed = LastCompleted(
                        step_index=step.step_index,
                        step_name=step.step_name,
                        topic_index=topic.topic_index,
                        topic_name=topic.topic_name,
                        problem_index=problem.problem_index,
                        problem_name=problem.problem_name,
                        difficulty=difficulty,
                        completed_at=completed_at,
                    )

        total_in_step = step_totals.get(step.step_index, 0)
        step_summaries.append(
            StepSummary(
                step_index=step.step_index,
                step_name=step.step_name,
                total=total_in_step,
                completed=completed_in_step,
                completion_percentage=percentage(completed_in_step, total_in_step),
            )
        )

    difficulty_breakdown = [
        DifficultySummary(
            difficulty=difficulty,
            total=total,
            completed=difficulty_completed.get(difficulty, 0),
            percentage=percentage(difficulty_completed.get(difficulty, 0), total),
        )
        for difficulty, total in difficulty_totals.items()
    ]

    return ProgressMetrics(
        total_problems=total_problems,
        completed_problems=completed_problems,
        remaining_problems=total_problems - completed_problems,
        completion_percentage=percentage(completed_problems, total_problems),
        steps=sorted(step_summaries, key=lambda s: s.step_index),
        difficulty=difficulty_breakdown,
        last_completed=last_completed,
        revisions=revisions,
    )
