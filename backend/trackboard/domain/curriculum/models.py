"""Curriculum and Progress domain models. Pure Python, no DB or HTTP dependencies.

Both trees are addressed by the stored step/topic/problem index fields, never
by list position.
"""
from __future__ import annotations
from collections import deque
from dataclasses import dataclass, field
from datetime import datetime
from typing import Deque, Iterable, List, Optional

DEFAULT_CODE_LANGUAGE = "cpp"
REVISION_LIMIT = 50
REVISION_STATUSES = ("solid", "needs_review")


# ------------------------------------------------------------------
# Curriculum (read-only)
# ------------------------------------------------------------------
@dataclass
class Problem:
    problem_index: int
    problem_name: str
    difficulty: str
    external_link: str = ""


@dataclass
class Topic:
    topic_index: int
    topic_name: str
    problems: List[Problem] = field(default_factory=list)


@dataclass
class Step:
    step_index: int
    step_name: str
    topics: List[Topic] = field(default_factory=list)


@dataclass
class Curriculum:
    id: str
    name: str
    description: str = ""
    steps: List[Step] = field(default_factory=list)
    created_at: str = ""


# ------------------------------------------------------------------
# Progress (per user, mutable)
# ------------------------------------------------------------------
@dataclass
class Revision:
    revised_at: datetime
    status: str  # solid | needs_review
    note: str = ""


def revision_log(revisions: Iterable[Revision] = ()) -> Deque[Revision]:
    """Bounded newest-first revision log; input is expected newest-first."""
    return deque(list(revisions)[:REVISION_LIMIT], maxlen=REVISION_LIMIT)


@dataclass
class ProgressProblem:
    problem_index: int
    problem_name: str
    difficulty: str
    external_link: str = ""
    completed: bool = False
    completed_at: Optional[datetime] = None
    code: str = ""
    code_language: str = DEFAULT_CODE_LANGUAGE
    notes: str = ""
    revisions: Deque[Revision] = field(default_factory=revision_log)

    def __post_init__(self):
        if not isinstance(self.revisions, deque) or self.revisions.maxlen != REVISION_LIMIT:
            self.revisions = revision_log(self.revisions)

    def add_revision(self, revision: Revision) -> None:
        """Prepend; once full, the oldest entry falls off the end."""
        self.revisions.appendleft(revision)


@dataclass
class ProgressTopic:
    topic_index: int
    topic_name: str
    problems: List[ProgressProblem] = field(default_factory=list)


@dataclass
class ProgressStep:
    step_index: int
    step_name: str
    topics: List[ProgressTopic] = field(default_factory=list)


@dataclass
class Progress:
    id: str
    user_id: str
    curriculum_id: str
    steps: List[ProgressStep] = field(default_factory=list)
    created_at: str = ""
    updated_at: str = ""
