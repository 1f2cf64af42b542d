"""Projects a read-only Curriculum into a fresh per-user Progress tree."""
from __future__ import annotations
from typing import List, Optional

from trackboard.domain.common.errors import InvalidArgument
from trackboard.domain.curriculum.models import (
    DEFAULT_CODE_LANGUAGE,
    Curriculum,
    ProgressProblem,
    ProgressStep,
    ProgressTopic,
)


def clone(curriculum: Optional[Curriculum], code_language: str = DEFAULT_CODE_LANGUAGE) -> List[ProgressStep]:
    """
    Pure transform: same step/topic/problem indices and names, every leaf in
    its default (untouched) state. Persisting the result, and making sure only
    one Progress exists per (user, curriculum), is the caller's job.
    """
    if curriculum is None:
        raise InvalidArgument("Curriculum not provided.")

    return [
        ProgressStep(
            step_index=step.step_index,
            step_name=step.step_name,
            topics=[
                ProgressTopic(
                    topic_index=topic.topic_index,
                    topic_name=topic.topic_name,
                    problems=[
                        ProgressProblem(
                            problem_index=problem.problem_index,
                            problem_name=problem.problem_name,
                            difficulty=problem.difficulty,
                            external_link=problem.external_link or "",
                            code_language=code_language,
                        )
                        for problem in topic.problems
                    ],
                )
                for topic in step.topics
            ],
        )
        for step in curriculum.steps
    ]
