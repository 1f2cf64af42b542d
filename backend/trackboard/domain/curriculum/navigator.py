"""Resolves (step, topic, problem) index triples inside a Progress tree."""
from __future__ import annotations
from typing import Any, NamedTuple

from trackboard.domain.common.errors import InvalidIndex, NotFound
from trackboard.domain.curriculum.models import Progress, ProgressProblem, ProgressStep, ProgressTopic


class Location(NamedTuple):
    step: ProgressStep
    topic: ProgressTopic
    problem: ProgressProblem


def ensure_index(value: Any) -> int:
    """Coerce a request value to a non-negative int or raise InvalidIndex."""
    if isinstance(value, bool):
        raise InvalidIndex(f"Invalid index value: {value!r}")
    if isinstance(value, int):
        number = value
    elif isinstance(value, float) and value.is_integer():
        number = int(value)
    elif isinstance(value, str):
        try:
            number = int(value.strip())
        except ValueError:
            raise InvalidIndex(f"Invalid index value: {value!r}") from None
    else:
        raise InvalidIndex(f"Invalid index value: {value!r}")

    if number < 0:
        raise InvalidIndex(f"Invalid index value: {value!r}")
    return number


def locate(progress: Progress, step_index: int, topic_index: int, problem_index: int) -> Location:
    """
    Look up each level by its stored index field. The returned objects are the
    tree's own nodes: callers mutate `problem` and then persist the whole Progress.
    """
    step_index = ensure_index(step_index)
    topic_index = ensure_index(topic_index)
    problem_index = ensure_index(problem_index)

    step = next((s for s in progress.steps if s.step_index == step_index), None)
    if step is None:
        raise NotFound(f"Step {step_index} not found")

    topic = next((t for t in step.topics if t.topic_index == topic_index), None)
    if topic is None:
        raise NotFound(f"Topic {topic_index} not found in step {step_index}")

    problem = next((p for p in topic.problems if p.problem_index == problem_index), None)
    if problem is None:
        raise NotFound(f"Problem {problem_index} not found in topic {topic_index} of step {step_index}")

    return Location(step=step, topic=topic, problem=problem)
