"""Business rules for curriculum import and progress edits."""
from __future__ import annotations
from trackboard.domain.common.result import Result
from trackboard.domain.curriculum.models import REVISION_LIMIT

DEFAULT_REVISION_PAGE = 10


def validate_curriculum_structure(data: dict) -> Result[dict]:
    """A structure document needs a name and a list of named steps/topics/problems."""
    name = (data.get("course_name") or "").strip()
    if not name:
        return Result.fail("Curriculum 'course_name' is required and cannot be empty.")

    steps = data.get("steps")
    if not isinstance(steps, list):
        return Result.fail("Curriculum 'steps' must be a list.")

    for s, step in enumerate(steps):
        if not (step.get("step_name") or "").strip():
            return Result.fail(f"Step {s} is missing 'step_name'.")
        for t, topic in enumerate(step.get("topics") or []):
            if not (topic.get("topic_name") or "").strip():
                return Result.fail(f"Topic {t} of step {s} is missing 'topic_name'.")
            for p, problem in enumerate(topic.get("problems") or []):
                if not (problem.get("problem_name") or "").strip():
                    return Result.fail(f"Problem {p} of topic {t} in step {s} is missing 'problem_name'.")
                if not (problem.get("difficulty") or "").strip():
                    return Result.fail(f"Problem {p} of topic {t} in step {s} is missing 'difficulty'.")

    return Result.ok(data)


def validate_user_id(user_id) -> Result[str]:
    cleaned = str(user_id).strip() if user_id is not None else ""
    if not cleaned:
        return Result.fail("userId is required")
    return Result.ok(cleaned)


def normalize_revision_status(status) -> str:
    """Anything other than an explicit 'needs_review' counts as 'solid'."""
    return "needs_review" if status == "needs_review" else "solid"


def clamp_revision_limit(limit) -> int:
    try:
        parsed = int(limit)
    except (TypeError, ValueError):
        return DEFAULT_REVISION_PAGE
    if parsed <= 0:
        return DEFAULT_REVISION_PAGE
    return min(parsed, REVISION_LIMIT)
