"""Curriculum import, cloning, navigation and the progress-editing domain service."""
from collections import deque
from datetime import datetime, timezone

import pytest

from trackboard.domain.common.errors import InvalidArgument, InvalidIndex, NotFound
from trackboard.domain.curriculum.cloner import clone
from trackboard.domain.curriculum.models import (
    REVISION_LIMIT,
    Curriculum,
    Problem,
    ProgressProblem,
    Revision,
    Step,
    Topic,
)
from trackboard.domain.curriculum.navigator import ensure_index, locate
from trackboard.domain.curriculum.rules import clamp_revision_limit, normalize_revision_status, validate_user_id
from trackboard.domain.curriculum.service import ProgressDomainService, parse_timestamp

from conftest import SAMPLE_COURSE


@pytest.fixture
def svc():
    return ProgressDomainService()


@pytest.fixture
def curriculum(svc):
    return svc.build_curriculum(SAMPLE_COURSE, curriculum_id="c1").unwrap()


@pytest.fixture
def progress(svc, curriculum):
    return svc.new_progress("u1", curriculum)


# ------------------------------------------------------------------
# Import
# ------------------------------------------------------------------
def test_build_curriculum_assigns_positional_indices(curriculum):
    assert curriculum.id == "c1"
    assert curriculum.name == "DSA Sheet"
    assert [s.step_index for s in curriculum.steps] == [0, 1]
    problems = curriculum.steps[1].topics[0].problems
    assert [p.problem_index for p in problems] == [0, 1]
    assert problems[1].difficulty == "Hard"
    assert curriculum.steps[0].topics[0].problems[0].external_link == "https://example.com/1"


@pytest.mark.parametrize(
    "data, fragment",
    [
        ({"steps": []}, "course_name"),
        ({"course_name": "X", "steps": "nope"}, "steps"),
        ({"course_name": "X", "steps": [{"step_name": " "}]}, "step_name"),
        ({"course_name": "X", "steps": [{"step_name": "S", "topics": [{"topic_name": "T", "problems": [{"problem_name": "P"}]}]}]}, "difficulty"),
    ],
)
def test_build_curriculum_rejects_malformed_documents(svc, data, fragment):
    result = svc.build_curriculum(data)
    assert not result.is_success
    assert fragment in result.error


# ------------------------------------------------------------------
# Cloner
# ------------------------------------------------------------------
def test_clone_preserves_shape_and_defaults(curriculum):
    steps = clone(curriculum, code_language="python")
    assert [s.step_name for s in steps] == ["Basics", "Arrays"]
    leaf = steps[0].topics[0].problems[0]
    assert leaf.problem_name == "Count digits"
    assert leaf.external_link == "https://example.com/1"
    assert leaf.completed is False
    assert leaf.completed_at is None
    assert leaf.code == ""
    assert leaf.code_language == "python"
    assert len(leaf.revisions) == 0


def test_clone_copies_stored_indices_not_positions():
    sparse = Curriculum(
        id="c",
        name="sparse",
        steps=[Step(step_index=4, step_name="S", topics=[Topic(topic_index=2, topic_name="T", problems=[
            Problem(problem_index=9, problem_name="P", difficulty="Easy"),
        ])])],
    )
    steps = clone(sparse)
    assert steps[0].step_index == 4
    assert steps[0].topics[0].topic_index == 2
    assert steps[0].topics[0].problems[0].problem_index == 9
    assert steps[0].topics[0].problems[0].code_language == "cpp"


def test_clone_is_deterministic(curriculum):
    assert clone(curriculum) == clone(curriculum)
    assert clone(curriculum) is not clone(curriculum)


def test_clone_without_curriculum_raises():
    with pytest.raises(InvalidArgument):
        clone(None)


# ------------------------------------------------------------------
# Navigator
# ------------------------------------------------------------------
@pytest.mark.parametrize("value, expected", [(0, 0), (3, 3), ("2", 2), (" 1 ", 1), (4.0, 4)])
def test_ensure_index_accepts_integral_values(value, expected):
    assert ensure_index(value) == expected


@pytest.mark.parametrize("value", [-1, "abc", 1.5, None, True, [1]])
def test_ensure_index_rejects_everything_else(value):
    with pytest.raises(InvalidIndex):
        ensure_index(value)


def test_locate_returns_the_tree_nodes(progress):
    location = locate(progress, 1, 0, "1")
    assert location.step.step_name == "Arrays"
    assert location.topic.topic_name == "Hashing"
    assert location.problem.problem_name == "Longest subarray"
    location.problem.notes = "edited"
    assert progress.steps[1].topics[0].problems[1].notes == "edited"


@pytest.mark.parametrize(
    "indices, message",
    [
        ((5, 0, 0), "Step 5 not found"),
        ((0, 3, 0), "Topic 3 not found in step 0"),
        ((0, 0, 7), "Problem 7 not found in topic 0 of step 0"),
    ],
)
def test_locate_missing_levels(progress, indices, message):
    with pytest.raises(NotFound) as exc:
        locate(progress, *indices)
    assert exc.value.message == message


def test_locate_bad_index_is_invalid_not_missing(progress):
    with pytest.raises(InvalidIndex):
        locate(progress, 0, -1, 0)


# ------------------------------------------------------------------
# Progress edits
# ------------------------------------------------------------------
def test_mark_and_unmark_completion(svc, progress):
    when = datetime(2024, 5, 1, 9, 30)
    location = svc.mark_completion(progress, 0, 0, 1, True, now=when)
    assert location.problem.completed is True
    assert location.problem.completed_at == when

    svc.mark_completion(progress, 0, 0, 1, False, now=when)
    assert location.problem.completed is False
    assert location.problem.completed_at is None


def test_save_code_only_touches_provided_strings(svc, progress):
    svc.save_code(progress, 0, 0, 0, code="int main(){}", notes="loop over digits")
    svc.save_code(progress, 0, 0, 0, code_language="   ")
    problem = locate(progress, 0, 0, 0).problem
    assert problem.code == "int main(){}"
    assert problem.notes == "loop over digits"
    assert problem.code_language == "cpp"

    svc.save_code(progress, 0, 0, 0, code_language="java")
    assert problem.code == "int main(){}"
    assert problem.code_language == "java"


def test_revision_log_keeps_newest_fifty(svc, progress):
    for i in range(REVISION_LIMIT + 1):
        svc.add_revision(progress, 0, 0, 0, note=f"pass {i}", revised_at=datetime(2024, 1, 1, 0, i % 60))
    revisions = locate(progress, 0, 0, 0).problem.revisions
    assert len(revisions) == REVISION_LIMIT
    assert revisions[0].note == f"pass {REVISION_LIMIT}"
    assert revisions[-1].note == "pass 1"


def test_add_revision_normalizes_status_and_note(svc, progress):
    svc.add_revision(progress, 0, 0, 0, status="weird", note="  ok  ", revised_at="2024-02-03T10:00:00")
    revision = locate(progress, 0, 0, 0).problem.revisions[0]
    assert revision.status == "solid"
    assert revision.note == "ok"
    assert revision.revised_at == datetime(2024, 2, 3, 10, 0)


def test_problem_coerces_revision_list_to_bounded_deque():
    problem = ProgressProblem(
        problem_index=0,
        problem_name="p",
        difficulty="Easy",
        revisions=[Revision(revised_at=datetime(2024, 1, 1), status="solid")] * 60,
    )
    assert isinstance(problem.revisions, deque)
    assert len(problem.revisions) == REVISION_LIMIT


def test_parse_timestamp_handles_zulu_and_rejects_garbage():
    parsed = parse_timestamp("2024-01-01T12:00:00Z")
    expected = datetime(2024, 1, 1, 12, tzinfo=timezone.utc).astimezone().replace(tzinfo=None)
    assert parsed == expected
    with pytest.raises(InvalidArgument):
        parse_timestamp("yesterday-ish")


def test_solved_rows_follow_tree_order(svc, progress):
    svc.mark_completion(progress, 1, 0, 0, True, now=datetime(2024, 1, 2))
    svc.mark_completion(progress, 0, 0, 0, True, now=datetime(2024, 1, 3))
    rows = svc.solved_rows(progress)
    assert [r["Problem"] for r in rows] == ["Count digits", "Two sum"]
    assert rows[0]["Link"] == "https://example.com/1"
    expected = datetime(2024, 1, 2).astimezone(timezone.utc).strftime("%Y-%m-%dT%H:%M:%S.000Z")
    assert rows[1]["CompletedAt"] == expected
    assert rows[0]["CompletedAt"].endswith("Z")


# ------------------------------------------------------------------
# Small rules
# ------------------------------------------------------------------
def test_validate_user_id():
    assert validate_user_id("  alice ").value == "alice"
    assert validate_user_id(None).error == "userId is required"
    assert not validate_user_id("   ").is_success


def test_normalize_revision_status():
    assert normalize_revision_status("needs_review") == "needs_review"
    assert normalize_revision_status(None) == "solid"


@pytest.mark.parametrize("limit, expected", [(None, 10), ("abc", 10), (0, 10), (-3, 10), (5, 5), ("20", 20), (500, 50)])
def test_clamp_revision_limit(limit, expected):
    assert clamp_revision_limit(limit) == expected
