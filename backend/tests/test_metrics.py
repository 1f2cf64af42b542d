"""Progress metrics rollups."""
from datetime import datetime, timedelta

import pytest

from trackboard.domain.curriculum.metrics import compute_metrics, percentage
from trackboard.domain.curriculum.service import ProgressDomainService

from conftest import SAMPLE_COURSE

NOW = datetime(2024, 6, 15, 12, 0)


@pytest.fixture
def svc():
    return ProgressDomainService()


@pytest.fixture
def trees(svc):
    curriculum = svc.build_curriculum(SAMPLE_COURSE, curriculum_id="c1").unwrap()
    return svc.new_progress("u1", curriculum), curriculum


@pytest.mark.parametrize(
    "part, total, expected",
    [(1, 3, 33.3), (2, 3, 66.7), (0, 0, 0.0), (0, 5, 0.0), (5, 5, 100.0), (1, 8, 12.5)],
)
def test_percentage_rounds_half_up_to_one_decimal(part, total, expected):
    assert percentage(part, total) == expected


def test_missing_tree_yields_none(trees):
    progress, curriculum = trees
    assert compute_metrics(None, curriculum) is None
    assert compute_metrics(progress, None) is None


def test_untouched_progress(trees):
    metrics = compute_metrics(*trees, now=NOW)
    assert metrics.total_problems == 4
    assert metrics.completed_problems == 0
    assert metrics.remaining_problems == 4
    assert metrics.completion_percentage == 0.0
    assert metrics.last_completed is None
    assert metrics.revisions.total == 0
    assert metrics.revisions.last is None


def test_completion_rollups(svc, trees):
    progress, curriculum = trees
    svc.mark_completion(progress, 0, 0, 0, True, now=NOW - timedelta(days=2))
    svc.mark_completion(progress, 1, 0, 1, True, now=NOW - timedelta(days=1))
    svc.mark_completion(progress, 1, 0, 0, True, now=NOW - timedelta(days=3))

    metrics = compute_metrics(progress, curriculum, now=NOW)
    assert metrics.completed_problems == 3
    assert metrics.completed_problems + metrics.remaining_problems == metrics.total_problems
    assert metrics.completion_percentage == 75.0
    assert sum(s.completed for s in metrics.steps) == metrics.completed_problems

    steps = {s.step_index: s for s in metrics.steps}
    assert steps[0].completed == 1 and steps[0].completion_percentage == 50.0
    assert steps[1].completed == 2 and steps[1].completion_percentage == 100.0

    by_difficulty = {d.difficulty: d for d in metrics.difficulty}
    # " Hard " is counted under its trimmed key
    assert set(by_difficulty) == {"Easy", "Medium", "Hard"}
    assert by_difficulty["Easy"].total == 2
    assert by_difficulty["Easy"].percentage == 50.0
    assert by_difficulty["Hard"].completed == 1

    assert metrics.last_completed.problem_name == "Longest subarray"
    assert metrics.last_completed.step_name == "Arrays"
    assert metrics.last_completed.difficulty == "Hard"


def test_last_completed_tie_goes_to_later_problem(svc, trees):
    progress, curriculum = trees
    svc.mark_completion(progress, 0, 0, 0, True, now=NOW)
    svc.mark_completion(progress, 1, 0, 0, True, now=NOW)
    metrics = compute_metrics(progress, curriculum, now=NOW)
    assert metrics.last_completed.problem_name == "Two sum"


def test_one_of_three_is_33_point_3():
    svc = ProgressDomainService()
    curriculum = svc.build_curriculum({
        "course_name": "Three",
        "steps": [{"step_name": "S", "topics": [{"topic_name": "T", "problems": [
            {"problem_name": f"P{i}", "difficulty": "Easy"} for i in range(3)
        ]}]}],
    }).unwrap()
    progress = svc.new_progress("u", curriculum)
    svc.mark_completion(progress, 0, 0, 0, True, now=NOW)
    assert compute_metrics(progress, curriculum, now=NOW).completion_percentage == 33.3
    svc.mark_completion(progress, 0, 0, 1, True, now=NOW)
    assert compute_metrics(progress, curriculum, now=NOW).completion_percentage == 66.7


def test_revision_summary(svc, trees):
    progress, curriculum = trees
    svc.add_revision(progress, 0, 0, 0, status="needs_review", revised_at=NOW - timedelta(days=1))
    svc.add_revision(progress, 0, 0, 1, revised_at=NOW - timedelta(days=7))
    svc.add_revision(progress, 1, 0, 0, revised_at=NOW - timedelta(days=8))

    summary = compute_metrics(progress, curriculum, now=NOW).revisions
    assert summary.total == 3
    # exactly seven days back still counts as recent
    assert summary.recent_7_days == 2
    assert summary.needs_review == 1
    assert summary.last == NOW - timedelta(days=1)


def test_compute_metrics_does_not_mutate(svc, trees):
    progress, curriculum = trees
    svc.mark_completion(progress, 0, 0, 0, True, now=NOW)
    before = [p.completed for s in progress.steps for t in s.topics for p in t.problems]
    compute_metrics(progress, curriculum, now=NOW)
    after = [p.completed for s in progress.steps for t in s.topics for p in t.problems]
    assert before == after
