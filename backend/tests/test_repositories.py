"""SQLite repositories against a throwaway database file."""
from datetime import datetime

from trackboard.domain.curriculum.models import DEFAULT_CODE_LANGUAGE
from trackboard.domain.curriculum.service import ProgressDomainService
from trackboard.domain.tracker.models import Task
from trackboard.persistence.repositories.sqlite.sqlite_curriculum_repository import SqliteCurriculumRepository
from trackboard.persistence.repositories.sqlite.sqlite_progress_repository import SqliteProgressRepository
from trackboard.persistence.repositories.sqlite.sqlite_task_repository import SqliteTaskRepository

from conftest import SAMPLE_COURSE


def test_progress_document_keeps_revisions_and_timestamps(db_path):
    svc = ProgressDomainService()
    curriculum = SqliteCurriculumRepository().save(svc.build_curriculum(SAMPLE_COURSE).unwrap())
    repo = SqliteProgressRepository()

    progress = svc.new_progress("u1", curriculum)
    assert repo.insert_if_absent(progress) is True
    assert repo.insert_if_absent(svc.new_progress("u1", curriculum)) is False

    svc.mark_completion(progress, 1, 0, 0, True, now=datetime(2024, 1, 2, 8, 30))
    svc.add_revision(progress, 1, 0, 0, status="needs_review", note="again", revised_at=datetime(2024, 1, 3))
    svc.add_revision(progress, 1, 0, 0, revised_at=datetime(2024, 1, 4))
    repo.save(progress)

    loaded = repo.get("u1", curriculum.id)
    assert loaded.id == progress.id
    problem = loaded.steps[1].topics[0].problems[0]
    assert problem.completed is True
    assert problem.completed_at == datetime(2024, 1, 2, 8, 30)
    assert [r.revised_at.day for r in problem.revisions] == [4, 3]
    assert problem.revisions[1].status == "needs_review"
    assert problem.revisions.maxlen == 50


def test_progress_document_without_language_loads_default(db_path):
    svc = ProgressDomainService()
    curriculum = SqliteCurriculumRepository().save(svc.build_curriculum(SAMPLE_COURSE).unwrap())
    repo = SqliteProgressRepository()

    progress = svc.new_progress("u1", curriculum, code_language="java")
    progress.steps[0].topics[0].problems[0].code_language = ""
    repo.insert_if_absent(progress)

    loaded = repo.get("u1", curriculum.id).steps[0].topics[0]
    assert loaded.problems[0].code_language == DEFAULT_CODE_LANGUAGE
    assert loaded.problems[1].code_language == "java"


def test_curriculum_default_is_first_imported(db_path):
    svc = ProgressDomainService()
    repo = SqliteCurriculumRepository()
    first = repo.save(svc.build_curriculum(SAMPLE_COURSE).unwrap())
    repo.save(svc.build_curriculum({**SAMPLE_COURSE, "course_name": "Second"}).unwrap())
    assert repo.get_default().id == first.id
    assert [c.name for c in repo.list_all()] == ["DSA Sheet", "Second"]


def test_task_range_queries_are_inclusive_and_ordered(db_path):
    repo = SqliteTaskRepository()
    for i, (day, order) in enumerate([(3, 1), (1, 0), (3, 0), (5, 0)]):
        repo.save(Task(id=f"t{i}", user_id="u1", title=f"t{i}", date=datetime(2024, 6, day), order=order))
    repo.save(Task(id="other", user_id="u2", title="x", date=datetime(2024, 6, 3)))

    in_range = repo.list_for_user("u1", datetime(2024, 6, 1), datetime(2024, 6, 3))
    assert [t.id for t in in_range] == ["t1", "t2", "t0"]
    assert len(repo.list_for_user("u1")) == 4
    assert repo.count_completed("u1") == 0
