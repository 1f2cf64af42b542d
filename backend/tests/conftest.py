"""Shared fixtures: a throwaway SQLite file per test and a TestClient bound to it."""
import pytest
from fastapi.testclient import TestClient

from trackboard import container
from trackboard.core import config
from trackboard.persistence.db import init_db


SAMPLE_COURSE = {
    "course_name": "DSA Sheet",
    "description": "Arrays to graphs",
    "steps": [
        {
            "step_name": "Basics",
            "topics": [
                {
                    "topic_name": "Maths",
                    "problems": [
                        {"problem_name": "Count digits", "difficulty": "Easy", "leetcode_link": "https://example.com/1"},
                        {"problem_name": "Reverse number", "difficulty": "Easy"},
                    ],
                },
            ],
        },
        {
            "step_name": "Arrays",
            "topics": [
                {
                    "topic_name": "Hashing",
                    "problems": [
                        {"problem_name": "Two sum", "difficulty": "Medium"},
                        {"problem_name": "Longest subarray", "difficulty": " Hard "},
                    ],
                },
            ],
        },
    ],
}


@pytest.fixture
def db_path(tmp_path, monkeypatch):
    path = str(tmp_path / "trackboard-test.db")
    monkeypatch.setattr(config, "DATABASE_PATH", path)
    container.reset()
    init_db()
    yield path
    container.reset()


@pytest.fixture
def client(db_path):
    from trackboard.main import app

    with TestClient(app) as c:
        yield c


@pytest.fixture
def course(client):
    resp = client.post("/api/course/", json=SAMPLE_COURSE)
    assert resp.status_code == 201
    return resp.json()
