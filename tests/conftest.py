"""Pytest configuration and shared fixtures."""

import os

os.environ.setdefault("ENV", "test")

from collections.abc import Callable, Generator  # noqa: E402
from typing import Any  # noqa: E402

import pytest  # noqa: E402
from fastapi.testclient import TestClient  # noqa: E402

from academy.grading.contracts import ExamDefinition, ScoreEntry, Student  # noqa: E402
from academy.main import create_app  # noqa: E402


@pytest.fixture
def roster() -> list[Student]:
    """Three students: two at school X, one at Y."""
    return [
        Student(id="a", name="Alice", school="X"),
        Student(id="b", name="Bora", school="X"),
        Student(id="c", name="Chul", school="Y"),
    ]


@pytest.fixture
def make_exam() -> Callable[..., ExamDefinition]:
    """Build an exam from (student_id, score) pairs or ScoreEntry objects."""

    def _make(scores: list[Any], **kwargs: Any) -> ExamDefinition:
        entries = [
            s if isinstance(s, ScoreEntry) else ScoreEntry(student_id=s[0], score=s[1])
            for s in scores
        ]
        kwargs.setdefault("id", "exam-1")
        kwargs.setdefault("title", "Midterm")
        kwargs.setdefault("date", "2026-03-02")
        kwargs.setdefault("total_items", 20)
        kwargs.setdefault("mode", {"kind": "point", "max_score": 100})
        return ExamDefinition(scores=entries, **kwargs)

    return _make


@pytest.fixture
def client() -> Generator[TestClient, None, None]:
    """Test client over a freshly built app."""
    with TestClient(create_app()) as c:
        yield c
