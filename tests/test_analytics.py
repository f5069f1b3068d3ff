"""Tests for grading analytics: item misses, answer spread, history, grades."""

import pytest

from academy.grading.analytics import (
    BLANK_ANSWER_LABEL,
    answer_distribution,
    assign_grade,
    assign_grades,
    grade_distribution,
    miss_series,
    student_history,
)
from academy.grading.calculator import calculate
from academy.grading.contracts import ExamDefinition, ExamSummary, ScoreEntry
from academy.grading.summary import summarize


def test_miss_series_zero_fills():
    """Every item 1..n appears; unmissed items count zero."""
    summary = ExamSummary(total_students=2, question_stats={2: 1, 4: 2})
    series = miss_series(summary, 5)
    assert [(m.number, m.miss_count) for m in series] == [(1, 0), (2, 1), (3, 0), (4, 2), (5, 0)]


def test_miss_series_falls_back_to_summary_items():
    """Without an explicit count the summary's total_items, then the highest missed item, is used."""
    assert len(miss_series(ExamSummary(total_items=3))) == 3
    assert len(miss_series(ExamSummary(question_stats={6: 1}))) == 6
    assert miss_series(ExamSummary()) == []


def test_miss_series_never_drops_missed_items():
    """A zero or short item count still covers the highest missed item."""
    summary = ExamSummary(total_items=0, question_stats={3: 2})
    assert [m.miss_count for m in miss_series(summary)] == [0, 0, 2]
    short = miss_series(ExamSummary(question_stats={1: 1, 7: 1}), 4)
    assert [m.number for m in short] == list(range(1, 8))
    assert short[-1].miss_count == 1


def test_answer_distribution():
    """Counts literal answers, sorted by frequency, with accuracy against the key."""
    exam = ExamDefinition(
        mode={
            "kind": "point",
            "max_score": 4,
            "questions": [{"number": 1, "correct_answer": "2", "point": 4}],
        },
        total_items=1,
        scores=[
            ScoreEntry(student_id="a", score=4, student_answers={1: "2"}),
            ScoreEntry(student_id="b", score=0, student_answers={1: "3"}),
            ScoreEntry(student_id="c", score=4, student_answers={1: " 2"}),
            ScoreEntry(student_id="d", score=0, student_answers={1: ""}),
            ScoreEntry(student_id="e", score=0),
        ],
    )
    dist = answer_distribution(exam, 1)

    assert dist.total_count == 4
    assert dist.correct_count == 2
    assert dist.correct_answer == "2"
    assert dist.accuracy == 50.0
    assert dist.entries[0].answer == "2"
    assert dist.entries[0].count == 2
    assert dist.entries[0].is_correct is True
    assert {e.answer for e in dist.entries} == {"2", "3", BLANK_ANSWER_LABEL}


def test_answer_distribution_without_key_or_answers():
    """No key -> correct_answer None; no answers -> zero accuracy."""
    exam = ExamDefinition(mode={"kind": "count"}, total_items=5)
    dist = answer_distribution(exam, 2)
    assert dist.correct_answer is None
    assert dist.total_count == 0
    assert dist.accuracy == 0.0
    assert dist.entries == []


def test_student_history(roster):
    """Rows for exams the student sat, oldest first, with exam averages."""
    later = ExamDefinition(
        id="e2",
        title="Final",
        date="2026-06-01T09:00:00Z",
        mode={"kind": "point", "max_score": 100},
        pass_threshold=60,
        scores=[ScoreEntry(student_id="a", score=70), ScoreEntry(student_id="b", score=90)],
    )
    earlier = ExamDefinition(
        id="e1",
        title="Vocab 1",
        date="2026-03-01",
        mode={"kind": "simple_count"},
        total_items=20,
        scores=[ScoreEntry(student_id="a", score=18), ScoreEntry(student_id="c", score=15)],
    )
    skipped = ExamDefinition(
        id="e3",
        date="2026-04-01",
        scores=[ScoreEntry(student_id="b", score=1)],
    )

    history = student_history([later, skipped, earlier], roster, "a")

    assert history.name == "Alice"
    assert [row.exam_id for row in history.rows] == ["e1", "e2"]
    first, second = history.rows
    assert (first.unit, first.kind, first.rank, first.total) == ("items", "simple_count", 1, 2)
    assert first.average == 16.5
    assert first.is_passed is None
    assert (second.unit, second.rank, second.is_passed, second.average) == ("pts", 2, True, 80.0)
    assert history.exam_count == 2
    assert history.average_score == 44
    assert history.highest_score == 70


def test_student_history_empty(roster):
    """A student with no results gets an empty history, not an error."""
    history = student_history([], roster, "ghost")
    assert history.rows == []
    assert history.name == "Unknown"
    assert history.average_score is None
    assert history.exam_count == 0


def test_student_history_undated_exams_last(roster):
    """Exams with an unparseable date sort after dated ones."""
    undated = ExamDefinition(id="u", date="someday", scores=[ScoreEntry(student_id="a", score=1)])
    dated = ExamDefinition(id="d", date="2026-01-01", scores=[ScoreEntry(student_id="a", score=2)])
    history = student_history([undated, dated], roster, "a")
    assert [row.exam_id for row in history.rows] == ["d", "u"]


@pytest.mark.parametrize(
    "percentile,grade",
    [(4.0, 1), (4.1, 2), (11.0, 2), (23.0, 3), (50.0, 4), (77.0, 4), (77.5, 5), (100.0, 5)],
)
def test_assign_grade_bands(percentile, grade):
    """Grade k is the first band whose upper bound covers the percentile."""
    assert assign_grade(percentile, [4, 11, 23, 77, 100]) == grade


def test_assign_grade_quartiles():
    """The same function handles a quartile scheme."""
    cutoffs = [25, 50, 75, 100]
    assert [assign_grade(p, cutoffs) for p in (10, 25, 26, 99)] == [1, 1, 2, 4]


def test_grade_distribution(roster, make_exam):
    """Every band is listed; counts add up to the participants."""
    results = calculate(make_exam([("a", 90), ("b", 90), ("c", 70)]), roster)
    dist = grade_distribution(results, [25, 50, 75, 100])
    assert dist == {1: 0, 2: 2, 3: 0, 4: 1}
    grades = {g.student_id: g.grade for g in assign_grades(results, [25, 50, 75, 100])}
    assert grades == {"a": 2, "b": 2, "c": 4}


def test_grade_cutoffs_validated():
    """Exam-level cutoffs must ascend and end at 100."""
    with pytest.raises(ValueError):
        ExamDefinition(grade_cutoffs=[50, 25, 100])
    with pytest.raises(ValueError):
        ExamDefinition(grade_cutoffs=[25, 50])
    assert ExamDefinition(grade_cutoffs=[40, 100]).grade_cutoffs == [40, 100]


def test_summary_feeds_miss_series(roster, make_exam):
    """The summary's total_items drives the default series length."""
    exam = make_exam([ScoreEntry(student_id="a", score=1, wrong_questions=[2])], total_items=4)
    series = miss_series(summarize(calculate(exam, roster), exam.total_items))
    assert [m.miss_count for m in series] == [0, 1, 0, 0]
