"""Analytics over calculated results: item misses, answer spread, history, grades."""

from __future__ import annotations

from collections.abc import Iterable, Sequence
from datetime import UTC, datetime

from academy.grading.calculator import calculate
from academy.grading.contracts import (
    UNKNOWN_STUDENT_NAME,
    AnswerCount,
    AnswerDistribution,
    CalculatedResult,
    ExamDefinition,
    ExamSummary,
    GradeAssignment,
    ItemMisses,
    PointScored,
    Student,
    StudentHistory,
    StudentHistoryRow,
)
from academy.grading.formatting import round_display, unit_label
from academy.grading.summary import summarize

BLANK_ANSWER_LABEL = "(blank)"


def miss_series(summary: ExamSummary, total_items: int | None = None) -> list[ItemMisses]:
    """Per-item miss counts, zero-filled.

    Covers items 1..total_items and never drops a missed item numbered past
    it; an unset or zero total falls back to the highest missed item.
    """
    declared = total_items if total_items is not None else summary.total_items
    n = max(declared or 0, max(summary.question_stats, default=0))
    return [
        ItemMisses(number=number, miss_count=summary.question_stats.get(number, 0))
        for number in range(1, n + 1)
    ]


def correct_answer_for(exam: ExamDefinition, number: int) -> str | None:
    """Configured correct answer for an item, or None."""
    if isinstance(exam.mode, PointScored) and exam.mode.questions:
        for q in exam.mode.questions:
            if q.number == number:
                return q.correct_answer.strip() or None
    return None


def answer_distribution(exam: ExamDefinition, number: int) -> AnswerDistribution:
    """
    Count the literal answers students gave for one item.

    Entries without a recorded answer for the item are skipped; blank answers
    are counted under BLANK_ANSWER_LABEL. Entries are sorted by count desc.
    """
    correct = correct_answer_for(exam, number)

    counts: dict[str, int] = {}
    total = 0
    correct_count = 0
    for entry in exam.scores:
        if not entry.student_answers or number not in entry.student_answers:
            continue
        answer = entry.student_answers[number].strip()
        label = answer or BLANK_ANSWER_LABEL
        counts[label] = counts.get(label, 0) + 1
        total += 1
        if correct is not None and answer == correct:
            correct_count += 1

    entries = [
        AnswerCount(answer=label, count=count, is_correct=correct is not None and label == correct)
        for label, count in sorted(counts.items(), key=lambda kv: -kv[1])
    ]

    return AnswerDistribution(
        number=number,
        entries=entries,
        total_count=total,
        correct_count=correct_count,
        correct_answer=correct,
        accuracy=correct_count / total * 100 if total > 0 else 0.0,
    )


def _exam_moment(date: str) -> datetime | None:
    try:
        moment = datetime.fromisoformat(date)
    except ValueError:
        return None
    if moment.tzinfo is None:
        moment = moment.replace(tzinfo=UTC)
    return moment


def student_history(
    exams: Iterable[ExamDefinition],
    roster: Sequence[Student],
    student_id: str,
) -> StudentHistory:
    """
    Collect one student's results across exams, oldest first.

    Exams the student did not sit are skipped. Exams with an unparseable date
    sort after dated ones, in the order given.
    """
    dated: list[tuple[datetime | None, StudentHistoryRow]] = []
    for exam in exams:
        results = calculate(exam, roster)
        mine = next((r for r in results if r.student_id == student_id), None)
        if mine is None:
            continue
        summary = summarize(results, exam.total_items)
        dated.append(
            (
                _exam_moment(exam.date),
                StudentHistoryRow(
                    exam_id=exam.id,
                    title=exam.title,
                    date=exam.date,
                    kind=exam.mode.kind,
                    score=mine.score,
                    unit=unit_label(exam.mode),
                    average=round_display(summary.average),
                    rank=mine.rank,
                    percentile=mine.percentile,
                    total=summary.total_students,
                    is_passed=mine.is_passed,
                ),
            )
        )

    dated.sort(key=lambda pair: (pair[0] is None, pair[0] or datetime.min.replace(tzinfo=UTC)))
    rows = [row for _, row in dated]

    student = next((s for s in roster if s.id == student_id), None)
    scores = [row.score for row in rows]
    return StudentHistory(
        student_id=student_id,
        name=student.name if student else UNKNOWN_STUDENT_NAME,
        rows=rows,
        average_score=sum(scores) / len(scores) if scores else None,
        highest_score=max(scores) if scores else None,
        exam_count=len(rows),
    )


def assign_grade(percentile: float, cutoffs: Sequence[float]) -> int:
    """
    Grade band (1=best) for a positional percentile.

    cutoffs are ascending upper bounds: grade k is the first band whose bound
    is >= percentile. Percentiles past the last bound get the last grade.
    """
    for grade, bound in enumerate(cutoffs, start=1):
        if percentile <= bound:
            return grade
    return len(cutoffs)


def assign_grades(
    results: Sequence[CalculatedResult], cutoffs: Sequence[float]
) -> list[GradeAssignment]:
    """Grade every result with the given cutoffs."""
    return [
        GradeAssignment(
            student_id=r.student_id,
            name=r.name,
            percentile=r.percentile,
            grade=assign_grade(r.percentile, cutoffs),
        )
        for r in results
    ]


def grade_distribution(
    results: Sequence[CalculatedResult], cutoffs: Sequence[float]
) -> dict[int, int]:
    """Head count per grade band; every band appears, empty ones with 0."""
    counts = {grade: 0 for grade in range(1, len(cutoffs) + 1)}
    for r in results:
        counts[assign_grade(r.percentile, cutoffs)] += 1
    return counts
