"""Summary aggregator: exam-wide statistics and per-school breakdown."""

from __future__ import annotations

from collections.abc import Sequence

from academy.grading.contracts import CalculatedResult, ExamSummary, SchoolBreakdownEntry


def summarize(results: Sequence[CalculatedResult], total_items: int | None = None) -> ExamSummary:
    """
    Aggregate calculated results for one exam.

    Empty input returns a zero-valued summary. question_stats only holds items
    somebody missed; absent items count as zero.
    """
    if not results:
        return ExamSummary(total_items=total_items)

    scores = [r.score for r in results]

    question_stats: dict[int, int] = {}
    for res in results:
        for number in res.wrong_questions or []:
            question_stats[number] = question_stats.get(number, 0) + 1

    flags = [r.is_passed for r in results if r.is_passed is not None]

    return ExamSummary(
        average=sum(scores) / len(results),
        total_students=len(results),
        highest_score=max(scores),
        lowest_score=min(scores),
        question_stats=question_stats,
        total_items=total_items,
        passed_count=sum(1 for f in flags if f) if flags else None,
    )


def breakdown(results: Sequence[CalculatedResult]) -> list[SchoolBreakdownEntry]:
    """Group results by school (None included), sorted by average desc."""
    groups: dict[str | None, list[float]] = {}
    for res in results:
        groups.setdefault(res.school, []).append(res.score)

    entries = [
        SchoolBreakdownEntry(
            school_name=name,
            average=sum(scores) / len(scores),
            highest_score=max(scores),
            student_count=len(scores),
        )
        for name, scores in groups.items()
    ]
    entries.sort(key=lambda e: -e.average)
    return entries
