"""Result calculator: raw score entries + roster -> ranked, annotated results."""

from __future__ import annotations

import logging
from collections.abc import Iterable

from academy.grading.contracts import (
    UNKNOWN_STUDENT_NAME,
    CalculatedResult,
    CountScored,
    ExamDefinition,
    PointScored,
    SimpleCount,
    Student,
)
from academy.grading.ranker import rank_by_score

logger = logging.getLogger(__name__)


def max_points(exam: ExamDefinition) -> float:
    """Maximum attainable raw score under the exam's mode."""
    mode = exam.mode
    if isinstance(mode, PointScored):
        return mode.max_score
    if isinstance(mode, (CountScored, SimpleCount)):
        return float(exam.total_items)
    raise TypeError(f"Unsupported exam mode: {mode!r}")


def _score_pct(score: float, maximum: float) -> float:
    if maximum <= 0:
        return 0.0
    return score / maximum * 100


def _rank_within_schools(results: list[CalculatedResult]) -> list[CalculatedResult]:
    """Second ranking pass: competition rank and percentile inside each school."""
    groups: dict[str | None, list[int]] = {}
    for idx, res in enumerate(results):
        groups.setdefault(res.school, []).append(idx)

    local: dict[int, tuple[int, float, int]] = {}
    for indices in groups.values():
        ranked = rank_by_score([(idx, results[idx].score) for idx in indices])
        for idx, rank, percentile in ranked:
            local[idx] = (rank, percentile, len(indices))

    return [
        res.model_copy(
            update={
                "school_rank": local[idx][0],
                "school_percentile": local[idx][1],
                "school_total": local[idx][2],
            }
        )
        for idx, res in enumerate(results)
    ]


def calculate(
    exam: ExamDefinition,
    roster: Iterable[Student],
    *,
    by_school: bool = False,
) -> list[CalculatedResult]:
    """
    Rank one exam's score entries.

    - Results are ordered by score desc; equal scores keep entry order.
    - rank is competition rank (ties share, next distinct score skips ahead).
    - percentile is positional: rank / participants * 100, lower is better.
    - is_passed is set only when the exam declares a pass threshold.
    - A student id missing from the roster yields the "Unknown" placeholder.
    - by_school adds school_rank / school_percentile / school_total, ranked
      independently within each school (no school is its own group).

    Args:
        exam: Exam definition with raw score entries
        roster: Students referenced by the entries

    Returns:
        One CalculatedResult per score entry.
    """
    entries = exam.scores or []
    if not entries:
        return []

    students = {s.id: s for s in roster}
    maximum = max_points(exam)
    threshold = exam.pass_threshold

    ranked = rank_by_score([(idx, entry.score) for idx, entry in enumerate(entries)])

    results: list[CalculatedResult] = []
    unknown = 0
    for idx, rank, percentile in ranked:
        entry = entries[idx]
        student = students.get(entry.student_id)
        if student is None:
            unknown += 1
        results.append(
            CalculatedResult(
                student_id=entry.student_id,
                name=student.name if student else UNKNOWN_STUDENT_NAME,
                school=student.school if student else None,
                score=entry.score,
                score_pct=_score_pct(entry.score, maximum),
                rank=rank,
                percentile=percentile,
                is_passed=entry.score >= threshold if threshold is not None else None,
                wrong_questions=list(entry.wrong_questions)
                if entry.wrong_questions is not None
                else None,
            )
        )

    if unknown:
        logger.debug("Exam %s: %d entries without a roster match", exam.id, unknown)

    if by_school:
        results = _rank_within_schools(results)

    return results
