"""
Score entry helpers.

These rules run before the calculator sees an exam: they turn what was typed
(or scanned) for one student into a ScoreEntry. The calculator copies the
resulting score and missed list verbatim.
"""

from __future__ import annotations

import math
import re
from collections.abc import Iterable, Mapping, Sequence

from academy.grading.contracts import (
    CountScored,
    ExamDefinition,
    PointScored,
    QuestionConfig,
    ScoreEntry,
    SimpleCount,
    Student,
)

_LEADING_INT = re.compile(r"^\s*(\d+)")


def parse_missed_items(text: str | None) -> list[int]:
    """
    Parse a comma-separated list of missed item numbers.

    Tokens without a leading number are dropped; "3, 5b, x, 7" -> [3, 5, 7].
    """
    if not text:
        return []
    items: list[int] = []
    for token in text.split(","):
        m = _LEADING_INT.match(token)
        if m:
            items.append(int(m.group(1)))
    return items


def count_missed_tokens(text: str | None) -> int:
    """
    Number of non-empty comma-separated tokens in a missed-items text.

    Every token counts as a miss, numeric or not; "3, x, 7" -> 3.
    """
    if not text:
        return 0
    return sum(1 for token in text.split(",") if token.strip())


def simple_count_score(total_items: int, missed: Sequence[int] | int) -> int:
    """Correct count for a simple-count test, floored at zero.

    `missed` is either the missed item list or a precomputed miss count.
    """
    misses = missed if isinstance(missed, int) else len(missed)
    return max(0, total_items - misses)


def score_answers(
    questions: Sequence[QuestionConfig],
    answers: Mapping[int, str],
) -> tuple[float, list[int]]:
    """
    Score a student's answers against the answer key.

    Each configured item whose trimmed answer equals its correct answer adds
    its point weight. Every other item, including unanswered ones, is missed.

    Returns:
        (score, missed item numbers in ascending order)
    """
    score = 0.0
    missed: list[int] = []
    for q in sorted(questions, key=lambda q: q.number):
        answer = answers.get(q.number)
        if answer is not None and answer.strip() == q.correct_answer.strip():
            score += q.point
        else:
            missed.append(q.number)
    return score, missed


def build_entry(
    exam: ExamDefinition,
    student_id: str,
    *,
    score: float | None = None,
    missed: Sequence[int] | None = None,
    missed_text: str | None = None,
    answers: Mapping[int, str] | None = None,
) -> ScoreEntry:
    """
    Build one ScoreEntry according to the exam mode.

    - point: answer-key scoring when the exam has per-item questions and
      answers were given, otherwise the literal score.
    - count: the literal score (number correct).
    - simple_count: total items minus the misses. When `missed_text` is
      given, every non-empty token counts as a miss, while only the numbered
      tokens become wrong_questions.

    Raises:
        ValueError: if the mode needs a literal score and none was given
    """
    mode = exam.mode
    missed_list = list(missed) if missed is not None else None
    if missed_list is None and missed_text is not None:
        missed_list = parse_missed_items(missed_text)
    answer_map = dict(answers) if answers is not None else None

    if isinstance(mode, PointScored):
        if mode.questions and answer_map is not None:
            score, missed_list = score_answers(mode.questions, answer_map)
        elif score is None:
            raise ValueError("Point-scored entries need a score or answers")
    elif isinstance(mode, CountScored):
        if score is None:
            raise ValueError("Count-scored entries need a score")
    elif isinstance(mode, SimpleCount):
        if missed is None and missed_text is not None:
            score = simple_count_score(exam.total_items, count_missed_tokens(missed_text))
        else:
            score = simple_count_score(exam.total_items, missed_list or [])
        if missed_list is None:
            missed_list = []
    else:
        raise TypeError(f"Unsupported exam mode: {mode!r}")

    return ScoreEntry(
        student_id=student_id,
        score=score,
        wrong_questions=missed_list,
        student_answers=answer_map,
    )


def eligible_students(exam: ExamDefinition, roster: Iterable[Student]) -> list[Student]:
    """Students who may sit the exam: everyone, or only the target schools."""
    if not exam.target_schools:
        return list(roster)
    targets = set(exam.target_schools)
    return [s for s in roster if s.school and s.school in targets]


def weights_consistent(exam: ExamDefinition) -> bool:
    """True unless per-item point weights exist and miss the declared maximum."""
    mode = exam.mode
    if not isinstance(mode, PointScored) or not mode.questions:
        return True
    total = sum(q.point for q in mode.questions)
    return math.isclose(total, mode.max_score, rel_tol=1e-9, abs_tol=1e-9)
