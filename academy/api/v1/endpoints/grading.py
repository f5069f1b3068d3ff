"""Grading endpoints: ranking, summaries, breakdowns, grades, history, entry."""

import logging

from fastapi import APIRouter, Path, Request, status
from pydantic import ValidationError

from academy.common.request_id import note_exam
from academy.core.app_exceptions import ErrorCode, raise_grading_error, raise_invalid_exam
from academy.core.config import settings
from academy.grading.analytics import (
    answer_distribution,
    assign_grades,
    grade_distribution,
    miss_series,
    student_history,
)
from academy.grading.calculator import calculate
from academy.grading.contracts import (
    AnswerDistribution,
    CalculatedResult,
    ExamDefinition,
    PointScored,
    SchoolBreakdownEntry,
    ScoreEntry,
    StudentHistory,
)
from academy.grading.entry import build_entry, weights_consistent
from academy.grading.summary import breakdown, summarize
from academy.schemas.grading import (
    EntryRequest,
    ExamRequest,
    GradesRequest,
    GradesResponse,
    HistoryRequest,
    ResultsRequest,
    SummaryResponse,
)

logger = logging.getLogger(__name__)

router = APIRouter()


def _checked(request: Request, exam: ExamDefinition) -> ExamDefinition:
    """Note the exam on the request; reject it if per-item weights miss max_score."""
    note_exam(request, exam)
    mode = exam.mode
    if isinstance(mode, PointScored) and not weights_consistent(exam):
        raise_invalid_exam(
            exam.id,
            "Per-item points must sum to the exam's max score",
            {
                "max_score": mode.max_score,
                "points_total": sum(q.point for q in mode.questions or []),
            },
        )
    return exam


# ============================================================================
# Endpoints
# ============================================================================


@router.post("/results", response_model=list[CalculatedResult])
async def rank_results(request: Request, body: ResultsRequest):
    """
    Rank an exam's score entries.

    Results come back best first with competition rank and positional
    percentile; by_school adds the per-school ranking fields.
    """
    exam = _checked(request, body.exam)
    return calculate(exam, body.roster, by_school=body.by_school)


@router.post("/summary", response_model=SummaryResponse)
async def exam_summary(request: Request, body: ExamRequest):
    """Ranked results, exam-wide summary, school breakdown and per-item misses."""
    exam = _checked(request, body.exam)
    results = calculate(exam, body.roster, by_school=True)
    summary = summarize(results, exam.total_items)
    logger.info(
        "Exam summary computed",
        extra={"exam_id": exam.id, "participants": summary.total_students},
    )
    return SummaryResponse(
        results=results,
        summary=summary,
        breakdown=breakdown(results),
        item_misses=miss_series(summary),
    )


@router.post("/breakdown", response_model=list[SchoolBreakdownEntry])
async def school_breakdown(request: Request, body: ExamRequest):
    """Per-school average, best score and head count, best average first."""
    exam = _checked(request, body.exam)
    return breakdown(calculate(exam, body.roster))


@router.post("/items/{number}/distribution", response_model=AnswerDistribution)
async def item_distribution(
    request: Request,
    body: ExamRequest,
    number: int = Path(..., ge=1),
):
    """Literal answers given for one item, most frequent first."""
    exam = _checked(request, body.exam)
    if exam.total_items and number > exam.total_items:
        raise_grading_error(
            ErrorCode.ITEM_NOT_FOUND,
            f"Exam has no item {number}",
            exam_id=exam.id,
            details={"total_items": exam.total_items},
        )
    return answer_distribution(exam, number)


@router.post("/grades", response_model=GradesResponse)
async def exam_grades(request: Request, body: GradesRequest):
    """
    Grade bands by positional percentile.

    Cutoffs are taken from the request, then the exam, then the service default.
    """
    exam = _checked(request, body.exam)
    cutoffs = body.cutoffs or exam.grade_cutoffs or list(settings.DEFAULT_GRADE_CUTOFFS)
    results = calculate(exam, body.roster)
    return GradesResponse(
        cutoffs=cutoffs,
        grades=assign_grades(results, cutoffs),
        distribution=grade_distribution(results, cutoffs),
    )


@router.post("/students/{student_id}/history", response_model=StudentHistory)
async def history(
    request: Request,
    body: HistoryRequest,
    student_id: str = Path(..., min_length=1),
):
    """A student's results across the given exams, oldest first."""
    exams = [_checked(request, exam) for exam in body.exams]
    return student_history(exams, body.roster, student_id)


@router.post("/entries", response_model=ScoreEntry, status_code=status.HTTP_201_CREATED)
async def create_entry(request: Request, body: EntryRequest):
    """Build one student's score entry under the exam's scoring mode."""
    exam = _checked(request, body.exam)
    try:
        return build_entry(
            exam,
            body.student_id,
            score=body.score,
            missed=body.missed,
            missed_text=body.missed_text,
            answers=body.answers,
        )
    except ValidationError as e:
        raise_grading_error(
            ErrorCode.ENTRY_INVALID,
            "Entry does not fit the exam",
            exam_id=exam.id,
            details={
                "mode": exam.mode.kind,
                "errors": e.errors(include_url=False, include_context=False),
            },
        )
    except ValueError as e:
        raise_grading_error(
            ErrorCode.ENTRY_INCOMPLETE,
            str(e),
            exam_id=exam.id,
            details={"mode": exam.mode.kind},
        )
