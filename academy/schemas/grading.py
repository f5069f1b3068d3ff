"""Pydantic schemas for the grading endpoints."""

from pydantic import BaseModel, Field, field_validator

from academy.grading.contracts import (
    CalculatedResult,
    ExamDefinition,
    ExamSummary,
    GradeAssignment,
    ItemMisses,
    ItemNumber,
    SchoolBreakdownEntry,
    Student,
    check_cutoffs,
)

# ============================================================================
# Request Schemas
# ============================================================================


class ExamRequest(BaseModel):
    """One exam plus the roster its entries refer to."""

    exam: ExamDefinition
    roster: list[Student] = Field(default_factory=list)


class ResultsRequest(ExamRequest):
    """Ranking request; by_school adds the intra-school ranking pass."""

    by_school: bool = False


class GradesRequest(ExamRequest):
    """Grade-band request; cutoffs override the exam's and the service default."""

    cutoffs: list[float] | None = Field(
        default=None,
        description="Ascending upper percentile bounds ending at 100",
    )

    @field_validator("cutoffs")
    @classmethod
    def validate_cutoffs(cls, v: list[float] | None) -> list[float] | None:
        """Same rules as exam-level cutoffs."""
        return check_cutoffs(v)


class HistoryRequest(BaseModel):
    """Every exam to search plus the roster."""

    exams: list[ExamDefinition] = Field(default_factory=list)
    roster: list[Student] = Field(default_factory=list)


class EntryRequest(BaseModel):
    """Raw input for one student's score entry."""

    exam: ExamDefinition
    student_id: str = Field(..., min_length=1)
    score: float | None = Field(default=None, allow_inf_nan=False)
    missed: list[ItemNumber] | None = None
    missed_text: str | None = Field(
        default=None,
        description="Comma-separated missed items, used when missed is not given",
    )
    answers: dict[ItemNumber, str] | None = None


# ============================================================================
# Response Schemas
# ============================================================================


class SummaryResponse(BaseModel):
    """Ranked results, exam summary and school breakdown in one payload."""

    results: list[CalculatedResult]
    summary: ExamSummary
    breakdown: list[SchoolBreakdownEntry]
    item_misses: list[ItemMisses]


class GradesResponse(BaseModel):
    """Grade band per student and head count per band."""

    cutoffs: list[float]
    grades: list[GradeAssignment]
    distribution: dict[int, int]
