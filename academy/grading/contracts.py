"""Grading data contracts: roster, exam definition, derived results."""

from enum import Enum
from typing import Annotated, Literal

from pydantic import BaseModel, ConfigDict, Field, field_validator

UNKNOWN_STUDENT_NAME = "Unknown"

# Upper bound on item numbers and total_items; keeps per-item series bounded.
MAX_EXAM_ITEMS = 500

ItemNumber = Annotated[int, Field(ge=1, le=MAX_EXAM_ITEMS)]


def check_cutoffs(v: list[float] | None) -> list[float] | None:
    """Validate grade cutoffs: strictly ascending, within (0, 100], last one 100."""
    if v is None:
        return v
    if not v:
        raise ValueError("grade cutoffs cannot be empty")
    if any(b <= a for a, b in zip(v, v[1:])):
        raise ValueError("grade cutoffs must be strictly ascending")
    if v[0] <= 0 or v[-1] != 100:
        raise ValueError("grade cutoffs must lie in (0, 100] and end at 100")
    return v


class Student(BaseModel):
    """Roster entry."""

    model_config = ConfigDict(frozen=True)

    id: str = Field(..., min_length=1)
    name: str
    school: str | None = None
    phone: str | None = None
    note: str | None = None
    created_at: int | None = Field(default=None, description="Epoch milliseconds")

    @field_validator("school", mode="before")
    @classmethod
    def blank_school_is_none(cls, v):
        """A blank school string means no affiliation."""
        if isinstance(v, str) and not v.strip():
            return None
        return v.strip() if isinstance(v, str) else v


class QuestionType(str, Enum):
    """Item answer format."""

    MULTIPLE = "multiple"
    SUBJECTIVE = "subjective"


class QuestionConfig(BaseModel):
    """Per-item answer key and point weight."""

    number: ItemNumber
    type: QuestionType = QuestionType.MULTIPLE
    correct_answer: str = ""
    point: float = Field(default=1.0, ge=0.0, allow_inf_nan=False)


class PointScored(BaseModel):
    """Score is a point total out of max_score."""

    kind: Literal["point"] = "point"
    max_score: float = Field(..., ge=0.0, allow_inf_nan=False)
    questions: list[QuestionConfig] | None = None


class CountScored(BaseModel):
    """Score is the number of correct items."""

    kind: Literal["count"] = "count"


class SimpleCount(BaseModel):
    """Vocabulary-style test: score is total items minus missed items."""

    kind: Literal["simple_count"] = "simple_count"


ExamMode = Annotated[PointScored | CountScored | SimpleCount, Field(discriminator="kind")]


class ScoreEntry(BaseModel):
    """One student's raw performance on one exam."""

    student_id: str
    score: float = Field(..., allow_inf_nan=False)
    wrong_questions: list[ItemNumber] | None = None
    student_answers: dict[ItemNumber, str] | None = None


class ExamDefinition(BaseModel):
    """An exam and its raw score entries."""

    id: str = ""
    title: str = ""
    date: str = ""
    mode: ExamMode = Field(default_factory=CountScored)
    total_items: int = Field(default=0, ge=0, le=MAX_EXAM_ITEMS)
    target_schools: list[str] | None = None
    pass_threshold: float | None = Field(default=None, allow_inf_nan=False)
    grade_cutoffs: list[float] | None = Field(
        default=None,
        description="Ascending upper percentile bounds; the last bound must be 100",
    )
    scores: list[ScoreEntry] = Field(default_factory=list)

    @field_validator("scores", mode="before")
    @classmethod
    def missing_scores_are_empty(cls, v):
        """Treat an absent scores collection as no participants."""
        if v is None or not isinstance(v, (list, tuple)):
            return []
        return v

    @field_validator("grade_cutoffs")
    @classmethod
    def validate_cutoffs(cls, v: list[float] | None) -> list[float] | None:
        """Cutoffs must ascend strictly and end at 100."""
        return check_cutoffs(v)


class CalculatedResult(BaseModel):
    """One ranked, annotated row per participant."""

    student_id: str
    name: str
    school: str | None = None
    score: float
    score_pct: float
    rank: int
    percentile: float
    is_passed: bool | None = None
    wrong_questions: list[int] | None = None
    school_rank: int | None = None
    school_percentile: float | None = None
    school_total: int | None = None


class ExamSummary(BaseModel):
    """Aggregate statistics over one exam's results."""

    average: float = 0.0
    total_students: int = 0
    highest_score: float = 0.0
    lowest_score: float = 0.0
    question_stats: dict[int, int] = Field(default_factory=dict)
    total_items: int | None = None
    passed_count: int | None = None


class SchoolBreakdownEntry(BaseModel):
    """Aggregate over results sharing one school value (None = no school)."""

    school_name: str | None
    average: float
    highest_score: float
    student_count: int


class ItemMisses(BaseModel):
    """Miss count for one item number."""

    number: int
    miss_count: int


class AnswerCount(BaseModel):
    """How many students gave one literal answer."""

    answer: str
    count: int
    is_correct: bool = False


class AnswerDistribution(BaseModel):
    """Answer spread for one item of one exam."""

    number: int
    entries: list[AnswerCount]
    total_count: int
    correct_count: int
    correct_answer: str | None
    accuracy: float


class StudentHistoryRow(BaseModel):
    """One exam as seen by one student."""

    exam_id: str
    title: str
    date: str
    kind: str
    score: float
    unit: str
    average: float
    rank: int
    percentile: float
    total: int
    is_passed: bool | None = None


class StudentHistory(BaseModel):
    """A student's results across exams, oldest first."""

    student_id: str
    name: str
    rows: list[StudentHistoryRow]
    average_score: float | None = None
    highest_score: float | None = None
    exam_count: int = 0


class GradeAssignment(BaseModel):
    """Grade band for one result."""

    student_id: str
    name: str
    percentile: float
    grade: int
