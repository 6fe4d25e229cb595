"""
Pydantic models for the exam grader.

These models define the schemas for:
- Exams and their questions (the answer key)
- Student submissions and the answers they contain
- Per-question evaluations and the aggregated verdict

Marks are held as Decimal so that totals are exact sums of the
per-question marks. Field names are snake_case in Python and camelCase
on the wire (``questionNumber``, ``totalMarks``, ...); both spellings are
accepted on input.
"""

from datetime import datetime
from decimal import Decimal, InvalidOperation
from enum import Enum
from typing import Annotated, Any

from pydantic import (
    BaseModel,
    BeforeValidator,
    ConfigDict,
    Field,
    PlainSerializer,
    field_validator,
    model_validator,
)
from pydantic.alias_generators import to_camel


def _to_decimal(value: Any) -> Decimal:
    """Convert numeric input to a finite Decimal, rejecting booleans."""
    if isinstance(value, bool):
        raise ValueError("marks must be a number, not a boolean")
    if isinstance(value, Decimal):
        result = value
    else:
        try:
            result = Decimal(str(value).strip())
        except InvalidOperation as e:
            raise ValueError(f"Invalid numeric value: {value!r}") from e
    if not result.is_finite():
        raise ValueError(f"marks must be finite, got {value!r}")
    return result


def _to_number(value: Decimal) -> int | float:
    """Render a Decimal as a plain JSON number."""
    if value == value.to_integral_value():
        return int(value)
    return float(value)


Marks = Annotated[
    Decimal,
    BeforeValidator(_to_decimal),
    PlainSerializer(_to_number, return_type=int | float, when_used="json"),
]


def _to_identifier(value: Any) -> str:
    if value is None:
        return ""
    return str(value)


QuestionNumber = Annotated[str, BeforeValidator(_to_identifier)]


class _WireModel(BaseModel):
    """Base model accepting both snake_case and camelCase field names."""

    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True)


class Verdict(str, Enum):
    """Pass/fail classification of a submission."""

    PASS = "Pass"
    FAIL = "Fail"


# ==============================================================================
# Exam Models
# ==============================================================================


class Question(_WireModel):
    """
    A single question in an exam's answer key.

    The identifier is free-form ("1", "2(a)", "3-ii"); matching against
    submitted answers uses its first numeric token.
    """

    model_config = ConfigDict(frozen=True)

    question_number: QuestionNumber = Field(
        ...,
        description="Identifier of the question as configured in the exam",
    )

    question_text: str = Field(
        default="",
        description="The question posed to the student",
    )

    max_marks: Marks = Field(
        ...,
        gt=0,
        description="Maximum marks available for this question",
    )

    @model_validator(mode="before")
    @classmethod
    def accept_legacy_keys(cls, data: Any) -> Any:
        """Accept the ``question`` and ``marks`` spellings used by older exam documents."""
        if isinstance(data, dict):
            data = dict(data)
            if "question" in data and not ({"question_text", "questionText"} & data.keys()):
                data["questionText"] = data.pop("question")
            if "marks" in data and not ({"max_marks", "maxMarks"} & data.keys()):
                data["maxMarks"] = data.pop("marks")
        return data


class Exam(_WireModel):
    """
    An exam definition: its questions and the passing threshold.

    Question order is significant. When two questions share a first
    number, the first one in this order wins during matching.
    """

    model_config = ConfigDict(frozen=True)

    exam_id: str = Field(
        ...,
        min_length=1,
        description="Reference identifier of the exam",
    )

    title: str = Field(
        default="",
        description="Human-readable exam title",
    )

    questions: tuple[Question, ...] = Field(
        default=(),
        description="Questions in scan order",
    )

    pass_marks: Marks = Field(
        ...,
        ge=0,
        description="Minimum total marks required to pass",
    )

    @model_validator(mode="before")
    @classmethod
    def accept_document_id(cls, data: Any) -> Any:
        """Accept ``_id`` as the exam identifier."""
        if isinstance(data, dict) and "_id" in data and not ({"exam_id", "examId"} & data.keys()):
            data = dict(data)
            data["examId"] = data.pop("_id")
        return data

    @property
    def total_max_marks(self) -> Decimal:
        """Sum of the maximum marks of every question."""
        return sum((q.max_marks for q in self.questions), Decimal(0))


# ==============================================================================
# Submission Models
# ==============================================================================


class SubmittedAnswer(_WireModel):
    """One answer written by a student."""

    model_config = ConfigDict(frozen=True)

    question_number: QuestionNumber = Field(
        default="",
        description="Question identifier as written by the student",
    )

    answer_text: str = Field(
        default="",
        description="Free-text answer body",
    )

    @field_validator("answer_text", mode="before")
    @classmethod
    def coerce_answer_text(cls, v: Any) -> str:
        return _to_identifier(v)


class Evaluation(_WireModel):
    """
    The grading outcome for a single submitted answer.

    ``marks`` never exceeds the matched question's maximum; answers whose
    question could not be found are recorded with zero marks.
    """

    model_config = ConfigDict(frozen=True)

    question_number: str = Field(
        ...,
        description="Submitted identifier, trimmed and upper-cased",
    )

    marks: Marks = Field(
        ...,
        ge=0,
        description="Marks awarded",
    )

    feedback: str = Field(
        ...,
        description="Feedback shown to the student",
    )

    used_fallback: bool = Field(
        default=False,
        description="Whether the marks came from the fallback scorer",
    )


class Submission(_WireModel):
    """
    A student's answer sheet and, once evaluated, its results.

    Submissions are created independently of evaluation. The evaluation
    engine fills in ``evaluated``, ``total_marks`` and ``result`` in place.
    """

    roll_number: str = Field(
        ...,
        min_length=1,
        description="Student key the submission is stored under",
    )

    exam_id: str | None = Field(
        default=None,
        description="Exam this submission is bound to; set on first evaluation",
    )

    answers: list[SubmittedAnswer] = Field(
        default_factory=list,
        description="Answers in the order they were submitted",
    )

    evaluated: list[Evaluation] = Field(
        default_factory=list,
        description="Evaluations from the most recent run, one per answer",
    )

    total_marks: Marks = Field(
        default=Decimal(0),
        ge=0,
        description="Sum of the marks in ``evaluated``",
    )

    result: Verdict | None = Field(
        default=None,
        description="Verdict from the most recent run",
    )

    evaluated_at: datetime | None = Field(
        default=None,
        description="When the most recent evaluation completed",
    )


# ==============================================================================
# Result Models
# ==============================================================================


class EvaluationResult(_WireModel):
    """Evaluations of one submission together with the aggregated outcome."""

    model_config = ConfigDict(frozen=True)

    evaluations: tuple[Evaluation, ...] = Field(
        default=(),
        description="One evaluation per submitted answer, in submission order",
    )

    total_marks: Marks = Field(
        ...,
        description="Exact sum of the evaluation marks",
    )

    result: Verdict = Field(
        ...,
        description="Pass if total_marks reaches the exam's pass marks",
    )


class EvaluationResponse(EvaluationResult):
    """Caller-facing payload returned after a successful evaluation."""

    message: str = Field(
        default="Evaluation complete",
        description="Human-readable status message",
    )

    warnings: tuple[str, ...] = Field(
        default=(),
        description="Non-fatal issues noticed while handling the request",
    )

    def to_payload(self) -> dict[str, Any]:
        """Serialise with camelCase keys and plain JSON numbers."""
        return self.model_dump(mode="json", by_alias=True)
