"""
Evaluation service.

Entry point for an evaluation request: validates the caller's keys,
loads the submission and its exam, runs the evaluation engine and
persists the result. Structural problems (bad keys, missing documents,
unexpected errors) abort the request with an error that carries an
HTTP-equivalent status code; per-answer problems never do.
"""

import logging
import re
import threading
from contextlib import contextmanager
from typing import Any, ClassVar, Iterator

from exam_grader.grading import EvaluationEngine
from exam_grader.models import EvaluationResponse, Submission
from exam_grader.storage import ExamStore, StorageError, SubmissionStore

logger = logging.getLogger(__name__)

EXAM_ID_PATTERN = re.compile(r"[0-9a-fA-F]{24}")


# ==============================================================================
# Errors
# ==============================================================================


class EvaluationServiceError(Exception):
    """Base class for request-level failures."""

    status_code: ClassVar[int] = 500

    def __init__(self, message: str, cause: Exception | None = None):
        self.message = message
        self.cause = cause
        super().__init__(message)

    def to_payload(self) -> dict[str, Any]:
        """Caller-facing error body."""
        return {"status": self.status_code, "error": self.message}


class ClientInputError(EvaluationServiceError):
    """Missing or malformed request identifiers."""

    status_code = 400


class NotFoundError(EvaluationServiceError):
    """The submission or the exam does not exist."""

    status_code = 404


class EvaluationFailedError(EvaluationServiceError):
    """Unexpected failure while evaluating; nothing was persisted."""

    status_code = 500

    def __init__(self, cause: Exception | None = None):
        super().__init__("Evaluation failed", cause=cause)


def is_valid_exam_id(exam_id: str) -> bool:
    """True for a 24-character hexadecimal reference identifier."""
    return EXAM_ID_PATTERN.fullmatch(exam_id) is not None


# ==============================================================================
# Service
# ==============================================================================


class EvaluationService:
    """
    Evaluates stored submissions.

    Evaluations of the same roll number are serialised within this
    process. Separate processes sharing a store are not coordinated; the
    last write wins.
    """

    def __init__(
        self,
        submissions: SubmissionStore,
        exams: ExamStore,
        engine: EvaluationEngine | None = None,
    ):
        """
        Initialize the service.

        Args:
            submissions: Where submissions are loaded from and saved to.
            exams: Where exams are loaded from.
            engine: Evaluation engine. Built from global settings on first use if not provided,
                so read-only use of the service needs no oracle configuration.
        """
        self._submissions = submissions
        self._exams = exams
        self._engine = engine
        # roll number -> [lock, number of requests holding or waiting on it]
        self._locks: dict[str, list[Any]] = {}
        self._locks_guard = threading.Lock()

    @property
    def engine(self) -> EvaluationEngine:
        if self._engine is None:
            self._engine = EvaluationEngine()
        return self._engine

    def evaluate(self, roll_number: str | None, exam_id: str | None) -> EvaluationResponse:
        """
        Evaluate a student's submission.

        The first evaluation binds the submission to ``exam_id``. Later
        requests naming a different exam are still graded against the bound
        exam; the mismatch is logged and returned as a warning.

        Args:
            roll_number: Student key of the submission.
            exam_id: Reference identifier of the exam.

        Returns:
            The evaluations, total marks and verdict.

        Raises:
            ClientInputError: If a key is missing or the exam id is malformed.
            NotFoundError: If the submission or the exam does not exist.
            EvaluationFailedError: If evaluation or persistence fails unexpectedly.
        """
        roll_number = (roll_number or "").strip()
        exam_id = (exam_id or "").strip()

        if not roll_number or not exam_id:
            raise ClientInputError("rollNumber and examId are required")
        if not is_valid_exam_id(exam_id):
            raise ClientInputError("Invalid examId")

        with self._locked(roll_number):
            return self._evaluate_locked(roll_number, exam_id)

    def get_submission(self, roll_number: str) -> Submission:
        """
        Load a submission with its most recent evaluation.

        Raises:
            ClientInputError: If the roll number is blank.
            NotFoundError: If no submission is stored under the roll number.
            EvaluationFailedError: If the store cannot be read.
        """
        roll_number = (roll_number or "").strip()
        if not roll_number:
            raise ClientInputError("rollNumber is required")
        return self._load_submission(roll_number)

    def health_check(self) -> bool:
        """True if the grading oracle is reachable."""
        return self.engine.health_check()

    def _evaluate_locked(self, roll_number: str, exam_id: str) -> EvaluationResponse:
        submission = self._load_submission(roll_number)

        warnings: list[str] = []
        bound_exam_id = submission.exam_id or exam_id
        if bound_exam_id != exam_id:
            message = (
                f"Submission {roll_number} is bound to exam {bound_exam_id}; "
                f"requested exam {exam_id} was ignored"
            )
            logger.warning(message)
            warnings.append(message)

        try:
            exam = self._exams.get_exam(bound_exam_id)
        except StorageError as e:
            logger.error("Failed to load exam %s: %s", bound_exam_id, e)
            raise EvaluationFailedError(cause=e) from e
        if exam is None:
            raise NotFoundError("Exam not found")

        try:
            result = self.engine.evaluate(submission, exam)
            self._submissions.save_submission(submission)
        except Exception as e:
            logger.exception("Evaluation error for %s", roll_number)
            raise EvaluationFailedError(cause=e) from e

        return EvaluationResponse(
            evaluations=result.evaluations,
            total_marks=result.total_marks,
            result=result.result,
            warnings=tuple(warnings),
        )

    def _load_submission(self, roll_number: str) -> Submission:
        try:
            submission = self._submissions.get_submission(roll_number)
        except StorageError as e:
            logger.error("Failed to load submission %s: %s", roll_number, e)
            raise EvaluationFailedError(cause=e) from e
        if submission is None:
            raise NotFoundError("Student not found")
        return submission

    @contextmanager
    def _locked(self, roll_number: str) -> Iterator[None]:
        """Hold the lock for a roll number; the entry is dropped once nobody needs it."""
        with self._locks_guard:
            entry = self._locks.setdefault(roll_number, [threading.Lock(), 0])
            entry[1] += 1
        try:
            with entry[0]:
                yield
        finally:
            with self._locks_guard:
                entry[1] -= 1
                if entry[1] == 0:
                    del self._locks[roll_number]
