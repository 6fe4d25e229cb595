"""
Base classes for exam and submission storage.

Defines the lookup/save interface the evaluation service depends on, so
that a file store, an in-memory store or a database adapter can be
swapped in without touching the grading code.
"""

from abc import ABC, abstractmethod
from pathlib import Path

from exam_grader.models import Exam, Submission


class StorageError(Exception):
    """
    Raised when a stored document cannot be read or written.

    A missing document is not an error; lookups return None for that.
    """

    def __init__(self, message: str, location: str | Path | None = None, cause: Exception | None = None):
        self.location = str(location) if location is not None else None
        self.cause = cause
        if location is not None:
            message = f"{message} ({location})"
        super().__init__(message)


class ExamStore(ABC):
    """Read access to exam definitions."""

    @abstractmethod
    def get_exam(self, exam_id: str) -> Exam | None:
        """
        Look up an exam.

        Args:
            exam_id: Reference identifier of the exam.

        Returns:
            The exam, or None if no exam has this identifier.

        Raises:
            StorageError: If the stored exam cannot be read.
        """


class SubmissionStore(ABC):
    """Read/write access to student submissions."""

    @abstractmethod
    def get_submission(self, roll_number: str) -> Submission | None:
        """
        Look up a submission by student key.

        The returned object is a private copy; changes to it are only
        stored by ``save_submission``.

        Raises:
            StorageError: If the stored submission cannot be read.
        """

    @abstractmethod
    def save_submission(self, submission: Submission) -> None:
        """
        Persist a submission in a single write.

        Raises:
            StorageError: If the submission cannot be written.
        """
