"""In-memory store, used by tests and for embedding the grader in another process."""

import threading
from typing import Iterable

from exam_grader.models import Exam, Submission
from exam_grader.storage.base import ExamStore, SubmissionStore


class InMemoryStore(ExamStore, SubmissionStore):
    """Keeps exams and submissions in dictionaries, handing out deep copies."""

    def __init__(self, exams: Iterable[Exam] = (), submissions: Iterable[Submission] = ()):
        self._lock = threading.Lock()
        self._exams: dict[str, Exam] = {exam.exam_id: exam for exam in exams}
        self._submissions: dict[str, Submission] = {
            s.roll_number: s.model_copy(deep=True) for s in submissions
        }

    def add_exam(self, exam: Exam) -> None:
        with self._lock:
            self._exams[exam.exam_id] = exam

    def get_exam(self, exam_id: str) -> Exam | None:
        with self._lock:
            return self._exams.get(exam_id)

    def get_submission(self, roll_number: str) -> Submission | None:
        with self._lock:
            submission = self._submissions.get(roll_number)
            return submission.model_copy(deep=True) if submission is not None else None

    def save_submission(self, submission: Submission) -> None:
        with self._lock:
            self._submissions[submission.roll_number] = submission.model_copy(deep=True)
