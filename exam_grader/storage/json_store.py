"""
JSON file store.

Layout under the root directory::

    exams/<exam_id>.json
    submissions/<roll_number>.json

Keys are percent-encoded into file names, so any roll number is safe to
use. Writes go to a temporary file that is then moved into place.
"""

import logging
import os
import tempfile
from pathlib import Path
from typing import TypeVar
from urllib.parse import quote

from pydantic import BaseModel, ValidationError

from exam_grader.models import Exam, Submission
from exam_grader.storage.base import ExamStore, StorageError, SubmissionStore

logger = logging.getLogger(__name__)

_ModelT = TypeVar("_ModelT", bound=BaseModel)


class JsonFileStore(ExamStore, SubmissionStore):
    """File-backed store holding one JSON document per exam or submission."""

    EXAMS_DIR = "exams"
    SUBMISSIONS_DIR = "submissions"

    def __init__(self, root: Path | str):
        self._root = Path(root)

    @property
    def root(self) -> Path:
        return self._root

    def exam_path(self, exam_id: str) -> Path:
        return self._root / self.EXAMS_DIR / f"{quote(exam_id, safe='')}.json"

    def submission_path(self, roll_number: str) -> Path:
        return self._root / self.SUBMISSIONS_DIR / f"{quote(roll_number, safe='')}.json"

    def get_exam(self, exam_id: str) -> Exam | None:
        return self._load(self.exam_path(exam_id), Exam)

    def save_exam(self, exam: Exam) -> None:
        self._write(self.exam_path(exam.exam_id), exam)

    def get_submission(self, roll_number: str) -> Submission | None:
        return self._load(self.submission_path(roll_number), Submission)

    def save_submission(self, submission: Submission) -> None:
        self._write(self.submission_path(submission.roll_number), submission)

    def _load(self, path: Path, model: type[_ModelT]) -> _ModelT | None:
        """Read and validate a document; None if the file does not exist."""
        try:
            content = path.read_text(encoding="utf-8")
        except FileNotFoundError:
            return None
        except OSError as e:
            raise StorageError("Failed to read document", location=path, cause=e) from e

        try:
            return model.model_validate_json(content)
        except ValidationError as e:
            raise StorageError(
                f"Invalid {model.__name__.lower()} document: {e.error_count()} error(s)",
                location=path,
                cause=e,
            ) from e

    def _write(self, path: Path, document: BaseModel) -> None:
        """Write a document atomically."""
        content = document.model_dump_json(by_alias=True, indent=2)
        try:
            path.parent.mkdir(parents=True, exist_ok=True)
            fd, tmp_name = tempfile.mkstemp(dir=path.parent, prefix=".", suffix=".tmp")
            try:
                with os.fdopen(fd, "w", encoding="utf-8") as fh:
                    fh.write(content)
                os.replace(tmp_name, path)
            except BaseException:
                Path(tmp_name).unlink(missing_ok=True)
                raise
        except OSError as e:
            raise StorageError("Failed to write document", location=path, cause=e) from e
        logger.debug("Wrote %s", path)
