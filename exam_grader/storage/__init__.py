"""
Storage Module.

Lookup and persistence of exams and submissions:
- JSON files on disk (JsonFileStore)
- In-process dictionaries (InMemoryStore)
"""

from exam_grader.storage.base import ExamStore, StorageError, SubmissionStore
from exam_grader.storage.json_store import JsonFileStore
from exam_grader.storage.memory import InMemoryStore

__all__ = [
    "ExamStore",
    "InMemoryStore",
    "JsonFileStore",
    "StorageError",
    "SubmissionStore",
]
