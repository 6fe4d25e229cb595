"""
Pytest configuration and fixtures.

Provides common test fixtures for all test modules.
"""

import json
from decimal import Decimal
from pathlib import Path
from typing import Callable
from unittest.mock import MagicMock

import pytest

from exam_grader.config import Settings
from exam_grader.grading import EvaluationEngine, FallbackScorer, GradingClient
from exam_grader.models import Exam, Question, Submission, SubmittedAnswer
from exam_grader.storage import InMemoryStore, JsonFileStore

EXAM_ID = "64b7f0c2a1d3e4f5a6b7c8d9"
ROLL_NUMBER = "CS-2024-017"


# ==============================================================================
# Exam Fixtures
# ==============================================================================


@pytest.fixture
def sample_question() -> Question:
    """A ten-mark question numbered "1"."""
    return Question(
        question_number="1",
        question_text="Explain the role of mitochondria in a cell.",
        max_marks=Decimal("10"),
    )


@pytest.fixture
def sample_exam(sample_question: Question) -> Exam:
    """Single-question exam with a pass mark of 5."""
    return Exam(
        exam_id=EXAM_ID,
        title="Biology Unit Test",
        questions=(sample_question,),
        pass_marks=Decimal("5"),
    )


@pytest.fixture
def multi_question_exam() -> Exam:
    """Exam with differently formatted question identifiers."""
    return Exam(
        exam_id=EXAM_ID,
        title="Physics Midterm",
        questions=(
            Question(question_number="Q1", question_text="State Newton's first law.", max_marks=5),
            Question(question_number="2(a)", question_text="Define velocity.", max_marks=3),
            Question(question_number="3-ii", question_text="Derive v = u + at.", max_marks=7),
        ),
        pass_marks=Decimal("8"),
    )


# ==============================================================================
# Submission Fixtures
# ==============================================================================


@pytest.fixture
def sample_submission() -> Submission:
    """Unevaluated submission answering question 1."""
    return Submission(
        roll_number=ROLL_NUMBER,
        answers=[
            SubmittedAnswer(
                question_number="1",
                answer_text="Mitochondria produce ATP through cellular respiration.",
            )
        ],
    )


# ==============================================================================
# LLM Response Fixtures
# ==============================================================================


@pytest.fixture
def sample_llm_response() -> str:
    """Valid one-line grading reply."""
    return json.dumps({"marks": 7, "feedback": "Good"})


# ==============================================================================
# Settings Fixtures
# ==============================================================================


@pytest.fixture
def test_settings(tmp_path: Path) -> Settings:
    """Create test settings with mocked values."""
    return Settings(
        together_api_key="test-api-key-for-testing",
        together_base_url="https://test.api.local/v1/",
        together_model="test-model",
        llm_temperature=0.2,
        llm_max_tokens=100,
        grading_timeout_seconds=5.0,
        grading_workers=1,
        data_directory=tmp_path / "data",
        log_level="WARNING",
    )


# ==============================================================================
# Mock Fixtures
# ==============================================================================


@pytest.fixture
def mock_llm_client(sample_llm_response: str) -> MagicMock:
    """LLM client double returning a valid grading reply."""
    client = MagicMock()
    client.complete.return_value = sample_llm_response
    client.health_check.return_value = True
    return client


@pytest.fixture
def make_engine(test_settings: Settings) -> Callable[..., EvaluationEngine]:
    """Build an engine around an LLM client double."""

    def _make(
        llm_client: MagicMock,
        settings: Settings | None = None,
        fallback_scorer: FallbackScorer | None = None,
    ) -> EvaluationEngine:
        settings = settings or test_settings
        return EvaluationEngine(
            settings,
            grading_client=GradingClient(settings, llm_client=llm_client),
            fallback_scorer=fallback_scorer,
        )

    return _make


# ==============================================================================
# Store Fixtures
# ==============================================================================


@pytest.fixture
def memory_store(sample_exam: Exam, sample_submission: Submission) -> InMemoryStore:
    return InMemoryStore(exams=[sample_exam], submissions=[sample_submission])


@pytest.fixture
def json_store(tmp_path: Path, sample_exam: Exam, sample_submission: Submission) -> JsonFileStore:
    store = JsonFileStore(tmp_path / "data")
    store.save_exam(sample_exam)
    store.save_submission(sample_submission)
    return store
