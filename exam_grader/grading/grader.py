"""
Grading client.

Grades one answer with the oracle: builds the prompt, makes a single
call, parses the reply and caps the marks at the question's maximum.
Every way the oracle can let us down comes back as a GradingFailure;
nothing here raises for an unreachable or confused oracle.
"""

import logging

from exam_grader.config import Settings, get_settings
from exam_grader.grading.llm_client import LLMClient, LLMError
from exam_grader.grading.prompt_builder import PromptBuilder
from exam_grader.grading.scorer import GradingFailure, ParsedGrade, ResponseParser
from exam_grader.models import Question

logger = logging.getLogger(__name__)


class GradingClient:
    """Stateless adapter between exam questions and the grading oracle."""

    def __init__(self, settings: Settings | None = None, llm_client: LLMClient | None = None):
        """
        Initialize the grading client.

        Args:
            settings: Configuration settings. Uses global settings if not provided.
            llm_client: Oracle transport. Built from settings if not provided.
        """
        self._settings = settings or get_settings()
        self._llm_client = llm_client or LLMClient(self._settings)
        self._response_parser = ResponseParser()

    def grade(self, question: Question, answer_text: str) -> ParsedGrade | GradingFailure:
        """
        Grade a single answer.

        Args:
            question: The matched exam question.
            answer_text: The student's answer.

        Returns:
            ParsedGrade with marks capped at ``question.max_marks``, or
            GradingFailure describing why the oracle's output was rejected.
        """
        prompt = PromptBuilder.build_grading_prompt(question, answer_text)

        try:
            raw_response = self._llm_client.complete(prompt)
        except LLMError as e:
            return GradingFailure(str(e), cause=e)

        parsed = self._response_parser.parse(raw_response)
        if isinstance(parsed, GradingFailure):
            return parsed

        if parsed.marks > question.max_marks:
            logger.info(
                "Capping marks for question %s: model gave %s, maximum is %s",
                question.question_number,
                parsed.marks,
                question.max_marks,
            )
            return parsed._replace(marks=question.max_marks)
        return parsed

    def health_check(self) -> bool:
        """True if the oracle answers a ping."""
        return self._llm_client.health_check()
