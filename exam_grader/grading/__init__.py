"""
Grading Module.

Answer-evaluation pipeline: question matching, oracle grading with a
fallback scorer, and aggregation into a verdict.
"""

from exam_grader.grading.aggregator import AggregateResult, aggregate
from exam_grader.grading.engine import NOT_FOUND_FEEDBACK, EvaluationEngine
from exam_grader.grading.fallback import FALLBACK_FEEDBACK, FallbackGrade, FallbackScorer
from exam_grader.grading.grader import GradingClient
from exam_grader.grading.llm_client import LLMClient, LLMError
from exam_grader.grading.matcher import match_question, normalize_question_number
from exam_grader.grading.prompt_builder import PromptBuilder
from exam_grader.grading.scorer import GradingFailure, ParsedGrade, ResponseParser

__all__ = [
    "AggregateResult",
    "EvaluationEngine",
    "FALLBACK_FEEDBACK",
    "FallbackGrade",
    "FallbackScorer",
    "GradingClient",
    "GradingFailure",
    "LLMClient",
    "LLMError",
    "NOT_FOUND_FEEDBACK",
    "ParsedGrade",
    "PromptBuilder",
    "ResponseParser",
    "aggregate",
    "match_question",
    "normalize_question_number",
]
