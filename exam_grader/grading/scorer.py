"""
Response parser for the grading oracle.

Turns the oracle's raw reply into a tagged result: either a ParsedGrade
carrying validated marks and feedback, or a GradingFailure naming which
check the reply did not pass. The parser never raises for bad replies.
"""

import json
import logging
from decimal import Decimal
from typing import Any, NamedTuple

logger = logging.getLogger(__name__)

EMPTY_RESPONSE = "Empty response from model"
MALFORMED_JSON = "Malformed JSON from model"
MISSING_FIELDS = "Missing marks or feedback in parsed response"


class ParsedGrade(NamedTuple):
    """Marks and feedback read from a well-formed oracle reply."""

    marks: Decimal
    feedback: str


class GradingFailure(NamedTuple):
    """An oracle reply (or call) that cannot be trusted."""

    reason: str
    cause: Exception | None = None


def _reject_constant(value: str) -> Any:
    raise ValueError(f"Non-finite number in JSON: {value}")


class ResponseParser:
    """
    Parses and validates oracle grading replies.

    Checks, in order:
    1. The reply has text
    2. The text is a single JSON object
    3. ``marks`` is a finite number and ``feedback`` a non-empty string
    """

    def parse(self, response: str | None) -> ParsedGrade | GradingFailure:
        """
        Parse an oracle reply.

        Args:
            response: Raw reply text (may be None or blank).

        Returns:
            ParsedGrade on success, otherwise GradingFailure.
        """
        text = (response or "").strip()
        if not text:
            return GradingFailure(EMPTY_RESPONSE)

        try:
            data = json.loads(text, parse_float=Decimal, parse_constant=_reject_constant)
        except (ValueError, RecursionError) as e:
            logger.warning("JSON parse error on text: %r", text)
            return GradingFailure(MALFORMED_JSON, cause=e)

        if not isinstance(data, dict):
            logger.warning("Reply is JSON but not an object: %r", text)
            return GradingFailure(MALFORMED_JSON)

        marks = data.get("marks")
        feedback = data.get("feedback")
        if not self._is_number(marks) or not isinstance(feedback, str) or not feedback.strip():
            return GradingFailure(MISSING_FIELDS)

        return ParsedGrade(marks=Decimal(marks), feedback=feedback)

    @staticmethod
    def _is_number(value: Any) -> bool:
        """True for ints and Decimals; booleans do not count as numbers."""
        if isinstance(value, bool):
            return False
        return isinstance(value, (int, Decimal))
