"""
Question matching.

Resolves the question identifier a student wrote to the exam question it
refers to. Identifiers are compared on their first numeric token so that
"Q1", "1(a)", " 1 " and "1-ii" all refer to question 1.
"""

import re
from typing import Any, Iterable

from exam_grader.models import Question

_DIGIT_RUN = re.compile(r"[0-9]+")


def clean_question_number(raw: Any) -> str:
    """Trim and upper-case a raw identifier; ``None`` becomes an empty string."""
    if raw is None:
        return ""
    return str(raw).strip().upper()


def normalize_question_number(raw: Any) -> str:
    """
    Reduce an identifier to its matching key.

    The key is the first run of decimal digits in the cleaned identifier
    (so a "Q" prefix is ignored), or the cleaned identifier itself when it
    contains no digits at all.
    Normalising an already normalised key returns it unchanged.

    Args:
        raw: Identifier as written in the exam or the submission.

    Returns:
        The matching key.
    """
    cleaned = clean_question_number(raw)
    match = _DIGIT_RUN.search(cleaned)
    return match.group(0) if match else cleaned


def match_question(raw: Any, questions: Iterable[Question]) -> Question | None:
    """
    Find the question a submitted identifier refers to.

    Questions are scanned in order and the first one with an equal matching
    key wins, so duplicate stems ("1a" and "1b") resolve to the earlier one.

    Args:
        raw: Identifier as written by the student.
        questions: Exam questions in scan order.

    Returns:
        The matching question, or None when no question matches.
    """
    key = normalize_question_number(raw)
    for question in questions:
        if normalize_question_number(question.question_number) == key:
            return question
    return None
