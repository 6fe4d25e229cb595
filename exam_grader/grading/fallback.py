"""
Fallback scoring.

Used when the oracle's reply cannot be trusted. Marks are drawn uniformly
from the whole integer range the question allows and the feedback is
deliberately non-committal.
"""

import random
from decimal import ROUND_FLOOR, Decimal
from typing import NamedTuple

FALLBACK_FEEDBACK: tuple[str, ...] = (
    "Answer is somewhat related to the topic.",
    "Fair attempt, but lacks depth.",
    "Contains partial relevant information.",
    "Needs improvement, but shows effort.",
    "Answer lacks clarity but is understandable.",
)


class FallbackGrade(NamedTuple):
    marks: Decimal
    feedback: str


class FallbackScorer:
    """
    Produces a bounded random grade.

    Args:
        rng: Random source. Tests pass a seeded ``random.Random``.
        feedback: Phrases to choose from.
    """

    def __init__(
        self,
        rng: random.Random | None = None,
        feedback: tuple[str, ...] = FALLBACK_FEEDBACK,
    ):
        if not feedback:
            raise ValueError("At least one fallback feedback phrase is required")
        self._rng = rng or random.Random()
        self._feedback = feedback

    def score(self, max_marks: Decimal) -> FallbackGrade:
        """
        Draw marks uniformly from the integers in ``[0, max_marks]``.

        Args:
            max_marks: Maximum marks of the question.

        Returns:
            FallbackGrade whose marks never exceed ``max_marks``.
        """
        ceiling = int(Decimal(max_marks).to_integral_value(rounding=ROUND_FLOOR))
        marks = self._rng.randint(0, max(ceiling, 0))
        return FallbackGrade(marks=Decimal(marks), feedback=self._rng.choice(self._feedback))
