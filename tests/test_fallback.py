"""
Unit tests for the fallback scorer and the result aggregator.
"""

import random
from decimal import Decimal

import pytest

from exam_grader.grading import FALLBACK_FEEDBACK, FallbackScorer, aggregate
from exam_grader.models import Evaluation, Verdict


class _UpperBoundRandom(random.Random):
    """Random source that always draws the largest allowed value."""

    def randint(self, a: int, b: int) -> int:
        return b

    def choice(self, seq):  # type: ignore[no-untyped-def]
        return seq[-1]


class TestFallbackScorer:
    """Tests for FallbackScorer."""

    def test_marks_within_bounds(self) -> None:
        """Test every draw lies in [0, max_marks]."""
        scorer = FallbackScorer(rng=random.Random(1234))

        for _ in range(200):
            grade = scorer.score(Decimal("10"))
            assert Decimal(0) <= grade.marks <= Decimal("10")
            assert grade.marks == grade.marks.to_integral_value()

    def test_every_value_reachable(self) -> None:
        """Test the whole inclusive range is drawn, including both ends."""
        scorer = FallbackScorer(rng=random.Random(42))

        drawn = {scorer.score(Decimal("3")).marks for _ in range(500)}

        assert drawn == {Decimal(0), Decimal(1), Decimal(2), Decimal(3)}

    def test_upper_bound_is_inclusive(self) -> None:
        """Test the maximum itself can be awarded."""
        scorer = FallbackScorer(rng=_UpperBoundRandom())

        grade = scorer.score(Decimal("10"))

        assert grade.marks == Decimal("10")
        assert grade.feedback == FALLBACK_FEEDBACK[-1]

    def test_fractional_maximum_never_exceeded(self) -> None:
        """Test a fractional maximum caps the draw at its floor."""
        scorer = FallbackScorer(rng=_UpperBoundRandom())

        assert scorer.score(Decimal("2.5")).marks == Decimal("2")
        assert scorer.score(Decimal("0.5")).marks == Decimal("0")

    def test_feedback_is_generic(self) -> None:
        """Test feedback always comes from the fixed phrase list."""
        scorer = FallbackScorer(rng=random.Random(7))

        for _ in range(50):
            assert scorer.score(Decimal("5")).feedback in FALLBACK_FEEDBACK

    def test_custom_feedback(self) -> None:
        """Test a custom phrase list is honoured."""
        scorer = FallbackScorer(rng=random.Random(0), feedback=("Pending review.",))

        assert scorer.score(Decimal("4")).feedback == "Pending review."

    def test_empty_feedback_rejected(self) -> None:
        """Test an empty phrase list is a configuration error."""
        with pytest.raises(ValueError, match="feedback phrase"):
            FallbackScorer(feedback=())


class TestAggregate:
    """Tests for aggregate."""

    @staticmethod
    def _evaluation(marks: str) -> Evaluation:
        return Evaluation(question_number="1", marks=Decimal(marks), feedback="-")

    def test_total_is_exact_sum(self) -> None:
        """Test decimal marks sum without rounding error."""
        evaluations = [self._evaluation("0.1"), self._evaluation("0.2"), self._evaluation("2.7")]

        result = aggregate(evaluations, Decimal("3"))

        assert result.total == Decimal("3.0")
        assert result.verdict == Verdict.PASS

    def test_pass_at_threshold(self) -> None:
        """Test reaching the pass mark exactly is a pass."""
        result = aggregate([self._evaluation("5")], Decimal("5"))

        assert result.verdict == Verdict.PASS

    def test_fail_below_threshold(self) -> None:
        """Test falling short of the pass mark is a fail."""
        result = aggregate([self._evaluation("4.5")], Decimal("5"))

        assert result.verdict == Verdict.FAIL

    def test_zero_mark_entries_count(self) -> None:
        """Test not-found entries contribute zero but are included."""
        result = aggregate([self._evaluation("0"), self._evaluation("6")], Decimal("6"))

        assert result.total == Decimal("6")
        assert result.verdict == Verdict.PASS

    def test_no_evaluations(self) -> None:
        """Test an empty submission totals zero."""
        assert aggregate([], Decimal("0")) == (Decimal(0), Verdict.PASS)
        assert aggregate([], Decimal("1")).verdict == Verdict.FAIL
