"""Aggregation of per-question evaluations into a total and a verdict."""

from decimal import Decimal
from typing import Iterable, NamedTuple

from exam_grader.models import Evaluation, Verdict


class AggregateResult(NamedTuple):
    total: Decimal
    verdict: Verdict


def aggregate(evaluations: Iterable[Evaluation], pass_marks: Decimal) -> AggregateResult:
    """
    Sum the marks and compare the total with the pass mark.

    Every evaluation counts, including zero-mark "not found" entries.
    Reaching the pass mark exactly is a pass.
    """
    total = sum((e.marks for e in evaluations), Decimal(0))
    verdict = Verdict.PASS if total >= pass_marks else Verdict.FAIL
    return AggregateResult(total=total, verdict=verdict)
