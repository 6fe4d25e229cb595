"""
Evaluation engine - the core orchestrator.

Runs every submitted answer through question matching, oracle grading
and (when the oracle's output cannot be trusted) the fallback scorer,
then aggregates the results onto the submission.
"""

import logging
from concurrent.futures import ThreadPoolExecutor
from datetime import datetime, timezone
from decimal import Decimal
from typing import Sequence

from exam_grader.config import Settings, get_settings
from exam_grader.grading.aggregator import aggregate
from exam_grader.grading.fallback import FallbackScorer
from exam_grader.grading.grader import GradingClient
from exam_grader.grading.matcher import clean_question_number, match_question
from exam_grader.grading.scorer import GradingFailure
from exam_grader.models import Evaluation, EvaluationResult, Exam, Submission, SubmittedAnswer

logger = logging.getLogger(__name__)

NOT_FOUND_FEEDBACK = "Question not found in exam config."


class EvaluationEngine:
    """
    Evaluates a submission against an exam.

    Each answer yields exactly one Evaluation, in submission order. Per-answer
    problems (unknown question, oracle failure) are recorded in the
    evaluation; anything else propagates and leaves the submission untouched.
    """

    def __init__(
        self,
        settings: Settings | None = None,
        grading_client: GradingClient | None = None,
        fallback_scorer: FallbackScorer | None = None,
    ):
        """
        Initialize the evaluation engine.

        Args:
            settings: Configuration settings. Uses global settings if not provided.
            grading_client: Oracle grading client. Built from settings if not provided.
            fallback_scorer: Scorer used when grading fails.
        """
        self._settings = settings or get_settings()
        self._grading_client = grading_client or GradingClient(self._settings)
        self._fallback_scorer = fallback_scorer or FallbackScorer()

    def evaluate(self, submission: Submission, exam: Exam) -> EvaluationResult:
        """
        Evaluate every answer of a submission and record the outcome on it.

        Args:
            submission: The student's submission. Updated in place once all
                answers have been evaluated.
            exam: The exam the submission is graded against.

        Returns:
            The evaluations with their total and verdict.
        """
        evaluations = self._evaluate_answers(submission.answers, exam)
        total, verdict = aggregate(evaluations, exam.pass_marks)

        submission.evaluated = evaluations
        submission.total_marks = total
        submission.result = verdict
        submission.exam_id = exam.exam_id
        submission.evaluated_at = datetime.now(timezone.utc)

        logger.info(
            "Evaluated %s against exam %s: %s/%s (%s)",
            submission.roll_number,
            exam.exam_id,
            total,
            exam.total_max_marks,
            verdict.value,
        )

        return EvaluationResult(evaluations=tuple(evaluations), total_marks=total, result=verdict)

    def _evaluate_answers(
        self, answers: Sequence[SubmittedAnswer], exam: Exam
    ) -> list[Evaluation]:
        """
        Evaluate answers, optionally on a thread pool.

        ``Executor.map`` yields results in input order, so the output lines
        up with the submission whether or not grading runs in parallel.
        """
        workers = min(self._settings.grading_workers, len(answers))
        if workers <= 1:
            return [self._evaluate_answer(answer, exam) for answer in answers]

        with ThreadPoolExecutor(max_workers=workers, thread_name_prefix="grader") as pool:
            return list(pool.map(lambda answer: self._evaluate_answer(answer, exam), answers))

    def _evaluate_answer(self, answer: SubmittedAnswer, exam: Exam) -> Evaluation:
        """Evaluate a single answer."""
        question_number = clean_question_number(answer.question_number)
        question = match_question(answer.question_number, exam.questions)

        if question is None:
            logger.info("Question %r not found in exam %s", question_number, exam.exam_id)
            return Evaluation(
                question_number=question_number,
                marks=Decimal(0),
                feedback=NOT_FOUND_FEEDBACK,
            )

        outcome = self._grading_client.grade(question, answer.answer_text)
        used_fallback = isinstance(outcome, GradingFailure)
        if isinstance(outcome, GradingFailure):
            logger.warning(
                "Error evaluating question %s: %s; using fallback score",
                question_number,
                outcome.reason,
            )
            outcome = self._fallback_scorer.score(question.max_marks)

        return Evaluation(
            question_number=question_number,
            marks=self._clamp(outcome.marks, question.max_marks),
            feedback=outcome.feedback,
            used_fallback=used_fallback,
        )

    @staticmethod
    def _clamp(marks: Decimal, max_marks: Decimal) -> Decimal:
        """Bound marks to ``[0, max_marks]``."""
        return min(max(marks, Decimal(0)), max_marks)

    def health_check(self) -> bool:
        """
        Check if the grading oracle is reachable.

        Returns:
            True if the oracle answers a ping.
        """
        return self._grading_client.health_check()
