"""
Prompt builder for per-question grading.

The prompt has a fixed shape: the question, the student's answer, the
maximum marks, the marking rules and a demand for a one-line JSON reply.
Generation is cut at the first newline, so the reply must fit on one line.
"""

from exam_grader.models import Question


class PromptBuilder:
    """
    Builds the grading prompt for a single question.

    The rules are stated explicitly so the oracle has no room to invent
    its own rubric:
    1. At least half correct earns full marks
    2. Partially correct earns partial marks
    3. Empty or irrelevant earns zero
    """

    RULES = (
        "If the answer is correct ≥ 50%, assign full marks.",
        "If partially correct, assign some marks.",
        "If empty or irrelevant, assign 0 marks.",
        "Provide a short feedback.",
    )

    REPLY_FORMAT = '{"marks": number, "feedback": string}'

    @staticmethod
    def build_grading_prompt(question: Question, answer_text: str) -> str:
        """
        Build the prompt for grading one answer.

        Args:
            question: The exam question being answered.
            answer_text: The student's answer.

        Returns:
            The formatted prompt.
        """
        rules = "\n".join(f"- {rule}" for rule in PromptBuilder.RULES)

        return f"""Evaluate the student's answer for the following question.

Question ({question.question_number}): {question.question_text}
Student Answer: {answer_text}
Maximum Marks: {question.max_marks}

Rules:
{rules}

Return JSON only in this format, on a single line:
{PromptBuilder.REPLY_FORMAT}"""
