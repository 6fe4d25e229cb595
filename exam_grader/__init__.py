"""
Exam Grader - LLM-assisted grading of free-text exam answers.

This package matches a student's answers to the questions of an exam,
grades each one with a language model under a strict numeric contract,
falls back to a bounded score when the model cannot be trusted, and
aggregates the marks into a pass/fail verdict.
"""

__version__ = "1.0.0"
__author__ = "Exam Grader Team"
