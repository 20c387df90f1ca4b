"""
Problem generation.

Components:
- Problem: An arithmetic question with its answer and fact key
- ProblemGenerator: Random problems within operand ceilings
- ChoiceGenerator: Multiple-choice distractors around an answer
"""

from src.problems.choices import ChoiceGenerator
from src.problems.generator import ProblemGenerator
from src.problems.models import Problem, ProblemSource, is_blank_answer, parse_answer

__all__ = [
    "ChoiceGenerator",
    "Problem",
    "ProblemGenerator",
    "ProblemSource",
    "is_blank_answer",
    "parse_answer",
]
