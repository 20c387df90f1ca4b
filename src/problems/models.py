"""
Problem data classes.

A Problem is a concrete arithmetic question as shown to the learner. Its
`key` ties it to the fact's mastery record.
"""

from __future__ import annotations

from dataclasses import dataclass
from enum import Enum

from src.core.keys import fact_key
from src.core.operators import Operator


class ProblemSource(str, Enum):
    """Why the selector picked a problem."""

    NEW = "new"  # Freshly generated
    REVIEW = "review"  # Drawn from the due pool
    REVIEW_WEAK = "review_weak"  # Drawn from the weakest tier (strength 1)


@dataclass(frozen=True)
class Problem:
    """An arithmetic problem with its answer."""

    operand1: int
    operand2: int
    operator: Operator
    answer: int
    source: ProblemSource = ProblemSource.NEW

    @classmethod
    def of(
        cls,
        operand1: int,
        operand2: int,
        operator: Operator | str,
        source: ProblemSource = ProblemSource.NEW,
    ) -> Problem:
        """Build a problem, computing the answer."""
        operator = Operator.parse(operator)
        return cls(operand1, operand2, operator, operator.apply(operand1, operand2), source)

    @property
    def key(self) -> str:
        """Canonical fact key."""
        return fact_key(self.operand1, self.operand2, self.operator)

    @property
    def text(self) -> str:
        """Human-readable form, e.g. '7 × 8'."""
        return f"{self.operand1} {self.operator.display_symbol} {self.operand2}"

    def is_correct(self, answer: int | None) -> bool:
        return answer is not None and answer == self.answer


def is_blank_answer(raw: int | str | None) -> bool:
    """True for an empty or whitespace-only submission, which is not an answer at all."""
    return isinstance(raw, str) and not raw.strip()


def parse_answer(raw: int | str | None) -> int | None:
    """
    Parse a learner's answer.

    Leading integer digits are accepted ("12", " 12 ", "12abc"); anything
    without a leading integer parses to None and counts as incorrect.
    """
    if raw is None:
        return None
    if isinstance(raw, bool):
        return None
    if isinstance(raw, int):
        return raw
    text = str(raw).strip()
    digits = ""
    for index, char in enumerate(text):
        if char in "0123456789" or (index == 0 and char in "+-"):
            digits += char
        else:
            break
    if digits in ("", "+", "-"):
        return None
    return int(digits)
