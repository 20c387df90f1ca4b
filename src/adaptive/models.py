"""
Data classes for the adaptive practice engine.

SessionSettings is the explicit per-session state handed to every engine
call; nothing about a session lives at module level.
"""

from __future__ import annotations

import uuid
from dataclasses import dataclass, field
from datetime import datetime

from src.core.operators import Operator, OperatorFamily
from src.persistence.models import FactMastery
from src.problems.models import Problem


@dataclass
class SessionSettings:
    """State of one practice session. Discarded when the session ends."""

    grade: int
    operators: tuple[Operator, ...]

    # Grade ceilings (read-only copy of the grade table)
    max_addend: int
    max_factor: int

    # Live adaptive ceilings; raised in place on level-up
    current_max_addend: int
    current_max_factor: int

    adaptive: bool = True
    multiple_choice: bool = True
    time_limit: int = 0  # seconds, 0 = no limit
    problem_limit: int = 0  # 0 = no limit

    last_fact_key: str | None = None
    attempted: int = 0
    correct: int = 0

    session_id: str = field(default_factory=lambda: str(uuid.uuid4())[:8])
    started_at: str = field(default_factory=lambda: datetime.now().isoformat())

    def ceiling(self, family: OperatorFamily) -> int:
        """Current adaptive ceiling for a family."""
        if family is OperatorFamily.ADDEND:
            return self.current_max_addend
        return self.current_max_factor

    def set_ceiling(self, family: OperatorFamily, value: int) -> None:
        if family is OperatorFamily.ADDEND:
            self.current_max_addend = value
        else:
            self.current_max_factor = value

    def grade_ceiling(self, family: OperatorFamily) -> int:
        if family is OperatorFamily.ADDEND:
            return self.max_addend
        return self.max_factor

    @property
    def accuracy(self) -> float:
        """Fraction of attempted problems answered correctly."""
        return self.correct / self.attempted if self.attempted else 0.0

    @property
    def problem_limit_reached(self) -> bool:
        return self.problem_limit > 0 and self.attempted >= self.problem_limit


@dataclass(frozen=True)
class LevelUp:
    """A raised ceiling."""

    grade: int
    family: OperatorFamily
    previous_ceiling: int
    new_ceiling: int


@dataclass(frozen=True)
class PresentedProblem:
    """What the display collaborator receives."""

    problem: Problem
    choices: list[int] | None = None

    @property
    def text(self) -> str:
        return self.problem.text


@dataclass(frozen=True)
class AnswerOutcome:
    """Result of submitting one answer."""

    problem: Problem
    user_answer: int | None
    is_correct: bool
    previous_strength: int
    fact: FactMastery
    response_time_ms: int
    feedback_delay_ms: int
    level_up: LevelUp | None = None

    @property
    def correct_answer(self) -> int:
        return self.problem.answer

    @property
    def strength(self) -> int:
        return self.fact.strength


def within_ceiling(fact: FactMastery | Problem, max_addend: int, max_factor: int) -> bool:
    """
    Check whether a fact lies inside the given operand ceilings.

    Division facts are judged by divisor and quotient, since the dividend is
    their product.
    """
    a, b, operator = fact.operand1, fact.operand2, fact.operator
    if operator is Operator.ADD:
        return a <= max_addend and b <= max_addend
    if operator is Operator.SUBTRACT:
        return a <= max_addend and b <= a
    if operator is Operator.MULTIPLY:
        return a <= max_factor and b <= max_factor
    if b == 0:
        return False
    return b <= max_factor and a // b <= max_factor
