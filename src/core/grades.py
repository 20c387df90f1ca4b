"""
Grade-level configuration.

Static, compiled-in tables: which operators a grade drills, the full operand
ceilings, the master test target score, and where the adaptive ceilings start
before any level-up has happened.
"""

from __future__ import annotations

from dataclasses import dataclass

from src.core.exceptions import UnknownGradeError
from src.core.operators import Operator, OperatorFamily


@dataclass(frozen=True)
class GradeConfig:
    """Configuration for one grade level."""

    grade: int
    name: str
    operators: tuple[Operator, ...]
    max_addend: int
    max_factor: int
    target_score: int
    start_max_addend: int
    start_max_factor: int

    def __post_init__(self):
        if not 0 <= self.start_max_addend <= self.max_addend:
            raise ValueError(f"grade {self.grade}: start_max_addend outside [0, max_addend]")
        if not 0 <= self.start_max_factor <= self.max_factor:
            raise ValueError(f"grade {self.grade}: start_max_factor outside [0, max_factor]")

    def max_ceiling(self, family: OperatorFamily) -> int:
        """Fully escalated ceiling for a family."""
        if family is OperatorFamily.ADDEND:
            return self.max_addend
        return self.max_factor

    def start_ceiling(self, family: OperatorFamily) -> int:
        """Ceiling a new learner starts from."""
        if family is OperatorFamily.ADDEND:
            return self.start_max_addend
        return self.start_max_factor

    def allows(self, operator: Operator) -> bool:
        return operator in self.operators


_ADD_SUB = (Operator.ADD, Operator.SUBTRACT)
_WITH_MULT = (Operator.ADD, Operator.SUBTRACT, Operator.MULTIPLY)
_ALL_OPS = (Operator.ADD, Operator.SUBTRACT, Operator.MULTIPLY, Operator.DIVIDE)

GRADE_CONFIG: dict[int, GradeConfig] = {
    1: GradeConfig(1, "1st Grade", _ADD_SUB, 10, 0, 20, 5, 0),
    2: GradeConfig(2, "2nd Grade", _ADD_SUB, 15, 0, 25, 5, 0),
    3: GradeConfig(3, "3rd Grade", _WITH_MULT, 18, 10, 30, 6, 5),
    4: GradeConfig(4, "4th Grade", _ALL_OPS, 20, 12, 40, 8, 6),
    5: GradeConfig(5, "5th Grade", _ALL_OPS, 25, 12, 50, 10, 8),
    6: GradeConfig(6, "6th Grade", _ALL_OPS, 30, 15, 60, 12, 10),
    7: GradeConfig(7, "7th Grade", _ALL_OPS, 40, 18, 65, 15, 12),
    8: GradeConfig(8, "8th Grade", _ALL_OPS, 50, 20, 70, 20, 12),
}


def get_grade_config(grade: int) -> GradeConfig:
    """
    Look up a grade's configuration.

    Raises:
        UnknownGradeError: If the grade is not configured
    """
    try:
        return GRADE_CONFIG[int(grade)]
    except (KeyError, TypeError, ValueError):
        raise UnknownGradeError(grade) from None


def available_grades() -> list[int]:
    return sorted(GRADE_CONFIG)
