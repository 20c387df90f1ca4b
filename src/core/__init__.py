"""
Core Module - Shared domain vocabulary.

Components:
- operators: Operator and OperatorFamily enums
- grades: Compiled-in grade tables (GradeConfig, GRADE_CONFIG)
- keys: Canonical fact keys and operand normalization
- exceptions: FactUniverseError hierarchy

Design Principle:
The problem, persistence and adaptive packages import from src/core/
rather than redefining operators, grades or keys.
"""

from src.core.exceptions import (
    FactUniverseError,
    InvalidOperatorError,
    InvalidSessionError,
    StorageError,
    UnknownGradeError,
)
from src.core.grades import GRADE_CONFIG, GradeConfig, available_grades, get_grade_config
from src.core.keys import fact_key, normalize_operands, parse_fact_key
from src.core.operators import Operator, OperatorFamily, parse_operators

__all__ = [
    # Operators
    "Operator",
    "OperatorFamily",
    "parse_operators",
    # Grades
    "GRADE_CONFIG",
    "GradeConfig",
    "available_grades",
    "get_grade_config",
    # Keys
    "fact_key",
    "normalize_operands",
    "parse_fact_key",
    # Errors
    "FactUniverseError",
    "InvalidOperatorError",
    "InvalidSessionError",
    "StorageError",
    "UnknownGradeError",
]
