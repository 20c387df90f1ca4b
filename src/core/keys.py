"""
Canonical fact keys.

A key encodes the operands and operator of a fact, e.g. "3+7" or "12÷4".
Commutative operators put the smaller operand first so a fact and its
commuted form share one mastery record; subtraction and division keep
their order.
"""

from __future__ import annotations

import re

from src.core.operators import Operator

_KEY_PATTERN = re.compile(r"^(\d+)([+\-x÷])(\d+)$")


def normalize_operands(operand1: int, operand2: int, operator: Operator) -> tuple[int, int]:
    """Order operands canonically for the operator."""
    operator = Operator.parse(operator)
    if operator.is_commutative and operand2 < operand1:
        return operand2, operand1
    return operand1, operand2


def fact_key(operand1: int, operand2: int, operator: Operator | str) -> str:
    """
    Build the canonical key for a fact.

    Args:
        operand1: First operand (non-negative)
        operand2: Second operand (non-negative)
        operator: Operator or operator token

    Returns:
        Canonical key string
    """
    operator = Operator.parse(operator)
    if operand1 < 0 or operand2 < 0:
        raise ValueError(f"operands must be non-negative: {operand1}, {operand2}")
    first, second = normalize_operands(operand1, operand2, operator)
    return f"{first}{operator.value}{second}"


def parse_fact_key(key: str) -> tuple[int, int, Operator]:
    """
    Split a key back into (operand1, operand2, operator).

    Raises:
        ValueError: If the key is not in canonical form
    """
    match = _KEY_PATTERN.match(key)
    if match is None:
        raise ValueError(f"Not a fact key: {key!r}")
    return int(match.group(1)), int(match.group(3)), Operator(match.group(2))
