"""
Arithmetic operators and operator families.

Addition and subtraction share the addend ceiling; multiplication and
division share the factor ceiling. Level progression works per family.
"""

from __future__ import annotations

from enum import Enum
from typing import Iterable

from src.core.exceptions import InvalidOperatorError


class OperatorFamily(str, Enum):
    """Operators that share one adaptive ceiling."""

    ADDEND = "addend"  # + and -
    FACTOR = "factor"  # x and ÷

    @property
    def display_name(self) -> str:
        return {
            OperatorFamily.ADDEND: "Addition & Subtraction",
            OperatorFamily.FACTOR: "Multiplication & Division",
        }[self]


class Operator(str, Enum):
    """Arithmetic operator. Values are the symbols used in fact keys."""

    ADD = "+"
    SUBTRACT = "-"
    MULTIPLY = "x"
    DIVIDE = "÷"

    @classmethod
    def parse(cls, token: str | Operator) -> Operator:
        """
        Parse an operator from a symbol or name.

        Args:
            token: "+", "add", "plus", "x", "*", "×", "/", "÷", ...

        Returns:
            Matching Operator

        Raises:
            InvalidOperatorError: If the token is not recognised
        """
        if isinstance(token, Operator):
            return token
        normalized = str(token).strip().lower()
        operator = _ALIASES.get(normalized)
        if operator is None:
            raise InvalidOperatorError(f"Unknown operator: {token!r}")
        return operator

    @property
    def family(self) -> OperatorFamily:
        if self in (Operator.ADD, Operator.SUBTRACT):
            return OperatorFamily.ADDEND
        return OperatorFamily.FACTOR

    @property
    def is_commutative(self) -> bool:
        return self in (Operator.ADD, Operator.MULTIPLY)

    @property
    def display_symbol(self) -> str:
        """Symbol for rendering ('x' shows as a proper times sign)."""
        return "×" if self is Operator.MULTIPLY else self.value

    def apply(self, operand1: int, operand2: int) -> int:
        """Compute the answer. Division is integer division of exact facts."""
        if self is Operator.ADD:
            return operand1 + operand2
        if self is Operator.SUBTRACT:
            return operand1 - operand2
        if self is Operator.MULTIPLY:
            return operand1 * operand2
        if operand2 == 0:
            raise ZeroDivisionError("division fact with a zero divisor")
        return operand1 // operand2


_ALIASES: dict[str, Operator] = {
    "+": Operator.ADD,
    "add": Operator.ADD,
    "plus": Operator.ADD,
    "addition": Operator.ADD,
    "-": Operator.SUBTRACT,
    "subtract": Operator.SUBTRACT,
    "minus": Operator.SUBTRACT,
    "subtraction": Operator.SUBTRACT,
    "x": Operator.MULTIPLY,
    "*": Operator.MULTIPLY,
    "×": Operator.MULTIPLY,
    "multiply": Operator.MULTIPLY,
    "times": Operator.MULTIPLY,
    "multiplication": Operator.MULTIPLY,
    "÷": Operator.DIVIDE,
    "/": Operator.DIVIDE,
    "divide": Operator.DIVIDE,
    "division": Operator.DIVIDE,
}


def parse_operators(tokens: Iterable[str | Operator]) -> tuple[Operator, ...]:
    """Parse several operator tokens, dropping duplicates but keeping order."""
    seen: list[Operator] = []
    for token in tokens:
        operator = Operator.parse(token)
        if operator not in seen:
            seen.append(operator)
    return tuple(seen)
