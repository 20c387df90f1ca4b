"""
Random problem generation within operand ceilings.

Subtraction never goes negative and division is always exact: the dividend is
built from a divisor and a hidden quotient, both drawn from [1, max_factor].
"""

from __future__ import annotations

import random
from typing import Sequence

from src.core.operators import Operator
from src.problems.models import Problem


class ProblemGenerator:
    """Generate problems from an injected random source."""

    def __init__(self, rng: random.Random | None = None):
        self.rng = rng or random.Random()

    def generate(
        self,
        operators: Sequence[Operator],
        max_addend: int,
        max_factor: int,
    ) -> Problem:
        """
        Generate a problem for a randomly chosen operator.

        Args:
            operators: Operators to choose from (uniformly)
            max_addend: Ceiling for addition and subtraction operands
            max_factor: Ceiling for multiplication and division operands

        Returns:
            Problem with its answer

        Raises:
            ValueError: If operators is empty, a ceiling is negative, or
                division is requested with max_factor < 1
        """
        if not operators:
            raise ValueError("at least one operator is required")
        if max_addend < 0 or max_factor < 0:
            raise ValueError("ceilings must be non-negative")

        operator = Operator.parse(self.rng.choice(list(operators)))
        return self.generate_for(operator, max_addend, max_factor)

    def generate_for(self, operator: Operator, max_addend: int, max_factor: int) -> Problem:
        """Generate a problem for one specific operator."""
        rng = self.rng

        if operator is Operator.ADD:
            n1 = rng.randint(0, max_addend)
            n2 = rng.randint(0, max_addend)
            return Problem(n1, n2, operator, n1 + n2)

        if operator is Operator.SUBTRACT:
            n1 = rng.randint(0, max_addend)
            n2 = rng.randint(0, n1)
            return Problem(n1, n2, operator, n1 - n2)

        if operator is Operator.MULTIPLY:
            n1 = rng.randint(0, max_factor)
            n2 = rng.randint(0, max_factor)
            return Problem(n1, n2, operator, n1 * n2)

        if max_factor < 1:
            raise ValueError("division requires max_factor >= 1")
        divisor = rng.randint(1, max_factor)
        quotient = rng.randint(1, max_factor)
        return Problem(divisor * quotient, divisor, operator, quotient)
