"""
Unit tests for ProblemGenerator and answer parsing.

Run: pytest tests/unit/test_problem_generator.py -v
"""

import random

import pytest

from src.core.operators import Operator
from src.problems.generator import ProblemGenerator
from src.problems.models import Problem, ProblemSource, parse_answer

ALL_OPS = (Operator.ADD, Operator.SUBTRACT, Operator.MULTIPLY, Operator.DIVIDE)


@pytest.fixture
def generator():
    return ProblemGenerator(random.Random(42))


class TestGenerate:
    def test_addition_within_ceiling(self, generator):
        for _ in range(300):
            p = generator.generate_for(Operator.ADD, 6, 5)
            assert 0 <= p.operand1 <= 6 and 0 <= p.operand2 <= 6
            assert p.answer == p.operand1 + p.operand2

    def test_subtraction_never_negative(self, generator):
        for _ in range(300):
            p = generator.generate_for(Operator.SUBTRACT, 10, 0)
            assert 0 <= p.operand2 <= p.operand1 <= 10
            assert p.answer >= 0

    def test_multiplication_within_ceiling(self, generator):
        for _ in range(300):
            p = generator.generate_for(Operator.MULTIPLY, 0, 7)
            assert 0 <= p.operand1 <= 7 and 0 <= p.operand2 <= 7
            assert p.answer == p.operand1 * p.operand2

    def test_division_is_exact(self, generator):
        for _ in range(300):
            p = generator.generate_for(Operator.DIVIDE, 0, 12)
            assert 1 <= p.operand2 <= 12
            assert 1 <= p.answer <= 12
            assert p.operand1 == p.operand2 * p.answer
            assert p.operand1 % p.operand2 == 0

    def test_division_requires_factor_range(self, generator):
        with pytest.raises(ValueError):
            generator.generate_for(Operator.DIVIDE, 10, 0)

    def test_zero_ceiling_gives_zero_facts(self, generator):
        p = generator.generate_for(Operator.ADD, 0, 0)
        assert (p.operand1, p.operand2, p.answer) == (0, 0, 0)

    def test_operator_drawn_from_selection(self, generator):
        seen = {generator.generate(ALL_OPS, 10, 10).operator for _ in range(200)}
        assert seen == set(ALL_OPS)

    def test_single_operator(self, generator):
        for _ in range(20):
            assert generator.generate([Operator.SUBTRACT], 10, 10).operator is Operator.SUBTRACT

    def test_new_problems_are_tagged_new(self, generator):
        assert generator.generate(ALL_OPS, 10, 10).source is ProblemSource.NEW

    def test_empty_operators_rejected(self, generator):
        with pytest.raises(ValueError):
            generator.generate([], 10, 10)

    def test_negative_ceiling_rejected(self, generator):
        with pytest.raises(ValueError):
            generator.generate([Operator.ADD], -1, 10)

    def test_seeded_generation_is_reproducible(self):
        first, second = ProblemGenerator(random.Random(7)), ProblemGenerator(random.Random(7))
        assert [first.generate(ALL_OPS, 12, 12) for _ in range(10)] == [
            second.generate(ALL_OPS, 12, 12) for _ in range(10)
        ]


class TestProblem:
    def test_of_computes_answer(self):
        p = Problem.of(7, 8, "x")
        assert p.answer == 56
        assert p.key == "7x8"
        assert p.text == "7 × 8"

    def test_key_is_normalized(self):
        assert Problem.of(9, 2, Operator.ADD).key == "2+9"

    def test_is_correct(self):
        p = Problem.of(12, 4, Operator.DIVIDE)
        assert p.is_correct(3)
        assert not p.is_correct(4)
        assert not p.is_correct(None)


class TestParseAnswer:
    @pytest.mark.parametrize(
        "raw,expected",
        [
            ("12", 12),
            (" 12 ", 12),
            ("12abc", 12),
            ("007", 7),
            ("-3", -3),
            (15, 15),
            ("", None),
            ("abc", None),
            ("-", None),
            (None, None),
            (True, None),
            ("١٢", None),
        ],
    )
    def test_parse(self, raw, expected):
        assert parse_answer(raw) == expected
