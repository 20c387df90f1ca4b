"""
Unit tests for AdaptiveSelector.

Selection draws use ScriptedRandom so each gate's outcome is fixed:
a value below review_probability (0.6) takes the review branch.
"""

import random

import pytest

from src.adaptive.models import SessionSettings
from src.adaptive.selector import AdaptiveSelector
from src.core.operators import Operator
from src.problems.generator import ProblemGenerator
from src.problems.models import ProblemSource


def make_session(operators=(Operator.ADD,), current_addend=6, current_factor=5, adaptive=True, last=None):
    return SessionSettings(
        grade=3,
        operators=tuple(operators),
        max_addend=18,
        max_factor=10,
        current_max_addend=current_addend,
        current_max_factor=current_factor,
        adaptive=adaptive,
        last_fact_key=last,
    )


def make_selector(rng):
    return AdaptiveSelector(ProblemGenerator(rng), rng)


class TestDuePool:
    def test_excludes_unseen_retired_and_last(self, store, make_fact):
        store.put(make_fact(1, 2, "+", strength=0))
        store.put(make_fact(2, 3, "+", strength=2))
        store.put(make_fact(3, 4, "+", strength=5))
        store.put(make_fact(4, 5, "+", strength=1))
        selector = make_selector(random.Random(1))

        pool = selector.due_pool(store, make_session(), last_fact_key="4+5")
        assert [f.key for f in pool] == ["2+3"]

    def test_excludes_other_operators(self, store, make_fact):
        store.put(make_fact(2, 3, "+", strength=2))
        store.put(make_fact(2, 3, "x", strength=2))
        pool = make_selector(random.Random(1)).due_pool(store, make_session())
        assert [f.key for f in pool] == ["2+3"]

    def test_excludes_facts_above_current_ceiling(self, store, make_fact):
        store.put(make_fact(2, 6, "+", strength=2))
        store.put(make_fact(2, 7, "+", strength=2))
        store.put(make_fact(5, 6, "x", strength=2))
        store.put(make_fact(4, 5, "x", strength=2))
        store.put(make_fact(20, 4, "÷", strength=2))
        store.put(make_fact(30, 5, "÷", strength=2))
        session = make_session(operators=(Operator.ADD, Operator.MULTIPLY, Operator.DIVIDE))
        pool = make_selector(random.Random(1)).due_pool(store, session)
        assert {f.key for f in pool} == {"20÷4", "2+6", "4x5"}


class TestSelectNext:
    def test_weakest_tier_first(self, store, make_fact, scripted_rng):
        store.put(make_fact(2, 3, "+", strength=1))
        store.put(make_fact(4, 4, "+", strength=3))
        problem = make_selector(scripted_rng(0.1)).select_next(store, make_session())

        assert problem.key == "2+3"
        assert problem.source is ProblemSource.REVIEW_WEAK
        assert problem.answer == 5

    def test_due_pool_when_weak_gate_declines(self, store, make_fact, scripted_rng):
        store.put(make_fact(4, 4, "+", strength=3))
        store.put(make_fact(2, 3, "+", strength=1))
        problem = make_selector(scripted_rng(0.9, 0.1)).select_next(store, make_session())

        assert problem.source is ProblemSource.REVIEW
        assert problem.key in {"4+4", "2+3"}

    def test_due_pool_without_weak_facts_uses_one_draw(self, store, make_fact, scripted_rng):
        store.put(make_fact(4, 4, "+", strength=3))
        problem = make_selector(scripted_rng(0.1)).select_next(store, make_session())

        assert problem.key == "4+4"
        assert problem.source is ProblemSource.REVIEW

    def test_new_problem_when_both_gates_decline(self, store, make_fact, scripted_rng):
        store.put(make_fact(2, 3, "+", strength=1))
        problem = make_selector(scripted_rng(0.9, 0.9)).select_next(store, make_session())

        assert problem.source is ProblemSource.NEW
        assert problem.operand1 <= 6 and problem.operand2 <= 6

    def test_empty_store_generates_at_current_ceiling(self, store):
        selector = make_selector(random.Random(5))
        for _ in range(100):
            problem = selector.select_next(store, make_session(current_addend=4))
            assert problem.source is ProblemSource.NEW
            assert problem.operand1 <= 4 and problem.operand2 <= 4

    def test_retired_facts_never_reviewed(self, store, make_fact, scripted_rng):
        store.put(make_fact(2, 3, "+", strength=5))
        problem = make_selector(scripted_rng(0.0, 0.0)).select_next(store, make_session())
        assert problem.source is ProblemSource.NEW

    def test_non_adaptive_uses_grade_ceilings(self, store, make_fact):
        store.put(make_fact(2, 3, "+", strength=1))
        selector = make_selector(random.Random(11))
        session = make_session(current_addend=0, adaptive=False)

        problems = [selector.select_next(store, session) for _ in range(200)]
        assert all(p.source is ProblemSource.NEW for p in problems)
        assert max(max(p.operand1, p.operand2) for p in problems) > 6
        assert all(p.operand1 <= 18 and p.operand2 <= 18 for p in problems)

    def test_does_not_repeat_last_fact(self, store, make_fact):
        selector = make_selector(random.Random(21))
        session = make_session(current_addend=2)
        last = None
        for _ in range(200):
            problem = selector.select_next(store, session, last_fact_key=last)
            assert problem.key != last
            last = problem.key

    def test_only_due_fact_is_last_fact(self, store, make_fact, scripted_rng):
        store.put(make_fact(2, 3, "+", strength=1))
        problem = make_selector(scripted_rng(0.0, 0.0)).select_next(
            store, make_session(last="2+3")
        )
        assert problem.source is ProblemSource.NEW
        assert problem.key != "2+3"

    def test_unavoidable_repeat_is_returned(self, store):
        # Ceiling 0 leaves "0+0" as the only addition fact
        problem = make_selector(random.Random(2)).select_next(
            store, make_session(current_addend=0), last_fact_key="0+0"
        )
        assert problem.key == "0+0"

    def test_last_fact_defaults_to_session(self, store, make_fact, scripted_rng):
        store.put(make_fact(2, 3, "+", strength=1))
        store.put(make_fact(1, 1, "+", strength=1))
        session = make_session(last="2+3")
        problem = make_selector(scripted_rng(0.1)).select_next(store, session)
        assert problem.key == "1+1"

    def test_invalid_probability(self):
        with pytest.raises(ValueError):
            AdaptiveSelector(review_probability=1.5)
