"""
Unit tests for LevelProgressionController.

Grade 3 starts at addend ceiling 6 and factor ceiling 5.
"""

import pytest

from src.adaptive.level_progression import LevelProgressionController
from src.adaptive.models import SessionSettings
from src.core.operators import Operator, OperatorFamily


@pytest.fixture
def controller():
    return LevelProgressionController()


@pytest.fixture
def session(store):
    progress = store.grade_progress(3)
    return SessionSettings(
        grade=3,
        operators=(Operator.ADD, Operator.SUBTRACT, Operator.MULTIPLY),
        max_addend=18,
        max_factor=10,
        current_max_addend=progress.current_max_addend,
        current_max_factor=progress.current_max_factor,
    )


def put_edge_facts(store, make_fact, strengths, operator="+", ceiling=6):
    for partner, strength in enumerate(strengths):
        store.put(make_fact(partner, ceiling, operator, strength=strength))


class TestEdgeFacts:
    def test_either_operand_counts(self, store, make_fact, controller):
        store.put(make_fact(6, 2, "+", strength=1))
        store.put(make_fact(9, 6, "-", strength=1))
        store.put(make_fact(6, 6, "+", strength=1))
        store.put(make_fact(5, 5, "+", strength=1))
        store.put(make_fact(6, 3, "x", strength=1))
        keys = {f.key for f in controller.edge_facts(store, OperatorFamily.ADDEND, 6)}
        assert keys == {"2+6", "9-6", "6+6"}


class TestMaybeLevelUp:
    def test_levels_up_at_threshold(self, store, make_fact, controller, session, repository):
        put_edge_facts(store, make_fact, [3, 3, 4, 5, 1])
        level_up = controller.maybe_level_up(store, Operator.ADD, session)

        assert level_up is not None
        assert level_up.family is OperatorFamily.ADDEND
        assert (level_up.previous_ceiling, level_up.new_ceiling) == (6, 7)
        assert store.grade_progress(3).current_max_addend == 7
        assert session.current_max_addend == 7
        assert repository.load()["gradeProgress"]["3"]["currentMaxAddend"] == 7

    def test_too_few_edge_facts(self, store, make_fact, controller, session):
        put_edge_facts(store, make_fact, [5, 5, 5, 5])
        assert controller.maybe_level_up(store, Operator.ADD, session) is None
        assert store.grade_progress(3).current_max_addend == 6

    def test_ratio_below_threshold(self, store, make_fact, controller, session):
        put_edge_facts(store, make_fact, [3, 3, 3, 2, 1])
        assert controller.maybe_level_up(store, Operator.ADD, session) is None

    def test_subtraction_facts_share_family(self, store, make_fact, controller, session):
        for minuend in range(6, 11):
            store.put(make_fact(minuend, 6, "-", strength=4))
        level_up = controller.maybe_level_up(store, Operator.SUBTRACT, session)
        assert level_up is not None
        assert level_up.new_ceiling == 7

    def test_factor_family_moves_independently(self, store, make_fact, controller, session):
        put_edge_facts(store, make_fact, [3, 3, 3, 3, 3], operator="x", ceiling=5)
        level_up = controller.maybe_level_up(store, Operator.MULTIPLY, session)

        assert level_up.family is OperatorFamily.FACTOR
        assert session.current_max_factor == 6
        assert session.current_max_addend == 6

    def test_never_exceeds_grade_maximum(self, store, make_fact, controller, session):
        store.grade_progress(3).current_max_addend = 18
        session.current_max_addend = 18
        put_edge_facts(store, make_fact, [5, 5, 5, 5, 5], ceiling=18)
        assert controller.maybe_level_up(store, Operator.ADD, session) is None
        assert store.grade_progress(3).current_max_addend == 18

    def test_one_step_per_call(self, store, make_fact, controller, session):
        put_edge_facts(store, make_fact, [5, 5, 5, 5, 5], ceiling=6)
        put_edge_facts(store, make_fact, [5, 5, 5, 5, 5], ceiling=7)
        assert controller.maybe_level_up(store, Operator.ADD, session).new_ceiling == 7
        assert controller.maybe_level_up(store, Operator.ADD, session).new_ceiling == 8

    def test_custom_thresholds(self, store, make_fact, session):
        controller = LevelProgressionController(threshold_count=2, threshold_percent=0.5)
        put_edge_facts(store, make_fact, [3, 1])
        assert controller.maybe_level_up(store, Operator.ADD, session) is not None

    @pytest.mark.parametrize("count,percent", [(0, 0.8), (5, 0.0), (5, 1.5)])
    def test_invalid_thresholds(self, count, percent):
        with pytest.raises(ValueError):
            LevelProgressionController(count, percent)
