"""
Level Progression Controller.

Raises a family's ceiling by one when the learner has shown mastery at the
edge of the current range: at least MASTERY_THRESHOLD_COUNT stored facts with
an operand equal to the ceiling, of which MASTERY_THRESHOLD_PERCENT or more
are mastered (strength >= 3). Ceilings never go down and never pass the
grade's maximum.
"""

from __future__ import annotations

from loguru import logger

from src.adaptive.models import LevelUp, SessionSettings
from src.core.grades import get_grade_config
from src.core.operators import Operator, OperatorFamily
from src.persistence.fact_store import FactStore
from src.persistence.models import FactMastery

MASTERY_THRESHOLD_COUNT = 5
MASTERY_THRESHOLD_PERCENT = 0.8


class LevelProgressionController:
    """Watch edge-of-range mastery and escalate ceilings."""

    def __init__(
        self,
        threshold_count: int = MASTERY_THRESHOLD_COUNT,
        threshold_percent: float = MASTERY_THRESHOLD_PERCENT,
    ):
        if threshold_count <= 0:
            raise ValueError("threshold_count must be positive")
        if not 0.0 < threshold_percent <= 1.0:
            raise ValueError("threshold_percent must be in (0, 1]")
        self.threshold_count = threshold_count
        self.threshold_percent = threshold_percent

    @staticmethod
    def edge_facts(store: FactStore, family: OperatorFamily, ceiling: int) -> list[FactMastery]:
        """Stored facts of the family with an operand equal to the ceiling."""
        return [fact for fact in store.facts_in_family(family) if fact.touches(ceiling)]

    def maybe_level_up(
        self,
        store: FactStore,
        operator: Operator,
        session: SessionSettings,
    ) -> LevelUp | None:
        """
        Raise the ceiling for the operator's family if the edge is mastered.

        Call only after a correct answer.

        Args:
            store: Learner's fact store (grade progress is saved through it)
            operator: Operator of the problem just answered
            session: Active session; its live ceiling is raised too

        Returns:
            LevelUp when the ceiling moved, else None
        """
        family = Operator.parse(operator).family
        grade_config = get_grade_config(session.grade)
        progress = store.grade_progress(session.grade)

        ceiling = progress.ceiling(family)
        grade_max = grade_config.max_ceiling(family)
        if ceiling >= grade_max:
            return None

        edge = self.edge_facts(store, family, ceiling)
        if len(edge) < self.threshold_count:
            return None

        mastered = sum(1 for fact in edge if fact.is_mastered)
        ratio = mastered / len(edge)
        if ratio < self.threshold_percent:
            return None

        new_ceiling = min(ceiling + 1, grade_max)
        progress.set_ceiling(family, new_ceiling)
        session.set_ceiling(family, max(session.ceiling(family), new_ceiling))
        store.save()

        logger.info(
            f"Level up: grade {session.grade} {family.value} ceiling "
            f"{ceiling} -> {new_ceiling} ({mastered}/{len(edge)} edge facts mastered)"
        )
        return LevelUp(
            grade=session.grade,
            family=family,
            previous_ceiling=ceiling,
            new_ceiling=new_ceiling,
        )
