"""
Adaptive Selector.

Decides what to drill next: a weak fact, any due fact, or something new.

Priority:
1. Weakest tier (strength 1) of the due pool, if a draw favours review
2. Anything in the due pool, if a second draw favours review
3. A freshly generated problem at the session's current ceiling

The due pool is every seen, not-yet-retired fact for the session's operators
inside the session's current adaptive ceiling, minus the fact just answered.
"""

from __future__ import annotations

import random

from loguru import logger

from src.adaptive.models import SessionSettings, within_ceiling
from src.persistence.fact_store import FactStore
from src.persistence.models import MAX_STRENGTH, FactMastery
from src.problems.generator import ProblemGenerator
from src.problems.models import Problem, ProblemSource

_FROM_SESSION = object()


class AdaptiveSelector:
    """
    Choose the next problem for a session.

    Args:
        generator: Source of new problems
        rng: Random source for the review/new draws (defaults to the generator's)
        review_probability: Chance of preferring review at each gate
        anti_repeat_attempts: Regeneration attempts when a new problem
            repeats the previous fact
    """

    def __init__(
        self,
        generator: ProblemGenerator | None = None,
        rng: random.Random | None = None,
        review_probability: float = 0.6,
        anti_repeat_attempts: int = 10,
    ):
        if not 0.0 <= review_probability <= 1.0:
            raise ValueError("review_probability must be in [0, 1]")
        if anti_repeat_attempts < 1:
            raise ValueError("anti_repeat_attempts must be positive")

        self.generator = generator or ProblemGenerator(rng)
        self.rng = rng or self.generator.rng
        self.review_probability = review_probability
        self.anti_repeat_attempts = anti_repeat_attempts

    def due_pool(
        self,
        store: FactStore,
        session: SessionSettings,
        last_fact_key: str | None = None,
    ) -> list[FactMastery]:
        """Facts eligible for review right now."""
        return [
            fact
            for fact in store.facts_for_operators(session.operators)
            if 0 < fact.strength < MAX_STRENGTH
            and fact.key != last_fact_key
            and within_ceiling(fact, session.current_max_addend, session.current_max_factor)
        ]

    def select_next(
        self,
        store: FactStore,
        session: SessionSettings,
        last_fact_key: str | None | object = _FROM_SESSION,
    ) -> Problem:
        """
        Pick the next problem.

        Args:
            store: Learner's fact store
            session: Active session
            last_fact_key: Fact to avoid repeating (defaults to session.last_fact_key)

        Returns:
            Problem tagged with how it was chosen
        """
        if last_fact_key is _FROM_SESSION:
            last_fact_key = session.last_fact_key

        if not session.adaptive:
            return self._generate_new(
                session, last_fact_key, session.max_addend, session.max_factor
            )

        pool = self.due_pool(store, session, last_fact_key)
        weakest = [fact for fact in pool if fact.strength == 1]

        if weakest and self.rng.random() < self.review_probability:
            fact = self.rng.choice(weakest)
            logger.debug(f"Selected weak fact {fact.key} from {len(weakest)} candidates")
            return Problem.of(fact.operand1, fact.operand2, fact.operator, ProblemSource.REVIEW_WEAK)

        if pool and self.rng.random() < self.review_probability:
            fact = self.rng.choice(pool)
            logger.debug(f"Selected due fact {fact.key} from pool of {len(pool)}")
            return Problem.of(fact.operand1, fact.operand2, fact.operator, ProblemSource.REVIEW)

        return self._generate_new(
            session, last_fact_key, session.current_max_addend, session.current_max_factor
        )

    def _generate_new(
        self,
        session: SessionSettings,
        last_fact_key: str | None,
        max_addend: int,
        max_factor: int,
    ) -> Problem:
        problem = self.generator.generate(session.operators, max_addend, max_factor)
        attempts = 1
        while problem.key == last_fact_key and attempts < self.anti_repeat_attempts:
            problem = self.generator.generate(session.operators, max_addend, max_factor)
            attempts += 1

        if problem.key == last_fact_key:
            logger.debug(f"Could not avoid repeating {last_fact_key} in {attempts} attempts")
        return problem
