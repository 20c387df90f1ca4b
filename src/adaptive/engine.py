"""
Practice Engine: one turn of the adaptive drill loop.

    engine = PracticeEngine.from_settings()
    session = engine.start_session(grade=3, operators=["+", "-"])
    presented = engine.next_problem(session)
    outcome = engine.submit_answer(session, presented.problem, "12", 1800)

Each answer is fully applied (strength update, save, possible level-up)
before the next problem is chosen.
"""

from __future__ import annotations

import random
from typing import Any, Iterable

from loguru import logger

from src.adaptive.level_progression import LevelProgressionController
from src.adaptive.mastery_updater import MasteryUpdater
from src.adaptive.models import (
    AnswerOutcome,
    PresentedProblem,
    SessionSettings,
    within_ceiling,
)
from src.adaptive.selector import AdaptiveSelector
from src.core.exceptions import InvalidSessionError
from src.core.grades import get_grade_config
from src.core.operators import Operator, OperatorFamily, parse_operators
from src.persistence.fact_store import FactStore
from src.persistence.repository import MasteryRepository, create_repository
from src.problems.choices import ChoiceGenerator
from src.problems.generator import ProblemGenerator
from src.problems.models import Problem, parse_answer

CORRECT_FEEDBACK_MS = 500
INCORRECT_FEEDBACK_MS = 2500


class PracticeEngine:
    """
    Wires the generator, selector, updater and level controller around a FactStore.

    Args:
        store: Learner's fact store
        rng: Shared random source (ignored for components passed explicitly)
    """

    def __init__(
        self,
        store: FactStore,
        *,
        rng: random.Random | None = None,
        generator: ProblemGenerator | None = None,
        choice_generator: ChoiceGenerator | None = None,
        selector: AdaptiveSelector | None = None,
        updater: MasteryUpdater | None = None,
        progression: LevelProgressionController | None = None,
        correct_feedback_ms: int = CORRECT_FEEDBACK_MS,
        incorrect_feedback_ms: int = INCORRECT_FEEDBACK_MS,
    ):
        self.store = store
        self.rng = rng or random.Random()
        self.generator = generator or ProblemGenerator(self.rng)
        self.choice_generator = choice_generator or ChoiceGenerator(self.rng)
        self.selector = selector or AdaptiveSelector(self.generator, self.rng)
        self.updater = updater or MasteryUpdater()
        self.progression = progression or LevelProgressionController()
        self.correct_feedback_ms = correct_feedback_ms
        self.incorrect_feedback_ms = incorrect_feedback_ms

    @classmethod
    def from_settings(
        cls,
        settings: Any = None,
        repository: MasteryRepository | None = None,
        rng: random.Random | None = None,
    ) -> PracticeEngine:
        """
        Build an engine tuned from config.Settings.

        Args:
            settings: config.Settings (defaults to get_settings())
            repository: Overrides the configured storage backend
            rng: Random source (seed it for reproducible sessions)
        """
        if settings is None:
            from config import get_settings

            settings = get_settings()

        rng = rng or random.Random()
        store = FactStore.open(repository if repository is not None else create_repository(settings))
        generator = ProblemGenerator(rng)
        return cls(
            store,
            rng=rng,
            generator=generator,
            choice_generator=ChoiceGenerator(rng, max_retries=settings.choice_retry_limit),
            selector=AdaptiveSelector(
                generator,
                rng,
                review_probability=settings.review_probability,
                anti_repeat_attempts=settings.anti_repeat_attempts,
            ),
            updater=MasteryUpdater(settings.fluency_threshold_ms),
            progression=LevelProgressionController(
                settings.mastery_threshold_count,
                settings.mastery_threshold_percent,
            ),
            correct_feedback_ms=settings.correct_feedback_ms,
            incorrect_feedback_ms=settings.incorrect_feedback_ms,
        )

    # =========================================================================
    # Session lifecycle
    # =========================================================================

    def start_session(
        self,
        grade: int,
        operators: Iterable[str | Operator] | None = None,
        *,
        adaptive: bool = True,
        multiple_choice: bool = True,
        time_limit: int = 0,
        problem_limit: int = 0,
    ) -> SessionSettings:
        """
        Create session settings for a grade.

        Args:
            grade: Grade level (see GRADE_CONFIG)
            operators: Operators to drill (defaults to all of the grade's)
            adaptive: Use mastery-driven selection and level-up
            multiple_choice: Present four choices instead of keyed entry
            time_limit: Seconds, 0 for none
            problem_limit: Problems, 0 for none

        Raises:
            UnknownGradeError: Grade not configured
            InvalidSessionError: No operators, or operators outside the grade
        """
        config = get_grade_config(grade)
        selected = parse_operators(operators) if operators is not None else config.operators
        if not selected:
            raise InvalidSessionError("Select at least one operation")
        not_allowed = [op.value for op in selected if not config.allows(op)]
        if not_allowed:
            raise InvalidSessionError(
                f"{config.name} does not drill {', '.join(not_allowed)}"
            )
        if time_limit < 0 or problem_limit < 0:
            raise InvalidSessionError("Limits must be non-negative")

        progress = self.store.grade_progress(config.grade)
        session = SessionSettings(
            grade=config.grade,
            operators=selected,
            max_addend=config.max_addend,
            max_factor=config.max_factor,
            current_max_addend=progress.current_max_addend,
            current_max_factor=progress.current_max_factor,
            adaptive=adaptive,
            multiple_choice=multiple_choice,
            time_limit=time_limit,
            problem_limit=problem_limit,
        )
        logger.info(
            f"Session {session.session_id} started: grade {config.grade}, "
            f"ops {''.join(op.value for op in selected)}, "
            f"ceilings {session.current_max_addend}/{session.current_max_factor}"
            f"{'' if adaptive else ' (non-adaptive)'}"
        )
        return session

    def next_problem(self, session: SessionSettings) -> PresentedProblem:
        """Choose the next problem and, for multiple choice, its choices."""
        problem = self.selector.select_next(self.store, session)
        return self.present(problem, session.multiple_choice)

    def present(self, problem: Problem, multiple_choice: bool = True) -> PresentedProblem:
        choices = self.choice_generator.choices(problem.answer) if multiple_choice else None
        return PresentedProblem(problem=problem, choices=choices)

    def submit_answer(
        self,
        session: SessionSettings,
        problem: Problem,
        user_answer: int | str | None,
        response_time_ms: int,
    ) -> AnswerOutcome:
        """
        Grade an answer and apply it to the learner's mastery.

        Args:
            session: Active session
            problem: Problem that was shown
            user_answer: Raw answer (unparseable counts as incorrect)
            response_time_ms: Time from display to answer

        Returns:
            AnswerOutcome with the new strength and any level-up
        """
        answer = parse_answer(user_answer)
        is_correct = problem.is_correct(answer)
        previous = self.store.get(problem.key)
        previous_strength = previous.strength if previous is not None else 0

        fact = self.updater.record_outcome(self.store, problem, is_correct, max(0, int(response_time_ms)))

        session.attempted += 1
        if is_correct:
            session.correct += 1
        session.last_fact_key = problem.key

        level_up = None
        if is_correct and session.adaptive:
            level_up = self.progression.maybe_level_up(self.store, problem.operator, session)

        return AnswerOutcome(
            problem=problem,
            user_answer=answer,
            is_correct=is_correct,
            previous_strength=previous_strength,
            fact=fact.model_copy(),
            response_time_ms=response_time_ms,
            feedback_delay_ms=self.correct_feedback_ms if is_correct else self.incorrect_feedback_ms,
            level_up=level_up,
        )

    # =========================================================================
    # Reporting
    # =========================================================================

    def mastery_lights(
        self,
        grade: int,
        operators: Iterable[str | Operator] | None = None,
    ) -> dict[OperatorFamily, float]:
        """
        Share of mastered facts per family within the grade's range.

        Only stored facts count; a family with none reports 0.0.
        """
        config = get_grade_config(grade)
        selected = parse_operators(operators) if operators is not None else config.operators
        families = list(dict.fromkeys(op.family for op in selected))

        lights: dict[OperatorFamily, float] = {}
        for family in families:
            facts = [
                fact
                for fact in self.store.facts_in_family(family)
                if fact.operator in selected
                and within_ceiling(fact, config.max_addend, config.max_factor)
            ]
            mastered = sum(1 for fact in facts if fact.is_mastered)
            lights[family] = mastered / len(facts) if facts else 0.0
        return lights

    def reset_progress(self) -> None:
        """Clear every fact and grade record."""
        self.store.clear()

    def close(self) -> None:
        """Release the store's repository."""
        self.store.close()
