"""
Mastery Updater.

Strength rules:
- correct and faster than the fluency threshold: +2
- correct but slow: +1
- incorrect: back to 1 (never 0, the fact stays "seen")
Strength is clamped to MAX_STRENGTH. The store is saved after every update.
"""

from __future__ import annotations

from loguru import logger

from src.persistence.fact_store import FactStore
from src.persistence.models import MAX_STRENGTH, FactMastery
from src.problems.models import Problem

FLUENCY_THRESHOLD_MS = 3000
FAST_GAIN = 2
SLOW_GAIN = 1
RESET_STRENGTH = 1


class MasteryUpdater:
    """Apply answer outcomes to fact strength."""

    def __init__(self, fluency_threshold_ms: int = FLUENCY_THRESHOLD_MS):
        if fluency_threshold_ms <= 0:
            raise ValueError("fluency_threshold_ms must be positive")
        self.fluency_threshold_ms = fluency_threshold_ms

    def next_strength(self, strength: int, is_correct: bool, response_time_ms: int) -> int:
        """Pure strength transition."""
        if not is_correct:
            return RESET_STRENGTH
        gain = FAST_GAIN if response_time_ms < self.fluency_threshold_ms else SLOW_GAIN
        return min(MAX_STRENGTH, strength + gain)

    def record_outcome(
        self,
        store: FactStore,
        problem: Problem,
        is_correct: bool,
        response_time_ms: int,
    ) -> FactMastery:
        """
        Update and persist the fact behind a problem.

        Args:
            store: Learner's fact store
            problem: The problem that was answered
            is_correct: Whether the answer was right
            response_time_ms: Time taken to answer

        Returns:
            The updated FactMastery
        """
        fact = store.get(problem.key)
        if fact is None:
            fact = FactMastery.new(problem.operand1, problem.operand2, problem.operator)

        previous = fact.strength
        fact.strength = self.next_strength(previous, is_correct, response_time_ms)
        fact.attempts += 1
        if is_correct:
            fact.correct += 1

        store.put(fact)
        store.save()

        logger.debug(
            f"{fact.key}: strength {previous} -> {fact.strength} "
            f"({'correct' if is_correct else 'incorrect'}, {response_time_ms}ms)"
        )
        return fact
