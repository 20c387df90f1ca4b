"""
Two-player duel.

Both players race through their own multiple-choice problems against one
clock. +1 for a correct answer, -1 for a wrong one (never below zero). After
answering, a player cools down until the display calls ready(); input during
the cooldown is ignored. Duels do not touch the mastery store.

Keyboard layout: player 1 uses a/s/d/f, player 2 uses j/k/l/; for choices 1-4.
"""

from __future__ import annotations

import random
from dataclasses import dataclass, field
from typing import Iterable

from loguru import logger

from src.core.exceptions import InvalidSessionError
from src.core.grades import get_grade_config
from src.core.operators import Operator, parse_operators
from src.modes.clock import SessionClock
from src.problems.choices import ChoiceGenerator
from src.problems.generator import ProblemGenerator
from src.problems.models import Problem

DUEL_SECONDS = 60

# Duel ceilings are chosen at setup, independent of the grade's own maxima
DUEL_ADDEND_RANGE = (5, 50)
DUEL_FACTOR_RANGE = (2, 20)
DEFAULT_DUEL_FACTOR = 12  # Used when the grade has no factor range

KEY_BINDINGS: dict[str, tuple[int, int]] = {
    "a": (1, 0), "s": (1, 1), "d": (1, 2), "f": (1, 3),
    "j": (2, 0), "k": (2, 1), "l": (2, 2), ";": (2, 3),
}


def resolve_key(key: str) -> tuple[int, int] | None:
    """Map a key press to (player number, choice index)."""
    return KEY_BINDINGS.get(key.lower())


@dataclass
class DuelPlayer:
    number: int
    score: int = 0
    problem: Problem | None = None
    choices: list[int] = field(default_factory=list)
    cooling_down: bool = False


@dataclass(frozen=True)
class DuelAnswer:
    player: int
    chosen: int
    is_correct: bool
    correct_answer: int
    score: int


class Duel:
    """Head-to-head race on shared settings."""

    def __init__(
        self,
        grade: int,
        operators: Iterable[str | Operator] | None = None,
        *,
        max_addend: int | None = None,
        max_factor: int | None = None,
        duration: int = DUEL_SECONDS,
        rng: random.Random | None = None,
    ):
        config = get_grade_config(grade)
        self.operators = parse_operators(operators) if operators is not None else config.operators
        if not self.operators:
            raise InvalidSessionError("Select at least one operation")
        if any(not config.allows(op) for op in self.operators):
            raise InvalidSessionError(f"{config.name} does not drill all of the selected operations")

        low_add, high_add = DUEL_ADDEND_RANGE
        low_fact, high_fact = DUEL_FACTOR_RANGE
        if max_addend is None:
            max_addend = min(config.max_addend, high_add)
        if max_factor is None:
            max_factor = min(config.max_factor or DEFAULT_DUEL_FACTOR, high_fact)
        if not low_add <= max_addend <= high_add:
            raise InvalidSessionError(f"max_addend must be within {low_add}..{high_add}")
        if not low_fact <= max_factor <= high_fact:
            raise InvalidSessionError(f"max_factor must be within {low_fact}..{high_fact}")
        if duration <= 0:
            raise InvalidSessionError("A duel needs a positive duration")
        self.max_addend = max_addend
        self.max_factor = max_factor

        rng = rng or random.Random()
        self.generator = ProblemGenerator(rng)
        self.choice_generator = ChoiceGenerator(rng)
        self.clock = SessionClock(duration)
        self.players = (DuelPlayer(1), DuelPlayer(2))

    @property
    def finished(self) -> bool:
        return not self.clock.running

    def player(self, number: int) -> DuelPlayer:
        if number not in (1, 2):
            raise ValueError(f"No player {number}")
        return self.players[number - 1]

    def start(self) -> None:
        for player in self.players:
            self._deal(player)

    def _deal(self, player: DuelPlayer) -> None:
        player.problem = self.generator.generate(self.operators, self.max_addend, self.max_factor)
        player.choices = self.choice_generator.choices(player.problem.answer)
        player.cooling_down = False

    def answer(self, number: int, choice_index: int) -> DuelAnswer | None:
        """
        Register a player's choice.

        Returns:
            DuelAnswer, or None when the input is ignored (cooldown, time up,
            no problem dealt, index out of range)
        """
        player = self.player(number)
        if player.cooling_down or self.finished or player.problem is None:
            return None
        if not 0 <= choice_index < len(player.choices):
            return None

        chosen = player.choices[choice_index]
        is_correct = chosen == player.problem.answer
        if is_correct:
            player.score += 1
        else:
            player.score = max(0, player.score - 1)
        player.cooling_down = True

        return DuelAnswer(
            player=number,
            chosen=chosen,
            is_correct=is_correct,
            correct_answer=player.problem.answer,
            score=player.score,
        )

    def press(self, key: str) -> DuelAnswer | None:
        """Keyboard entry point."""
        binding = resolve_key(key)
        if binding is None:
            return None
        return self.answer(*binding)

    def ready(self, number: int) -> None:
        """End a player's cooldown and deal their next problem."""
        player = self.player(number)
        if self.finished:
            player.cooling_down = False
            return
        self._deal(player)

    def tick(self) -> int:
        return self.clock.tick()

    def end(self) -> int | None:
        self.clock.stop()
        winner = self.winner()
        logger.info(
            f"Duel over: {self.players[0].score} - {self.players[1].score}, "
            f"{'tie' if winner is None else f'player {winner} wins'}"
        )
        return winner

    def winner(self) -> int | None:
        """Player number with the higher score, None for a tie."""
        first, second = self.players
        if first.score > second.score:
            return 1
        if second.score > first.score:
            return 2
        return None
