"""
Display collaborator seam.

The engine decides what to ask; a display shows it and reports back what the
learner answered and how long it took. Anything that implements
DisplayCollaborator (a terminal, a test double, a web front end) can drive a
practice round or master test through the functions below. Duels need a
DuelDisplay, which reads raw key presses for both players.
"""

from __future__ import annotations

import time
from dataclasses import dataclass
from typing import Callable, Protocol

from loguru import logger

from src.adaptive.models import AnswerOutcome, LevelUp, PresentedProblem
from src.core.operators import OperatorFamily
from src.modes.clock import SessionClock
from src.modes.duel import Duel, DuelAnswer
from src.modes.master_test import MasterTest, MasterTestResult
from src.modes.practice import PracticeRound, RoundSummary
from src.problems.models import is_blank_answer


@dataclass(frozen=True)
class Response:
    """What the learner did with a problem."""

    user_answer: str | int | None
    response_time_ms: int
    quit: bool = False


class DisplayCollaborator(Protocol):
    def present(self, presented: PresentedProblem, clock: SessionClock) -> Response:
        ...

    def show_feedback(self, outcome: AnswerOutcome) -> None:
        ...

    def show_level_up(self, level_up: LevelUp) -> None:
        ...

    def show_mastery(self, lights: dict[OperatorFamily, float]) -> None:
        ...

    def show_round_summary(self, summary: RoundSummary) -> None:
        ...

    def show_test_result(self, result: MasterTestResult) -> None:
        ...


class DuelDisplay(Protocol):
    def show_duel(self, duel: Duel) -> None:
        ...

    def read_keys(self, duel: Duel) -> str | None:
        """Keys pressed since the last read, or None to stop the duel."""
        ...

    def show_duel_answer(self, answer: DuelAnswer) -> None:
        ...

    def show_duel_result(self, duel: Duel, winner: int | None) -> None:
        ...


class _WallClock:
    """Feeds whole elapsed seconds into a SessionClock."""

    def __init__(self, clock: SessionClock, now: Callable[[], float]):
        self.clock = clock
        self.now = now
        self.mark = now()

    def catch_up(self) -> None:
        elapsed = int(self.now() - self.mark)
        if elapsed > 0:
            self.clock.advance(elapsed)
            self.mark += elapsed


def _collect(
    display: DisplayCollaborator,
    presented: PresentedProblem,
    clock: SessionClock,
    wall: _WallClock,
) -> Response:
    """Ask until the learner gives a non-blank answer, quits or runs out of time."""
    while True:
        response = display.present(presented, clock)
        wall.catch_up()
        if response.quit or not is_blank_answer(response.user_answer) or clock.expired:
            return response
        logger.debug("Blank answer ignored")


def run_practice_round(
    round_: PracticeRound,
    display: DisplayCollaborator,
    now: Callable[[], float] = time.monotonic,
) -> RoundSummary:
    """
    Drive a practice round until a limit is hit or the learner quits.

    Args:
        round_: Round to play
        display: Collaborator that shows problems and collects answers
        now: Monotonic seconds source for the session clock
    """
    wall = _WallClock(round_.clock, now)

    while True:
        presented = round_.next_problem()
        if presented is None:
            break

        response = _collect(display, presented, round_.clock, wall)
        if response.quit:
            logger.debug("Learner ended the round early")
            break

        outcome = round_.answer(response.user_answer, response.response_time_ms)
        if outcome is None:
            break

        display.show_feedback(outcome)
        if outcome.level_up is not None:
            display.show_level_up(outcome.level_up)

    summary = round_.end()
    display.show_round_summary(summary)
    display.show_mastery(round_.engine.mastery_lights(round_.session.grade, round_.session.operators))
    return summary


def run_master_test(
    test: MasterTest,
    display: DisplayCollaborator,
    now: Callable[[], float] = time.monotonic,
) -> MasterTestResult:
    """Drive a master test until the clock runs out or the learner quits."""
    wall = _WallClock(test.clock, now)

    while True:
        presented = test.next_problem()
        if presented is None:
            break

        response = _collect(display, presented, test.clock, wall)
        if response.quit:
            break

        outcome = test.answer(response.user_answer, response.response_time_ms)
        if outcome is None:
            break
        display.show_feedback(outcome)

    result = test.end()
    display.show_test_result(result)
    return result


def run_duel(
    duel: Duel,
    display: DuelDisplay,
    now: Callable[[], float] = time.monotonic,
) -> int | None:
    """
    Drive a duel until the clock runs out or the display stops it.

    Each read may carry presses from both players. A player who answers
    cools down for the rest of that read and is dealt a new problem after it.

    Returns:
        Winning player number, None for a tie
    """
    wall = _WallClock(duel.clock, now)
    duel.start()

    while not duel.finished:
        display.show_duel(duel)
        keys = display.read_keys(duel)
        wall.catch_up()
        if keys is None:
            logger.debug("Duel stopped early")
            break

        answered: set[int] = set()
        for key in keys:
            answer = duel.press(key)
            if answer is None:
                continue
            answered.add(answer.player)
            display.show_duel_answer(answer)

        for number in sorted(answered):
            duel.ready(number)

    winner = duel.end()
    display.show_duel_result(duel, winner)
    return winner
