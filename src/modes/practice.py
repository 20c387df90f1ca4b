"""
Free practice round.

Scoring: +10 per correct answer, -5 per incorrect answer, never below zero.
The round ends when the problem limit is reached, the time limit runs out,
or the learner stops early.
"""

from __future__ import annotations

from dataclasses import dataclass

from src.adaptive.engine import PracticeEngine
from src.adaptive.models import AnswerOutcome, PresentedProblem, SessionSettings
from src.modes.clock import SessionClock
from src.problems.models import is_blank_answer

# Options offered when setting up a practice round
PRACTICE_TIME_LIMITS = (0, 30, 60, 120)
PRACTICE_PROBLEM_LIMITS = (0, 10, 20, 40, 50)

CORRECT_POINTS = 10
INCORRECT_PENALTY = 5


@dataclass(frozen=True)
class RoundSummary:
    """Results screen data."""

    score: int
    correct: int
    attempted: int

    @property
    def accuracy(self) -> float:
        return self.correct / self.attempted if self.attempted else 0.0

    @property
    def accuracy_percent(self) -> int:
        return round(self.accuracy * 100)


class PracticeRound:
    """A practice session with scoring and limits."""

    def __init__(self, engine: PracticeEngine, session: SessionSettings, clock: SessionClock | None = None):
        self.engine = engine
        self.session = session
        self.clock = clock or SessionClock(session.time_limit)
        self.score = 0
        self.current: PresentedProblem | None = None
        self._ended = False

    @property
    def finished(self) -> bool:
        return self._ended or self.clock.expired or self.session.problem_limit_reached

    def next_problem(self) -> PresentedProblem | None:
        """Deal the next problem, or None once the round is over."""
        if self.finished:
            self.end()
            return None
        self.current = self.engine.next_problem(self.session)
        return self.current

    def answer(self, user_answer: int | str | None, response_time_ms: int) -> AnswerOutcome | None:
        """
        Submit an answer to the current problem.

        A blank submission is ignored and the problem stays open.

        Returns:
            The outcome, or None if there is no open problem, time is up
            or the answer was blank
        """
        if self.current is None or self._ended or self.clock.expired:
            return None
        if is_blank_answer(user_answer):
            return None

        outcome = self.engine.submit_answer(self.session, self.current.problem, user_answer, response_time_ms)
        self.current = None
        if outcome.is_correct:
            self.score += CORRECT_POINTS
        else:
            self.score = max(0, self.score - INCORRECT_PENALTY)
        return outcome

    def tick(self) -> int:
        return self.clock.tick()

    def end(self) -> RoundSummary:
        """Stop the round (early or on a limit) and summarize."""
        self._ended = True
        self.clock.stop()
        return self.summary()

    def summary(self) -> RoundSummary:
        return RoundSummary(
            score=self.score,
            correct=self.session.correct,
            attempted=self.session.attempted,
        )
