"""
Play modes built on the practice engine.

- PracticeRound: Free practice with +10/-5 scoring and optional limits
- MasterTest: 60 second test against the grade's target score
- Duel: Two players, shared clock, independent problems
- SessionClock: Countdown / count-up timer shared by all modes
"""

from src.modes.clock import SessionClock
from src.modes.duel import Duel, DuelAnswer, DuelPlayer, resolve_key
from src.modes.master_test import MasterTest, MasterTestResult
from src.modes.practice import (
    PRACTICE_PROBLEM_LIMITS,
    PRACTICE_TIME_LIMITS,
    PracticeRound,
    RoundSummary,
)

__all__ = [
    "Duel",
    "DuelAnswer",
    "DuelPlayer",
    "MasterTest",
    "MasterTestResult",
    "PRACTICE_PROBLEM_LIMITS",
    "PRACTICE_TIME_LIMITS",
    "PracticeRound",
    "RoundSummary",
    "SessionClock",
    "resolve_key",
]
