"""
Delivery: how drills reach the learner.

Components:
- DisplayCollaborator: Protocol any front end implements
- DuelDisplay: Protocol for two-player key entry
- Response: Learner's answer and response time
- run_practice_round / run_master_test / run_duel: Drive a mode through a display
- ConsoleDisplay: Rich terminal implementation
"""

from .console import ConsoleDisplay
from .display import (
    DisplayCollaborator,
    DuelDisplay,
    Response,
    run_duel,
    run_master_test,
    run_practice_round,
)

__all__ = [
    "ConsoleDisplay",
    "DisplayCollaborator",
    "DuelDisplay",
    "Response",
    "run_duel",
    "run_master_test",
    "run_practice_round",
]
