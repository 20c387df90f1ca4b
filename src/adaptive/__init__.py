"""
Adaptive Practice Engine.

Per-fact mastery tracking with review-first selection and automatic ceiling
escalation.

Components:
- AdaptiveSelector: Picks weak facts, due facts or new problems
- MasteryUpdater: Applies correctness and latency to fact strength
- LevelProgressionController: Raises ceilings when the edge is mastered
- PracticeEngine: Main orchestration layer
"""
from src.adaptive.engine import PracticeEngine
from src.adaptive.level_progression import (
    MASTERY_THRESHOLD_COUNT,
    MASTERY_THRESHOLD_PERCENT,
    LevelProgressionController,
)
from src.adaptive.mastery_updater import FLUENCY_THRESHOLD_MS, MasteryUpdater
from src.adaptive.models import (
    AnswerOutcome,
    LevelUp,
    PresentedProblem,
    SessionSettings,
    within_ceiling,
)
from src.adaptive.selector import AdaptiveSelector

__all__ = [
    # Main engine
    "PracticeEngine",
    # Component classes
    "AdaptiveSelector",
    "LevelProgressionController",
    "MasteryUpdater",
    # Data models
    "AnswerOutcome",
    "LevelUp",
    "PresentedProblem",
    "SessionSettings",
    "within_ceiling",
    # Tuning defaults
    "FLUENCY_THRESHOLD_MS",
    "MASTERY_THRESHOLD_COUNT",
    "MASTERY_THRESHOLD_PERCENT",
]
