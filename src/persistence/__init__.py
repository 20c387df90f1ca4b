"""
Persistence for learner mastery.

Components:
- MasteryDocument / FactMastery / GradeProgress: pydantic models of the stored document
- FactStore: In-memory view with write-through save and silent fallback
- Repositories: in-memory, JSON file and SQLite backends
"""

from src.persistence.fact_store import FactStore
from src.persistence.models import (
    MASTERED_STRENGTH,
    MAX_STRENGTH,
    FactMastery,
    GradeProgress,
    MasteryDocument,
)
from src.persistence.repository import (
    InMemoryRepository,
    JsonFileRepository,
    MasteryRepository,
    SqliteRepository,
    create_repository,
)

__all__ = [
    "FactStore",
    "FactMastery",
    "GradeProgress",
    "MasteryDocument",
    "MASTERED_STRENGTH",
    "MAX_STRENGTH",
    "InMemoryRepository",
    "JsonFileRepository",
    "MasteryRepository",
    "SqliteRepository",
    "create_repository",
]
