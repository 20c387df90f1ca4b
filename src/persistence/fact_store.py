"""
Fact Store: the learner's mastery state backed by a repository.

The store keeps the MasteryDocument in memory and writes the whole document
through the repository on save(). Persistence problems never reach the
learner: a failed or corrupt load falls back to an empty document, and a
failed save is logged while the in-memory state carries on.
"""

from __future__ import annotations

from typing import Iterator

from loguru import logger
from pydantic import ValidationError

from src.core.exceptions import StorageError
from src.core.grades import get_grade_config
from src.core.operators import Operator, OperatorFamily
from src.persistence.models import FactMastery, GradeProgress, MasteryDocument
from src.persistence.repository import InMemoryRepository, MasteryRepository


class FactStore:
    """
    Mapping from canonical fact key to FactMastery, plus per-grade progress.

    Usage:
        store = FactStore.open(JsonFileRepository(path))
        fact = store.get("3+7")
        store.put(fact)
        store.save()
    """

    def __init__(self, repository: MasteryRepository | None = None, document: MasteryDocument | None = None):
        self.repository = repository if repository is not None else InMemoryRepository()
        self.document = document or MasteryDocument()
        self.degraded = False  # Set when the last load or save failed

    @classmethod
    def open(cls, repository: MasteryRepository | None = None) -> FactStore:
        """Create a store and load its document."""
        store = cls(repository)
        store.load()
        return store

    # =========================================================================
    # Persistence
    # =========================================================================

    def load(self) -> MasteryDocument:
        """
        Read the document from the repository.

        Returns:
            The loaded document, or an empty one if reading failed
        """
        try:
            raw = self.repository.load()
            document = MasteryDocument() if raw is None else MasteryDocument.model_validate(raw)
            self.degraded = False
        except StorageError as e:
            logger.warning(f"Mastery state unavailable, starting empty: {e}")
            document = MasteryDocument()
            self.degraded = True
        except ValidationError as e:
            logger.warning(f"Mastery state malformed, starting empty: {e.error_count()} error(s)")
            document = MasteryDocument()
            self.degraded = True

        self.document = document
        logger.debug(
            f"Loaded {len(document.fact_mastery)} facts, "
            f"{len(document.grade_progress)} grade records"
        )
        return document

    def save(self) -> bool:
        """
        Write the whole document through the repository.

        Returns:
            True if the write succeeded
        """
        try:
            self.repository.save(self.document.to_json_dict())
        except StorageError as e:
            logger.error(f"Failed to persist mastery state: {e}")
            self.degraded = True
            return False
        return True

    def clear(self) -> None:
        """Forget all mastery and grade progress."""
        self.document = MasteryDocument()
        try:
            self.repository.clear()
        except StorageError as e:
            logger.error(f"Failed to clear mastery state: {e}")
            self.degraded = True
        else:
            logger.info("Mastery state cleared")

    def close(self) -> None:
        self.repository.close()

    # =========================================================================
    # Facts
    # =========================================================================

    def get(self, key: str) -> FactMastery | None:
        return self.document.fact_mastery.get(key)

    def put(self, fact: FactMastery) -> None:
        self.document.fact_mastery[fact.key] = fact

    def facts(self) -> list[FactMastery]:
        return list(self.document.fact_mastery.values())

    def facts_for_operators(self, operators: set[Operator] | tuple[Operator, ...]) -> list[FactMastery]:
        wanted = set(operators)
        return [f for f in self.document.fact_mastery.values() if f.operator in wanted]

    def facts_in_family(self, family: OperatorFamily) -> list[FactMastery]:
        return [f for f in self.document.fact_mastery.values() if f.operator.family is family]

    def __len__(self) -> int:
        return len(self.document.fact_mastery)

    def __contains__(self, key: object) -> bool:
        return key in self.document.fact_mastery

    def __iter__(self) -> Iterator[FactMastery]:
        return iter(self.facts())

    # =========================================================================
    # Grade Progress
    # =========================================================================

    def grade_progress(self, grade: int) -> GradeProgress:
        """
        Get a grade's adaptive ceilings, creating them from the grade's
        starting values on first access.
        """
        progress = self.document.grade_progress.get(grade)
        if progress is None:
            config = get_grade_config(grade)
            progress = GradeProgress(
                current_max_addend=config.start_max_addend,
                current_max_factor=config.start_max_factor,
            )
            self.document.grade_progress[grade] = progress
            logger.debug(f"Created progress for grade {grade}: {progress}")
        return progress
