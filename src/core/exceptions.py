"""
Exception hierarchy for Fact Universe.

Everything raised on purpose by the engine derives from FactUniverseError so
callers at the edge (CLI, display collaborators) can catch one type.
"""

from __future__ import annotations


class FactUniverseError(Exception):
    """Base class for engine errors."""


class UnknownGradeError(FactUniverseError, KeyError):
    """Raised when a grade has no configuration."""

    def __init__(self, grade: int):
        self.grade = grade
        super().__init__(f"No configuration for grade {grade}")

    def __str__(self) -> str:
        return self.args[0]


class InvalidOperatorError(FactUniverseError, ValueError):
    """Raised when an operator token cannot be parsed."""


class InvalidSessionError(FactUniverseError, ValueError):
    """Raised when session settings are inconsistent with the grade."""


class StorageError(FactUniverseError):
    """Raised by repositories when the mastery document cannot be read or written."""
