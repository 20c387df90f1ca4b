"""
Configuration settings for the fact-universe drill engine.

Uses Pydantic Settings for environment variable management with .env file support.
Grade tables are compiled in (see src/core/grades.py); only tuning knobs and
storage locations live here.
"""
from __future__ import annotations

from functools import lru_cache
from pathlib import Path
from typing import Literal

from pydantic import Field
from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    """Application settings loaded from environment variables."""

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        case_sensitive=False,
        extra="ignore",
    )

    # ========================================
    # Storage
    # ========================================
    storage_backend: Literal["json", "sqlite", "memory"] = Field(
        default="json",
        description="Where the mastery document is persisted",
    )
    state_path: str = Field(
        default="~/.fact_universe/mastery.json",
        description="JSON mastery document path (json backend)",
    )
    sqlite_path: str = Field(
        default="~/.fact_universe/state.db",
        description="SQLite database path (sqlite backend)",
    )

    # ========================================
    # Logging
    # ========================================
    log_level: Literal["DEBUG", "INFO", "WARNING", "ERROR"] = Field(
        default="WARNING",
        description="Logging verbosity level",
    )
    log_file: str | None = Field(
        default=None,
        description="Log file path (None for stderr only)",
    )

    # ========================================
    # Adaptive Engine
    # ========================================
    review_probability: float = Field(
        default=0.6,
        ge=0.0,
        le=1.0,
        description="Chance of preferring a due review over new content",
    )
    fluency_threshold_ms: int = Field(
        default=3000,
        gt=0,
        description="Correct answers faster than this earn the accelerated gain",
    )
    mastery_threshold_count: int = Field(
        default=5,
        gt=0,
        description="Minimum edge facts before a level-up is considered",
    )
    mastery_threshold_percent: float = Field(
        default=0.8,
        gt=0.0,
        le=1.0,
        description="Share of mastered edge facts required to level up",
    )
    anti_repeat_attempts: int = Field(
        default=10,
        gt=0,
        description="Regeneration attempts when a new problem repeats the last fact",
    )
    choice_retry_limit: int = Field(
        default=50,
        gt=0,
        description="Random draws allowed before distractors are filled deterministically",
    )

    # ========================================
    # Play Modes
    # ========================================
    correct_feedback_ms: int = Field(
        default=500,
        ge=0,
        description="Pause after a correct answer",
    )
    incorrect_feedback_ms: int = Field(
        default=2500,
        ge=0,
        description="Cooldown after an incorrect answer",
    )
    master_test_seconds: int = Field(
        default=60,
        gt=0,
        description="Length of the master test",
    )
    duel_seconds: int = Field(
        default=60,
        gt=0,
        description="Length of a duel",
    )

    def resolved_state_path(self) -> Path:
        """JSON document path with ~ expanded."""
        return Path(self.state_path).expanduser()

    def resolved_sqlite_path(self) -> Path:
        """SQLite path with ~ expanded."""
        return Path(self.sqlite_path).expanduser()


@lru_cache(maxsize=1)
def get_settings() -> Settings:
    """Get cached settings instance."""
    return Settings()
