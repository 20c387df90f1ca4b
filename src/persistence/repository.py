"""
Repositories for the mastery document.

A repository loads and saves one JSON-compatible document. Three backends:
- InMemoryRepository: process-local, used by tests and throwaway sessions
- JsonFileRepository: one JSON file, replaced atomically on save
- SqliteRepository: one row in a SQLite table

Backends raise StorageError on any I/O or decode failure; deciding what to
do about it is the FactStore's job.
"""

from __future__ import annotations

import copy
import json
import os
import sqlite3
import tempfile
from datetime import datetime
from pathlib import Path
from typing import Any, Protocol

from loguru import logger

from src.core.exceptions import StorageError

Document = dict[str, Any]


class MasteryRepository(Protocol):
    """Load/save interface for the mastery document."""

    def load(self) -> Document | None:
        """Return the stored document, or None if nothing was saved yet."""
        ...

    def save(self, document: Document) -> None:
        ...

    def clear(self) -> None:
        ...

    def close(self) -> None:
        """Release any held resources; the repository must not be used afterwards."""
        ...


class InMemoryRepository:
    """Keeps a deep copy of the last saved document."""

    def __init__(self, document: Document | None = None):
        self._document = copy.deepcopy(document) if document is not None else None
        self.save_count = 0

    def load(self) -> Document | None:
        return copy.deepcopy(self._document)

    def save(self, document: Document) -> None:
        self._document = copy.deepcopy(document)
        self.save_count += 1

    def clear(self) -> None:
        self._document = None

    def close(self) -> None:
        pass


class JsonFileRepository:
    """
    Stores the document as a JSON file.

    Writes go to a temporary file in the same directory which then replaces
    the target, so a crash mid-write never leaves a truncated document.
    """

    def __init__(self, path: Path | str):
        self.path = Path(path)

    def load(self) -> Document | None:
        if not self.path.exists():
            return None
        try:
            with open(self.path, "r", encoding="utf-8") as f:
                return json.load(f)
        except (OSError, json.JSONDecodeError, UnicodeDecodeError) as e:
            raise StorageError(f"Cannot read {self.path}: {e}") from e

    def save(self, document: Document) -> None:
        try:
            self.path.parent.mkdir(parents=True, exist_ok=True)
            fd, tmp_name = tempfile.mkstemp(
                prefix=f".{self.path.name}.", suffix=".tmp", dir=self.path.parent
            )
            try:
                with os.fdopen(fd, "w", encoding="utf-8") as f:
                    json.dump(document, f, indent=2, ensure_ascii=False)
                os.replace(tmp_name, self.path)
            except BaseException:
                Path(tmp_name).unlink(missing_ok=True)
                raise
        except (OSError, TypeError, ValueError) as e:
            raise StorageError(f"Cannot write {self.path}: {e}") from e

    def clear(self) -> None:
        try:
            self.path.unlink(missing_ok=True)
        except OSError as e:
            raise StorageError(f"Cannot delete {self.path}: {e}") from e

    def close(self) -> None:
        pass  # Nothing held between calls


class SqliteRepository:
    """
    Stores the document as a single-row JSON blob in SQLite.

    Database location defaults to ~/.fact_universe/state.db
    """

    DEFAULT_DB_PATH = Path.home() / ".fact_universe" / "state.db"

    def __init__(self, db_path: Path | str | None = None):
        self.db_path = Path(db_path) if db_path is not None else self.DEFAULT_DB_PATH
        self._conn: sqlite3.Connection | None = None

    @property
    def conn(self) -> sqlite3.Connection:
        """Get or create database connection."""
        if self._conn is None:
            try:
                self.db_path.parent.mkdir(parents=True, exist_ok=True)
                self._conn = sqlite3.connect(str(self.db_path))
                self._conn.execute("""
                    CREATE TABLE IF NOT EXISTS mastery_document (
                        id INTEGER PRIMARY KEY CHECK (id = 1),
                        body TEXT NOT NULL,
                        updated_at TIMESTAMP
                    )
                """)
                self._conn.commit()
            except (OSError, sqlite3.Error) as e:
                self._conn = None
                raise StorageError(f"Cannot open {self.db_path}: {e}") from e
            logger.debug(f"SqliteRepository opened at {self.db_path}")
        return self._conn

    def load(self) -> Document | None:
        try:
            row = self.conn.execute("SELECT body FROM mastery_document WHERE id = 1").fetchone()
        except sqlite3.Error as e:
            raise StorageError(f"Cannot read {self.db_path}: {e}") from e
        if row is None:
            return None
        try:
            return json.loads(row[0])
        except json.JSONDecodeError as e:
            raise StorageError(f"Corrupt document in {self.db_path}: {e}") from e

    def save(self, document: Document) -> None:
        try:
            body = json.dumps(document, ensure_ascii=False)
            self.conn.execute(
                """
                INSERT INTO mastery_document (id, body, updated_at) VALUES (1, ?, ?)
                ON CONFLICT(id) DO UPDATE SET
                    body = excluded.body,
                    updated_at = excluded.updated_at
                """,
                (body, datetime.now().isoformat()),
            )
            self.conn.commit()
        except (TypeError, ValueError, sqlite3.Error) as e:
            raise StorageError(f"Cannot write {self.db_path}: {e}") from e

    def clear(self) -> None:
        try:
            self.conn.execute("DELETE FROM mastery_document")
            self.conn.commit()
        except sqlite3.Error as e:
            raise StorageError(f"Cannot clear {self.db_path}: {e}") from e

    def close(self) -> None:
        """Close the database connection."""
        if self._conn:
            self._conn.close()
            self._conn = None


def create_repository(settings: Any = None) -> MasteryRepository:
    """
    Build the repository selected in settings.

    Args:
        settings: config.Settings (defaults to get_settings())
    """
    if settings is None:
        from config import get_settings

        settings = get_settings()

    backend = settings.storage_backend
    if backend == "memory":
        return InMemoryRepository()
    if backend == "sqlite":
        return SqliteRepository(settings.resolved_sqlite_path())
    return JsonFileRepository(settings.resolved_state_path())
