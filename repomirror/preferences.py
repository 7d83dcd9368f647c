"""
SQLite-backed UI preference store for RepoMirror.

Schema
──────
table: preferences
  key    TEXT PRIMARY KEY
  value  TEXT NOT NULL  (JSON literal)

Only one key is used: ``theme`` → ``true`` (dark) / ``false`` (light).
"""

from __future__ import annotations

import json
import logging
import os
import sqlite3
from contextlib import contextmanager
from pathlib import Path
from typing import Optional, Union

logger = logging.getLogger(__name__)

DEFAULT_DB_PATH = Path(__file__).parent.parent / "data" / "preferences.db"

THEME_KEY = "theme"
DEFAULT_DARK_MODE = True


def _db_path() -> Path:
    """Return the database file path, honouring a PREFS_DB_PATH env var if set."""
    env = os.getenv("PREFS_DB_PATH")
    return Path(env) if env else DEFAULT_DB_PATH


class PreferenceStore:
    """Durable boolean dark-mode flag.

    Reads never raise: a missing, malformed or unreadable value loads as
    ``DEFAULT_DARK_MODE``. Writes are synchronous and committed before
    ``save`` returns.
    """

    def __init__(self, path: Optional[Union[str, Path]] = None) -> None:
        self.path = Path(path) if path else _db_path()

    @contextmanager
    def _connect(self):
        """Yield a connected sqlite3.Connection, creating the file/dir if needed."""
        self.path.parent.mkdir(parents=True, exist_ok=True)
        conn = sqlite3.connect(str(self.path))
        try:
            conn.execute(
                """
                CREATE TABLE IF NOT EXISTS preferences (
                    key   TEXT PRIMARY KEY,
                    value TEXT NOT NULL
                )
                """
            )
            yield conn
            conn.commit()
        except Exception:
            conn.rollback()
            raise
        finally:
            conn.close()

    def load(self) -> bool:
        """Return the stored dark-mode flag, or the default if absent/malformed."""
        try:
            with self._connect() as conn:
                row = conn.execute(
                    "SELECT value FROM preferences WHERE key = ?", (THEME_KEY,)
                ).fetchone()
        except (sqlite3.Error, OSError) as exc:
            logger.warning("Could not read theme preference from %s: %s", self.path, exc)
            return DEFAULT_DARK_MODE

        if row is None:
            return DEFAULT_DARK_MODE

        try:
            value = json.loads(row[0])
        except ValueError:
            logger.warning("Ignoring malformed theme preference %r", row[0])
            return DEFAULT_DARK_MODE

        if not isinstance(value, bool):
            logger.warning("Ignoring non-boolean theme preference %r", row[0])
            return DEFAULT_DARK_MODE
        return value

    def save(self, value: bool) -> None:
        """Persist the dark-mode flag as a JSON literal.

        Raises:
            sqlite3.Error: If the write could not be committed.
            OSError: If the database directory cannot be created.
        """
        with self._connect() as conn:
            conn.execute(
                "INSERT OR REPLACE INTO preferences (key, value) VALUES (?, ?)",
                (THEME_KEY, json.dumps(bool(value))),
            )
        logger.info("Saved theme preference dark=%s", bool(value))
