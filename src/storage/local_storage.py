# src/storage/local_storage.py

"""SQLite-backed key/value store for client-side durable state."""

import logging
import sqlite3
from pathlib import Path

from src.config.settings import Settings

logger = logging.getLogger("umars_hands.local_storage")

_SCHEMA = """\
CREATE TABLE IF NOT EXISTS local_storage (
    key        TEXT PRIMARY KEY,
    value      TEXT NOT NULL,
    updated_at TEXT NOT NULL DEFAULT (datetime('now'))
);
"""


class LocalStorage:
    """Durable string key/value store.

    Values are replaced whole on every write; there is no
    read-modify-write at the row level.
    """

    def __init__(
        self, db_path: Path | None = None,
    ) -> None:
        path = db_path or Settings.STORAGE_PATH
        path.parent.mkdir(parents=True, exist_ok=True)
        self._conn = sqlite3.connect(
            str(path), check_same_thread=False,
        )
        self._conn.execute("PRAGMA journal_mode=WAL")
        self._conn.executescript(_SCHEMA)
        logger.debug("LocalStorage opened at %s", path)

    def close(self) -> None:
        """Close the database connection."""
        self._conn.close()

    def get_item(self, key: str) -> str | None:
        """Return the stored value, or ``None`` when the key is absent."""
        row = self._conn.execute(
            "SELECT value FROM local_storage WHERE key = ?",
            (key,),
        ).fetchone()
        return str(row[0]) if row else None

    def set_item(self, key: str, value: str) -> None:
        """Store *value* under *key*, replacing any previous value."""
        self._conn.execute(
            "INSERT INTO local_storage (key, value, updated_at) "
            "VALUES (?, ?, datetime('now')) "
            "ON CONFLICT(key) DO UPDATE SET "
            "value=excluded.value, updated_at=excluded.updated_at",
            (key, value),
        )
        self._conn.commit()

    def remove_item(self, key: str) -> bool:
        """Delete *key*. Returns whether anything was removed."""
        cur = self._conn.execute(
            "DELETE FROM local_storage WHERE key = ?",
            (key,),
        )
        self._conn.commit()
        return cur.rowcount > 0
