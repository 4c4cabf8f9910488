"""Durable key-value storage backends for encoded documents."""

import logging
import sqlite3
from pathlib import Path
from typing import Optional, Protocol, runtime_checkable

from config.exceptions import StorageError

logger = logging.getLogger(__name__)

KEY_PREFIX = "novel-"


def storage_key(novel_id: str) -> str:
    """Return the storage key for a project id."""
    return f"{KEY_PREFIX}{novel_id}"


@runtime_checkable
class KeyValueStore(Protocol):
    """Persistent string-keyed store holding encoded documents.

    Implementations raise StorageError when the backend fails.
    """

    def get(self, key: str) -> Optional[str]:
        ...

    def set(self, key: str, value: str) -> None:
        ...

    def keys(self, prefix: str = "") -> list[str]:
        ...


class MemoryStore:
    """Dict-backed store for tests and throwaway sessions."""

    def __init__(self, initial: Optional[dict[str, str]] = None):
        self._data: dict[str, str] = dict(initial or {})
        self.write_count = 0

    def get(self, key: str) -> Optional[str]:
        return self._data.get(key)

    def set(self, key: str, value: str) -> None:
        self._data[key] = value
        self.write_count += 1

    def keys(self, prefix: str = "") -> list[str]:
        return sorted(k for k in self._data if k.startswith(prefix))


_CREATE_TABLES_SQL = """
CREATE TABLE IF NOT EXISTS kv_store (
    key TEXT PRIMARY KEY,
    value TEXT NOT NULL,
    updated_at TIMESTAMP DEFAULT CURRENT_TIMESTAMP
);
"""


class SqliteStore:
    """SQLite-backed store, one row per key."""

    def __init__(self, db_path: str | Path):
        self.db_path = Path(db_path)
        self.db_path.parent.mkdir(parents=True, exist_ok=True)
        self._init_db()

    def _get_conn(self) -> sqlite3.Connection:
        conn = sqlite3.connect(str(self.db_path))
        conn.execute("PRAGMA journal_mode = WAL")
        return conn

    def _init_db(self):
        try:
            with self._get_conn() as conn:
                conn.executescript(_CREATE_TABLES_SQL)
        except sqlite3.Error as e:
            raise StorageError(f"Cannot open storage: {e}", {"path": str(self.db_path)}) from e

    def get(self, key: str) -> Optional[str]:
        try:
            with self._get_conn() as conn:
                row = conn.execute("SELECT value FROM kv_store WHERE key = ?", (key,)).fetchone()
        except sqlite3.Error as e:
            raise StorageError(f"Storage read failed: {e}", {"key": key}) from e
        return row[0] if row else None

    def set(self, key: str, value: str) -> None:
        try:
            with self._get_conn() as conn:
                conn.execute(
                    "INSERT INTO kv_store (key, value, updated_at) VALUES (?, ?, CURRENT_TIMESTAMP) "
                    "ON CONFLICT(key) DO UPDATE SET value = excluded.value, "
                    "updated_at = CURRENT_TIMESTAMP",
                    (key, value),
                )
        except sqlite3.Error as e:
            raise StorageError(f"Storage write failed: {e}", {"key": key}) from e
        logger.debug("Stored %s (%d chars)", key, len(value))

    def keys(self, prefix: str = "") -> list[str]:
        try:
            with self._get_conn() as conn:
                rows = conn.execute("SELECT key FROM kv_store ORDER BY key").fetchall()
        except sqlite3.Error as e:
            raise StorageError(f"Storage listing failed: {e}") from e
        return [r[0] for r in rows if r[0].startswith(prefix)]
