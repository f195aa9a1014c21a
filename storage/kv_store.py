"""SQLite-backed key-value store with a byte quota."""

import logging
import sqlite3
from pathlib import Path
from typing import Optional

from config.exceptions import StorageError, StorageQuotaError

logger = logging.getLogger(__name__)

_CREATE_TABLE_SQL = """
CREATE TABLE IF NOT EXISTS kv (
    key TEXT PRIMARY KEY,
    value TEXT NOT NULL,
    updated_at TIMESTAMP DEFAULT CURRENT_TIMESTAMP
);
"""


def _entry_size(key: str, value: str) -> int:
    return len(key.encode("utf-8")) + len(value.encode("utf-8"))


class KeyValueStore:
    """String values by string key, capped at ``quota_bytes`` in total.

    The quota counts the UTF-8 size of every key plus its value. A write that
    would exceed it raises ``StorageQuotaError`` and leaves the old value in place.
    """

    def __init__(self, db_path: str | Path, quota_bytes: int = 5 * 1024 * 1024):
        self.db_path = Path(db_path)
        self.db_path.parent.mkdir(parents=True, exist_ok=True)
        self.quota_bytes = quota_bytes
        self._init_db()

    def _get_conn(self) -> sqlite3.Connection:
        conn = sqlite3.connect(str(self.db_path))
        conn.row_factory = sqlite3.Row
        return conn

    def _init_db(self):
        try:
            with self._get_conn() as conn:
                conn.executescript(_CREATE_TABLE_SQL)
        except sqlite3.Error as e:
            raise StorageError(f"Cannot open key-value store: {e}", {"path": str(self.db_path)}) from e

    def get(self, key: str) -> Optional[str]:
        try:
            with self._get_conn() as conn:
                row = conn.execute("SELECT value FROM kv WHERE key = ?", (key,)).fetchone()
        except sqlite3.Error as e:
            raise StorageError(f"Read failed for '{key}': {e}") from e
        return row["value"] if row else None

    def set(self, key: str, value: str) -> None:
        """Write ``value`` under ``key``.

        Raises:
            StorageQuotaError: If the store would grow past its quota.
            StorageError: If SQLite fails.
        """
        try:
            with self._get_conn() as conn:
                row = conn.execute(
                    "SELECT COALESCE(SUM(LENGTH(CAST(key AS BLOB)) + LENGTH(CAST(value AS BLOB))), 0) "
                    "AS used FROM kv WHERE key != ?",
                    (key,),
                ).fetchone()
                needed = row["used"] + _entry_size(key, value)
                if needed > self.quota_bytes:
                    raise StorageQuotaError(key, needed, self.quota_bytes)
                conn.execute(
                    "INSERT INTO kv (key, value) VALUES (?, ?) "
                    "ON CONFLICT(key) DO UPDATE SET value = excluded.value, "
                    "updated_at = CURRENT_TIMESTAMP",
                    (key, value),
                )
        except sqlite3.Error as e:
            raise StorageError(f"Write failed for '{key}': {e}") from e
        logger.debug("kv set %s (%d bytes)", key, len(value))

    def used_bytes(self) -> int:
        """Total UTF-8 size of every stored key and value."""
        try:
            with self._get_conn() as conn:
                row = conn.execute(
                    "SELECT COALESCE(SUM(LENGTH(CAST(key AS BLOB)) + LENGTH(CAST(value AS BLOB))), 0) AS used FROM kv"
                ).fetchone()
        except sqlite3.Error as e:
            raise StorageError(f"Usage query failed: {e}") from e
        return row["used"]
