from __future__ import annotations

import os
import sqlite3
import threading
from typing import Protocol

from app.core.config import settings


class KeyValueStorage(Protocol):
    def read(self, key: str) -> str | None: ...

    def write(self, key: str, value: str) -> None: ...


class InMemoryStorage:
    def __init__(self, initial: dict[str, str] | None = None):
        self._values: dict[str, str] = dict(initial or {})
        self.write_count = 0

    def read(self, key: str) -> str | None:
        return self._values.get(key)

    def write(self, key: str, value: str) -> None:
        self._values[key] = value
        self.write_count += 1


class SqliteKeyValueStorage:
    """Single-table key/value store, one row per named key."""

    def __init__(self, db_path: str):
        self.db_path = db_path
        self._conn: sqlite3.Connection | None = None
        self._conn_lock = threading.Lock()

    def _get_connection(self) -> sqlite3.Connection:
        with self._conn_lock:
            if self._conn is not None:
                return self._conn

            directory = os.path.dirname(self.db_path)
            if directory:
                os.makedirs(directory, exist_ok=True)

            self._conn = sqlite3.connect(
                self.db_path,
                check_same_thread=False,
                timeout=5,
                isolation_level=None,
            )
            self._conn.execute("PRAGMA journal_mode=WAL;")
            self._conn.execute("PRAGMA synchronous=NORMAL;")
            self._conn.execute("PRAGMA busy_timeout=5000;")
            self._conn.execute(
                """
                CREATE TABLE IF NOT EXISTS key_value_store (
                    key TEXT PRIMARY KEY,
                    value TEXT NOT NULL
                );
                """
            )
            return self._conn

    def read(self, key: str) -> str | None:
        conn = self._get_connection()
        with self._conn_lock:
            cur = conn.execute("SELECT value FROM key_value_store WHERE key = ?", (key,))
            row = cur.fetchone()
        return row[0] if row else None

    def write(self, key: str, value: str) -> None:
        conn = self._get_connection()
        with self._conn_lock:
            conn.execute(
                """
                INSERT INTO key_value_store (key, value) VALUES (?, ?)
                ON CONFLICT(key) DO UPDATE SET value = excluded.value
                """,
                (key, value),
            )

    def close(self) -> None:
        with self._conn_lock:
            if self._conn is not None:
                self._conn.close()
                self._conn = None


def build_history_storage() -> KeyValueStorage:
    if settings.history_storage_backend == "memory":
        return InMemoryStorage()
    return SqliteKeyValueStorage(settings.history_db_path)
