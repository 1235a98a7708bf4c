from __future__ import annotations

import os
import sqlite3
import threading
from dataclasses import dataclass
from typing import Protocol

RESUME_PREFIX = "resume:"
JOB_MATCH_PREFIX = "jobmatch:"


def resume_key(resume_id: str) -> str:
    return f"{RESUME_PREFIX}{resume_id}"


def job_match_prefix(resume_id: str) -> str:
    return f"{JOB_MATCH_PREFIX}{resume_id}:"


def job_match_key(resume_id: str, job_id: str) -> str:
    return f"{job_match_prefix(resume_id)}{job_id}"


@dataclass(frozen=True)
class KVItem:
    key: str
    value: str


class KeyValueStore(Protocol):
    def get(self, key: str) -> str | None: ...

    def set(self, key: str, value: str) -> bool: ...

    def delete(self, key: str) -> bool: ...

    def list(self, pattern: str, return_values: bool = False) -> list[KVItem] | list[str]: ...


class SqliteKeyValueStore:
    """Schema-less string store keyed by ``resume:<id>`` / ``jobmatch:<resumeId>:<jobId>``."""

    def __init__(self, db_path: str):
        self._db_path = db_path
        self._lock = threading.Lock()
        self._conn: sqlite3.Connection | None = None

    def _connection(self) -> sqlite3.Connection:
        with self._lock:
            if self._conn is not None:
                return self._conn

            directory = os.path.dirname(self._db_path)
            if directory:
                os.makedirs(directory, exist_ok=True)

            conn = sqlite3.connect(
                self._db_path,
                check_same_thread=False,
                timeout=5,
                isolation_level=None,
            )
            conn.execute("PRAGMA journal_mode=WAL;")
            conn.execute("PRAGMA synchronous=NORMAL;")
            conn.execute("PRAGMA busy_timeout=5000;")
            conn.execute(
                """
                CREATE TABLE IF NOT EXISTS kv_items (
                    key TEXT PRIMARY KEY,
                    value TEXT NOT NULL
                );
                """
            )
            self._conn = conn
            return conn

    def get(self, key: str) -> str | None:
        conn = self._connection()
        with self._lock:
            row = conn.execute("SELECT value FROM kv_items WHERE key = ?", (key,)).fetchone()
        return row[0] if row else None

    def set(self, key: str, value: str) -> bool:
        conn = self._connection()
        with self._lock:
            conn.execute(
                """
                INSERT INTO kv_items (key, value) VALUES (?, ?)
                ON CONFLICT(key) DO UPDATE SET value = excluded.value
                """,
                (key, value),
            )
        return True

    def delete(self, key: str) -> bool:
        conn = self._connection()
        with self._lock:
            cur = conn.execute("DELETE FROM kv_items WHERE key = ?", (key,))
        return bool(cur.rowcount)

    def list(self, pattern: str, return_values: bool = False) -> list[KVItem] | list[str]:
        """List keys matching ``pattern``; a trailing ``*`` makes it a prefix match."""
        conn = self._connection()
        if pattern.endswith("*"):
            prefix = pattern[:-1]
            clause = "substr(key, 1, ?) = ?"
            params: tuple = (len(prefix), prefix)
        else:
            clause = "key = ?"
            params = (pattern,)

        with self._lock:
            rows = conn.execute(
                f"SELECT key, value FROM kv_items WHERE {clause} ORDER BY key",
                params,
            ).fetchall()

        if return_values:
            return [KVItem(key=row[0], value=row[1]) for row in rows]
        return [row[0] for row in rows]

    def close(self) -> None:
        with self._lock:
            if self._conn is not None:
                self._conn.close()
                self._conn = None
