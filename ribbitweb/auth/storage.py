"""Key-value storage scopes used by the Froggy Phrase subsystem.

Two scopes exist: *persistent* (survives restarts, SQLite-backed) and
*session* (lives as long as the process, in memory). Each key is owned by
exactly one component, so reads and writes are single-step operations.
"""
from __future__ import annotations

import threading
from abc import ABC, abstractmethod
from datetime import datetime
from typing import Dict, Optional


class KeyValueStore(ABC):
    @abstractmethod
    def get(self, key: str) -> Optional[str]:
        ...

    @abstractmethod
    def set(self, key: str, value: str) -> None:
        ...

    @abstractmethod
    def remove(self, key: str) -> None:
        ...


class MemoryKeyValueStore(KeyValueStore):
    """In-process store: the session scope, and the fake used in tests."""

    def __init__(self, initial: Optional[Dict[str, str]] = None) -> None:
        self._lock = threading.Lock()
        self._data: Dict[str, str] = dict(initial or {})

    def get(self, key: str) -> Optional[str]:
        with self._lock:
            return self._data.get(key)

    def set(self, key: str, value: str) -> None:
        with self._lock:
            self._data[key] = value

    def remove(self, key: str) -> None:
        with self._lock:
            self._data.pop(key, None)

    def keys(self) -> list[str]:
        with self._lock:
            return sorted(self._data)


class SQLiteKeyValueStore(KeyValueStore):
    """SQLite-backed store (``local_storage`` table), one row per (scope, key)."""

    def __init__(self, scope: str = "persistent") -> None:
        self._scope = scope

    def _conn(self):
        from ribbit.db.engine import get_conn
        return get_conn()

    def get(self, key: str) -> Optional[str]:
        with self._conn() as conn:
            row = conn.execute(
                "SELECT value FROM local_storage WHERE scope = ? AND key = ?",
                (self._scope, key),
            ).fetchone()
            if row is None:
                return None
            return row["value"]

    def set(self, key: str, value: str) -> None:
        now = datetime.now().isoformat()
        with self._conn() as conn:
            conn.execute(
                "INSERT OR REPLACE INTO local_storage (scope, key, value, updated_at) VALUES (?, ?, ?, ?)",
                (self._scope, key, value, now),
            )

    def remove(self, key: str) -> None:
        with self._conn() as conn:
            conn.execute(
                "DELETE FROM local_storage WHERE scope = ? AND key = ?",
                (self._scope, key),
            )
