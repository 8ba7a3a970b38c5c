"""SQLite engine backing the persistent storage scope.

One ``local_storage`` table keyed by ``(scope, key)``; WAL mode so the
server and tests can read while a write is in progress.
"""

from __future__ import annotations

import logging
import os
import sqlite3
from contextlib import contextmanager
from pathlib import Path
from typing import Generator, Optional

log = logging.getLogger("ribbit.db")

_SCHEMA = """
CREATE TABLE IF NOT EXISTS local_storage (
    scope      TEXT NOT NULL,
    key        TEXT NOT NULL,
    value      TEXT NOT NULL,
    updated_at TEXT NOT NULL,
    PRIMARY KEY (scope, key)
);
"""

_db_path: Optional[Path] = None
_schema_ready = False


def get_db_path() -> Path:
    """``$RIBBIT_DATA_DIR/ribbit.db``, else ``data_ribbit/`` next to the packages."""
    global _db_path
    if _db_path is None:
        data_dir = os.environ.get("RIBBIT_DATA_DIR", "")
        base = Path(data_dir) if data_dir else Path(__file__).resolve().parents[2] / "data_ribbit"
        _db_path = base / "ribbit.db"
    return _db_path


def set_db_path(path: Path) -> None:
    """Point the engine at another file (tests)."""
    global _db_path, _schema_ready
    _db_path = path
    _schema_ready = False


def _connect(path: Path) -> sqlite3.Connection:
    conn = sqlite3.connect(str(path), timeout=30)
    conn.row_factory = sqlite3.Row
    conn.execute("PRAGMA journal_mode = WAL")
    conn.execute("PRAGMA busy_timeout = 5000")
    return conn


def init_db(path: Optional[Path] = None) -> None:
    """Create the storage table if needed. Idempotent."""
    global _schema_ready
    if path:
        set_db_path(path)
    db_path = get_db_path()
    db_path.parent.mkdir(parents=True, exist_ok=True)

    conn = _connect(db_path)
    try:
        conn.executescript(_SCHEMA)
        conn.commit()
    finally:
        conn.close()
    _schema_ready = True
    log.info("Storage database ready at %s", db_path)


@contextmanager
def get_conn() -> Generator[sqlite3.Connection, None, None]:
    """Connection that commits on success and rolls back on error.

    The schema is (re)created first if the database file went missing.
    """
    if not _schema_ready or not get_db_path().exists():
        init_db()
    conn = _connect(get_db_path())
    try:
        yield conn
        conn.commit()
    except Exception:
        conn.rollback()
        raise
    finally:
        conn.close()
