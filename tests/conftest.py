"""Shared pytest fixtures for Ribbit tests."""

from __future__ import annotations

import os
import sys
import tempfile
from pathlib import Path

import pytest

# Ensure the project root is importable
ROOT = Path(__file__).resolve().parents[1]
sys.path.insert(0, str(ROOT))

# Override data/config directories so tests don't touch real data.
os.environ["RIBBIT_DATA_DIR"] = tempfile.mkdtemp(prefix="ribbit_test_data_")
os.environ["RIBBIT_CONFIG_DIR"] = tempfile.mkdtemp(prefix="ribbit_test_cfg_")

from ribbitweb.auth.phrase_store import PhraseStore
from ribbitweb.auth.storage import MemoryKeyValueStore


SAMPLE_PHRASE = "pond lily reed frog moss stone river fern willow bubble cedar dawn"


@pytest.fixture
def persistent() -> MemoryKeyValueStore:
    """In-memory stand-in for the persistent storage scope."""
    return MemoryKeyValueStore()


@pytest.fixture
def session() -> MemoryKeyValueStore:
    """In-memory session scope."""
    return MemoryKeyValueStore()


@pytest.fixture
def phrase_store(persistent: MemoryKeyValueStore) -> PhraseStore:
    return PhraseStore(persistent)


@pytest.fixture
def db_path(tmp_path: Path) -> Path:
    """Fresh SQLite database for each test."""
    from ribbit.db.engine import init_db, set_db_path

    path = tmp_path / "test_ribbit.db"
    set_db_path(path)
    init_db(path)
    return path
