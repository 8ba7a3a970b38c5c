"""Tests for ribbitweb.auth.identity."""

from __future__ import annotations

import asyncio
import hashlib
import re

import pytest

from ribbitweb.auth.errors import IdentityDerivationFailed
from ribbitweb.auth.identity import IdentityHasher, get_identity_hash
from ribbitweb.auth.phrase_store import PhraseStore

from conftest import SAMPLE_PHRASE

HEX64 = re.compile(r"^[0-9a-f]{64}$")


def _broken_digest(data: bytes):
    raise RuntimeError("digest unavailable")


class TestIdentityHasher:
    def test_known_vector(self):
        assert asyncio.run(IdentityHasher().hash("abc")) == (
            "ba7816bf8f01cfea414140de5dae2223b00361a396177a9cb410ff61f20015ad"
        )

    def test_hashes_exact_text(self):
        h1 = asyncio.run(IdentityHasher().hash(SAMPLE_PHRASE))
        h2 = asyncio.run(IdentityHasher().hash(SAMPLE_PHRASE + " "))
        assert h1 == hashlib.sha256(SAMPLE_PHRASE.encode("utf-8")).hexdigest()
        assert h1 != h2

    def test_failure_raises_derivation_failed(self):
        with pytest.raises(IdentityDerivationFailed) as exc:
            asyncio.run(IdentityHasher(digest=_broken_digest).hash(SAMPLE_PHRASE))
        assert isinstance(exc.value.__cause__, RuntimeError)


class TestGetIdentityHash:
    def test_empty_storage_generates_phrase(self, phrase_store):
        h = asyncio.run(get_identity_hash(phrase_store))
        assert HEX64.match(h)
        assert phrase_store.get() is not None

    def test_deterministic(self, phrase_store):
        h1 = asyncio.run(get_identity_hash(phrase_store))
        h2 = asyncio.run(get_identity_hash(phrase_store))
        assert h1 == h2
        assert HEX64.match(h1)

    def test_matches_stored_phrase(self, phrase_store):
        phrase_store.set_once(SAMPLE_PHRASE)
        h = asyncio.run(get_identity_hash(phrase_store))
        assert h == hashlib.sha256(SAMPLE_PHRASE.encode("utf-8")).hexdigest()

    def test_derivation_failure_returns_empty(self, phrase_store, caplog):
        with caplog.at_level("ERROR", logger="ribbit.phrase.identity"):
            h = asyncio.run(get_identity_hash(phrase_store, IdentityHasher(digest=_broken_digest)))
        assert h == ""
        assert "digest unavailable" in caplog.text

    def test_unreadable_phrase_returns_empty(self, persistent):
        class StuckStore(PhraseStore):
            def get(self):
                return None

        assert asyncio.run(get_identity_hash(StuckStore(persistent))) == ""

    def test_concurrent_calls_agree(self, phrase_store):
        async def scenario():
            return await asyncio.gather(*(get_identity_hash(phrase_store) for _ in range(10)))

        results = asyncio.run(scenario())
        assert len(set(results)) == 1
