"""Identity hash derivation from the Froggy Phrase.

The identity hash is the lowercase SHA-256 hex digest of the stored phrase.
It is the opaque account key sent to the authorization service for
anonymous users.
"""
from __future__ import annotations

import hashlib
import logging
from typing import Any, Callable, Optional

from .errors import IdentityDerivationFailed, log_swallowed
from .phrase_store import PhraseStore

log = logging.getLogger("ribbit.phrase.identity")


class IdentityHasher:
    def __init__(self, digest: Callable[[bytes], Any] = hashlib.sha256) -> None:
        self._digest = digest

    async def hash(self, phrase: str) -> str:
        try:
            return self._digest(phrase.encode("utf-8")).hexdigest().lower()
        except Exception as e:
            raise IdentityDerivationFailed() from e


async def get_identity_hash(store: PhraseStore, hasher: Optional[IdentityHasher] = None) -> str:
    """Return the current identity hash, or "" when no identity is usable.

    Ensures a phrase exists first; never raises on derivation failure.
    """
    store.ensure_exists()
    phrase = store.get()
    if phrase is None:
        return ""
    try:
        return await (hasher or IdentityHasher()).hash(phrase)
    except IdentityDerivationFailed as e:
        log_swallowed(log, e)
        return ""
