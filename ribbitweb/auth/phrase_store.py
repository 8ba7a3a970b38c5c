"""Persistent storage of the Froggy Phrase.

The phrase is stored as two persistent keys: a weak (non-cryptographic)
digest, and the phrase itself, base64-obfuscated. Obfuscation is not
encryption; anyone who can read local storage can recover the phrase.

Once a phrase exists it is immutable: ``set_once`` refuses to overwrite it
and ``clear`` deliberately does nothing.
"""
from __future__ import annotations

import base64
import binascii
import logging
from typing import Callable, Optional

from .errors import AlreadyExists, MalformedPhrase
from .phrase_generator import PHRASE_WORD_COUNT, generate_phrase
from .storage import KeyValueStore

log = logging.getLogger("ribbit.phrase.store")

PHRASE_DIGEST_KEY = "ribbit_froggy_phrase"
PHRASE_ORIGINAL_KEY = f"{PHRASE_DIGEST_KEY}_original"

_BASE36 = "0123456789abcdefghijklmnopqrstuvwxyz"


def _to_base36(n: int) -> str:
    if n == 0:
        return "0"
    out = []
    while n:
        n, r = divmod(n, 36)
        out.append(_BASE36[r])
    return "".join(reversed(out))


def weak_digest(text: str) -> str:
    """32-bit rolling checksum (h*31 + c, signed wraparound), abs, base 36.

    Written alongside the phrase as a bookkeeping artifact; never used for
    identity.
    """
    h = 0
    # UTF-16 code units, so non-BMP text hashes like a browser string
    data = text.encode("utf-16-le")
    for i in range(0, len(data), 2):
        c = data[i] | (data[i + 1] << 8)
        h = (h * 31 + c) & 0xFFFFFFFF
    if h & 0x80000000:
        h -= 0x100000000
    return _to_base36(abs(h))


def obfuscate(phrase: str) -> str:
    return base64.b64encode(phrase.encode("utf-8")).decode("ascii")


def deobfuscate(blob: str) -> Optional[str]:
    """Reverse ``obfuscate``. Returns None for anything that does not decode."""
    try:
        return base64.b64decode(blob.encode("ascii"), validate=True).decode("utf-8")
    except (binascii.Error, UnicodeError, ValueError):
        return None


class PhraseStore:
    """Owner of the persisted Froggy Phrase record."""

    def __init__(
        self,
        storage: KeyValueStore,
        backup_hook: Optional[Callable[[], None]] = None,
        generator: Callable[[], str] = generate_phrase,
    ) -> None:
        self._storage = storage
        self._backup_hook = backup_hook
        self._generate = generator

    def get(self) -> Optional[str]:
        blob = self._storage.get(PHRASE_ORIGINAL_KEY)
        if not blob:
            return None
        phrase = deobfuscate(blob)
        if phrase is None:
            log.warning("Stored Froggy Phrase could not be decoded; treating as absent")
        return phrase

    def has_phrase(self) -> bool:
        return self.get() is not None

    def ensure_exists(self) -> None:
        """Generate and persist a phrase unless a readable one is stored already."""
        if self.get() is not None:
            return
        self._write(self._generate())
        log.info("Generated a new Froggy Phrase")

    def set_once(self, phrase: str) -> None:
        if self.get() is not None:
            raise AlreadyExists()

        # Stored as entered apart from the outer whitespace; case and inner
        # spacing feed the identity hash unchanged.
        trimmed = phrase.strip()
        words = trimmed.split()
        if len(words) != PHRASE_WORD_COUNT:
            raise MalformedPhrase(
                f"Froggy Phrase must contain exactly {PHRASE_WORD_COUNT} words (got {len(words)})"
            )

        self._write(trimmed)
        self._run_backup_hook()

    def clear(self) -> None:
        # Permanent once created; nothing is removed.
        log.warning("Froggy Phrase clearing is disabled; the phrase is permanent")

    def _write(self, phrase: str) -> None:
        self._storage.set(PHRASE_DIGEST_KEY, weak_digest(phrase))
        self._storage.set(PHRASE_ORIGINAL_KEY, obfuscate(phrase))

    def _run_backup_hook(self) -> None:
        if self._backup_hook is None:
            return
        try:
            self._backup_hook()
        except Exception:
            log.exception("Settings backup after Froggy Phrase write failed")
