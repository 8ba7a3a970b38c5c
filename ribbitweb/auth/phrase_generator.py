"""Froggy Phrase generation.

A phrase is 12 space-separated lowercase words: 11 drawn (with replacement)
from the general vocabulary plus exactly one marker word (frog, toad or
tadpole) placed at a random slot.
"""
from __future__ import annotations

import secrets
from pathlib import Path

PHRASE_WORD_COUNT = 12
MARKER_WORDS: tuple[str, ...] = ("frog", "toad", "tadpole")

# General vocabulary, one word per line
_WORDLIST_PATH = Path(__file__).with_name("froggy_words.txt")
_WORDLIST: list[str] = []


def _load_wordlist() -> list[str]:
    global _WORDLIST
    if _WORDLIST:
        return _WORDLIST
    words = []
    for line in _WORDLIST_PATH.read_text("utf-8").splitlines():
        w = line.strip().lower()
        if w and not w.startswith("#") and w not in MARKER_WORDS:
            words.append(w)
    _WORDLIST = words
    return _WORDLIST


def is_marker_word(word: str) -> bool:
    return word.lower() in MARKER_WORDS


def count_marker_words(phrase: str) -> int:
    return sum(1 for w in phrase.split() if is_marker_word(w))


def generate_phrase() -> str:
    """Generate a fresh 12-word Froggy Phrase with exactly one marker word."""
    words = _load_wordlist()
    if not words:
        raise RuntimeError(f"Froggy word list is empty: {_WORDLIST_PATH}")
    chosen = [secrets.choice(words) for _ in range(PHRASE_WORD_COUNT - 1)]
    marker = secrets.choice(MARKER_WORDS)
    chosen.insert(secrets.randbelow(PHRASE_WORD_COUNT), marker)
    return " ".join(chosen)
