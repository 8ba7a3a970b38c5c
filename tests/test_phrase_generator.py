"""Tests for ribbitweb.auth.phrase_generator."""

from __future__ import annotations

from collections import Counter

from ribbitweb.auth.phrase_generator import (
    MARKER_WORDS,
    PHRASE_WORD_COUNT,
    _load_wordlist,
    count_marker_words,
    generate_phrase,
    is_marker_word,
)


def test_phrase_has_twelve_words():
    for _ in range(200):
        assert len(generate_phrase().split(" ")) == PHRASE_WORD_COUNT == 12


def test_phrase_has_exactly_one_marker_word():
    for _ in range(200):
        phrase = generate_phrase()
        assert count_marker_words(phrase) == 1
        assert any(w in MARKER_WORDS for w in phrase.split())


def test_phrase_is_lowercase_single_spaced():
    phrase = generate_phrase()
    assert phrase == phrase.lower()
    assert "  " not in phrase
    assert phrase == phrase.strip()


def test_general_words_come_from_wordlist():
    vocab = set(_load_wordlist())
    for _ in range(50):
        for w in generate_phrase().split():
            assert w in vocab or w in MARKER_WORDS


def test_wordlist_excludes_marker_words():
    words = _load_wordlist()
    assert len(words) > 100
    assert not set(words) & set(MARKER_WORDS)
    assert all(w == w.lower() and w.isascii() for w in words)


def test_marker_position_varies():
    positions = Counter()
    for _ in range(400):
        words = generate_phrase().split()
        positions[next(i for i, w in enumerate(words) if is_marker_word(w))] += 1
    # Not stuck at a single slot
    assert len(positions) > 3


def test_is_marker_word_case_insensitive():
    assert is_marker_word("Frog")
    assert is_marker_word("TADPOLE")
    assert not is_marker_word("frogs")
