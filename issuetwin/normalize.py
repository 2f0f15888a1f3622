"""Phrase normalization before comparison."""

from __future__ import annotations

from .dictionaries import Dictionaries, load_dictionaries
from .errors import ensure_text


def _strip_punctuation(text: str, punctuation: frozenset[str]) -> str:
    # Each punctuation character becomes exactly one space
    return "".join(" " if char in punctuation else char for char in text)


def tokenize(phrase: str, dictionaries: Dictionaries | None = None) -> list[str]:
    """Split ``phrase`` into normalized tokens.

    Lowercases, turns punctuation into word boundaries, rewrites synonyms to
    their canonical word and drops stop words. The result never contains
    empty tokens.
    """
    ensure_text(phrase, "phrase")
    dicts = dictionaries if dictionaries is not None else load_dictionaries()

    text = _strip_punctuation(phrase.lower(), dicts.punctuation)

    tokens = []
    for word in text.split():
        word = dicts.canonical(word)
        if dicts.is_stop_word(word):
            continue
        tokens.append(word)
    return tokens


def normalize(phrase: str, dictionaries: Dictionaries | None = None) -> str:
    """Return the normalized form of ``phrase`` as single-space separated tokens.

    Idempotent: ``normalize(normalize(s)) == normalize(s)`` for the shipped
    dictionaries.
    """
    return " ".join(tokenize(phrase, dictionaries))
