"""Word and phrase similarity built on the edit distance."""

from __future__ import annotations

from dataclasses import dataclass, field

from .dictionaries import Dictionaries
from .distance import distance
from .errors import DegenerateAggregationError, ensure_text
from .normalize import tokenize

# Score deduction per token of difference between the two phrases
ERROR_ADJ = 0.15


@dataclass
class TokenMatch:
    """Best long-side match found for one short-side token."""

    token: str
    match: str
    score: float


@dataclass
class PhraseComparison:
    """Full breakdown of a phrase comparison.

    ``direct_score`` is the mean best-match similarity of the short side,
    ``penalty`` the asymmetry deduction and ``score`` their difference
    (unclamped, may be negative).

    When both sides have the same number of words, ``reverse_matches`` holds
    the matches of ``long_tokens`` against ``short_tokens`` and
    ``direct_score`` is the mean of both directions.
    """

    short_tokens: list[str]
    long_tokens: list[str]
    matches: list[TokenMatch] = field(default_factory=list)
    reverse_matches: list[TokenMatch] = field(default_factory=list)
    direct_score: float = 0.0
    penalty: float = 0.0
    score: float = 0.0
    degenerate: bool = False

    @property
    def accuracy(self) -> int:
        """Score as a percentage clamped to 0..100."""
        return max(0, min(100, round(self.score * 100)))


def similarity(x: str, y: str) -> float:
    """Return how similar two words are, from 0.0 (unrelated) to 1.0 (equal)."""
    ensure_text(x, "x")
    ensure_text(y, "y")

    length = max(len(x), len(y))
    if length == 0:
        return 1.0

    return (length - distance(x, y)) / length


def _best_matches(short: list[str], long: list[str]) -> list[TokenMatch]:
    """Greedy best match per short token; a long token may be reused."""
    matches = []
    for token in short:
        best = TokenMatch(token=token, match="", score=-1.0)
        for other in long:
            score = similarity(token, other)
            if score > best.score:
                best = TokenMatch(token=token, match=other, score=score)
        matches.append(best)
    return matches


def _mean(matches: list[TokenMatch]) -> float:
    return sum(m.score for m in matches) / len(matches)


def compare_detailed(
    phrase_a: str,
    phrase_b: str,
    *,
    dictionaries: Dictionaries | None = None,
    error_adj: float = ERROR_ADJ,
    strict: bool = False,
) -> PhraseComparison:
    """
    Compare two phrases and explain the score.

    Args:
        phrase_a: First phrase
        phrase_b: Second phrase
        dictionaries: Normalization tables (shared defaults when omitted)
        error_adj: Deduction per token of length difference
        strict: Raise instead of scoring 0.0 when a phrase has no tokens

    Returns:
        PhraseComparison with per-token matches and the final score

    Raises:
        InvalidInputError: If a phrase is not a string
        DegenerateAggregationError: In strict mode, if a phrase normalizes to nothing
    """
    tokens_a = tokenize(phrase_a, dictionaries)
    tokens_b = tokenize(phrase_b, dictionaries)

    # Shorter phrase drives the alignment
    if len(tokens_a) > len(tokens_b):
        tokens_a, tokens_b = tokens_b, tokens_a
        phrase_a, phrase_b = phrase_b, phrase_a

    if not tokens_a:
        if strict:
            raise DegenerateAggregationError(
                f"Phrase has no comparable words: {phrase_a!r}", phrase=phrase_a
            )
        return PhraseComparison(short_tokens=tokens_a, long_tokens=tokens_b, degenerate=True)

    matches = _best_matches(tokens_a, tokens_b)
    direct = _mean(matches)

    reverse: list[TokenMatch] = []
    if len(tokens_a) == len(tokens_b):
        # Equal lengths: average both directions so argument order never matters
        reverse = _best_matches(tokens_b, tokens_a)
        direct = (direct + _mean(reverse)) / 2

    penalty = (len(tokens_b) - len(tokens_a)) * error_adj

    return PhraseComparison(
        short_tokens=tokens_a,
        long_tokens=tokens_b,
        matches=matches,
        reverse_matches=reverse,
        direct_score=direct,
        penalty=penalty,
        score=direct - penalty,
    )


def compare(
    phrase_a: str,
    phrase_b: str,
    *,
    dictionaries: Dictionaries | None = None,
    error_adj: float = ERROR_ADJ,
    strict: bool = False,
) -> float:
    """Return the similarity score of two phrases.

    The score is the mean best-match word similarity of the shorter phrase
    minus ``error_adj`` per extra word in the longer one. It is not clamped:
    values below 0 are expected for very different lengths. Phrases with no
    words left after normalization score 0.0.
    """
    return compare_detailed(
        phrase_a,
        phrase_b,
        dictionaries=dictionaries,
        error_adj=error_adj,
        strict=strict,
    ).score
