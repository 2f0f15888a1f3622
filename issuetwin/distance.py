"""Damerau–Levenshtein edit distance between two tokens."""

from __future__ import annotations

from .errors import ensure_text


def distance(a: str, b: str) -> int:
    """
    Minimum number of single-character edits turning ``a`` into ``b``.

    Edits are insertions, deletions, substitutions and transpositions of two
    adjacent characters (optimal string alignment variant). Characters are
    compared exactly; callers lowercase beforehand.

    Args:
        a: Source string
        b: Target string

    Returns:
        Non-negative edit distance
    """
    ensure_text(a, "a")
    ensure_text(b, "b")

    if a == b:
        return 0
    if not a:
        return len(b)
    if not b:
        return len(a)

    rows = len(a) + 1
    cols = len(b) + 1

    d = [[0] * cols for _ in range(rows)]
    for i in range(rows):
        d[i][0] = i
    for j in range(cols):
        d[0][j] = j

    for i in range(1, rows):
        for j in range(1, cols):
            cost = 0 if a[i - 1] == b[j - 1] else 1
            d[i][j] = min(
                d[i - 1][j] + 1,  # deletion
                d[i][j - 1] + 1,  # insertion
                d[i - 1][j - 1] + cost,  # substitution
            )
            if i > 1 and j > 1 and a[i - 1] == b[j - 2] and a[i - 2] == b[j - 1]:
                d[i][j] = min(d[i][j], d[i - 2][j - 2] + cost)

    return d[rows - 1][cols - 1]
