"""Tests for the Damerau-Levenshtein distance."""

import pytest

from issuetwin.distance import distance
from issuetwin.errors import InvalidInputError

KNOWN_DISTANCES = [
    ("", "", 0),
    ("yo", "", 2),
    ("", "yo", 2),
    ("yo", "yo", 0),
    ("tier", "tor", 2),
    ("saturday", "sunday", 3),
    ("mist", "dist", 1),
    ("kitten", "sitting", 3),
    ("stop", "tops", 2),
    ("rosettacode", "raisethysword", 8),
    ("mississippi", "swiss miss", 8),
]


class TestKnownValues:
    """Reference distances."""

    @pytest.mark.parametrize(("a", "b", "expected"), KNOWN_DISTANCES)
    def test_reference_distance(self, a: str, b: str, expected: int) -> None:
        assert distance(a, b) == expected

    def test_adjacent_transposition_counts_once(self) -> None:
        """Swapping two neighbours is one edit, not two substitutions."""
        assert distance("ab", "ba") == 1
        assert distance("issue", "isuse") == 1
        assert distance("teh", "the") == 1

    def test_comparison_is_case_sensitive(self) -> None:
        assert distance("Bug", "bug") == 1


class TestInvariants:
    """Properties that hold for any pair of strings."""

    @pytest.mark.parametrize("word", ["", "a", "crash", "mississippi", "zażółć"])
    def test_identity(self, word: str) -> None:
        assert distance(word, word) == 0

    @pytest.mark.parametrize(("a", "b", "_expected"), KNOWN_DISTANCES)
    def test_symmetry(self, a: str, b: str, _expected: int) -> None:
        assert distance(a, b) == distance(b, a)

    @pytest.mark.parametrize("word", ["x", "editor", "swiss miss"])
    def test_empty_side_costs_length(self, word: str) -> None:
        assert distance("", word) == len(word)
        assert distance(word, "") == len(word)

    @pytest.mark.parametrize(("a", "b", "_expected"), KNOWN_DISTANCES)
    def test_bounded_by_longer_length(self, a: str, b: str, _expected: int) -> None:
        assert distance(a, b) <= max(len(a), len(b))


class TestInvalidInput:
    """Non-string input is rejected."""

    @pytest.mark.parametrize(("a", "b"), [(None, "a"), ("a", None), (1, "1"), (["a"], "a")])
    def test_rejects_non_strings(self, a: object, b: object) -> None:
        with pytest.raises(InvalidInputError):
            distance(a, b)  # type: ignore[arg-type]

    def test_error_is_a_type_error(self) -> None:
        with pytest.raises(TypeError) as exc_info:
            distance(b"bytes", "bytes")  # type: ignore[arg-type]
        assert exc_info.value.argument == "a"
