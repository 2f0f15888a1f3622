"""Tests for word similarity and phrase comparison."""

import pytest

from issuetwin.dictionaries import Dictionaries
from issuetwin.errors import DegenerateAggregationError, InvalidInputError
from issuetwin.similarity import ERROR_ADJ, compare, compare_detailed, similarity

WORD_PAIRS = [
    ("", ""),
    ("", "abc"),
    ("kitten", "sitting"),
    ("tier", "tor"),
    ("a", "zzzzzzzz"),
    ("same", "same"),
]

# --- similarity ---


class TestSimilarity:
    """Tests for word-level similarity."""

    def test_two_empty_words_are_identical(self) -> None:
        assert similarity("", "") == 1.0

    def test_identical_words(self) -> None:
        assert similarity("crash", "crash") == 1.0

    def test_empty_against_word(self) -> None:
        assert similarity("abc", "") == 0.0

    def test_uses_longer_length(self) -> None:
        assert similarity("kitten", "sitting") == pytest.approx(4 / 7)

    def test_no_case_folding(self) -> None:
        assert similarity("A", "a") == 0.0

    @pytest.mark.parametrize(("x", "y"), WORD_PAIRS)
    def test_bounded(self, x: str, y: str) -> None:
        assert 0.0 <= similarity(x, y) <= 1.0

    def test_rejects_non_string(self) -> None:
        with pytest.raises(InvalidInputError):
            similarity("a", 1)  # type: ignore[arg-type]


# --- compare ---


class TestCompare:
    """Tests for phrase-level comparison."""

    def test_near_duplicate_with_typos_and_reordering(self) -> None:
        assert compare("testing issues", "isues testin") > 0.60

    def test_unrelated_phrases(self) -> None:
        assert compare("this is not a duplicate", "should not be marked at all") <= 0.60

    def test_identical_after_normalization(self) -> None:
        assert compare("App crashes on startup", "app crashes, on startup!") == 1.0

    def test_synonyms_count_as_equal(self) -> None:
        assert compare("Settings page is empty", "configuration page blank") == 1.0

    def test_length_penalty(self) -> None:
        """Every extra word in the longer phrase costs ERROR_ADJ."""
        assert compare("crash", "crash editor window") == pytest.approx(1.0 - 2 * ERROR_ADJ)

    def test_score_can_go_negative(self) -> None:
        assert compare("crash", "editor window toolbar sidebar panel menu") < 0.0

    def test_custom_error_adj(self) -> None:
        assert compare("crash", "crash editor window", error_adj=0.0) == 1.0
        assert compare("crash", "crash editor window", error_adj=0.5) == pytest.approx(0.0)

    @pytest.mark.parametrize(
        ("a", "b"),
        [
            ("testing issues", "isues testin"),
            ("open file dialog", "file dialog crash"),
            ("tab tabs", "tab window"),
            ("crash", "crash editor window"),
            ("this is not a duplicate", "should not be marked at all"),
            ("", "something"),
        ],
    )
    def test_symmetric(self, a: str, b: str) -> None:
        assert compare(a, b) == compare(b, a)

    def test_custom_dictionaries(self) -> None:
        dicts = Dictionaries.build(synonyms={"ticket": ["issue"]})
        assert compare("issue", "ticket", dictionaries=dicts) == 1.0

    def test_rejects_non_string(self) -> None:
        with pytest.raises(InvalidInputError):
            compare(None, "crash")  # type: ignore[arg-type]


class TestDegenerateComparison:
    """Phrases with no words left after normalization."""

    def test_only_stop_words_scores_zero(self) -> None:
        assert compare("the a an", "app crash") == 0.0

    def test_two_empty_phrases_score_zero(self) -> None:
        assert compare("", "") == 0.0

    def test_strict_mode_raises(self) -> None:
        with pytest.raises(DegenerateAggregationError) as exc_info:
            compare("...", "app crash", strict=True)
        assert exc_info.value.phrase == "..."

    def test_detailed_marks_degenerate(self) -> None:
        result = compare_detailed("the", "crash")
        assert result.degenerate is True
        assert result.matches == []
        assert result.score == 0.0


class TestCompareDetailed:
    """Tests for the explained comparison."""

    def test_short_side_drives_matching(self) -> None:
        result = compare_detailed("crash editor window", "crash")

        assert result.short_tokens == ["crash"]
        assert result.long_tokens == ["crash", "editor", "window"]
        assert result.direct_score == 1.0
        assert result.penalty == pytest.approx(2 * ERROR_ADJ)

    def test_best_match_per_word(self) -> None:
        result = compare_detailed("testing issues", "isues testin")

        assert [(m.token, m.match) for m in result.matches] == [
            ("testing", "testin"),
            ("issues", "isues"),
        ]

    def test_long_word_may_be_matched_twice(self) -> None:
        """Greedy matching lets several short words reuse one long word."""
        result = compare_detailed("tab tabs", "tab window editor")

        assert [m.match for m in result.matches] == ["tab", "tab"]
        assert result.matches[1].score == pytest.approx(0.75)

    def test_accuracy_is_clamped_percentage(self) -> None:
        assert compare_detailed("crash", "crash").accuracy == 100
        assert compare_detailed("crash", "editor window toolbar sidebar panel menu").accuracy == 0

    def test_unequal_lengths_match_one_direction(self) -> None:
        assert compare_detailed("tab tabs", "tab window editor").reverse_matches == []

    def test_equal_lengths_keep_both_directions(self) -> None:
        """The direct score is the mean over the matches of both directions."""
        result = compare_detailed("tab tabs", "tab cat")

        assert [(m.token, m.match) for m in result.matches] == [("tab", "tab"), ("tabs", "tab")]
        assert [(m.token, m.match) for m in result.reverse_matches] == [
            ("tab", "tab"),
            ("cat", "tab"),
        ]
        scores = [m.score for m in result.matches + result.reverse_matches]
        assert result.direct_score == pytest.approx(sum(scores) / len(scores))
