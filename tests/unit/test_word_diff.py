"""
Unit tests for the word-level LCS diff.
"""

from functools import lru_cache

import pytest

from tailor.contexts.review import word_diff
from tailor.contexts.review.word_diff import DiffKind, diff_words, tokenize


def _values(tokens, kind):
    return [token.value for token in tokens if token.kind == kind]


def _reference_lcs(a, b):
    """Plain recursive LCS length used as an oracle."""

    @lru_cache(maxsize=None)
    def lcs(i, j):
        if i == len(a) or j == len(b):
            return 0
        if a[i] == b[j]:
            return 1 + lcs(i + 1, j + 1)
        return max(lcs(i + 1, j), lcs(i, j + 1))

    return lcs(0, 0)


@pytest.mark.unit
class TestTokenize:
    def test_splits_on_whitespace_runs(self):
        assert tokenize("  Built \t REST\nAPIs  ") == ["Built", "REST", "APIs"]

    def test_empty_and_none(self):
        assert tokenize("") == []
        assert tokenize("   ") == []
        assert tokenize(None) == []


@pytest.mark.unit
class TestDiffWords:
    def test_summary_scenario(self):
        """Case differences are different tokens: removed and added, never equal."""
        diff = diff_words("Engineer with 5 years", "Senior engineer with 5 years of experience")

        assert _values(diff.operations, DiffKind.EQUAL) == ["with", "5", "years"]
        assert _values(diff.operations, DiffKind.REMOVED) == ["Engineer"]
        assert _values(diff.operations, DiffKind.ADDED) == ["Senior", "engineer", "of", "experience"]

        assert [t.value for t in diff.before] == ["Engineer", "with", "5", "years"]
        assert [t.value for t in diff.after] == [
            "Senior", "engineer", "with", "5", "years", "of", "experience",
        ]

    def test_tie_consumes_before_token_during_backtrack(self):
        # Backtracking runs from the end, so the removal lands after the addition
        diff = diff_words("a", "b")
        assert [(t.kind, t.value) for t in diff.operations] == [
            (DiffKind.ADDED, "b"),
            (DiffKind.REMOVED, "a"),
        ]

    def test_identical_texts_are_all_equal(self):
        diff = diff_words("Built internal APIs", "Built   internal\nAPIs")
        assert diff.is_unchanged()
        assert diff.equal_count == 3

    def test_empty_inputs(self):
        assert diff_words("", "   ").operations == []
        assert _values(diff_words("", "new words").operations, DiffKind.ADDED) == ["new", "words"]
        assert _values(diff_words("old words", "").operations, DiffKind.REMOVED) == ["old", "words"]

    def test_deterministic(self):
        before = "the cat sat on the mat"
        after = "the dog sat on a mat today"
        assert diff_words(before, after) == diff_words(before, after)

    @pytest.mark.parametrize(
        "before,after",
        [
            ("a b c d", "b d a c"),
            ("the cat sat on the mat", "the dog sat on a mat today"),
            ("x x x y", "y x x"),
            ("Built UI components", "Built reusable UI components in React"),
            ("one", "two three four"),
        ],
    )
    def test_equal_count_is_lcs_length(self, before, after):
        a, b = tokenize(before), tokenize(after)
        diff = diff_words(before, after)
        assert diff.equal_count == _reference_lcs(tuple(a), tuple(b))
        # Each view preserves its side's token order
        assert [t.value for t in diff.before] == a
        assert [t.value for t in diff.after] == b


@pytest.mark.unit
class TestSizeGuard:
    def test_large_input_degrades_to_replacement(self, monkeypatch):
        monkeypatch.setattr(word_diff, "MAX_DIFF_CELLS", 4)
        diff = diff_words("a b c", "a b d")
        assert diff.truncated
        assert _values(diff.operations, DiffKind.REMOVED) == ["a", "b", "c"]
        assert _values(diff.operations, DiffKind.ADDED) == ["a", "b", "d"]
        assert diff.equal_count == 0

    def test_small_input_is_not_truncated(self):
        assert not diff_words("a b c", "a b d").truncated


@pytest.mark.unit
class TestPresentation:
    def test_html_spans_are_escaped(self):
        diff = diff_words("use <script>", "use React")
        assert diff.before_html() == (
            '<span class="diff-unchanged">use</span> '
            '<span class="diff-removed">&lt;script&gt;</span>'
        )
        assert diff.after_html() == (
            '<span class="diff-unchanged">use</span> <span class="diff-added">React</span>'
        )

    def test_ansi_colors(self):
        diff = diff_words("Built APIs", "Built REST APIs")
        assert diff.after_ansi() == f"Built {word_diff.GREEN}REST{word_diff.RESET} APIs"
        assert diff.before_ansi() == "Built APIs"
