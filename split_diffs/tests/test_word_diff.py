# split_diffs/tests/test_word_diff.py
"""Tests for word-level diff computation."""

from ..spanned_string import SpannedString
from ..word_diff import (
    ADDED,
    COMMON,
    REMOVED,
    WordChange,
    _tokenize_with_whitespace,
    compute_word_changes,
    get_changes_in_line,
    highlight_changes_in_line,
)


class TestTokenize:
    """Tests for whitespace-preserving tokenization."""

    def test_words_and_whitespace(self):
        assert _tokenize_with_whitespace("hello  world") == ["hello", "  ", "world"]

    def test_leading_whitespace(self):
        assert _tokenize_with_whitespace("    return x") == ["    ", "return", " ", "x"]

    def test_empty(self):
        assert _tokenize_with_whitespace("") == []


class TestComputeWordChanges:
    """Tests for word diffing."""

    def test_identical_lines(self):
        changes = compute_word_changes("hello world", "hello world")
        assert changes == [WordChange(COMMON, "hello world", 3)]

    def test_changed_word(self):
        changes = compute_word_changes("hello world", "hello there")
        assert changes == [
            WordChange(COMMON, "hello ", 2),
            WordChange(REMOVED, "world", 1),
            WordChange(ADDED, "there", 1),
        ]

    def test_addition_at_end(self):
        changes = compute_word_changes("hello", "hello world")
        assert changes == [
            WordChange(COMMON, "hello", 1),
            WordChange(ADDED, " world", 2),
        ]

    def test_sides_reassemble(self):
        old = "def parse(path, strict=False):"
        new = "def parse(path, strict=True, verbose=False):"
        changes = compute_word_changes(old, new)
        assert "".join(c.text for c in changes if c.op != ADDED) == old
        assert "".join(c.text for c in changes if c.op != REMOVED) == new


class TestGetChangesInLine:
    """Tests for the change ratio threshold."""

    def test_small_change_is_reported(self):
        result = get_changes_in_line("x = compute(a, b)", "x = compute(a, c)")
        assert result is not None
        changes_a, changes_b = result
        assert [c.text for c in changes_a if c.op == REMOVED] == ["b)"]
        assert [c.text for c in changes_b if c.op == ADDED] == ["c)"]

    def test_large_change_is_dropped(self):
        assert get_changes_in_line("alpha beta", "gamma delta epsilon") is None

    def test_ratio_is_configurable(self):
        # 2 changed tokens against 2 common ones
        assert get_changes_in_line("a b", "a c") is not None
        assert get_changes_in_line("a b", "a c", change_ratio=0.5) is None

    def test_missing_side(self):
        assert get_changes_in_line(None, "text") is None
        assert get_changes_in_line("text", None) is None


class TestHighlightChangesInLine:
    """Tests for turning changes into spans."""

    def test_only_changed_text_is_highlighted(self):
        line = SpannedString.create().append_string("hello world")
        changes = [WordChange(COMMON, "hello ", 2), WordChange(REMOVED, "world", 1)]
        highlight_changes_in_line(line, changes, "hl")
        assert list(line.iter_substrings()) == [("hello ", []), ("world", ["hl"])]

    def test_no_changes(self):
        line = SpannedString.create().append_string("hello")
        highlight_changes_in_line(line, None, "hl")
        assert list(line.iter_substrings()) == [("hello", [])]
