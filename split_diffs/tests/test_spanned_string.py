# split_diffs/tests/test_spanned_string.py
"""Tests for the span algebra."""

import pytest

from ..errors import InvalidRangeError
from ..spanned_string import SpannedString


def render_tags(spanned_string):
    """Render every run with its attributes as nested <tag>...</tag>."""
    output = []
    for text, attributes in spanned_string.iter_substrings():
        for attribute in reversed(attributes):
            text = f"<{attribute}>{text}</{attribute}>"
        output.append(text)
    return "".join(output)


def attributes_per_char(spanned_string):
    """Expand runs into (char, attributes) pairs."""
    chars = []
    for text, attributes in spanned_string.iter_substrings():
        for char in text:
            chars.append((char, list(attributes)))
    return chars


class TestBuilding:
    """Tests for appending text and adding spans."""

    def test_nested_tags(self):
        string = (
            SpannedString.create()
            .append_string("one", "b")
            .append_string(" ")
            .append_string("two", "b", "i")
        )
        assert render_tags(string) == "<b>one</b> <b><i>two</i></b>"

    def test_empty_string(self):
        string = SpannedString.create()
        assert len(string) == 0
        assert string.get_string() == ""
        assert list(string.iter_substrings()) == []

    def test_substrings_concatenate_to_text(self):
        string = (
            SpannedString.create()
            .append_string("hello ", "a")
            .append_string("wide ")
            .append_string("world", "b")
        )
        string.add_span(3, 9, "c")
        text = "".join(substring for substring, _ in string.iter_substrings())
        assert text == "hello wide world"

    def test_overlapping_spans(self):
        string = SpannedString.create().append_string("abcdef")
        string.add_span(0, 3, "a").add_span(2, 5, "b")
        assert list(string.iter_substrings()) == [
            ("ab", ["a"]),
            ("c", ["a", "b"]),
            ("de", ["b"]),
            ("f", []),
        ]

    def test_containing_spans(self):
        string = SpannedString.create().append_string("abcdef")
        string.add_span(0, 6, "outer").add_span(2, 4, "inner")
        assert list(string.iter_substrings()) == [
            ("ab", ["outer"]),
            ("cd", ["outer", "inner"]),
            ("ef", ["outer"]),
        ]

    def test_attributes_in_application_order(self):
        string = SpannedString.create().append_string("abc")
        string.add_span(0, 3, "second-applied-first")
        string.add_span(0, 3, "applied-later")
        assert list(string.iter_substrings()) == [
            ("abc", ["second-applied-first", "applied-later"]),
        ]

    def test_empty_span_has_no_effect(self):
        string = SpannedString.create().append_string("abc")
        string.add_span(1, 1, "x")
        assert attributes_per_char(string) == [("a", []), ("b", []), ("c", [])]

    def test_span_over_whole_string(self):
        string = SpannedString.create().append_string("abc")
        string.add_span(0, 3, "x")
        assert list(string.iter_substrings()) == [("abc", ["x"])]

    @pytest.mark.parametrize("start,end", [(-1, 2), (2, 1), (0, 4), (4, 4)])
    def test_invalid_span_range(self, start, end):
        string = SpannedString.create().append_string("abc")
        with pytest.raises(InvalidRangeError):
            string.add_span(start, end, "x")

    def test_invalid_range_is_value_error(self):
        string = SpannedString.create().append_string("abc")
        with pytest.raises(ValueError):
            string.add_span(3, 0, "x")


class TestAppendSpannedString:
    """Tests for concatenating spanned strings."""

    def test_keeps_both_sides_attributes(self):
        left = SpannedString.create().append_string("ab", "x")
        right = SpannedString.create().append_string("cd", "y")
        left.append_spanned_string(right)
        assert left.get_string() == "abcd"
        assert list(left.iter_substrings()) == [("ab", ["x"]), ("cd", ["y"])]

    def test_does_not_modify_argument(self):
        left = SpannedString.create().append_string("ab", "x")
        right = SpannedString.create().append_string("cd", "y")
        left.append_spanned_string(right)
        left.add_span(0, 4, "z")
        assert list(right.iter_substrings()) == [("cd", ["y"])]

    def test_ids_do_not_collide(self):
        left = SpannedString.create().append_string("ab", "x")
        right = SpannedString.create().append_string("cd", "y")
        left.append_spanned_string(right)
        # A span added after the append must not close any appended span
        left.add_span(0, 1, "z")
        assert list(left.iter_substrings()) == [
            ("a", ["x", "z"]),
            ("b", ["x"]),
            ("cd", ["y"]),
        ]

    def test_append_empty(self):
        left = SpannedString.create().append_string("ab", "x")
        left.append_spanned_string(SpannedString.create())
        assert list(left.iter_substrings()) == [("ab", ["x"])]

    def test_append_to_empty(self):
        right = SpannedString.create().append_string("ab", "x")
        combined = SpannedString.create().append_spanned_string(right)
        assert list(combined.iter_substrings()) == [("ab", ["x"])]


class TestSlice:
    """Tests for slicing."""

    def test_slice_inside_span(self):
        string = SpannedString.create().append_string("abcdef")
        string.add_span(1, 5, "a")
        assert list(string.slice(2, 4).iter_substrings()) == [("cd", ["a"])]

    def test_discarded_prefix_leaves_no_attribute(self):
        string = SpannedString.create().append_string("12")
        string.add_span(0, 1, "a")
        result = string.slice(1, 2).append_string("3")
        assert result.get_string() == "23"
        assert list(result.iter_substrings()) == [("23", [])]

    def test_span_ending_at_slice_end(self):
        string = SpannedString.create().append_string("abcd")
        string.add_span(0, 2, "a")
        assert list(string.slice(0, 2).iter_substrings()) == [("ab", ["a"])]

    def test_span_starting_at_slice_end(self):
        string = SpannedString.create().append_string("abcd")
        string.add_span(2, 4, "a")
        assert list(string.slice(0, 2).iter_substrings()) == [("ab", [])]

    def test_span_starting_at_slice_start(self):
        string = SpannedString.create().append_string("abcd")
        string.add_span(2, 3, "a")
        assert list(string.slice(2).iter_substrings()) == [("c", ["a"]), ("d", [])]

    def test_reopened_spans_keep_order(self):
        string = SpannedString.create().append_string("abcd")
        string.add_span(0, 4, "first").add_span(1, 4, "second")
        assert list(string.slice(2, 3).iter_substrings()) == [
            ("c", ["first", "second"]),
        ]

    def test_slice_is_independent(self):
        string = SpannedString.create().append_string("abcd", "x")
        part = string.slice(1, 3)
        part.add_span(0, 2, "y")
        string.append_string("e")
        assert part.get_string() == "bc"
        assert list(string.iter_substrings()) == [("abcd", ["x"]), ("e", [])]

    def test_end_defaults_to_length(self):
        string = SpannedString.create().append_string("abcd")
        assert string.slice(1).get_string() == "bcd"

    def test_end_is_clamped(self):
        string = SpannedString.create().append_string("abc", "x")
        assert list(string.slice(1, 100).iter_substrings()) == [("bc", ["x"])]

    @pytest.mark.parametrize("start,end", [(2, 2), (3, 1), (5, 6)])
    def test_empty_slices(self, start, end):
        string = SpannedString.create().append_string("abc", "x")
        result = string.slice(start, end)
        assert result.get_string() == ""
        assert list(result.iter_substrings()) == []

    @pytest.mark.parametrize("start,end", [(-1, 2), (0, -1)])
    def test_negative_indices(self, start, end):
        string = SpannedString.create().append_string("abc")
        with pytest.raises(InvalidRangeError):
            string.slice(start, end)

    def test_slice_composition(self):
        string = SpannedString.create().append_string("hello ", "a")
        string.append_string("big ", "b").append_string("world", "a", "c")
        string.add_span(3, 12, "d")

        for cut in range(len(string) + 1):
            joined = string.slice(0, cut).append_spanned_string(string.slice(cut))
            assert joined.get_string() == string.get_string()
            assert attributes_per_char(joined) == attributes_per_char(string)

    @pytest.mark.parametrize(
        "a,b,c", [(0, 0, 0), (0, 2, 5), (1, 1, 4), (2, 3, 6), (2, 4, 4), (3, 5, 6)]
    )
    def test_nested_slices_match_direct_slice(self, a, b, c):
        string = SpannedString.create().append_string("abcdef")
        string.add_span(0, 2, "a").add_span(2, 2, "empty")
        string.add_span(1, 5, "b").add_span(3, 6, "c")
        nested = string.slice(a, c).slice(0, b - a)
        direct = string.slice(a, b)
        assert nested.get_string() == direct.get_string()
        assert attributes_per_char(nested) == attributes_per_char(direct)

    def test_slice_preserves_attributes_per_char(self):
        string = SpannedString.create().append_string("abcdef")
        string.add_span(0, 3, "a").add_span(2, 5, "b")
        expected = attributes_per_char(string)[1:4]
        assert attributes_per_char(string.slice(1, 4)) == expected


class TestWidth:
    """Tests for display width handling."""

    def test_fill_width_pads_without_attribute(self):
        string = SpannedString.create().append_string("ab", "x").fill_width(4)
        assert string.get_string() == "ab  "
        assert list(string.iter_substrings()) == [("ab", ["x"]), ("  ", [])]

    def test_fill_width_does_not_truncate(self):
        string = SpannedString.create().append_string("abcdef").fill_width(3)
        assert string.get_string() == "abcdef"

    def test_wide_characters(self):
        string = SpannedString.create().append_string("日本a")
        assert string.get_width() == 5
        assert string.get_char_widths() == [2, 2, 1]
        assert string.fill_width(7).get_string() == "日本a  "
