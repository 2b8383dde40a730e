# split_diffs/renderers/base.py
"""Shared pieces of the hunk renderers: the renderer protocol and the
formatting of a single diff line into fixed-width display rows."""

import logging
from typing import Iterator, List, Optional, Protocol

from ..context import Context
from ..formatted_string import FormattedString, formatted
from ..parser import HunkPart
from ..syntax_highlight import highlight_syntax_in_line
from ..theme import ThemeColor
from ..word_diff import WordChange, highlight_changes_in_line
from ..wrap import fit_text_to_width, truncate_spanned_string

logger = logging.getLogger(__name__)

NO_NEWLINE_MARKER = "\\"

# Per row, per side: word changes of that side's line, if any
RowChanges = List[Optional[List[WordChange]]]


class HunkRenderer(Protocol):
    """Lays out the aligned parts of one hunk as display rows."""

    def render(
        self,
        context: Context,
        parts: List[HunkPart],
        line_changes: List[RowChanges],
    ) -> Iterator[FormattedString]:
        ...


def is_no_newline_marker(line: Optional[str]) -> bool:
    """Check for a "\\ No newline at end of file" line."""
    return line is not None and line.startswith(NO_NEWLINE_MARKER)


def advances_line_no(line: Optional[str]) -> bool:
    """Whether a side's line number advances past ``line``."""
    return line is not None and not is_no_newline_marker(line)


def get_line_background(context: Context, line: Optional[str], missing: bool = False) -> ThemeColor:
    """Background role of a row holding ``line`` (used for filler rows)."""
    theme = context.theme
    if line is None or missing:
        return theme.missing_line
    if line.startswith("-"):
        return theme.deleted_line
    if line.startswith("+"):
        return theme.inserted_line
    return theme.unmodified_line


def get_line_number_width(context: Context, parts: List[HunkPart]) -> int:
    """Width of the number column, widened for hunks with very large line numbers."""
    largest = max((part.start_line_no + len(part.lines) for part in parts), default=0)
    return max(context.config.line_number_width, len(str(largest)))


def format_and_fit_hunk_line(
    context: Context,
    line_width: int,
    file_name: str,
    line_no: int,
    line: Optional[str],
    changes: Optional[List[WordChange]] = None,
    missing: bool = False,
    line_number_width: Optional[int] = None,
) -> List[FormattedString]:
    """Format one diff line into rows exactly ``line_width`` columns wide.

    Layout of the first row: right-aligned line number, a space, the
    one-character marker, a space, then the text. Continuation rows leave
    the number and marker blank. A line number of 0 is not shown.
    ``line_number_width`` defaults to the configured width.

    A missing line (None, or a side whose file does not exist) becomes a
    single blank row in the missing-line color.
    """
    if line is None or missing:
        return [context.blank_line(line_width, context.theme.missing_line)]

    try:
        if line_number_width is None:
            line_number_width = context.config.line_number_width
        return _format_and_fit_hunk_line(
            context, line_width, file_name, line_no, line, changes, line_number_width
        )
    except Exception as e:
        # One bad line must not abort the whole transcript
        logger.warning("Could not format diff line %r: %s", line, e)
        return fit_text_to_width(formatted(line), line_width, wrap_lines=False)


def _format_and_fit_hunk_line(
    context: Context,
    line_width: int,
    file_name: str,
    line_no: int,
    line: str,
    changes: Optional[List[WordChange]],
    line_number_width: int,
) -> List[FormattedString]:
    config = context.config
    theme = context.theme

    marker, text = line[:1] or " ", line[1:]
    if marker == "-":
        word_color = theme.deleted_word
        line_color = theme.deleted_line
        line_no_color = theme.deleted_line_no
    elif marker == "+":
        word_color = theme.inserted_word
        line_color = theme.inserted_line
        line_no_color = theme.inserted_line_no
    else:
        word_color = None
        line_color = theme.unmodified_line
        line_no_color = theme.unmodified_line_no

    text_width = max(line_width - line_number_width - 3, 1)

    line_text = formatted(text)
    if word_color is not None:
        highlight_changes_in_line(line_text, changes, word_color)
    if marker != NO_NEWLINE_MARKER:
        highlight_syntax_in_line(line_text, file_name, context.highlighter)

    rows = []
    for index, fitted in enumerate(
        fit_text_to_width(line_text, text_width, config.wrap_lines, line_color)
    ):
        is_first = index == 0
        number = str(line_no) if is_first and line_no > 0 else ""
        row = (
            formatted(number.rjust(line_number_width), line_no_color)
            .append_string(" ", line_color)
            .append_string(marker if is_first else " ", line_color)
            .append_string(" ", line_color)
            .append_spanned_string(fitted)
        )
        # Columns too narrow for the number and marker
        if row.get_width() > line_width:
            row = truncate_spanned_string(row, line_width).fill_width(line_width)
        rows.append(row)
    return rows
