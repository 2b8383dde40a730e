# split_diffs/renderers/side_by_side.py
"""Side-by-side hunk renderer for wide terminals.

Each side of the hunk gets a column of ``screen_width // num_sides``
columns. Rows of the aligned parts are laid out next to each other;
when one side's line wraps onto more rows than the others, the shorter
sides are padded with blank filler rows in their line's background color:

        1   brew 'socat'                  1   brew 'socat'
                                          2 + brew 'sonos'
        2   brew 'terminal-notifier'      3   brew 'terminal-notifier'
"""

from itertools import zip_longest
from typing import Iterator, List

from ..context import Context
from ..formatted_string import FormattedString, formatted
from ..parser import HunkPart
from .base import (
    RowChanges,
    advances_line_no,
    format_and_fit_hunk_line,
    get_line_background,
    get_line_number_width,
)


class SideBySideRenderer:
    """Renders the sides of a hunk in parallel columns."""

    def render(
        self,
        context: Context,
        parts: List[HunkPart],
        line_changes: List[RowChanges],
    ) -> Iterator[FormattedString]:
        num_sides = len(parts)
        line_width = context.line_width(num_sides)
        number_width = get_line_number_width(context, parts)
        line_nos = [part.start_line_no for part in parts]

        for row_index, row_lines in enumerate(zip(*(part.lines for part in parts))):
            changes = line_changes[row_index]

            blocks = []
            fillers = []
            for side, line in enumerate(row_lines):
                part = parts[side]
                line_no = line_nos[side] if advances_line_no(line) else 0
                blocks.append(format_and_fit_hunk_line(
                    context, line_width, part.label, line_no, line,
                    changes[side], part.missing, number_width,
                ))
                fillers.append(get_line_background(context, line, part.missing))

            for pieces in zip_longest(*blocks):
                row = formatted()
                for side, piece in enumerate(pieces):
                    if piece is None:
                        piece = context.blank_line(line_width, fillers[side])
                    row.append_spanned_string(piece)
                yield row

            for side, line in enumerate(row_lines):
                if advances_line_no(line):
                    line_nos[side] += 1
