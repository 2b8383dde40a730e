# split_diffs/renderers/unified.py
"""Unified hunk renderer for narrow terminals (and combined diffs that do
not fit side by side).

Sides are walked with a cursor each. At every context row, the lines
still pending on the parent sides (deletions) are emitted, then those on
the last side (insertions), then the context row itself once. Whatever is
left after the last context row is drained the same way.
"""

from typing import Iterator, List

from ..context import Context
from ..formatted_string import FormattedString
from ..parser import HunkPart
from .base import (
    RowChanges,
    advances_line_no,
    format_and_fit_hunk_line,
    get_line_number_width,
)


def is_context_row(parts: List[HunkPart], index: int) -> bool:
    """Whether row ``index`` holds the same context line on every side."""
    first = parts[0].lines[index]
    last = parts[-1].lines[index]
    return (
        first is not None
        and last is not None
        and not first.startswith("-")
        and not last.startswith("+")
    )


class UnifiedRenderer:
    """Renders all sides of a hunk in one full-width column."""

    def render(
        self,
        context: Context,
        parts: List[HunkPart],
        line_changes: List[RowChanges],
    ) -> Iterator[FormattedString]:
        line_width = context.screen_width
        num_sides = len(parts)
        num_rows = len(parts[0].lines)
        number_width = get_line_number_width(context, parts)
        line_nos = [part.start_line_no for part in parts]
        cursors = [0] * num_sides

        def format_line(side: int, index: int) -> List[FormattedString]:
            part = parts[side]
            line = part.lines[index]
            line_no = line_nos[side] if advances_line_no(line) else 0
            return format_and_fit_hunk_line(
                context, line_width, part.label, line_no, line,
                line_changes[index][side], part.missing, number_width,
            )

        def drain(side: int, end: int) -> Iterator[FormattedString]:
            while cursors[side] < end:
                index = cursors[side]
                line = parts[side].lines[index]
                # A parent's copy of a line inserted from another parent is
                # only counted; the insertion itself is shown from the last side
                is_copy = side < num_sides - 1 and line is not None and not line.startswith("-")
                if line is not None and not is_copy:
                    yield from format_line(side, index)
                if advances_line_no(line):
                    line_nos[side] += 1
                cursors[side] = index + 1

        for index in range(num_rows):
            if not is_context_row(parts, index):
                continue

            for side in range(num_sides):
                yield from drain(side, index)

            # Context lines exist on every side; show the first side that
            # has a file, with its line number
            shown = next(
                (side for side in range(num_sides) if not parts[side].missing), 0
            )
            yield from format_line(shown, index)

            context_line = parts[0].lines[index]
            for side in range(num_sides):
                if advances_line_no(context_line):
                    line_nos[side] += 1
                cursors[side] = index + 1

        for side in range(num_sides):
            yield from drain(side, num_rows)
