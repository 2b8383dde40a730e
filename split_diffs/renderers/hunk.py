# split_diffs/renderers/hunk.py
"""Hunk rendering entry point: header, word changes and layout choice."""

import logging
from typing import Iterator, List

from ..context import Context
from ..formatted_string import FormattedString, formatted
from ..parser import Hunk, HunkPart
from ..word_diff import get_changes_in_line
from ..wrap import fit_text_to_width
from .base import HunkRenderer, RowChanges
from .side_by_side import SideBySideRenderer
from .unified import UnifiedRenderer

logger = logging.getLogger(__name__)


def get_line_changes(context: Context, parts: List[HunkPart]) -> List[RowChanges]:
    """Compute word changes for every row pairing deletions with an insertion.

    A row pairs up when its last side holds an inserted line; each parent
    side holding a deleted line at the same row is compared against it.
    """
    num_sides = len(parts)
    num_rows = len(parts[0].lines) if parts else 0
    line_changes: List[RowChanges] = [[None] * num_sides for _ in range(num_rows)]
    if not context.config.highlight_line_changes:
        return line_changes

    ratio = context.config.highlight_change_ratio
    for index in range(num_rows):
        inserted = parts[-1].lines[index]
        if inserted is None or not inserted.startswith("+"):
            continue
        row = line_changes[index]
        for side in range(num_sides - 1):
            deleted = parts[side].lines[index]
            if deleted is None or not deleted.startswith("-"):
                continue
            changes = get_changes_in_line(deleted[1:], inserted[1:], ratio)
            if changes is None:
                continue
            row[side] = changes[0]
            if row[-1] is None:
                row[-1] = changes[1]
    return line_changes


def get_hunk_renderer(context: Context, num_sides: int) -> HunkRenderer:
    """Pick side-by-side when every side gets ``min_line_width`` columns."""
    if context.is_split(num_sides):
        return SideBySideRenderer()
    return UnifiedRenderer()


def iter_format_hunk(context: Context, hunk: Hunk) -> Iterator[FormattedString]:
    """Render a hunk: its header line followed by its aligned rows."""
    theme = context.theme
    yield from fit_text_to_width(
        formatted(hunk.header),
        context.screen_width,
        context.config.wrap_lines,
        theme.hunk_header,
    )

    if not hunk.parts or not hunk.parts[0].lines:
        return

    renderer = get_hunk_renderer(context, len(hunk.parts))
    logger.debug(
        "Rendering %s hunk with %s", hunk.diff_type.value, type(renderer).__name__
    )
    yield from renderer.render(context, hunk.parts, get_line_changes(context, hunk.parts))
