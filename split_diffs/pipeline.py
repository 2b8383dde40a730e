# split_diffs/pipeline.py
"""Streaming transform from raw git output to rendered split diffs.

Every stage is a generator pulling from the previous one, so output is
produced while input is still arriving and nothing is buffered beyond the
hunk currently being parsed:

    byte chunks -> lines -> parser events -> tabs expanded
        -> display rows -> ANSI text -> newline framed -> output

Usage:
    context = get_context_for_config(load_config(), screen_width=160)
    transform_contents_streaming(context, sys.stdin.buffer, sys.stdout)
"""

import logging
from dataclasses import replace
from typing import BinaryIO, Iterable, Iterator, TextIO

from .context import Context
from .formatted_string import FormattedString, apply_formatting, formatted
from .parser import (
    CommitBodyLine,
    CommitHeaderLine,
    DiffEvent,
    FileHeader,
    Hunk,
    RawLine,
    Separator,
    iter_diff_events,
)
from .renderers import (
    iter_format_commit_body_line,
    iter_format_commit_header_line,
    iter_format_file_name,
    iter_format_hunk,
)
from .streams import iter_lines_from_readable, iter_with_newlines, replace_tabs_with_spaces

logger = logging.getLogger(__name__)


def iter_format_event(context: Context, event: DiffEvent) -> Iterator[FormattedString]:
    """Render one parser event as display rows."""
    if isinstance(event, RawLine):
        yield formatted(event.line)
    elif isinstance(event, CommitHeaderLine):
        yield from iter_format_commit_header_line(context, event)
    elif isinstance(event, CommitBodyLine):
        yield from iter_format_commit_body_line(context, event)
    elif isinstance(event, FileHeader):
        yield from iter_format_file_name(context, event)
    elif isinstance(event, Hunk):
        yield from iter_format_hunk(context, event)
    elif isinstance(event, Separator):
        yield context.horizontal_separator()
    else:
        raise TypeError(f"Unknown diff event: {event!r}")


def iter_replace_tabs_in_events(events: Iterable[DiffEvent]) -> Iterator[DiffEvent]:
    """Expand tabs in the displayed text of parsed events.

    Runs after parsing: git ends ``---``/``+++`` paths containing spaces
    with a tab, and file names must keep their exact form.
    """
    for event in events:
        if isinstance(event, RawLine):
            yield RawLine(replace_tabs_with_spaces(event.line))
        elif isinstance(event, CommitHeaderLine):
            yield replace(
                event,
                line=replace_tabs_with_spaces(event.line),
                value=replace_tabs_with_spaces(event.value),
            )
        elif isinstance(event, CommitBodyLine):
            yield replace(event, line=replace_tabs_with_spaces(event.line))
        elif isinstance(event, Hunk):
            parts = [
                replace(part, lines=[
                    None if line is None else replace_tabs_with_spaces(line)
                    for line in part.lines
                ])
                for part in event.parts
            ]
            yield replace(event, header=replace_tabs_with_spaces(event.header), parts=parts)
        else:
            yield event


def iter_side_by_side_diffs(context: Context, lines: Iterable[str]) -> Iterator[FormattedString]:
    """Parse and render a stream of lines."""
    for event in iter_replace_tabs_in_events(iter_diff_events(lines)):
        yield from iter_format_event(context, event)


def iter_rendered_lines(context: Context, lines: Iterable[str]) -> Iterator[str]:
    """Render a stream of lines to text with escape codes (no newlines)."""
    default_color = context.theme.default
    if default_color.is_empty:
        default_color = None
    for row in iter_side_by_side_diffs(context, lines):
        yield apply_formatting(row, context.color_system, default_color)


def transform_contents_streaming(
    context: Context, input_stream: BinaryIO, output_stream: TextIO
) -> bool:
    """Read git output from ``input_stream`` and write split diffs.

    A reader closing the output early (``git log | split-diffs | head``)
    ends the transform quietly.

    Returns:
        False if the output was closed before everything was written.
    """
    lines = iter_lines_from_readable(input_stream)
    try:
        for text in iter_with_newlines(iter_rendered_lines(context, lines)):
            output_stream.write(text)
        output_stream.flush()
    except BrokenPipeError:
        logger.debug("Output closed, stopping")
        return False
    return True
