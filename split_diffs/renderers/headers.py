# split_diffs/renderers/headers.py
"""Renderers for the non-hunk parts of a transcript: commit headers,
commit messages and the banner shown before each file."""

from typing import Iterator

from ..context import Context
from ..formatted_string import FormattedString, formatted
from ..parser import CommitBodyLine, CommitHeaderLine, FileHeader
from ..wrap import fit_text_to_width

FILE_INDICATOR = "■"


def _label_role(context: Context, label: str):
    theme = context.theme
    return {
        "commit": theme.commit_sha,
        "Author:": theme.commit_author,
        "Date:": theme.commit_date,
    }.get(label)


def iter_format_commit_header_line(
    context: Context, event: CommitHeaderLine
) -> Iterator[FormattedString]:
    theme = context.theme
    line = formatted(event.line)
    label_end = len(event.label)
    line.add_span(0, label_end, theme.commit_header_label)

    value_role = _label_role(context, event.label)
    if value_role is not None and label_end < len(line):
        line.add_span(label_end + 1, len(line), value_role)

    yield from fit_text_to_width(
        line, context.screen_width, context.config.wrap_lines, theme.commit_header
    )


def iter_format_commit_body_line(
    context: Context, event: CommitBodyLine
) -> Iterator[FormattedString]:
    theme = context.theme
    line = formatted(event.line)
    if event.is_title:
        line.add_span(0, len(line), theme.commit_title)
    yield from fit_text_to_width(
        line, context.screen_width, context.config.wrap_lines, theme.commit_message
    )


def iter_format_file_name(context: Context, event: FileHeader) -> Iterator[FormattedString]:
    """Render the banner of a file: separator, name line, separator.

    A single deleted or inserted square marks a file that was removed or
    added; both squares mark a modified file. Renames show ``a -> b``.
    """
    theme = context.theme
    name_a, name_b = event.file_name_a, event.file_name_b

    indicator = formatted()
    if event.missing_a or not name_a:
        indicator.append_string(FILE_INDICATOR * 2, theme.inserted_line)
        label = name_b
    elif event.missing_b or not name_b:
        indicator.append_string(FILE_INDICATOR * 2, theme.deleted_line)
        label = name_a
    else:
        indicator.append_string(FILE_INDICATOR, theme.deleted_line)
        indicator.append_string(FILE_INDICATOR, theme.inserted_line)
        label = name_a if name_a == name_b else f"{name_a} -> {name_b}"

    line = (
        formatted(" ")
        .append_spanned_string(indicator)
        .append_string(" " + label)
    )

    yield context.horizontal_separator()
    yield from fit_text_to_width(
        line, context.screen_width, context.config.wrap_lines, theme.file_name
    )
    yield context.horizontal_separator()
