# split_diffs/wrap.py
"""Greedy, display-width-aware word wrapping for spanned strings.

Text is split into alternating whitespace and non-whitespace runs. Runs
are placed greedily on the current line; a run that does not fit starts
a new line, and a run wider than the whole line is cut at character
boundaries. Every produced line is a ``slice`` of the input, so
attributes survive wrapping exactly.
"""

from typing import Iterator, List, Optional, Tuple, TypeVar

from .spanned_string import SpannedString

T = TypeVar("T")


def _iter_runs(string: str) -> Iterator[Tuple[int, int]]:
    """Yield ``(start, end)`` of each whitespace/non-whitespace run.

    Example: "hello  world" -> (0, 5), (5, 7), (7, 12)
    """
    if not string:
        return
    run_start = 0
    in_whitespace = string[0].isspace()
    for index in range(1, len(string)):
        is_ws = string[index].isspace()
        if is_ws != in_whitespace:
            yield run_start, index
            run_start = index
            in_whitespace = is_ws
    yield run_start, len(string)


def get_line_breaks(string: str, widths: List[int], width: int) -> List[int]:
    """Compute the offsets at which ``string`` should be cut.

    Args:
        string: Text to wrap.
        widths: Display width of each character of ``string``.
        width: Maximum display width of a line. Values below 1 are
            treated as 1.

    Returns:
        Increasing list of end offsets, the last one being ``len(string)``.
    """
    width = max(width, 1)

    # Short circuit if no wrapping is required
    if sum(widths) <= width:
        return [len(string)]

    line_breaks: List[int] = []
    budget = width
    line_end = 0

    def flush_line() -> None:
        nonlocal budget
        if line_end > (line_breaks[-1] if line_breaks else 0):
            line_breaks.append(line_end)
        budget = width

    for run_start, run_end in _iter_runs(string):
        run_width = sum(widths[run_start:run_end])

        # run fits on the current line
        if run_width <= budget:
            line_end = run_end
            budget -= run_width
            continue

        # run fits on a new line, so start one
        if run_width <= width:
            flush_line()
            line_end = run_end
            budget -= run_width
            continue

        # run is too long for any line, so break it at character boundaries
        index = run_start
        while index < run_end:
            taken = index
            while taken < run_end and widths[taken] <= budget:
                budget -= widths[taken]
                taken += 1

            if taken == index:
                if budget < width:
                    # Next character does not fit the rest of this line
                    flush_line()
                    continue
                # A single character wider than a whole line goes alone
                budget -= widths[taken]
                taken += 1

            line_end = taken
            index = taken
            flush_line()

    if not line_breaks or line_breaks[-1] < len(string):
        line_breaks.append(len(string))

    return line_breaks


def wrap_spanned_string_by_word(
    spanned_string: SpannedString[T], width: int
) -> List[SpannedString[T]]:
    """Wrap a spanned string into lines no wider than ``width`` columns.

    If the string already fits, the input itself is returned as the only
    line. Otherwise each line is an independent slice of the input.
    """
    string = spanned_string.get_string()
    line_breaks = get_line_breaks(string, spanned_string.get_char_widths(), width)

    if len(line_breaks) == 1:
        return [spanned_string]

    wrapped: List[SpannedString[T]] = []
    prev_line_break = 0
    for line_break in line_breaks:
        wrapped.append(spanned_string.slice(prev_line_break, line_break))
        prev_line_break = line_break
    return wrapped


def truncate_spanned_string(
    spanned_string: SpannedString[T], width: int
) -> SpannedString[T]:
    """Cut a spanned string to at most ``width`` display columns."""
    used = 0
    cut = 0
    for char_width in spanned_string.get_char_widths():
        if used + char_width > width:
            break
        used += char_width
        cut += 1
    return spanned_string.slice(0, cut)


def fit_text_to_width(
    spanned_string: SpannedString[T],
    width: int,
    wrap_lines: bool = True,
    background: Optional[T] = None,
) -> List[SpannedString[T]]:
    """Wrap or truncate a line into exactly ``width`` columns.

    Each resulting line is padded with spaces to ``width`` columns and,
    if ``background`` is given, tagged with it over its whole length.
    Lines returned by the wrapper may be the input object itself, which
    is then modified in place.
    """
    if wrap_lines:
        lines = wrap_spanned_string_by_word(spanned_string, width)
    else:
        lines = [truncate_spanned_string(spanned_string, width)]

    for line in lines:
        line.fill_width(width)
        if background is not None:
            line.add_span(0, len(line), background)
    return lines
