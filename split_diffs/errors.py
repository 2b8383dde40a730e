# split_diffs/errors.py
"""Error types for split-diffs.

Parse and range errors are fatal for the operation that raised them.
Rendering problems that only affect one line never surface as exceptions
(the renderer degrades that line to plain text instead).
"""

from typing import Optional


class SplitDiffsError(Exception):
    """Base class for split-diffs errors."""
    pass


class InvalidRangeError(SplitDiffsError, ValueError):
    """A span or slice was requested with an invalid index range."""

    def __init__(self, start: int, end: int, length: Optional[int] = None):
        self.start = start
        self.end = end
        self.length = length
        if length is None:
            message = f"Invalid start or end index: [{start}, {end})"
        else:
            message = (
                f"Invalid start or end index: [{start}, {end}) "
                f"for string of length {length}"
            )
        super().__init__(message)


class HunkHeaderError(SplitDiffsError, ValueError):
    """A hunk header line could not be parsed.

    There is no safe way to number the lines of a hunk whose header is
    malformed, so this aborts the parse.
    """

    def __init__(self, line: str, reason: str):
        self.line = line
        self.reason = reason
        super().__init__(f"Malformed hunk header ({reason}): {line!r}")


class ThemeError(SplitDiffsError):
    """A theme could not be found or contains invalid definitions."""
    pass
