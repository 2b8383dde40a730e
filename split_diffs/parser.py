# split_diffs/parser.py
"""Streaming parser for git log/diff transcripts.

A single-pass state machine turns a stream of lines into events: raw
pass-through lines, commit header and body lines, file headers and
complete hunks. Only the currently open hunk is buffered, so arbitrarily
long transcripts (``git log -p`` over a whole history) can be piped
through with constant memory per hunk.

Hunks are stored as index-aligned parts, one per side (two for a unified
diff, one per parent plus the result for a combined diff). Deleted lines
go to the parent sides, inserted lines to the last side, and context lines
to every side once the lagging sides have been padded with None.
"""

import logging
import re
from dataclasses import dataclass, field
from enum import Enum
from typing import Iterable, Iterator, List, Optional, Tuple, Union

from .errors import HunkHeaderError
from .streams import strip_ansi_codes

logger = logging.getLogger(__name__)


class ParserState(Enum):
    UNKNOWN = "unknown"
    COMMIT_HEADER = "commit-header"
    COMMIT_BODY = "commit-body"
    DIFF = "diff"
    HUNK_HEADER = "hunk-header"
    HUNK_BODY = "hunk-body"


class DiffType(Enum):
    UNIFIED = "unified"
    COMBINED = "combined"


@dataclass
class HunkPart:
    """One side of a hunk."""
    label: str = ""
    start_line_no: int = -1
    lines: List[Optional[str]] = field(default_factory=list)
    missing: bool = False  # file does not exist on this side


@dataclass
class RawLine:
    line: str


@dataclass
class CommitHeaderLine:
    line: str
    label: str  # "commit", "Author:", "Date:", ...
    value: str


@dataclass
class CommitBodyLine:
    line: str
    is_title: bool = False


@dataclass
class FileHeader:
    file_name_a: str
    file_name_b: str
    missing_a: bool = False
    missing_b: bool = False


@dataclass
class Hunk:
    header: str
    diff_type: DiffType
    parts: List[HunkPart]


@dataclass
class Separator:
    pass


DiffEvent = Union[RawLine, CommitHeaderLine, CommitBodyLine, FileHeader, Hunk, Separator]


COMMIT_PREFIX = "commit "
COMMIT_BODY_INDENT = "    "
DIFF_PREFIX = "diff "
DEV_NULL = "/dev/null"

HUNK_HEADER_START = re.compile(r"^(@{2,}) ")
HUNK_RANGE = re.compile(r"^([-+])(\d+)(?:,(\d+))?$", re.ASCII)
COMBINED_DIFF_HEADER = re.compile(r"^diff --(?:cc|combined) (.+)$")
GIT_DIFF_HEADER = re.compile(r"^diff --git (.+)$")
FILE_HEADER_OLD = re.compile(r"^--- (.+?)(?:\t.*)?$")
FILE_HEADER_NEW = re.compile(r"^\+\+\+ (.+?)(?:\t.*)?$")
RENAME_OR_COPY = re.compile(r"^(rename|copy) (from|to) (.+)$")
BINARY_FILES = re.compile(r"^Binary files (.+) differ$")
QUOTED_ESCAPE = re.compile(r'\\([0-7]{1,3}|.)', re.DOTALL)

_C_ESCAPES = {
    "a": "\a", "b": "\b", "t": "\t", "n": "\n", "v": "\v", "f": "\f",
    "r": "\r", '"': '"', "\\": "\\",
}


def unquote_path(path: str) -> str:
    """Undo git's C-style quoting of paths with unusual characters.

    Example: ``"a/caf\\303\\251.txt"`` -> ``a/café.txt``
    """
    if len(path) < 2 or not (path.startswith('"') and path.endswith('"')):
        return path

    def replace(match: "re.Match") -> str:
        escape = match.group(1)
        if escape[0] in "01234567":
            # Octal escapes are raw bytes of a UTF-8 sequence
            return chr(int(escape, 8))
        return _C_ESCAPES.get(escape, escape)

    unescaped = QUOTED_ESCAPE.sub(replace, path[1:-1])
    try:
        return unescaped.encode("latin-1").decode("utf-8")
    except (UnicodeEncodeError, UnicodeDecodeError):
        return unescaped


def _strip_side_prefix(path: str, prefix: str) -> str:
    path = unquote_path(path)
    if path.startswith(prefix):
        return path[len(prefix):]
    return path


def _split_pair(text: str, separator: str, prefix_a: str, prefix_b: str) -> Tuple[str, str]:
    """Split "A<separator>B" where either path may contain the separator.

    Prefers the split where both halves look like side paths
    (``a/...`` / ``b/...`` or /dev/null), falling back to the first one.
    """
    positions = [m.start() for m in re.finditer(re.escape(separator), text)]
    for position in positions:
        left = unquote_path(text[:position])
        right = unquote_path(text[position + len(separator):])
        if (left == DEV_NULL or left.startswith(prefix_a)) and (
            right == DEV_NULL or right.startswith(prefix_b)
        ):
            return text[:position], text[position + len(separator):]
    if positions:
        return text[:positions[0]], text[positions[0] + len(separator):]
    return text, text


def parse_hunk_header(line: str) -> Tuple[int, List[int]]:
    """Parse a unified or combined hunk header.

    Example: ``@@ -1,2 +1,3 @@ def main():`` -> ``(2, [1, 1])``

    Returns:
        Number of sides and the start line number of each side.

    Raises:
        HunkHeaderError: If the header is malformed.
    """
    match = HUNK_HEADER_START.match(line)
    if not match:
        raise HunkHeaderError(line, "missing opening marker")
    marker = match.group(1)
    num_sides = len(marker)

    ranges_start = match.end()
    ranges_end = line.find(" " + marker, ranges_start - 1)
    if ranges_end < 0:
        raise HunkHeaderError(line, "missing closing marker")
    after_marker = ranges_end + 1 + len(marker)
    if after_marker < len(line) and line[after_marker] != " ":
        raise HunkHeaderError(line, "missing closing marker")

    tokens = line[ranges_start:ranges_end].split()
    if len(tokens) != num_sides:
        raise HunkHeaderError(line, f"expected {num_sides} ranges, got {len(tokens)}")

    start_line_nos = []
    for index, token in enumerate(tokens):
        range_match = HUNK_RANGE.match(token)
        if not range_match:
            raise HunkHeaderError(line, f"invalid range {token!r}")
        expected_sign = "+" if index == num_sides - 1 else "-"
        if range_match.group(1) != expected_sign:
            raise HunkHeaderError(line, f"range {token!r} should start with {expected_sign!r}")
        start_line_nos.append(int(range_match.group(2)))

    return num_sides, start_line_nos


class DiffStreamParser:
    """Incremental parser: feed lines, get events.

    Example:
        parser = DiffStreamParser()
        for line in lines:
            for event in parser.feed(line):
                handle(event)
        for event in parser.finish():
            handle(event)
    """

    def __init__(self):
        self.state = ParserState.UNKNOWN
        self._diff_type = DiffType.UNIFIED
        self._file_name_a = ""
        self._file_name_b = ""
        self._missing_a = False
        self._missing_b = False
        self._hunk_header = ""
        self._hunk_parts: List[HunkPart] = []
        self._next_body_line_is_title = False

    def feed(self, raw_line: str) -> Iterator[DiffEvent]:
        """Consume one line (without its newline)."""
        line = strip_ansi_codes(raw_line)

        next_state = self._get_next_state(line)
        if next_state is not None:
            yield from self._flush_pending()
            if next_state is ParserState.COMMIT_HEADER and self.state in (
                ParserState.HUNK_HEADER, ParserState.HUNK_BODY
            ):
                yield Separator()
            self._enter(next_state, line)
            self.state = next_state
        elif self.state is ParserState.HUNK_HEADER:
            self.state = ParserState.HUNK_BODY

        yield from self._handle_line(raw_line, line)

    def finish(self) -> Iterator[DiffEvent]:
        """Flush whatever is still open at end of input."""
        yield from self._flush_pending()
        self.state = ParserState.UNKNOWN

    def _get_next_state(self, line: str) -> Optional[ParserState]:
        # The line after a hunk header always belongs to the hunk body
        if self.state is ParserState.HUNK_HEADER:
            return None
        if line.startswith(COMMIT_PREFIX):
            return ParserState.COMMIT_HEADER
        if self.state is ParserState.COMMIT_HEADER and line.startswith(COMMIT_BODY_INDENT):
            return ParserState.COMMIT_BODY
        if line.startswith(DIFF_PREFIX):
            return ParserState.DIFF
        if HUNK_HEADER_START.match(line):
            return ParserState.HUNK_HEADER
        if self.state is ParserState.COMMIT_BODY and line and not line.startswith(" "):
            return ParserState.UNKNOWN
        return None

    def _enter(self, state: ParserState, line: str) -> None:
        if state is ParserState.COMMIT_BODY:
            self._next_body_line_is_title = True
        elif state is ParserState.DIFF:
            self._start_file(line)
        elif state is ParserState.HUNK_HEADER:
            self._start_hunk(line)

    def _start_file(self, line: str) -> None:
        self._file_name_a = ""
        self._file_name_b = ""
        self._missing_a = False
        self._missing_b = False

        combined = COMBINED_DIFF_HEADER.match(line)
        if combined:
            self._diff_type = DiffType.COMBINED
            self._file_name_a = self._file_name_b = unquote_path(combined.group(1))
            return

        self._diff_type = DiffType.UNIFIED
        git_diff = GIT_DIFF_HEADER.match(line)
        if git_diff:
            # Provisional names, refined by ---/+++ and rename lines
            path_a, path_b = _split_pair(git_diff.group(1), " ", "a/", "b/")
            self._file_name_a = _strip_side_prefix(path_a, "a/")
            self._file_name_b = _strip_side_prefix(path_b, "b/")

    def _start_hunk(self, line: str) -> None:
        num_sides, start_line_nos = parse_hunk_header(line)
        self._hunk_header = line
        self._diff_type = DiffType.UNIFIED if num_sides == 2 else DiffType.COMBINED
        self._hunk_parts = []
        for index, start_line_no in enumerate(start_line_nos):
            is_last = index == num_sides - 1
            self._hunk_parts.append(HunkPart(
                label=self._file_name_b if is_last else self._file_name_a,
                start_line_no=start_line_no,
                missing=self._missing_b if is_last else self._missing_a,
            ))

    def _handle_line(self, raw_line: str, line: str) -> Iterator[DiffEvent]:
        state = self.state
        if state is ParserState.UNKNOWN:
            yield RawLine(raw_line)
        elif state is ParserState.COMMIT_HEADER:
            label, _, value = line.partition(" ")
            yield CommitHeaderLine(line, label, value)
        elif state is ParserState.COMMIT_BODY:
            yield CommitBodyLine(line, is_title=self._next_body_line_is_title)
            self._next_body_line_is_title = False
        elif state is ParserState.DIFF:
            self._handle_diff_line(line)
        elif state is ParserState.HUNK_BODY:
            self._append_hunk_line(line)

    def _handle_diff_line(self, line: str) -> None:
        match = FILE_HEADER_OLD.match(line)
        if match:
            path = match.group(1)
            if path == DEV_NULL:
                self._file_name_a = ""
                self._missing_a = True
            else:
                self._file_name_a = _strip_side_prefix(path, "a/")
            return

        match = FILE_HEADER_NEW.match(line)
        if match:
            path = match.group(1)
            if path == DEV_NULL:
                self._file_name_b = ""
                self._missing_b = True
            else:
                self._file_name_b = _strip_side_prefix(path, "b/")
            return

        match = RENAME_OR_COPY.match(line)
        if match:
            if match.group(2) == "from":
                self._file_name_a = unquote_path(match.group(3))
            else:
                self._file_name_b = unquote_path(match.group(3))
            return

        if line.startswith("new file mode"):
            self._missing_a = True
        elif line.startswith("deleted file mode"):
            self._missing_b = True
        else:
            match = BINARY_FILES.match(line)
            if match:
                self._handle_binary_files(match.group(1))

    def _handle_binary_files(self, paths: str) -> None:
        path_a, path_b = _split_pair(paths, " and ", "a/", "b/")
        if path_a == DEV_NULL:
            self._file_name_a = ""
            self._missing_a = True
        else:
            self._file_name_a = _strip_side_prefix(path_a, "a/")
        if path_b == DEV_NULL:
            self._file_name_b = ""
            self._missing_b = True
        else:
            self._file_name_b = _strip_side_prefix(path_b, "b/")

    def _append_hunk_line(self, line: str) -> None:
        parts = self._hunk_parts
        if self._diff_type is DiffType.UNIFIED:
            if line.startswith("-"):
                parts[0].lines.append(line)
            elif line.startswith("+"):
                parts[1].lines.append(line)
            else:
                self._append_context(line)
            return

        # "\ No newline at end of file" has no per-parent columns
        if line.startswith("\\"):
            self._append_context(line)
            return

        num_parents = len(parts) - 1
        prefix, text = line[:num_parents], line[num_parents:]
        if "+" in prefix:
            # Parents with a blank column already have the inserted line,
            # so it is context for them on the same row
            keeping = [index for index, marker in enumerate(prefix) if marker == " "]
            sides = keeping + [len(parts) - 1]
            length = max(len(parts[side].lines) for side in sides)
            for side in sides:
                parts[side].lines.extend([None] * (length - len(parts[side].lines)))
                parts[side].lines.append(("+" if side == len(parts) - 1 else " ") + text)
        elif "-" in prefix:
            for index, marker in enumerate(prefix):
                if marker == "-":
                    parts[index].lines.append("-" + text)
        else:
            self._append_context(" " + text)

    def _pad_parts(self) -> None:
        length = max(len(part.lines) for part in self._hunk_parts)
        for part in self._hunk_parts:
            part.lines.extend([None] * (length - len(part.lines)))

    def _append_context(self, line: str) -> None:
        self._pad_parts()
        for part in self._hunk_parts:
            part.lines.append(line)

    def _flush_pending(self) -> Iterator[DiffEvent]:
        if self.state is ParserState.DIFF:
            yield FileHeader(
                self._file_name_a, self._file_name_b, self._missing_a, self._missing_b
            )
        elif self.state in (ParserState.HUNK_HEADER, ParserState.HUNK_BODY):
            yield self._take_hunk()

    def _take_hunk(self) -> Hunk:
        self._pad_parts()
        parts = [
            HunkPart(part.label, part.start_line_no, part.lines, part.missing)
            for part in self._hunk_parts
        ]
        for part in self._hunk_parts:
            part.lines = []
            part.start_line_no = -1
        logger.debug("Hunk %s with %d rows", self._hunk_header, len(parts[0].lines))
        return Hunk(self._hunk_header, self._diff_type, parts)


def iter_diff_events(lines: Iterable[str]) -> Iterator[DiffEvent]:
    """Parse a whole stream of lines into events."""
    parser = DiffStreamParser()
    for line in lines:
        yield from parser.feed(line)
    yield from parser.finish()
