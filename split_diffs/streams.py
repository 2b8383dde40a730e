# split_diffs/streams.py
"""Line-level stream helpers: chunk decoding, ANSI stripping, tabs."""

import codecs
import re
from typing import BinaryIO, Iterable, Iterator

# CSI sequences (colors, cursor movement) and OSC sequences (hyperlinks)
ANSI_ESCAPE_PATTERN = re.compile(r"\x1b\[[0-9;?]*[A-Za-z]|\x1b\][^\x07\x1b]*(?:\x07|\x1b\\)")

TAB_REPLACEMENT = "    "

DEFAULT_CHUNK_SIZE = 64 * 1024


def strip_ansi_codes(line: str) -> str:
    """Remove terminal escape sequences from a line."""
    return ANSI_ESCAPE_PATTERN.sub("", line)


def iter_lines_from_chunks(chunks: Iterable[bytes]) -> Iterator[str]:
    """Split a stream of byte chunks into lines.

    Lines may end with LF or CRLF; every carriage return is dropped.
    Multi-byte UTF-8 characters split across chunks are reassembled and
    invalid bytes become U+FFFD. A trailing line without a newline is
    yielded only if it is non-empty.
    """
    decoder = codecs.getincrementaldecoder("utf-8")(errors="replace")
    pending = ""
    for chunk in chunks:
        pending += decoder.decode(chunk).replace("\r", "")
        lines = pending.split("\n")
        pending = lines.pop()
        yield from lines

    pending += decoder.decode(b"", final=True).replace("\r", "")
    if pending:
        yield pending


def iter_chunks(readable: BinaryIO, chunk_size: int = DEFAULT_CHUNK_SIZE) -> Iterator[bytes]:
    """Read ``readable`` until EOF without waiting for full chunks."""
    read = getattr(readable, "read1", readable.read)
    while True:
        chunk = read(chunk_size)
        if not chunk:
            return
        yield chunk


def iter_lines_from_readable(
    readable: BinaryIO, chunk_size: int = DEFAULT_CHUNK_SIZE
) -> Iterator[str]:
    return iter_lines_from_chunks(iter_chunks(readable, chunk_size))


def replace_tabs_with_spaces(line: str) -> str:
    return line.replace("\t", TAB_REPLACEMENT)


def iter_with_newlines(lines: Iterable[str]) -> Iterator[str]:
    for line in lines:
        yield line + "\n"
