# split_diffs/word_diff.py
"""Word-level diff computation.

Finds the words that changed between a deleted line and the inserted
line that replaced it, so they can be highlighted within the line.
"""

import difflib
from typing import List, NamedTuple, Optional, Tuple

from .spanned_string import SpannedString

REMOVED = "removed"
ADDED = "added"
COMMON = "common"


class WordChange(NamedTuple):
    """A run of text that was removed, added, or is common to both lines.

    ``count`` is the number of tokens (words or whitespace runs) in the run.
    """
    op: str
    text: str
    count: int


LineChanges = Tuple[List[WordChange], List[WordChange]]


def _tokenize_with_whitespace(text: str) -> List[str]:
    """Split text into words while preserving whitespace as separate tokens.

    Example: "hello  world" -> ["hello", "  ", "world"]
    """
    tokens = []
    current = []
    in_whitespace = False

    for char in text:
        is_ws = char.isspace()
        if is_ws != in_whitespace:
            if current:
                tokens.append("".join(current))
                current = []
            in_whitespace = is_ws
        current.append(char)

    if current:
        tokens.append("".join(current))

    return tokens


def compute_word_changes(old_line: str, new_line: str) -> List[WordChange]:
    """Find word-level differences between two lines.

    Splits on whitespace first, then uses difflib.SequenceMatcher on the
    tokens. Within each gap, removed text comes before added text.

    Args:
        old_line: Original line content.
        new_line: New line content.

    Returns:
        Ordered changes. Concatenating removed and common texts gives
        ``old_line``; concatenating added and common texts gives
        ``new_line``.
    """
    old_words = _tokenize_with_whitespace(old_line)
    new_words = _tokenize_with_whitespace(new_line)

    matcher = difflib.SequenceMatcher(None, old_words, new_words, autojunk=False)

    changes: List[WordChange] = []
    old_pos = 0
    new_pos = 0

    for match in matcher.get_matching_blocks():
        old_start, new_start, size = match.a, match.b, match.size

        if old_pos < old_start:
            changes.append(WordChange(
                REMOVED, "".join(old_words[old_pos:old_start]), old_start - old_pos
            ))
        if new_pos < new_start:
            changes.append(WordChange(
                ADDED, "".join(new_words[new_pos:new_start]), new_start - new_pos
            ))

        if size > 0:
            changes.append(WordChange(
                COMMON, "".join(old_words[old_start:old_start + size]), size
            ))

        old_pos = old_start + size
        new_pos = new_start + size

    return changes


def get_changes_in_line(
    line_text_a: Optional[str],
    line_text_b: Optional[str],
    change_ratio: float = 1.0,
) -> Optional[LineChanges]:
    """Return per-side word changes for a pair of lines, if useful.

    Granular changes are only returned when the amount of changed words
    relative to unchanged words is at most ``change_ratio``; beyond that
    the lines changed so much that word highlights are just noise.

    Returns:
        ``(changes_a, changes_b)`` or None.
    """
    if line_text_a is None or line_text_b is None:
        return None

    changes_a: List[WordChange] = []
    changes_b: List[WordChange] = []
    changed_words = 0
    common_words = 0
    for change in compute_word_changes(line_text_a, line_text_b):
        if change.op == REMOVED:
            changed_words += change.count
            changes_a.append(change)
        elif change.op == ADDED:
            changed_words += change.count
            changes_b.append(change)
        else:
            common_words += change.count
            changes_a.append(change)
            changes_b.append(change)

    if changed_words <= common_words * change_ratio:
        return changes_a, changes_b
    return None


def highlight_changes_in_line(
    line: SpannedString,
    changes: Optional[List[WordChange]],
    highlight_color,
) -> None:
    """Add ``highlight_color`` spans over the changed parts of ``line``."""
    if not changes:
        return

    index = 0
    for change in changes:
        end = index + len(change.text)
        if change.op != COMMON and end > index:
            line.add_span(index, min(end, len(line)), highlight_color)
        index = end
