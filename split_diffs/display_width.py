# split_diffs/display_width.py
"""Display width utilities for terminal rendering.

Provides display width measurement for strings containing wide
characters (CJK), ambiguous-width characters (box-drawing), and
zero-width characters (combining marks).
"""

import os
import unicodedata
from functools import lru_cache
from typing import List

import wcwidth


def _get_ambiguous_width() -> int:
    """Get the width to use for East Asian Ambiguous characters.

    Reads from SPLIT_DIFFS_AMBIGUOUS_WIDTH environment variable.
    Default is 1 (standard Western terminals).
    Set to 2 for CJK terminals or terminals with ambiguous width = wide.

    Returns:
        1 or 2 depending on configuration.
    """
    value = os.environ.get("SPLIT_DIFFS_AMBIGUOUS_WIDTH", "1")
    return 2 if value == "2" else 1


@lru_cache(maxsize=4096)
def _char_width(char: str, ambiguous_width: int) -> int:
    # Zero-width and non-printable characters first, via wcwidth
    wc = wcwidth.wcwidth(char)
    if wc <= 0:
        return 0

    eaw = unicodedata.east_asian_width(char)
    if eaw in ('F', 'W'):
        return 2
    if eaw == 'A':
        return ambiguous_width
    return 1


def char_widths(text: str) -> List[int]:
    """Display width of every character in ``text`` (0, 1 or 2 columns).

    - Fullwidth (F) and Wide (W) characters: 2 columns
    - Ambiguous (A) characters: configurable via SPLIT_DIFFS_AMBIGUOUS_WIDTH
    - Halfwidth (H), Narrow (Na), Neutral (N): 1 column
    - Combining marks and other zero-width characters: 0 columns
    """
    ambiguous_width = _get_ambiguous_width()
    return [_char_width(char, ambiguous_width) for char in text]


def display_width(text: str) -> int:
    """Calculate the display width of a string, accounting for wide characters.

    Args:
        text: The string to measure.

    Returns:
        The display width in terminal columns.
    """
    return sum(char_widths(text))
