# split_diffs/syntax_highlight.py
"""Syntax highlighting support for diff content.

Uses Pygments to tokenize code lines within diffs and maps each token to
the foreground color of the configured Pygments style. Lines are
highlighted one at a time, so multi-line constructs (block comments,
docstrings) are only colored as far as a single line reveals them.
"""

import logging
import os
from functools import lru_cache
from typing import List, Optional, Tuple

from pygments.lexer import Lexer
from pygments.lexers import get_lexer_by_name, get_lexer_for_filename
from pygments.styles import get_style_by_name
from pygments.util import ClassNotFound

from .spanned_string import SpannedString
from .theme import ThemeColor, parse_color

logger = logging.getLogger(__name__)

TokenColor = Tuple[int, int, str]  # (offset, length, "#rrggbb")

# File extension to Pygments lexer name mapping for common cases
EXTENSION_MAP = {
    '.py': 'python',
    '.js': 'javascript',
    '.mjs': 'javascript',
    '.ts': 'typescript',
    '.tsx': 'tsx',
    '.jsx': 'jsx',
    '.rb': 'ruby',
    '.go': 'go',
    '.rs': 'rust',
    '.java': 'java',
    '.c': 'c',
    '.cpp': 'cpp',
    '.h': 'c',
    '.hpp': 'cpp',
    '.cs': 'csharp',
    '.php': 'php',
    '.swift': 'swift',
    '.kt': 'kotlin',
    '.scala': 'scala',
    '.sh': 'bash',
    '.bash': 'bash',
    '.zsh': 'zsh',
    '.json': 'json',
    '.yaml': 'yaml',
    '.yml': 'yaml',
    '.xml': 'xml',
    '.html': 'html',
    '.css': 'css',
    '.scss': 'scss',
    '.sql': 'sql',
    '.md': 'markdown',
    '.toml': 'toml',
    '.ini': 'ini',
    '.dockerfile': 'docker',
    '.lua': 'lua',
    '.r': 'r',
    '.pl': 'perl',
    '.pm': 'perl',
}

# Keep token offsets aligned with the input line
_LEXER_OPTIONS = {"stripnl": False, "ensurenl": False}


@lru_cache(maxsize=128)
def _get_lexer(filename: str) -> Optional[Lexer]:
    """Get Pygments lexer for a filename (cached).

    Args:
        filename: File path or name.

    Returns:
        Pygments lexer or None if not found.
    """
    # Try extension mapping first
    _, ext = os.path.splitext(filename)
    if ext.lower() in EXTENSION_MAP:
        try:
            return get_lexer_by_name(EXTENSION_MAP[ext.lower()], **_LEXER_OPTIONS)
        except ClassNotFound:
            pass

    # Fall back to Pygments filename detection
    try:
        return get_lexer_for_filename(filename, **_LEXER_OPTIONS)
    except ClassNotFound:
        logger.debug("No lexer for %s", filename)
        return None


@lru_cache(maxsize=256)
def _color_for_hex(hex_color: str) -> ThemeColor:
    return ThemeColor(color=parse_color(hex_color))


class SyntaxHighlighter:
    """Maps code tokens to colors of a Pygments style."""

    def __init__(self, style_name: str):
        """Create a highlighter.

        Raises:
            ClassNotFound: If Pygments has no style named ``style_name``.
        """
        self.style_name = style_name
        self._style = get_style_by_name(style_name)

    def can_highlight(self, filename: str) -> bool:
        """Check if syntax highlighting is available for a file."""
        return bool(filename) and _get_lexer(filename) is not None

    def get_token_colors(self, text: str, filename: str) -> List[TokenColor]:
        """Tokenize ``text`` as code from ``filename``.

        Returns:
            ``(offset, length, color)`` for every colored token, or an
            empty list if the language is unknown.
        """
        if not filename or not text:
            return []
        lexer = _get_lexer(filename)
        if lexer is None:
            return []

        token_colors: List[TokenColor] = []
        try:
            for offset, token_type, value in lexer.get_tokens_unprocessed(text):
                if offset >= len(text):
                    break
                color = self._style.style_for_token(token_type).get("color")
                if color and value:
                    length = min(len(value), len(text) - offset)
                    token_colors.append((offset, length, f"#{color}"))
        except Exception as e:
            # Highlighting fails on lexer bugs; the line is left uncolored
            logger.debug("Highlighting failed for %s: %s", filename, e)
            return []
        return token_colors


def create_highlighter(style_name: Optional[str]) -> Optional[SyntaxHighlighter]:
    """Create a highlighter, or None if no style or an unknown style is given."""
    if not style_name:
        return None
    try:
        return SyntaxHighlighter(style_name)
    except ClassNotFound:
        logger.warning("Unknown syntax highlighting theme %r, disabling highlighting", style_name)
        return None


def highlight_syntax_in_line(
    line: SpannedString,
    filename: str,
    highlighter: Optional[SyntaxHighlighter],
) -> None:
    """Add syntax color spans to ``line`` in place."""
    if highlighter is None or not highlighter.can_highlight(filename):
        return
    for offset, length, color in highlighter.get_token_colors(line.get_string(), filename):
        line.add_span(offset, offset + length, _color_for_hex(color))
