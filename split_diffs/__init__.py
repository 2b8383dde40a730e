# split_diffs/__init__.py
"""Side-by-side rendering of git log/diff output in the terminal.

Reads the text produced by ``git log -p``, ``git show`` or ``git diff``
and renders each hunk with the old and new versions next to each other
(or, on narrow terminals, as a colored unified diff), with word-level
change highlighting and syntax highlighting.

Example:
    from split_diffs import get_context_for_config, load_config, transform_contents_streaming

    context = get_context_for_config(load_config(), screen_width=160)
    transform_contents_streaming(context, sys.stdin.buffer, sys.stdout)
"""

from .config import Config, get_git_config, load_config
from .context import Context, get_context_for_config
from .errors import HunkHeaderError, InvalidRangeError, SplitDiffsError, ThemeError
from .formatted_string import FormattedString, apply_formatting, formatted
from .parser import DiffStreamParser, DiffType, HunkPart, ParserState, iter_diff_events
from .pipeline import iter_side_by_side_diffs, transform_contents_streaming
from .spanned_string import SpannedString
from .theme import IDENTITY_THEME, Theme, ThemeColor, load_theme
from .wrap import fit_text_to_width, wrap_spanned_string_by_word

__all__ = [
    # Configuration
    "Config",
    "Context",
    "get_context_for_config",
    "get_git_config",
    "load_config",
    # Errors
    "SplitDiffsError",
    "InvalidRangeError",
    "HunkHeaderError",
    "ThemeError",
    # Strings
    "SpannedString",
    "FormattedString",
    "formatted",
    "apply_formatting",
    "wrap_spanned_string_by_word",
    "fit_text_to_width",
    # Parsing and rendering
    "DiffStreamParser",
    "DiffType",
    "HunkPart",
    "ParserState",
    "iter_diff_events",
    "iter_side_by_side_diffs",
    "transform_contents_streaming",
    # Themes
    "Theme",
    "ThemeColor",
    "IDENTITY_THEME",
    "load_theme",
]
