# split_diffs/formatted_string.py
"""Spanned strings carrying theme colors, and their conversion to ANSI."""

from typing import Optional

from rich.color import ColorSystem

from .spanned_string import SpannedString
from .theme import ThemeColor, reduce_theme_colors


class FormattedString(SpannedString[ThemeColor]):
    """A SpannedString whose attributes are ThemeColors."""
    pass


def formatted(text: str = "", *colors: ThemeColor) -> FormattedString:
    """Create a FormattedString holding ``text`` with ``colors`` applied."""
    return FormattedString.create().append_string(text, *colors)


def apply_formatting(
    string: FormattedString,
    color_system: Optional[ColorSystem] = ColorSystem.TRUECOLOR,
    default_color: Optional[ThemeColor] = None,
) -> str:
    """Render a FormattedString as text with ANSI escape codes.

    Args:
        string: The string to render.
        color_system: Rich color system to target. None renders plain text.
        default_color: Applied underneath every run (the theme's default).

    Returns:
        The rendered line.
    """
    if color_system is None:
        return string.get_string()

    parts = []
    for substring, colors in string.iter_substrings():
        if default_color is not None:
            colors = colors + [default_color]
        theme_color = reduce_theme_colors(colors)
        if theme_color.is_empty:
            parts.append(substring)
        else:
            parts.append(theme_color.to_rich().render(substring, color_system=color_system))
    return "".join(parts)
