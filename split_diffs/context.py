# split_diffs/context.py
"""Rendering context shared by every stage of the transform."""

import logging
from dataclasses import dataclass
from typing import Optional

from rich.color import ColorSystem

from .config import Config
from .formatted_string import FormattedString, formatted
from .syntax_highlight import SyntaxHighlighter, create_highlighter
from .theme import Theme, load_theme

logger = logging.getLogger(__name__)

HORIZONTAL_SEPARATOR_CHAR = "─"


@dataclass
class Context:
    """Everything the renderers need to lay out one transcript."""
    config: Config
    theme: Theme
    screen_width: int
    highlighter: Optional[SyntaxHighlighter] = None
    # None renders plain text without escape codes
    color_system: Optional[ColorSystem] = ColorSystem.TRUECOLOR

    def is_split(self, num_sides: int = 2) -> bool:
        """Whether ``num_sides`` columns of ``min_line_width`` fit the screen."""
        return self.screen_width >= num_sides * self.config.min_line_width

    def line_width(self, num_sides: int = 2) -> int:
        """Width of one side's column."""
        if self.is_split(num_sides):
            return self.screen_width // num_sides
        return self.screen_width

    def blank_line(self, width: int, color=None) -> FormattedString:
        if color is None:
            return formatted(" " * width)
        return formatted(" " * width, color)

    def horizontal_separator(self) -> FormattedString:
        return formatted(HORIZONTAL_SEPARATOR_CHAR * self.screen_width, self.theme.border)


def get_context_for_config(
    config: Config,
    screen_width: int,
    theme: Optional[Theme] = None,
    color_system: Optional[ColorSystem] = ColorSystem.TRUECOLOR,
) -> Context:
    """Load the theme and highlighter named by ``config``.

    Raises:
        ThemeError: If the configured theme cannot be loaded.
    """
    if theme is None:
        theme = load_theme(config.theme_name)

    style_name = config.syntax_highlighting_theme or theme.syntax_highlighting_theme
    highlighter = create_highlighter(style_name)

    logger.debug(
        "Context: width=%d theme=%s syntax=%s split=%s",
        screen_width, theme.name, style_name, screen_width >= 2 * config.min_line_width,
    )
    return Context(
        config=config,
        theme=theme,
        screen_width=max(screen_width, 1),
        highlighter=highlighter,
        color_system=color_system,
    )
