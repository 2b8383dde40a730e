# split_diffs/theme.py
"""Theme configuration for split-diffs.

A theme maps a fixed set of roles (commit header parts, file names, hunk
headers, deleted/inserted/unmodified lines and their line numbers, ...)
to a ``ThemeColor``: optional foreground and background colors plus text
modifiers.

Themes are JSON files. Built-in themes live in the ``themes/`` directory
alongside this module. Users can add their own themes (or override a
built-in one) by placing ``<name>.json`` in the directory named by the
SPLIT_DIFFS_THEME_DIR environment variable.

Theme file format:
    {
        "syntax_highlighting_theme": "monokai",
        "default": {"fg": "#adbac7", "bg": "#22272e"},
        "deleted_line": {"fg": "#e5534b", "bg": "#442d30"},
        "hunk_header": {"modifiers": ["dim"]},
        "commit_sha": "green"
    }

Colors are hex values (#RRGGBB, or #RRGGBBAA with alpha) or any color
name Rich understands. A role given as a plain string sets only its
foreground color.
"""

import json
import logging
import os
import re
from dataclasses import dataclass, field, fields
from pathlib import Path
from typing import Any, Dict, List, NamedTuple, Optional, Tuple

from rich.color import Color, ColorParseError
from rich.style import Style

from .errors import ThemeError

logger = logging.getLogger(__name__)

# Regex for hex colors, with optional leading '#' and optional alpha
HEX_COLOR_PATTERN = re.compile(r'^#?([0-9A-Fa-f]{6})([0-9A-Fa-f]{2})?$')

THEMES_DIR_ENV = "SPLIT_DIFFS_THEME_DIR"

# Modifier names accepted in theme files, mapped to Rich style attributes
MODIFIERS = {
    "bold": "bold",
    "dim": "dim",
    "italic": "italic",
    "underline": "underline",
    "blink": "blink",
    "inverse": "reverse",
    "reverse": "reverse",
    "hidden": "conceal",
    "strikethrough": "strike",
}


class ColorRgba(NamedTuple):
    r: float
    g: float
    b: float
    a: float = 255


@dataclass(frozen=True)
class ThemeColor:
    """Foreground/background colors and modifiers for one role."""
    color: Optional[ColorRgba] = None
    background_color: Optional[ColorRgba] = None
    modifiers: Tuple[str, ...] = ()

    @property
    def is_empty(self) -> bool:
        return self.color is None and self.background_color is None and not self.modifiers

    def to_rich(self) -> Style:
        """Convert to a Rich style (alpha is dropped)."""
        if self.is_empty:
            return Style.null()
        attributes = {MODIFIERS[modifier]: True for modifier in self.modifiers}
        return Style(
            color=_to_rich_color(self.color),
            bgcolor=_to_rich_color(self.background_color),
            **attributes,
        )


def _to_rich_color(color: Optional[ColorRgba]) -> Optional[Color]:
    if color is None:
        return None
    return Color.from_rgb(round(color.r), round(color.g), round(color.b))


def parse_color(value: str) -> ColorRgba:
    """Parse a hex color or a Rich color name.

    Raises:
        ThemeError: If the value is not a recognizable color.
    """
    match = HEX_COLOR_PATTERN.match(value)
    if match:
        hex_color, hex_alpha = match.groups()
        return ColorRgba(
            int(hex_color[0:2], 16),
            int(hex_color[2:4], 16),
            int(hex_color[4:6], 16),
            int(hex_alpha, 16) if hex_alpha else 255,
        )

    try:
        triplet = Color.parse(value).get_truecolor()
    except ColorParseError as e:
        raise ThemeError(f"Invalid color {value!r}") from e
    return ColorRgba(triplet.red, triplet.green, triplet.blue, 255)


def merge_colors(
    a: Optional[ColorRgba], b: Optional[ColorRgba]
) -> Optional[ColorRgba]:
    """Blend ``b`` over ``a`` according to ``b``'s alpha."""
    if b is None or b.a == 0:
        return a
    if a is None:
        return b
    t = 1.0 - b.a / 255.0
    return ColorRgba(
        b.r * (1 - t) + a.r * t,
        b.g * (1 - t) + a.g * t,
        b.b * (1 - t) + a.b * t,
        b.a * (1 - t) + a.a * t,
    )


def merge_theme_colors(a: ThemeColor, b: ThemeColor) -> ThemeColor:
    """Layer ``b`` on top of ``a``."""
    return ThemeColor(
        color=merge_colors(a.color, b.color),
        background_color=merge_colors(a.background_color, b.background_color),
        modifiers=a.modifiers + b.modifiers,
    )


def reduce_theme_colors(colors: List[ThemeColor]) -> ThemeColor:
    """Combine the colors applied to a run of text into one.

    Colors are applied in reverse, which allows us to apply specific
    formatting (like syntax highlighting) first and generic colors (like
    line colors) last.
    """
    theme_color = ThemeColor()
    for color in reversed(colors):
        theme_color = merge_theme_colors(theme_color, color)
    return theme_color


def parse_color_definition(definition: Any) -> ThemeColor:
    """Parse a role definition: a color string or a {fg, bg, modifiers} dict."""
    if isinstance(definition, str):
        return ThemeColor(color=parse_color(definition))
    if not isinstance(definition, dict):
        raise ThemeError(f"Invalid color definition: {definition!r}")

    unknown_keys = set(definition) - {"fg", "bg", "modifiers"}
    if unknown_keys:
        raise ThemeError(f"Unknown color keys: {sorted(unknown_keys)}")

    modifiers = tuple(definition.get("modifiers", ()))
    for modifier in modifiers:
        if modifier not in MODIFIERS:
            raise ThemeError(f"Unknown color modifier: {modifier!r}")

    fg = definition.get("fg")
    bg = definition.get("bg")
    return ThemeColor(
        color=parse_color(fg) if fg else None,
        background_color=parse_color(bg) if bg else None,
        modifiers=modifiers,
    )


@dataclass(frozen=True)
class Theme:
    """Colors for every display role.

    ``default`` is applied underneath everything else, so it provides the
    base foreground/background of the whole output.
    """
    name: str = "none"
    syntax_highlighting_theme: Optional[str] = None

    default: ThemeColor = field(default_factory=ThemeColor)
    commit_header: ThemeColor = field(default_factory=ThemeColor)
    commit_header_label: ThemeColor = field(default_factory=ThemeColor)
    commit_sha: ThemeColor = field(default_factory=ThemeColor)
    commit_author: ThemeColor = field(default_factory=ThemeColor)
    commit_date: ThemeColor = field(default_factory=ThemeColor)
    commit_title: ThemeColor = field(default_factory=ThemeColor)
    commit_message: ThemeColor = field(default_factory=ThemeColor)
    border: ThemeColor = field(default_factory=ThemeColor)
    file_name: ThemeColor = field(default_factory=ThemeColor)
    hunk_header: ThemeColor = field(default_factory=ThemeColor)
    deleted_word: ThemeColor = field(default_factory=ThemeColor)
    deleted_line: ThemeColor = field(default_factory=ThemeColor)
    deleted_line_no: ThemeColor = field(default_factory=ThemeColor)
    inserted_word: ThemeColor = field(default_factory=ThemeColor)
    inserted_line: ThemeColor = field(default_factory=ThemeColor)
    inserted_line_no: ThemeColor = field(default_factory=ThemeColor)
    unmodified_line: ThemeColor = field(default_factory=ThemeColor)
    unmodified_line_no: ThemeColor = field(default_factory=ThemeColor)
    missing_line: ThemeColor = field(default_factory=ThemeColor)


THEME_COLOR_ROLES: Tuple[str, ...] = tuple(
    f.name for f in fields(Theme) if f.name not in ("name", "syntax_highlighting_theme")
)

# No colors at all, for tests and headless output
IDENTITY_THEME = Theme()


def parse_theme_definition(name: str, definition: Dict[str, Any]) -> Theme:
    """Build a Theme from a parsed JSON theme definition.

    Roles missing from the definition get no color of their own.

    Raises:
        ThemeError: On unknown roles or invalid colors.
    """
    if not isinstance(definition, dict):
        raise ThemeError(f"Theme {name!r} must be a JSON object")

    values: Dict[str, Any] = {"name": name}
    for key, value in definition.items():
        if key == "syntax_highlighting_theme":
            values[key] = value
        elif key in THEME_COLOR_ROLES:
            try:
                values[key] = parse_color_definition(value)
            except ThemeError as e:
                raise ThemeError(f"Theme {name!r}, role {key!r}: {e}") from e
        else:
            raise ThemeError(f"Theme {name!r} has unknown role {key!r}")

    return Theme(**values)


def _get_builtin_themes_dir() -> Path:
    return Path(__file__).parent / "themes"


def _get_theme_dirs(theme_dir: Optional[str] = None) -> List[Path]:
    dirs = []
    user_dir = theme_dir or os.environ.get(THEMES_DIR_ENV)
    if user_dir:
        dirs.append(Path(user_dir).expanduser())
    dirs.append(_get_builtin_themes_dir())
    return dirs


def get_theme_names(theme_dir: Optional[str] = None) -> List[str]:
    """List available theme names (user and built-in)."""
    names = {"none"}
    for directory in _get_theme_dirs(theme_dir):
        if directory.is_dir():
            names.update(path.stem for path in directory.glob("*.json"))
    return sorted(names)


def load_theme(name: str, theme_dir: Optional[str] = None) -> Theme:
    """Load a theme by name.

    The user theme directory is searched before the built-in themes.
    The name "none" always gives IDENTITY_THEME.

    Raises:
        ThemeError: If the theme does not exist or is invalid.
    """
    if name == "none":
        return IDENTITY_THEME

    for directory in _get_theme_dirs(theme_dir):
        path = directory / f"{name}.json"
        if not path.is_file():
            continue
        logger.debug("Loading theme %r from %s", name, path)
        try:
            definition = json.loads(path.read_text(encoding="utf-8"))
        except (OSError, json.JSONDecodeError) as e:
            raise ThemeError(f"Could not read theme {path}: {e}") from e
        return parse_theme_definition(name, definition)

    raise ThemeError(
        f"Theme {name!r} not found. Available themes: "
        f"{', '.join(get_theme_names(theme_dir))}"
    )
