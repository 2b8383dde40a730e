# split_diffs/config.py
"""Configuration for split-diffs.

Settings are resolved from several sources, lowest to highest precedence:

1. Defaults of the ``Config`` dataclass.
2. Git config: ``split-diffs.<key>=<value>`` entries of ``git config -l``,
   e.g. ``git config --global split-diffs.min-line-width 40``.
3. Environment variables ``SPLIT_DIFFS_<KEY>`` (``SPLIT_DIFFS_MIN_LINE_WIDTH``),
   optionally loaded from a ``.env`` file.
4. Command line flags (applied by the CLI on top of the result).

Invalid values are logged and ignored, so a typo in a config file never
prevents a diff from being shown.
"""

import logging
import os
import re
import subprocess
from dataclasses import dataclass, replace
from typing import Any, Callable, Dict, Mapping, Optional

from dotenv import load_dotenv

logger = logging.getLogger(__name__)

DEFAULT_MIN_LINE_WIDTH = 80
DEFAULT_THEME_NAME = "dark"

COLOR_MODES = ("auto", "always", "never")

GIT_CONFIG_KEY_PREFIX = "split-diffs."
ENV_PREFIX = "SPLIT_DIFFS_"

_TRUE_VALUES = {"1", "true", "yes", "on"}
_FALSE_VALUES = {"0", "false", "no", "off"}


@dataclass(frozen=True)
class Config:
    """Resolved split-diffs settings."""
    min_line_width: int = DEFAULT_MIN_LINE_WIDTH
    wrap_lines: bool = True
    highlight_line_changes: bool = True
    highlight_change_ratio: float = 1.0
    line_number_width: int = 5
    theme_name: str = DEFAULT_THEME_NAME
    # None means "use the theme's choice"
    syntax_highlighting_theme: Optional[str] = None
    color_mode: str = "auto"


def _parse_bool(value: str) -> bool:
    normalized = value.strip().lower()
    if normalized in _TRUE_VALUES:
        return True
    if normalized in _FALSE_VALUES:
        return False
    raise ValueError(f"expected a boolean, got {value!r}")


def _parse_positive_int(value: str) -> int:
    number = int(value.strip())
    if number < 1:
        raise ValueError(f"expected a positive integer, got {value!r}")
    return number


def _parse_ratio(value: str) -> float:
    number = float(value.strip())
    if number < 0:
        raise ValueError(f"expected a non-negative number, got {value!r}")
    return number


def _parse_name(value: str) -> str:
    name = value.strip()
    if not name:
        raise ValueError("expected a name")
    return name


def _parse_color_mode(value: str) -> str:
    mode = value.strip().lower()
    if mode not in COLOR_MODES:
        raise ValueError(f"expected one of {', '.join(COLOR_MODES)}, got {value!r}")
    return mode


# Config key (as written in git config) -> (Config field, parser)
CONFIG_KEYS: Dict[str, tuple] = {
    "min-line-width": ("min_line_width", _parse_positive_int),
    "wrap-lines": ("wrap_lines", _parse_bool),
    "highlight-line-changes": ("highlight_line_changes", _parse_bool),
    "highlight-change-ratio": ("highlight_change_ratio", _parse_ratio),
    "line-number-width": ("line_number_width", _parse_positive_int),
    "theme-name": ("theme_name", _parse_name),
    "syntax-highlighting-theme": ("syntax_highlighting_theme", _parse_name),
    "color": ("color_mode", _parse_color_mode),
}


def apply_config_values(
    config: Config, values: Mapping[str, str], source: str
) -> Config:
    """Return ``config`` updated with raw string ``values``.

    Args:
        config: Base configuration.
        values: Config key (``min-line-width``) to raw value.
        source: Where the values come from, for log messages.
    """
    updates: Dict[str, Any] = {}
    for key, raw_value in values.items():
        if key not in CONFIG_KEYS:
            logger.warning("Ignoring unknown %s setting %r", source, key)
            continue
        field_name, parse = CONFIG_KEYS[key]
        try:
            updates[field_name] = parse(raw_value)
        except ValueError as e:
            logger.warning("Ignoring invalid %s setting %s=%r: %s", source, key, raw_value, e)
    if updates:
        logger.debug("Settings from %s: %s", source, updates)
    return replace(config, **updates)


def parse_git_config(config_string: str) -> Dict[str, str]:
    """Extract split-diffs entries from ``git config -l`` output."""
    values: Dict[str, str] = {}
    for line in config_string.splitlines():
        key, sep, value = line.partition("=")
        if not sep or not key.startswith(GIT_CONFIG_KEY_PREFIX):
            continue
        values[key[len(GIT_CONFIG_KEY_PREFIX):]] = value
    return values


def get_git_config(config_string: str, base: Optional[Config] = None) -> Config:
    """Build a Config from ``git config -l`` output on top of ``base``."""
    return apply_config_values(base or Config(), parse_git_config(config_string), "git config")


def read_git_config_string(run: Callable[..., Any] = subprocess.run) -> str:
    """Return the output of ``git config -l``, or "" if git is unavailable."""
    try:
        result = run(
            ["git", "config", "-l"],
            capture_output=True,
            text=True,
            check=False,
        )
    except OSError as e:
        logger.debug("Could not run git config: %s", e)
        return ""
    if result.returncode != 0:
        logger.debug("git config exited with %d", result.returncode)
        return ""
    return result.stdout


def parse_env_config(environ: Mapping[str, str]) -> Dict[str, str]:
    """Extract ``SPLIT_DIFFS_<KEY>`` entries from an environment mapping."""
    values: Dict[str, str] = {}
    for key in CONFIG_KEYS:
        env_name = ENV_PREFIX + key.upper().replace("-", "_")
        if env_name in environ:
            values[key] = environ[env_name]
    return values


def load_config(
    env_file: Optional[str] = None,
    use_git_config: bool = True,
    environ: Optional[Mapping[str, str]] = None,
) -> Config:
    """Resolve configuration from git config and the environment.

    Args:
        env_file: Optional .env file loaded into the process environment
            (without overriding variables already set).
        use_git_config: Whether to read ``git config -l``.
        environ: Environment to read; defaults to ``os.environ``.
    """
    if env_file:
        if not load_dotenv(env_file):
            logger.warning("No settings loaded from env file %s", env_file)

    config = Config()
    if use_git_config:
        config = get_git_config(read_git_config_string(), config)

    env = os.environ if environ is None else environ
    return apply_config_values(config, parse_env_config(env), "environment")
