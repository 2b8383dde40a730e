# split_diffs/cli.py
"""Command line entry point.

Usage:
    git log -p | split-diffs
    git -c core.pager='split-diffs | less -RFX' show HEAD
    split-diffs --preview-theme light
"""

import argparse
import io
import logging
import os
import shutil
import sys
from dataclasses import replace
from typing import List, Optional, TextIO

from rich.color import ColorSystem
from rich.console import COLOR_SYSTEMS, Console

from .config import COLOR_MODES, Config, load_config
from .context import get_context_for_config
from .errors import SplitDiffsError
from .pipeline import transform_contents_streaming
from .theme import get_theme_names

logger = logging.getLogger(__name__)

SAMPLE_DIFF = """\
commit 7c3f1a2b9d4e5f60718293a4b5c6d7e8f9012345
Author: Jane Doe <jane@example.com>
Date:   Tue Mar 2 10:15:00 2021 +0100

    Add sonos controller to the Brewfile

    Also sort the remaining entries.

diff --git a/Brewfile b/Brewfile
index 4f0e1c2..9a8b7c6 100644
--- a/Brewfile
+++ b/Brewfile
@@ -1,4 +1,5 @@ tap 'homebrew/bundle'
 brew 'socat'
+brew 'sonos'
 brew 'terminal-notifier'
-brew 'wget', args: ['with-iri']
+brew 'wget', args: ['with-libressl']
 brew 'zsh'
diff --git a/setup.py b/scripts/setup.py
similarity index 90%
rename from setup.py
rename to scripts/setup.py
index 1234567..89abcde 100644
--- a/setup.py
+++ b/scripts/setup.py
@@ -10,7 +10,7 @@ def install(packages):
     for package in packages:
         if package.startswith("#"):
             continue
-        run(["brew", "install", package], check=True)
+        run(["brew", "install", "--quiet", package], check=True)
     return len(packages)


"""


def get_color_system(mode: str, stream: TextIO) -> Optional[ColorSystem]:
    """Resolve a ``--color`` mode to the color system to render with."""
    if mode == "never":
        return None
    if mode == "always":
        return ColorSystem.TRUECOLOR
    detected = Console(file=stream).color_system
    return COLOR_SYSTEMS.get(detected) if detected else None


def get_screen_width(width: Optional[int]) -> int:
    if width:
        return width
    return shutil.get_terminal_size().columns


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="split-diffs",
        description="Show git diffs and logs side by side in the terminal",
        formatter_class=argparse.RawDescriptionHelpFormatter,
        epilog="""
Examples:
  # Page a log through split-diffs
  git log -p | split-diffs | less -RFX

  # Use as git's pager
  git config --global core.pager "split-diffs | less -RFX"

  # Settings can also live in git config
  git config --global split-diffs.theme-name light
        """,
    )

    # Layout
    parser.add_argument(
        "--width", "-w",
        type=int,
        metavar="COLUMNS",
        help="Screen width (default: terminal width)",
    )
    parser.add_argument(
        "--min-line-width",
        type=int,
        metavar="COLUMNS",
        help="Minimum width of a side before falling back to unified layout",
    )
    parser.add_argument(
        "--no-wrap",
        action="store_true",
        help="Truncate long lines instead of wrapping them",
    )
    parser.add_argument(
        "--no-highlight-changes",
        action="store_true",
        help="Do not highlight changed words within lines",
    )

    # Colors
    parser.add_argument(
        "--theme",
        metavar="NAME",
        help="Color theme (see --list-themes)",
    )
    parser.add_argument(
        "--syntax-theme",
        metavar="STYLE",
        help="Pygments style for syntax highlighting",
    )
    parser.add_argument(
        "--color",
        choices=COLOR_MODES,
        help="When to emit colors (default: auto)",
    )
    parser.add_argument(
        "--list-themes",
        action="store_true",
        help="List available themes and exit",
    )
    parser.add_argument(
        "--preview-theme",
        metavar="NAME",
        help="Render a sample diff with a theme and exit",
    )

    # Configuration
    parser.add_argument(
        "--env-file",
        help="Path to .env file with SPLIT_DIFFS_* settings",
    )
    parser.add_argument(
        "--verbose", "-v",
        action="store_true",
        help="Verbose logging",
    )
    return parser


def apply_cli_overrides(config: Config, args: argparse.Namespace) -> Config:
    """Layer command line flags over the resolved configuration."""
    overrides = {}
    if args.min_line_width is not None:
        overrides["min_line_width"] = args.min_line_width
    if args.no_wrap:
        overrides["wrap_lines"] = False
    if args.no_highlight_changes:
        overrides["highlight_line_changes"] = False
    if args.theme:
        overrides["theme_name"] = args.theme
    if args.preview_theme:
        overrides["theme_name"] = args.preview_theme
    if args.syntax_theme:
        overrides["syntax_highlighting_theme"] = args.syntax_theme
    if args.color:
        overrides["color_mode"] = args.color
    return replace(config, **overrides)


def main(argv: Optional[List[str]] = None) -> int:
    parser = build_parser()
    args = parser.parse_args(argv)

    # Output goes to stdout, so logs stay on stderr
    logging.basicConfig(
        level=logging.DEBUG if args.verbose else logging.WARNING,
        format="%(asctime)s [%(levelname)s] %(name)s: %(message)s",
        stream=sys.stderr,
    )

    if args.width is not None and args.width < 1:
        parser.error("--width must be positive")
    if args.min_line_width is not None and args.min_line_width < 1:
        parser.error("--min-line-width must be positive")

    if args.list_themes:
        for name in get_theme_names():
            print(name)
        return 0

    try:
        config = apply_cli_overrides(load_config(env_file=args.env_file), args)
        logger.debug("Resolved config: %s", config)
        context = get_context_for_config(
            config,
            screen_width=get_screen_width(args.width),
            color_system=get_color_system(config.color_mode, sys.stdout),
        )

        if args.preview_theme:
            input_stream = io.BytesIO(SAMPLE_DIFF.encode("utf-8"))
        else:
            input_stream = sys.stdin.buffer
        if not transform_contents_streaming(context, input_stream, sys.stdout):
            # Python flushes stdout again at exit, which would fail too
            devnull = os.open(os.devnull, os.O_WRONLY)
            os.dup2(devnull, sys.stdout.fileno())
    except SplitDiffsError as e:
        print(f"split-diffs: {e}", file=sys.stderr)
        return 1
    except KeyboardInterrupt:
        return 130

    return 0
