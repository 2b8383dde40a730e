# split_diffs/renderers/__init__.py
"""Renderers turning parser events into fixed-width display rows."""

from .base import HunkRenderer, format_and_fit_hunk_line
from .headers import (
    iter_format_commit_body_line,
    iter_format_commit_header_line,
    iter_format_file_name,
)
from .hunk import get_hunk_renderer, get_line_changes, iter_format_hunk
from .side_by_side import SideBySideRenderer
from .unified import UnifiedRenderer

__all__ = [
    "HunkRenderer",
    "SideBySideRenderer",
    "UnifiedRenderer",
    "format_and_fit_hunk_line",
    "get_hunk_renderer",
    "get_line_changes",
    "iter_format_commit_body_line",
    "iter_format_commit_header_line",
    "iter_format_file_name",
    "iter_format_hunk",
]
