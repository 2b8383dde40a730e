# split_diffs/tests/test_cli.py
"""Tests for the command line entry point."""

import io
import os

import pytest
from rich.color import ColorSystem

from .. import cli
from .. import config as config_module
from ..cli import apply_cli_overrides, build_parser, get_color_system, get_screen_width, main
from ..config import Config


@pytest.fixture
def clean_config(monkeypatch):
    """Isolate tests from the user's git config and environment."""
    monkeypatch.setattr(config_module, "read_git_config_string", lambda: "")
    for name in list(os.environ):
        if name.startswith("SPLIT_DIFFS_"):
            monkeypatch.delenv(name)


class TestArguments:
    """Tests for flag parsing and config overrides."""

    def test_no_flags_keep_config(self):
        args = build_parser().parse_args([])
        config = Config(theme_name="light", min_line_width=60)
        assert apply_cli_overrides(config, args) == config

    def test_flags_override_config(self):
        args = build_parser().parse_args([
            "--min-line-width", "50",
            "--no-wrap",
            "--no-highlight-changes",
            "--theme", "monochrome",
            "--syntax-theme", "monokai",
            "--color", "always",
        ])
        config = apply_cli_overrides(Config(), args)
        assert config == Config(
            min_line_width=50,
            wrap_lines=False,
            highlight_line_changes=False,
            theme_name="monochrome",
            syntax_highlighting_theme="monokai",
            color_mode="always",
        )

    def test_preview_theme_selects_theme(self):
        args = build_parser().parse_args(["--theme", "dark", "--preview-theme", "light"])
        assert apply_cli_overrides(Config(), args).theme_name == "light"

    def test_invalid_color_mode(self):
        with pytest.raises(SystemExit):
            build_parser().parse_args(["--color", "sometimes"])

    def test_explicit_width(self):
        assert get_screen_width(132) == 132


class TestColorSystem:
    """Tests for resolving --color."""

    def test_never(self):
        assert get_color_system("never", io.StringIO()) is None

    def test_always(self):
        assert get_color_system("always", io.StringIO()) == ColorSystem.TRUECOLOR

    def test_auto_without_terminal(self, monkeypatch):
        for name in ("FORCE_COLOR", "TTY_COMPATIBLE", "COLORTERM"):
            monkeypatch.delenv(name, raising=False)
        assert get_color_system("auto", io.StringIO()) is None


class TestMain:
    """Tests for running the whole program."""

    def test_list_themes(self, capsys):
        assert main(["--list-themes"]) == 0
        names = capsys.readouterr().out.split()
        assert "dark" in names
        assert "none" in names

    def test_preview_theme(self, capsys, clean_config):
        assert main(["--preview-theme", "light", "--width", "120", "--color", "never"]) == 0
        rows = capsys.readouterr().out.rstrip("\n").split("\n")
        assert rows[0].startswith("commit 7c3f1a2b")
        assert any("setup.py -> scripts/setup.py" in row for row in rows)
        assert all(len(row) == 120 for row in rows)

    def test_reads_stdin(self, capsys, clean_config, monkeypatch):
        stdin = io.TextIOWrapper(io.BytesIO(b"@@ -1 +1 @@\n-old\n+new\n"))
        monkeypatch.setattr(cli.sys, "stdin", stdin)
        assert main(["--width", "80", "--color", "never", "--min-line-width", "40"]) == 0
        rows = capsys.readouterr().out.rstrip("\n").split("\n")
        assert rows == [
            "@@ -1 +1 @@".ljust(80),
            "    1 - old".ljust(40) + "    1 + new".ljust(40),
        ]

    def test_unknown_theme(self, capsys, clean_config):
        assert main(["--theme", "no-such-theme", "--width", "80"]) == 1
        assert "no-such-theme" in capsys.readouterr().err

    def test_invalid_width(self, capsys):
        with pytest.raises(SystemExit):
            main(["--width", "0"])
