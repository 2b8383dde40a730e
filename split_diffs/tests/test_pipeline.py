# split_diffs/tests/test_pipeline.py
"""End-to-end tests for the streaming transform."""

import io

from rich.color import ColorSystem

from ..config import Config
from ..context import Context, get_context_for_config
from ..parser import FileHeader, Hunk, iter_diff_events
from ..pipeline import iter_rendered_lines, iter_replace_tabs_in_events, transform_contents_streaming
from ..syntax_highlight import SyntaxHighlighter
from ..theme import IDENTITY_THEME, Theme, ThemeColor, ColorRgba

GIT_LOG = """\
commit 0123456789abcdef0123456789abcdef01234567
Author: Jane Doe <jane@example.com>
Date:   Tue Mar 2 10:15:00 2021 +0100

    Add sonos

diff --git a/Brewfile b/Brewfile
index 4f0e1c2..9a8b7c6 100644
--- a/Brewfile
+++ b/Brewfile
@@ -1,2 +1,3 @@
 brew 'socat'
+brew 'sonos'
 brew 'terminal-notifier'
"""

SPACED_PATH_DIFF = (
    "diff --git a/my file.py b/my file.py\n"
    "--- a/my file.py\t\n"
    "+++ b/my file.py\t\n"
    "@@ -1 +1 @@\n"
    "-\treturn 0\n"
    "+\treturn 1"
)


def make_context(screen_width=80, **config):
    config.setdefault("min_line_width", 40)
    config.setdefault("wrap_lines", False)
    return Context(
        config=Config(**config),
        theme=IDENTITY_THEME,
        screen_width=screen_width,
        highlighter=None,
        color_system=None,
    )


def transform(context, text):
    output = io.StringIO()
    transform_contents_streaming(context, io.BytesIO(text.encode("utf-8")), output)
    return output.getvalue()


class TestTransformContentsStreaming:
    """Tests for the full transform."""

    def test_git_log(self):
        lines = transform(make_context(), GIT_LOG).split("\n")
        assert lines[-1] == ""
        rows = lines[:-1]
        assert rows[0].rstrip() == "commit 0123456789abcdef0123456789abcdef01234567"
        assert rows[4].rstrip() == "    Add sonos"
        assert "─" * 80 in rows
        assert " ■■ Brewfile".ljust(80) in rows
        assert "@@ -1,2 +1,3 @@".ljust(80) in rows
        assert rows[-1].rstrip() == (
            "    2   brew 'terminal-notifier'".ljust(40) + "    3   brew 'terminal-notifier'"
        )
        assert all(len(row) == 80 for row in rows)

    def test_lines_outside_commits_pass_through(self):
        text = "just some text\n\x1b[33mwith color\x1b[m\n"
        assert transform(make_context(), text) == text

    def test_tabs_are_expanded(self):
        text = "@@ -1 +1 @@\n-\tx\n+\ty\n"
        output = transform(make_context(), text)
        assert "\t" not in output
        assert "-     x" in output

    def test_path_with_space_keeps_exact_file_name(self):
        events = list(iter_replace_tabs_in_events(iter_diff_events(SPACED_PATH_DIFF.split("\n"))))
        [file_header] = [event for event in events if isinstance(event, FileHeader)]
        [hunk] = [event for event in events if isinstance(event, Hunk)]
        assert (file_header.file_name_a, file_header.file_name_b) == ("my file.py", "my file.py")
        assert [part.label for part in hunk.parts] == ["my file.py", "my file.py"]
        assert hunk.parts[1].lines == ["+    return 1"]

    def test_path_with_space_is_syntax_highlighted(self):
        context = make_context()
        context.color_system = ColorSystem.TRUECOLOR
        context.highlighter = SyntaxHighlighter("monokai")
        rows = list(iter_rendered_lines(context, SPACED_PATH_DIFF.split("\n")))
        [row] = [row for row in rows if "return" in row]
        assert "\x1b[" in row

    def test_commit_without_diff_renders_no_hunk(self):
        text = (
            "commit 1111111\n"
            "Author: Jane Doe <jane@example.com>\n"
            "\n"
            "    Just a message\n"
        )
        rows = transform(make_context(), text).rstrip("\n").split("\n")
        assert [row.rstrip() for row in rows] == [
            "commit 1111111",
            "Author: Jane Doe <jane@example.com>",
            "",
            "    Just a message",
        ]

    def test_broken_pipe_stops_quietly(self):
        class ClosedOutput(io.StringIO):
            def write(self, text):
                raise BrokenPipeError()

        context = make_context()
        completed = transform_contents_streaming(
            context, io.BytesIO(GIT_LOG.encode("utf-8")), ClosedOutput()
        )
        assert completed is False

    def test_completed(self):
        completed = transform_contents_streaming(
            make_context(), io.BytesIO(b"text\n"), io.StringIO()
        )
        assert completed is True


class TestColors:
    """Tests for ANSI output."""

    def test_theme_colors_are_rendered(self):
        theme = Theme(inserted_line=ThemeColor(color=ColorRgba(0, 255, 0)))
        context = Context(
            config=Config(min_line_width=40, wrap_lines=False),
            theme=theme,
            screen_width=80,
            color_system=ColorSystem.TRUECOLOR,
        )
        rows = list(iter_rendered_lines(context, GIT_LOG.split("\n")))
        assert any("\x1b[38;2;0;255;0m" in row for row in rows)

    def test_default_theme_renders(self):
        config = Config(min_line_width=40, theme_name="dark")
        context = get_context_for_config(config, screen_width=100)
        rows = list(iter_rendered_lines(context, GIT_LOG.split("\n")))
        assert any("brew" in row for row in rows)
        assert any("\x1b[" in row for row in rows)
