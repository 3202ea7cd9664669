"""Rich console, theme, and board glyphs for tasktrack output.

Consoles render into a StringIO buffer so every renderer returns a plain
``str``. Rich drops color codes on its own when the target is not a TTY
(CliRunner, pipes).
"""

from __future__ import annotations

from io import StringIO

from rich.console import Console
from rich.theme import Theme

TT_THEME = Theme(
    {
        "tt.ok": "bold green",
        "tt.error": "bold red",
        "tt.warning": "bold yellow",
        "tt.op": "bold cyan",
        "tt.key": "dim",
        "tt.id": "blue",
        "tt.category": "bold",
        "tt.collapsed": "dim italic",
        "tt.done": "dim strike",
        "tt.open": "",
    }
)

DEFAULT_WIDTH = 100

EXPANDED_MARK = "▾"
COLLAPSED_MARK = "▸"


def create_console(*, no_color: bool = False, width: int | None = None) -> Console:
    """A themed Console writing to an in-memory buffer."""
    return Console(
        file=StringIO(),
        theme=TT_THEME,
        no_color=no_color,
        highlight=False,
        width=width or DEFAULT_WIDTH,
    )


def get_output(console: Console) -> str:
    """Text rendered so far by a console from :func:`create_console`."""
    assert isinstance(console.file, StringIO)
    return console.file.getvalue()


def category_marker(collapsed: bool) -> str:
    return COLLAPSED_MARK if collapsed else EXPANDED_MARK


def task_checkbox(done: bool) -> str:
    return "[x]" if done else "[ ]"


def task_style(done: bool) -> str:
    return "tt.done" if done else "tt.open"
