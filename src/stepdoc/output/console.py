"""Rich Console factory and theme for stepdoc output.

Creates Console instances that render to a StringIO buffer, preserving
the ``format_result() -> str`` contract. In non-TTY environments (tests,
pipes) Rich disables color codes on its own.

The group style → color mapping lives here because it is purely a
presentation lookup; the document model never consults it.
"""

from __future__ import annotations

from io import StringIO

from rich.console import Console
from rich.theme import Theme

STEPDOC_THEME = Theme(
    {
        "sd.ok": "bold green",
        "sd.error": "bold red",
        "sd.warning": "bold yellow",
        "sd.op": "bold cyan",
        "sd.key": "dim",
        "sd.id": "bold blue",
        "sd.title": "bold",
        "sd.step": "white",
        "sd.group.default": "magenta",
        "sd.group.info": "blue",
        "sd.group.warning": "yellow",
        "sd.group.success": "green",
        "sd.group.error": "red",
    }
)

_STYLE_NAMES: dict[str, str] = {
    "default": "sd.group.default",
    "info": "sd.group.info",
    "warning": "sd.group.warning",
    "success": "sd.group.success",
    "error": "sd.group.error",
}

STEP_ICONS: dict[str, str] = {
    "text": "T",
    "code": "<>",
    "html": "H",
    "image": "I",
    "file": "F",
}


def create_console(*, no_color: bool = False, width: int | None = None) -> Console:
    """Create a Console that renders to a StringIO buffer."""
    return Console(
        file=StringIO(),
        theme=STEPDOC_THEME,
        no_color=no_color,
        highlight=False,
        width=width or 120,
    )


def get_output(console: Console) -> str:
    """Extract rendered text from a StringIO-backed Console."""
    assert isinstance(console.file, StringIO)
    return console.file.getvalue()


def style_for_group(style: str | None) -> str:
    """Return the Rich style name for a group style; absent means default."""
    return _STYLE_NAMES.get(style or "default", _STYLE_NAMES["default"])
