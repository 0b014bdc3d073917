"""Markdown rendering for terminal output."""

from __future__ import annotations

import io
import os
import sys
from typing import TextIO

from .errors import RenderError

DEFAULT_WIDTH = 80

CODE_THEMES = {
    "dark": "monokai",
    "light": "default",
    "dracula": "dracula",
    "pink": "fruity",
}
PLAIN_THEMES = {"ascii", "notty"}
THEMES = ("auto", *CODE_THEMES, *sorted(PLAIN_THEMES))


def terminal_width(stream: TextIO | None = None) -> int:
    """Column count of the terminal behind ``stream`` (stderr by default)."""
    stream = stream or sys.stderr
    try:
        width = os.get_terminal_size(stream.fileno()).columns
    except (AttributeError, OSError, ValueError, io.UnsupportedOperation):
        return DEFAULT_WIDTH
    return width if width > 0 else DEFAULT_WIDTH


def render_markdown(text: str, width: int, theme: str = "auto") -> str:
    """Render ``text`` as styled terminal output ending in one newline.

    Raises:
        RenderError: rich could not render the document.
    """
    from rich.console import Console
    from rich.markdown import Markdown

    plain = theme in PLAIN_THEMES
    buf = io.StringIO()
    try:
        console = Console(
            file=buf,
            width=width,
            force_terminal=not plain,
            no_color=plain,
            color_system=None if plain else "truecolor",
            highlight=False,
        )
        console.print(Markdown(text, code_theme=CODE_THEMES.get(theme, "monokai")))
    except Exception as e:
        raise RenderError(f"markdown rendering failed: {e}") from e
    return buf.getvalue().strip() + "\n"
