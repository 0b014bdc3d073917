"""Prompt assembly from prompt words, piped stdin and interactive input."""

from __future__ import annotations

import sys
from typing import TextIO

from .errors import CanceledError

PIPE_WITH_INSTRUCTION = "Here is the input data:\n\n```\n{data}\n```\n\n{instruction}"
PIPE_ONLY = "Here is some data. Please analyze it:\n\n```\n{data}\n```"


def build_prompt(text: str, piped: str) -> str:
    """Combine the positional prompt text with piped stdin content."""
    if piped and text:
        return PIPE_WITH_INSTRUCTION.format(data=piped, instruction=text)
    if piped:
        return PIPE_ONLY.format(data=piped)
    return text


def _isatty(stream: TextIO) -> bool:
    try:
        return stream.isatty()
    except (AttributeError, ValueError):
        return False


def is_piped(stream: TextIO | None = None) -> bool:
    """True when stdin is not an interactive terminal."""
    return not _isatty(stream or sys.stdin)


def is_stdout_terminal(stream: TextIO | None = None) -> bool:
    return _isatty(stream or sys.stdout)


def read_pipe(stream: TextIO | None = None) -> str:
    """All of stdin as text. Undecodable bytes are replaced, not fatal."""
    stream = stream or sys.stdin
    buffer = getattr(stream, "buffer", None)
    if buffer is not None:
        return buffer.read().decode("utf-8", errors="replace")
    return stream.read()


def read_interactive_prompt() -> str:
    """Read one line with emacs-style editing. Esc or Ctrl-C cancels.

    The editor draws on stderr so stdout stays clean for the answer.
    """
    from prompt_toolkit import PromptSession
    from prompt_toolkit.key_binding import KeyBindings
    from prompt_toolkit.output import create_output

    bindings = KeyBindings()

    @bindings.add("escape", eager=True)
    def _cancel(event) -> None:
        event.app.exit(exception=KeyboardInterrupt())

    session: PromptSession[str] = PromptSession(
        key_bindings=bindings,
        output=create_output(stdout=sys.stderr),
    )
    try:
        text = session.prompt("> ")
    except (KeyboardInterrupt, EOFError):
        raise CanceledError() from None
    return text.strip()
