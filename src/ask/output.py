"""Output coordination: spinner lifecycle plus buffered or streamed answers."""

from __future__ import annotations

import logging
import sys
from collections.abc import Awaitable, Callable
from typing import TextIO

from .errors import RenderError
from .prompt import is_stdout_terminal
from .render import render_markdown, terminal_width
from .spinner import Spinner

logger = logging.getLogger(__name__)


class FirstWriteSink:
    """Wraps a stream and awaits ``on_first`` once before the first write."""

    def __init__(self, stream: TextIO, on_first: Callable[[], Awaitable[None]]):
        self.stream = stream
        self.on_first = on_first
        self.triggered = False
        self.last_char = ""

    async def write(self, text: str) -> None:
        if not text:
            return
        if not self.triggered:
            self.triggered = True
            await self.on_first()
        self.stream.write(text)
        self.stream.flush()
        self.last_char = text[-1]


class OutputCoordinator:
    """Decides buffered vs streaming output once and owns the spinner.

    Buffered mode (stdout is a terminal and raw output is off) collects the
    whole answer while the spinner runs, then prints it rendered as
    markdown. Streaming mode writes each fragment as it arrives; the first
    fragment stops the spinner before it reaches the terminal.
    """

    def __init__(
        self,
        raw: bool = False,
        theme: str = "auto",
        stdout: TextIO | None = None,
        stderr: TextIO | None = None,
        spinner: Spinner | None = None,
        is_terminal: bool | None = None,
        renderer: Callable[[str, int, str], str] = render_markdown,
    ):
        self.stdout = stdout or sys.stdout
        self.stderr = stderr or sys.stderr
        if is_terminal is None:
            is_terminal = is_stdout_terminal(self.stdout)
        self.buffered = is_terminal and not raw
        self.theme = theme
        self.renderer = renderer
        self.spinner = spinner or Spinner(self.stderr)
        self.out = FirstWriteSink(self.stdout, self.stop_spinner)
        self.err = FirstWriteSink(self.stderr, self.stop_spinner)
        self._chunks: list[str] = []
        logger.debug("output mode: %s", "buffered" if self.buffered else "streaming")

    def start(self) -> None:
        self.spinner.start()

    async def stop_spinner(self) -> None:
        await self.spinner.stop()

    async def emit(self, fragment: str) -> None:
        """Receive one fragment of the answer."""
        if self.buffered:
            self._chunks.append(fragment)
        else:
            await self.out.write(fragment)

    @property
    def text(self) -> str:
        return "".join(self._chunks)

    def flush(self) -> None:
        """Print whatever the backend produced. Call once, after success."""
        if not self.buffered:
            if self.out.triggered and self.out.last_char != "\n":
                self.stdout.write("\n")
                self.stdout.flush()
            return

        raw = self.text
        if not raw.strip():
            return
        try:
            rendered = self.renderer(raw.strip(), terminal_width(self.stdout), self.theme)
        except RenderError as e:
            logger.debug("falling back to raw output: %s", e)
            rendered = raw.rstrip() + "\n"
        self.stdout.write(rendered)
        self.stdout.flush()
