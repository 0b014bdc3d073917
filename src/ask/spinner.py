"""Progress bar drawn in a temporary row at the top of the terminal."""

from __future__ import annotations

import asyncio
import logging
import sys
from typing import TextIO

from .render import terminal_width

logger = logging.getLogger(__name__)

TICK_INTERVAL = 0.012
STOP_TIMEOUT = 0.5
MIN_SEGMENT = 6

BAR_GLYPH = "▔"  # upper one-eighth block
HIGHLIGHT = "\033[38;2;227;108;56m"
DIM = "\033[38;2;50;24;12m"
RESET = "\033[0m"

# Save cursor, go to row 1, insert a blank line, restore and step down
# to follow the content that just moved.
RESERVE_ROW = "\033[s\033[1;1H\033[L\033[u\033[B"
# Save cursor, delete row 1, restore and step back up.
RELEASE_ROW = "\033[s\033[1;1H\033[M\033[u\033[A"


class Spinner:
    """A bouncing highlighted segment in a reserved first row.

    The animation runs as its own task. The main flow talks to it only
    through two events: ``stop requested`` and ``stopped``. Teardown
    always runs in the task's ``finally`` block, so the row is released
    on normal stop, on cancellation and on error.
    """

    def __init__(
        self,
        stream: TextIO | None = None,
        interval: float = TICK_INTERVAL,
        stop_timeout: float = STOP_TIMEOUT,
        enabled: bool | None = None,
    ):
        self.stream = stream or sys.stderr
        self.interval = interval
        self.stop_timeout = stop_timeout
        if enabled is None:
            enabled = _isatty(self.stream)
        self.enabled = enabled
        self.position = 0
        self.direction = 1
        self.frames = 0
        self._stop_requested = asyncio.Event()
        self._stopped = asyncio.Event()
        self._task: asyncio.Task | None = None

    @property
    def running(self) -> bool:
        return self._task is not None and not self._stopped.is_set()

    def start(self) -> Spinner:
        if self._task is None:
            if self.enabled:
                self._task = asyncio.create_task(self._run())
            else:
                self._task = asyncio.create_task(self._wait_only())
        return self

    async def stop(self) -> None:
        """Stop the animation and release the row.

        Safe to call repeatedly and concurrently: only the first call
        requests teardown, every caller waits for it to finish, bounded by
        ``stop_timeout``.
        """
        if self._task is None:
            return
        self._stop_requested.set()
        try:
            await asyncio.wait_for(self._stopped.wait(), self.stop_timeout)
        except asyncio.TimeoutError:
            logger.warning("Spinner did not stop within %.1fs", self.stop_timeout)

    async def __aenter__(self) -> Spinner:
        return self.start()

    async def __aexit__(self, *exc_info) -> None:
        await self.stop()

    async def _wait_only(self) -> None:
        try:
            await self._stop_requested.wait()
        finally:
            self._stopped.set()

    async def _run(self) -> None:
        width = terminal_width(self.stream)
        segment = max(width // 5, MIN_SEGMENT)
        max_pos = max(width - segment, 0)

        self._write(RESERVE_ROW)
        try:
            while not self._stop_requested.is_set():
                try:
                    await asyncio.wait_for(self._stop_requested.wait(), self.interval)
                except asyncio.TimeoutError:
                    self._write(f"\033[s\033[1;1H{self.frame(width, segment)}\033[u")
                    self.frames += 1
                    self.advance(max_pos)
        finally:
            self._write(RELEASE_ROW)
            self._stopped.set()

    def frame(self, width: int, segment: int) -> str:
        parts = []
        for i in range(width):
            lit = self.position <= i < self.position + segment
            parts.append((HIGHLIGHT if lit else DIM) + BAR_GLYPH)
        parts.append(RESET)
        return "".join(parts)

    def advance(self, max_pos: int) -> None:
        """Move one cell, reversing exactly at either end."""
        self.position += self.direction
        if self.position >= max_pos:
            self.position = max_pos
            self.direction = -1
        elif self.position <= 0:
            self.position = 0
            self.direction = 1

    def _write(self, text: str) -> None:
        try:
            self.stream.write(text)
            self.stream.flush()
        except (OSError, ValueError) as e:
            logger.debug("spinner write failed: %s", e)


def _isatty(stream: TextIO) -> bool:
    try:
        return stream.isatty()
    except (AttributeError, ValueError):
        return False
