"""Append-only query history stored as a tab-separated log."""

from __future__ import annotations

import logging
from dataclasses import dataclass
from datetime import datetime
from pathlib import Path

from .config import data_dir

logger = logging.getLogger(__name__)

TIME_FORMAT = "%Y-%m-%d %H:%M:%S"
TITLE_WIDTH = 80


@dataclass
class HistoryEntry:
    time: str
    query: str


def history_path() -> Path:
    return data_dir() / "history"


def escape(query: str) -> str:
    return query.replace("\\", "\\\\").replace("\n", "\\n").replace("\t", "\\t")


def unescape(text: str) -> str:
    out = []
    i = 0
    while i < len(text):
        ch = text[i]
        if ch == "\\" and i + 1 < len(text):
            nxt = text[i + 1]
            out.append({"n": "\n", "t": "\t", "\\": "\\"}.get(nxt, ch + nxt))
            i += 2
            continue
        out.append(ch)
        i += 1
    return "".join(out)


def append(query: str, path: Path | None = None, now: datetime | None = None) -> None:
    """Record a query. Failures are logged, never raised."""
    if not query:
        return
    path = path or history_path()
    stamp = (now or datetime.now()).strftime(TIME_FORMAT)
    try:
        path.parent.mkdir(parents=True, exist_ok=True)
        with open(path, "a", encoding="utf-8") as f:
            f.write(f"{stamp}\t{escape(query)}\n")
    except OSError as e:
        logger.warning("Failed to save history: %s", e)


def load_all(path: Path | None = None) -> list[HistoryEntry]:
    """All entries, oldest first."""
    path = path or history_path()
    try:
        with open(path, encoding="utf-8", errors="replace") as f:
            lines = f.read().splitlines()
    except FileNotFoundError:
        return []

    entries = []
    for line in lines:
        stamp, sep, query = line.partition("\t")
        if not sep:
            continue
        entries.append(HistoryEntry(time=stamp, query=unescape(query)))
    return entries


def clear(path: Path | None = None) -> None:
    path = path or history_path()
    path.unlink(missing_ok=True)


def first_line(text: str, max_len: int = TITLE_WIDTH) -> str:
    line = text.split("\n", 1)[0]
    if len(line) > max_len:
        return line[: max_len - 3] + "..."
    return line


def browse(entries: list[HistoryEntry]) -> str | None:
    """Let the user pick a past query, most recent first. None if dismissed."""
    from prompt_toolkit.shortcuts import radiolist_dialog

    values = [
        (entry.query, f"{first_line(entry.query)}  ({entry.time})")
        for entry in reversed(entries)
    ]
    return radiolist_dialog(
        title="Query History",
        text="Pick a query to run again:",
        values=values,
    ).run()
