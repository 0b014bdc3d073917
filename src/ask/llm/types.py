"""Shared types for streaming providers."""

from __future__ import annotations

from collections.abc import Awaitable, Callable

# Called once per text fragment, in arrival order.
Emit = Callable[[str], Awaitable[None]]
