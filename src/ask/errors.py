"""Exception types raised by the execution paths."""

from __future__ import annotations

CLAUDE_INSTALL_URL = "https://docs.anthropic.com/en/docs/claude-code"


class AskError(Exception):
    """Base exception for ask."""


class ResolutionError(AskError):
    """The external assistant binary could not be found on PATH."""

    def __init__(self, binary: str):
        self.binary = binary
        super().__init__(
            f"{binary} CLI not found in PATH\nInstall it from: {CLAUDE_INSTALL_URL}"
        )


class LaunchError(AskError):
    """The subprocess could not be started."""

    def __init__(self, binary: str, reason: str):
        self.binary = binary
        super().__init__(f"failed to run {binary}: {reason}")


class ExitError(AskError):
    """The subprocess ran and exited with a non-zero status."""

    def __init__(self, binary: str, code: int):
        self.binary = binary
        self.code = code
        super().__init__(f"{binary} exited with code {code}")


class ProviderError(AskError):
    """A remote API reported an error or could not be reached."""

    def __init__(self, provider: str, message: str):
        self.provider = provider
        self.message = message
        super().__init__(f"{provider} API error: {message}")


class ProviderNotFoundError(AskError):
    """Raised when a provider name is not in the registry."""

    def __init__(self, name: str, known: list[str]):
        self.name = name
        self.known = known
        super().__init__(
            f"unknown provider {name!r} (available: {', '.join(known) or 'none'})"
        )


class RenderError(AskError):
    """Markdown styling failed. Recovered locally by printing raw text."""


class CanceledError(AskError):
    """Interactive input was aborted by the user."""

    def __init__(self) -> None:
        super().__init__("canceled")
