"""Abstract base for streaming LLM providers."""

from __future__ import annotations

from abc import ABC, abstractmethod

from .types import Emit


class Provider(ABC):
    """Base class for remote backends (Anthropic, Gemini, OpenAI-compatible).

    Providers are stateless: a client is built per ``run`` call from the
    key and base URL handed in, so one instance can be registered once and
    shared for the life of the process.
    """

    name: str = ""
    env_key: str = ""  # "" means no key required
    default_model: str = ""
    aliases: dict[str, str] = {}

    def model_aliases(self) -> list[str]:
        return list(self.aliases)

    def resolve_model(self, alias: str) -> str:
        """Map an alias to a concrete model id.

        An empty alias resolves the provider's default alias instead.
        Unknown aliases are returned unchanged and treated as concrete ids.
        """
        if not alias:
            alias = self.default_model
        return self.aliases.get(alias, alias)

    @abstractmethod
    async def run(
        self,
        prompt: str,
        model: str,
        api_key: str,
        base_url: str,
        emit: Emit,
    ) -> None:
        """Stream a completion for ``prompt``, awaiting ``emit`` per fragment.

        Args:
            prompt: The user prompt, sent as a single user message.
            model: Alias or concrete model id; empty selects the default.
            api_key: Key read from ``env_key`` (may be empty).
            base_url: Endpoint override; empty uses the provider default.
            emit: Awaited for each non-empty text fragment, in order.

        Raises:
            ProviderError: The API reported an error or was unreachable.
        """
        ...

    def __repr__(self) -> str:
        return f"{type(self).__name__}(name={self.name!r})"
