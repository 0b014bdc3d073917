"""Provider registry: built once at startup, looked up by name afterwards."""

from __future__ import annotations

import logging
from collections.abc import Iterator

from ..errors import ProviderNotFoundError
from .anthropic import AnthropicProvider
from .base import Provider
from .gemini import GeminiProvider
from .openai import ollama_provider, openai_provider, xai_provider

logger = logging.getLogger(__name__)


class ProviderRegistry:
    """Name-keyed table of providers, kept in registration order."""

    def __init__(self) -> None:
        self._providers: dict[str, Provider] = {}

    def register(self, provider: Provider) -> None:
        if provider.name in self._providers:
            raise ValueError(f"Provider already registered: {provider.name}")
        self._providers[provider.name] = provider
        logger.debug("registered provider %s", provider.name)

    def lookup(self, name: str) -> Provider:
        try:
            return self._providers[name]
        except KeyError:
            raise ProviderNotFoundError(name, self.names()) from None

    def names(self) -> list[str]:
        return list(self._providers)

    def __contains__(self, name: object) -> bool:
        return name in self._providers

    def __iter__(self) -> Iterator[Provider]:
        return iter(list(self._providers.values()))

    def __len__(self) -> int:
        return len(self._providers)


def resolve_model(provider: Provider, alias: str) -> str:
    """Concrete model id for ``alias`` on ``provider`` (empty means default)."""
    return provider.resolve_model(alias)


def build_registry() -> ProviderRegistry:
    """Registry with every built-in backend, in a stable order."""
    registry = ProviderRegistry()
    for provider in (
        AnthropicProvider(),
        GeminiProvider(),
        openai_provider(),
        xai_provider(),
        ollama_provider(),
    ):
        registry.register(provider)
    return registry
