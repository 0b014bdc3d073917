"""Anthropic (Claude) streaming provider."""

from __future__ import annotations

import logging

from ..errors import ProviderError
from .base import Provider
from .types import Emit

logger = logging.getLogger(__name__)

MAX_TOKENS = 8192


def _import_sdk():
    try:
        import anthropic
    except ImportError:
        raise ImportError(
            "anthropic package not installed. Run: pip install anthropic"
        )
    return anthropic


class AnthropicProvider(Provider):
    """Claude Messages API with server-sent event streaming."""

    name = "anthropic"
    env_key = "ANTHROPIC_API_KEY"
    default_model = "sonnet"
    aliases = {
        "sonnet": "claude-sonnet-4-5-20250929",
        "opus": "claude-opus-4-5-20251101",
        "haiku": "claude-haiku-4-5-20251001",
    }

    def _make_client(self, api_key: str, base_url: str):
        anthropic = _import_sdk()
        kwargs = {"api_key": api_key or None}
        if base_url:
            kwargs["base_url"] = base_url
        return anthropic.AsyncAnthropic(**kwargs)

    async def run(self, prompt: str, model: str, api_key: str, base_url: str, emit: Emit) -> None:
        anthropic = _import_sdk()
        model_id = self.resolve_model(model)
        logger.debug("anthropic: streaming with model %s", model_id)

        # The SDK only notices a missing key once the request is built
        if not api_key and not base_url:
            raise ProviderError(self.name, f"{self.env_key} is not set")

        try:
            client = self._make_client(api_key, base_url)
            async with client.messages.stream(
                model=model_id,
                max_tokens=MAX_TOKENS,
                messages=[{"role": "user", "content": prompt}],
            ) as stream:
                async for text in stream.text_stream:
                    if text:
                        await emit(text)
        except anthropic.AnthropicError as e:
            raise ProviderError(self.name, str(e)) from e
