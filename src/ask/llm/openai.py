"""OpenAI-compatible streaming provider (OpenAI, xAI, Ollama)."""

from __future__ import annotations

import logging

from ..errors import ProviderError
from .base import Provider
from .types import Emit

logger = logging.getLogger(__name__)

# Sent in place of an empty key; the SDK refuses to build a client without one.
NO_KEY = "no-key"


def _import_sdk():
    try:
        import openai
    except ImportError:
        raise ImportError(
            "openai package not installed. Run: pip install openai"
        )
    return openai


class OpenAICompatProvider(Provider):
    """Chat Completions streaming against any OpenAI-compatible endpoint.

    One class serves several vendors; each registered instance differs
    only in its data (name, key variable, default URL, aliases).
    """

    def __init__(
        self,
        name: str,
        env_key: str,
        default_url: str,
        aliases: dict[str, str],
        default_model: str,
    ):
        self.name = name
        self.env_key = env_key
        self.default_url = default_url
        self.aliases = dict(aliases)
        self.default_model = default_model

    def _make_client(self, api_key: str, base_url: str):
        openai = _import_sdk()
        # Never None: the SDK would fall back to OPENAI_API_KEY for every vendor
        return openai.AsyncOpenAI(
            api_key=api_key or NO_KEY,
            base_url=base_url or self.default_url,
        )

    async def run(self, prompt: str, model: str, api_key: str, base_url: str, emit: Emit) -> None:
        openai = _import_sdk()
        model_id = self.resolve_model(model)
        logger.debug("%s: streaming with model %s from %s", self.name, model_id, base_url or self.default_url)

        if self.env_key and not api_key and not base_url:
            raise ProviderError(self.name, f"{self.env_key} is not set")

        try:
            client = self._make_client(api_key, base_url)
            stream = await client.chat.completions.create(
                model=model_id,
                messages=[{"role": "user", "content": prompt}],
                stream=True,
            )
            async for chunk in stream:
                if not chunk.choices:
                    continue
                content = chunk.choices[0].delta.content
                if content:
                    await emit(content)
        except openai.OpenAIError as e:
            raise ProviderError(self.name, str(e)) from e


def openai_provider() -> OpenAICompatProvider:
    return OpenAICompatProvider(
        name="openai",
        env_key="OPENAI_API_KEY",
        default_url="https://api.openai.com/v1",
        aliases={
            "gpt4o": "gpt-4o",
            "gpt4o-mini": "gpt-4o-mini",
            "o3-mini": "o3-mini",
            "o4-mini": "o4-mini",
        },
        default_model="gpt4o",
    )


def xai_provider() -> OpenAICompatProvider:
    return OpenAICompatProvider(
        name="xai",
        env_key="XAI_API_KEY",
        default_url="https://api.x.ai/v1",
        aliases={
            "grok3": "grok-3-latest",
            "grok3-mini": "grok-3-mini-latest",
        },
        default_model="grok3",
    )


def ollama_provider() -> OpenAICompatProvider:
    """Local Ollama through its OpenAI-compatible endpoint. No key needed."""
    return OpenAICompatProvider(
        name="ollama",
        env_key="",
        default_url="http://localhost:11434/v1",
        aliases={
            "llama3": "llama3",
            "qwen": "qwen3",
            "deepseek": "deepseek-r1",
        },
        default_model="llama3",
    )
