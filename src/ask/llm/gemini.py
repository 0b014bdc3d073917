"""Google Gemini streaming provider."""

from __future__ import annotations

import logging

import httpx

from ..errors import ProviderError
from .base import Provider
from .types import Emit

logger = logging.getLogger(__name__)


def _import_sdk():
    try:
        from google import genai
        from google.genai import errors, types  # noqa: F401
    except ImportError:
        raise ImportError(
            "google-genai package not installed. Run: pip install google-genai"
        )
    return genai


class GeminiProvider(Provider):
    """Gemini API through the google-genai async client."""

    name = "gemini"
    env_key = "GEMINI_API_KEY"
    default_model = "flash"
    aliases = {
        "flash": "gemini-2.5-flash",
        "pro": "gemini-2.5-pro",
        "flash-lite": "gemini-2.0-flash-lite",
    }

    def _make_client(self, api_key: str, base_url: str):
        genai = _import_sdk()
        http_options = genai.types.HttpOptions(base_url=base_url) if base_url else None
        return genai.Client(api_key=api_key or None, http_options=http_options)

    async def run(self, prompt: str, model: str, api_key: str, base_url: str, emit: Emit) -> None:
        genai = _import_sdk()
        model_id = self.resolve_model(model)
        logger.debug("gemini: streaming with model %s", model_id)

        try:
            client = self._make_client(api_key, base_url)
        except ValueError as e:
            # The constructor raises when no key can be found
            raise ProviderError(self.name, f"failed to create client: {e}") from e

        try:
            stream = await client.aio.models.generate_content_stream(
                model=model_id,
                contents=prompt,
            )
            async for chunk in stream:
                text = chunk.text
                if text:
                    await emit(text)
        except (genai.errors.APIError, httpx.HTTPError) as e:
            raise ProviderError(self.name, str(e)) from e
