"""Streaming LLM provider layer."""

from .base import Provider
from .registry import ProviderRegistry, build_registry, resolve_model
from .types import Emit

__all__ = ["Emit", "Provider", "ProviderRegistry", "build_registry", "resolve_model"]
