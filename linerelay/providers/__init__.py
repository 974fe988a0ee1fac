"""LLM provider abstraction module."""

from linerelay.providers.base import LLMProvider, LLMResponse
from linerelay.providers.litellm_provider import LiteLLMProvider
from linerelay.providers.session import BackendSession

__all__ = [
    "LLMProvider",
    "LLMResponse",
    "LiteLLMProvider",
    "BackendSession",
]
