"""LiteLLM provider implementation for multi-provider support."""

import os
from typing import Any

import litellm
from litellm import acompletion
from loguru import logger

from linerelay.errors import ProviderError
from linerelay.providers.base import LLMProvider, LLMResponse


class LiteLLMProvider(LLMProvider):
    """
    LLM provider using LiteLLM for multi-provider support.

    Gemini is the default backend; OpenAI, Anthropic, OpenRouter, DeepSeek
    and Ollama work through the same interface.

    Features:
    - Automatic provider detection from model name, key or base URL
    - Usage tracking
    """

    # Provider configurations
    PROVIDER_CONFIGS = {
        "gemini": {
            "env_key": "GEMINI_API_KEY",
            "prefix": "gemini/",
        },
        "openrouter": {
            "env_key": "OPENROUTER_API_KEY",
            "prefix": "openrouter/",
            "api_base": "https://openrouter.ai/api/v1",
        },
        "anthropic": {
            "env_key": "ANTHROPIC_API_KEY",
            "prefix": "",
        },
        "openai": {
            "env_key": "OPENAI_API_KEY",
            "prefix": "",
        },
        "deepseek": {
            "env_key": "DEEPSEEK_API_KEY",
            "prefix": "deepseek/",
            "api_base": "https://api.deepseek.com/v1",
        },
        "ollama": {
            "env_key": "",
            "prefix": "ollama/",
            "api_base": "http://localhost:11434",
        },
    }

    def __init__(
        self,
        api_key: str | None = None,
        api_base: str | None = None,
        default_model: str = "gemini/gemini-2.0-flash",
    ):
        super().__init__(api_key, api_base)
        self.default_model = default_model

        # Usage tracking
        self._total_tokens = 0
        self._prompt_tokens = 0
        self._completion_tokens = 0
        self._request_count = 0
        self._failure_count = 0
        self._last_error = ""

        # Detect provider type
        self._detected_provider = self._detect_provider(default_model, api_key, api_base)

        # Configure environment
        self._configure_environment(api_key)

        # Disable LiteLLM logging noise
        litellm.suppress_debug_info = True

    @property
    def provider_name(self) -> str:
        """Provider family detected for the default model."""
        return self._detected_provider

    def _detect_provider(
        self,
        model: str,
        api_key: str | None,
        api_base: str | None,
    ) -> str:
        """Detect provider from model name, key, or base URL."""
        model_lower = model.lower()

        # Check by API key prefix
        if api_key:
            if api_key.startswith("sk-or-"):
                return "openrouter"
            if api_key.startswith("sk-ant-"):
                return "anthropic"
            if api_key.startswith("AIza"):
                return "gemini"

        # Check by API base
        if api_base:
            if "openrouter" in api_base:
                return "openrouter"
            if "deepseek" in api_base:
                return "deepseek"
            if "11434" in api_base:
                return "ollama"

        # Check by model name prefix
        if "gemini" in model_lower:
            return "gemini"
        if model_lower.startswith("deepseek/"):
            return "deepseek"
        if model_lower.startswith("ollama/"):
            return "ollama"
        if model_lower.startswith("openrouter/"):
            return "openrouter"
        if "claude" in model_lower or model_lower.startswith("anthropic/"):
            return "anthropic"
        if "gpt" in model_lower or model_lower.startswith("openai/"):
            return "openai"

        return "gemini"

    def _configure_environment(self, api_key: str | None) -> None:
        """Configure environment variables for LiteLLM."""
        if not api_key:
            return

        provider_config = self.PROVIDER_CONFIGS.get(self._detected_provider, {})
        env_key = provider_config.get("env_key", "")

        if env_key:
            os.environ.setdefault(env_key, api_key)

    def _format_model_name(self, model: str) -> str:
        """Format model name for LiteLLM based on provider."""
        provider = self._detect_provider(model, None, None)
        config = self.PROVIDER_CONFIGS.get(provider, {})

        # Apply prefix if needed
        prefix = config.get("prefix", "")
        if prefix and not model.startswith(prefix) and "/" not in model:
            model = f"{prefix}{model}"

        # Special handling for OpenRouter
        if self._detected_provider == "openrouter" and not model.startswith("openrouter/"):
            model = f"openrouter/{model}"

        return model

    def _get_api_base_for_model(self, model: str) -> str | None:
        """Get API base URL for a specific model."""
        if self.api_base:
            return self.api_base

        provider = self._detect_provider(model, None, None)
        config = self.PROVIDER_CONFIGS.get(provider, {})
        return config.get("api_base")

    async def chat(
        self,
        messages: list[dict[str, Any]],
        model: str | None = None,
        max_tokens: int = 1024,
        temperature: float = 0.7,
    ) -> LLMResponse:
        """
        Send a chat completion request via LiteLLM.

        Args:
            messages: List of message dicts with 'role' and 'content'.
            model: Model identifier (e.g., 'gemini/gemini-2.0-flash').
            max_tokens: Maximum tokens in response.
            temperature: Sampling temperature.

        Returns:
            LLMResponse with the completion text.

        Raises:
            ProviderError: If the backend call fails for any reason.
        """
        model = model or self.default_model
        formatted_model = self._format_model_name(model)
        api_base = self._get_api_base_for_model(model)

        kwargs: dict[str, Any] = {
            "model": formatted_model,
            "messages": messages,
            "max_tokens": max_tokens,
            "temperature": temperature,
        }

        if api_base:
            kwargs["api_base"] = api_base

        if self.api_key:
            kwargs["api_key"] = self.api_key

        try:
            response = await acompletion(**kwargs)
        except Exception as e:
            self._failure_count += 1
            self._last_error = str(e)
            logger.warning(f"Completion failed for {formatted_model}: {e}")
            raise ProviderError(str(e), model=formatted_model) from e

        result = self._parse_response(response)
        self._request_count += 1

        # Track usage
        if result.usage:
            self._total_tokens += result.usage.get("total_tokens", 0)
            self._prompt_tokens += result.usage.get("prompt_tokens", 0)
            self._completion_tokens += result.usage.get("completion_tokens", 0)

        return result

    def _parse_response(self, response: Any) -> LLMResponse:
        """Parse LiteLLM response into our standard format."""
        choice = response.choices[0]
        message = choice.message

        usage = {}
        if hasattr(response, "usage") and response.usage:
            usage = {
                "prompt_tokens": response.usage.prompt_tokens or 0,
                "completion_tokens": response.usage.completion_tokens or 0,
                "total_tokens": response.usage.total_tokens or 0,
            }

        return LLMResponse(
            content=message.content,
            finish_reason=choice.finish_reason or "stop",
            usage=usage,
        )

    def get_default_model(self) -> str:
        """Get the default model."""
        return self.default_model

    def get_usage_stats(self) -> dict[str, Any]:
        """Get usage statistics."""
        return {
            "provider": self._detected_provider,
            "total_tokens": self._total_tokens,
            "prompt_tokens": self._prompt_tokens,
            "completion_tokens": self._completion_tokens,
            "request_count": self._request_count,
            "failure_count": self._failure_count,
            "last_error": self._last_error,
        }
