"""
Tests for the LiteLLM provider.
"""

import pytest
from types import SimpleNamespace
from unittest.mock import AsyncMock, patch

pytest.importorskip("litellm")

from linerelay.errors import ProviderError
from linerelay.providers.litellm_provider import LiteLLMProvider


def fake_completion(content="hi there", finish_reason="stop", usage=(3, 4, 7)):
    return SimpleNamespace(
        choices=[SimpleNamespace(
            message=SimpleNamespace(content=content),
            finish_reason=finish_reason,
        )],
        usage=SimpleNamespace(
            prompt_tokens=usage[0],
            completion_tokens=usage[1],
            total_tokens=usage[2],
        ) if usage else None,
    )


class TestProviderDetection:
    """Test provider detection and model formatting."""

    @pytest.mark.parametrize("model,expected", [
        ("gemini/gemini-2.0-flash", "gemini"),
        ("gemini-1.5-pro", "gemini"),
        ("gpt-4o-mini", "openai"),
        ("anthropic/claude-sonnet-4-5", "anthropic"),
        ("deepseek/deepseek-chat", "deepseek"),
        ("ollama/llama3", "ollama"),
        ("something-else", "gemini"),
    ])
    def test_detect_by_model(self, model, expected):
        provider = LiteLLMProvider(default_model=model)
        assert provider.provider_name == expected

    def test_detect_by_key(self):
        provider = LiteLLMProvider(api_key="sk-or-abc", default_model="gemini/gemini-2.0-flash")
        assert provider.provider_name == "openrouter"

    def test_detect_by_base(self):
        provider = LiteLLMProvider(api_base="http://localhost:11434", default_model="llama3")
        assert provider.provider_name == "ollama"

    def test_bare_gemini_name_gets_prefix(self):
        provider = LiteLLMProvider(default_model="gemini-2.0-flash")
        assert provider._format_model_name("gemini-2.0-flash") == "gemini/gemini-2.0-flash"

    def test_prefixed_name_is_kept(self):
        provider = LiteLLMProvider()
        assert provider._format_model_name("gemini/gemini-2.0-flash") == "gemini/gemini-2.0-flash"

    def test_openrouter_prefix(self):
        provider = LiteLLMProvider(api_key="sk-or-abc", default_model="gemini/gemini-2.0-flash")
        assert provider._format_model_name("gemini/gemini-2.0-flash") == "openrouter/gemini/gemini-2.0-flash"


class TestChat:
    """Test LiteLLMProvider.chat."""

    @pytest.mark.asyncio
    async def test_successful_completion(self):
        provider = LiteLLMProvider(api_key="AIza-test")
        messages = [{"role": "user", "content": "hello"}]

        with patch(
            "linerelay.providers.litellm_provider.acompletion",
            new=AsyncMock(return_value=fake_completion()),
        ) as mock_completion:
            response = await provider.chat(messages, max_tokens=50, temperature=0.2)

        assert response.content == "hi there"
        assert response.finish_reason == "stop"
        assert response.usage == {"prompt_tokens": 3, "completion_tokens": 4, "total_tokens": 7}

        kwargs = mock_completion.await_args.kwargs
        assert kwargs["model"] == "gemini/gemini-2.0-flash"
        assert kwargs["messages"] == messages
        assert kwargs["max_tokens"] == 50
        assert kwargs["temperature"] == 0.2
        assert kwargs["api_key"] == "AIza-test"

    @pytest.mark.asyncio
    async def test_none_content_is_passed_through(self):
        provider = LiteLLMProvider()

        with patch(
            "linerelay.providers.litellm_provider.acompletion",
            new=AsyncMock(return_value=fake_completion(content=None, usage=None)),
        ):
            response = await provider.chat([{"role": "user", "content": "x"}])

        assert response.content is None
        assert response.usage == {}

    @pytest.mark.asyncio
    async def test_failure_raises_provider_error(self):
        provider = LiteLLMProvider()

        with patch(
            "linerelay.providers.litellm_provider.acompletion",
            new=AsyncMock(side_effect=RuntimeError("429 quota exceeded")),
        ):
            with pytest.raises(ProviderError) as exc_info:
                await provider.chat([{"role": "user", "content": "x"}])

        assert exc_info.value.model == "gemini/gemini-2.0-flash"
        assert "quota" in str(exc_info.value)
        stats = provider.get_usage_stats()
        assert stats["failure_count"] == 1
        assert stats["request_count"] == 0

    @pytest.mark.asyncio
    async def test_usage_accumulates(self):
        provider = LiteLLMProvider()

        with patch(
            "linerelay.providers.litellm_provider.acompletion",
            new=AsyncMock(return_value=fake_completion()),
        ):
            await provider.chat([{"role": "user", "content": "a"}])
            await provider.chat([{"role": "user", "content": "b"}])

        stats = provider.get_usage_stats()
        assert stats["request_count"] == 2
        assert stats["total_tokens"] == 14
        assert stats["provider"] == "gemini"
