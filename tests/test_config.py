"""
Tests for configuration loading and the credential check.
"""

import pytest

from linerelay.config.loader import load_config, resolve_persona
from linerelay.config.persona import DEFAULT_PERSONA
from linerelay.config.schema import Config
from linerelay.errors import ConfigurationError


class TestLoadConfig:
    """Test environment loading."""

    def test_defaults(self):
        config = load_config()

        assert config.agent.model == "gemini/gemini-2.0-flash"
        assert config.agent.history_turns == 0
        assert config.server.webhook_path == "/webhook"
        assert config.line.api_base == "https://api.line.me"

    def test_prefixed_nested_variables(self, monkeypatch):
        monkeypatch.setenv("LINERELAY_LINE__CHANNEL_ACCESS_TOKEN", "tok")
        monkeypatch.setenv("LINERELAY_LINE__CHANNEL_SECRET", "sec")
        monkeypatch.setenv("LINERELAY_PROVIDER__API_KEY", "key")
        monkeypatch.setenv("LINERELAY_AGENT__HISTORY_TURNS", "4")

        config = load_config()

        assert config.line.channel_access_token == "tok"
        assert config.line.channel_secret == "sec"
        assert config.provider.api_key == "key"
        assert config.agent.history_turns == 4

    def test_conventional_aliases(self, monkeypatch):
        monkeypatch.setenv("CHANNEL_ACCESS_TOKEN", "tok")
        monkeypatch.setenv("CHANNEL_SECRET", "sec")
        monkeypatch.setenv("GEMINI_API_KEY", "AIza-key")

        config = load_config()

        assert config.line.channel_access_token == "tok"
        assert config.line.channel_secret == "sec"
        assert config.provider.api_key == "AIza-key"
        assert config.missing_credentials() == []

    def test_prefixed_wins_over_alias(self, monkeypatch):
        monkeypatch.setenv("CHANNEL_SECRET", "alias")
        monkeypatch.setenv("LINERELAY_LINE__CHANNEL_SECRET", "prefixed")

        assert load_config().line.channel_secret == "prefixed"

    def test_gemini_model_alias(self, monkeypatch):
        monkeypatch.setenv("GEMINI_MODEL", "gemini-1.5-pro")

        assert load_config().agent.model == "gemini/gemini-1.5-pro"

    def test_explicit_model_wins_over_gemini_model(self, monkeypatch):
        monkeypatch.setenv("GEMINI_MODEL", "gemini-1.5-pro")
        monkeypatch.setenv("LINERELAY_AGENT__MODEL", "gemini/gemini-2.5-flash")

        assert load_config().agent.model == "gemini/gemini-2.5-flash"


class TestCredentials:
    """Test the startup credential check."""

    def test_all_missing(self):
        config = Config()

        with pytest.raises(ConfigurationError) as exc_info:
            config.require_credentials()

        assert exc_info.value.missing == [
            "line.channel_access_token",
            "line.channel_secret",
            "provider.api_key",
        ]

    def test_partial_credentials_are_refused(self):
        config = Config()
        config.line.channel_access_token = "tok"
        config.provider.api_key = "key"

        with pytest.raises(ConfigurationError, match="line.channel_secret"):
            config.require_credentials()

    def test_complete_credentials(self):
        config = Config()
        config.line.channel_access_token = "tok"
        config.line.channel_secret = "sec"
        config.provider.api_key = "key"

        config.require_credentials()

    def test_ollama_needs_no_api_key(self):
        config = Config()
        config.agent.model = "ollama/llama3"

        assert "provider.api_key" not in config.missing_credentials()


class TestPersona:
    """Test persona resolution."""

    def test_builtin_persona(self):
        assert resolve_persona(Config()) == DEFAULT_PERSONA

    def test_inline_persona(self, monkeypatch):
        monkeypatch.setenv("LINERELAY_AGENT__PERSONA", "Talk like a pirate.")

        assert resolve_persona(load_config()) == "Talk like a pirate."

    def test_empty_persona_disables_system_instruction(self):
        config = Config()
        config.agent.persona = ""

        assert resolve_persona(config) == ""

    def test_persona_file(self, tmp_path):
        persona_path = tmp_path / "persona.txt"
        persona_path.write_text("  You answer in haiku.\n", encoding="utf-8")
        config = Config()
        config.agent.persona_file = str(persona_path)

        assert resolve_persona(config) == "You answer in haiku."

    def test_missing_persona_file_raises(self, tmp_path):
        config = Config()
        config.agent.persona_file = str(tmp_path / "missing.txt")

        with pytest.raises(FileNotFoundError):
            resolve_persona(config)


class TestHistorySettings:
    """Test history-related agent settings."""

    def test_max_conversations_default(self):
        assert load_config().agent.max_conversations == 1000

    def test_max_conversations_from_env(self, monkeypatch):
        monkeypatch.setenv("LINERELAY_AGENT__HISTORY_TURNS", "3")
        monkeypatch.setenv("LINERELAY_AGENT__MAX_CONVERSATIONS", "50")

        config = load_config()

        assert config.agent.max_conversations == 50

    def test_builder_passes_cap_to_session(self):
        from linerelay.relay.builder import build_session

        config = Config()
        config.agent.history_turns = 2
        config.agent.max_conversations = 7

        status = build_session(config).get_status()

        assert status["stateful"] is True
        assert status["max_conversations"] == 7
