"""Configuration schema using Pydantic."""

from pydantic import BaseModel, Field
from pydantic_settings import BaseSettings, SettingsConfigDict

from linerelay.errors import ConfigurationError


class LineConfig(BaseModel):
    """LINE Messaging API channel configuration."""
    channel_access_token: str = ""  # Long-lived channel access token
    channel_secret: str = ""  # Channel secret from the LINE Developers console
    api_base: str = "https://api.line.me"
    timeout_seconds: float = 30.0


class ProviderConfig(BaseModel):
    """LLM provider configuration."""
    api_key: str = ""
    api_base: str | None = None


class AgentDefaults(BaseModel):
    """Reply generation settings."""
    model: str = "gemini/gemini-2.0-flash"
    max_tokens: int = 1024
    temperature: float = 0.7
    persona: str | None = None  # None = built-in persona, "" = no system instruction
    persona_file: str = ""  # Path to a text file holding the persona
    history_turns: int = 0  # 0 = stateless, N = keep last N exchanges per conversation
    max_conversations: int = 1000  # Conversations with remembered history; least recently used dropped first


class ServerConfig(BaseModel):
    """Webhook server configuration."""
    host: str = "0.0.0.0"
    port: int = 8000
    webhook_path: str = "/webhook"


class Config(BaseSettings):
    """Root configuration for linerelay."""
    line: LineConfig = Field(default_factory=LineConfig)
    provider: ProviderConfig = Field(default_factory=ProviderConfig)
    agent: AgentDefaults = Field(default_factory=AgentDefaults)
    server: ServerConfig = Field(default_factory=ServerConfig)
    log_level: str = "INFO"

    model_config = SettingsConfigDict(
        env_prefix="LINERELAY_",
        env_nested_delimiter="__",
    )

    def missing_credentials(self) -> list[str]:
        """List the required credentials that are not set."""
        missing = []
        if not self.line.channel_access_token:
            missing.append("line.channel_access_token")
        if not self.line.channel_secret:
            missing.append("line.channel_secret")
        if not self.provider.api_key and not self._is_keyless_model():
            missing.append("provider.api_key")
        return missing

    def require_credentials(self) -> None:
        """
        Fail fast when any required credential is absent.

        Raises:
            ConfigurationError: Naming every missing credential.
        """
        missing = self.missing_credentials()
        if missing:
            raise ConfigurationError(missing)

    def _is_keyless_model(self) -> bool:
        """Local backends (Ollama) run without an API key."""
        return self.agent.model.lower().startswith("ollama/")
