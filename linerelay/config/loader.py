"""Configuration loading utilities."""

import os
from pathlib import Path

from loguru import logger

from linerelay.config.persona import DEFAULT_PERSONA
from linerelay.config.schema import Config


# Conventional variable names used by LINE bot deployments
ENV_ALIASES = {
    "CHANNEL_ACCESS_TOKEN": ("line", "channel_access_token"),
    "CHANNEL_SECRET": ("line", "channel_secret"),
    "GEMINI_API_KEY": ("provider", "api_key"),
}


def load_config() -> Config:
    """
    Load configuration from the process environment.

    Prefixed variables (``LINERELAY_LINE__CHANNEL_SECRET``) win over the
    unprefixed aliases (``CHANNEL_SECRET``).

    Returns:
        Loaded configuration object.
    """
    config = Config()

    for env_name, (section, field) in ENV_ALIASES.items():
        value = os.environ.get(env_name, "")
        target = getattr(config, section)
        if value and not getattr(target, field):
            setattr(target, field, value)
            logger.debug(f"Using {env_name} for {section}.{field}")

    gemini_model = os.environ.get("GEMINI_MODEL", "")
    if gemini_model and "model" not in config.agent.model_fields_set:
        if "/" not in gemini_model:
            gemini_model = f"gemini/{gemini_model}"
        config.agent.model = gemini_model

    return config


def resolve_persona(config: Config) -> str:
    """
    Resolve the persona string bound to the backend session.

    Precedence: inline ``agent.persona``, then ``agent.persona_file``, then
    the built-in persona. An empty inline persona disables the system
    instruction.

    Raises:
        FileNotFoundError: If ``persona_file`` points nowhere.
    """
    if config.agent.persona is not None:
        return config.agent.persona

    if config.agent.persona_file:
        path = Path(config.agent.persona_file).expanduser()
        persona = path.read_text(encoding="utf-8").strip()
        logger.info(f"Loaded persona from {path}")
        return persona

    return DEFAULT_PERSONA
