"""Configuration module."""

from linerelay.config.schema import Config
from linerelay.config.loader import load_config, resolve_persona

__all__ = ["Config", "load_config", "resolve_persona"]
