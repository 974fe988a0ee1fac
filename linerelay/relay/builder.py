"""Construction of the relay components from configuration."""

from loguru import logger

from linerelay.channels.line import LineChannel
from linerelay.config.loader import resolve_persona
from linerelay.config.schema import Config
from linerelay.providers.litellm_provider import LiteLLMProvider
from linerelay.providers.session import BackendSession
from linerelay.relay.dispatch import BatchDispatcher
from linerelay.relay.generator import ReplyGenerator


def build_session(config: Config) -> BackendSession:
    """
    Create the process-wide backend session.

    The persona is resolved once here and never changes afterwards.
    """
    provider = LiteLLMProvider(
        api_key=config.provider.api_key or None,
        api_base=config.provider.api_base,
        default_model=config.agent.model,
    )
    persona = resolve_persona(config)

    logger.info(f"Creating backend session: {provider.provider_name} / {config.agent.model}")
    if not persona:
        logger.info("No persona configured - replies use no system instruction")

    return BackendSession(
        provider=provider,
        persona=persona,
        model=config.agent.model,
        max_tokens=config.agent.max_tokens,
        temperature=config.agent.temperature,
        history_turns=config.agent.history_turns,
        max_conversations=config.agent.max_conversations,
    )


def build_dispatcher(
    config: Config,
    session: BackendSession | None = None,
    channel: LineChannel | None = None,
) -> BatchDispatcher:
    """Wire session, channel and generator into a dispatcher."""
    session = session or build_session(config)
    channel = channel or LineChannel(config.line)
    return BatchDispatcher(ReplyGenerator(session=session, channel=channel))
