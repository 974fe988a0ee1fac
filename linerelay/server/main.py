"""
FastAPI application factory.

Provides:
- Application creation with lifecycle management
- Explicit construction of the shared backend session and LINE channel
- Router registration
"""

from contextlib import asynccontextmanager

from fastapi import FastAPI
from loguru import logger

from linerelay import __version__
from linerelay.config.schema import Config
from linerelay.relay.builder import build_dispatcher
from linerelay.relay.dispatch import BatchDispatcher
from linerelay.server.routers import system_router, webhook_router


@asynccontextmanager
async def lifespan(app: FastAPI):
    """
    Application lifespan manager.

    Startup builds the dispatcher (and with it the backend session) once,
    after checking credentials; an injected dispatcher is used as-is.
    Shutdown closes the LINE HTTP client.
    """
    config: Config = app.state.config

    if app.state.dispatcher is None:
        config.require_credentials()
        app.state.dispatcher = build_dispatcher(config)
        app.state.owns_dispatcher = True

    logger.info(f"linerelay ready on {app.state.webhook_path} (model: {config.agent.model})")

    yield

    logger.info("Shutting down linerelay...")
    if app.state.owns_dispatcher:
        await app.state.dispatcher.generator.channel.close()


def create_app(
    config: Config,
    dispatcher: BatchDispatcher | None = None,
) -> FastAPI:
    """
    Create and configure the FastAPI application.

    Args:
        config: Loaded configuration.
        dispatcher: Prebuilt dispatcher; built at startup when omitted.

    Returns:
        Configured FastAPI application.
    """
    app = FastAPI(
        title="linerelay",
        description="LINE webhook relaying messages to an LLM",
        version=__version__,
        lifespan=lifespan,
    )

    webhook_path = "/" + config.server.webhook_path.strip("/")
    if webhook_path == "/":
        webhook_path = "/webhook"

    # Store state before lifespan
    app.state.config = config
    app.state.dispatcher = dispatcher
    app.state.owns_dispatcher = False
    app.state.webhook_path = webhook_path

    app.include_router(webhook_router, prefix=webhook_path, tags=["Webhook"])
    app.include_router(system_router, tags=["System"])

    return app
