"""
FastAPI dependency injection utilities.

Provides dependencies for:
- Config access
- Dispatcher access
"""

from typing import Annotated

from fastapi import Depends, Request

from linerelay.config.schema import Config
from linerelay.relay.dispatch import BatchDispatcher


def get_config(request: Request) -> Config:
    """Get config from app state."""
    return request.app.state.config


def get_dispatcher(request: Request) -> BatchDispatcher:
    """Get the batch dispatcher from app state."""
    return request.app.state.dispatcher


# Type aliases for dependency injection
ConfigDep = Annotated[Config, Depends(get_config)]
DispatcherDep = Annotated[BatchDispatcher, Depends(get_dispatcher)]
