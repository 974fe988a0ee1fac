"""
System routes.

Provides:
- /health - Health check
- /api/status - Version, model and pipeline counters
"""

from fastapi import APIRouter, Request
from fastapi.responses import JSONResponse

from linerelay import __version__
from linerelay.channels.line import LineChannel
from linerelay.providers.litellm_provider import LiteLLMProvider
from linerelay.server.dependencies import ConfigDep, DispatcherDep

router = APIRouter()


@router.get("/health")
async def health():
    """Health check endpoint."""
    return JSONResponse({"status": "ok"})


@router.get("/api/status")
async def status(request: Request, config: ConfigDep, dispatcher: DispatcherDep):
    """Report configuration summary and runtime counters."""
    generator = dispatcher.generator
    session = generator.session

    data = {
        "status": "running",
        "version": __version__,
        "webhook_path": request.app.state.webhook_path,
        "log_level": config.log_level,
        "session": session.get_status(),
        "dispatcher": dispatcher.get_stats(),
    }

    if isinstance(session.provider, LiteLLMProvider):
        data["provider"] = session.provider.get_usage_stats()

    if isinstance(generator.channel, LineChannel):
        data["channel"] = generator.channel.get_status()

    return JSONResponse(data)
