"""
FastAPI routers.

Provides modular route organization:
- webhook: LINE webhook endpoint
- system: Health and status
"""

from linerelay.server.routers.webhook import router as webhook_router
from linerelay.server.routers.system import router as system_router

__all__ = [
    "webhook_router",
    "system_router",
]
