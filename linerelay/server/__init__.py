"""
Webhook server module.

Provides the FastAPI application receiving LINE webhook deliveries.
"""

from linerelay.server.main import create_app

__all__ = ["create_app"]
