"""Chat channel integrations."""

from linerelay.channels.events import (
    EventMessage,
    EventSource,
    WebhookEvent,
    WebhookPayload,
    is_text_message,
    parse_payload,
)
from linerelay.channels.line import LineChannel

__all__ = [
    "EventMessage",
    "EventSource",
    "WebhookEvent",
    "WebhookPayload",
    "is_text_message",
    "parse_payload",
    "LineChannel",
]
