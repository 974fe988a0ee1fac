"""Inbound webhook event types delivered by the LINE platform."""

from typing import Any

from pydantic import BaseModel, ConfigDict, Field, ValidationError

from linerelay.errors import MalformedBatch


class EventSource(BaseModel):
    """Where an event came from: a 1:1 chat, a group or a room."""
    model_config = ConfigDict(extra="allow", populate_by_name=True)

    type: str = "user"
    user_id: str | None = Field(default=None, alias="userId")
    group_id: str | None = Field(default=None, alias="groupId")
    room_id: str | None = Field(default=None, alias="roomId")

    @property
    def conversation_key(self) -> str | None:
        """Stable key for the conversation this event belongs to."""
        if self.group_id:
            return f"group:{self.group_id}"
        if self.room_id:
            return f"room:{self.room_id}"
        if self.user_id:
            return f"user:{self.user_id}"
        return None


class EventMessage(BaseModel):
    """Message content of a ``message`` event (text, sticker, image, ...)."""
    model_config = ConfigDict(extra="allow")

    type: str
    id: str | None = None
    text: str | None = None


class WebhookEvent(BaseModel):
    """
    One event in a webhook batch.

    Only ``message`` events with a text message carry a reply obligation;
    every other shape (follow, join, postback, sticker, ...) is accepted
    and kept as-is.
    """
    model_config = ConfigDict(extra="allow", populate_by_name=True)

    type: str
    reply_token: str | None = Field(default=None, alias="replyToken")
    timestamp: int | None = None
    mode: str | None = None
    webhook_event_id: str | None = Field(default=None, alias="webhookEventId")
    source: EventSource | None = None
    message: EventMessage | None = None

    @property
    def conversation_key(self) -> str | None:
        return self.source.conversation_key if self.source else None


class WebhookPayload(BaseModel):
    """Decoded webhook request body."""
    model_config = ConfigDict(extra="allow")

    destination: str | None = None
    events: list[WebhookEvent]


def is_text_message(event: WebhookEvent) -> bool:
    """True for ``message`` events whose message is text."""
    return (
        event.type == "message"
        and event.message is not None
        and event.message.type == "text"
        and event.message.text is not None
    )


def parse_payload(body: Any) -> WebhookPayload:
    """
    Decode a JSON-compatible body into a webhook batch.

    Raises:
        MalformedBatch: If the body is not ``{"events": [...]}``.
    """
    if not isinstance(body, dict):
        raise MalformedBatch(f"Expected a JSON object, got {type(body).__name__}")

    try:
        return WebhookPayload.model_validate(body)
    except ValidationError as e:
        raise MalformedBatch(str(e)) from e
