"""
Reply generator: one inbound event in, one reply out.

Flow:
1. Skip anything that is not a text message
2. Ask the backend session for a completion
3. Substitute fixed texts for empty output or backend failure
4. Send exactly one reply through the channel
"""

from typing import Any, Protocol

from loguru import logger

from linerelay.channels.events import WebhookEvent, is_text_message
from linerelay.providers.session import BackendSession
from linerelay.relay.outcome import DispatchOutcome, OutcomeStatus


NO_ANSWER_MESSAGE = "Sorry, I could not come up with an answer."
UNAVAILABLE_MESSAGE = "AI is currently unavailable, please try again later."


class ReplyChannel(Protocol):
    """Anything that can answer an event by reply token."""

    async def reply_text(self, reply_token: str, text: str) -> dict[str, Any]:
        ...


class ReplyGenerator:
    """
    Generates and delivers the reply for a single event.

    Backend failures are recovered here with a fallback text. Delivery
    failures are reported as a DELIVERY_FAILED outcome, so they never
    reach the dispatcher.
    """

    def __init__(
        self,
        session: BackendSession,
        channel: ReplyChannel,
        no_answer_message: str = NO_ANSWER_MESSAGE,
        unavailable_message: str = UNAVAILABLE_MESSAGE,
    ):
        self.session = session
        self.channel = channel
        self.no_answer_message = no_answer_message
        self.unavailable_message = unavailable_message

    async def generate(self, event: WebhookEvent) -> DispatchOutcome:
        """
        Process one event.

        Args:
            event: Inbound webhook event.

        Returns:
            The event's outcome.
        """
        if not is_text_message(event):
            return DispatchOutcome.skipped()

        if not event.reply_token:
            logger.warning(f"Text event {event.webhook_event_id or '?'} has no reply token, skipping")
            return DispatchOutcome.skipped(error="missing reply token")

        user_text = event.message.text
        status = OutcomeStatus.REPLIED
        error = None

        try:
            reply_text = await self.session.complete(user_text, event.conversation_key)
            if not reply_text.strip():
                logger.info("Backend returned empty text, sending placeholder")
                reply_text = self.no_answer_message
        except Exception as e:
            logger.exception(f"Generation failed, sending fallback: {e}")
            reply_text = self.unavailable_message
            status = OutcomeStatus.FAILED_WITH_FALLBACK
            error = str(e)

        try:
            delivery = await self.channel.reply_text(event.reply_token, reply_text)
        except Exception as e:
            logger.error(f"Reply delivery failed for {event.reply_token[:8]}...: {e}")
            return DispatchOutcome(
                status=OutcomeStatus.DELIVERY_FAILED,
                reply_token=event.reply_token,
                text=reply_text,
                error=str(e),
            )

        return DispatchOutcome(
            status=status,
            reply_token=event.reply_token,
            text=reply_text,
            delivery=delivery,
            error=error,
        )
