"""
Batch dispatcher for webhook deliveries.

Fans every event of a batch out to the reply generator concurrently and
joins the outcomes, one per event, in input order.
"""

import asyncio
from typing import Any

from loguru import logger

from linerelay.channels.events import WebhookEvent, is_text_message
from linerelay.relay.generator import ReplyGenerator
from linerelay.relay.outcome import DispatchOutcome, DispatchResult, OutcomeStatus


class BatchDispatcher:
    """
    Dispatches a batch of events to the reply generator.

    Each event runs behind its own failure boundary: an exception in one
    event becomes that event's outcome and never voids its siblings.
    """

    def __init__(self, generator: ReplyGenerator):
        self.generator = generator

        # Stats
        self._batch_count = 0
        self._processed_count = 0
        self._replied_count = 0
        self._fallback_count = 0
        self._skipped_count = 0
        self._error_count = 0

    async def dispatch(self, events: list[WebhookEvent]) -> DispatchResult:
        """
        Process every event of a batch concurrently.

        Args:
            events: Decoded webhook events.

        Returns:
            DispatchResult whose ``results[i]`` belongs to ``events[i]``.
        """
        self._batch_count += 1
        logger.info(f"Dispatching batch of {len(events)} event(s)")

        outcomes = await asyncio.gather(
            *(self._run_one(event) for event in events)
        )

        result = DispatchResult(results=list(outcomes))
        self._record(result)
        return result

    async def _run_one(self, event: WebhookEvent) -> DispatchOutcome:
        """Run one event, converting any escaped exception into its outcome."""
        try:
            return await self.generator.generate(event)
        except Exception as e:
            logger.exception(f"Unhandled error processing {event.type} event: {e}")
            if not is_text_message(event):
                return DispatchOutcome.skipped(error=str(e))
            return DispatchOutcome(
                status=OutcomeStatus.DELIVERY_FAILED,
                reply_token=event.reply_token,
                error=str(e),
            )

    def _record(self, result: DispatchResult) -> None:
        self._processed_count += len(result.results)
        self._replied_count += result.count(OutcomeStatus.REPLIED)
        self._fallback_count += result.count(OutcomeStatus.FAILED_WITH_FALLBACK)
        self._skipped_count += result.count(OutcomeStatus.SKIPPED)
        self._error_count += result.count(OutcomeStatus.DELIVERY_FAILED)

    def get_stats(self) -> dict[str, Any]:
        """Get dispatcher statistics."""
        return {
            "batch_count": self._batch_count,
            "processed_count": self._processed_count,
            "replied_count": self._replied_count,
            "fallback_count": self._fallback_count,
            "skipped_count": self._skipped_count,
            "error_count": self._error_count,
        }
