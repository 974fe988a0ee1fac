"""
Relay pipeline: webhook batch in, one reply per text message out.
"""

from linerelay.relay.outcome import DispatchOutcome, DispatchResult, OutcomeStatus
from linerelay.relay.generator import (
    NO_ANSWER_MESSAGE,
    UNAVAILABLE_MESSAGE,
    ReplyGenerator,
)
from linerelay.relay.dispatch import BatchDispatcher

__all__ = [
    "DispatchOutcome",
    "DispatchResult",
    "OutcomeStatus",
    "NO_ANSWER_MESSAGE",
    "UNAVAILABLE_MESSAGE",
    "ReplyGenerator",
    "BatchDispatcher",
]
