"""Per-event dispatch outcomes."""

from dataclasses import dataclass, field
from enum import Enum
from typing import Any


class OutcomeStatus(str, Enum):
    """Terminal state of one event."""
    SKIPPED = "skipped"
    REPLIED = "replied"
    FAILED_WITH_FALLBACK = "failed_with_fallback"
    DELIVERY_FAILED = "delivery_failed"


@dataclass
class DispatchOutcome:
    """Result of processing one inbound event."""
    status: OutcomeStatus
    reply_token: str | None = None
    text: str | None = None
    delivery: dict[str, Any] | None = None
    error: str | None = None

    @classmethod
    def skipped(cls, error: str | None = None) -> "DispatchOutcome":
        return cls(status=OutcomeStatus.SKIPPED, error=error)

    def to_dict(self) -> dict[str, Any]:
        data: dict[str, Any] = {"status": self.status.value}
        if self.reply_token is not None:
            data["reply_token"] = self.reply_token
        if self.text is not None:
            data["text"] = self.text
        if self.delivery is not None:
            data["delivery"] = self.delivery
        if self.error is not None:
            data["error"] = self.error
        return data


@dataclass
class DispatchResult:
    """Aggregate result for one webhook batch."""
    results: list[DispatchOutcome] = field(default_factory=list)
    status: str = "success"

    def count(self, status: OutcomeStatus) -> int:
        return sum(1 for outcome in self.results if outcome.status == status)

    def to_dict(self) -> dict[str, Any]:
        return {
            "status": self.status,
            "results": [outcome.to_dict() for outcome in self.results],
        }
