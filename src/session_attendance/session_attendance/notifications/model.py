from __future__ import annotations

from dataclasses import dataclass, field
from typing import Optional

from ..core.enums import DeliveryOutcome


@dataclass(frozen=True)
class OutboundMessage:
    """Composed content. The dispatcher never looks inside."""

    subject: str
    body: str
    html: Optional[str] = None


@dataclass(frozen=True)
class Delivery:
    participant_id: str
    contact: str
    message: OutboundMessage


@dataclass(frozen=True)
class DeliveryResult:
    participant_id: str
    contact: Optional[str]
    outcome: DeliveryOutcome
    error: Optional[str] = None

    def to_dict(self) -> dict:
        return {
            "participantId": self.participant_id,
            "contact": self.contact,
            "outcome": self.outcome.value,
            "error": self.error,
        }


@dataclass(frozen=True)
class NotificationReport:
    sent: int = 0
    failed: int = 0
    skipped: int = 0
    details: tuple[DeliveryResult, ...] = field(default_factory=tuple)

    def to_dict(self) -> dict:
        return {
            "sent": self.sent,
            "failed": self.failed,
            "skipped": self.skipped,
            "details": [d.to_dict() for d in self.details],
        }
