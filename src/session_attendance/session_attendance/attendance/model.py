from __future__ import annotations

from dataclasses import dataclass, field
from typing import Optional

from ..core.enums import AttendanceState
from ..notifications.model import NotificationReport


@dataclass(frozen=True)
class AttendanceEntry:
    participant_id: str
    attended: bool
    rating: Optional[int] = None
    notes: Optional[str] = None


@dataclass(frozen=True)
class MarkRequest:
    """One caller-submitted batch of attendance updates for a single session."""

    session_id: str
    entries: tuple[AttendanceEntry, ...]
    actor: str


@dataclass(frozen=True)
class TransitionDecision:
    previous: AttendanceState
    new_state: AttendanceState

    @property
    def is_first_mark(self) -> bool:
        return self.previous == AttendanceState.UNMARKED

    @property
    def is_change(self) -> bool:
        return self.previous != self.new_state

    @property
    def notify(self) -> bool:
        return self.is_first_mark or self.is_change


@dataclass(frozen=True)
class ItemResult:
    participant_id: str
    previous_state: Optional[AttendanceState]
    new_state: Optional[AttendanceState]
    notified: bool
    error: Optional[str] = None

    def to_dict(self) -> dict:
        return {
            "participantId": self.participant_id,
            "previousState": self.previous_state.value if self.previous_state else None,
            "newState": self.new_state.value if self.new_state else None,
            "notified": self.notified,
            "error": self.error,
        }


@dataclass(frozen=True)
class BatchReport:
    session_id: str
    results: tuple[ItemResult, ...]
    notification_report: NotificationReport = field(default_factory=NotificationReport)
    success: bool = True

    def to_dict(self) -> dict:
        return {
            "success": self.success,
            "sessionId": self.session_id,
            "results": [r.to_dict() for r in self.results],
            "notificationReport": self.notification_report.to_dict(),
        }
