from __future__ import annotations

from dataclasses import dataclass
from typing import Iterable

from ..core.constants import COMPLETION_THRESHOLD_PERCENT
from ..core.enums import AttendanceState
from ..sessions.model import Session


@dataclass(frozen=True)
class AttendanceSummary:
    total_sessions: int
    attended_sessions: int
    percentage: int
    threshold: int = COMPLETION_THRESHOLD_PERCENT

    @property
    def is_complete(self) -> bool:
        return self.percentage >= self.threshold

    def to_dict(self) -> dict:
        return {
            "totalSessions": self.total_sessions,
            "attendedSessions": self.attended_sessions,
            "percentage": self.percentage,
            "isComplete": self.is_complete,
        }


def round_half_up_percent(part: int, whole: int) -> int:
    """round(part / whole * 100) with halves rounded up, in integer arithmetic."""
    if whole <= 0:
        return 0
    return (part * 200 + whole) // (2 * whole)


class AttendancePercentageCalculator:
    """Completion metric over a user's session history.

    Only sessions holding a participant entry for the user count; a session the
    user was never enrolled in is neither attended nor missed. Pure: no I/O, no
    mutation.
    """

    def __init__(self, *, threshold: int = COMPLETION_THRESHOLD_PERCENT):
        self._threshold = int(threshold)

    def calculate(self, sessions: Iterable[Session], user_id: str) -> AttendanceSummary:
        total = 0
        attended = 0
        for session in sessions or ():
            participant = session.participant_for_user(user_id)
            if participant is None:
                continue
            total += 1
            if participant.state == AttendanceState.PRESENT:
                attended += 1

        return AttendanceSummary(
            total_sessions=total,
            attended_sessions=attended,
            percentage=round_half_up_percent(attended, total),
            threshold=self._threshold,
        )


def calculate_attendance_percentage(sessions: Iterable[Session], user_id: str) -> AttendanceSummary:
    return AttendancePercentageCalculator().calculate(sessions, user_id)


def is_program_completed(sessions: Iterable[Session], user_id: str) -> bool:
    return calculate_attendance_percentage(sessions, user_id).is_complete
