from __future__ import annotations

from dataclasses import dataclass
from datetime import date, datetime

from ..core.enums import AttendanceState
from ..sessions.model import Session


@dataclass(frozen=True)
class DisplayStatus:
    label: str
    css_class: str


NOT_MARKED_FUTURE = DisplayStatus("Not Marked", "bg-gray-100 text-gray-800")
NOT_MARKED_PAST = DisplayStatus("Not Marked", "bg-yellow-100 text-yellow-800")
PRESENT = DisplayStatus("Present", "bg-green-100 text-green-800")
ABSENT = DisplayStatus("Absent", "bg-red-100 text-red-800")


def is_attendance_eligible(session: Session, now: datetime) -> bool:
    """A session can be marked once its scheduled start has passed.

    Sessions without a date are treated as eligible.
    """
    starts_at = session.starts_at
    return starts_at is None or starts_at <= now


def attendance_display_status(session: Session, user_id: str, today: date) -> DisplayStatus:
    if session.scheduled_date is not None and session.scheduled_date > today:
        return NOT_MARKED_FUTURE

    participant = session.participant_for_user(user_id)
    if participant is not None:
        if participant.state == AttendanceState.PRESENT:
            return PRESENT
        if participant.state == AttendanceState.ABSENT:
            return ABSENT
    return NOT_MARKED_PAST
