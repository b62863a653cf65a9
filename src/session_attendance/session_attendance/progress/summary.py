from __future__ import annotations

from dataclasses import dataclass

from ..core.enums import AttendanceState
from ..sessions.model import Session


@dataclass(frozen=True)
class SessionAttendanceSummary:
    session_id: str
    total: int
    present: int
    absent: int
    unmarked: int

    @property
    def attendance_rate(self) -> float:
        """Present share of marked participants, in percent with two decimals."""
        marked = self.present + self.absent
        if marked == 0:
            return 0.0
        return round(self.present / marked * 100, 2)

    def to_dict(self) -> dict:
        return {
            "sessionId": self.session_id,
            "total": self.total,
            "present": self.present,
            "absent": self.absent,
            "unmarked": self.unmarked,
            "attendanceRate": self.attendance_rate,
        }


def summarize_session(session: Session) -> SessionAttendanceSummary:
    counts = {state: 0 for state in AttendanceState}
    for p in session.participants:
        counts[p.state] += 1
    return SessionAttendanceSummary(
        session_id=session.session_id,
        total=len(session.participants),
        present=counts[AttendanceState.PRESENT],
        absent=counts[AttendanceState.ABSENT],
        unmarked=counts[AttendanceState.UNMARKED],
    )
