from __future__ import annotations

from typing import Protocol

from ..core.enums import AttendanceState
from ..sessions.model import Participant, Session
from ..users.model import User
from .model import OutboundMessage


class MessageComposer(Protocol):
    def compose(
        self, *, session: Session, participant: Participant, user: User, state: AttendanceState
    ) -> OutboundMessage:
        raise NotImplementedError


class AttendanceMessageComposer(MessageComposer):
    """Plain-text attendance notice: one subject line, a status-specific body."""

    def compose(
        self, *, session: Session, participant: Participant, user: User, state: AttendanceState
    ) -> OutboundMessage:
        title = session.title or session.session_id
        status = "Present" if state == AttendanceState.PRESENT else "Absent"

        when = ""
        if session.scheduled_date:
            when = session.scheduled_date.strftime("%Y-%m-%d")
            if session.start_time:
                when += f" {session.start_time.strftime('%H:%M')}"
                if session.end_time:
                    when += f"-{session.end_time.strftime('%H:%M')}"

        lines = [f"Hi {user.display_name},", ""]
        if state == AttendanceState.PRESENT:
            lines.append(f"You were marked present for {title}" + (f" on {when}." if when else "."))
        else:
            lines.append(f"You were marked absent for {title}" + (f" on {when}." if when else "."))
            lines.append("If this is a mistake, please contact your coach.")
        if participant.notes:
            lines.extend(["", f"Notes: {participant.notes}"])

        return OutboundMessage(subject=f"Attendance Marked ({status}) - {title}", body="\n".join(lines))
