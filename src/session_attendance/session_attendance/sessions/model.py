from __future__ import annotations

from dataclasses import dataclass, field
from datetime import date, datetime, time
from typing import Mapping, Optional

from ..common.references import Reference, reference_id
from ..core.enums import AttendanceState


@dataclass(frozen=True)
class Participant:
    """One user's attendance record within one session."""

    participant_id: str
    user: Optional[Reference]
    state: AttendanceState = AttendanceState.UNMARKED
    marked_at: Optional[datetime] = None
    rating: Optional[int] = None
    notes: Optional[str] = None

    @property
    def user_id(self) -> Optional[str]:
        return reference_id(self.user)


@dataclass(frozen=True)
class Session:
    session_id: str
    title: str = ""
    scheduled_date: Optional[date] = None
    start_time: Optional[time] = None
    end_time: Optional[time] = None
    participants: tuple[Participant, ...] = ()
    version: int = 0

    def participant(self, participant_id: str) -> Optional[Participant]:
        for p in self.participants:
            if p.participant_id == participant_id:
                return p
        return None

    def participant_for_user(self, user_id: str) -> Optional[Participant]:
        for p in self.participants:
            if p.user_id == user_id:
                return p
        return None

    @property
    def starts_at(self) -> Optional[datetime]:
        if self.scheduled_date is None:
            return None
        return datetime.combine(self.scheduled_date, self.start_time or time.min)


@dataclass(frozen=True)
class ParticipantStates:
    """Snapshot of every participant's state in a session at one version."""

    session_id: str
    version: int
    states: Mapping[str, AttendanceState] = field(default_factory=dict)

    def get(self, participant_id: str) -> AttendanceState:
        return self.states.get(participant_id, AttendanceState.UNMARKED)

    def __contains__(self, participant_id: object) -> bool:
        return participant_id in self.states
