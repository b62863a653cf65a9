from __future__ import annotations

import threading
from dataclasses import replace
from datetime import datetime
from typing import Iterable, Optional

from ..core.enums import AttendanceState
from ..core.exceptions import ConcurrentModificationError, NotFoundError, PersistenceFailure
from .model import ParticipantStates, Session
from .repository import SessionStore


class InMemorySessionStore(SessionStore):
    """Process-local store.

    Requests may run on separate threads, each with its own event loop, so the
    read-modify-store of ``open_batch`` and ``write_participant_state`` holds a lock.
    """

    def __init__(self, sessions: Iterable[Session] = ()):
        self._sessions: dict[str, Session] = {}
        self._lock = threading.Lock()
        for s in sessions:
            self.add_session(s)

    def add_session(self, session: Session) -> None:
        self._sessions[session.session_id] = session

    async def get_session(self, session_id: str) -> Optional[Session]:
        return self._sessions.get(session_id)

    async def get_participant_states(self, session_id: str) -> ParticipantStates:
        return self._snapshot(self._require(session_id))

    async def open_batch(self, session_id: str) -> ParticipantStates:
        with self._lock:
            session = self._require(session_id)
            session = replace(session, version=session.version + 1)
            self._sessions[session_id] = session
        return self._snapshot(session)

    async def write_participant_state(
        self,
        session_id: str,
        participant_id: str,
        state: AttendanceState,
        *,
        marked_at: datetime,
        version: int,
        rating: Optional[int] = None,
        notes: Optional[str] = None,
    ) -> None:
        with self._lock:
            session = self._require(session_id)
            if session.version != version:
                raise ConcurrentModificationError(
                    f"session {session_id} is at version {session.version}, write carried {version}"
                )
            if state == AttendanceState.UNMARKED:
                raise PersistenceFailure("attendance cannot be reset to UNMARKED")

            participants = list(session.participants)
            for idx, p in enumerate(participants):
                if p.participant_id == participant_id:
                    participants[idx] = replace(p, state=state, marked_at=marked_at, rating=rating, notes=notes)
                    break
            else:
                raise NotFoundError(f"participant {participant_id} not found in session {session_id}")

            self._sessions[session_id] = replace(session, participants=tuple(participants))

    def _require(self, session_id: str) -> Session:
        session = self._sessions.get(session_id)
        if session is None:
            raise NotFoundError(f"session {session_id} not found")
        return session

    @staticmethod
    def _snapshot(session: Session) -> ParticipantStates:
        return ParticipantStates(
            session_id=session.session_id,
            version=session.version,
            states={p.participant_id: p.state for p in session.participants},
        )
