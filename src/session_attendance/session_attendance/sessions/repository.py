from __future__ import annotations

from datetime import datetime
from typing import Optional, Protocol

from ..core.enums import AttendanceState
from .model import ParticipantStates, Session


class SessionStore(Protocol):
    async def get_session(self, session_id: str) -> Optional[Session]:
        raise NotImplementedError

    async def get_participant_states(self, session_id: str) -> ParticipantStates:
        """Plain read of the current states. Raises NotFoundError for unknown sessions."""

        raise NotImplementedError

    async def open_batch(self, session_id: str) -> ParticipantStates:
        """Read the pre-batch snapshot and claim the session in one atomic step.

        The session version is advanced and the snapshot carries the new value.
        Writes made with an older version are rejected, so a batch that was
        overtaken by a newer one cannot overwrite its results.
        """

        raise NotImplementedError

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
        """Persist one participant's new state.

        Raises PersistenceFailure (ConcurrentModificationError on a stale version)
        or NotFoundError.
        """

        raise NotImplementedError
