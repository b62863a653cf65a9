from __future__ import annotations

import asyncio
from datetime import datetime
from typing import Optional

import mysql.connector

from ..common.references import UserId
from ..core.enums import AttendanceState
from ..core.exceptions import ConcurrentModificationError, NotFoundError, PersistenceFailure
from ..database.connection import DatabaseConnection
from ..database.mysql_base import db_cursor, fetchall, fetchone, normalize_mysql_time
from .model import Participant, ParticipantStates, Session
from .repository import SessionStore


class MySQLSessionStore(SessionStore):
    def __init__(self, conn_factory: DatabaseConnection):
        self._conn_factory = conn_factory

    async def get_session(self, session_id: str) -> Optional[Session]:
        return await asyncio.to_thread(self._get_session, session_id)

    async def get_participant_states(self, session_id: str) -> ParticipantStates:
        return await asyncio.to_thread(self._read_states, session_id, False)

    async def open_batch(self, session_id: str) -> ParticipantStates:
        return await asyncio.to_thread(self._read_states, session_id, True)

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
        if state == AttendanceState.UNMARKED:
            raise PersistenceFailure("attendance cannot be reset to UNMARKED")
        await asyncio.to_thread(
            self._write_state, session_id, participant_id, state, marked_at, int(version), rating, notes
        )

    def _get_session(self, session_id: str) -> Optional[Session]:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                """
                SELECT session_id, title, scheduled_date, start_time, end_time, version
                FROM sessions
                WHERE session_id=%s
                """,
                (session_id,),
            )
            s = fetchone(cur)
            if not s:
                return None
            cur.execute(
                """
                SELECT participant_id, user_id, state, marked_at, rating, notes
                FROM session_participants
                WHERE session_id=%s
                ORDER BY position, participant_id
                """,
                (session_id,),
            )
            rows = fetchall(cur)

        participants = tuple(
            Participant(
                participant_id=str(r["participant_id"]),
                user=UserId(str(r["user_id"])) if r.get("user_id") else None,
                state=AttendanceState(r["state"]),
                marked_at=r.get("marked_at"),
                rating=int(r["rating"]) if r.get("rating") is not None else None,
                notes=r.get("notes"),
            )
            for r in rows
        )
        return Session(
            session_id=str(s["session_id"]),
            title=str(s.get("title") or ""),
            scheduled_date=s.get("scheduled_date"),
            start_time=normalize_mysql_time(s.get("start_time")),
            end_time=normalize_mysql_time(s.get("end_time")),
            participants=participants,
            version=int(s["version"]),
        )

    def _read_states(self, session_id: str, claim: bool) -> ParticipantStates:
        try:
            with db_cursor(self._conn_factory) as (_, cur):
                if claim:
                    # Row lock on the session is held until commit, so the version
                    # bump and the snapshot below are one atomic step.
                    cur.execute("UPDATE sessions SET version = version + 1 WHERE session_id=%s", (session_id,))
                cur.execute("SELECT version FROM sessions WHERE session_id=%s", (session_id,))
                row = fetchone(cur)
                if not row:
                    raise NotFoundError(f"session {session_id} not found")
                cur.execute(
                    "SELECT participant_id, state FROM session_participants WHERE session_id=%s",
                    (session_id,),
                )
                states = {str(r["participant_id"]): AttendanceState(r["state"]) for r in fetchall(cur)}
        except mysql.connector.Error as exc:
            raise PersistenceFailure(f"could not read session {session_id}: {exc}") from exc
        return ParticipantStates(session_id=session_id, version=int(row["version"]), states=states)

    def _write_state(
        self,
        session_id: str,
        participant_id: str,
        state: AttendanceState,
        marked_at: datetime,
        version: int,
        rating: Optional[int],
        notes: Optional[str],
    ) -> None:
        try:
            with db_cursor(self._conn_factory) as (_, cur):
                cur.execute("SELECT version FROM sessions WHERE session_id=%s FOR UPDATE", (session_id,))
                row = fetchone(cur)
                if not row:
                    raise NotFoundError(f"session {session_id} not found")
                if int(row["version"]) != version:
                    raise ConcurrentModificationError(
                        f"session {session_id} is at version {row['version']}, write carried {version}"
                    )
                cur.execute(
                    """
                    UPDATE session_participants
                    SET state=%s, marked_at=%s, rating=%s, notes=%s
                    WHERE session_id=%s AND participant_id=%s
                    """,
                    (state.value, marked_at, rating, notes, session_id, participant_id),
                )
                if cur.rowcount == 0:
                    cur.execute(
                        "SELECT 1 AS found FROM session_participants WHERE session_id=%s AND participant_id=%s",
                        (session_id, participant_id),
                    )
                    if not fetchone(cur):
                        raise NotFoundError(f"participant {participant_id} not found in session {session_id}")
        except mysql.connector.Error as exc:
            raise PersistenceFailure(f"could not write participant {participant_id}: {exc}") from exc
