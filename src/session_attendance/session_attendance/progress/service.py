from __future__ import annotations

import asyncio
from datetime import date, datetime
from typing import Optional, Sequence

from ..core.exceptions import NotFoundError
from ..sessions.model import Session
from ..sessions.repository import SessionStore
from .calculator import AttendancePercentageCalculator, AttendanceSummary
from .status import attendance_display_status, is_attendance_eligible


class ProgressService:
    def __init__(self, sessions: SessionStore, *, calculator: Optional[AttendancePercentageCalculator] = None):
        self._sessions = sessions
        self._calculator = calculator or AttendancePercentageCalculator()

    async def _load(self, session_ids: Sequence[str]) -> list[Session]:
        # Each session counts once, however often the caller lists it.
        session_ids = list(dict.fromkeys(session_ids))
        loaded = await asyncio.gather(*(self._sessions.get_session(sid) for sid in session_ids))
        missing = [sid for sid, s in zip(session_ids, loaded) if s is None]
        if missing:
            raise NotFoundError(f"sessions not found: {', '.join(missing)}")
        return list(loaded)

    async def user_progress(self, user_id: str, session_ids: Sequence[str]) -> AttendanceSummary:
        return self._calculator.calculate(await self._load(session_ids), user_id)

    async def user_history(
        self, user_id: str, session_ids: Sequence[str], *, today: date, now: datetime
    ) -> list[dict]:
        rows = []
        for session in await self._load(session_ids):
            status = attendance_display_status(session, user_id, today)
            rows.append(
                {
                    "sessionId": session.session_id,
                    "title": session.title,
                    "date": session.scheduled_date.strftime("%Y-%m-%d") if session.scheduled_date else None,
                    "status": status.label,
                    "cssClass": status.css_class,
                    "canMark": is_attendance_eligible(session, now),
                }
            )
        return rows
