from __future__ import annotations

import logging
from dataclasses import replace
from datetime import datetime
from typing import Optional

from ..common.datetime_utils import Clock, SystemClock
from ..common.validators import require_non_empty
from ..core.enums import DeliveryOutcome, SkipReason
from ..core.exceptions import NotFoundError, ValidationError
from ..identity.model import ResolvedIdentity
from ..identity.resolver import IdentityResolver
from ..notifications.composer import AttendanceMessageComposer, MessageComposer
from ..notifications.dispatcher import NotificationDispatcher
from ..notifications.model import Delivery, DeliveryResult
from ..sessions.model import Participant, Session
from ..sessions.repository import SessionStore
from .evaluator import StateTransitionEvaluator
from .model import AttendanceEntry, BatchReport, ItemResult, MarkRequest

logger = logging.getLogger(__name__)


class AttendanceService:
    """Batch attendance marking: evaluate, persist, resolve, notify, report."""

    def __init__(
        self,
        sessions: SessionStore,
        resolver: IdentityResolver,
        dispatcher: NotificationDispatcher,
        *,
        composer: Optional[MessageComposer] = None,
        clock: Optional[Clock] = None,
    ):
        self._sessions = sessions
        self._evaluator = StateTransitionEvaluator(sessions)
        self._resolver = resolver
        self._dispatcher = dispatcher
        self._composer = composer or AttendanceMessageComposer()
        self._clock = clock or SystemClock()

    async def mark_attendance(self, request: MarkRequest) -> BatchReport:
        """Run one batch.

        Raises ValidationError or NotFoundError (missing session) before anything is
        written. Past that point every per-participant problem ends up in the
        report and the call returns normally.
        """
        self._validate(request)

        session = await self._sessions.get_session(request.session_id)
        if session is None:
            raise NotFoundError(f"session {request.session_id} not found")

        now = self._clock.now()
        results = await self._evaluator.evaluate(session.session_id, request.entries, now=now)

        flagged = self._participants_to_notify(session, request.entries, results, now)
        resolutions = await self._resolver.resolve(flagged)

        deliveries: list[Delivery] = []
        skipped: list[DeliveryResult] = []
        rejected: list[DeliveryResult] = []
        # A later entry in the batch undid the change an earlier one reported.
        flagged_ids = {p.participant_id for p in flagged}
        for pid in dict.fromkeys(r.participant_id for r in results if r.notified):
            if pid not in flagged_ids:
                skipped.append(
                    DeliveryResult(pid, None, DeliveryOutcome.SKIPPED, SkipReason.SUPERSEDED_IN_BATCH.value)
                )
        for resolution in resolutions:
            if not isinstance(resolution, ResolvedIdentity):
                skipped.append(
                    DeliveryResult(resolution.participant_id, None, DeliveryOutcome.SKIPPED, resolution.reason.value)
                )
                continue
            try:
                message = self._composer.compose(
                    session=session,
                    participant=resolution.participant,
                    user=resolution.user,
                    state=resolution.participant.state,
                )
            except Exception as exc:
                logger.warning("could not compose message for participant %s: %s", resolution.participant_id, exc)
                rejected.append(
                    DeliveryResult(resolution.participant_id, resolution.contact, DeliveryOutcome.FAILED, str(exc))
                )
                continue
            deliveries.append(Delivery(resolution.participant_id, resolution.contact, message))

        report = await self._dispatcher.dispatch(deliveries, skipped=skipped, rejected=rejected)

        logger.info(
            "attendance batch session=%s actor=%s items=%d notified=%d sent=%d failed=%d skipped=%d",
            session.session_id,
            request.actor,
            len(results),
            sum(1 for r in results if r.notified),
            report.sent,
            report.failed,
            report.skipped,
        )
        return BatchReport(session_id=session.session_id, results=tuple(results), notification_report=report)

    async def get_session(self, session_id: str) -> Session:
        session = await self._sessions.get_session(session_id)
        if session is None:
            raise NotFoundError(f"session {session_id} not found")
        return session

    @staticmethod
    def _validate(request: MarkRequest) -> None:
        require_non_empty(request.session_id, "sessionId")
        if not request.entries:
            raise ValidationError("attendanceEntries must not be empty")
        for idx, entry in enumerate(request.entries):
            require_non_empty(entry.participant_id, f"attendanceEntries[{idx}].participantId")
            if not isinstance(entry.attended, bool):
                raise ValidationError(f"attendanceEntries[{idx}].attended must be a boolean")

    @staticmethod
    def _participants_to_notify(
        session: Session,
        entries: tuple[AttendanceEntry, ...],
        results: list[ItemResult],
        now: datetime,
    ) -> list[Participant]:
        # One message per participant. The occurrence written last decides both
        # whether to notify and what state the message reports.
        last_written: dict[str, tuple[AttendanceEntry, ItemResult]] = {}
        for entry, result in zip(entries, results):
            if result.error is None and result.new_state is not None:
                last_written[result.participant_id] = (entry, result)

        participants: list[Participant] = []
        for pid, (entry, result) in last_written.items():
            base = session.participant(pid)
            if base is None or not result.notified:
                continue
            participants.append(
                replace(base, state=result.new_state, marked_at=now, rating=entry.rating, notes=entry.notes)
            )
        return participants
