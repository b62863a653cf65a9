from __future__ import annotations

import logging
from datetime import datetime
from typing import Sequence

from ..core.enums import AttendanceState
from ..core.exceptions import NotFoundError
from ..sessions.repository import SessionStore
from .model import AttendanceEntry, ItemResult, TransitionDecision

logger = logging.getLogger(__name__)


def decide_transition(previous: AttendanceState, attended: bool) -> TransitionDecision:
    """Notify on the first mark and on every Present/Absent flip, never on a repeat."""
    new_state = AttendanceState.PRESENT if attended else AttendanceState.ABSENT
    return TransitionDecision(previous=previous, new_state=new_state)


class StateTransitionEvaluator:
    def __init__(self, store: SessionStore):
        self._store = store

    async def evaluate(
        self, session_id: str, entries: Sequence[AttendanceEntry], *, now: datetime
    ) -> list[ItemResult]:
        """Apply a batch against one pre-batch snapshot.

        Every entry, including a repeated participant id, is compared with the state
        the participant had before the batch started, never with a write made
        earlier in the same batch. Writes happen in submission order, so the last
        occurrence of a participant decides what is stored.
        """
        snapshot = await self._store.open_batch(session_id)
        results: list[ItemResult] = []

        for entry in entries:
            pid = entry.participant_id
            if pid not in snapshot:
                results.append(
                    ItemResult(
                        participant_id=pid,
                        previous_state=None,
                        new_state=None,
                        notified=False,
                        error=str(NotFoundError(f"participant {pid} not found in session {session_id}")),
                    )
                )
                continue

            decision = decide_transition(snapshot.get(pid), entry.attended)
            logger.debug(
                "participant %s: %s -> %s notify=%s (first=%s, changed=%s)",
                pid,
                decision.previous.value,
                decision.new_state.value,
                "yes" if decision.notify else "no",
                decision.is_first_mark,
                decision.is_change,
            )

            try:
                await self._store.write_participant_state(
                    session_id,
                    pid,
                    decision.new_state,
                    marked_at=now,
                    version=snapshot.version,
                    rating=entry.rating,
                    notes=entry.notes,
                )
            except Exception as exc:
                logger.warning("could not persist attendance for participant %s: %s", pid, exc)
                results.append(
                    ItemResult(
                        participant_id=pid,
                        previous_state=decision.previous,
                        new_state=decision.new_state,
                        notified=False,
                        error=str(exc),
                    )
                )
                continue

            results.append(
                ItemResult(
                    participant_id=pid,
                    previous_state=decision.previous,
                    new_state=decision.new_state,
                    notified=decision.notify,
                )
            )
        return results
