from __future__ import annotations

import asyncio

import pytest

from src.session_attendance.session_attendance.attendance.evaluator import StateTransitionEvaluator, decide_transition
from src.session_attendance.session_attendance.attendance.model import AttendanceEntry
from src.session_attendance.session_attendance.common.references import UserId
from src.session_attendance.session_attendance.core.enums import AttendanceState
from src.session_attendance.session_attendance.core.exceptions import PersistenceFailure
from src.session_attendance.session_attendance.sessions.memory_session_store import InMemorySessionStore
from src.session_attendance.session_attendance.sessions.model import Participant, Session

P = AttendanceState.PRESENT
A = AttendanceState.ABSENT
U = AttendanceState.UNMARKED


class FlakySessionStore(InMemorySessionStore):
    """Fails writes for selected participants."""

    def __init__(self, sessions, *, failing: set[str]):
        super().__init__(sessions)
        self._failing = failing
        self.writes: list[tuple[str, AttendanceState]] = []

    async def write_participant_state(self, session_id, participant_id, state, **kwargs):
        if participant_id in self._failing:
            raise PersistenceFailure(f"disk full for {participant_id}")
        self.writes.append((participant_id, state))
        await super().write_participant_state(session_id, participant_id, state, **kwargs)


def _session(**states: AttendanceState) -> Session:
    return Session(
        session_id="s1",
        participants=tuple(Participant(pid, UserId(f"user-{pid}"), state=st) for pid, st in states.items()),
    )


def _state_of(store, pid):
    return asyncio.run(store.get_participant_states("s1")).get(pid)


@pytest.mark.parametrize(
    "previous, attended, expected_state, notify",
    [
        (U, True, P, True),
        (U, False, A, True),
        (P, True, P, False),
        (A, False, A, False),
        (P, False, A, True),
        (A, True, P, True),
    ],
)
def test_decide_transition(previous, attended, expected_state, notify):
    decision = decide_transition(previous, attended)

    assert decision.new_state == expected_state
    assert decision.notify is notify
    assert decision.is_first_mark is (previous == U)


def test_first_mark_notifies_and_persists(fixed_now):
    store = InMemorySessionStore([_session(p1=U, p2=U)])
    results = asyncio.run(
        StateTransitionEvaluator(store).evaluate(
            "s1", [AttendanceEntry("p1", True), AttendanceEntry("p2", False)], now=fixed_now
        )
    )

    assert [(r.previous_state, r.new_state, r.notified) for r in results] == [(U, P, True), (U, A, True)]
    assert _state_of(store, "p1") == P
    assert _state_of(store, "p2") == A
    assert asyncio.run(store.get_session("s1")).participant("p1").marked_at == fixed_now


def test_unchanged_remark_is_not_notified(fixed_now):
    store = InMemorySessionStore([_session(p1=P)])

    (result,) = asyncio.run(StateTransitionEvaluator(store).evaluate("s1", [AttendanceEntry("p1", True)], now=fixed_now))

    assert result.notified is False
    assert result.error is None


def test_change_is_notified(fixed_now):
    store = InMemorySessionStore([_session(p1=P)])

    (result,) = asyncio.run(StateTransitionEvaluator(store).evaluate("s1", [AttendanceEntry("p1", False)], now=fixed_now))

    assert (result.previous_state, result.new_state, result.notified) == (P, A, True)
    assert _state_of(store, "p1") == A


def test_unknown_participant_is_a_per_item_error(fixed_now):
    store = InMemorySessionStore([_session(p1=U)])
    entries = [AttendanceEntry("ghost", True), AttendanceEntry("p1", True)]

    results = asyncio.run(StateTransitionEvaluator(store).evaluate("s1", entries, now=fixed_now))

    assert len(results) == len(entries)
    assert results[0].participant_id == "ghost"
    assert results[0].notified is False
    assert "not found" in results[0].error
    assert results[1].notified is True
    assert _state_of(store, "p1") == P


def test_duplicates_are_judged_against_the_pre_batch_snapshot(fixed_now):
    store = InMemorySessionStore([_session(p1=U)])
    entries = [AttendanceEntry("p1", True), AttendanceEntry("p1", False)]

    results = asyncio.run(StateTransitionEvaluator(store).evaluate("s1", entries, now=fixed_now))

    assert [r.previous_state for r in results] == [U, U]
    assert [r.notified for r in results] == [True, True]
    # last occurrence wins in the store
    assert _state_of(store, "p1") == A


def test_duplicate_returning_to_original_state(fixed_now):
    store = InMemorySessionStore([_session(p1=P)])
    entries = [AttendanceEntry("p1", False), AttendanceEntry("p1", True)]

    results = asyncio.run(StateTransitionEvaluator(store).evaluate("s1", entries, now=fixed_now))

    assert [r.notified for r in results] == [True, False]
    assert _state_of(store, "p1") == P


def test_write_failure_is_isolated(fixed_now):
    store = FlakySessionStore([_session(p1=U, p2=U, p3=U)], failing={"p2"})
    entries = [AttendanceEntry("p1", True), AttendanceEntry("p2", True), AttendanceEntry("p3", False)]

    results = asyncio.run(StateTransitionEvaluator(store).evaluate("s1", entries, now=fixed_now))

    assert results[1].error == "disk full for p2"
    assert results[1].notified is False
    assert results[0].notified is True and results[2].notified is True
    assert store.writes == [("p1", P), ("p3", A)]


def test_overtaken_batch_reports_errors(fixed_now):
    store = InMemorySessionStore([_session(p1=U, p2=U)])

    async def scenario():
        evaluator = StateTransitionEvaluator(store)
        original_write = store.write_participant_state
        calls = 0

        async def write_then_get_overtaken(*args, **kwargs):
            nonlocal calls
            calls += 1
            await original_write(*args, **kwargs)
            if calls == 1:
                # another batch claims the session between our two writes
                await store.open_batch("s1")

        store.write_participant_state = write_then_get_overtaken
        return await evaluator.evaluate("s1", [AttendanceEntry("p1", True), AttendanceEntry("p2", True)], now=fixed_now)

    results = asyncio.run(scenario())

    assert results[0].error is None
    assert results[1].error is not None and "version" in results[1].error
    assert results[1].notified is False
