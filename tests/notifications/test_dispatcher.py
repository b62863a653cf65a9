from __future__ import annotations

import asyncio

from src.session_attendance.session_attendance.core.enums import DeliveryOutcome
from src.session_attendance.session_attendance.core.exceptions import DispatchFailure
from src.session_attendance.session_attendance.notifications.dispatcher import NotificationDispatcher
from src.session_attendance.session_attendance.notifications.model import Delivery, DeliveryResult, OutboundMessage

MSG = OutboundMessage(subject="Attendance Marked", body="hello")


class RecordingNotifier:
    def __init__(self, *, failing=(), delays=None):
        self._failing = set(failing)
        self._delays = delays or {}
        self.started: list[str] = []
        self.completed: list[str] = []

    async def send(self, contact, message):
        self.started.append(contact)
        await asyncio.sleep(self._delays.get(contact, 0))
        if contact in self._failing:
            raise DispatchFailure(f"mailbox {contact} rejected")
        self.completed.append(contact)


class BarrierNotifier:
    """Every send waits until all expected sends have started."""

    def __init__(self, expected: int):
        self._expected = expected
        self._started = 0
        self._all_started = asyncio.Event()

    async def send(self, contact, message):
        self._started += 1
        if self._started == self._expected:
            self._all_started.set()
        await self._all_started.wait()


def _deliveries(*contacts):
    return [Delivery(f"p-{c}", c, MSG) for c in contacts]


def test_all_sent():
    notifier = RecordingNotifier()

    report = asyncio.run(NotificationDispatcher(notifier).dispatch(_deliveries("a@x", "b@x")))

    assert (report.sent, report.failed, report.skipped) == (2, 0, 0)
    assert [d.outcome for d in report.details] == [DeliveryOutcome.SENT, DeliveryOutcome.SENT]


def test_one_failure_does_not_affect_siblings():
    notifier = RecordingNotifier(failing={"b@x"})

    report = asyncio.run(NotificationDispatcher(notifier).dispatch(_deliveries("a@x", "b@x", "c@x")))

    assert (report.sent, report.failed) == (2, 1)
    assert sorted(notifier.completed) == ["a@x", "c@x"]
    failed = report.details[1]
    assert failed.outcome == DeliveryOutcome.FAILED
    assert failed.error == "mailbox b@x rejected"


def test_exactly_one_attempt_per_recipient():
    notifier = RecordingNotifier(failing={"a@x"})

    asyncio.run(NotificationDispatcher(notifier).dispatch(_deliveries("a@x", "b@x")))

    assert sorted(notifier.started) == ["a@x", "b@x"]


def test_sends_run_concurrently():
    async def scenario():
        dispatcher = NotificationDispatcher(BarrierNotifier(expected=3))
        # Sequential sends would never release the barrier.
        return await asyncio.wait_for(dispatcher.dispatch(_deliveries("a@x", "b@x", "c@x")), timeout=2)

    report = asyncio.run(scenario())

    assert report.sent == 3


def test_report_order_follows_input_not_completion():
    notifier = RecordingNotifier(delays={"a@x": 0.05, "b@x": 0.0, "c@x": 0.02})

    report = asyncio.run(NotificationDispatcher(notifier).dispatch(_deliveries("a@x", "b@x", "c@x")))

    assert notifier.completed == ["b@x", "c@x", "a@x"]
    assert [d.contact for d in report.details] == ["a@x", "b@x", "c@x"]


def test_timeout_reports_pending_sends_as_timed_out():
    notifier = RecordingNotifier(delays={"slow@x": 10})

    report = asyncio.run(
        NotificationDispatcher(notifier, timeout_seconds=0.05).dispatch(_deliveries("fast@x", "slow@x"))
    )

    assert (report.sent, report.failed) == (1, 1)
    assert report.details[1].outcome == DeliveryOutcome.TIMED_OUT
    assert "slow@x" not in notifier.completed


def test_skipped_and_rejected_are_folded_into_report():
    skipped = [DeliveryResult("p9", None, DeliveryOutcome.SKIPPED, "no-contact-address")]
    rejected = [DeliveryResult("p8", "z@x", DeliveryOutcome.FAILED, "template error")]

    report = asyncio.run(
        NotificationDispatcher(RecordingNotifier()).dispatch(_deliveries("a@x"), skipped=skipped, rejected=rejected)
    )

    assert (report.sent, report.failed, report.skipped) == (1, 1, 1)
    assert [d.participant_id for d in report.details] == ["p-a@x", "p8", "p9"]
    assert report.to_dict()["details"][2] == {
        "participantId": "p9",
        "contact": None,
        "outcome": "skipped",
        "error": "no-contact-address",
    }


def test_nothing_to_send():
    report = asyncio.run(NotificationDispatcher(RecordingNotifier()).dispatch([]))

    assert (report.sent, report.failed, report.skipped, report.details) == (0, 0, 0, ())
