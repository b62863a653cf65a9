from __future__ import annotations

import asyncio
import logging
from typing import Iterable, Optional, Sequence

from ..core.enums import DeliveryOutcome
from .model import Delivery, DeliveryResult, NotificationReport
from .notifier import Notifier

logger = logging.getLogger(__name__)


class NotificationDispatcher:
    """Fan a list of deliveries out to a notifier and settle all of them.

    Every send runs as its own task. A send that raises only marks its own
    delivery failed; siblings keep running. There is exactly one attempt per
    delivery. With ``timeout_seconds`` set, sends still pending at the deadline
    are cancelled and reported as timed out.
    """

    def __init__(self, notifier: Notifier, *, timeout_seconds: Optional[float] = None):
        self._notifier = notifier
        self._timeout = timeout_seconds

    async def dispatch(
        self,
        deliveries: Sequence[Delivery],
        *,
        skipped: Iterable[DeliveryResult] = (),
        rejected: Iterable[DeliveryResult] = (),
    ) -> NotificationReport:
        """Send every delivery once and report.

        ``skipped`` are participants that never had a contact to send to; ``rejected``
        are deliveries that failed before reaching the notifier. Both are folded into
        the report as given.
        """
        skipped = tuple(skipped)
        rejected = tuple(rejected)
        results: list[DeliveryResult] = []

        if deliveries:
            tasks = [asyncio.create_task(self._notifier.send(d.contact, d.message)) for d in deliveries]
            _, pending = await asyncio.wait(tasks, timeout=self._timeout)
            for task in pending:
                task.cancel()
            if pending:
                # Let cancelled sends unwind before reading their state.
                await asyncio.gather(*pending, return_exceptions=True)

            # Built in input order, so the report does not depend on completion order.
            for delivery, task in zip(deliveries, tasks):
                results.append(self._settle(delivery, task, timed_out=task in pending))

        results.extend(rejected)
        sent = sum(1 for r in results if r.outcome == DeliveryOutcome.SENT)
        failed = len(results) - sent
        report = NotificationReport(
            sent=sent,
            failed=failed,
            skipped=len(skipped),
            details=tuple(results) + skipped,
        )
        logger.info("dispatch settled: sent=%d failed=%d skipped=%d", report.sent, report.failed, report.skipped)
        return report

    @staticmethod
    def _settle(delivery: Delivery, task: asyncio.Task, *, timed_out: bool) -> DeliveryResult:
        if timed_out:
            logger.warning("send to %s timed out", delivery.contact)
            return DeliveryResult(delivery.participant_id, delivery.contact, DeliveryOutcome.TIMED_OUT, "timed out")

        if task.cancelled():
            return DeliveryResult(delivery.participant_id, delivery.contact, DeliveryOutcome.FAILED, "cancelled")

        exc = task.exception()
        if exc is not None:
            logger.warning("send to %s failed: %s", delivery.contact, exc)
            return DeliveryResult(
                delivery.participant_id, delivery.contact, DeliveryOutcome.FAILED, str(exc) or type(exc).__name__
            )

        return DeliveryResult(delivery.participant_id, delivery.contact, DeliveryOutcome.SENT)
