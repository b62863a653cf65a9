"""Console notifier for local development.

Writes what would be sent to the log instead of talking to a mail server.
"""

from __future__ import annotations

import logging

from .model import OutboundMessage
from .notifier import Notifier

logger = logging.getLogger(__name__)


class ConsoleNotifier(Notifier):
    def __init__(self):
        self.sent: list[tuple[str, OutboundMessage]] = []

    async def send(self, contact: str, message: OutboundMessage) -> None:
        self.sent.append((contact, message))
        logger.info("[NOTIFY] to=%s subject=%r", contact, message.subject)
        logger.debug("[NOTIFY] body=%s", message.body)
