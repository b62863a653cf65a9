from __future__ import annotations

from typing import Protocol

from .model import OutboundMessage


class Notifier(Protocol):
    """Outbound transport. One call is one attempt; failures raise."""

    async def send(self, contact: str, message: OutboundMessage) -> None:
        raise NotImplementedError
