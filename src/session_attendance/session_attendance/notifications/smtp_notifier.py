from __future__ import annotations

import asyncio
import logging
import smtplib
from dataclasses import dataclass
from email.message import EmailMessage
from typing import Optional

from ..core.exceptions import DispatchFailure
from .model import OutboundMessage
from .notifier import Notifier

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class SMTPSettings:
    host: str
    port: int
    from_address: str
    user: Optional[str] = None
    password: Optional[str] = None
    from_name: str = ""
    timeout_seconds: float = 10.0


class SMTPNotifier(Notifier):
    """Sends each message over its own SMTP connection in a worker thread."""

    def __init__(self, settings: SMTPSettings):
        self._settings = settings

    async def send(self, contact: str, message: OutboundMessage) -> None:
        await asyncio.to_thread(self._send_blocking, contact, message)

    def _send_blocking(self, contact: str, message: OutboundMessage) -> None:
        s = self._settings
        msg = EmailMessage()
        msg["Subject"] = message.subject
        msg["To"] = contact
        msg["From"] = f"{s.from_name} <{s.from_address}>" if s.from_name else s.from_address
        msg.set_content(message.body)
        if message.html:
            msg.add_alternative(message.html, subtype="html")

        try:
            if s.port == 465:
                server = smtplib.SMTP_SSL(s.host, s.port, timeout=s.timeout_seconds)
            else:
                server = smtplib.SMTP(s.host, s.port, timeout=s.timeout_seconds)
                if s.port == 587:
                    server.starttls()
            try:
                if s.user and s.password:
                    server.login(s.user, s.password)
                server.send_message(msg)
            finally:
                server.quit()
        except (smtplib.SMTPException, OSError) as exc:
            logger.warning("[MAIL-OUT] to=%s host=%s result=%s", contact, s.host, exc)
            raise DispatchFailure(f"SMTP send to {contact} failed: {exc}") from exc

        logger.info("[MAIL-OUT] to=%s subject=%r host=%s result=sent", contact, message.subject, s.host)
