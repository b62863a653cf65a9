from __future__ import annotations

import asyncio
import smtplib
from unittest import mock

import pytest

from src.session_attendance.session_attendance.core.exceptions import DispatchFailure
from src.session_attendance.session_attendance.notifications.model import OutboundMessage
from src.session_attendance.session_attendance.notifications.smtp_notifier import SMTPNotifier, SMTPSettings

SMTP_MODULE = "src.session_attendance.session_attendance.notifications.smtp_notifier.smtplib"


def _settings(port: int, **kwargs) -> SMTPSettings:
    return SMTPSettings(host="mail.example.com", port=port, from_address="attendance@example.com", **kwargs)


def _message() -> OutboundMessage:
    return OutboundMessage(subject="Attendance Marked (Present) - Clinic", body="Hi Asha,")


@mock.patch(f"{SMTP_MODULE}.SMTP")
@mock.patch(f"{SMTP_MODULE}.SMTP_SSL")
def test_port_465_uses_ssl(ssl_mock, plain_mock):
    asyncio.run(SMTPNotifier(_settings(465, user="bot", password="pw")).send("asha@example.com", _message()))

    plain_mock.assert_not_called()
    ssl_mock.assert_called_once_with("mail.example.com", 465, timeout=10.0)
    server = ssl_mock.return_value
    server.starttls.assert_not_called()
    server.login.assert_called_once_with("bot", "pw")
    sent = server.send_message.call_args.args[0]
    assert sent["To"] == "asha@example.com"
    assert sent["Subject"] == "Attendance Marked (Present) - Clinic"
    server.quit.assert_called_once()


@mock.patch(f"{SMTP_MODULE}.SMTP")
@mock.patch(f"{SMTP_MODULE}.SMTP_SSL")
def test_port_587_upgrades_with_starttls(ssl_mock, plain_mock):
    asyncio.run(SMTPNotifier(_settings(587, from_name="Coaches")).send("asha@example.com", _message()))

    ssl_mock.assert_not_called()
    server = plain_mock.return_value
    server.starttls.assert_called_once()
    server.login.assert_not_called()
    assert server.send_message.call_args.args[0]["From"] == "Coaches <attendance@example.com>"


@mock.patch(f"{SMTP_MODULE}.SMTP")
def test_other_ports_send_without_tls(plain_mock):
    asyncio.run(SMTPNotifier(_settings(25)).send("asha@example.com", _message()))

    plain_mock.return_value.starttls.assert_not_called()
    plain_mock.return_value.send_message.assert_called_once()


@mock.patch(f"{SMTP_MODULE}.SMTP")
def test_smtp_error_becomes_dispatch_failure(plain_mock):
    server = plain_mock.return_value
    server.send_message.side_effect = smtplib.SMTPRecipientsRefused({"asha@example.com": (550, b"no such user")})

    with pytest.raises(DispatchFailure, match="asha@example.com"):
        asyncio.run(SMTPNotifier(_settings(587)).send("asha@example.com", _message()))

    server.quit.assert_called_once()


@mock.patch(f"{SMTP_MODULE}.SMTP", side_effect=ConnectionRefusedError("refused"))
def test_connection_error_becomes_dispatch_failure(_plain_mock):
    with pytest.raises(DispatchFailure):
        asyncio.run(SMTPNotifier(_settings(587)).send("asha@example.com", _message()))
