from __future__ import annotations

import asyncio
import smtplib
from unittest.mock import MagicMock

import pytest

from postboard.infrastructure.mail import (
    LoggingEmailSender,
    SmtpEmailSender,
    build_email_sender,
    build_message,
)
from postboard.shared.config import MailConfig
from postboard.shared.errors.base import EmailDeliveryError


def _config(**overrides) -> MailConfig:
    values = {
        "SMTP_HOST": "smtp.test",
        "SMTP_PORT": 2525,
        "SMTP_USERNAME": "mailer",
        "SMTP_PASSWORD": "secret",
        "MAIL_SENDER": "Postboard <no-reply@postboard.test>",
    }
    values.update(overrides)
    return MailConfig(**values)


def _factory(conn: MagicMock) -> MagicMock:
    factory = MagicMock()
    factory.return_value.__enter__.return_value = conn
    return factory


def test_build_message_has_html_part():
    message = build_message("from@test", "to@test", "Subject", "<b>hi</b>")

    assert message["To"] == "to@test"
    assert message["Subject"] == "Subject"
    assert message.get_body(preferencelist=("html",)).get_content().strip() == "<b>hi</b>"


def test_smtp_send():
    conn = MagicMock()
    factory = _factory(conn)
    sender = SmtpEmailSender(_config(), smtp_factory=factory)

    assert asyncio.run(sender.send("alice@example.com", "Hello", "<p>hi</p>")) is True

    factory.assert_called_once_with("smtp.test", 2525, timeout=10.0)
    conn.starttls.assert_called_once()
    conn.login.assert_called_once_with("mailer", "secret")
    sent = conn.send_message.call_args.args[0]
    assert sent["To"] == "alice@example.com"


def test_smtp_send_without_auth_or_tls():
    conn = MagicMock()
    sender = SmtpEmailSender(
        _config(SMTP_USERNAME=None, SMTP_STARTTLS=False), smtp_factory=_factory(conn)
    )

    asyncio.run(sender.send("alice@example.com", "Hello", "<p>hi</p>"))

    conn.starttls.assert_not_called()
    conn.login.assert_not_called()


def test_smtp_refused_recipient_returns_false():
    conn = MagicMock()
    conn.send_message.side_effect = smtplib.SMTPRecipientsRefused({})
    sender = SmtpEmailSender(_config(), smtp_factory=_factory(conn))

    assert asyncio.run(sender.send("alice@example.com", "Hello", "<p>hi</p>")) is False


def test_smtp_transport_failure_raises():
    factory = MagicMock(side_effect=ConnectionRefusedError())
    sender = SmtpEmailSender(_config(), smtp_factory=factory)

    with pytest.raises(EmailDeliveryError):
        asyncio.run(sender.send("alice@example.com", "Hello", "<p>hi</p>"))


def test_smtp_requires_host():
    with pytest.raises(ValueError):
        SmtpEmailSender(_config(SMTP_HOST=None))


def test_logging_sender_records_outbox():
    sender = LoggingEmailSender()

    assert asyncio.run(sender.send("alice@example.com", "Hello", "<p>hi</p>")) is True
    assert [(m.to, m.subject) for m in sender.outbox] == [("alice@example.com", "Hello")]


def test_build_email_sender_picks_backend():
    assert isinstance(build_email_sender(_config()), SmtpEmailSender)
    assert isinstance(build_email_sender(_config(SMTP_HOST=None)), LoggingEmailSender)
