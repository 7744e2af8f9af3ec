# SPDX-License-Identifier: Apache-2.0
# Copyright 2025 Vova Orig

from __future__ import annotations

import asyncio
import smtplib
from collections.abc import Callable
from dataclasses import dataclass, field
from datetime import UTC, datetime
from email.message import EmailMessage

from postboard.domain.users.repositories import EmailSender
from postboard.shared.config import MailConfig
from postboard.shared.errors.base import EmailDeliveryError
from postboard.shared.logging import logger


def build_message(sender: str, to: str, subject: str, html: str) -> EmailMessage:
    message = EmailMessage()
    message["From"] = sender
    message["To"] = to
    message["Subject"] = subject
    message.set_content("Open this message in an HTML capable mail client.")
    message.add_alternative(html, subtype="html")
    return message


class SmtpEmailSender(EmailSender):
    """Sends mail through an SMTP relay.

    Returns ``False`` when the relay refuses the recipient and raises
    :class:`EmailDeliveryError` when the relay cannot be reached.
    """

    def __init__(
        self,
        config: MailConfig,
        *,
        smtp_factory: Callable[..., smtplib.SMTP] = smtplib.SMTP,
    ) -> None:
        if not config.smtp_host:
            raise ValueError("SMTP_HOST is not configured")
        self._config = config
        self._smtp_factory = smtp_factory

    def _deliver(self, message: EmailMessage) -> None:
        cfg = self._config
        with self._smtp_factory(cfg.smtp_host, cfg.smtp_port, timeout=cfg.smtp_timeout) as conn:
            if cfg.smtp_starttls:
                conn.starttls()
            if cfg.smtp_username:
                conn.login(cfg.smtp_username, cfg.smtp_password or "")
            conn.send_message(message)

    async def send(self, to: str, subject: str, html: str) -> bool:
        message = build_message(self._config.sender, to, subject, html)
        try:
            await asyncio.to_thread(self._deliver, message)
        except (smtplib.SMTPRecipientsRefused, smtplib.SMTPSenderRefused) as exc:
            logger.warning(f"mail: relay refused message: {type(exc).__name__}")
            return False
        except (smtplib.SMTPException, OSError) as exc:
            logger.error(f"mail: delivery failed: {type(exc).__name__}")
            raise EmailDeliveryError(type(exc).__name__) from exc
        logger.info(f"mail: sent subject={subject!r}")
        return True


@dataclass(slots=True, frozen=True)
class SentEmail:
    to: str
    subject: str
    html: str
    sent_at: datetime


@dataclass
class LoggingEmailSender(EmailSender):
    """Development sender: records messages in memory and logs them."""

    outbox: list[SentEmail] = field(default_factory=list)
    log_body: bool = False

    async def send(self, to: str, subject: str, html: str) -> bool:
        self.outbox.append(SentEmail(to=to, subject=subject, html=html, sent_at=datetime.now(UTC)))
        if self.log_body:
            logger.info(f"mail(dev): to={to} subject={subject!r} body={html}")
        else:
            logger.info(f"mail(dev): to={to} subject={subject!r}")
        return True


def build_email_sender(config: MailConfig) -> EmailSender:
    if config.smtp_host:
        return SmtpEmailSender(config)
    logger.warning("mail: SMTP_HOST not set, using logging sender")
    return LoggingEmailSender(log_body=True)


__all__ = [
    "LoggingEmailSender",
    "SentEmail",
    "SmtpEmailSender",
    "build_email_sender",
    "build_message",
]
