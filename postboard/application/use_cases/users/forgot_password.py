# SPDX-License-Identifier: Apache-2.0
# Copyright 2025 Vova Orig

from __future__ import annotations

from html import escape

from postboard.application.services.reset_tokens import ResetTokenStore
from postboard.domain.users.entities import FieldError
from postboard.domain.users.repositories import EmailSender, UserRepository
from postboard.domain.users.validators import validate_email_exists
from postboard.shared.errors.base import EmailDeliveryError, InfrastructureError
from postboard.shared.logging import logger

from .results import SERVICE_UNAVAILABLE_MESSAGE, OkResult

RESET_EMAIL_SUBJECT = "Reset your password"


def reset_link(frontend_url: str, token: str) -> str:
    return f"{frontend_url.rstrip('/')}/change-password/{token}"


def render_reset_email(link: str) -> str:
    return f'<a href="{escape(link, quote=True)}">reset password</a>'


class ForgotPasswordUseCase:
    def __init__(
        self,
        *,
        users: UserRepository,
        reset_tokens: ResetTokenStore,
        email_sender: EmailSender,
        frontend_url: str,
        reveal_account_existence: bool = True,
    ) -> None:
        self._users = users
        self._reset_tokens = reset_tokens
        self._email_sender = email_sender
        self._frontend_url = frontend_url
        self._reveal_account_existence = reveal_account_existence

    async def execute(self, email: str) -> OkResult:
        email = email.strip()

        try:
            errors = await validate_email_exists(email, self._users)
            if errors:
                logger.info("auth.forgot: unknown email")
                if self._reveal_account_existence:
                    return OkResult.failure(*errors)
                return OkResult.success()

            token = await self._reset_tokens.issue(email)
        except InfrastructureError as exc:
            logger.error(f"auth.forgot: {exc.code} {dict(exc.context or {})}")
            return OkResult.failure(FieldError("email", SERVICE_UNAVAILABLE_MESSAGE))

        html = render_reset_email(reset_link(self._frontend_url, token))
        try:
            delivered = await self._email_sender.send(email, RESET_EMAIL_SUBJECT, html)
        except EmailDeliveryError as exc:
            logger.warning(f"auth.forgot: delivery error {dict(exc.context or {})}")
            delivered = False
        if not delivered:
            logger.warning("auth.forgot: reset e-mail was not delivered")

        logger.info("auth.forgot: reset token issued")
        return OkResult.success()
