# SPDX-License-Identifier: Apache-2.0
# Copyright 2025 Vova Orig

from __future__ import annotations

import asyncio

from postboard.application.services.reset_tokens import ResetTokenStore
from postboard.domain.users.entities import FieldError
from postboard.domain.users.repositories import PasswordHasher, SessionHolder, UserRepository
from postboard.domain.users.validators import (
    PasswordPolicy,
    validate_new_passwords_match,
    validate_password_strength,
)
from postboard.shared.errors.base import InfrastructureError
from postboard.shared.logging import logger

from .results import SERVICE_UNAVAILABLE_MESSAGE, UserResult

TOKEN_EXPIRED_MESSAGE = "Token expired"
ACCOUNT_GONE_MESSAGE = "This account does not exist anymore"


class ResetPasswordUseCase:
    def __init__(
        self,
        *,
        users: UserRepository,
        reset_tokens: ResetTokenStore,
        password_hasher: PasswordHasher,
        password_policy: PasswordPolicy,
    ) -> None:
        self._users = users
        self._reset_tokens = reset_tokens
        self._password_hasher = password_hasher
        self._password_policy = password_policy

    async def execute(
        self,
        new_password: str,
        new_password_confirm: str,
        token: str,
        session: SessionHolder,
    ) -> UserResult:
        new_password = new_password.strip()
        new_password_confirm = new_password_confirm.strip()
        token = token.strip()

        errors = [
            *validate_new_passwords_match(new_password, new_password_confirm),
            *validate_password_strength(new_password, self._password_policy, field="newPassword"),
        ]
        if errors:
            return UserResult.failure(*errors)

        try:
            email = await self._reset_tokens.get(token)
            # Unknown and expired tokens are reported the same way.
            if email is None:
                logger.info("auth.password_reset: token missing or expired")
                return UserResult.failure(FieldError("token", TOKEN_EXPIRED_MESSAGE))

            hashed = await asyncio.to_thread(self._password_hasher.hash, new_password)
            user = await self._users.update_password_by_email(email, hashed)
            if user is None:
                logger.info("auth.password_reset: account removed after token was issued")
                await self._reset_tokens.delete(token)
                return UserResult.failure(FieldError("token", ACCOUNT_GONE_MESSAGE))
        except InfrastructureError as exc:
            logger.error(f"auth.password_reset: {exc.code} {dict(exc.context or {})}")
            return UserResult.failure(FieldError("token", SERVICE_UNAVAILABLE_MESSAGE))

        try:
            await self._reset_tokens.delete(token)
            await session.set_user_id(user.id)
        except InfrastructureError as exc:
            # The password is already changed at this point.
            logger.error(f"auth.password_reset: post-update step failed {exc.code}")

        logger.info(f"auth.password_reset: ok user_id={user.id}")
        return UserResult.success(user)
