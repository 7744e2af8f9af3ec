# SPDX-License-Identifier: Apache-2.0
# Copyright 2025 Vova Orig

from __future__ import annotations

import asyncio

from postboard.domain.users.entities import FieldError, User
from postboard.domain.users.repositories import PasswordHasher, SessionHolder, UserRepository
from postboard.domain.users.validators import (
    INVALID_CREDENTIALS_MESSAGE,
    validate_correct_password,
)
from postboard.shared.errors.base import InfrastructureError
from postboard.shared.logging import logger

from .results import SERVICE_UNAVAILABLE_MESSAGE, UserResult


class LoginUserUseCase:
    def __init__(
        self,
        *,
        users: UserRepository,
        password_hasher: PasswordHasher,
        reveal_account_existence: bool = True,
    ) -> None:
        self._users = users
        self._password_hasher = password_hasher
        self._reveal_account_existence = reveal_account_existence

    def _unknown_account(self) -> FieldError:
        if self._reveal_account_existence:
            return FieldError("usernameOrEmail", "That account doesn't exist")
        return FieldError("password", INVALID_CREDENTIALS_MESSAGE)

    async def execute(
        self, username_or_email: str, password: str, session: SessionHolder
    ) -> UserResult:
        credential = username_or_email.strip()
        password = password.strip()

        try:
            user = await self._users.find_by_username_or_email(credential)
            if user is None:
                logger.info("auth.login: unknown account")
                return UserResult.failure(self._unknown_account())

            errors = await asyncio.to_thread(
                validate_correct_password, password, user.password_hash, self._password_hasher
            )
            if errors:
                logger.info(f"auth.login: bad credentials user_id={user.id}")
                return UserResult.failure(*errors)

            await session.set_user_id(user.id)
        except InfrastructureError as exc:
            logger.error(f"auth.login: {exc.code} {dict(exc.context or {})}")
            return UserResult.failure(FieldError("usernameOrEmail", SERVICE_UNAVAILABLE_MESSAGE))

        logger.info(f"auth.login: ok user_id={user.id}")
        return UserResult.success(await self._upgrade_hash(user, password))

    async def _upgrade_hash(self, user: User, password: str) -> User:
        if not self._password_hasher.needs_rehash(user.password_hash):
            return user
        try:
            hashed = await asyncio.to_thread(self._password_hasher.hash, password)
            updated = await self._users.update_password_by_email(user.email, hashed)
        except InfrastructureError as exc:
            # The login itself already succeeded; the old hash stays usable.
            logger.warning(f"auth.login: hash upgrade skipped {exc.code} user_id={user.id}")
            return user
        logger.info(f"auth.login: hash upgraded user_id={user.id}")
        return updated or user
