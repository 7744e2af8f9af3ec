# SPDX-License-Identifier: Apache-2.0
# Copyright 2025 Vova Orig

from __future__ import annotations

import asyncio

from postboard.domain.users.entities import FieldError
from postboard.domain.users.exceptions import UserAlreadyExistsError
from postboard.domain.users.repositories import PasswordHasher, SessionHolder, UserRepository
from postboard.domain.users.validators import (
    PasswordPolicy,
    validate_email_format,
    validate_new_email,
    validate_new_username,
    validate_password_strength,
    validate_username_format,
    validate_username_not_empty,
)
from postboard.shared.errors.base import InfrastructureError
from postboard.shared.logging import logger

from .results import SERVICE_UNAVAILABLE_MESSAGE, UserResult


class RegisterUserUseCase:
    def __init__(
        self,
        *,
        users: UserRepository,
        password_hasher: PasswordHasher,
        password_policy: PasswordPolicy,
    ) -> None:
        self._users = users
        self._password_hasher = password_hasher
        self._password_policy = password_policy

    async def execute(
        self, username: str, email: str, password: str, session: SessionHolder
    ) -> UserResult:
        username = username.strip()
        email = email.strip()
        password = password.strip()

        try:
            errors = [
                *validate_username_not_empty(username),
                *validate_username_format(username),
                *validate_email_format(email),
                *(await validate_new_username(username, self._users)),
                *(await validate_new_email(email, self._users)),
                *validate_password_strength(password, self._password_policy),
            ]
            if errors:
                logger.info(f"auth.register: rejected fields={[e.field for e in errors]}")
                return UserResult.failure(*errors)

            hashed = await asyncio.to_thread(self._password_hasher.hash, password)
            # The pre-checks above can race; the unique constraints have the last word.
            user = await self._users.create(username=username, email=email, password_hash=hashed)
            await session.set_user_id(user.id)
        except UserAlreadyExistsError as exc:
            logger.info(f"auth.register: storage rejected duplicate {exc.field}")
            return UserResult.failure(FieldError(exc.field, f"That {exc.field} is already taken"))
        except InfrastructureError as exc:
            logger.error(f"auth.register: {exc.code} {dict(exc.context or {})}")
            return UserResult.failure(FieldError("username", SERVICE_UNAVAILABLE_MESSAGE))

        logger.info(f"auth.register: ok user_id={user.id}")
        return UserResult.success(user)
