# SPDX-License-Identifier: Apache-2.0
# Copyright 2025 Vova Orig

from __future__ import annotations

from postboard.domain.users.entities import User
from postboard.domain.users.repositories import SessionHolder, UserRepository
from postboard.shared.errors.base import InfrastructureError
from postboard.shared.logging import logger


class CurrentUserUseCase:
    def __init__(self, *, users: UserRepository) -> None:
        self._users = users

    async def execute(self, session: SessionHolder) -> User | None:
        try:
            user_id = await session.get_user_id()
            if user_id is None:
                return None
            return await self._users.find_by_id(user_id)
        except InfrastructureError as exc:
            logger.error(f"auth.me: {exc.code}")
            return None


class GetUserUseCase:
    def __init__(self, *, users: UserRepository) -> None:
        self._users = users

    async def execute(self, user_id: int) -> User | None:
        try:
            return await self._users.find_by_id(user_id)
        except InfrastructureError as exc:
            logger.error(f"users.get: {exc.code} user_id={user_id}")
            return None
