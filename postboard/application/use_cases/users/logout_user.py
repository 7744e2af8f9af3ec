# SPDX-License-Identifier: Apache-2.0
# Copyright 2025 Vova Orig

"""Use-case for ending the caller's session."""

from __future__ import annotations

from postboard.domain.users.repositories import SessionHolder
from postboard.shared.errors.base import InfrastructureError
from postboard.shared.logging import logger

from .results import OkResult


class LogoutUserUseCase:
    async def execute(self, session: SessionHolder) -> OkResult:
        try:
            destroyed = await session.destroy()
        except InfrastructureError as exc:
            logger.warning(f"auth.logout: {exc.code}")
            destroyed = False

        if not destroyed:
            logger.warning("auth.logout: session store did not confirm destroy")
            return OkResult(ok=False)
        logger.info("auth.logout: ok")
        return OkResult.success()
