# SPDX-License-Identifier: Apache-2.0
# Copyright 2025 Vova Orig

from __future__ import annotations

import uuid

from postboard.domain.users.repositories import KeyValueCache
from postboard.shared.logging import logger

DEFAULT_PREFIX = "forget-password:"
DEFAULT_TTL_SECONDS = 15 * 60


class ResetTokenStore:
    """Maps single-use password reset tokens to e-mail addresses.

    Entries live in the shared key-value cache under their own prefix; the
    cache enforces expiry.
    """

    def __init__(
        self,
        cache: KeyValueCache,
        *,
        prefix: str = DEFAULT_PREFIX,
        ttl_seconds: int = DEFAULT_TTL_SECONDS,
    ) -> None:
        self._cache = cache
        self._prefix = prefix
        self._ttl = ttl_seconds

    @property
    def ttl_seconds(self) -> int:
        return self._ttl

    def _key(self, token: str) -> str:
        return f"{self._prefix}{token}"

    async def issue(self, email: str) -> str:
        token = str(uuid.uuid4())
        await self.put(token, email)
        logger.debug(f"reset_tokens: issued ttl={self._ttl}s")
        return token

    async def put(self, token: str, email: str) -> None:
        await self._cache.set(self._key(token), email, self._ttl)

    async def get(self, token: str) -> str | None:
        if not token:
            return None
        return await self._cache.get(self._key(token))

    async def delete(self, token: str) -> None:
        await self._cache.delete(self._key(token))


__all__ = ["DEFAULT_PREFIX", "DEFAULT_TTL_SECONDS", "ResetTokenStore"]
