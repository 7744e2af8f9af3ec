# SPDX-License-Identifier: Apache-2.0
# Copyright 2025 Vova Orig

from __future__ import annotations

import secrets

from postboard.domain.users.repositories import KeyValueCache, SessionHolder
from postboard.shared.errors.base import InfrastructureError
from postboard.shared.logging import logger


def new_session_id() -> str:
    return secrets.token_urlsafe(32)


class CacheSessionHolder(SessionHolder):
    """A client session whose user id lives in the key-value cache.

    The session id travels in a cookie. Binding a user rotates the id so a
    pre-login id planted by a third party never becomes authenticated.
    """

    def __init__(
        self,
        cache: KeyValueCache,
        session_id: str | None,
        *,
        prefix: str,
        ttl_seconds: int,
    ) -> None:
        self._cache = cache
        self._prefix = prefix
        self._ttl = ttl_seconds
        self._client_session_id = session_id or None
        self.session_id: str | None = self._client_session_id
        self._user_id: int | None = None
        self._loaded = session_id is None
        self.modified = False
        self.destroyed = False

    def _key(self, session_id: str) -> str:
        return f"{self._prefix}{session_id}"

    async def set_user_id(self, user_id: int) -> None:
        previous = self.session_id
        session_id = new_session_id()
        await self._cache.set(self._key(session_id), str(user_id), self._ttl)
        self.session_id = session_id
        self._user_id = user_id
        self._loaded = True
        self.modified = True
        self.destroyed = False
        if previous:
            try:
                await self._cache.delete(self._key(previous))
            except InfrastructureError as exc:
                logger.warning(f"session: stale session not removed {exc.code}")

    async def get_user_id(self) -> int | None:
        if self._loaded or self.session_id is None:
            return self._user_id
        raw = await self._cache.get(self._key(self.session_id))
        self._loaded = True
        try:
            self._user_id = int(raw) if raw is not None else None
        except ValueError:
            logger.warning("session: discarded malformed session payload")
            self._user_id = None
        return self._user_id

    async def destroy(self) -> bool:
        session_id = self.session_id
        self._user_id = None
        self._loaded = True
        self.session_id = None
        self.destroyed = True
        if session_id is None:
            return True
        try:
            await self._cache.delete(self._key(session_id))
        except InfrastructureError as exc:
            logger.warning(f"session: destroy failed {exc.code}")
            return False
        return True


class CacheSessionStore:
    def __init__(self, cache: KeyValueCache, *, prefix: str, ttl_seconds: int) -> None:
        self._cache = cache
        self._prefix = prefix
        self._ttl = ttl_seconds

    @property
    def ttl_seconds(self) -> int:
        return self._ttl

    def open(self, session_id: str | None) -> CacheSessionHolder:
        return CacheSessionHolder(
            self._cache, session_id, prefix=self._prefix, ttl_seconds=self._ttl
        )


__all__ = ["CacheSessionHolder", "CacheSessionStore", "new_session_id"]
