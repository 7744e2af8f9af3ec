# SPDX-License-Identifier: Apache-2.0
# Copyright 2025 Vova Orig

from __future__ import annotations

import asyncio
from collections.abc import Callable
from typing import Any, TypeVar

import redis

from postboard.domain.users.repositories import KeyValueCache
from postboard.shared.config import CacheConfig
from postboard.shared.errors.base import CacheUnavailableError
from postboard.shared.logging import logger

T = TypeVar("T")


class RedisCache(KeyValueCache):
    """Key-value cache backed by Redis; expiry is left to Redis ``EX``.

    ``redis.Redis`` is thread safe and connects lazily, so one client is
    shared and each command runs in a worker thread.
    """

    def __init__(self, client: redis.Redis) -> None:
        self._client = client

    @classmethod
    def from_config(cls, config: CacheConfig) -> RedisCache:
        if not config.redis_url:
            raise ValueError("REDIS_URL is not configured")
        client = redis.Redis.from_url(
            config.redis_url,
            decode_responses=True,
            socket_timeout=config.socket_timeout,
            socket_connect_timeout=config.socket_timeout,
        )
        logger.debug("cache: redis client created")
        return cls(client)

    async def _call(self, operation: str, fn: Callable[..., T], *args: Any, **kwargs: Any) -> T:
        try:
            return await asyncio.to_thread(fn, *args, **kwargs)
        except redis.exceptions.RedisError as exc:
            logger.error(f"cache: redis {operation} failed: {type(exc).__name__}")
            raise CacheUnavailableError(operation) from exc

    async def set(self, key: str, value: str, ttl_seconds: int) -> None:
        await self._call("set", self._client.set, key, value, ex=ttl_seconds)

    async def get(self, key: str) -> str | None:
        value = await self._call("get", self._client.get, key)
        if value is None:
            return None
        if isinstance(value, bytes):
            return value.decode("utf-8")
        return str(value)

    async def delete(self, key: str) -> None:
        await self._call("delete", self._client.delete, key)

    async def ping(self) -> bool:
        try:
            return bool(await self._call("ping", self._client.ping))
        except CacheUnavailableError:
            return False


__all__ = ["RedisCache"]
