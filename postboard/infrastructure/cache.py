# SPDX-License-Identifier: Apache-2.0
# Copyright 2025 Vova Orig

from __future__ import annotations

import time
from collections.abc import Callable
from dataclasses import dataclass
from threading import Lock

from postboard.domain.users.repositories import KeyValueCache
from postboard.shared.logging import logger


@dataclass(slots=True)
class CacheEntry:
    value: str
    expires_at: float

    def is_expired(self, now: float) -> bool:
        return now >= self.expires_at


class InMemoryTTLCache(KeyValueCache):
    """Process-local key-value cache with per-entry expiry.

    Used when no Redis URL is configured, and in tests. Expired entries are
    dropped on access and by a sweep every ``sweep_interval`` writes, so keys
    that are never read again still go away.
    """

    def __init__(
        self,
        *,
        clock: Callable[[], float] = time.monotonic,
        sweep_interval: int = 256,
    ) -> None:
        self._clock = clock
        self._sweep_interval = max(1, sweep_interval)
        self._writes = 0
        self._lock = Lock()
        self._store: dict[str, CacheEntry] = {}

    async def set(self, key: str, value: str, ttl_seconds: int) -> None:
        expires_at = self._clock() + ttl_seconds
        with self._lock:
            self._store[key] = CacheEntry(value=value, expires_at=expires_at)
            self._writes += 1
            sweep = self._writes % self._sweep_interval == 0
        if sweep:
            self.purge_expired()

    async def get(self, key: str) -> str | None:
        now = self._clock()
        with self._lock:
            entry = self._store.get(key)
            if entry is None:
                return None
            if entry.is_expired(now):
                self._store.pop(key, None)
                logger.debug("cache: expired entry dropped")
                return None
            return entry.value

    async def delete(self, key: str) -> None:
        with self._lock:
            self._store.pop(key, None)

    def purge_expired(self) -> int:
        now = self._clock()
        with self._lock:
            expired = [key for key, entry in self._store.items() if entry.is_expired(now)]
            for key in expired:
                del self._store[key]
        if expired:
            logger.debug(f"cache: purged {len(expired)} expired entries")
        return len(expired)

    def __len__(self) -> int:
        with self._lock:
            return len(self._store)


__all__ = ["CacheEntry", "InMemoryTTLCache"]
