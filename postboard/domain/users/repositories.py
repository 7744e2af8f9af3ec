# SPDX-License-Identifier: Apache-2.0
# Copyright 2025 Vova Orig

from __future__ import annotations

from typing import Protocol

from .entities import User


class UserRepository(Protocol):
    async def find_by_id(self, user_id: int) -> User | None: ...
    async def find_by_username(self, username: str) -> User | None: ...
    async def find_by_email(self, email: str) -> User | None: ...
    async def find_by_username_or_email(self, value: str) -> User | None: ...

    async def create(self, *, username: str, email: str, password_hash: str) -> User:
        """Persist a new user; raises ``UserAlreadyExistsError`` on a unique clash."""
        ...

    async def update_password_by_email(self, email: str, password_hash: str) -> User | None: ...


class SessionHolder(Protocol):
    """The caller's session as seen by the account use cases."""

    async def set_user_id(self, user_id: int) -> None: ...
    async def get_user_id(self) -> int | None: ...

    async def destroy(self) -> bool:
        """Drop the session. Returns ``False`` when the backing store failed."""
        ...


class KeyValueCache(Protocol):
    async def set(self, key: str, value: str, ttl_seconds: int) -> None: ...
    async def get(self, key: str) -> str | None: ...
    async def delete(self, key: str) -> None: ...


class EmailSender(Protocol):
    async def send(self, to: str, subject: str, html: str) -> bool: ...


class PasswordHasher(Protocol):
    def hash(self, password: str) -> str: ...
    def verify(self, password: str, hashed: str) -> bool: ...

    def needs_rehash(self, hashed: str) -> bool:
        """Whether ``hashed`` was produced with outdated parameters."""
        ...
