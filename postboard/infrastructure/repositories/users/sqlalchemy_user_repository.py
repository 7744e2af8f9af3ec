# SPDX-License-Identifier: Apache-2.0
# Copyright 2025 Vova Orig

from __future__ import annotations

import asyncio
from collections.abc import Callable
from typing import TypeVar

from sqlalchemy import or_, select
from sqlalchemy.exc import IntegrityError, SQLAlchemyError
from sqlalchemy.orm import Session

from postboard.domain.users.entities import User as DomainUser
from postboard.domain.users.exceptions import UserAlreadyExistsError
from postboard.domain.users.repositories import UserRepository
from postboard.infrastructure.db.models import User
from postboard.infrastructure.db.session import SessionFactory, session_scope
from postboard.shared.errors.base import StorageUnavailableError
from postboard.shared.logging import logger

T = TypeVar("T")


def _to_domain(row: User) -> DomainUser:
    return DomainUser(
        id=row.id,
        username=row.username,
        email=row.email,
        password_hash=row.password_hash,
        created_at=row.created_at,
        updated_at=row.updated_at,
    )


def _duplicate_field(exc: IntegrityError) -> str:
    message = str(exc.orig).lower()
    if "email" in message:
        return "email"
    return "username"


class SqlAlchemyUserRepository(UserRepository):
    def __init__(self, session_factory: SessionFactory) -> None:
        self._session_factory = session_factory

    async def _run(self, operation: str, fn: Callable[[Session], T]) -> T:
        def _call() -> T:
            with session_scope(self._session_factory) as session:
                return fn(session)

        try:
            return await asyncio.to_thread(_call)
        except IntegrityError as exc:
            field = _duplicate_field(exc)
            logger.info(f"users.repo: unique constraint on {field} during {operation}")
            raise UserAlreadyExistsError(field) from exc
        except SQLAlchemyError as exc:
            logger.error(f"users.repo: {operation} failed: {type(exc).__name__}")
            raise StorageUnavailableError(operation) from exc

    async def find_by_id(self, user_id: int) -> DomainUser | None:
        def _find(session: Session) -> DomainUser | None:
            row = session.get(User, user_id)
            return _to_domain(row) if row else None

        return await self._run("find_by_id", _find)

    async def find_by_username(self, username: str) -> DomainUser | None:
        def _find(session: Session) -> DomainUser | None:
            row = session.scalars(select(User).where(User.username == username)).first()
            return _to_domain(row) if row else None

        return await self._run("find_by_username", _find)

    async def find_by_email(self, email: str) -> DomainUser | None:
        def _find(session: Session) -> DomainUser | None:
            row = session.scalars(select(User).where(User.email == email)).first()
            return _to_domain(row) if row else None

        return await self._run("find_by_email", _find)

    async def find_by_username_or_email(self, value: str) -> DomainUser | None:
        def _find(session: Session) -> DomainUser | None:
            row = session.scalars(
                select(User).where(or_(User.username == value, User.email == value))
            ).first()
            return _to_domain(row) if row else None

        return await self._run("find_by_username_or_email", _find)

    async def create(self, *, username: str, email: str, password_hash: str) -> DomainUser:
        def _create(session: Session) -> DomainUser:
            row = User(username=username, email=email, password_hash=password_hash)
            session.add(row)
            session.flush()
            session.refresh(row)
            return _to_domain(row)

        return await self._run("create", _create)

    async def update_password_by_email(
        self, email: str, password_hash: str
    ) -> DomainUser | None:
        def _update(session: Session) -> DomainUser | None:
            row = session.scalars(select(User).where(User.email == email)).first()
            if not row:
                return None
            row.password_hash = password_hash
            session.flush()
            session.refresh(row)
            return _to_domain(row)

        return await self._run("update_password_by_email", _update)


__all__ = ["SqlAlchemyUserRepository"]
