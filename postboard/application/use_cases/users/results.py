# SPDX-License-Identifier: Apache-2.0
# Copyright 2025 Vova Orig

from __future__ import annotations

from dataclasses import dataclass

from postboard.domain.users.entities import FieldError, User

SERVICE_UNAVAILABLE_MESSAGE = "Something went wrong, please try again"


@dataclass(slots=True, frozen=True)
class UserResult:
    """Either the affected user or the field errors that prevented the operation."""

    user: User | None = None
    errors: tuple[FieldError, ...] = ()

    @classmethod
    def success(cls, user: User) -> UserResult:
        return cls(user=user)

    @classmethod
    def failure(cls, *errors: FieldError) -> UserResult:
        return cls(errors=tuple(errors))

    @property
    def ok(self) -> bool:
        return not self.errors


@dataclass(slots=True, frozen=True)
class OkResult:
    """Result for operations without a payload."""

    ok: bool = False
    errors: tuple[FieldError, ...] = ()

    @classmethod
    def success(cls) -> OkResult:
        return cls(ok=True)

    @classmethod
    def failure(cls, *errors: FieldError) -> OkResult:
        return cls(ok=False, errors=tuple(errors))


__all__ = ["OkResult", "SERVICE_UNAVAILABLE_MESSAGE", "UserResult"]
