# SPDX-License-Identifier: Apache-2.0
# Copyright 2025 Vova Orig

from __future__ import annotations

from collections.abc import Iterable
from datetime import datetime
from typing import Any

from pydantic import BaseModel, ConfigDict, Field

from postboard.domain.users.entities import FieldError, User


class _RequestDTO(BaseModel):
    model_config = ConfigDict(populate_by_name=True, extra="ignore")


class RegisterRequestDTO(_RequestDTO):
    username: str = Field(max_length=64)
    email: str = Field(max_length=254)
    # Strength is checked by the password policy, this only bounds the payload.
    password: str = Field(max_length=1024)


class LoginRequestDTO(_RequestDTO):
    username_or_email: str = Field(alias="usernameOrEmail", max_length=254)
    password: str = Field(max_length=1024)


class ForgotPasswordRequestDTO(_RequestDTO):
    email: str = Field(max_length=254)


class ResetPasswordRequestDTO(_RequestDTO):
    new_password: str = Field(alias="newPassword", max_length=1024)
    new_password_confirm: str = Field(alias="newPasswordConfirm", max_length=1024)
    token: str = Field(max_length=128)


class FieldErrorDTO(BaseModel):
    field: str
    message: str

    @classmethod
    def from_domain(cls, error: FieldError) -> FieldErrorDTO:
        return cls(field=error.field, message=error.message)


class UserDTO(BaseModel):
    """Public view of a user. Never carries the password hash."""

    model_config = ConfigDict(populate_by_name=True)

    id: int
    username: str
    email: str
    created_at: datetime = Field(serialization_alias="createdAt")
    updated_at: datetime = Field(serialization_alias="updatedAt")

    @classmethod
    def from_domain(cls, user: User) -> UserDTO:
        return cls(
            id=user.id,
            username=user.username,
            email=user.email,
            created_at=user.created_at,
            updated_at=user.updated_at,
        )


def errors_payload(errors: Iterable[FieldError]) -> dict[str, Any]:
    return {"errors": [FieldErrorDTO.from_domain(e).model_dump() for e in errors]}


def user_payload(user: User | None) -> dict[str, Any]:
    if user is None:
        return {"user": None}
    return {"user": UserDTO.from_domain(user).model_dump(mode="json", by_alias=True)}
