# SPDX-License-Identifier: Apache-2.0
# Copyright 2025 Vova Orig

"""Field validators for account input.

Every validator returns a (possibly empty) list of :class:`FieldError` so
results can be concatenated. Expected bad input never raises; the async
validators only read from the user repository.
"""

from __future__ import annotations

import re
from dataclasses import dataclass

from .entities import FieldError
from .repositories import PasswordHasher, UserRepository

INVALID_CREDENTIALS_MESSAGE = "Invalid username or password"

_EMAIL_RE = re.compile(r"^[^@\s]+@[^@\s]+\.[^@\s]+$")


@dataclass(slots=True, frozen=True)
class PasswordPolicy:
    min_length: int = 8
    max_length: int = 128
    require_letter: bool = False
    require_digit: bool = False

    def violations(self, password: str) -> list[str]:
        try:
            password.encode("utf-8")
        except UnicodeEncodeError:
            return ["Password contains invalid characters"]

        problems: list[str] = []
        if len(password) < self.min_length:
            problems.append(f"Password must be at least {self.min_length} characters long")
        if len(password) > self.max_length:
            problems.append(f"Password must be at most {self.max_length} characters long")
        if self.require_letter and not re.search(r"[A-Za-z]", password):
            problems.append("Password must contain at least one letter")
        if self.require_digit and not re.search(r"\d", password):
            problems.append("Password must contain at least one digit")
        return problems


def validate_username_not_empty(username: str) -> list[FieldError]:
    if not username.strip():
        return [FieldError("username", "Username cannot be empty")]
    return []


def validate_username_format(username: str) -> list[FieldError]:
    # Login accepts a username or an e-mail in one field.
    if "@" in username:
        return [FieldError("username", "Username cannot include an @")]
    return []


def validate_email_format(email: str) -> list[FieldError]:
    if not _EMAIL_RE.match(email):
        return [FieldError("email", "Invalid email")]
    return []


async def validate_new_username(username: str, users: UserRepository) -> list[FieldError]:
    if await users.find_by_username(username):
        return [FieldError("username", f"The username {username} is already taken")]
    return []


validate_user_does_not_exist = validate_new_username


async def validate_new_email(email: str, users: UserRepository) -> list[FieldError]:
    if await users.find_by_email(email):
        return [FieldError("email", "An account with that email already exists")]
    return []


async def validate_email_exists(email: str, users: UserRepository) -> list[FieldError]:
    if await users.find_by_email(email) is None:
        return [FieldError("email", "No account is registered with that email")]
    return []


def validate_password_strength(
    password: str, policy: PasswordPolicy, *, field: str = "password"
) -> list[FieldError]:
    problems = policy.violations(password)
    if problems:
        return [FieldError(field, problems[0])]
    return []


def validate_correct_password(
    password: str, password_hash: str, hasher: PasswordHasher
) -> list[FieldError]:
    if not hasher.verify(password, password_hash):
        return [FieldError("password", INVALID_CREDENTIALS_MESSAGE)]
    return []


validate_password_match = validate_correct_password


def validate_new_passwords_match(new_password: str, confirmation: str) -> list[FieldError]:
    if new_password.strip() != confirmation.strip():
        return [FieldError("newPasswordConfirm", "Passwords do not match")]
    return []


__all__ = [
    "INVALID_CREDENTIALS_MESSAGE",
    "PasswordPolicy",
    "validate_correct_password",
    "validate_email_exists",
    "validate_email_format",
    "validate_new_email",
    "validate_new_passwords_match",
    "validate_new_username",
    "validate_password_match",
    "validate_password_strength",
    "validate_user_does_not_exist",
    "validate_username_format",
    "validate_username_not_empty",
]
