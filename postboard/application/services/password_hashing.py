# SPDX-License-Identifier: Apache-2.0
# Copyright 2025 Vova Orig

"""Password hashing strategies."""

from __future__ import annotations

from argon2 import PasswordHasher as _Argon2
from argon2.exceptions import InvalidHashError, VerificationError

from postboard.domain.users.repositories import PasswordHasher


class Argon2PasswordHasher(PasswordHasher):
    def __init__(self, hasher: _Argon2 | None = None) -> None:
        self._hasher = hasher or _Argon2()

    def hash(self, password: str) -> str:
        return str(self._hasher.hash(password))

    def verify(self, password: str, hashed: str) -> bool:
        # argon2 encodes both arguments first; unencodable input is a mismatch.
        try:
            return bool(self._hasher.verify(hashed, password))
        except (VerificationError, InvalidHashError, ValueError):
            return False

    def needs_rehash(self, hashed: str) -> bool:
        try:
            return bool(self._hasher.check_needs_rehash(hashed))
        except (InvalidHashError, ValueError):
            return True
