# SPDX-License-Identifier: Apache-2.0
# Copyright 2025 Vova Orig

from .services.password_hashing import Argon2PasswordHasher
from .services.reset_tokens import ResetTokenStore
from .use_cases.users import OkResult, UserResult

__all__ = [
    "Argon2PasswordHasher",
    "OkResult",
    "ResetTokenStore",
    "UserResult",
]
