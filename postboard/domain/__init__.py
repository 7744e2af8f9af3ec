# SPDX-License-Identifier: Apache-2.0
# Copyright 2025 Vova Orig

from .users.entities import FieldError, User
from .users.exceptions import UserAlreadyExistsError

__all__ = ["FieldError", "User", "UserAlreadyExistsError"]
