# SPDX-License-Identifier: Apache-2.0
# Copyright 2025 Vova Orig

from .settings import (
    AppConfig,
    AuthConfig,
    CacheConfig,
    DatabaseConfig,
    MailConfig,
    SecurityConfig,
    load_config,
)

__all__ = [
    "AppConfig",
    "AuthConfig",
    "CacheConfig",
    "DatabaseConfig",
    "MailConfig",
    "SecurityConfig",
    "load_config",
]
