# SPDX-License-Identifier: Apache-2.0
# Copyright 2025 Vova Orig

from __future__ import annotations

import re
from typing import Any

SENSITIVE_PATTERNS = [
    # Passwords
    (r"(password\s*[:=]\s*['\"]?)([^'\"\s,]{1,})(['\"]?)", r"\1***REDACTED***\3", re.IGNORECASE),
    (r"(password_hash\s*[:=]\s*['\"]?)(\$argon2[^'\"\s,]+)(['\"]?)", r"\1***REDACTED***\3"),
    (r"\$argon2(id|i|d)\$[^\s'\",]+", r"***ARGON2_HASH***"),

    # Reset links and tokens
    (r"(/change-password/)([A-Za-z0-9\-]{8,})", r"\1***REDACTED***"),
    (r"(token\s*[:=]\s*['\"]?)([A-Za-z0-9_\-\.]{8,})(['\"]?)", r"\1***REDACTED***\3", re.IGNORECASE),
    (r"(forget-password:)([A-Za-z0-9\-]{8,})", r"\1***REDACTED***"),

    # Session data
    (r"(sess:)([A-Za-z0-9_\-]{8,})", r"\1***REDACTED***"),
    (r"(session[_-]?id\s*[:=]\s*['\"]?)([A-Za-z0-9_\-\.]{8,})(['\"]?)", r"\1***REDACTED***\3", re.IGNORECASE),

    # Database and cache URLs with credentials
    (r"(postgres(?:ql)?|mysql|redis|rediss)://([^:/@]*):([^@]+)@", r"\1://\2:***REDACTED***@"),

    # Email addresses (partial masking)
    (r"([a-zA-Z0-9._%+-]+)@([a-zA-Z0-9.-]+\.[a-zA-Z]{2,})", r"***@\2"),

    # Authorization and cookie headers
    (r"(authorization\s*:\s*['\"]?)([^'\"]{10,})(['\"]?)", r"\1***REDACTED***\3", re.IGNORECASE),
]


def sanitize_message(message: str) -> str:
    sanitized = message

    for pattern_tuple in SENSITIVE_PATTERNS:
        if len(pattern_tuple) == 2:
            pattern, replacement = pattern_tuple
            flags = 0
        else:
            pattern, replacement, flags = pattern_tuple

        sanitized = re.sub(pattern, replacement, sanitized, flags=flags)

    return sanitized


def sanitize_record(record: dict[str, Any]) -> bool:
    if "message" in record:
        record["message"] = sanitize_message(record["message"])
    return True
