from __future__ import annotations

import os

# Must run before postboard modules read the configuration.
os.environ.setdefault("APP_ENV", "test")
os.environ.setdefault("ENABLE_RATE_LIMIT", "false")

import pytest  # noqa: E402

from fakes import (  # noqa: E402
    DeterministicHasher,
    FakeClock,
    FakeSession,
    InMemoryUserRepository,
    RecordingEmailSender,
)
from postboard.application.services.reset_tokens import ResetTokenStore  # noqa: E402
from postboard.domain.users.validators import PasswordPolicy  # noqa: E402
from postboard.infrastructure.cache import InMemoryTTLCache  # noqa: E402


@pytest.fixture()
def users() -> InMemoryUserRepository:
    return InMemoryUserRepository()


@pytest.fixture()
def hasher() -> DeterministicHasher:
    return DeterministicHasher()


@pytest.fixture()
def policy() -> PasswordPolicy:
    return PasswordPolicy(min_length=8)


@pytest.fixture()
def clock() -> FakeClock:
    return FakeClock()


@pytest.fixture()
def cache(clock: FakeClock) -> InMemoryTTLCache:
    return InMemoryTTLCache(clock=clock)


@pytest.fixture()
def reset_tokens(cache: InMemoryTTLCache) -> ResetTokenStore:
    return ResetTokenStore(cache, ttl_seconds=900)


@pytest.fixture()
def mailer() -> RecordingEmailSender:
    return RecordingEmailSender()


@pytest.fixture()
def session() -> FakeSession:
    return FakeSession()
