from __future__ import annotations

import asyncio

import pytest

from fakes import DeterministicHasher, InMemoryUserRepository
from postboard.domain.users.entities import FieldError
from postboard.domain.users.validators import (
    INVALID_CREDENTIALS_MESSAGE,
    PasswordPolicy,
    validate_correct_password,
    validate_email_exists,
    validate_email_format,
    validate_new_email,
    validate_new_passwords_match,
    validate_new_username,
    validate_password_strength,
    validate_username_format,
    validate_username_not_empty,
)


@pytest.fixture()
def seeded_users() -> InMemoryUserRepository:
    users = InMemoryUserRepository()
    asyncio.run(users.create(username="alice", email="alice@example.com", password_hash="hashed:pw"))
    return users


def test_username_not_empty():
    assert validate_username_not_empty("   ") == [FieldError("username", "Username cannot be empty")]
    assert validate_username_not_empty("alice") == []


def test_username_format_rejects_at_sign():
    assert validate_username_format("alice@home")[0].field == "username"
    assert validate_username_format("alice") == []


@pytest.mark.parametrize("email", ["alice@example.com", "a.b+c@mail.example.org"])
def test_email_format_accepts(email):
    assert validate_email_format(email) == []


@pytest.mark.parametrize("email", ["", "alice", "alice@", "@example.com", "a b@example.com"])
def test_email_format_rejects(email):
    assert validate_email_format(email) == [FieldError("email", "Invalid email")]


def test_new_username(seeded_users):
    taken = asyncio.run(validate_new_username("alice", seeded_users))
    free = asyncio.run(validate_new_username("bob", seeded_users))

    assert taken == [FieldError("username", "The username alice is already taken")]
    assert free == []


def test_new_email(seeded_users):
    assert asyncio.run(validate_new_email("alice@example.com", seeded_users))[0].field == "email"
    assert asyncio.run(validate_new_email("bob@example.com", seeded_users)) == []


def test_email_exists(seeded_users):
    assert asyncio.run(validate_email_exists("alice@example.com", seeded_users)) == []
    missing = asyncio.run(validate_email_exists("bob@example.com", seeded_users))
    assert missing[0].field == "email"


def test_password_strength_boundaries():
    policy = PasswordPolicy(min_length=8, max_length=12)

    assert validate_password_strength("1234567", policy) == [
        FieldError("password", "Password must be at least 8 characters long")
    ]
    assert validate_password_strength("12345678", policy) == []
    assert validate_password_strength("123456789012", policy) == []
    assert validate_password_strength("1234567890123", policy)[0].message == (
        "Password must be at most 12 characters long"
    )


def test_password_strength_character_classes():
    policy = PasswordPolicy(min_length=4, require_letter=True, require_digit=True)

    assert policy.violations("abcdef") == ["Password must contain at least one digit"]
    assert policy.violations("123456") == ["Password must contain at least one letter"]
    assert policy.violations("abc123") == []


def test_password_strength_custom_field():
    errors = validate_password_strength("x", PasswordPolicy(), field="newPassword")

    assert errors[0].field == "newPassword"


def test_correct_password():
    hasher = DeterministicHasher()

    assert validate_correct_password("secret", "hashed:secret", hasher) == []
    assert validate_correct_password("nope", "hashed:secret", hasher) == [
        FieldError("password", INVALID_CREDENTIALS_MESSAGE)
    ]


def test_new_passwords_match_trims():
    assert validate_new_passwords_match(" same-pass ", "same-pass") == []
    assert validate_new_passwords_match("one", "two") == [
        FieldError("newPasswordConfirm", "Passwords do not match")
    ]


def test_password_strength_rejects_unencodable_password():
    errors = validate_password_strength("abcdefg\ud800", PasswordPolicy(), field="newPassword")

    assert errors == [FieldError("newPassword", "Password contains invalid characters")]
