from __future__ import annotations

import asyncio

from postboard.application.services.reset_tokens import ResetTokenStore
from postboard.infrastructure.cache import InMemoryTTLCache


def test_get_missing_key(cache):
    assert asyncio.run(cache.get("missing")) is None


def test_set_get_delete(cache):
    asyncio.run(cache.set("k", "v", 10))
    assert asyncio.run(cache.get("k")) == "v"

    asyncio.run(cache.delete("k"))
    assert asyncio.run(cache.get("k")) is None


def test_entries_expire(cache, clock):
    asyncio.run(cache.set("k", "v", 10))

    clock.advance(9)
    assert asyncio.run(cache.get("k")) == "v"

    clock.advance(1)
    assert asyncio.run(cache.get("k")) is None
    assert len(cache) == 0


def test_purge_expired(cache, clock):
    asyncio.run(cache.set("short", "v", 5))
    asyncio.run(cache.set("long", "v", 50))
    clock.advance(10)

    assert cache.purge_expired() == 1
    assert len(cache) == 1


def test_reset_tokens_issue_unique_prefixed_keys(cache, reset_tokens):
    first = asyncio.run(reset_tokens.issue("alice@example.com"))
    second = asyncio.run(reset_tokens.issue("alice@example.com"))

    assert first != second
    assert asyncio.run(cache.get(f"forget-password:{first}")) == "alice@example.com"


def test_reset_tokens_expire(clock, reset_tokens):
    token = asyncio.run(reset_tokens.issue("alice@example.com"))

    clock.advance(reset_tokens.ttl_seconds - 1)
    assert asyncio.run(reset_tokens.get(token)) == "alice@example.com"

    clock.advance(1)
    assert asyncio.run(reset_tokens.get(token)) is None


def test_reset_tokens_delete_and_blank(cache):
    tokens = ResetTokenStore(cache, prefix="rt:", ttl_seconds=60)
    asyncio.run(tokens.put("abc", "alice@example.com"))

    assert asyncio.run(tokens.get("")) is None
    asyncio.run(tokens.delete("abc"))
    assert asyncio.run(tokens.get("abc")) is None


def test_writes_sweep_abandoned_entries(clock):
    cache = InMemoryTTLCache(clock=clock, sweep_interval=3)
    asyncio.run(cache.set("sess:abandoned-1", "1", 10))
    asyncio.run(cache.set("sess:abandoned-2", "2", 10))
    clock.advance(20)

    asyncio.run(cache.set("sess:fresh", "3", 10))

    assert len(cache) == 1
    assert asyncio.run(cache.get("sess:fresh")) == "3"
