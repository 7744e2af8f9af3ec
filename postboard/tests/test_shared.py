from __future__ import annotations

from fakes import FakeClock
from postboard.shared.config import AppConfig, AuthConfig, SecurityConfig
from postboard.shared.logging.sensitive_filter import sanitize_message
from postboard.shared.middleware.rate_limit import InMemoryRateLimiter, rate_limit


def test_rate_limiter_window():
    clock = FakeClock()
    limiter = InMemoryRateLimiter(limit=2, window_seconds=10, clock=clock)

    assert limiter.allow("ip")
    assert limiter.allow("ip")
    assert not limiter.allow("ip")
    assert limiter.allow("other-ip")

    clock.advance(11)
    assert limiter.allow("ip")


def test_rate_limiter_prunes_idle_clients():
    clock = FakeClock()
    limiter = InMemoryRateLimiter(limit=5, window_seconds=10, clock=clock, prune_interval=3)
    limiter.allow("10.0.0.1")
    limiter.allow("10.0.0.2")
    clock.advance(11)

    limiter.allow("10.0.0.3")

    assert len(limiter) == 1


def test_rate_limit_without_limiter_keeps_view():
    def view():
        return "ok"

    assert rate_limit(None)(view) is view


def test_sanitize_masks_secrets():
    message = sanitize_message(
        "password=hunter2 link=http://front.test/change-password/0b7c1f7e-aaaa "
        "key=sess:abcdefghijkl to alice@example.com"
    )

    assert "hunter2" not in message
    assert "0b7c1f7e-aaaa" not in message
    assert "abcdefghijkl" not in message
    assert "alice@" not in message


def test_sanitize_masks_argon2_hashes():
    message = sanitize_message("stored $argon2id$v=19$m=65536,t=3,p=4$c2FsdA$aGFzaA")

    assert "$argon2id$" not in message


def test_config_defaults():
    auth = AuthConfig()

    assert auth.session_cookie_name == "qid"
    assert auth.reset_token_ttl == 900
    assert auth.session_ttl == 7 * 24 * 60 * 60


def test_config_parses_env_style_values():
    security = SecurityConfig(ALLOWED_ORIGINS="http://a.test, http://b.test", COOKIE_SECURE="yes")
    config = AppConfig(FRONTEND_URL="http://front.test/")

    assert security.allowed_origins == ["http://a.test", "http://b.test"]
    assert security.cookie_secure is True
    assert config.frontend_url == "http://front.test"
    assert not config.is_production()
