"""Tests for the environment configuration provider."""

from datetime import timedelta

import pytest

from vidtube.config.provider import EnvConfigProvider, parse_duration


@pytest.fixture
def provider(monkeypatch):
    for name in (
        "ACCESS_TOKEN_SECRET",
        "REFRESH_TOKEN_SECRET",
        "ACCESS_TOKEN_EXPIRY",
        "REFRESH_TOKEN_EXPIRY",
        "CORS_ORIGIN",
        "COOKIE_SECURE",
        "REDIS_URL",
        "CLOUDINARY_CLOUD_NAME",
        "CLOUDINARY_API_KEY",
        "CLOUDINARY_API_SECRET",
    ):
        monkeypatch.delenv(name, raising=False)
    return EnvConfigProvider(env_file=None)


@pytest.mark.parametrize(
    "value,expected",
    [
        ("30s", timedelta(seconds=30)),
        ("15m", timedelta(minutes=15)),
        ("1h", timedelta(hours=1)),
        ("10d", timedelta(days=10)),
        ("900", timedelta(seconds=900)),
    ],
)
def test_parse_duration(value, expected):
    assert parse_duration(value) == expected


@pytest.mark.parametrize("value", ["", "ten days", "0", "5w", "-1d"])
def test_parse_duration_rejects_invalid(value):
    with pytest.raises(ValueError):
        parse_duration(value)


def test_token_config_requires_secrets(provider):
    with pytest.raises(ValueError, match="ACCESS_TOKEN_SECRET"):
        provider.get_token_config()


def test_token_config_rejects_shared_secret(provider, monkeypatch):
    monkeypatch.setenv("ACCESS_TOKEN_SECRET", "same")
    monkeypatch.setenv("REFRESH_TOKEN_SECRET", "same")

    with pytest.raises(ValueError, match="must differ"):
        provider.get_token_config()


def test_token_config_defaults(provider, monkeypatch):
    monkeypatch.setenv("ACCESS_TOKEN_SECRET", "access")
    monkeypatch.setenv("REFRESH_TOKEN_SECRET", "refresh")

    config = provider.get_token_config()

    assert config.access_token_expiry == timedelta(minutes=15)
    assert config.refresh_token_expiry == timedelta(days=10)
    assert config.algorithm == "HS256"


def test_access_token_lifetime_is_short_by_default(provider, monkeypatch):
    monkeypatch.setenv("ACCESS_TOKEN_SECRET", "access")
    monkeypatch.setenv("REFRESH_TOKEN_SECRET", "refresh")

    assert provider.get_token_config().access_token_expiry <= timedelta(hours=1)


def test_token_config_custom_expiry(provider, monkeypatch):
    monkeypatch.setenv("ACCESS_TOKEN_SECRET", "access")
    monkeypatch.setenv("REFRESH_TOKEN_SECRET", "refresh")
    monkeypatch.setenv("ACCESS_TOKEN_EXPIRY", "15m")

    assert provider.get_token_config().access_token_expiry == timedelta(minutes=15)


def test_api_config(provider, monkeypatch):
    monkeypatch.setenv("CORS_ORIGIN", "https://a.example,https://b.example")
    monkeypatch.setenv("COOKIE_SECURE", "false")

    config = provider.get_api_config()

    assert config.cors_origins == ["https://a.example", "https://b.example"]
    assert config.cookie_secure is False


def test_optional_integrations_unconfigured(provider):
    assert provider.get_redis_config().is_configured is False
    assert provider.get_cloudinary_config().is_configured is False


def test_cloudinary_configured(provider, monkeypatch):
    monkeypatch.setenv("CLOUDINARY_CLOUD_NAME", "demo")
    monkeypatch.setenv("CLOUDINARY_API_KEY", "key")
    monkeypatch.setenv("CLOUDINARY_API_SECRET", "secret")

    assert provider.get_cloudinary_config().is_configured is True
