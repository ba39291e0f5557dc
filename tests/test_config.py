"""Tests for environment-driven configuration."""

import pytest

from ratchet.config import RatchetConfig, get_config, reset_config

ENV_VARS = (
    "RATCHET_MOCK_MODE",
    "POINTCARE_API_URL",
    "POINTCARE_API_KEY",
    "POINTCARE_CLIENT_ID",
    "POINTCARE_CLIENT_SECRET",
    "SUPABASE_URL",
    "SUPABASE_ANON_KEY",
    "LOG_LEVEL",
    "REQUEST_TIMEOUT",
)


@pytest.fixture(autouse=True)
def clean_env(monkeypatch: pytest.MonkeyPatch):
    for name in ENV_VARS:
        monkeypatch.delenv(name, raising=False)
    reset_config()
    yield
    reset_config()


def test_defaults_to_mock_mode_without_api_url() -> None:
    config = RatchetConfig.from_env()

    assert config.mock_mode is True
    assert config.api_url == "https://api.pointcare.com"
    assert config.log_level == "info"
    assert config.request_timeout == 30000
    assert config.supabase_enabled is False
    assert config.validate() == []


def test_live_mode_when_api_url_set(monkeypatch: pytest.MonkeyPatch) -> None:
    monkeypatch.setenv("POINTCARE_API_URL", "https://emr.example.com")
    monkeypatch.setenv("POINTCARE_API_KEY", "secret")

    config = RatchetConfig.from_env()

    assert config.mock_mode is False
    assert config.api_url == "https://emr.example.com"
    assert config.validate() == []


def test_mock_flag_wins_over_api_url(monkeypatch: pytest.MonkeyPatch) -> None:
    monkeypatch.setenv("POINTCARE_API_URL", "https://emr.example.com")
    monkeypatch.setenv("RATCHET_MOCK_MODE", "true")

    assert RatchetConfig.from_env().mock_mode is True


def test_live_mode_requires_api_key(monkeypatch: pytest.MonkeyPatch) -> None:
    monkeypatch.setenv("POINTCARE_API_URL", "https://emr.example.com")

    errors = RatchetConfig.from_env().validate()

    assert errors == ["POINTCARE_API_KEY is required when not in mock mode"]


def test_supabase_needs_both_values(monkeypatch: pytest.MonkeyPatch) -> None:
    monkeypatch.setenv("SUPABASE_URL", "https://project.supabase.co")
    assert RatchetConfig.from_env().supabase_enabled is False

    monkeypatch.setenv("SUPABASE_ANON_KEY", "anon")
    assert RatchetConfig.from_env().supabase_enabled is True


@pytest.mark.parametrize("raw,expected", [("DEBUG", "debug"), ("warn", "warn"), ("loud", "info")])
def test_log_level(monkeypatch: pytest.MonkeyPatch, raw: str, expected: str) -> None:
    monkeypatch.setenv("LOG_LEVEL", raw)

    assert RatchetConfig.from_env().log_level == expected


def test_request_timeout(monkeypatch: pytest.MonkeyPatch) -> None:
    monkeypatch.setenv("REQUEST_TIMEOUT", "5000")
    config = RatchetConfig.from_env()
    assert config.request_timeout == 5000
    assert config.request_timeout_seconds == 5.0

    monkeypatch.setenv("REQUEST_TIMEOUT", "soon")
    assert RatchetConfig.from_env().request_timeout == 30000


def test_get_config_is_cached_until_reset(monkeypatch: pytest.MonkeyPatch) -> None:
    first = get_config()
    assert get_config() is first

    monkeypatch.setenv("LOG_LEVEL", "error")
    reset_config()

    assert get_config() is not first
    assert get_config().log_level == "error"
