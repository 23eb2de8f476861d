"""NetworkSettings: defaults, environment overrides, validation, caching."""

from __future__ import annotations

from pathlib import Path

import pytest
from pydantic import ValidationError

from NetToolKit.network import policy
from NetToolKit.settings import (
    LogFormat,
    LogLevel,
    NetworkSettings,
    get_settings,
    reset_settings,
)


def test_defaults_follow_policy():
    settings = NetworkSettings()

    assert settings.inter_request_interval is None
    assert settings.connect_timeout == policy.HTTP_CONNECT_TIMEOUT
    assert settings.read_timeout == policy.HTTP_READ_TIMEOUT
    assert settings.max_connections == policy.MAX_CONNECTIONS
    assert settings.follow_redirects is policy.FOLLOW_REDIRECTS
    assert settings.cache_enabled is False
    assert settings.cache_dir is None
    assert settings.log_requests is False
    assert settings.log_level is LogLevel.INFO
    assert settings.log_format is LogFormat.CONSOLE


def test_environment_overrides(monkeypatch):
    monkeypatch.setenv("NETTOOLKIT_INTER_REQUEST_INTERVAL", "0.5")
    monkeypatch.setenv("NETTOOLKIT_CACHE_ENABLED", "true")
    monkeypatch.setenv("NETTOOLKIT_LOG_LEVEL", "debug")
    monkeypatch.setenv("NETTOOLKIT_LOG_FORMAT", "json")

    settings = NetworkSettings()

    assert settings.inter_request_interval == 0.5
    assert settings.cache_enabled is True
    assert settings.log_level is LogLevel.DEBUG
    assert settings.log_format is LogFormat.JSON


@pytest.mark.parametrize("value", [0, -1])
def test_interval_must_be_positive(value):
    with pytest.raises(ValidationError):
        NetworkSettings(inter_request_interval=value)


def test_invalid_pool_size_rejected():
    with pytest.raises(ValidationError):
        NetworkSettings(max_connections=0)


def test_cache_dir_expands_user(monkeypatch, tmp_path):
    monkeypatch.setenv("HOME", str(tmp_path))
    settings = NetworkSettings(cache_dir="~/cache")
    assert settings.cache_dir == tmp_path / "cache"


def test_empty_cache_dir_means_default():
    assert NetworkSettings(cache_dir="").cache_dir is None


def test_config_hash_tracks_changes():
    base = NetworkSettings()
    assert base.config_hash() == NetworkSettings().config_hash()
    assert base.config_hash() != NetworkSettings(inter_request_interval=1.0).config_hash()
    assert len(base.config_hash()) == 16


def test_get_settings_is_cached_until_reset(monkeypatch):
    first = get_settings()
    assert get_settings() is first

    monkeypatch.setenv("NETTOOLKIT_READ_TIMEOUT", "12")
    assert get_settings().read_timeout == first.read_timeout

    reset_settings()
    assert get_settings().read_timeout == 12.0


def test_cache_dir_accepts_path(tmp_path):
    assert NetworkSettings(cache_dir=tmp_path).cache_dir == Path(tmp_path)
