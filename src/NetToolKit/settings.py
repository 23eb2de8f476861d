# === NAVMAP v1 ===
# {
#   "module": "NetToolKit.settings",
#   "purpose": "Environment-backed configuration for clients, throttling, caching, and logging",
#   "sections": [
#     {"id": "loglevel", "name": "LogLevel", "anchor": "class-loglevel", "kind": "class"},
#     {"id": "logformat", "name": "LogFormat", "anchor": "class-logformat", "kind": "class"},
#     {"id": "networksettings", "name": "NetworkSettings", "anchor": "class-networksettings", "kind": "class"},
#     {"id": "get-settings", "name": "get_settings", "anchor": "function-get-settings", "kind": "function"},
#     {"id": "reset-settings", "name": "reset_settings", "anchor": "function-reset-settings", "kind": "function"}
#   ]
# }
# === /NAVMAP ===

"""Configuration for NetToolKit.

Settings use Pydantic v2 ``BaseSettings`` with the ``NETTOOLKIT_`` environment
prefix, so every field can be overridden without code changes::

    NETTOOLKIT_INTER_REQUEST_INTERVAL=0.5
    NETTOOLKIT_CACHE_ENABLED=true
    NETTOOLKIT_LOG_REQUESTS=true

Defaults come from :mod:`NetToolKit.network.policy`.
"""

from __future__ import annotations

import hashlib
import json
import threading
from enum import Enum
from pathlib import Path
from typing import Any, Optional

from pydantic import Field, field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict

from NetToolKit.network import policy

__all__ = ["LogLevel", "LogFormat", "NetworkSettings", "get_settings", "reset_settings"]


class LogLevel(str, Enum):
    DEBUG = "DEBUG"
    INFO = "INFO"
    WARNING = "WARNING"
    ERROR = "ERROR"


class LogFormat(str, Enum):
    CONSOLE = "console"
    JSON = "json"


class NetworkSettings(BaseSettings):
    """Client, throttle, cache, and logging configuration."""

    model_config = SettingsConfigDict(
        env_prefix="NETTOOLKIT_",
        case_sensitive=False,
        extra="ignore",
    )

    inter_request_interval: Optional[float] = Field(
        None, gt=0, description="Minimum seconds between request starts (unset = no throttling)"
    )
    base_url: str = Field("", description="Base URL prepended to relative request URLs")

    connect_timeout: float = Field(policy.HTTP_CONNECT_TIMEOUT, gt=0)
    read_timeout: float = Field(policy.HTTP_READ_TIMEOUT, gt=0)
    write_timeout: float = Field(policy.HTTP_WRITE_TIMEOUT, gt=0)
    pool_timeout: float = Field(policy.HTTP_POOL_TIMEOUT, gt=0)

    max_connections: int = Field(policy.MAX_CONNECTIONS, ge=1)
    max_keepalive_connections: int = Field(policy.MAX_KEEPALIVE_CONNECTIONS, ge=0)
    keepalive_expiry: float = Field(policy.KEEPALIVE_EXPIRY, ge=0)
    http2: bool = Field(policy.HTTP2_ENABLED, description="Enable HTTP/2 (requires h2)")
    follow_redirects: bool = Field(policy.FOLLOW_REDIRECTS)
    verify_tls: bool = Field(policy.TLS_VERIFY_ENABLED)

    cache_enabled: bool = Field(False, description="Wrap the transport with Hishel caching")
    cache_dir: Optional[Path] = Field(
        None, description="Cache directory (default: platform user cache dir)"
    )
    cache_ttl_seconds: int = Field(policy.CACHE_STORAGE_TTL_SECONDS, ge=1)

    log_requests: bool = Field(
        False, description="Send API OUT/API IN records to the request logger"
    )
    log_level: LogLevel = Field(LogLevel.INFO, description="Root logging level")
    log_format: LogFormat = Field(LogFormat.CONSOLE, description="Console or JSON lines")

    @field_validator("cache_dir", mode="before")
    @classmethod
    def expand_cache_dir(cls, value: Any) -> Any:
        """Expand user home in the cache directory."""
        if value is None or value == "":
            return None
        return Path(value).expanduser()

    @field_validator("log_level", mode="before")
    @classmethod
    def normalize_log_level(cls, value: Any) -> Any:
        if isinstance(value, str):
            return value.upper()
        return value

    def config_hash(self) -> str:
        """Return a short, stable digest of the settings values.

        Equal settings always hash equal, so callers can compare two
        configurations or tag logs with the one in effect.
        """
        payload = json.dumps(self.model_dump(mode="json"), sort_keys=True)
        return hashlib.sha256(payload.encode("utf-8")).hexdigest()[:16]


_settings: Optional[NetworkSettings] = None
_settings_lock = threading.Lock()


def get_settings() -> NetworkSettings:
    """Load settings from the environment once and reuse them."""
    global _settings

    if _settings is not None:
        return _settings

    with _settings_lock:
        if _settings is None:
            _settings = NetworkSettings()
        return _settings


def reset_settings() -> None:
    """Forget cached settings so the next :func:`get_settings` re-reads the environment."""
    global _settings

    with _settings_lock:
        _settings = None
