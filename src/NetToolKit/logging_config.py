"""
Structured Logging Utilities

This module centralizes logging setup for NetToolKit. It provides helpers for
masking sensitive fields and emitting JSON log records that carry the
request correlation id, and installs console or JSON handlers on the package
logger according to :class:`~NetToolKit.settings.NetworkSettings`.
"""

from __future__ import annotations

import json
import logging
import sys
from datetime import datetime, timezone
from typing import Dict, Optional, TextIO

from NetToolKit.settings import LogFormat, NetworkSettings

PACKAGE_LOGGER_NAME = "NetToolKit"

_SENSITIVE_KEYS = {"authorization", "api_key", "apikey", "token", "secret", "password"}

#: LogRecord attributes that are not user-supplied ``extra`` fields
_RESERVED_ATTRS = set(vars(logging.makeLogRecord({}))) | {"message", "asctime"}


def mask_sensitive_data(payload: Dict[str, object]) -> Dict[str, object]:
    """Remove secrets from structured payloads prior to logging.

    Args:
        payload: Arbitrary key-value pairs that may contain credentials or
            tokens gathered from request parameters or headers.

    Returns:
        Copy of the payload where common secret fields are replaced with
        `***masked***`.

    Examples:
        >>> mask_sensitive_data({"token": "secret", "status": "ok"})
        {'token': '***masked***', 'status': 'ok'}
    """
    masked: Dict[str, object] = {}
    for key, value in payload.items():
        lower = key.lower()
        if lower in _SENSITIVE_KEYS:
            masked[key] = "***masked***"
        elif isinstance(value, str) and "apikey" in value.lower():
            masked[key] = "***masked***"
        else:
            masked[key] = value
    return masked


class JSONFormatter(logging.Formatter):
    """Formatter emitting one JSON object per record.

    Fields passed through ``extra=`` (for example ``correlation_id``) are
    merged into the object.

    Examples:
        >>> formatter = JSONFormatter()
        >>> isinstance(formatter.format(logging.makeLogRecord({'msg': 'test'})), str)
        True
    """

    def format(self, record: logging.LogRecord) -> str:
        """Serialize a logging record into a JSON line."""
        now = datetime.now(timezone.utc)
        log_obj: Dict[str, object] = {
            "timestamp": now.isoformat().replace("+00:00", "Z"),
            "level": record.levelname,
            "logger": record.name,
            "message": record.getMessage(),
        }
        for key, value in vars(record).items():
            if key not in _RESERVED_ATTRS and not key.startswith("_"):
                log_obj[key] = value
        if record.exc_info:
            log_obj["exc_info"] = self.formatException(record.exc_info)
        return json.dumps(mask_sensitive_data(log_obj), default=str)


def configure_logging(
    settings: NetworkSettings,
    stream: Optional[TextIO] = None,
) -> logging.Logger:
    """Install a console or JSON handler on the ``NetToolKit`` logger.

    Calling this again replaces the handler installed by the previous call.

    Args:
        settings: Supplies ``log_level`` and ``log_format``.
        stream: Output stream (default ``sys.stderr``).

    Returns:
        The configured package logger.

    Examples:
        >>> logger = configure_logging(NetworkSettings(log_level="DEBUG"))
        >>> logger.name
        'NetToolKit'
    """
    logger = logging.getLogger(PACKAGE_LOGGER_NAME)
    logger.setLevel(getattr(logging, settings.log_level.value, logging.INFO))

    for handler in list(logger.handlers):
        if getattr(handler, "_nettoolkit_managed", False):
            logger.removeHandler(handler)
            handler.close()

    handler = logging.StreamHandler(stream or sys.stderr)
    if settings.log_format is LogFormat.JSON:
        handler.setFormatter(JSONFormatter())
    else:
        handler.setFormatter(logging.Formatter("%(levelname)s %(name)s: %(message)s"))
    handler._nettoolkit_managed = True  # type: ignore[attr-defined]
    logger.addHandler(handler)

    return logger


__all__ = ["configure_logging", "mask_sensitive_data", "JSONFormatter", "PACKAGE_LOGGER_NAME"]
