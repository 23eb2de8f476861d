"""NetToolKit: throttled HTTP fetching with response validation and error normalization.

Exposes the caller API (:class:`NetworkManager`, :class:`AsyncNetworkManager`),
the error taxonomy, the cancellation predicate, and configuration helpers.
The package logger carries a ``NullHandler``; call
:func:`~NetToolKit.logging_config.configure_logging` to see its records.
"""

import logging

from NetToolKit.cancellation import CancellationToken
from NetToolKit.errors import (
    ConfigurationError,
    ContentTypeError,
    DecodeError,
    ErrorKind,
    HttpStatusError,
    NetToolKitError,
    RequestCancelled,
    ResponseError,
    SerializationFailure,
    TaskError,
    UnacceptableContentType,
    UnacceptableStatusCode,
)
from NetToolKit.network import (
    AsyncNetworkManager,
    CachePolicy,
    NetworkManager,
    ParameterEncoding,
    RequestDescriptor,
    ResponseValidation,
    ThrottleGate,
    is_explicitly_cancelled,
)
from NetToolKit.logging_config import configure_logging
from NetToolKit.settings import NetworkSettings, get_settings, reset_settings

logging.getLogger(__name__).addHandler(logging.NullHandler())

__version__ = "0.1.0"

__all__ = [
    "NetworkManager",
    "AsyncNetworkManager",
    "ThrottleGate",
    "RequestDescriptor",
    "ResponseValidation",
    "ParameterEncoding",
    "CachePolicy",
    "CancellationToken",
    "is_explicitly_cancelled",
    "NetToolKitError",
    "ConfigurationError",
    "ErrorKind",
    "ResponseError",
    "HttpStatusError",
    "ContentTypeError",
    "UnacceptableStatusCode",
    "UnacceptableContentType",
    "DecodeError",
    "RequestCancelled",
    "TaskError",
    "SerializationFailure",
    "NetworkSettings",
    "get_settings",
    "reset_settings",
    "configure_logging",
]
