"""Network subsystem: throttled HTTP fetching with validation and error normalization.

This package provides a thin layer over HTTPX:
- HTTPX: HTTP/1.1 and HTTP/2 client with connection pooling
- Hishel: optional RFC 9111 caching driven by per-request cache policies
- ThrottleGate: minimum spacing between request starts

Modules:
- throttle: ThrottleGate, the minimum-interval scheduler
- executor: one request from descriptor to validated outcome
- validation: status range and content-type allow-list checks
- decoding: JSON decoding and log rendering of bodies
- normalize: error normalization, classifier chain, cancellation predicate
- manager: caller-facing fetch_data / fetch_json API
- client: HTTPX client factory
- policy: HTTP policy constants (timeouts, pooling, caching)
- instrumentation: per-exchange timing hooks

Example:
    >>> from NetToolKit.network import NetworkManager
    >>> manager = NetworkManager(inter_request_interval=1.0)  # doctest: +SKIP
    >>> manager.fetch_json("https://api.example.org/status")  # doctest: +SKIP
"""

from NetToolKit.network.client import (
    build_async_http_client,
    build_http_client,
    create_ssl_context,
    get_cache_dir,
)
from NetToolKit.network.correlation import CorrelationCounter
from NetToolKit.network.decoding import decode_json, pretty_json, to_log_string, try_decode_json
from NetToolKit.network.executor import AsyncRequestExecutor, RequestExecutor
from NetToolKit.network.instrumentation import (
    create_async_http_event_hooks,
    create_http_event_hooks,
)
from NetToolKit.network.manager import AsyncNetworkManager, NetworkManager
from NetToolKit.network.normalize import (
    DEFAULT_CLASSIFIERS,
    ErrorClassifier,
    ErrorNormalizer,
    classify,
    is_explicitly_cancelled,
    unwrap_serialization_failure,
)
from NetToolKit.network.outcome import Failure, ResponseOutcome, Success
from NetToolKit.network.policy import ACCEPTABLE_STATUS_CODES, JSON_CONTENT_TYPES
from NetToolKit.network.request import (
    CachePolicy,
    ParameterEncoding,
    RequestDescriptor,
    apply_cache_policy,
)
from NetToolKit.network.sinks import NULL_SINK, LogSink, NullLogSink
from NetToolKit.network.throttle import ThrottleGate
from NetToolKit.network.validation import (
    JSON_VALIDATION,
    ResponseValidation,
    content_type_matches,
    validate_response,
)

__all__ = [
    # Caller API
    "NetworkManager",
    "AsyncNetworkManager",
    # Throttling
    "ThrottleGate",
    "CorrelationCounter",
    # Execution
    "RequestExecutor",
    "AsyncRequestExecutor",
    "RequestDescriptor",
    "ParameterEncoding",
    "CachePolicy",
    "apply_cache_policy",
    "Success",
    "Failure",
    "ResponseOutcome",
    # Validation
    "ResponseValidation",
    "JSON_VALIDATION",
    "ACCEPTABLE_STATUS_CODES",
    "JSON_CONTENT_TYPES",
    "content_type_matches",
    "validate_response",
    # Decoding
    "decode_json",
    "try_decode_json",
    "pretty_json",
    "to_log_string",
    # Errors
    "ErrorNormalizer",
    "ErrorClassifier",
    "DEFAULT_CLASSIFIERS",
    "unwrap_serialization_failure",
    "is_explicitly_cancelled",
    "classify",
    # Logging
    "LogSink",
    "NullLogSink",
    "NULL_SINK",
    # Client factory
    "build_http_client",
    "build_async_http_client",
    "get_cache_dir",
    "create_ssl_context",
    "create_http_event_hooks",
    "create_async_http_event_hooks",
]
