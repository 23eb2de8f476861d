"""Exception hierarchy shared by the throttled HTTP client.

Requests can fail at several layers: the throttle wait may be cancelled, the
transport may never produce a response, a response may be rejected by status
or content-type validation, or the body may not decode.  This module groups
those failure modes so caller code can react to high-level categories (an
HTTP error carrying a status code and body vs. a raw transport failure) while
still having access to specialised subclasses when finer-grained handling is
required.
"""

from __future__ import annotations

import json
from enum import Enum
from typing import Any, Optional, Sequence

import httpx

__all__ = [
    "ErrorKind",
    "NetToolKitError",
    "ConfigurationError",
    "ResponseError",
    "HttpStatusError",
    "ContentTypeError",
    "UnacceptableStatusCode",
    "UnacceptableContentType",
    "DecodeError",
    "RequestCancelled",
    "TaskError",
    "SerializationFailure",
]


class ErrorKind(str, Enum):
    """Coarse failure categories surfaced to callers."""

    HTTP_STATUS = "http_status"
    CONTENT_TYPE = "content_type"
    TRANSPORT = "transport"
    DECODE = "decode"
    CANCELLED = "cancelled"


class NetToolKitError(RuntimeError):
    """Base exception for throttling, validation, and decoding failures."""


class ConfigurationError(NetToolKitError):
    """Raised when settings or constructor arguments are invalid."""


class ResponseError(NetToolKitError):
    """Failure that carries the HTTP response that caused it.

    Attributes:
        status_code: HTTP status of the rejected response, when one was received.
        json: Best-effort parsed JSON body; ``None`` when the body is not JSON.
        raw_data: Raw body bytes as received.
        cause: Validation failure that triggered normalisation.
        kind: :class:`ErrorKind` describing the failure category.
    """

    kind: ErrorKind = ErrorKind.HTTP_STATUS

    def __init__(
        self,
        *,
        status_code: Optional[int] = None,
        json: Any = None,
        raw_data: Optional[bytes] = None,
        cause: Optional[BaseException] = None,
    ) -> None:
        self.status_code = status_code
        self.json = json
        self.raw_data = raw_data
        self.cause = cause
        super().__init__(self.description)

    @property
    def description(self) -> str:
        """Status line followed by the pretty-printed JSON body (or ``No json``)."""
        body = "No json"
        if self.json is not None:
            try:
                body = json.dumps(self.json, indent=2, ensure_ascii=False)
            except (TypeError, ValueError):
                pass
        status = "nil" if self.status_code is None else str(self.status_code)
        return f"[statusCode: {status}]\n{body}"

    def __str__(self) -> str:
        return self.description


class HttpStatusError(ResponseError):
    """Raised when a received response fails status-code validation."""

    kind = ErrorKind.HTTP_STATUS


class ContentTypeError(ResponseError):
    """Raised when a received response carries a content type outside the allow-list."""

    kind = ErrorKind.CONTENT_TYPE

    def __init__(
        self,
        *,
        content_type: Optional[str] = None,
        acceptable: Sequence[str] = (),
        **kwargs: Any,
    ) -> None:
        self.content_type = content_type
        self.acceptable = tuple(acceptable)
        super().__init__(**kwargs)


class UnacceptableStatusCode(NetToolKitError):
    """Validation failure: status outside the accepted range."""

    def __init__(self, response: httpx.Response) -> None:
        super().__init__(f"Response status code was unacceptable: {response.status_code}")
        self.response = response
        self.status_code = response.status_code


class UnacceptableContentType(NetToolKitError):
    """Validation failure: response MIME type not in the allow-list."""

    def __init__(
        self,
        response: httpx.Response,
        *,
        content_type: Optional[str],
        acceptable: Sequence[str],
    ) -> None:
        super().__init__(
            f"Response content type {content_type or '<missing>'!s} was unacceptable; "
            f"expected one of {', '.join(acceptable)}"
        )
        self.response = response
        self.content_type = content_type
        self.acceptable = tuple(acceptable)


class DecodeError(NetToolKitError, ValueError):
    """Raised when a response body is not valid JSON."""


class RequestCancelled(NetToolKitError):
    """Raised when a request is explicitly cancelled before it completes."""

    def __init__(self, message: str = "Request explicitly cancelled") -> None:
        super().__init__(message)


class TaskError(NetToolKitError):
    """Sentinel signalling cooperative cancellation of the owning task."""

    def __init__(self, message: str = "Task cancelled") -> None:
        super().__init__(message)


class SerializationFailure(NetToolKitError):
    """Raised when a response serializer fails; ``inner`` holds its exception."""

    def __init__(self, inner: BaseException) -> None:
        super().__init__(f"Response serialization failed: {inner}")
        self.inner = inner


# === NAVMAP v1 ===
# {
#   "module": "NetToolKit.errors",
#   "purpose": "Define the exception hierarchy used across throttling, validation, and decoding",
#   "sections": [
#     {"id": "base", "name": "Base Exceptions", "anchor": "BAS", "kind": "api"},
#     {"id": "response", "name": "Response Errors", "anchor": "RSP", "kind": "api"},
#     {"id": "validation", "name": "Validation Failures", "anchor": "VAL", "kind": "api"},
#     {"id": "cancellation", "name": "Cancellation & Serialization", "anchor": "CNL", "kind": "api"}
#   ]
# }
# === /NAVMAP ===
