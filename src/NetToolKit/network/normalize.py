# === NAVMAP v1 ===
# {
#   "module": "NetToolKit.network.normalize",
#   "purpose": "Map validation and transport failures onto the public error taxonomy",
#   "sections": [
#     {"id": "unwrap-serialization-failure", "name": "unwrap_serialization_failure", "anchor": "function-unwrap-serialization-failure", "kind": "function"},
#     {"id": "errornormalizer", "name": "ErrorNormalizer", "anchor": "class-errornormalizer", "kind": "class"},
#     {"id": "is-explicitly-cancelled", "name": "is_explicitly_cancelled", "anchor": "function-is-explicitly-cancelled", "kind": "function"},
#     {"id": "classify", "name": "classify", "anchor": "function-classify", "kind": "function"}
#   ]
# }
# === /NAVMAP ===

"""Error normalization.

Responsibilities
----------------
- Turn validation failures that came with an HTTP response into a
  :class:`~NetToolKit.errors.ResponseError` carrying status code, best-effort
  JSON body, and raw bytes.
- Leave failures without a response (DNS, connection reset, timeout) exactly
  as raised so callers can still match on the transport's own exception types.
- Run every failure through a chain of pluggable classifiers; the default
  chain unwraps :class:`~NetToolKit.errors.SerializationFailure`.
- Answer "was this a user-initiated cancellation?" via
  :func:`is_explicitly_cancelled`.
"""

from __future__ import annotations

import asyncio
from typing import Callable, Optional, Sequence

import httpx

from NetToolKit.errors import (
    ContentTypeError,
    DecodeError,
    ErrorKind,
    HttpStatusError,
    RequestCancelled,
    ResponseError,
    SerializationFailure,
    TaskError,
    UnacceptableContentType,
)
from NetToolKit.network.decoding import try_decode_json

__all__ = [
    "ErrorClassifier",
    "DEFAULT_CLASSIFIERS",
    "ErrorNormalizer",
    "unwrap_serialization_failure",
    "is_explicitly_cancelled",
    "classify",
]

ErrorClassifier = Callable[[BaseException], BaseException]


def unwrap_serialization_failure(error: BaseException) -> BaseException:
    """Re-surface the error a response serializer raised.

    Requests sent through the prebuilt-request path decode their body with a
    caller-supplied serializer; its exceptions arrive wrapped in
    :class:`SerializationFailure` and callers expect the inner error.
    """
    if isinstance(error, SerializationFailure):
        return error.inner
    return error


DEFAULT_CLASSIFIERS: tuple[ErrorClassifier, ...] = (unwrap_serialization_failure,)


class ErrorNormalizer:
    """Builds the error a caller sees from whatever went wrong during a request.

    Attributes:
        classifiers: Functions applied in order to failures that have no HTTP
            response. Each may return a replacement error or the one it got.
    """

    def __init__(self, classifiers: Optional[Sequence[ErrorClassifier]] = None) -> None:
        self.classifiers: tuple[ErrorClassifier, ...] = tuple(
            DEFAULT_CLASSIFIERS if classifiers is None else classifiers
        )

    def reclassify(self, error: BaseException) -> BaseException:
        """Pass ``error`` through every classifier in order."""
        for classifier in self.classifiers:
            error = classifier(error)
        return error

    def normalize(
        self,
        error: BaseException,
        response: Optional[httpx.Response] = None,
        body: Optional[bytes] = None,
    ) -> BaseException:
        """Return the error to surface for ``error``.

        Args:
            error: Failure raised while sending or validating the request.
            response: HTTP response, if one was received.
            body: Response body; read from ``response`` when omitted.

        Returns:
            A :class:`ResponseError` subclass when a response was received,
            otherwise ``error`` after reclassification (usually unchanged).
        """
        if response is None:
            return self.reclassify(error)

        if body is None:
            try:
                body = response.content
            except httpx.ResponseNotRead:
                body = None

        fields = {
            "status_code": response.status_code,
            "json": try_decode_json(body),
            "raw_data": body,
            "cause": error,
        }
        if isinstance(error, UnacceptableContentType):
            return ContentTypeError(
                content_type=error.content_type,
                acceptable=error.acceptable,
                **fields,
            )
        return HttpStatusError(**fields)


def is_explicitly_cancelled(error: BaseException) -> bool:
    """Return True if ``error`` represents a user-initiated cancellation.

    Covers :class:`RequestCancelled` (token cancelled around the transport
    call or the throttle wait), :class:`asyncio.CancelledError` (task
    cancelled), and the :class:`TaskError` sentinel.
    """
    return isinstance(error, (RequestCancelled, asyncio.CancelledError, TaskError))


def classify(error: BaseException) -> ErrorKind:
    """Map any failure raised by the client to an :class:`ErrorKind`."""
    if is_explicitly_cancelled(error):
        return ErrorKind.CANCELLED
    if isinstance(error, ResponseError):
        return error.kind
    if isinstance(error, DecodeError):
        return ErrorKind.DECODE
    return ErrorKind.TRANSPORT
