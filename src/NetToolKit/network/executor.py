# === NAVMAP v1 ===
# {
#   "module": "NetToolKit.network.executor",
#   "purpose": "Send one request, validate the response, and normalize failures",
#   "sections": [
#     {"id": "executorbase", "name": "_ExecutorBase", "anchor": "class-executorbase", "kind": "class"},
#     {"id": "requestexecutor", "name": "RequestExecutor", "anchor": "class-requestexecutor", "kind": "class"},
#     {"id": "asyncrequestexecutor", "name": "AsyncRequestExecutor", "anchor": "class-asyncrequestexecutor", "kind": "class"}
#   ]
# }
# === /NAVMAP ===

"""Request execution: one HTTP exchange from descriptor to outcome.

Flow for :meth:`RequestExecutor.execute`:

1. Draw a correlation id and emit ``API OUT [id]: METHOD url params``.
2. Build the request (cache policy travels as request extensions) and send
   it through the HTTPX client.
3. Validate status range, then content type when an allow-list is given.
4. Success: emit ``API IN [id]: <pretty JSON or hex>`` at debug level and
   return :class:`~NetToolKit.network.outcome.Success` with the raw bytes.
5. Validation failure: build a :class:`~NetToolKit.errors.ResponseError`,
   emit ``API IN [id]: <description>`` at error level, return
   :class:`~NetToolKit.network.outcome.Failure`.
6. No response at all: return the transport's own exception unchanged.

Log sink failures never abort a request.  :class:`AsyncRequestExecutor`
follows the same flow over ``httpx.AsyncClient``; cancelling the task
propagates :class:`asyncio.CancelledError` instead of producing an outcome.
"""

from __future__ import annotations

import logging
from typing import Any, Callable, Optional

import httpx

from NetToolKit.cancellation import CancellationToken
from NetToolKit.errors import (
    RequestCancelled,
    ResponseError,
    SerializationFailure,
    UnacceptableContentType,
    UnacceptableStatusCode,
)
from NetToolKit.network.correlation import CorrelationCounter
from NetToolKit.network.decoding import to_log_string
from NetToolKit.network.normalize import ErrorNormalizer
from NetToolKit.network.outcome import Failure, ResponseOutcome, Success
from NetToolKit.network.request import RequestDescriptor
from NetToolKit.network.sinks import NULL_SINK, LogSink, NullLogSink
from NetToolKit.network.validation import ResponseValidation, validate_response

__all__ = ["RequestExecutor", "AsyncRequestExecutor", "Serializer"]

logger = logging.getLogger(__name__)

Serializer = Callable[[bytes], Any]

#: Failures that mean no HTTP response was received
_NO_RESPONSE_ERRORS = (httpx.HTTPError, httpx.InvalidURL, RequestCancelled)

_VALIDATION_ERRORS = (UnacceptableStatusCode, UnacceptableContentType)

_SERIALIZATION_ERRORS = _VALIDATION_ERRORS + (SerializationFailure,)


class _ExecutorBase:
    """Logging, validation, and normalization shared by both executors."""

    def __init__(
        self,
        *,
        sink: Optional[LogSink] = None,
        normalizer: Optional[ErrorNormalizer] = None,
        counter: Optional[CorrelationCounter] = None,
    ) -> None:
        self._sink = sink if sink is not None else NULL_SINK
        self._normalizer = normalizer or ErrorNormalizer()
        self._counter = counter or CorrelationCounter()

    @property
    def normalizer(self) -> ErrorNormalizer:
        return self._normalizer

    def _emit(self, level: str, message: str) -> None:
        try:
            getattr(self._sink, level)(message)
        except Exception:
            # Never fail a request over logging
            pass

    def _log_outbound(self, descriptor: RequestDescriptor) -> int:
        uid = self._counter.next()
        if not isinstance(self._sink, NullLogSink):
            self._emit(
                "debug",
                f"API OUT [{uid}]: {descriptor.method} {descriptor.url} {dict(descriptor.params)}",
            )
        return uid

    def _complete(
        self, uid: int, response: httpx.Response, validation: ResponseValidation
    ) -> ResponseOutcome:
        body = response.content
        try:
            validate_response(response, validation)
        except _VALIDATION_ERRORS as exc:
            error = self._normalizer.normalize(exc, response, body)
            description = error.description if isinstance(error, ResponseError) else str(error)
            self._emit("error", f"API IN [{uid}]: {description}")
            logger.debug(
                "Response rejected",
                extra={
                    "correlation_id": uid,
                    "status": response.status_code,
                    "reason": type(exc).__name__,
                },
            )
            return Failure(error)

        if not isinstance(self._sink, NullLogSink):
            self._emit("debug", f"API IN [{uid}]: {to_log_string(body)}")
        return Success(body)

    def _fail_without_response(self, uid: Optional[int], exc: BaseException) -> ResponseOutcome:
        logger.debug(
            "Request failed without a response",
            extra={"correlation_id": uid, "error": type(exc).__name__},
        )
        return Failure(self._normalizer.normalize(exc))

    def _serialize(
        self,
        response: httpx.Response,
        validation: ResponseValidation,
        serializer: Optional[Serializer],
    ) -> ResponseOutcome:
        try:
            validate_response(response, validation)
            if serializer is None:
                return Success(response.content)
            try:
                value = serializer(response.content)
            except Exception as exc:
                raise SerializationFailure(exc) from exc
        except _SERIALIZATION_ERRORS as exc:
            return Failure(self._normalizer.reclassify(exc))
        return Success(value)


class RequestExecutor(_ExecutorBase):
    """Blocking executor over an ``httpx.Client``.

    Args:
        client: Client used for every request.
        sink: Receives ``API OUT`` / ``API IN`` records (default: discard).
        normalizer: Error normalizer (default chain unwraps serialization failures).
        counter: Correlation id source; share one to keep ids unique across executors.
    """

    def __init__(self, client: httpx.Client, **kwargs: Any) -> None:
        super().__init__(**kwargs)
        self._client = client

    @property
    def client(self) -> httpx.Client:
        return self._client

    def execute(
        self,
        descriptor: RequestDescriptor,
        validation: ResponseValidation = ResponseValidation(),
        token: Optional[CancellationToken] = None,
    ) -> ResponseOutcome:
        """Send ``descriptor`` and validate the response.

        Args:
            descriptor: Request to send.
            validation: Status range and optional content-type allow-list.
            token: Optional cancellation token checked before sending and
                after the response arrives.

        Returns:
            :class:`Success` holding the raw body, or :class:`Failure`.
        """
        uid = self._log_outbound(descriptor)
        try:
            if token is not None:
                token.raise_if_cancelled()
            response = self._client.send(descriptor.build_request(self._client))
            if token is not None:
                token.raise_if_cancelled()
        except _NO_RESPONSE_ERRORS as exc:
            return self._fail_without_response(uid, exc)
        return self._complete(uid, response, validation)

    def execute_request(
        self,
        request: httpx.Request,
        validation: ResponseValidation = ResponseValidation(),
        serializer: Optional[Serializer] = None,
        token: Optional[CancellationToken] = None,
    ) -> ResponseOutcome:
        """Send a prebuilt ``httpx.Request`` without request logging.

        Validation failures are returned as the raw
        :class:`~NetToolKit.errors.UnacceptableStatusCode` /
        :class:`~NetToolKit.errors.UnacceptableContentType`, and serializer
        errors are unwrapped by the classifier chain.
        """
        try:
            if token is not None:
                token.raise_if_cancelled()
            response = self._client.send(request)
            if token is not None:
                token.raise_if_cancelled()
        except _NO_RESPONSE_ERRORS as exc:
            return self._fail_without_response(None, exc)
        return self._serialize(response, validation, serializer)


class AsyncRequestExecutor(_ExecutorBase):
    """Asyncio executor over an ``httpx.AsyncClient``.

    Cancelling the calling task cancels the in-flight transport call; the
    resulting :class:`asyncio.CancelledError` propagates to the caller.
    """

    def __init__(self, client: httpx.AsyncClient, **kwargs: Any) -> None:
        super().__init__(**kwargs)
        self._client = client

    @property
    def client(self) -> httpx.AsyncClient:
        return self._client

    async def execute(
        self,
        descriptor: RequestDescriptor,
        validation: ResponseValidation = ResponseValidation(),
    ) -> ResponseOutcome:
        """Async counterpart of :meth:`RequestExecutor.execute`."""
        uid = self._log_outbound(descriptor)
        try:
            response = await self._client.send(descriptor.build_request(self._client))
        except _NO_RESPONSE_ERRORS as exc:
            return self._fail_without_response(uid, exc)
        return self._complete(uid, response, validation)

    async def execute_request(
        self,
        request: httpx.Request,
        validation: ResponseValidation = ResponseValidation(),
        serializer: Optional[Serializer] = None,
    ) -> ResponseOutcome:
        """Async counterpart of :meth:`RequestExecutor.execute_request`."""
        try:
            response = await self._client.send(request)
        except _NO_RESPONSE_ERRORS as exc:
            return self._fail_without_response(None, exc)
        return self._serialize(response, validation, serializer)
