# === NAVMAP v1 ===
# {
#   "module": "NetToolKit.network.manager",
#   "purpose": "Caller-facing throttled fetch API (blocking and asyncio)",
#   "sections": [
#     {"id": "networkmanager", "name": "NetworkManager", "anchor": "class-networkmanager", "kind": "class"},
#     {"id": "asyncnetworkmanager", "name": "AsyncNetworkManager", "anchor": "class-asyncnetworkmanager", "kind": "class"}
#   ]
# }
# === /NAVMAP ===

"""Caller-facing API: throttled, validated, logged fetches.

:class:`NetworkManager` combines a :class:`~NetToolKit.network.throttle.ThrottleGate`,
a :class:`~NetToolKit.network.executor.RequestExecutor`, and the JSON decoder:

- ``fetch_data`` waits for its throttle slot, sends the request, validates
  it, and returns the raw body or raises the normalized error.
- ``fetch_json`` is ``fetch_data`` restricted to ``application/json`` and
  ``text/plain`` responses, followed by JSON decoding.
- ``fetch_data_for_request`` / ``fetch_json_for_request`` send a prebuilt
  ``httpx.Request``; they skip request logging and surface unwrapped errors.

Design:
- **Instance-owned state**: throttle slot and correlation counter belong to
  the manager, so two managers never throttle each other.
- **Thread-safe**: one manager may be shared by many threads.
- **Owned client**: a client built by the manager is closed by :meth:`close`;
  a client handed in is left to its owner.

Example:
    >>> from NetToolKit.network import NetworkManager
    >>> with NetworkManager(inter_request_interval=0.5) as manager:  # doctest: +SKIP
    ...     manager.fetch_json("https://api.example.org/items", params={"page": 1})
"""

from __future__ import annotations

import logging
from typing import TYPE_CHECKING, Any, Callable, Iterable, Mapping, Optional, Sequence

import httpx

from NetToolKit.cancellation import CancellationToken
from NetToolKit.network.client import build_async_http_client, build_http_client
from NetToolKit.network.correlation import CorrelationCounter
from NetToolKit.network.decoding import decode_json
from NetToolKit.network.executor import AsyncRequestExecutor, RequestExecutor
from NetToolKit.network.normalize import ErrorClassifier, ErrorNormalizer
from NetToolKit.network.policy import JSON_CONTENT_TYPES, REQUEST_LOGGER_NAME
from NetToolKit.network.request import (
    CachePolicy,
    ParameterEncoding,
    RequestDescriptor,
    apply_cache_policy,
)
from NetToolKit.network.sinks import LogSink
from NetToolKit.network.throttle import ThrottleGate
from NetToolKit.network.validation import ResponseValidation

if TYPE_CHECKING:
    from NetToolKit.settings import NetworkSettings

__all__ = ["NetworkManager", "AsyncNetworkManager"]

logger = logging.getLogger(__name__)


def _resolve_settings(settings: Optional["NetworkSettings"]) -> "NetworkSettings":
    if settings is not None:
        return settings
    # Local import to avoid circular dependency with NetToolKit.settings
    from NetToolKit.settings import get_settings

    return get_settings()


def _request_sink(settings: "NetworkSettings") -> Optional[LogSink]:
    if settings.log_requests:
        return logging.getLogger(REQUEST_LOGGER_NAME)
    return None


def _descriptor(
    url: str,
    method: str,
    params: Optional[Mapping[str, Any]],
    headers: Optional[Mapping[str, str]],
    encoding: ParameterEncoding,
    cache_policy: Optional[CachePolicy],
    timeout: Optional[float],
) -> RequestDescriptor:
    return RequestDescriptor(
        url=url,
        method=method,
        params=dict(params or {}),
        headers=headers,
        encoding=encoding,
        cache_policy=cache_policy,
        timeout=timeout,
    )


class _ManagerBase:
    def __init__(
        self,
        *,
        inter_request_interval: Optional[float],
        logger: Optional[LogSink],
        classifiers: Optional[Sequence[ErrorClassifier]],
        clock: Optional[Callable[[], float]],
    ) -> None:
        self._gate = ThrottleGate(inter_request_interval, clock=clock)
        self._executor_options = {
            "sink": logger,
            "normalizer": ErrorNormalizer(classifiers),
            "counter": CorrelationCounter(),
        }

    @property
    def throttle_gate(self) -> ThrottleGate:
        return self._gate

    @property
    def inter_request_interval(self) -> Optional[float]:
        return self._gate.interval


class NetworkManager(_ManagerBase):
    """Blocking, throttled HTTP fetcher.

    Args:
        client: HTTPX client to send through. When omitted, one is built from
            the environment settings and closed by :meth:`close`.
        inter_request_interval: Minimum seconds between request starts.
        logger: Sink for ``API OUT``/``API IN`` records (any object with
            ``debug``/``error``; default discards them).
        classifiers: Error classifier chain (default unwraps serialization failures).
        clock: Monotonic clock for the throttle gate.
    """

    def __init__(
        self,
        client: Optional[httpx.Client] = None,
        *,
        inter_request_interval: Optional[float] = None,
        logger: Optional[LogSink] = None,
        classifiers: Optional[Sequence[ErrorClassifier]] = None,
        clock: Optional[Callable[[], float]] = None,
    ) -> None:
        super().__init__(
            inter_request_interval=inter_request_interval,
            logger=logger,
            classifiers=classifiers,
            clock=clock,
        )
        self._owns_client = client is None
        self._client = client if client is not None else build_http_client(_resolve_settings(None))
        self._executor = RequestExecutor(self._client, **self._executor_options)

    @classmethod
    def from_settings(
        cls,
        settings: Optional["NetworkSettings"] = None,
        *,
        transport: Optional[httpx.BaseTransport] = None,
        **kwargs: Any,
    ) -> "NetworkManager":
        """Build a manager (and its owned client) from :class:`NetworkSettings`."""
        settings = _resolve_settings(settings)
        kwargs.setdefault("inter_request_interval", settings.inter_request_interval)
        kwargs.setdefault("logger", _request_sink(settings))
        manager = cls(build_http_client(settings, transport), **kwargs)
        manager._owns_client = True
        return manager

    @property
    def session(self) -> httpx.Client:
        """The underlying HTTPX client."""
        return self._client

    def fetch(
        self,
        descriptor: RequestDescriptor,
        validation: ResponseValidation = ResponseValidation(),
        token: Optional[CancellationToken] = None,
    ) -> bytes:
        """Throttle, send, and validate ``descriptor``; return the raw body.

        Raises:
            ResponseError: Response received but rejected by validation.
            RequestCancelled: ``token`` was cancelled.
            httpx.HTTPError: No response was received.
        """
        self._gate.acquire(token)
        return self._executor.execute(descriptor, validation, token).unwrap()

    def fetch_data(
        self,
        url: str,
        *,
        method: str = "GET",
        params: Optional[Mapping[str, Any]] = None,
        headers: Optional[Mapping[str, str]] = None,
        encoding: ParameterEncoding = ParameterEncoding.METHOD_DEPENDENT,
        cache_policy: Optional[CachePolicy] = None,
        content_types: Optional[Iterable[str]] = None,
        timeout: Optional[float] = None,
        token: Optional[CancellationToken] = None,
    ) -> bytes:
        """Fetch ``url`` and return the raw response body."""
        descriptor = _descriptor(url, method, params, headers, encoding, cache_policy, timeout)
        return self.fetch(descriptor, ResponseValidation.accepting(content_types), token)

    def fetch_json(
        self,
        url: str,
        *,
        method: str = "GET",
        params: Optional[Mapping[str, Any]] = None,
        headers: Optional[Mapping[str, str]] = None,
        encoding: ParameterEncoding = ParameterEncoding.METHOD_DEPENDENT,
        cache_policy: Optional[CachePolicy] = None,
        timeout: Optional[float] = None,
        token: Optional[CancellationToken] = None,
    ) -> Any:
        """Fetch ``url`` expecting JSON and return the decoded value.

        Raises:
            DecodeError: The body is not valid JSON.
        """
        data = self.fetch_data(
            url,
            method=method,
            params=params,
            headers=headers,
            encoding=encoding,
            cache_policy=cache_policy,
            content_types=JSON_CONTENT_TYPES,
            timeout=timeout,
            token=token,
        )
        return decode_json(data)

    def fetch_data_for_request(
        self,
        request: httpx.Request,
        *,
        cache_policy: Optional[CachePolicy] = None,
        content_types: Optional[Iterable[str]] = None,
        token: Optional[CancellationToken] = None,
    ) -> bytes:
        """Throttle and send a prebuilt request; return the raw body."""
        self._gate.acquire(token)
        outcome = self._executor.execute_request(
            apply_cache_policy(request, cache_policy),
            ResponseValidation.accepting(content_types),
            token=token,
        )
        return outcome.unwrap()

    def fetch_json_for_request(
        self,
        request: httpx.Request,
        *,
        cache_policy: Optional[CachePolicy] = None,
        token: Optional[CancellationToken] = None,
    ) -> Any:
        """Throttle and send a prebuilt request; return the decoded JSON body.

        A body that is not JSON raises :class:`~NetToolKit.errors.DecodeError`
        directly.
        """
        self._gate.acquire(token)
        outcome = self._executor.execute_request(
            apply_cache_policy(request, cache_policy),
            ResponseValidation.accepting(JSON_CONTENT_TYPES),
            serializer=decode_json,
            token=token,
        )
        return outcome.unwrap()

    def close(self) -> None:
        """Close the client if this manager created it."""
        if self._owns_client:
            self._client.close()
            logger.debug("NetworkManager closed owned client")

    def __enter__(self) -> "NetworkManager":
        return self

    def __exit__(self, *exc_info: Any) -> None:
        self.close()


class AsyncNetworkManager(_ManagerBase):
    """Asyncio counterpart of :class:`NetworkManager`.

    Cancelling the calling task aborts both the throttle wait and the
    in-flight request with :class:`asyncio.CancelledError`.
    """

    def __init__(
        self,
        client: Optional[httpx.AsyncClient] = None,
        *,
        inter_request_interval: Optional[float] = None,
        logger: Optional[LogSink] = None,
        classifiers: Optional[Sequence[ErrorClassifier]] = None,
        clock: Optional[Callable[[], float]] = None,
    ) -> None:
        super().__init__(
            inter_request_interval=inter_request_interval,
            logger=logger,
            classifiers=classifiers,
            clock=clock,
        )
        self._owns_client = client is None
        self._client = (
            client if client is not None else build_async_http_client(_resolve_settings(None))
        )
        self._executor = AsyncRequestExecutor(self._client, **self._executor_options)

    @classmethod
    def from_settings(
        cls,
        settings: Optional["NetworkSettings"] = None,
        *,
        transport: Optional[httpx.AsyncBaseTransport] = None,
        **kwargs: Any,
    ) -> "AsyncNetworkManager":
        """Build a manager (and its owned client) from :class:`NetworkSettings`."""
        settings = _resolve_settings(settings)
        kwargs.setdefault("inter_request_interval", settings.inter_request_interval)
        kwargs.setdefault("logger", _request_sink(settings))
        manager = cls(build_async_http_client(settings, transport), **kwargs)
        manager._owns_client = True
        return manager

    @property
    def session(self) -> httpx.AsyncClient:
        return self._client

    async def fetch(
        self,
        descriptor: RequestDescriptor,
        validation: ResponseValidation = ResponseValidation(),
    ) -> bytes:
        await self._gate.acquire_async()
        outcome = await self._executor.execute(descriptor, validation)
        return outcome.unwrap()

    async def fetch_data(
        self,
        url: str,
        *,
        method: str = "GET",
        params: Optional[Mapping[str, Any]] = None,
        headers: Optional[Mapping[str, str]] = None,
        encoding: ParameterEncoding = ParameterEncoding.METHOD_DEPENDENT,
        cache_policy: Optional[CachePolicy] = None,
        content_types: Optional[Iterable[str]] = None,
        timeout: Optional[float] = None,
    ) -> bytes:
        descriptor = _descriptor(url, method, params, headers, encoding, cache_policy, timeout)
        return await self.fetch(descriptor, ResponseValidation.accepting(content_types))

    async def fetch_json(
        self,
        url: str,
        *,
        method: str = "GET",
        params: Optional[Mapping[str, Any]] = None,
        headers: Optional[Mapping[str, str]] = None,
        encoding: ParameterEncoding = ParameterEncoding.METHOD_DEPENDENT,
        cache_policy: Optional[CachePolicy] = None,
        timeout: Optional[float] = None,
    ) -> Any:
        data = await self.fetch_data(
            url,
            method=method,
            params=params,
            headers=headers,
            encoding=encoding,
            cache_policy=cache_policy,
            content_types=JSON_CONTENT_TYPES,
            timeout=timeout,
        )
        return decode_json(data)

    async def fetch_data_for_request(
        self,
        request: httpx.Request,
        *,
        cache_policy: Optional[CachePolicy] = None,
        content_types: Optional[Iterable[str]] = None,
    ) -> bytes:
        await self._gate.acquire_async()
        outcome = await self._executor.execute_request(
            apply_cache_policy(request, cache_policy),
            ResponseValidation.accepting(content_types),
        )
        return outcome.unwrap()

    async def fetch_json_for_request(
        self,
        request: httpx.Request,
        *,
        cache_policy: Optional[CachePolicy] = None,
    ) -> Any:
        await self._gate.acquire_async()
        outcome = await self._executor.execute_request(
            apply_cache_policy(request, cache_policy),
            ResponseValidation.accepting(JSON_CONTENT_TYPES),
            serializer=decode_json,
        )
        return outcome.unwrap()

    async def aclose(self) -> None:
        """Close the client if this manager created it."""
        if self._owns_client:
            await self._client.aclose()
            logger.debug("AsyncNetworkManager closed owned client")

    async def __aenter__(self) -> "AsyncNetworkManager":
        return self

    async def __aexit__(self, *exc_info: Any) -> None:
        await self.aclose()
