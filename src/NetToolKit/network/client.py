# === NAVMAP v1 ===
# {
#   "module": "NetToolKit.network.client",
#   "purpose": "HTTPX + Hishel HTTP Client Factory.",
#   "sections": [
#     {
#       "id": "build-http-client",
#       "name": "build_http_client",
#       "anchor": "function-build-http-client",
#       "kind": "function"
#     },
#     {
#       "id": "build-async-http-client",
#       "name": "build_async_http_client",
#       "anchor": "function-build-async-http-client",
#       "kind": "function"
#     },
#     {
#       "id": "get-cache-dir",
#       "name": "get_cache_dir",
#       "anchor": "function-get-cache-dir",
#       "kind": "function"
#     },
#     {
#       "id": "create-ssl-context",
#       "name": "create_ssl_context",
#       "anchor": "function-create-ssl-context",
#       "kind": "function"
#     }
#   ]
# }
# === /NAVMAP ===

"""HTTPX + Hishel HTTP Client Factory.

Builds the ``httpx.Client`` / ``httpx.AsyncClient`` that
:class:`~NetToolKit.network.manager.NetworkManager` sends through.

Key design:
- **No globals**: every manager owns (or is handed) its client; nothing is
  cached at module level.
- **Per-phase timeouts** and bounded connection pools from settings.
- **TLS**: certifi CA bundle, hostname checking on unless disabled.
- **Caching** (opt-in): Hishel ``CacheTransport`` with ``FileStorage`` under
  the platform cache directory. Per-request cache policies reach it as request
  extensions (see :class:`~NetToolKit.network.request.CachePolicy`).
- **Redirects**: not followed by default so 3xx responses reach validation.
- **Hooks**: per-exchange timing records from
  :mod:`NetToolKit.network.instrumentation`.

Example:
    >>> from NetToolKit.settings import NetworkSettings
    >>> client = build_http_client(NetworkSettings(http2=False))
    >>> client.close()
"""

from __future__ import annotations

import logging
import ssl
from pathlib import Path
from typing import TYPE_CHECKING, Optional

import certifi
import hishel
import httpx
import platformdirs

from NetToolKit.network.instrumentation import (
    create_async_http_event_hooks,
    create_http_event_hooks,
)
from NetToolKit.network.policy import (
    ALLOW_HEURISTIC_CACHING,
    CACHE_APP_NAME,
    CACHE_STORAGE_CHECK_INTERVAL_SECONDS,
    CACHEABLE_METHODS,
    CACHEABLE_STATUS_CODES,
)

if TYPE_CHECKING:
    from NetToolKit.settings import NetworkSettings

logger = logging.getLogger(__name__)


# ============================================================================
# Public API
# ============================================================================


def build_http_client(
    settings: "NetworkSettings",
    transport: Optional[httpx.BaseTransport] = None,
) -> httpx.Client:
    """Create a blocking HTTPX client configured from ``settings``.

    Args:
        settings: Timeouts, pooling, TLS, redirect, and cache configuration.
        transport: Replace the network transport (tests pass ``httpx.MockTransport``).
            Caching still wraps it when ``settings.cache_enabled`` is set.

    Returns:
        A ready-to-use ``httpx.Client``; the caller owns and closes it.
    """
    ssl_ctx = create_ssl_context(settings.verify_tls)
    if transport is None:
        transport = httpx.HTTPTransport(
            verify=ssl_ctx,
            http2=settings.http2,
            limits=_limits(settings),
        )

    if settings.cache_enabled:
        transport = hishel.CacheTransport(
            transport=transport,
            storage=hishel.FileStorage(
                base_path=get_cache_dir(settings.cache_dir),
                ttl=settings.cache_ttl_seconds,
                check_ttl_every=CACHE_STORAGE_CHECK_INTERVAL_SECONDS,
            ),
            controller=_cache_controller(),
        )

    client = httpx.Client(
        transport=transport,
        base_url=settings.base_url,
        timeout=_timeout(settings),
        follow_redirects=settings.follow_redirects,
        event_hooks=create_http_event_hooks(),
    )
    _log_created(settings, "HTTPX client created")
    return client


def build_async_http_client(
    settings: "NetworkSettings",
    transport: Optional[httpx.AsyncBaseTransport] = None,
) -> httpx.AsyncClient:
    """Async counterpart of :func:`build_http_client`."""
    ssl_ctx = create_ssl_context(settings.verify_tls)
    if transport is None:
        transport = httpx.AsyncHTTPTransport(
            verify=ssl_ctx,
            http2=settings.http2,
            limits=_limits(settings),
        )

    if settings.cache_enabled:
        transport = hishel.AsyncCacheTransport(
            transport=transport,
            storage=hishel.AsyncFileStorage(
                base_path=get_cache_dir(settings.cache_dir),
                ttl=settings.cache_ttl_seconds,
                check_ttl_every=CACHE_STORAGE_CHECK_INTERVAL_SECONDS,
            ),
            controller=_cache_controller(),
        )

    client = httpx.AsyncClient(
        transport=transport,
        base_url=settings.base_url,
        timeout=_timeout(settings),
        follow_redirects=settings.follow_redirects,
        event_hooks=create_async_http_event_hooks(),
    )
    _log_created(settings, "HTTPX async client created")
    return client


def get_cache_dir(override: Optional[Path] = None) -> Path:
    """Return (and create) the HTTP cache directory.

    Uses platformdirs for cross-platform XDG/macOS/Windows compliance unless
    ``override`` is given.
    """
    base = override if override is not None else Path(platformdirs.user_cache_dir(CACHE_APP_NAME))
    cache_dir = base / "http"
    cache_dir.mkdir(parents=True, exist_ok=True)
    return cache_dir


def create_ssl_context(verify: bool = True) -> ssl.SSLContext:
    """Create SSL context with secure defaults.

    Uses the certifi bundle and enforces certificate and hostname
    verification unless ``verify`` is False (development only).
    """
    if not verify:
        ctx = ssl.create_default_context()
        ctx.check_hostname = False
        ctx.verify_mode = ssl.CERT_NONE
        logger.warning("TLS verification DISABLED (development only!)")
        return ctx

    ctx = ssl.create_default_context(cafile=certifi.where())
    ctx.check_hostname = True
    ctx.verify_mode = ssl.CERT_REQUIRED
    return ctx


# ============================================================================
# Implementation Details
# ============================================================================


def _timeout(settings: "NetworkSettings") -> httpx.Timeout:
    return httpx.Timeout(
        connect=settings.connect_timeout,
        read=settings.read_timeout,
        write=settings.write_timeout,
        pool=settings.pool_timeout,
    )


def _limits(settings: "NetworkSettings") -> httpx.Limits:
    return httpx.Limits(
        max_connections=settings.max_connections,
        max_keepalive_connections=settings.max_keepalive_connections,
        keepalive_expiry=settings.keepalive_expiry,
    )


def _cache_controller() -> hishel.Controller:
    return hishel.Controller(
        cacheable_methods=CACHEABLE_METHODS,
        cacheable_status_codes=CACHEABLE_STATUS_CODES,
        allow_heuristics=ALLOW_HEURISTIC_CACHING,
        cache_private=True,
    )


def _log_created(settings: "NetworkSettings", message: str) -> None:
    logger.debug(
        message,
        extra={
            "http2": settings.http2,
            "max_connections": settings.max_connections,
            "cache_enabled": settings.cache_enabled,
            "follow_redirects": settings.follow_redirects,
        },
    )


__all__ = [
    "build_http_client",
    "build_async_http_client",
    "get_cache_dir",
    "create_ssl_context",
]
