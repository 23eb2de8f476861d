# === NAVMAP v1 ===
# {
#   "module": "NetToolKit.network.instrumentation",
#   "purpose": "HTTPX event hooks recording per-exchange timing.",
#   "sections": [
#     {
#       "id": "create-http-event-hooks",
#       "name": "create_http_event_hooks",
#       "anchor": "function-create-http-event-hooks",
#       "kind": "function"
#     },
#     {
#       "id": "create-async-http-event-hooks",
#       "name": "create_async_http_event_hooks",
#       "anchor": "function-create-async-http-event-hooks",
#       "kind": "function"
#     },
#     {
#       "id": "redact-url",
#       "name": "_redact_url",
#       "anchor": "function-redact-url",
#       "kind": "function"
#     }
#   ]
# }
# === /NAVMAP ===

"""HTTP network layer instrumentation.

Logs a ``net.request`` debug record for every exchange made by clients built
in :mod:`NetToolKit.network.client`, capturing method, redacted URL, status,
elapsed time, HTTP version, and cache state.
"""

from __future__ import annotations

import logging
import time
from typing import Any, Callable
from urllib.parse import urlsplit, urlunsplit

logger = logging.getLogger(__name__)

#: Request extension holding the send start time
START_TIME_EXTENSION = "nettoolkit.start"


def _build_hooks() -> tuple[Callable[[Any], None], Callable[[Any], None]]:
    def on_request(request: Any) -> None:
        request.extensions[START_TIME_EXTENSION] = time.perf_counter()

    def on_response(response: Any) -> None:
        start_time = response.request.extensions.get(START_TIME_EXTENSION)
        if start_time is None:
            return

        try:
            logger.debug(
                "net.request",
                extra={
                    "method": response.request.method,
                    "url_redacted": _redact_url(str(response.request.url)),
                    "status": response.status_code,
                    "elapsed_ms": round((time.perf_counter() - start_time) * 1000, 3),
                    "http_version": response.http_version,
                    "from_cache": bool(response.extensions.get("from_cache", False)),
                },
            )
        except Exception:
            # Never fail telemetry
            pass

    return on_request, on_response


def create_http_event_hooks() -> dict:
    """Create HTTPX event hooks for ``httpx.Client``.

    Usage:
        >>> import httpx
        >>> client = httpx.Client(event_hooks=create_http_event_hooks())
    """
    on_request, on_response = _build_hooks()
    return {"request": [on_request], "response": [on_response]}


def create_async_http_event_hooks() -> dict:
    """Create HTTPX event hooks for ``httpx.AsyncClient`` (hooks must be coroutines)."""
    on_request, on_response = _build_hooks()

    async def on_request_async(request: Any) -> None:
        on_request(request)

    async def on_response_async(response: Any) -> None:
        on_response(response)

    return {"request": [on_request_async], "response": [on_response_async]}


def _redact_url(url: str) -> str:
    """Strip query string and fragment, keeping scheme, host, and path."""
    try:
        parts = urlsplit(url)
        return urlunsplit((parts.scheme, parts.netloc, parts.path, "", ""))
    except ValueError:
        return "[URL_REDACTION_FAILED]"


__all__ = [
    "START_TIME_EXTENSION",
    "create_http_event_hooks",
    "create_async_http_event_hooks",
]
