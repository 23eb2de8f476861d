# === NAVMAP v1 ===
# {
#   "module": "NetToolKit.network.request",
#   "purpose": "Immutable request descriptors and cache-policy pass-through",
#   "sections": [
#     {"id": "parameterencoding", "name": "ParameterEncoding", "anchor": "class-parameterencoding", "kind": "class"},
#     {"id": "cachepolicy", "name": "CachePolicy", "anchor": "class-cachepolicy", "kind": "class"},
#     {"id": "requestdescriptor", "name": "RequestDescriptor", "anchor": "class-requestdescriptor", "kind": "class"},
#     {"id": "apply-cache-policy", "name": "apply_cache_policy", "anchor": "function-apply-cache-policy", "kind": "function"}
#   ]
# }
# === /NAVMAP ===

"""Request descriptors.

A :class:`RequestDescriptor` captures everything needed to build one
``httpx.Request``: URL, method, parameters and how to encode them, headers,
an optional per-request timeout, and an optional :class:`CachePolicy`.

The cache policy is opaque to this package.  It is translated into request
extensions understood by Hishel's cache transport; a client built without a
cache simply ignores them.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from enum import Enum
from typing import Any, Mapping, Optional

import httpx

__all__ = [
    "ParameterEncoding",
    "CachePolicy",
    "RequestDescriptor",
    "apply_cache_policy",
]

_QUERY_METHODS = frozenset({"GET", "HEAD", "DELETE"})


class ParameterEncoding(str, Enum):
    """Where request parameters go."""

    #: Query string for GET/HEAD/DELETE, form body otherwise
    METHOD_DEPENDENT = "method_dependent"
    QUERY = "query"
    FORM = "form"
    JSON = "json"


class CachePolicy(str, Enum):
    """Per-request instruction forwarded to the cache transport."""

    #: Store and serve the response regardless of its cache headers
    CACHE = "cache"
    #: Bypass the cache entirely for this request
    DO_NOT_CACHE = "do_not_cache"
    #: Let the cache controller decide from RFC 9111 headers
    DEFAULT = "default"

    @property
    def extensions(self) -> dict[str, Any]:
        if self is CachePolicy.CACHE:
            return {"force_cache": True}
        if self is CachePolicy.DO_NOT_CACHE:
            return {"cache_disabled": True}
        return {}


def apply_cache_policy(request: httpx.Request, policy: Optional[CachePolicy]) -> httpx.Request:
    """Attach ``policy``'s extensions to ``request`` (in place) and return it."""
    if policy is not None:
        request.extensions.update(policy.extensions)
    return request


@dataclass(frozen=True)
class RequestDescriptor:
    """Immutable description of one request.

    Attributes:
        url: Absolute URL, or a path relative to the client's ``base_url``.
        method: HTTP method (normalised to upper case).
        params: Request parameters, placed according to ``encoding``.
        headers: Extra request headers.
        encoding: Parameter placement (see :class:`ParameterEncoding`).
        cache_policy: Optional cache instruction for the transport.
        timeout: Optional per-request timeout overriding the client's.
    """

    url: str
    method: str = "GET"
    params: Mapping[str, Any] = field(default_factory=dict)
    headers: Optional[Mapping[str, str]] = None
    encoding: ParameterEncoding = ParameterEncoding.METHOD_DEPENDENT
    cache_policy: Optional[CachePolicy] = None
    timeout: Optional[float] = None

    def __post_init__(self) -> None:
        object.__setattr__(self, "method", self.method.upper())

    def resolved_encoding(self) -> ParameterEncoding:
        if self.encoding is ParameterEncoding.METHOD_DEPENDENT:
            if self.method in _QUERY_METHODS:
                return ParameterEncoding.QUERY
            return ParameterEncoding.FORM
        return self.encoding

    def build_request(self, client: httpx.Client | httpx.AsyncClient) -> httpx.Request:
        """Build the ``httpx.Request`` using ``client``'s defaults."""
        kwargs: dict[str, Any] = {"headers": self.headers}
        params = dict(self.params) if self.params else None
        if params:
            encoding = self.resolved_encoding()
            if encoding is ParameterEncoding.QUERY:
                kwargs["params"] = params
            elif encoding is ParameterEncoding.FORM:
                kwargs["data"] = params
            else:
                kwargs["json"] = params
        if self.timeout is not None:
            kwargs["timeout"] = self.timeout

        request = client.build_request(self.method, self.url, **kwargs)
        return apply_cache_policy(request, self.cache_policy)
