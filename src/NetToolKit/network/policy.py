# === NAVMAP v1 ===
# {
#   "module": "NetToolKit.network.policy",
#   "purpose": "HTTP policy constants and defaults.",
#   "sections": []
# }
# === /NAVMAP ===

"""HTTP policy constants and defaults.

Defines validation defaults, timeout budgets, connection pooling parameters,
and Hishel cache settings used when building clients from
:class:`~NetToolKit.settings.NetworkSettings`.  Settings fields default to
these values; code that needs a constant without a settings object reads it
from here.
"""

# ============================================================================
# Validation
# ============================================================================

#: Status codes accepted as success (2xx and 3xx; redirects are not followed
#: by default so 3xx responses reach validation unchanged)
ACCEPTABLE_STATUS_CODES = range(200, 400)

#: Content types accepted by ``fetch_json``; some APIs label JSON as text/plain
JSON_CONTENT_TYPES = ("application/json", "text/plain")


# ============================================================================
# Timeout Budgets (seconds)
# ============================================================================

#: Connection establishment timeout
HTTP_CONNECT_TIMEOUT = 5.0

#: Read timeout (time between data packets on established connection)
HTTP_READ_TIMEOUT = 30.0

#: Write timeout (time to send request body)
HTTP_WRITE_TIMEOUT = 15.0

#: Pool timeout (acquiring a connection from the pool)
HTTP_POOL_TIMEOUT = 5.0


# ============================================================================
# Connection Pooling
# ============================================================================

#: Maximum concurrent connections (total across all hosts)
MAX_CONNECTIONS = 100

#: Maximum idle connections kept open for reuse
MAX_KEEPALIVE_CONNECTIONS = 20

#: How long to keep idle connections alive (seconds)
KEEPALIVE_EXPIRY = 5.0

#: Enable HTTP/2 multiplexing; falls back to HTTP/1.1 when unsupported
HTTP2_ENABLED = True

#: Follow redirects inside the transport
FOLLOW_REDIRECTS = False

#: Require certificate verification for HTTPS
TLS_VERIFY_ENABLED = True


# ============================================================================
# Hishel RFC 9111 Cache Settings
# ============================================================================

#: Cache storage TTL (garbage collection interval, not freshness)
CACHE_STORAGE_TTL_SECONDS = 7 * 24 * 3600  # 7 days

#: How often to scan cache for expired entries (seconds)
CACHE_STORAGE_CHECK_INTERVAL_SECONDS = 24 * 3600  # once per day

#: Cacheable HTTP methods (no POST caching)
CACHEABLE_METHODS = ["GET", "HEAD"]

#: Cacheable HTTP status codes
CACHEABLE_STATUS_CODES = [200, 301, 308]

#: Only cache responses with explicit Cache-Control/Expires directives
ALLOW_HEURISTIC_CACHING = False

#: Application name used for the platform cache directory
CACHE_APP_NAME = "nettoolkit"


# ============================================================================
# Request Logging
# ============================================================================

#: Logger receiving "API OUT"/"API IN" records when request logging is enabled
REQUEST_LOGGER_NAME = "NetToolKit.requests"


__all__ = [
    # Validation
    "ACCEPTABLE_STATUS_CODES",
    "JSON_CONTENT_TYPES",
    # Timeouts
    "HTTP_CONNECT_TIMEOUT",
    "HTTP_READ_TIMEOUT",
    "HTTP_WRITE_TIMEOUT",
    "HTTP_POOL_TIMEOUT",
    # Connection pooling
    "MAX_CONNECTIONS",
    "MAX_KEEPALIVE_CONNECTIONS",
    "KEEPALIVE_EXPIRY",
    "HTTP2_ENABLED",
    "FOLLOW_REDIRECTS",
    "TLS_VERIFY_ENABLED",
    # Caching
    "CACHE_STORAGE_TTL_SECONDS",
    "CACHE_STORAGE_CHECK_INTERVAL_SECONDS",
    "CACHEABLE_METHODS",
    "CACHEABLE_STATUS_CODES",
    "ALLOW_HEURISTIC_CACHING",
    "CACHE_APP_NAME",
    # Logging
    "REQUEST_LOGGER_NAME",
]
