# === NAVMAP v1 ===
# {
#   "module": "NetToolKit.network.decoding",
#   "purpose": "JSON decoding and log rendering of response bodies",
#   "sections": [
#     {"id": "decode-json", "name": "decode_json", "anchor": "function-decode-json", "kind": "function"},
#     {"id": "try-decode-json", "name": "try_decode_json", "anchor": "function-try-decode-json", "kind": "function"},
#     {"id": "pretty-json", "name": "pretty_json", "anchor": "function-pretty-json", "kind": "function"},
#     {"id": "to-log-string", "name": "to_log_string", "anchor": "function-to-log-string", "kind": "function"}
#   ]
# }
# === /NAVMAP ===

"""Response body decoding.

``decode_json`` is the strict path used by ``fetch_json``: any top-level JSON
value (objects, arrays, and bare fragments such as ``42`` or ``"ok"``) is
accepted, anything else raises :class:`~NetToolKit.errors.DecodeError`.

``to_log_string`` is the observability path: it never raises, rendering JSON
bodies pretty-printed and everything else as lowercase hex.
"""

from __future__ import annotations

import json
from typing import Any, Optional

from NetToolKit.errors import DecodeError

__all__ = ["decode_json", "try_decode_json", "pretty_json", "to_log_string"]


def decode_json(raw: bytes) -> Any:
    """Parse ``raw`` as JSON.

    Args:
        raw: Response body. UTF-8/16/32 encodings are detected automatically.

    Returns:
        The decoded JSON value.

    Raises:
        DecodeError: If ``raw`` is not valid JSON or exceeds the parser's nesting
            and integer-size limits.

    Examples:
        >>> decode_json(b'{"a": 1}')
        {'a': 1}
    """
    try:
        return json.loads(raw)
    except (ValueError, RecursionError) as exc:
        # Oversized integers raise a plain ValueError
        raise DecodeError(f"Response body is not valid JSON: {exc}") from exc


def try_decode_json(raw: Optional[bytes]) -> Any:
    """Best-effort variant of :func:`decode_json`; returns ``None`` on failure."""
    if not raw:
        return None
    try:
        return decode_json(raw)
    except DecodeError:
        return None


def pretty_json(value: Any) -> str:
    """Render a decoded JSON value with two-space indentation."""
    return json.dumps(value, indent=2, ensure_ascii=False)


def to_log_string(raw: bytes) -> str:
    """Render ``raw`` for a log line.

    Returns:
        Pretty-printed JSON when ``raw`` parses, otherwise ``raw.hex()``
        (exactly ``2 * len(raw)`` characters).

    Examples:
        >>> to_log_string(b"\\x00\\xff")
        '00ff'
    """
    try:
        return pretty_json(decode_json(raw))
    except (DecodeError, TypeError, ValueError, RecursionError):
        return bytes(raw).hex()
