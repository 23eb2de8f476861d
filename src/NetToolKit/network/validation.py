"""Post-response validation: status-code range and content-type allow-list.

Validation runs before a response is considered successful.  Status is
checked first, then (only when an allow-list is configured and the body is
non-empty) the MIME type of the ``Content-Type`` header.  Failures raise the
internal :class:`~NetToolKit.errors.UnacceptableStatusCode` /
:class:`~NetToolKit.errors.UnacceptableContentType` exceptions, which keep the
offending response so the error normalizer can attach status and body.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Iterable, Optional, Sequence

import httpx

from NetToolKit.errors import UnacceptableContentType, UnacceptableStatusCode
from NetToolKit.network.policy import ACCEPTABLE_STATUS_CODES, JSON_CONTENT_TYPES

__all__ = [
    "ResponseValidation",
    "JSON_VALIDATION",
    "mime_type",
    "content_type_matches",
    "validate_response",
]


@dataclass(frozen=True)
class ResponseValidation:
    """Checks applied to every response before it counts as a success.

    Attributes:
        status_range: Accepted status codes (default ``200 <= status < 400``).
        content_types: Optional MIME allow-list; entries may use ``type/*`` or ``*/*``.
    """

    status_range: range = ACCEPTABLE_STATUS_CODES
    content_types: Optional[tuple[str, ...]] = None

    @classmethod
    def accepting(cls, content_types: Optional[Iterable[str]] = None) -> "ResponseValidation":
        """Build a validation with the default status range and the given allow-list."""
        if content_types is None:
            return cls()
        return cls(content_types=tuple(content_types))


JSON_VALIDATION = ResponseValidation(content_types=JSON_CONTENT_TYPES)


def mime_type(content_type: Optional[str]) -> Optional[str]:
    """Strip parameters from a ``Content-Type`` value and lowercase it.

    Examples:
        >>> mime_type("Application/JSON; charset=utf-8")
        'application/json'
    """
    if not content_type:
        return None
    value = content_type.split(";", 1)[0].strip().lower()
    return value or None


def _split(mime: str) -> tuple[str, str]:
    kind, _, subtype = mime.partition("/")
    return kind.strip() or "*", subtype.strip() or "*"


def content_type_matches(acceptable: Sequence[str], content_type: Optional[str]) -> bool:
    """Return True if ``content_type`` satisfies any entry of ``acceptable``.

    Wildcards are honoured on either side (``text/*`` accepts ``text/plain``).
    A missing content type only satisfies ``*/*``.
    """
    mime = mime_type(content_type)
    if mime is None:
        return any(mime_type(entry) == "*/*" for entry in acceptable)

    response_type, response_subtype = _split(mime)
    for entry in acceptable:
        accepted = mime_type(entry)
        if accepted is None:
            continue
        accepted_type, accepted_subtype = _split(accepted)
        if accepted_type == "*" and accepted_subtype == "*":
            return True
        if (
            accepted_type in (response_type, "*") or response_type == "*"
        ) and (accepted_subtype in (response_subtype, "*") or response_subtype == "*"):
            return True
    return False


def validate_response(response: httpx.Response, validation: ResponseValidation) -> None:
    """Raise if ``response`` fails ``validation``.

    The body must already be read.

    Raises:
        UnacceptableStatusCode: Status outside ``validation.status_range``.
        UnacceptableContentType: Non-empty body with a disallowed MIME type.
    """
    if response.status_code not in validation.status_range:
        raise UnacceptableStatusCode(response)

    acceptable = validation.content_types
    if acceptable is None or not response.content:
        return

    content_type = response.headers.get("content-type")
    if not content_type_matches(acceptable, content_type):
        raise UnacceptableContentType(
            response,
            content_type=mime_type(content_type),
            acceptable=acceptable,
        )
