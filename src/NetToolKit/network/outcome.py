"""Result of a single request: :class:`Success` or :class:`Failure`."""

from __future__ import annotations

from dataclasses import dataclass
from typing import Any, Union

__all__ = ["Success", "Failure", "ResponseOutcome"]


@dataclass(frozen=True)
class Success:
    """Validated response payload.

    ``data`` is the raw body, or the serializer's output for requests sent
    with a serializer.
    """

    data: Any

    @property
    def ok(self) -> bool:
        return True

    def unwrap(self) -> Any:
        return self.data


@dataclass(frozen=True)
class Failure:
    """Normalized error for a request that did not succeed."""

    error: BaseException

    @property
    def ok(self) -> bool:
        return False

    def unwrap(self) -> Any:
        raise self.error


ResponseOutcome = Union[Success, Failure]
