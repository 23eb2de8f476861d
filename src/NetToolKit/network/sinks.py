"""Log sinks receiving request/response records.

Any object with ``debug(str)`` and ``error(str)`` methods can be a sink; a
:class:`logging.Logger` qualifies.  :class:`NullLogSink` is the default so
request logging costs nothing unless a caller opts in.
"""

from __future__ import annotations

from typing import Protocol, runtime_checkable

__all__ = ["LogSink", "NullLogSink", "NULL_SINK"]


@runtime_checkable
class LogSink(Protocol):
    def debug(self, message: str) -> None: ...

    def error(self, message: str) -> None: ...


class NullLogSink:
    """Sink that discards every record."""

    def debug(self, message: str) -> None:
        pass

    def error(self, message: str) -> None:
        pass


NULL_SINK = NullLogSink()
