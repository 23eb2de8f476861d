"""Per-manager correlation ids linking outbound and inbound log records."""

from __future__ import annotations

import itertools
import threading

__all__ = ["CorrelationCounter"]


class CorrelationCounter:
    """Thread-safe, strictly increasing integer sequence.

    Values only tag log lines so a request can be matched with its response;
    they carry no identity beyond that.

    Examples:
        >>> counter = CorrelationCounter()
        >>> counter.next(), counter.next()
        (1, 2)
    """

    def __init__(self, start: int = 1) -> None:
        self._counter = itertools.count(start)
        self._lock = threading.Lock()

    def next(self) -> int:
        with self._lock:
            return next(self._counter)
