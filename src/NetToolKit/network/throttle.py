# === NAVMAP v1 ===
# {
#   "module": "NetToolKit.network.throttle",
#   "purpose": "Minimum-interval gate spacing out request start times",
#   "sections": [
#     {
#       "id": "throttlegate",
#       "name": "ThrottleGate",
#       "anchor": "class-throttlegate",
#       "kind": "class"
#     }
#   ]
# }
# === /NAVMAP ===

"""Minimum-interval throttling for outgoing requests.

:class:`ThrottleGate` guarantees that no two requests passing through the same
gate start less than ``interval`` seconds apart.  It behaves as a leaky bucket
holding a single token:

- If the next permitted start time has already passed, the caller proceeds
  immediately and the cadence restarts from *now*.  Idle periods therefore
  do not bank credit for a later burst.
- Otherwise the caller is granted the pending slot, the slot after it moves
  forward by exactly one ``interval``, and the caller sleeps until its slot.
  Advancing by a fixed step (rather than ``now + interval``) keeps a steady
  cadence under load without drift.

**Thread Safety:**

The read-modify-write of the slot happens under a :class:`threading.Lock`
held only for that arithmetic.  The sleep happens outside the lock, so the
gate is safe from threads and from asyncio tasks (nothing awaits while the
lock is held).  Waiters are not served in FIFO order.

Example:
    >>> gate = ThrottleGate(interval=0.5)
    >>> gate.acquire()       # first call proceeds immediately
    0.0
    >>> gate.acquire() > 0   # second call waits for its slot
    True
"""

from __future__ import annotations

import asyncio
import logging
import math
import threading
import time
from typing import Awaitable, Callable, Optional

from NetToolKit.cancellation import CancellationToken
from NetToolKit.errors import ConfigurationError, RequestCancelled

__all__ = ["ThrottleGate"]

logger = logging.getLogger(__name__)


class ThrottleGate:
    """Serializes request start times to at least ``interval`` seconds apart.

    Attributes:
        interval: Minimum spacing in seconds, or ``None`` to disable throttling.
        next_allowed_time: Clock reading before which no new request may start.
    """

    def __init__(
        self,
        interval: Optional[float] = None,
        *,
        clock: Optional[Callable[[], float]] = None,
        sleeper: Optional[Callable[[float], None]] = None,
        async_sleeper: Optional[Callable[[float], Awaitable[None]]] = None,
    ) -> None:
        """Initialize the gate.

        Args:
            interval: Minimum inter-request interval in seconds. ``None`` turns
                the gate into a no-op that never touches shared state.
            clock: Monotonic time source in seconds (default ``time.monotonic``).
            sleeper: Blocking sleep used when no cancellation token is given.
            async_sleeper: Coroutine sleep used by :meth:`acquire_async`.

        Raises:
            ConfigurationError: If ``interval`` is not a positive finite number.
        """
        if interval is not None:
            interval = float(interval)
            if not math.isfinite(interval) or interval <= 0:
                raise ConfigurationError(
                    f"Inter-request interval must be positive, got: {interval}"
                )
        self._interval = interval
        self._clock = clock or time.monotonic
        self._sleep = sleeper or time.sleep
        self._async_sleep = async_sleeper or asyncio.sleep
        self._next_allowed_time = -math.inf
        self._lock = threading.Lock()

    @property
    def interval(self) -> Optional[float]:
        return self._interval

    @property
    def next_allowed_time(self) -> float:
        return self._next_allowed_time

    def reserve(self) -> float:
        """Claim the next start slot and return how long the caller must wait.

        Returns:
            Seconds until the claimed slot (``0.0`` when it is already due).
        """
        interval = self._interval
        if interval is None:
            return 0.0

        with self._lock:
            now = self._clock()
            if self._next_allowed_time <= now:
                self._next_allowed_time = now + interval
                return 0.0
            delay = self._next_allowed_time - now
            self._next_allowed_time += interval
            return delay

    def acquire(self, token: Optional[CancellationToken] = None) -> float:
        """Block until the caller may start its request.

        Args:
            token: Optional cancellation token; cancelling it aborts the wait.

        Returns:
            Seconds spent waiting.

        Raises:
            RequestCancelled: If ``token`` is cancelled before the slot arrives.
        """
        if self._interval is None:
            return 0.0

        delay = self.reserve()
        if delay <= 0:
            return 0.0

        logger.debug("Throttling request", extra={"delay_s": round(delay, 6)})
        if token is None:
            self._sleep(delay)
        elif token.wait(delay):
            raise RequestCancelled("Request cancelled while waiting for throttle slot")
        return delay

    async def acquire_async(self) -> float:
        """Suspend the current task until it may start its request.

        Cancelling the task while it waits raises :class:`asyncio.CancelledError`
        in the caller; the claimed slot is not given back.

        Returns:
            Seconds spent waiting.
        """
        if self._interval is None:
            return 0.0

        delay = self.reserve()
        if delay <= 0:
            return 0.0

        logger.debug("Throttling request", extra={"delay_s": round(delay, 6)})
        await self._async_sleep(delay)
        return delay
