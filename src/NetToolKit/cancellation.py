# === NAVMAP v1 ===
# {
#   "module": "NetToolKit.cancellation",
#   "purpose": "Cooperative cancellation token for blocking (thread-based) requests",
#   "sections": [
#     {
#       "id": "cancellationtoken",
#       "name": "CancellationToken",
#       "anchor": "class-cancellationtoken",
#       "kind": "class"
#     }
#   ]
# }
# === /NAVMAP ===

"""Cooperative cancellation primitive for the blocking request API.

Threads cannot be interrupted from the outside, so blocking callers hand a
:class:`CancellationToken` to :class:`~NetToolKit.network.manager.NetworkManager`.
The throttle wait observes the token directly (the wait wakes as soon as the
token fires) and the executor checks it on both sides of the transport call.
Asyncio callers do not need a token: cancelling the task is enough.
"""

from __future__ import annotations

import threading

from NetToolKit.errors import RequestCancelled

__all__ = ["CancellationToken"]


class CancellationToken:
    """Thread-safe cancellation token for cooperative request cancellation.

    Examples:
        >>> token = CancellationToken()
        >>> token.is_cancelled()
        False
        >>> token.cancel()
        >>> token.wait(10.0)  # returns immediately once cancelled
        True
    """

    def __init__(self) -> None:
        self._is_cancelled = threading.Event()

    def cancel(self) -> None:
        """Signal that cancellation has been requested."""
        self._is_cancelled.set()

    def is_cancelled(self) -> bool:
        """Return True once :meth:`cancel` has been called."""
        return self._is_cancelled.is_set()

    def wait(self, timeout: float) -> bool:
        """Block for up to ``timeout`` seconds or until cancelled.

        Returns:
            True if the token was cancelled, False if the timeout elapsed.
        """
        return self._is_cancelled.wait(timeout)

    def raise_if_cancelled(self) -> None:
        """Raise :class:`RequestCancelled` if cancellation was requested."""
        if self._is_cancelled.is_set():
            raise RequestCancelled()

    def reset(self) -> None:
        """Reset the token to its initial state (tests and controlled reuse only)."""
        self._is_cancelled.clear()
