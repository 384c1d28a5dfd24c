"""Blocking wait for a dispatched shutdown."""

from __future__ import annotations

import threading

from sigdispatch.dispatch.dispatcher import Dispatcher


class ShutdownLatch:
    """Closer that releases waiters once a shutdown signal is dispatched."""

    def __init__(self) -> None:
        self._shutdown = threading.Event()

    def install(self, dispatcher: Dispatcher) -> None:
        """Release this latch on SIGINT or SIGTERM."""
        dispatcher.register_closer(self)

    def close(self) -> None:
        self._shutdown.set()

    @property
    def should_stop(self) -> bool:
        return self._shutdown.is_set()

    def wait(self, timeout: float | None = None) -> bool:
        """Wait for shutdown. Returns True if it was requested."""
        return self._shutdown.wait(timeout)
