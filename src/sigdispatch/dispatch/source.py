"""Inbound signal queue and its wiring to the OS signal layer."""

from __future__ import annotations

import logging
import queue
import signal
import threading
from typing import Any, Iterable

from sigdispatch import constants
from sigdispatch.models import SignalLike, normalize, signal_name

logger = logging.getLogger(constants.LOGGER_NAME)

_CLOSED = object()


class SourceClosedError(RuntimeError):
    """Raised by a SignalSource that has been closed."""


class SignalSource:
    """Multi-producer, single-consumer queue of signals.

    ``queue.SimpleQueue.put`` is reentrant, so ``put`` may be called from a
    Python signal handler interrupting another ``put`` on the main thread.
    """

    def __init__(self) -> None:
        self._queue: queue.SimpleQueue[Any] = queue.SimpleQueue()
        self._closed = False

    @property
    def closed(self) -> bool:
        return self._closed

    def put(self, sig: SignalLike) -> None:
        if self._closed:
            raise SourceClosedError(f"Cannot emit {signal_name(sig)}: source is closed")
        self._queue.put(normalize(sig))

    def get(self, timeout: float | None = None) -> SignalLike:
        """Block until the next signal arrives.

        Raises SourceClosedError once everything queued before ``close()``
        has been consumed, and ``queue.Empty`` when *timeout* expires.
        """
        item = self._queue.get(timeout=timeout)
        if item is _CLOSED:
            self._drop_remaining()
            # Leave the marker for any other consumer.
            self._queue.put(_CLOSED)
            raise SourceClosedError("Signal source closed")
        return item

    def _drop_remaining(self) -> None:
        """Discard signals a racing ``put`` queued behind the close marker."""
        while True:
            try:
                item = self._queue.get_nowait()
            except queue.Empty:
                return
            if item is not _CLOSED:
                logger.warning("Dropped signal %s: source closed", signal_name(item))

    def close(self) -> None:
        if self._closed:
            return
        self._closed = True
        self._queue.put(_CLOSED)


def subscribe(source: SignalSource, signals: Iterable[SignalLike]) -> dict[signal.Signals, Any]:
    """Forward the given OS signals into *source*.

    Installs process-wide handlers, so it only works on the main thread.
    Returns the handlers that were replaced, for ``unsubscribe``.
    """
    previous: dict[signal.Signals, Any] = {}
    if threading.current_thread() is not threading.main_thread():
        logger.warning("Signal subscription skipped: not running on the main thread")
        return previous

    def _forward(signum: int, frame: object) -> None:
        try:
            source.put(signum)
        except SourceClosedError:
            logger.warning("Dropped signal %s: dispatcher is closed", signal_name(signum))

    try:
        for sig in signals:
            sig = normalize(sig)
            previous[sig] = signal.signal(sig, _forward)
    except (ValueError, OSError):
        unsubscribe(previous)
        raise
    return previous


def unsubscribe(previous: dict[signal.Signals, Any]) -> None:
    """Restore handlers returned by ``subscribe``."""
    for sig, handler in previous.items():
        signal.signal(sig, handler if handler is not None else signal.SIG_DFL)
