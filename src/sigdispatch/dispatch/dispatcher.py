"""Dispatcher: routes signals from a SignalSource to registered handlers.

Signals are received by a single loop thread. Each delivery snapshots the
handlers registered for that signal and runs them, in registration order,
on a fresh daemon thread, so a slow handler never holds up the next signal.

Handler threads are never joined. Code that needs its handlers to finish
before the process exits must synchronise on its own (see
``sigdispatch.daemon.latch.ShutdownLatch``). A handler that never returns
keeps its thread alive, and every further delivery of the same signal adds
another one; nothing bounds that growth.
"""

from __future__ import annotations

import logging
import signal
import threading
from typing import Any

from sigdispatch import constants
from sigdispatch.dispatch.adapters import closer_handler, reloader_handler
from sigdispatch.dispatch.registry import HandlerRegistry
from sigdispatch.dispatch.source import SignalSource, SourceClosedError, subscribe, unsubscribe
from sigdispatch.models import Closer, Handler, Reloader, SignalLike, signal_name


class Dispatcher:
    """Fan-out of process signals to zero or more handlers per signal."""

    def __init__(
        self,
        source: SignalSource,
        logger: logging.Logger | None = None,
        previous: dict[signal.Signals, Any] | None = None,
    ) -> None:
        self._source = source
        # OS handlers replaced when subscribing, restored by close()
        self._previous = dict(previous or {})
        self._log = logger or logging.getLogger(constants.LOGGER_NAME)
        self._registry = HandlerRegistry()
        self._thread = threading.Thread(
            target=self._handle, name=constants.LOOP_THREAD_NAME, daemon=True,
        )
        self._thread.start()

    @property
    def source(self) -> SignalSource:
        return self._source

    @property
    def registry(self) -> HandlerRegistry:
        return self._registry

    @property
    def running(self) -> bool:
        return self._thread.is_alive()

    def _handle(self) -> None:
        while True:
            try:
                sig = self._source.get()
            except SourceClosedError:
                self._log.debug("Signal source closed, dispatch loop stopped")
                return

            handlers = self._registry.snapshot(sig)
            self._log.info(
                "Received signal %s to process by %d handlers", signal_name(sig), len(handlers),
            )
            if handlers:
                threading.Thread(
                    target=self._run_batch,
                    args=(sig, handlers),
                    name=f"sigdispatch-{signal_name(sig)}",
                    daemon=True,
                ).start()

    def _run_batch(self, sig: SignalLike, handlers: tuple[Handler, ...]) -> None:
        for i, handler in enumerate(handlers):
            try:
                handler()
            except Exception:
                self._log.exception(
                    "Handler for %s failed, %d remaining handlers skipped",
                    signal_name(sig), len(handlers) - i - 1,
                )
                return

    # --- Registration ---

    def on(self, sig: SignalLike, handler: Handler) -> None:
        """Register *handler* to run whenever *sig* is delivered."""
        count = self._registry.register(sig, handler)
        self._log.debug("Registered handler (%d total) for %s", count, signal_name(sig))

    def on_shutdown(self, handler: Handler) -> None:
        """Register *handler* for both SIGINT and SIGTERM."""
        for sig in constants.SHUTDOWN_SIGNALS:
            self.on(sig, handler)

    def on_hup(self, handler: Handler) -> None:
        self.on(constants.SIGHUP, handler)

    def on_usr1(self, handler: Handler) -> None:
        self.on(constants.SIGUSR1, handler)

    def on_usr2(self, handler: Handler) -> None:
        self.on(constants.SIGUSR2, handler)

    def register_closer(self, component: Closer | None) -> None:
        """Close *component* on shutdown. ``None`` is ignored."""
        if component is not None:
            self.on_shutdown(closer_handler(component, self._log))

    def register_reloader(self, component: Reloader | None) -> None:
        """Reload *component* on SIGHUP. ``None`` is ignored."""
        if component is not None:
            self.on_hup(reloader_handler(component, self._log))

    # --- Emission ---

    def emit(self, sig: SignalLike) -> None:
        """Deliver *sig* as if the OS had sent it.

        After the source is closed this logs a warning and does nothing.
        """
        try:
            self._source.put(sig)
        except SourceClosedError:
            self._log.warning("Signal %s not delivered: dispatcher is closed", signal_name(sig))

    def shutdown(self) -> None:
        """Emit SIGTERM."""
        self.emit(constants.SHUTDOWN)

    def reload(self) -> None:
        """Emit SIGHUP."""
        self.emit(constants.RELOAD)

    # --- Lifecycle ---

    def close(self, restore_handlers: bool = True) -> None:
        """Close the source. Signals already queued are still dispatched.

        With *restore_handlers*, the OS handlers replaced by
        ``dispatch_signals`` are put back (main thread only).
        """
        self._source.close()
        if restore_handlers:
            self.restore_handlers()

    def restore_handlers(self) -> None:
        if not self._previous:
            return
        if threading.current_thread() is not threading.main_thread():
            self._log.warning("Signal handlers not restored: not running on the main thread")
            return
        previous, self._previous = self._previous, {}
        unsubscribe(previous)

    def join(self, timeout: float | None = None) -> bool:
        """Wait for the dispatch loop to end. Returns True if it has.

        Handler threads already started are not waited for.
        """
        self._thread.join(timeout)
        return not self._thread.is_alive()


def emit(dispatcher: Dispatcher | None, sig: SignalLike) -> None:
    """Emit *sig* on *dispatcher*, doing nothing when it is None."""
    if dispatcher is not None:
        dispatcher.emit(sig)


def dispatch_channel(
    source: SignalSource | None = None, logger: logging.Logger | None = None,
) -> Dispatcher:
    """Build a dispatcher on *source* without touching OS signal state."""
    return Dispatcher(source if source is not None else SignalSource(), logger)


def dispatch_signals(*signals: SignalLike, logger: logging.Logger | None = None) -> Dispatcher:
    """Subscribe to the given OS signals and return a dispatcher for them."""
    source = SignalSource()
    previous = subscribe(source, signals)
    return Dispatcher(source, logger, previous=previous)


def default_dispatcher(logger: logging.Logger | None = None) -> Dispatcher:
    """Dispatcher for SIGINT, SIGTERM, SIGHUP, SIGUSR1 and SIGUSR2."""
    return dispatch_signals(*constants.DEFAULT_SIGNALS, logger=logger)
