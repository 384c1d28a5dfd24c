"""Per-signal handler lists shared between registration and the dispatch loop."""

from __future__ import annotations

import threading

from sigdispatch.models import Handler, SignalLike, normalize


class HandlerRegistry:
    """Ordered handler lists keyed by signal.

    The map only ever grows. One lock guards it: registration is rare and
    reads happen once per delivered signal.
    """

    def __init__(self) -> None:
        self._lock = threading.Lock()
        self._handlers: dict[SignalLike, list[Handler]] = {}

    def register(self, sig: SignalLike, handler: Handler) -> int:
        """Append *handler* for *sig*. Returns the handler count for *sig*."""
        sig = normalize(sig)
        with self._lock:
            handlers = self._handlers.setdefault(sig, [])
            handlers.append(handler)
            return len(handlers)

    def snapshot(self, sig: SignalLike) -> tuple[Handler, ...]:
        """Return a copy of the handlers for *sig* in registration order."""
        sig = normalize(sig)
        with self._lock:
            return tuple(self._handlers.get(sig, ()))

    def signals(self) -> list[SignalLike]:
        with self._lock:
            return [sig for sig, handlers in self._handlers.items() if handlers]

    def __len__(self) -> int:
        with self._lock:
            return sum(len(handlers) for handlers in self._handlers.values())
